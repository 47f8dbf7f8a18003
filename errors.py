"""Error kinds raised by the move engine.

Every error carries a machine-readable ``code`` so the service layer in front
of the engine can map it to a response without string matching::

    try:
        result = ai_move(board, "x", "hard")
    except EngineError as e:
        return e.to_dict()

All of them are ``ValueError`` subclasses: each one means the caller handed
the engine something it cannot play on.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "EngineError",
    "InvalidBoard",
    "InvalidLastMove",
    "InvalidMark",
    "InvalidRegion",
    "NoAvailableMoves",
    "RegionShapeMismatch",
    "UnknownDifficulty",
    "UnsupportedBoardSize",
]


class EngineError(ValueError):
    code: str = "ENGINE_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class UnsupportedBoardSize(EngineError):
    code = "UNSUPPORTED_BOARD_SIZE"


class InvalidBoard(EngineError):
    """Grid is not a non-empty rectangle (or square, where one is required)."""

    code = "INVALID_BOARD"


class InvalidMark(EngineError):
    code = "INVALID_MARK"


class UnknownDifficulty(EngineError):
    code = "UNKNOWN_DIFFICULTY"


class InvalidRegion(EngineError):
    code = "INVALID_REGION"


class InvalidLastMove(EngineError):
    code = "INVALID_LAST_MOVE"


class NoAvailableMoves(EngineError):
    code = "NO_AVAILABLE_MOVES"


class RegionShapeMismatch(EngineError):
    """A sub-board does not fit the region it is pasted into."""

    code = "REGION_SHAPE_MISMATCH"
