from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any, Iterator

from constants import DEFAULT_EXPANSION_PADDING, HARD_EXPANSION_PADDING
from errors import InvalidMark, InvalidRegion, UnknownDifficulty


class Cell(Enum):
    EMPTY = ""
    X = "x"
    O = "o"

    @classmethod
    def parse(cls, value: object) -> Cell:
        if isinstance(value, Cell):
            return value
        if isinstance(value, str):
            for cell in cls:
                if cell.value == value:
                    return cell
        raise InvalidMark('Invalid mark: must be "x", "o" or "" for an empty cell', {"value": value})

    @classmethod
    def parse_mark(cls, value: object) -> Cell:
        cell = cls.parse(value)
        if cell is Cell.EMPTY:
            raise InvalidMark('Invalid mark: must be "x" or "o"', {"value": value})
        return cell

    @property
    def opponent(self) -> Cell:
        if self is Cell.X:
            return Cell.O
        if self is Cell.O:
            return Cell.X
        raise ValueError("An empty cell has no opponent")

    def __str__(self) -> str:
        return self.value or "."


class Direction(Enum):
    # scan order matters: first completed run wins
    EAST = 0, (0, 1)
    SOUTH = 1, (1, 0)
    SOUTH_EAST = 2, (1, 1)
    SOUTH_WEST = 3, (1, -1)

    @cached_property
    def delta(self) -> tuple[int, int]:
        return self.value[1]


D = Direction


class Difficulty(Enum):
    VERY_EASY = "very-easy"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: object) -> Difficulty:
        if isinstance(value, Difficulty):
            return value
        if isinstance(value, str):
            # GraphQL enums spell the tiers with underscores (very_easy)
            normalized = value.replace("_", "-")
            for d in cls:
                if d.value == normalized:
                    return d
        raise UnknownDifficulty(
            f"Unknown difficulty level. Expected one of: {', '.join(d.value for d in cls)}",
            {"value": value},
        )

    @cached_property
    def expansion_padding(self) -> int:
        return HARD_EXPANSION_PADDING if self is Difficulty.HARD else DEFAULT_EXPANSION_PADDING


@dataclass(frozen=True, order=True)
class Move:
    row: int
    column: int

    def shifted(self, d_row: int, d_column: int) -> Move:
        return Move(self.row + d_row, self.column + d_column)

    def chebyshev(self, other: Move) -> int:
        return max(abs(self.row - other.row), abs(self.column - other.column))

    def manhattan(self, other: Move) -> int:
        return abs(self.row - other.row) + abs(self.column - other.column)

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "column": self.column}

    def __repr__(self) -> str:
        return f"Move({self.row}, {self.column})"


@dataclass(frozen=True)
class Region:
    """Inclusive rectangle of board coordinates."""

    start_row: int
    end_row: int
    start_column: int
    end_column: int

    def __post_init__(self) -> None:
        bounds = (self.start_row, self.end_row, self.start_column, self.end_column)
        if not all(isinstance(n, int) and not isinstance(n, bool) and n >= 0 for n in bounds):
            raise InvalidRegion("Invalid region coordinates: must be non-negative integers", self.to_dict())
        if self.start_row > self.end_row or self.start_column > self.end_column:
            raise InvalidRegion("Invalid region coordinates: start must not exceed end", self.to_dict())

    @classmethod
    def full(cls, rows: int, columns: int) -> Region:
        return cls(0, rows - 1, 0, columns - 1)

    @property
    def height(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def width(self) -> int:
        return self.end_column - self.start_column + 1

    @property
    def area(self) -> int:
        return self.height * self.width

    def contains(self, other: Region) -> bool:
        return (
            self.start_row <= other.start_row
            and self.end_row >= other.end_row
            and self.start_column <= other.start_column
            and self.end_column >= other.end_column
        )

    def contains_cell(self, row: int, column: int) -> bool:
        return self.start_row <= row <= self.end_row and self.start_column <= column <= self.end_column

    def check_within(self, rows: int, columns: int) -> None:
        if self.end_row >= rows or self.end_column >= columns:
            raise InvalidRegion(
                "Invalid region coordinates: outside the board",
                {**self.to_dict(), "rows": rows, "columns": columns},
            )

    def cells(self) -> Iterator[tuple[int, int]]:
        for row in range(self.start_row, self.end_row + 1):
            for column in range(self.start_column, self.end_column + 1):
                yield (row, column)

    def relative(self, move: Move) -> Move:
        # may fall outside the region; callers only compare distances
        return move.shifted(-self.start_row, -self.start_column)

    def absolute(self, move: Move) -> Move:
        return move.shifted(self.start_row, self.start_column)

    def to_dict(self) -> dict[str, Any]:
        return {
            "startRow": self.start_row,
            "endRow": self.end_row,
            "startColumn": self.start_column,
            "endColumn": self.end_column,
        }


class Status(Enum):
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    status: Status
    mark: Cell | None = None

    def __post_init__(self) -> None:
        if (self.status is Status.WIN) != (self.mark in (Cell.X, Cell.O)):
            raise ValueError(f"{self.status.name} outcome cannot carry mark {self.mark!r}")

    @classmethod
    def win(cls, mark: Cell) -> Outcome:
        return cls(Status.WIN, mark)

    @property
    def is_decided(self) -> bool:
        return self.status is not Status.IN_PROGRESS

    def to_wire(self) -> str | None:
        if self.mark is not None:
            return self.mark.value
        if self.status is Status.DRAW:
            return "draw"
        return None

    def __repr__(self) -> str:
        if self.status is Status.WIN:
            return f"Outcome.win({self.mark})"
        return f"Outcome({self.status.name})"


IN_PROGRESS = Outcome(Status.IN_PROGRESS)
DRAW = Outcome(Status.DRAW)


class GameStatus(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"
    DRAW = "draw"
