"""Computer-opponent move generation.

``ai_move`` is the single entry point the service layer calls: it takes a
board snapshot, the mark to play and a difficulty, and returns the updated
board together with the chosen cell and the resulting outcome. Nothing is
kept between calls.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from board import Board, win_length
from errors import InvalidLastMove, NoAvailableMoves
from models import Cell, Difficulty, GameStatus, Move, Outcome, Region, Status
from players import create_player
from region import (
    expand_region_if_edge_has_mark,
    expand_until_playable,
    extract_used_region,
    paste_region,
    slice_region,
)

logger = logging.getLogger("nrow")

BoardLike = Board | Sequence[Sequence[object]]


@dataclass(frozen=True)
class MoveResult:
    outcome: Outcome
    region: Region | None
    move: Move | None
    board: Board

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.outcome.to_wire(),
            "region": None if self.region is None else self.region.to_dict(),
            "lastMove": None if self.move is None else self.move.to_dict(),
            "board": self.board.to_rows(),
        }


def _as_board(board: BoardLike) -> Board:
    # Always work on a private copy; the caller's grid is never touched.
    b = board.copy() if isinstance(board, Board) else Board.from_rows(board)
    win_length(b.size)
    return b


def next_mark(board: BoardLike) -> Cell:
    """The side with fewer marks plays next; ``x`` opens and wins ties."""

    b = board if isinstance(board, Board) else Board.from_rows(board)
    x, o = b.count(Cell.X), b.count(Cell.O)
    return Cell.O if x > o else Cell.X


def check_winner(board: BoardLike) -> Outcome:
    b = _as_board(board)
    return b.winner(win_length=b.win_length)


def game_status(board: BoardLike, player_mark: Cell | str) -> GameStatus:
    """Outcome of ``board`` seen from the side playing ``player_mark``."""

    mark = Cell.parse_mark(player_mark)
    b = _as_board(board)
    if b.is_empty():
        return GameStatus.NOT_STARTED
    outcome = b.winner(win_length=b.win_length)
    if outcome.status is Status.WIN:
        return GameStatus.WON if outcome.mark is mark else GameStatus.LOST
    if outcome.status is Status.DRAW:
        return GameStatus.DRAW
    return GameStatus.IN_PROGRESS


def parse_last_move(value: object, size: int) -> Move | None:
    if value is None:
        return None
    if isinstance(value, Move):
        row, column = value.row, value.column
    elif isinstance(value, Mapping):
        row, column = value.get("row"), value.get("column")
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
        row, column = value
    else:
        raise InvalidLastMove('Invalid "lastMove": expected {row, column}', {"value": value})

    for n in (row, column):
        if not isinstance(n, int) or isinstance(n, bool):
            raise InvalidLastMove('Invalid "lastMove" coordinates.', {"row": row, "column": column})
    if not (0 <= row < size and 0 <= column < size):
        raise InvalidLastMove('Invalid "lastMove" coordinates.', {"row": row, "column": column, "size": size})
    return Move(row, column)


def _center_start(size: int, rng: random.Random) -> Move:
    center = (size - 1) / 2
    round_row = math.floor if rng.random() < 0.5 else math.ceil
    round_column = math.floor if rng.random() < 0.5 else math.ceil
    return Move(round_row(center), round_column(center))


def ai_move(
    board: BoardLike,
    mark: Cell | str | None = None,
    difficulty: Difficulty | str = Difficulty.HARD,
    last_move: object = None,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> MoveResult:
    """Play one move for ``mark`` at ``difficulty`` and report the result.

    The board can be a ``Board`` or rows of ``"x"``, ``"o"`` and ``""``.
    ``mark`` defaults to the side with fewer marks. ``last_move`` is the
    opponent's previous cell in board coordinates, as a ``Move``, a
    ``{"row", "column"}`` mapping or a ``(row, column)`` pair. Pass ``seed``
    or ``rng`` to make the random tie-breaks reproducible.

    Raises an ``EngineError`` subclass for bad input, before anything is
    played. A board that already has a winner comes back unchanged with no
    move.
    """

    b = _as_board(board)
    acting: object = next_mark(b) if mark is None else mark
    wl = b.win_length

    already = b.winner(win_length=wl)
    if already.status is Status.WIN:
        logger.debug("board already won by %s", already.mark)
        return MoveResult(already, None, None, b)

    acting_mark = Cell.parse_mark(acting)
    tier = Difficulty.parse(difficulty)
    last = parse_last_move(last_move, b.size)
    if b.is_full():
        raise NoAvailableMoves("No available moves, board is full.")

    if rng is None:
        rng = random.Random(seed)

    if b.is_empty():
        start = _center_start(b.size, rng)
        b.do_move(start, acting_mark)
        logger.debug("empty board, %s opens at %s", acting_mark, start)
        return MoveResult(b.winner(win_length=wl), None, start, b)

    used = extract_used_region(b)
    assert used is not None
    region = expand_region_if_edge_has_mark(b, used)
    sub_board = slice_region(b, region)

    outcome = b.winner(win_length=wl)
    if outcome.is_decided or b.is_full():
        return MoveResult(outcome, region, None, b)

    if sub_board.is_full():
        region, sub_board = expand_until_playable(b, region, tier.expansion_padding)
        logger.debug("region had no empty cell, expanded to %s", region)

    player = create_player(tier, acting_mark, rng=rng)
    relative_last = None if last is None else region.relative(last)
    logger.debug("%s playing %s in %s (used %s)", player, acting_mark, region, used)

    played, relative_move = player.play(sub_board, relative_last, wl)
    paste_region(b, region, played)
    move = region.absolute(relative_move)

    outcome = b.winner(win_length=wl)
    logger.debug("%s chose %s -> %s", player, move, outcome)
    return MoveResult(outcome, region, move, b)
