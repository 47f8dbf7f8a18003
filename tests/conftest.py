import random

import pytest

from board import Board
from models import Cell


def reachable_states(size: int = 3):
    """Every non-terminal position reachable from an empty board, x first."""

    board = Board.empty(size)
    seen = set()
    out: list[Board] = []

    def walk(to_move: Cell) -> None:
        key = board.state_key()
        if key in seen:
            return
        seen.add(key)
        if board.winner().is_decided:
            return
        out.append(board.copy())
        for move in board.available_moves():
            board.do_move(move, to_move)
            walk(to_move.opponent)
            board.undo_move()

    walk(Cell.X)
    return out


@pytest.fixture
def rng():
    return random.Random(0)


@pytest.fixture
def board_from():
    def make(rows):
        return Board.from_rows(rows)

    return make


@pytest.fixture(scope="session")
def reachable_3x3():
    return reachable_states(3)
