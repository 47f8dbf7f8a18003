"""Active-region bookkeeping.

Search and scoring run on the smallest rectangle that holds every mark, grown
just enough to see the cells around it, instead of on the whole board.
"""

from __future__ import annotations

from board import Board
from errors import RegionShapeMismatch
from models import Cell, Region


def extract_used_region(board: Board) -> Region | None:
    """Smallest rectangle covering every non-empty cell, ``None`` for an empty board."""

    rows = [r for r, row in enumerate(board.cells) if any(cell is not Cell.EMPTY for cell in row)]
    if not rows:
        return None
    columns = [
        c
        for c in range(board.columns)
        if any(board.cells[r][c] is not Cell.EMPTY for r in range(board.rows))
    ]
    return Region(rows[0], rows[-1], columns[0], columns[-1])


def expand_region(region: Region, board_size: int, padding: int = 1) -> Region:
    if board_size <= 0:
        raise ValueError("Invalid board_size: must be a positive number")
    return Region(
        max(0, region.start_row - padding),
        min(board_size - 1, region.end_row + padding),
        max(0, region.start_column - padding),
        min(board_size - 1, region.end_column + padding),
    )


def expand_region_if_edge_has_mark(board: Board, region: Region) -> Region:
    """Push out, by one cell, each edge of ``region`` that has a mark on it.

    Edges are checked independently against the incoming region and only
    move when the board has room beyond them.
    """

    cells = board.cells
    start_row, end_row = region.start_row, region.end_row
    start_column, end_column = region.start_column, region.end_column
    columns = range(region.start_column, region.end_column + 1)
    rows = range(region.start_row, region.end_row + 1)

    if start_row > 0 and any(cells[region.start_row][c] is not Cell.EMPTY for c in columns):
        start_row -= 1
    if end_row < board.rows - 1 and any(cells[region.end_row][c] is not Cell.EMPTY for c in columns):
        end_row += 1
    if start_column > 0 and any(cells[r][region.start_column] is not Cell.EMPTY for r in rows):
        start_column -= 1
    if end_column < board.columns - 1 and any(cells[r][region.end_column] is not Cell.EMPTY for r in rows):
        end_column += 1

    return Region(start_row, end_row, start_column, end_column)


def slice_region(board: Board, region: Region) -> Board:
    region.check_within(board.rows, board.columns)
    return Board(
        [
            board.cells[r][region.start_column : region.end_column + 1]
            for r in range(region.start_row, region.end_row + 1)
        ]
    )


def paste_region(board: Board, region: Region, sub_board: Board) -> None:
    """Write ``sub_board`` back into ``board`` at ``region`` (in place)."""

    region.check_within(board.rows, board.columns)
    if sub_board.rows != region.height:
        raise RegionShapeMismatch(
            "subBoard row count does not match region height",
            {"rows": sub_board.rows, "height": region.height},
        )
    if sub_board.columns != region.width:
        raise RegionShapeMismatch(
            "subBoard column count does not match region width",
            {"columns": sub_board.columns, "width": region.width},
        )
    for i, row in enumerate(sub_board.cells):
        board.cells[region.start_row + i][region.start_column : region.end_column + 1] = row


def expand_until_playable(board: Board, region: Region, padding: int) -> tuple[Region, Board]:
    """Grow ``region`` by ``padding`` until its slice has an empty cell.

    Stops early when the whole board is full; the returned slice then has no
    moves either.
    """

    sub_board = slice_region(board, region)
    while sub_board.is_full() and not board.is_full():
        region = expand_region(region, board.size, padding)
        sub_board = slice_region(board, region)
    return region, sub_board
