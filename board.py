from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator, Sequence

from constants import MAX_BOARD_SIZE, MIN_BOARD_SIZE, WIN_LENGTHS
from errors import InvalidBoard, UnsupportedBoardSize
from models import DRAW, IN_PROGRESS, Cell, D, Move, Outcome, Region

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure


StateKey = tuple[tuple[Cell, ...], ...]


def win_length(size: int) -> int:
    """Marks in a row needed to win on a ``size`` x ``size`` board."""

    if isinstance(size, bool) or size not in WIN_LENGTHS:
        raise UnsupportedBoardSize(
            f"Board size not supported. Use {MIN_BOARD_SIZE} to {MAX_BOARD_SIZE}.", {"size": size}
        )
    return WIN_LENGTHS[size]


class Board:
    """Rectangular grid of cells.

    A full game board is square; sub-boards sliced out of a region can be any
    rectangle. Moves are applied in place with ``do_move`` and taken back with
    ``undo_move`` so search code can explore a line and restore the grid.
    """

    def __init__(self, cells: list[list[Cell]]):
        if not cells or not cells[0]:
            raise InvalidBoard("Invalid board: must be a non-empty 2D grid")
        width = len(cells[0])
        if any(len(row) != width for row in cells):
            raise InvalidBoard("Invalid board: every row must have the same length")

        self.cells = cells
        self.rows = len(cells)
        self.columns = width
        self._history: list[Move] = []

        self._render_fig: "Figure | None" = None
        self._render_ax: "Axes | None" = None

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[object]]) -> Board:
        if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
            raise InvalidBoard('Invalid argument: "board" must be a 2D array.')
        grid: list[list[Cell]] = []
        for row in rows:
            if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
                raise InvalidBoard('Invalid argument: "board" must be a 2D array.')
            grid.append([Cell.parse(value) for value in row])
        return cls(grid)

    @classmethod
    def empty(cls, size: int) -> Board:
        win_length(size)
        return cls([[Cell.EMPTY] * size for _ in range(size)])

    def copy(self) -> Board:
        return Board([row[:] for row in self.cells])

    def to_rows(self) -> list[list[str]]:
        return [[cell.value for cell in row] for row in self.cells]

    def state_key(self) -> StateKey:
        return tuple(tuple(row) for row in self.cells)

    @property
    def size(self) -> int:
        if self.rows != self.columns:
            raise InvalidBoard("Board is not square", {"rows": self.rows, "columns": self.columns})
        return self.rows

    @property
    def win_length(self) -> int:
        return win_length(self.size)

    def __getitem__(self, c: tuple[int, int]) -> Cell:
        row, column = c
        return self.cells[row][column]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return self.cells == other.cells

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.rows}x{self.columns})"

    def __str__(self) -> str:
        return "\n".join(" ".join(str(cell) for cell in row) for row in self.cells)

    def in_bounds(self, row: int, column: int) -> bool:
        return 0 <= row < self.rows and 0 <= column < self.columns

    def is_empty_cell(self, row: int, column: int) -> bool:
        return self.cells[row][column] is Cell.EMPTY

    def is_full(self) -> bool:
        return all(cell is not Cell.EMPTY for row in self.cells for cell in row)

    def is_empty(self) -> bool:
        return all(cell is Cell.EMPTY for row in self.cells for cell in row)

    def count(self, mark: Cell) -> int:
        return sum(1 for row in self.cells for cell in row if cell is mark)

    def available_moves(self, region: Region | None = None) -> list[Move]:
        cells = self._region_cells(region)
        return [Move(r, c) for (r, c) in cells if self.cells[r][c] is Cell.EMPTY]

    def neighbours(self, move: Move, radius: int = 1) -> Iterator[Move]:
        for dr in range(-radius, radius + 1):
            for dc in range(-radius, radius + 1):
                if dr == 0 and dc == 0:
                    continue
                r, c = move.row + dr, move.column + dc
                if self.in_bounds(r, c):
                    yield Move(r, c)

    def _region_cells(self, region: Region | None) -> Iterator[tuple[int, int]]:
        if region is None:
            return Region.full(self.rows, self.columns).cells()
        region.check_within(self.rows, self.columns)
        return region.cells()

    def winner(self, region: Region | None = None, win_length: int | None = None) -> Outcome:
        """Scan ``region`` for a run of ``win_length`` identical marks.

        Runs are read in the four ``Direction``s and clipped to the region: a
        line leaving the region is cut at its edge even when the board goes on.
        The first completed run in row-major, then direction, order decides.
        Without a run the result is ``DRAW`` when no empty cell is left on the
        board and ``IN_PROGRESS`` otherwise.
        """

        if win_length is None:
            win_length = self.win_length
        if region is None:
            region = Region.full(self.rows, self.columns)
        else:
            region.check_within(self.rows, self.columns)

        cells = self.cells
        for row, column in region.cells():
            cell = cells[row][column]
            if cell is Cell.EMPTY:
                continue
            for d in D:
                dr, dc = d.delta
                run = 1
                for step in range(1, win_length):
                    r = row + dr * step
                    c = column + dc * step
                    if not region.contains_cell(r, c):
                        break
                    if cells[r][c] is not cell:
                        break
                    run += 1
                if run == win_length:
                    return Outcome.win(cell)

        if self.is_full():
            return DRAW
        return IN_PROGRESS

    def do_move(self, move: Move, mark: Cell) -> None:
        if not self.in_bounds(move.row, move.column):
            raise ValueError(f"Move {move} is outside the board")
        if self.cells[move.row][move.column] is not Cell.EMPTY:
            raise ValueError(f"Cell {move} is already occupied")
        if mark is Cell.EMPTY:
            raise ValueError("Cannot place an empty mark")
        self.cells[move.row][move.column] = mark
        self._history.append(move)

    def undo_move(self) -> None:
        if not self._history:
            raise ValueError("No moves to undo")
        move = self._history.pop()
        self.cells[move.row][move.column] = Cell.EMPTY

    def render(self, block: bool = False, title: str | None = None) -> None:
        import matplotlib.pyplot as plt

        if self._render_fig is None or self._render_ax is None:
            fig_ax: tuple[Figure, Axes] = plt.subplots()  # type: ignore
            self._render_fig, self._render_ax = fig_ax

        ax = self._render_ax
        ax_any: Any = ax
        ax.clear()

        for i in range(self.rows + 1):
            ax_any.plot([0, self.columns], [i, i], color="black", linewidth=1, zorder=0)
        for j in range(self.columns + 1):
            ax_any.plot([j, j], [0, self.rows], color="black", linewidth=1, zorder=0)

        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell is Cell.EMPTY:
                    continue
                color = "C0" if cell is Cell.X else "C1"
                # row 0 drawn at the top
                ax_any.text(
                    c + 0.5,
                    self.rows - r - 0.5,
                    cell.value.upper(),
                    ha="center",
                    va="center",
                    fontsize=28 if self.rows <= 5 else 16,
                    color=color,
                    zorder=1,
                )

        ax_any.set_xlim(0, self.columns)
        ax_any.set_ylim(0, self.rows)
        ax_any.set_aspect("equal", "box")
        ax_any.set_xticks([j + 0.5 for j in range(self.columns)], [str(j) for j in range(self.columns)])
        ax_any.set_yticks([self.rows - i - 0.5 for i in range(self.rows)], [str(i) for i in range(self.rows)])
        if title:
            ax_any.set_title(title)

        try:
            plt.pause(0.01)  # type: ignore
        except SystemError:
            return
        if block:
            plt.show()  # type: ignore
