"""
Power block effects.

A power cell clears an area of the board as soon as its piece is stamped,
before any line-clear check:
- bomb: the 3x3 neighborhood around the cell, clipped to the board
- lightning: the cell's whole row and whole column
- drill: the cell's whole column
- rainbow: every cell sharing the exact color stored at the cell
"""
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Tuple

from .board import Board, PowerCell
from .shapes import PowerKind

Coord = Tuple[int, int]


@dataclass(frozen=True)
class PowerEffect:
    """Outcome of one power trigger."""
    kind: PowerKind
    row: int
    col: int
    cells: Tuple[Coord, ...]

    @property
    def cells_cleared(self) -> int:
        return len(self.cells)


def _bomb_area(board: Board, row: int, col: int) -> List[Coord]:
    return [
        (r, c)
        for r in range(max(row - 1, 0), min(row + 2, board.size))
        for c in range(max(col - 1, 0), min(col + 2, board.size))
    ]


def _lightning_area(board: Board, row: int, col: int) -> List[Coord]:
    cells = {(row, c) for c in range(board.size)}
    cells.update((r, col) for r in range(board.size))
    return sorted(cells)


def _drill_area(board: Board, row: int, col: int) -> List[Coord]:
    return [(r, col) for r in range(board.size)]


def _rainbow_area(board: Board, row: int, col: int) -> List[Coord]:
    color = board.get_color(row, col)
    if color is None:
        return []
    return [
        (r, c)
        for r in range(board.size)
        for c in range(board.size)
        if board.get_color(r, c) == color
    ]


POWER_AREAS: Dict[PowerKind, Callable[[Board, int, int], List[Coord]]] = {
    PowerKind.BOMB: _bomb_area,
    PowerKind.LIGHTNING: _lightning_area,
    PowerKind.DRILL: _drill_area,
    PowerKind.RAINBOW: _rainbow_area,
}


def power_targets(kind: PowerKind, row: int, col: int, board: Board) -> List[Coord]:
    """Filled cells the effect would clear, in row-major order."""
    if not board.in_bounds(row, col):
        raise ValueError(f"Power origin ({row}, {col}) is off the board")
    return [(r, c) for r, c in POWER_AREAS[kind](board, row, col) if board.is_filled(r, c)]


def _trigger(kind: PowerKind, row: int, col: int, board: Board) -> PowerEffect:
    cells = tuple(power_targets(kind, row, col, board))
    for r, c in cells:
        board.clear_cell(r, c)
    return PowerEffect(kind, row, col, cells)


def apply_power(kind: PowerKind, row: int, col: int, board: Board) -> int:
    """
    Apply one power effect in place.

    Returns:
        Number of cells cleared
    """
    return _trigger(kind, row, col, board).cells_cleared


def apply_powers(cells: Iterable[PowerCell], board: Board) -> List[PowerEffect]:
    """
    Trigger every power cell of a placement in stamping order.

    Each effect sees the board left by the previous one. A cell emptied by
    an earlier effect still triggers at its coordinate.
    """
    return [_trigger(kind, row, col, board) for row, col, kind in cells]
