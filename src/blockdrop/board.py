"""
Block Drop Board Module.

This module implements the game board with:
- 8x8 grid representation (fill, color and power per cell)
- Piece placement validation and stamping
- Row/column fullness checks and clearing
- Single-cell clearing used by power effects
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple
import numpy as np

from .shapes import COLOR_INDEX, PALETTE, Piece, PowerKind

EMPTY_COLOR = -1
NO_POWER = 0

PowerCell = Tuple[int, int, PowerKind]


@dataclass(frozen=True)
class Cell:
    """Read-only view of one board cell."""
    filled: bool = False
    color: Optional[str] = None
    power: Optional[PowerKind] = None


EMPTY_CELL = Cell()


class Board:
    """
    Represents the Block Drop game board.

    The board is stored as three parallel numpy arrays:
    - grid: 0 = empty cell, 1 = filled cell
    - colors: palette index of the cell color, -1 when empty
    - powers: PowerKind value of the cell, 0 when none

    An empty cell always has no color and no power.
    """

    DEFAULT_SIZE = 8

    def __init__(self, size: int = DEFAULT_SIZE):
        """Initialize an empty board."""
        self.size = size
        self.grid = np.zeros((size, size), dtype=np.int8)
        self.colors = np.full((size, size), EMPTY_COLOR, dtype=np.int8)
        self.powers = np.zeros((size, size), dtype=np.int8)

    def copy(self) -> "Board":
        """Create a deep copy of this board."""
        new_board = Board(self.size)
        new_board.grid = self.grid.copy()
        new_board.colors = self.colors.copy()
        new_board.powers = self.powers.copy()
        return new_board

    def reset(self) -> None:
        """Clear the board."""
        self.grid.fill(0)
        self.colors.fill(EMPTY_COLOR)
        self.powers.fill(NO_POWER)

    @property
    def total_blocks(self) -> int:
        """Return total number of filled blocks on the board."""
        return int(self.grid.sum())

    @property
    def empty_cells(self) -> int:
        """Return number of empty cells."""
        return self.size * self.size - self.total_blocks

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if coordinates are within board bounds."""
        return 0 <= row < self.size and 0 <= col < self.size

    def is_empty(self, row: int, col: int) -> bool:
        return self.grid[row, col] == 0

    def is_filled(self, row: int, col: int) -> bool:
        return self.grid[row, col] == 1

    def get_color(self, row: int, col: int) -> Optional[str]:
        """Get the color id of a cell, None when empty."""
        index = self.colors[row, col]
        return None if index == EMPTY_COLOR else PALETTE[index]

    def get_power(self, row: int, col: int) -> Optional[PowerKind]:
        """Get the power of a cell, None when it carries none."""
        value = self.powers[row, col]
        return None if value == NO_POWER else PowerKind(int(value))

    def get_cell(self, row: int, col: int) -> Cell:
        """Get a read-only view of a cell."""
        if not self.is_filled(row, col):
            return EMPTY_CELL
        return Cell(True, self.get_color(row, col), self.get_power(row, col))

    def can_place(self, piece: Piece, row: int, col: int) -> bool:
        """
        Check if a piece can be placed at the given position.

        Every filled footprint cell must land inside the board on an
        empty cell; a single offending cell rejects the whole placement.

        Args:
            piece: The piece to place
            row: Row position for the piece's top-left anchor
            col: Column position for the piece's top-left anchor

        Returns:
            True if the piece can be placed, False otherwise
        """
        size = self.size
        grid = self.grid
        for dr, dc in piece.blocks:
            r, c = row + dr, col + dc
            if r < 0 or r >= size or c < 0 or c >= size:
                return False
            if grid[r, c] != 0:
                return False
        return True

    def place_piece(self, piece: Piece, row: int, col: int) -> List[PowerCell]:
        """
        Stamp a piece on the board.

        Every footprint cell receives the piece's color and power, so a
        multi-cell power piece produces one power cell per block.

        Args:
            piece: The piece to place
            row: Row position for the piece's top-left anchor
            col: Column position for the piece's top-left anchor

        Returns:
            The newly filled (row, col, power) cells carrying a power,
            in stamping order

        Raises:
            ValueError: if the placement is not legal
        """
        if not self.can_place(piece, row, col):
            raise ValueError(f"Cannot place {piece.name} at ({row}, {col})")

        color = COLOR_INDEX[piece.color]
        power = int(piece.power) if piece.power else NO_POWER
        power_cells = []
        for dr, dc in piece.blocks:
            r, c = row + dr, col + dc
            self.grid[r, c] = 1
            self.colors[r, c] = color
            self.powers[r, c] = power
            if piece.power:
                power_cells.append((r, c, piece.power))
        return power_cells

    def clear_cell(self, row: int, col: int) -> bool:
        """Empty one cell. Returns True if it was filled."""
        was_filled = self.is_filled(row, col)
        self.grid[row, col] = 0
        self.colors[row, col] = EMPTY_COLOR
        self.powers[row, col] = NO_POWER
        return bool(was_filled)

    def _check_index(self, index: int, axis: str) -> None:
        if not 0 <= index < self.size:
            raise ValueError(f"{axis} index must be 0-{self.size - 1}, got {index}")

    def is_row_full(self, row: int) -> bool:
        self._check_index(row, "Row")
        return bool(np.all(self.grid[row, :] == 1))

    def is_col_full(self, col: int) -> bool:
        self._check_index(col, "Column")
        return bool(np.all(self.grid[:, col] == 1))

    def clear_rows(self, rows: Iterable[int]) -> int:
        """
        Reset every cell of the given rows to empty.

        Returns:
            Number of filled cells that were emptied
        """
        cleared = 0
        for row in set(rows):
            self._check_index(row, "Row")
            cleared += int(self.grid[row, :].sum())
            self.grid[row, :] = 0
            self.colors[row, :] = EMPTY_COLOR
            self.powers[row, :] = NO_POWER
        return cleared

    def clear_cols(self, cols: Iterable[int]) -> int:
        """
        Reset every cell of the given columns to empty.

        Cells already emptied by a row clear are not counted again.

        Returns:
            Number of filled cells that were emptied
        """
        cleared = 0
        for col in set(cols):
            self._check_index(col, "Column")
            cleared += int(self.grid[:, col].sum())
            self.grid[:, col] = 0
            self.colors[:, col] = EMPTY_COLOR
            self.powers[:, col] = NO_POWER
        return cleared

    def find_complete_lines(self) -> Tuple[Set[int], Set[int]]:
        """
        Find all complete rows and columns.

        Returns:
            Tuple of (complete_rows, complete_cols) as sets of indices
        """
        complete_rows = {row for row in range(self.size) if self.is_row_full(row)}
        complete_cols = {col for col in range(self.size) if self.is_col_full(col)}
        return complete_rows, complete_cols

    def get_valid_placements(self, piece: Piece) -> List[Tuple[int, int]]:
        """
        Get all valid placement positions for a piece.

        Every origin on the board is tried, so footprints with empty
        edge rows or columns are still found near the far edges.

        Returns:
            List of (row, col) tuples where the piece can be placed
        """
        return [
            (row, col)
            for row in range(self.size)
            for col in range(self.size)
            if self.can_place(piece, row, col)
        ]

    def has_valid_placement(self, piece: Piece) -> bool:
        """Check if there's at least one valid placement for a piece."""
        return any(
            self.can_place(piece, row, col)
            for row in range(self.size)
            for col in range(self.size)
        )

    def snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        """Immutable copy of every cell, for the presentation layer."""
        return tuple(
            tuple(self.get_cell(row, col) for col in range(self.size))
            for row in range(self.size)
        )

    def set_state(
        self,
        grid: np.ndarray,
        colors: Optional[np.ndarray] = None,
        powers: Optional[np.ndarray] = None,
    ) -> None:
        """
        Set the board from arrays.

        ``colors`` holds palette indices; filled cells default to the first
        base color. Color and power are dropped on empty cells.
        """
        grid = np.asarray(grid, dtype=np.int8)
        if grid.shape != (self.size, self.size):
            raise ValueError(f"Expected a {self.size}x{self.size} grid, got {grid.shape}")
        filled = grid != 0
        self.grid = filled.astype(np.int8)
        if colors is None:
            colors = np.zeros_like(self.grid)
        if powers is None:
            powers = np.zeros_like(self.grid)
        self.colors = np.where(filled, colors, EMPTY_COLOR).astype(np.int8)
        self.powers = np.where(filled, powers, NO_POWER).astype(np.int8)

    def __str__(self) -> str:
        """Create a string visualization of the board."""
        lines = []
        lines.append("  " + " ".join(str(i) for i in range(self.size)))
        lines.append("  " + "-" * (self.size * 2 - 1))
        for row in range(self.size):
            row_str = f"{row}|"
            for col in range(self.size):
                if not self.is_filled(row, col):
                    cell = "·"
                elif self.powers[row, col] != NO_POWER:
                    cell = "*"
                else:
                    cell = "█"
                row_str += cell + " "
            lines.append(row_str.rstrip())
        lines.append("  " + "-" * (self.size * 2 - 1))
        lines.append(f"Blocks: {self.total_blocks}, Empty: {self.empty_cells}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Board(size={self.size}, blocks={self.total_blocks})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return False
        return (
            np.array_equal(self.grid, other.grid)
            and np.array_equal(self.colors, other.colors)
            and np.array_equal(self.powers, other.powers)
        )
