"""
Block Drop Shape Catalog.

This module defines the 17 fixed piece footprints, the color palette and the
random piece generator. Footprints are never rotated.
Each shape is stored both as its rectangular boolean footprint and as a list
of (row, col) offsets from the top-left anchor point.
"""
from dataclasses import dataclass
from enum import IntEnum
from itertools import count
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
import numpy as np


class PowerKind(IntEnum):
    """Area effects a power block triggers when placed."""
    BOMB = 1
    LIGHTNING = 2
    RAINBOW = 3
    DRILL = 4


# Base colors a regular piece can take
COLORS: Tuple[str, ...] = (
    "cyan",
    "pink",
    "yellow",
    "green",
    "purple",
    "orange",
    "red",
    "blue",
)

# Display color of every power piece (a gradient, not a base color)
POWER_COLOR = "power"

# Palette index -> color id, used by the board's color matrix
PALETTE: Tuple[str, ...] = COLORS + (POWER_COLOR,)
COLOR_INDEX: Dict[str, int] = {color: i for i, color in enumerate(PALETTE)}

DEFAULT_POWER_CHANCE = 0.15


@dataclass(frozen=True)
class Shape:
    """A fixed footprint from the catalog."""
    name: str
    footprint: Tuple[Tuple[bool, ...], ...]

    @property
    def blocks(self) -> Tuple[Tuple[int, int], ...]:
        """(row, col) offsets of the filled footprint cells, row-major."""
        return tuple(
            (r, c)
            for r, line in enumerate(self.footprint)
            for c, filled in enumerate(line)
            if filled
        )

    @property
    def num_blocks(self) -> int:
        return len(self.blocks)

    @property
    def width(self) -> int:
        return len(self.footprint[0])

    @property
    def height(self) -> int:
        return len(self.footprint)

    def get_shape_array(self) -> np.ndarray:
        """Get the footprint as an int8 array."""
        return np.array(self.footprint, dtype=np.int8)

    def __repr__(self) -> str:
        return f"Shape({self.name}, {self.num_blocks} blocks)"


@dataclass(frozen=True)
class Piece:
    """
    An offered piece: a catalog shape plus display color and optional power.

    Pieces are immutable and consumed exactly once, when placed.
    """
    id: str
    shape: Shape
    color: str
    power: Optional[PowerKind] = None

    @property
    def name(self) -> str:
        return self.shape.name

    @property
    def footprint(self) -> Tuple[Tuple[bool, ...], ...]:
        return self.shape.footprint

    @property
    def blocks(self) -> Tuple[Tuple[int, int], ...]:
        return self.shape.blocks

    @property
    def num_blocks(self) -> int:
        return self.shape.num_blocks

    @property
    def width(self) -> int:
        return self.shape.width

    @property
    def height(self) -> int:
        return self.shape.height

    def __repr__(self) -> str:
        power = f", {self.power.name.lower()}" if self.power else ""
        return f"Piece({self.id}, {self.name}, {self.color}{power})"


def _make_shape(name: str, rows: Sequence[Sequence[int]]) -> Shape:
    """Helper to create a Shape from a 0/1 row matrix."""
    footprint = tuple(tuple(bool(cell) for cell in row) for row in rows)
    if not footprint or len({len(row) for row in footprint}) != 1:
        raise ValueError(f"Footprint of {name} must be a non-empty rectangle")
    if not any(any(row) for row in footprint):
        raise ValueError(f"Footprint of {name} has no filled cell")
    return Shape(name, footprint)


# =============================================================================
# THE 17 CATALOG FOOTPRINTS
# =============================================================================

# -----------------------------------------------------------------------------
# Straight pieces
# -----------------------------------------------------------------------------
SINGLE = _make_shape("SINGLE", [[1]])
DOMINO_H = _make_shape("DOMINO_H", [[1, 1]])
TRIO_H = _make_shape("TRIO_H", [[1, 1, 1]])
I_H = _make_shape("I_H", [[1, 1, 1, 1]])
DOMINO_V = _make_shape("DOMINO_V", [[1], [1]])
TRIO_V = _make_shape("TRIO_V", [[1], [1], [1]])
I_V = _make_shape("I_V", [[1], [1], [1], [1]])

# -----------------------------------------------------------------------------
# Corners (2x2 with one missing cell, named by the corner block position)
# -----------------------------------------------------------------------------
CORNER_TL = _make_shape("CORNER_TL", [[1, 1],
                                      [1, 0]])
CORNER_BL = _make_shape("CORNER_BL", [[1, 0],
                                      [1, 1]])
CORNER_TR = _make_shape("CORNER_TR", [[1, 1],
                                      [0, 1]])
CORNER_BR = _make_shape("CORNER_BR", [[0, 1],
                                      [1, 1]])

# -----------------------------------------------------------------------------
# T-pieces
# -----------------------------------------------------------------------------
T_DOWN = _make_shape("T_DOWN", [[1, 1, 1],
                                [0, 1, 0]])
T_RIGHT = _make_shape("T_RIGHT", [[1, 0],
                                  [1, 1],
                                  [1, 0]])

# -----------------------------------------------------------------------------
# Squares and rectangles
# -----------------------------------------------------------------------------
O = _make_shape("O", [[1, 1],
                      [1, 1]])
RECT_2x3 = _make_shape("RECT_2x3", [[1, 1, 1],
                                    [1, 1, 1]])

# -----------------------------------------------------------------------------
# S/Z pieces
# -----------------------------------------------------------------------------
Z_H = _make_shape("Z_H", [[1, 1, 0],
                          [0, 1, 1]])
S_H = _make_shape("S_H", [[0, 1, 1],
                          [1, 1, 0]])


SHAPES: Dict[str, Shape] = {
    shape.name: shape
    for shape in (
        SINGLE, DOMINO_H, TRIO_H, I_H, DOMINO_V, TRIO_V, I_V,
        CORNER_TL, CORNER_BL, CORNER_TR, CORNER_BR,
        T_DOWN, T_RIGHT, O, RECT_2x3, Z_H, S_H,
    )
}

SHAPE_LIST: List[Shape] = list(SHAPES.values())
NUM_SHAPES: int = len(SHAPES)

assert NUM_SHAPES == 17, f"Expected 17 shapes, got {NUM_SHAPES}"


def get_shape_by_name(name: str) -> Shape:
    """Get a shape by its name."""
    if name not in SHAPES:
        raise ValueError(f"Unknown shape: {name}. Valid shapes: {list(SHAPES.keys())}")
    return SHAPES[name]


def get_all_shapes() -> List[Shape]:
    """Get a list of all catalog shapes."""
    return SHAPE_LIST.copy()


def visualize_shape(shape: Shape) -> str:
    """Create a string visualization of a shape."""
    return "\n".join(
        "".join("□" if cell else " " for cell in row)
        for row in shape.footprint
    )


class PieceGenerator:
    """
    Random piece source.

    Every draw picks a shape and a base color uniformly, then independently
    makes the piece a power block with probability ``power_chance``, the
    kind chosen uniformly among the four PowerKinds. Power pieces are
    recolored to POWER_COLOR unless ``power_color_override`` is False.
    All randomness comes from the injected numpy Generator.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        power_chance: float = DEFAULT_POWER_CHANCE,
        power_color_override: bool = True,
    ):
        if rng is None:
            rng = np.random.default_rng(seed)
        self.rng = rng
        self.power_chance = power_chance
        self.power_color_override = power_color_override
        self._ids: Iterator[int] = count(1)

    def pick_piece(self) -> Piece:
        """Draw one random piece."""
        shape = SHAPE_LIST[self.rng.integers(NUM_SHAPES)]
        color = COLORS[self.rng.integers(len(COLORS))]
        power = None
        if self.rng.random() < self.power_chance:
            power = PowerKind(int(self.rng.integers(len(PowerKind))) + 1)
            if self.power_color_override:
                color = POWER_COLOR
        return Piece(f"piece-{next(self._ids)}", shape, color, power)

    def generate_queue(self, n: int = 3) -> List[Piece]:
        """Draw a full queue of n pieces."""
        return [self.pick_piece() for _ in range(n)]
