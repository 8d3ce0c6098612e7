"""
Line clear and combo resolution.

A resolution pass scans every row and column, clears the full ones and
scores them:

    points = lines * line_score * max(1, new_combo)

The combo is a streak across placements. It grows by exactly one for a
placement that clears anything and drops to 0 for a placement that clears
nothing.
"""
from dataclasses import dataclass, field
from typing import List, Set

from .board import Board

DEFAULT_LINE_SCORE = 100


@dataclass
class ResolutionOutcome:
    """Result of a single resolution pass."""
    rows_cleared: Set[int] = field(default_factory=set)
    cols_cleared: Set[int] = field(default_factory=set)
    points_awarded: int = 0
    new_combo: int = 0
    cells_cleared: int = 0

    @property
    def lines_cleared(self) -> int:
        return len(self.rows_cleared) + len(self.cols_cleared)

    @property
    def cleared_any(self) -> bool:
        return self.lines_cleared > 0


@dataclass
class CascadeOutcome:
    """Result of all resolution passes run for one placement."""
    passes: List[ResolutionOutcome] = field(default_factory=list)
    rows_cleared: Set[int] = field(default_factory=set)
    cols_cleared: Set[int] = field(default_factory=set)
    lines_cleared: int = 0
    cells_cleared: int = 0
    points_awarded: int = 0
    new_combo: int = 0


def resolve(board: Board, combo: int, line_score: int = DEFAULT_LINE_SCORE) -> ResolutionOutcome:
    """
    Run one scan-clear-score pass against the board.

    Args:
        board: Board after placement and power effects; mutated in place
        combo: Streak value before this pass
        line_score: Points per cleared line before the multiplier

    Returns:
        ResolutionOutcome; new_combo is 0 when nothing was full
    """
    rows, cols = board.find_complete_lines()
    if not rows and not cols:
        return ResolutionOutcome(new_combo=0)

    # Intersection cells are emptied by the row clear and not recounted
    cells = board.clear_rows(rows) + board.clear_cols(cols)
    new_combo = combo + 1
    lines = len(rows) + len(cols)
    points = lines * line_score * max(1, new_combo)
    return ResolutionOutcome(
        rows_cleared=rows,
        cols_cleared=cols,
        points_awarded=points,
        new_combo=new_combo,
        cells_cleared=cells,
    )


def resolve_cascade(board: Board, combo: int, line_score: int = DEFAULT_LINE_SCORE) -> CascadeOutcome:
    """
    Repeat resolution passes until one clears nothing.

    Every clearing pass of the same placement scores with the same
    combo + 1 multiplier, so the streak moves by at most one per placement.
    The closing empty pass only resets the streak when it is the first pass.
    """
    outcome = CascadeOutcome()
    while True:
        result = resolve(board, combo, line_score)
        outcome.passes.append(result)
        if not result.cleared_any:
            break
        outcome.rows_cleared |= result.rows_cleared
        outcome.cols_cleared |= result.cols_cleared
        outcome.lines_cleared += result.lines_cleared
        outcome.cells_cleared += result.cells_cleared
        outcome.points_awarded += result.points_awarded
        outcome.new_combo = result.new_combo
    return outcome
