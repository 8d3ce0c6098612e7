"""
Block Drop Game Session.

This module implements the game session controller including:
- Session state machine (active, paused, over)
- Piece queue consumption and refill (3 random pieces per turn)
- Placement, power effects and cascading line clears
- Scoring with combo streaks
- Game over detection
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple
import numpy as np

from .board import Board, Cell
from .config import GameConfig
from .powers import PowerEffect, apply_powers
from .resolver import resolve_cascade
from .shapes import Piece, PieceGenerator


class SessionState(Enum):
    """Session state enumeration."""
    ACTIVE = "active"
    PAUSED = "paused"
    OVER = "over"


class PlacementError(Enum):
    """Why a placement was rejected."""
    INVALID_POSITION = "invalid_position"
    GAME_PAUSED = "game_paused"
    GAME_OVER = "game_over"


@dataclass
class PlacementReport:
    """
    Outcome of a placement attempt.

    On success it lists every sub-event of the placement so a front end can
    replay fills, power effects and clears on its own timeline.
    """
    success: bool
    error: Optional[PlacementError] = None
    piece: Optional[Piece] = None
    position: Optional[Tuple[int, int]] = None
    filled_cells: List[Tuple[int, int]] = field(default_factory=list)
    power_effects: List[PowerEffect] = field(default_factory=list)
    rows_cleared: Set[int] = field(default_factory=set)
    cols_cleared: Set[int] = field(default_factory=set)
    lines_cleared: int = 0
    cells_cleared: int = 0
    points_awarded: int = 0
    combo: int = 0
    refilled: bool = False
    game_over: bool = False

    @classmethod
    def rejected(cls, error: PlacementError) -> "PlacementReport":
        return cls(success=False, error=error)


@dataclass
class SessionSnapshot:
    """Complete observable session state."""
    board: np.ndarray
    queue: List[str]
    score: int
    lines_cleared: int
    combo: int
    moves_made: int
    state: SessionState

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "board": self.board.tolist(),
            "queue": list(self.queue),
            "score": self.score,
            "lines_cleared": self.lines_cleared,
            "combo": self.combo,
            "moves_made": self.moves_made,
            "state": self.state.value,
        }


class GameSession:
    """
    Block Drop game session.

    Owns the board and the piece queue and exposes:
    - Placing pieces (the only board mutation)
    - Pause/resume and reset
    - Read-only snapshots of the game state
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize a new game.

        Args:
            config: Game configuration (defaults to GameConfig())
            seed: Random seed for reproducibility, overrides config.seed
            rng: Random generator to draw pieces from, overrides seed
        """
        self.config = (config or GameConfig()).validate()
        if seed is None:
            seed = self.config.seed
        self.board = Board(self.config.board_size)
        self._set_rng(rng if rng is not None else np.random.default_rng(seed))
        self._start()

    def _set_rng(self, rng: np.random.Generator) -> None:
        self.rng = rng
        self.generator = PieceGenerator(
            rng,
            power_chance=self.config.power_chance,
            power_color_override=self.config.power_color_override,
        )

    def _start(self) -> None:
        self.board.reset()
        self.queue: List[Piece] = []
        self.score = 0
        self.lines_cleared = 0
        self.combo = 0
        self.max_combo = 0
        self.moves_made = 0
        self.total_blocks_placed = 0
        self.power_triggers = 0
        self.state = SessionState.ACTIVE
        self.refill_if_empty()

    def reset(self, seed: Optional[int] = None) -> SessionSnapshot:
        """
        Discard the current game and start a fresh one.

        Args:
            seed: New random seed (optional)

        Returns:
            Initial game state
        """
        if seed is not None:
            self._set_rng(np.random.default_rng(seed))
        self._start()
        return self.get_state()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_piece(self, piece_id: str) -> Optional[Piece]:
        """Get a queued piece by id, None if it is not in the queue."""
        for piece in self.queue:
            if piece.id == piece_id:
                return piece
        return None

    def board_snapshot(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self.board.snapshot()

    def queue_snapshot(self) -> Tuple[Piece, ...]:
        return tuple(self.queue)

    def is_game_over(self) -> bool:
        return self.state == SessionState.OVER

    def get_valid_moves(self) -> List[Tuple[str, int, int]]:
        """
        Get all valid moves as (piece_id, row, col) tuples.
        """
        return [
            (piece.id, row, col)
            for piece in self.queue
            for row, col in self.board.get_valid_placements(piece)
        ]

    def has_valid_moves(self) -> bool:
        """Check if any queued piece fits somewhere."""
        return any(self.board.has_valid_placement(piece) for piece in self.queue)

    def get_state(self) -> SessionSnapshot:
        """Get the current game state."""
        return SessionSnapshot(
            board=self.board.grid.copy(),
            queue=[piece.id for piece in self.queue],
            score=self.score,
            lines_cleared=self.lines_cleared,
            combo=self.combo,
            moves_made=self.moves_made,
            state=self.state,
        )

    def get_statistics(self) -> Dict[str, Any]:
        """Get game statistics."""
        return {
            'score': self.score,
            'moves_made': self.moves_made,
            'total_lines_cleared': self.lines_cleared,
            'max_combo': self.max_combo,
            'total_blocks_placed': self.total_blocks_placed,
            'power_triggers': self.power_triggers,
            'board_fill_ratio': self.board.total_blocks / (self.board.size ** 2),
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def try_place(self, piece_id: str, row: int, col: int) -> PlacementReport:
        """
        Place a queued piece with its top-left anchor at (row, col).

        The placement runs to completion in one call: stamping, power
        effects in stamping order, cascading line clears, queue refill and
        game over detection. A rejected placement leaves the session
        untouched.

        Args:
            piece_id: Id of a piece in the queue
            row: Row for the piece's top-left anchor
            col: Column for the piece's top-left anchor

        Returns:
            PlacementReport with details about the placement
        """
        if self.state == SessionState.OVER:
            return PlacementReport.rejected(PlacementError.GAME_OVER)
        if self.state == SessionState.PAUSED:
            return PlacementReport.rejected(PlacementError.GAME_PAUSED)

        piece = self.get_piece(piece_id)
        if piece is None or not self.board.can_place(piece, row, col):
            return PlacementReport.rejected(PlacementError.INVALID_POSITION)

        filled_cells = [(row + dr, col + dc) for dr, dc in piece.blocks]
        power_cells = self.board.place_piece(piece, row, col)
        effects = apply_powers(power_cells, self.board)
        cascade = resolve_cascade(self.board, self.combo, self.config.line_score)

        self.queue.remove(piece)
        self.moves_made += 1
        self.total_blocks_placed += piece.num_blocks
        self.power_triggers += len(effects)
        self.score += cascade.points_awarded
        self.lines_cleared += cascade.lines_cleared
        self.combo = cascade.new_combo
        self.max_combo = max(self.max_combo, self.combo)

        refilled = self.refill_if_empty()
        game_over = self.check_game_over()

        return PlacementReport(
            success=True,
            piece=piece,
            position=(row, col),
            filled_cells=filled_cells,
            power_effects=effects,
            rows_cleared=cascade.rows_cleared,
            cols_cleared=cascade.cols_cleared,
            lines_cleared=cascade.lines_cleared,
            cells_cleared=sum(e.cells_cleared for e in effects) + cascade.cells_cleared,
            points_awarded=cascade.points_awarded,
            combo=self.combo,
            refilled=refilled,
            game_over=game_over,
        )

    def refill_if_empty(self) -> bool:
        """
        Deal a fresh queue once every piece has been placed.

        Returns:
            True if a new queue was dealt
        """
        if self.queue or self.state != SessionState.ACTIVE:
            return False
        self.queue = self.generator.generate_queue(self.config.pieces_per_turn)
        self.check_game_over()
        return True

    def check_game_over(self) -> bool:
        """
        Check whether no queued piece fits anywhere on the board.

        An active session moves to OVER when this holds. An empty queue is
        never game over, it is waiting for a refill.
        """
        if self.state == SessionState.OVER:
            return True
        if not self.queue or self.has_valid_moves():
            return False
        if self.state == SessionState.ACTIVE:
            self.state = SessionState.OVER
        return True

    def pause(self) -> None:
        if self.state == SessionState.ACTIVE:
            self.state = SessionState.PAUSED

    def resume(self) -> None:
        if self.state == SessionState.PAUSED:
            self.state = SessionState.ACTIVE

    def toggle_pause(self) -> SessionState:
        """Pause an active game or resume a paused one."""
        if self.state == SessionState.ACTIVE:
            self.pause()
        else:
            self.resume()
        return self.state

    def __str__(self) -> str:
        """String representation of the game state."""
        lines = [str(self.board)]
        lines.append(f"\nScore: {self.score} | Lines: {self.lines_cleared} | "
                     f"Combo: {self.combo} | State: {self.state.value}")
        lines.append("\nQueue:")
        for piece in self.queue:
            power = f" [{piece.power.name.lower()}]" if piece.power else ""
            lines.append(f"  {piece.id}: {piece.name} ({piece.color}){power}")
        return "\n".join(lines)


def play_random_game(
    seed: Optional[int] = None,
    config: Optional[GameConfig] = None,
    verbose: bool = False,
) -> Dict[str, Any]:
    """
    Play a complete game with random legal moves.

    Args:
        seed: Random seed
        config: Game configuration
        verbose: Whether to print game progress

    Returns:
        Dictionary with game statistics
    """
    session = GameSession(config=config, seed=seed)

    while not session.is_game_over():
        valid_moves = session.get_valid_moves()
        if not valid_moves:
            break
        move = valid_moves[session.rng.integers(len(valid_moves))]
        report = session.try_place(*move)

        if verbose and report.lines_cleared > 0:
            print(f"Cleared {report.lines_cleared} lines! "
                  f"Combo x{report.combo}, +{report.points_awarded} points")

    if verbose:
        print(session)

    return session.get_statistics()
