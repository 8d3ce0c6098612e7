"""Block Drop game engine."""
from .shapes import Shape, Piece, PowerKind, PieceGenerator, SHAPES, COLORS, POWER_COLOR
from .board import Board, Cell
from .powers import PowerEffect, apply_power, apply_powers
from .resolver import ResolutionOutcome, CascadeOutcome, resolve, resolve_cascade
from .config import GameConfig, load_config
from .session import (
    GameSession,
    SessionState,
    PlacementError,
    PlacementReport,
    SessionSnapshot,
    play_random_game,
)

__all__ = [
    "Shape",
    "Piece",
    "PowerKind",
    "PieceGenerator",
    "SHAPES",
    "COLORS",
    "POWER_COLOR",
    "Board",
    "Cell",
    "PowerEffect",
    "apply_power",
    "apply_powers",
    "ResolutionOutcome",
    "CascadeOutcome",
    "resolve",
    "resolve_cascade",
    "GameConfig",
    "load_config",
    "GameSession",
    "SessionState",
    "PlacementError",
    "PlacementReport",
    "SessionSnapshot",
    "play_random_game",
]
