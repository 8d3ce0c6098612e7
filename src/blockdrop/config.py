"""
Game configuration.

Values come from a YAML file (see config/default.yaml) or from defaults.
"""
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml

from .resolver import DEFAULT_LINE_SCORE
from .shapes import DEFAULT_POWER_CHANCE


@dataclass
class GameConfig:
    """Configuration for a game session."""
    # Board
    board_size: int = 8

    # Piece queue
    pieces_per_turn: int = 3
    power_chance: float = DEFAULT_POWER_CHANCE
    # Recolor power pieces with the gradient color instead of a base color
    power_color_override: bool = True

    # Scoring
    line_score: int = DEFAULT_LINE_SCORE

    seed: Optional[int] = None

    def validate(self) -> "GameConfig":
        """Raise ValueError on out-of-range values."""
        if self.board_size < 3:
            raise ValueError(f"board_size must be at least 3, got {self.board_size}")
        if self.pieces_per_turn < 1:
            raise ValueError(f"pieces_per_turn must be at least 1, got {self.pieces_per_turn}")
        if self.line_score < 0:
            raise ValueError(f"line_score must be non-negative, got {self.line_score}")
        if not 0.0 <= self.power_chance <= 1.0:
            raise ValueError(f"power_chance must be within [0, 1], got {self.power_chance}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        """Create from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def load_config(config_path: Union[str, Path]) -> GameConfig:
    """Load and validate a GameConfig from a YAML file."""
    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    section = data.get('game', data)
    return GameConfig.from_dict(section or {}).validate()
