"""Utility functions for Block Drop."""
from .logger import GameLogger, MetricsTracker, convert_to_serializable

__all__ = [
    "GameLogger",
    "MetricsTracker",
    "convert_to_serializable",
]
