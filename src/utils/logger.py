"""
Logging utilities for game sessions.
"""
from typing import Dict, Any, Optional, List
from pathlib import Path
from enum import Enum
import dataclasses
import json
import time
from datetime import datetime
from collections import defaultdict
import numpy as np


def convert_to_serializable(obj):
    """Convert numpy, enum and dataclass values to JSON types."""
    if isinstance(obj, Enum):
        return obj.name.lower()
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return convert_to_serializable(
            {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
        )
    elif isinstance(obj, dict):
        return {k: convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (set, frozenset)):
        return sorted(convert_to_serializable(i) for i in obj)
    elif isinstance(obj, (list, tuple)):
        return [convert_to_serializable(i) for i in obj]
    return obj


class GameLogger:
    """
    JSON-lines logger for game events and metrics.
    """

    def __init__(self, log_dir: str, name: str = "session"):
        """
        Initialize logger.

        Args:
            log_dir: Directory to save logs
            name: Name of the log
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.name = name
        self.start_time = time.time()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"{name}_{timestamp}.jsonl"

        self.metrics_history: Dict[str, List[float]] = defaultdict(list)
        self.step = 0

    def log(self, metrics: Dict[str, Any], step: Optional[int] = None) -> None:
        """
        Log a record.

        Args:
            metrics: Dictionary of field names to values
            step: Optional step number
        """
        if step is not None:
            self.step = step
        else:
            self.step += 1

        record = {
            'step': self.step,
            'time': time.time() - self.start_time,
            'timestamp': datetime.now().isoformat(),
            **metrics,
        }
        record = convert_to_serializable(record)

        for key, value in metrics.items():
            if isinstance(value, (bool, Enum)):
                continue
            if isinstance(value, (int, float, np.integer, np.floating)):
                self.metrics_history[key].append(float(value))

        with open(self.log_file, 'a') as f:
            f.write(json.dumps(record) + '\n')

    def log_placement(self, report: Any, step: Optional[int] = None) -> None:
        """Log a PlacementReport as one event record."""
        record = {'event': 'placement', 'success': report.success}
        if not report.success:
            record['error'] = report.error
        else:
            record.update({
                'piece': report.piece.id,
                'shape': report.piece.name,
                'power': report.piece.power,
                'position': report.position,
                'filled_cells': report.filled_cells,
                'power_effects': report.power_effects,
                'rows_cleared': report.rows_cleared,
                'cols_cleared': report.cols_cleared,
                'lines_cleared': report.lines_cleared,
                'cells_cleared': report.cells_cleared,
                'points_awarded': report.points_awarded,
                'combo': report.combo,
                'refilled': report.refilled,
                'game_over': report.game_over,
            })
        self.log(record, step)

    def get_recent(self, metric: str, n: int = 100) -> List[float]:
        """Get recent values of a metric."""
        return self.metrics_history[metric][-n:]

    def get_mean(self, metric: str, n: int = 100) -> float:
        """Get mean of recent values."""
        recent = self.get_recent(metric, n)
        return float(np.mean(recent)) if recent else 0.0

    def format_metrics(self, metrics: Dict[str, Any]) -> str:
        """One line per metric under a header with the current step."""
        minutes, seconds = divmod(int(time.time() - self.start_time), 60)
        lines = [f"[{self.name} #{self.step}] [{minutes:02d}:{seconds:02d}]"]
        for key, value in convert_to_serializable(metrics).items():
            if isinstance(value, float):
                lines.append(f"  {key}: {value:.2f}")
            elif isinstance(value, int) and not isinstance(value, bool):
                lines.append(f"  {key}: {value:,}")
            else:
                lines.append(f"  {key}: {value}")
        return "\n".join(lines)

    def print_metrics(self, metrics: Dict[str, Any]) -> None:
        """Print metrics to console."""
        print(self.format_metrics(metrics))

    def save_summary(self) -> Path:
        """Save a summary of all numeric metrics."""
        summary = {
            'name': self.name,
            'total_steps': self.step,
            'total_time': time.time() - self.start_time,
            'metrics': {},
        }

        for key, values in self.metrics_history.items():
            summary['metrics'][key] = {
                'mean': float(np.mean(values)),
                'std': float(np.std(values)),
                'min': float(np.min(values)),
                'max': float(np.max(values)),
                'last': float(values[-1]),
            }

        summary_file = self.log_dir / f"{self.name}_summary.json"
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2)
        return summary_file


class MetricsTracker:
    """
    Track running statistics for metrics.
    """

    def __init__(self, window_size: int = 100):
        """
        Initialize metrics tracker.

        Args:
            window_size: Size of rolling window for statistics
        """
        self.window_size = window_size
        self.metrics: Dict[str, List[float]] = defaultdict(list)

    def add(self, name: str, value: float) -> None:
        """Add a value to a metric."""
        self.metrics[name].append(value)
        if len(self.metrics[name]) > self.window_size:
            self.metrics[name].pop(0)

    def get_summary(self, name: str) -> Dict[str, float]:
        """Get summary statistics for a metric."""
        values = self.metrics.get(name, [])
        if not values:
            return {'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0, 'last': 0.0}
        return {
            'mean': float(np.mean(values)),
            'std': float(np.std(values)),
            'min': float(np.min(values)),
            'max': float(np.max(values)),
            'last': float(values[-1]),
        }

    def get_all_summaries(self) -> Dict[str, Dict[str, float]]:
        """Get summaries for all metrics."""
        return {name: self.get_summary(name) for name in self.metrics}
