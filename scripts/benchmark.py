"""
Performance benchmark script for Block Drop.

Tests the speed of the game session with random play.
"""
import argparse
import sys
import time
from pathlib import Path
from typing import Dict, Any
from tqdm import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockdrop.config import GameConfig, load_config
from blockdrop.session import GameSession
from utils.logger import MetricsTracker


def benchmark_session(config: GameConfig, num_games: int = 1000, seed: int = 42) -> Dict[str, Any]:
    """
    Benchmark the game session speed.

    Args:
        config: Game configuration
        num_games: Number of games to play
        seed: Random seed

    Returns:
        Dictionary of benchmark results
    """
    if num_games < 1:
        raise ValueError(f"num_games must be at least 1, got {num_games}")
    tracker = MetricsTracker(window_size=num_games)
    total_moves = 0
    total_time = 0.0

    for i in tqdm(range(num_games), desc="Benchmarking"):
        session = GameSession(config=config, seed=seed + i)

        start = time.perf_counter()
        while not session.is_game_over():
            valid_moves = session.get_valid_moves()
            if not valid_moves:
                break
            move = valid_moves[session.rng.integers(len(valid_moves))]
            session.try_place(*move)
            total_moves += 1
        total_time += time.perf_counter() - start

        stats = session.get_statistics()
        tracker.add('score', stats['score'])
        tracker.add('moves', stats['moves_made'])
        tracker.add('lines', stats['total_lines_cleared'])
        tracker.add('max_combo', stats['max_combo'])

    return {
        'num_games': num_games,
        'total_moves': total_moves,
        'total_time': total_time,
        'moves_per_second': total_moves / total_time if total_time > 0 else 0.0,
        'games_per_second': num_games / total_time if total_time > 0 else 0.0,
        'avg_moves_per_game': total_moves / num_games,
        'stats': tracker.get_all_summaries(),
    }


def print_results(title: str, results: Dict[str, Any]) -> None:
    """Print benchmark results."""
    print(f"\n{'='*60}")
    print(title)
    print('='*60)
    for key, value in results.items():
        if isinstance(value, float):
            print(f"  {key}: {value:.2f}")
        elif isinstance(value, dict):
            print(f"  {key}:")
            for k, v in value.items():
                summary = ", ".join(f"{name}={x:.1f}" for name, x in v.items())
                print(f"    {k}: {summary}")
        else:
            print(f"  {key}: {value}")
    print('='*60)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Benchmark Block Drop")
    parser.add_argument(
        "--games",
        type=int,
        default=1000,
        help="Number of random games to play"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML game config"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed"
    )

    args = parser.parse_args()
    if args.games < 1:
        parser.error("--games must be at least 1")
    config = load_config(args.config) if args.config else GameConfig()

    results = benchmark_session(config, num_games=args.games, seed=args.seed)
    print_results("GAME SESSION BENCHMARK", results)


if __name__ == "__main__":
    main()
