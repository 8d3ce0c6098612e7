"""
Interactive play script for Block Drop.

Allows playing manually in the terminal or watching random games.
"""
import argparse
import os
import sys
from pathlib import Path
from typing import Optional
import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockdrop.config import GameConfig, load_config
from blockdrop.session import GameSession, PlacementError, play_random_game
from blockdrop.shapes import visualize_shape
from utils.logger import GameLogger


ERROR_MESSAGES = {
    PlacementError.INVALID_POSITION: "Invalid move! Try again.",
    PlacementError.GAME_PAUSED: "Game is paused. Type 'p' to resume.",
    PlacementError.GAME_OVER: "Game is over. Type 'r' to restart.",
}


def clear_screen():
    """Clear the terminal screen."""
    os.system('cls' if os.name == 'nt' else 'clear')


def render_queue(session: GameSession) -> str:
    """Render the queued pieces one below the other."""
    lines = []
    for piece in session.queue_snapshot():
        power = f" [{piece.power.name.lower()}]" if piece.power else ""
        lines.append(f"{piece.id}: {piece.name} ({piece.color}){power}")
        lines.append(visualize_shape(piece.shape))
    return "\n".join(lines)


def play_manual(config: GameConfig, seed: Optional[int] = None,
                logger: Optional[GameLogger] = None) -> None:
    """
    Play Block Drop manually in the terminal.

    Args:
        config: Game configuration
        seed: Random seed
        logger: Optional event logger
    """
    session = GameSession(config=config, seed=seed)
    message = ""

    while True:
        clear_screen()
        print("=" * 60)
        print("BLOCK DROP - Manual Play")
        print("  Enter move as: piece_id row col (e.g., 'piece-1 3 4')")
        print("  'p' pause/resume, 'r' restart, 'q' quit")
        print("=" * 60)
        print(session)
        print()
        print(render_queue(session))
        if message:
            print(f"\n{message}")
            message = ""

        if session.is_game_over():
            print("\n*** GAME OVER! ***")
            print(f"Final Score: {session.score:,}")
            print(f"Lines: {session.lines_cleared}")
            print(f"Max Combo: {session.max_combo}")

            action = input("\nPlay again? (y/n): ").strip().lower()
            if action == 'y':
                session.reset()
                continue
            break

        user_input = input("\nEnter move: ").strip().lower()
        if user_input == 'q':
            print("Thanks for playing!")
            break
        elif user_input == 'r':
            session.reset()
            continue
        elif user_input == 'p':
            session.toggle_pause()
            continue

        parts = user_input.split()
        if len(parts) != 3:
            message = "Invalid input. Use format: piece_id row col"
            continue
        try:
            row, col = int(parts[1]), int(parts[2])
        except ValueError:
            message = "Invalid input. Row and column must be integers"
            continue

        report = session.try_place(parts[0], row, col)
        if logger is not None:
            logger.log_placement(report)

        if not report.success:
            message = ERROR_MESSAGES[report.error]
        elif report.lines_cleared > 0 or report.power_effects:
            message = (f"*** Cleared {report.lines_cleared} lines, "
                       f"{report.cells_cleared} cells! Combo x{report.combo} "
                       f"+{report.points_awarded} points ***")

    if logger is not None:
        logger.save_summary()


def play_random(config: GameConfig, num_games: int = 10, seed: int = 42,
                logger: Optional[GameLogger] = None) -> None:
    """
    Play random games and show statistics.

    Args:
        config: Game configuration
        num_games: Number of games to play
        seed: Random seed
        logger: Optional metrics logger
    """
    print(f"\nPlaying {num_games} random games...")

    scores = []
    moves = []
    lines = []

    for i in range(num_games):
        stats = play_random_game(seed=seed + i, config=config)
        scores.append(stats['score'])
        moves.append(stats['moves_made'])
        lines.append(stats['total_lines_cleared'])
        if logger is not None:
            logger.log(stats, step=i + 1)
            logger.print_metrics(stats)
        else:
            print(f"Game {i+1}: Score={stats['score']:,}, "
                  f"Moves={stats['moves_made']}, "
                  f"Lines={stats['total_lines_cleared']}")

    print("\n" + "=" * 60)
    print("RANDOM PLAY STATISTICS")
    print("=" * 60)
    print(f"Games: {num_games}")
    print(f"Mean Score: {np.mean(scores):.1f} ± {np.std(scores):.1f}")
    print(f"Max Score: {max(scores)}")
    print(f"Mean Moves: {np.mean(moves):.1f}")
    print(f"Mean Lines: {np.mean(lines):.1f}")
    print("=" * 60)

    if logger is not None:
        logger.save_summary()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Play Block Drop")
    parser.add_argument(
        "--mode",
        type=str,
        choices=["manual", "random"],
        default="manual",
        help="Play mode: play manually or watch random games"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML game config"
    )
    parser.add_argument(
        "--games",
        type=int,
        default=10,
        help="Number of games to play (random mode)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed"
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for JSON-lines event logs"
    )

    args = parser.parse_args()

    if args.config is not None:
        if not os.path.exists(args.config):
            print(f"Config not found: {args.config}")
            sys.exit(1)
        config = load_config(args.config)
    else:
        config = GameConfig()

    logger = GameLogger(args.log_dir, name=args.mode) if args.log_dir else None

    if args.mode == "manual":
        play_manual(config, seed=args.seed, logger=logger)
    elif args.mode == "random":
        seed = args.seed if args.seed is not None else 42
        play_random(config, num_games=args.games, seed=seed, logger=logger)


if __name__ == "__main__":
    main()
