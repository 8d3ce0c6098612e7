"""
Tests for the game session.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockdrop.config import GameConfig
from blockdrop.session import (
    GameSession, SessionState, PlacementError, PlacementReport,
    SessionSnapshot, play_random_game,
)
from blockdrop.shapes import (
    Piece, PowerKind, POWER_COLOR, SINGLE, DOMINO_V, I_H, O,
)


def singles(*ids):
    return [Piece(piece_id, SINGLE, "cyan") for piece_id in ids]


def session_with(queue, grid=None, **kwargs):
    """Session with a hand-picked queue and board."""
    session = GameSession(seed=0, **kwargs)
    if grid is not None:
        session.board.set_state(np.asarray(grid))
    session.queue = list(queue)
    return session


class TestSessionCreation:
    """Test session initialization."""

    def test_initial_state(self):
        session = GameSession()

        assert session.state == SessionState.ACTIVE
        assert session.score == 0
        assert session.combo == 0
        assert session.lines_cleared == 0
        assert session.board.total_blocks == 0
        assert len(session.queue) == 3

    def test_seeded_sessions_match(self):
        """Same seed gives the same initial queue."""
        q1 = GameSession(seed=42).queue_snapshot()
        q2 = GameSession(seed=42).queue_snapshot()
        assert q1 == q2

    def test_config_seed(self):
        q1 = GameSession(config=GameConfig(seed=9)).queue_snapshot()
        q2 = GameSession(seed=9).queue_snapshot()
        assert q1 == q2

    def test_injected_rng(self):
        q1 = GameSession(rng=np.random.default_rng(3)).queue_snapshot()
        q2 = GameSession(seed=3).queue_snapshot()
        assert q1 == q2

    def test_pieces_per_turn(self):
        session = GameSession(config=GameConfig(pieces_per_turn=5), seed=1)
        assert len(session.queue) == 5

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            GameSession(config=GameConfig(power_chance=2.0))


class TestRejectedPlacements:
    """Test placement validation."""

    def test_unknown_piece(self):
        session = session_with(singles("a", "b", "c"))
        report = session.try_place("zzz", 0, 0)

        assert not report.success
        assert report.error == PlacementError.INVALID_POSITION
        assert session.board.total_blocks == 0

    def test_out_of_bounds(self):
        session = session_with([Piece("o", O, "red")])
        report = session.try_place("o", 7, 7)

        assert report.error == PlacementError.INVALID_POSITION
        assert len(session.queue) == 1

    def test_overlap(self):
        session = session_with(singles("a", "b", "c"))
        assert session.try_place("a", 2, 2).success
        report = session.try_place("b", 2, 2)

        assert report.error == PlacementError.INVALID_POSITION
        assert session.board.total_blocks == 1
        assert session.moves_made == 1

    def test_already_placed_piece(self):
        session = session_with(singles("a", "b", "c"))
        session.try_place("a", 0, 0)
        assert session.try_place("a", 5, 5).error == PlacementError.INVALID_POSITION

    def test_paused(self):
        session = session_with(singles("a", "b", "c"))
        session.pause()
        report = session.try_place("a", 0, 0)

        assert report.error == PlacementError.GAME_PAUSED
        assert session.board.total_blocks == 0
        assert len(session.queue) == 3

    def test_game_over_rejects(self):
        session = session_with(singles("a", "b", "c"), grid=np.ones((8, 8)))
        assert session.check_game_over()
        assert session.try_place("a", 0, 0).error == PlacementError.GAME_OVER

    def test_rejected_report_is_empty(self):
        report = PlacementReport.rejected(PlacementError.GAME_PAUSED)
        assert not report.success
        assert report.filled_cells == []
        assert report.points_awarded == 0


class TestPlacement:
    """Test successful placements."""

    def test_place_removes_piece(self):
        session = session_with(singles("a", "b", "c"))
        report = session.try_place("b", 3, 4)

        assert report.success
        assert report.error is None
        assert report.piece.id == "b"
        assert report.position == (3, 4)
        assert report.filled_cells == [(3, 4)]
        assert [p.id for p in session.queue] == ["a", "c"]
        assert session.moves_made == 1

    def test_refill_after_last_piece(self):
        """The queue refills only when it runs out."""
        session = session_with(singles("a", "b", "c"))
        assert not session.try_place("a", 0, 0).refilled
        assert not session.try_place("b", 0, 1).refilled
        assert len(session.queue) == 1

        report = session.try_place("c", 0, 2)

        assert report.refilled
        assert len(session.queue) == 3
        assert all(p.id not in ("a", "b", "c") for p in session.queue)

    def test_refill_idempotent(self):
        session = GameSession(seed=5)
        queue = session.queue_snapshot()

        assert not session.refill_if_empty()
        assert not session.refill_if_empty()
        assert session.queue_snapshot() == queue

    def test_line_clear_scores(self):
        grid = np.zeros((8, 8))
        grid[0, 0:7] = 1
        session = session_with(singles("a", "b", "c"), grid=grid)

        report = session.try_place("a", 0, 7)

        assert report.rows_cleared == {0}
        assert report.cols_cleared == set()
        assert report.lines_cleared == 1
        assert report.cells_cleared == 8
        assert report.points_awarded == 100
        assert report.combo == 1
        assert session.score == 100
        assert session.lines_cleared == 1
        assert session.board.total_blocks == 0


class TestCombo:
    """Test combo streaks across placements."""

    def test_streak_and_reset(self):
        """N consecutive clearing placements give combo N; a miss resets it."""
        grid = np.zeros((8, 8))
        grid[0:3, 0:7] = 1
        session = session_with(singles("a", "b", "c"), grid=grid)

        points = []
        for piece_id, row in (("a", 0), ("b", 1), ("c", 2)):
            report = session.try_place(piece_id, row, 7)
            points.append(report.points_awarded)
            assert session.combo == row + 1

        assert points == [100, 200, 300]
        assert session.score == 600
        assert session.max_combo == 3

        session.queue = singles("d")
        session.try_place("d", 5, 5)
        assert session.combo == 0
        assert session.max_combo == 3

    def test_two_lines_on_third_clear(self):
        grid = np.zeros((8, 8))
        grid[0:2, 0:7] = 1
        session = session_with([Piece("v", DOMINO_V, "red")], grid=grid)
        session.combo = 2

        report = session.try_place("v", 0, 7)

        assert report.lines_cleared == 2
        assert report.points_awarded == 600
        assert session.combo == 3

    def test_row_and_column_together(self):
        grid = np.zeros((8, 8))
        grid[4, 0:7] = 1
        grid[0:4, 7] = 1
        grid[5:8, 7] = 1
        session = session_with(singles("a", "b", "c"), grid=grid)

        report = session.try_place("a", 4, 7)

        assert report.rows_cleared == {4}
        assert report.cols_cleared == {7}
        assert report.cells_cleared == 15
        assert report.points_awarded == 200


class TestPowerPlacement:
    """Test power pieces placed through the session."""

    def test_bomb_clears_neighbors(self):
        grid = np.zeros((8, 8))
        grid[3, 3] = grid[3, 4] = grid[5, 5] = grid[0, 0] = 1
        bomb = Piece("b", SINGLE, POWER_COLOR, PowerKind.BOMB)
        session = session_with([bomb] + singles("x", "y"), grid=grid)

        report = session.try_place("b", 4, 4)

        assert len(report.power_effects) == 1
        assert report.power_effects[0].kind == PowerKind.BOMB
        assert set(report.power_effects[0].cells) == {(3, 3), (3, 4), (4, 4), (5, 5)}
        assert report.cells_cleared == 4
        assert report.points_awarded == 0
        assert session.board.total_blocks == 1

    def test_powers_resolve_before_lines(self):
        """A lightning that completes a row empties it before the line check."""
        grid = np.zeros((8, 8))
        grid[0, 0:7] = 1
        session = session_with(
            [Piece("l", SINGLE, POWER_COLOR, PowerKind.LIGHTNING)] + singles("x", "y"),
            grid=grid,
        )
        session.combo = 3

        report = session.try_place("l", 0, 7)

        assert report.lines_cleared == 0
        assert report.cells_cleared == 8
        assert report.points_awarded == 0
        assert session.combo == 0

    def test_every_power_cell_triggers(self):
        grid = np.zeros((8, 8))
        grid[0:7, 0:4] = 1
        piece = Piece("d", I_H, POWER_COLOR, PowerKind.DRILL)
        session = session_with([piece] + singles("x", "y"), grid=grid)

        report = session.try_place("d", 7, 0)

        assert len(report.power_effects) == 4
        assert [e.col for e in report.power_effects] == [0, 1, 2, 3]
        assert report.cells_cleared == 32
        assert report.lines_cleared == 0
        assert session.board.total_blocks == 0


class TestGameOver:
    """Test game over detection."""

    def test_full_board_is_over(self):
        session = session_with(singles("a", "b", "c"), grid=np.ones((8, 8)))

        assert session.check_game_over()
        assert session.state == SessionState.OVER
        assert session.is_game_over()

    def test_one_empty_cell_not_over(self):
        grid = np.ones((8, 8))
        grid[6, 1] = 0
        session = session_with(singles("a", "b", "c"), grid=grid)

        assert not session.check_game_over()
        assert session.state == SessionState.ACTIVE

    def test_empty_queue_not_over(self):
        session = session_with([], grid=np.ones((8, 8)))
        assert not session.check_game_over()

    def checkerboard(self):
        """Every other cell empty: only single blocks fit, no line is close."""
        rows, cols = np.indices((8, 8))
        return ((rows + cols) % 2).astype(np.int8)

    def test_placement_triggers_game_over(self):
        """Pieces left in the queue that fit nowhere end the game."""
        session = session_with(
            singles("a") + [Piece("o", O, "red")], grid=self.checkerboard()
        )

        report = session.try_place("a", 0, 0)

        assert report.success
        assert report.lines_cleared == 0
        assert report.game_over
        assert session.state == SessionState.OVER

    def test_refill_with_no_fit_ends_game(self):
        session = session_with(singles("a"), grid=self.checkerboard())
        session.generator.generate_queue = lambda n: [
            Piece(f"o{i}", O, "red") for i in range(n)
        ]

        report = session.try_place("a", 0, 0)

        assert report.refilled
        assert report.game_over
        assert len(session.queue) == 3

    def test_fitting_queue_keeps_game_going(self):
        session = session_with(singles("a", "b"), grid=self.checkerboard())
        report = session.try_place("a", 0, 0)
        assert not report.game_over
        assert session.state == SessionState.ACTIVE

    def test_pause_does_not_end_game(self):
        session = session_with(singles("a"), grid=np.ones((8, 8)))
        session.pause()
        assert session.check_game_over()
        assert session.state == SessionState.PAUSED


class TestPauseResume:
    """Test the pause state machine."""

    def test_pause_and_resume(self):
        session = GameSession(seed=1)
        session.pause()
        assert session.state == SessionState.PAUSED
        session.resume()
        assert session.state == SessionState.ACTIVE

    def test_toggle(self):
        session = GameSession(seed=1)
        assert session.toggle_pause() == SessionState.PAUSED
        assert session.toggle_pause() == SessionState.ACTIVE

    def test_over_is_terminal(self):
        session = session_with(singles("a"), grid=np.ones((8, 8)))
        session.check_game_over()
        session.pause()
        session.resume()
        assert session.state == SessionState.OVER


class TestReset:
    """Test session reset."""

    def test_reset_restores_initial_invariants(self):
        grid = np.zeros((8, 8))
        grid[0, 0:7] = 1
        session = session_with(singles("a", "b", "c"), grid=grid)
        session.try_place("a", 0, 7)
        session.try_place("b", 5, 5)
        session.pause()

        state = session.reset()

        assert isinstance(state, SessionSnapshot)
        assert session.state == SessionState.ACTIVE
        assert session.score == 0
        assert session.combo == 0
        assert session.lines_cleared == 0
        assert session.moves_made == 0
        assert session.board.total_blocks == 0
        assert len(session.queue) == 3

    def test_reset_from_game_over(self):
        session = session_with(singles("a"), grid=np.ones((8, 8)))
        session.check_game_over()
        session.reset()
        assert session.state == SessionState.ACTIVE
        assert session.board.total_blocks == 0

    def test_reset_with_seed(self):
        session = GameSession(seed=1)
        session.reset(seed=42)
        assert session.queue_snapshot() == GameSession(seed=42).queue_snapshot()


class TestSnapshots:
    """Test read-only views."""

    def test_get_state(self):
        session = GameSession(seed=2)
        state = session.get_state()

        assert state.board.shape == (8, 8)
        assert state.queue == [p.id for p in session.queue]
        assert state.state == SessionState.ACTIVE

    def test_state_to_dict(self):
        state_dict = GameSession(seed=2).get_state().to_dict()
        assert state_dict['state'] == "active"
        assert len(state_dict['board']) == 8
        assert state_dict['score'] == 0

    def test_board_snapshot_detached(self):
        session = session_with(singles("a", "b", "c"))
        snap = session.board_snapshot()
        session.try_place("a", 0, 0)
        assert not snap[0][0].filled
        assert session.board_snapshot()[0][0].filled

    def test_valid_moves(self):
        session = session_with(singles("a") + [Piece("o", O, "red")])
        moves = session.get_valid_moves()
        assert len(moves) == 64 + 49
        assert ("a", 7, 7) in moves
        assert ("o", 7, 7) not in moves

    def test_statistics(self):
        stats = GameSession(seed=2).get_statistics()
        for key in ('score', 'moves_made', 'total_lines_cleared', 'max_combo'):
            assert key in stats


class TestRandomGame:
    """Test random game playing."""

    def test_play_random_game(self):
        stats = play_random_game(seed=42)
        assert stats['moves_made'] > 0

    def test_random_game_deterministic(self):
        stats1 = play_random_game(seed=7)
        stats2 = play_random_game(seed=7)
        assert stats1 == stats2

    def test_every_offered_move_succeeds(self):
        """Moves from get_valid_moves are always accepted."""
        for i in range(5):
            session = GameSession(seed=i)
            for _ in range(300):
                if session.is_game_over():
                    assert not session.has_valid_moves()
                    break
                move = session.get_valid_moves()[0]
                assert session.try_place(*move).success
            assert session.score % 100 == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
