"""
Integration tests for complete Tiger Sweeper games
Tests interaction between the session, inference, records and the terminal front end
"""

import random

import pytest
from ai.inference import MoveKind, get_assist_move
from game.session import GameSession, GameStatus
from main import handle_command, render
from records import GameRecorder, LeaderboardStore, StreakStore


def play_out(session, max_steps=2000):
    """Play the current game to the end with guessing allowed"""
    for _ in range(max_steps):
        if session.state.status.is_terminal:
            break
        move = get_assist_move(session.state, allow_guess=True)
        if move is None:
            break
        if move.kind is MoveKind.FLAG:
            session.toggle_flag(move.x, move.y)
        else:
            session.open(move.x, move.y)
    return session.state


class TestGameIntegration:
    """Integration tests for complete game scenarios"""

    @pytest.mark.parametrize("seed", range(5))
    def test_games_always_finish(self, seed):
        session = GameSession('easy', rng=random.Random(seed))

        state = play_out(session)

        assert state.status in (GameStatus.WON, GameStatus.LOST)
        if state.status == GameStatus.LOST:
            assert state.lives == 0
            assert all(c.is_open for c in state.board.cells() if c.is_mine)
        else:
            assert state.lives > 0

    def test_undo_everything_returns_to_idle(self):
        session = GameSession('easy', rng=random.Random(2))
        play_out(session, max_steps=15)

        while session.state.can_undo:
            session.undo()

        assert session.state.status == GameStatus.IDLE
        assert not any(c.is_open or c.is_flagged for c in session.state.board.cells())
        assert session.state.lives == 3

    def test_recorded_games(self, tmp_path):
        leaderboard = LeaderboardStore(str(tmp_path / "leaderboard.json"))
        streaks = StreakStore(str(tmp_path / "streaks.json"))
        session = GameSession('easy', rng=random.Random(4))
        GameRecorder(leaderboard, streaks).attach(session)

        wins = 0
        for _ in range(3):
            if play_out(session).status == GameStatus.WON:
                wins += 1
            session.reset()

        assert len(leaderboard.entries('easy')) == wins
        assert all(e.auto_solve_used is False for e in leaderboard.entries())


class TestTerminalFrontEnd:
    """Tests for the text front end in main.py"""

    @pytest.fixture
    def leaderboard(self, tmp_path):
        return LeaderboardStore(str(tmp_path / "leaderboard.json"))

    def test_render_idle_board(self, session):
        text = render(session.state, {})
        assert "status: idle" in text
        assert "mines left: 10" in text
        assert text.count("#") == 81

    def test_render_marks(self, session, start_game, make_board):
        start_game(session, make_board(["*..", "...", "..."], opened=[(1, 1)], flagged=[(2, 2)]))
        session.hint()

        text = render(session.state, {(2, 1): 14})

        assert "F" in text
        assert "14%" in text
        assert "hint:" in text

    def test_commands(self, session, leaderboard):
        assert handle_command(session, leaderboard, "o 4 4") is True
        assert session.state.status != GameStatus.IDLE

        handle_command(session, leaderboard, "u")
        assert session.state.status == GameStatus.IDLE

        handle_command(session, leaderboard, "f 0,0")
        assert session.state.board.get_cell(0, 0).is_flagged

        handle_command(session, leaderboard, "r hard")
        assert session.state.difficulty == 'hard'

        handle_command(session, leaderboard, "s")
        assert session.state.preferences.show_probabilities is True

    def test_bad_coordinates(self, session, leaderboard, capsys):
        handle_command(session, leaderboard, "o a b")
        assert "Coordinates must be integers." in capsys.readouterr().out

    def test_unknown_command_prints_help(self, session, leaderboard, capsys):
        handle_command(session, leaderboard, "dance")
        assert "Commands" in capsys.readouterr().out

    def test_quit(self, session, leaderboard):
        assert handle_command(session, leaderboard, "q") is False
        assert handle_command(session, leaderboard, "") is True

    def test_leaderboard_command(self, session, leaderboard, capsys):
        handle_command(session, leaderboard, "l")
        assert "No times recorded yet" in capsys.readouterr().out
