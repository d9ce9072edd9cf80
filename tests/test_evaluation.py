"""
Tests for the auto-assist evaluation script (evaluation.py)
"""

import os
import sys
from unittest.mock import patch

import pytest

# Import the evaluation script from the repository root
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from evaluation import EpisodeResult, evaluate, main, play_episode, summarize


class TestPlayEpisode:
    """Test playing a single game with the assist player"""

    def test_episode_finishes(self):
        result = play_episode('easy', lives=3, seed=0)

        assert result.steps > 0
        assert 0.0 < result.open_fraction <= 1.0
        assert 0 <= result.lives_lost <= 3
        assert result.certain_moves + result.guesses == result.steps

    def test_same_seed_same_result(self):
        assert play_episode('easy', lives=1, seed=5) == play_episode('easy', lives=1, seed=5)

    def test_first_move_is_a_guess(self):
        result = play_episode('easy', lives=3, seed=1, max_steps=1)

        assert result.steps == 1
        assert result.guesses == 1
        assert result.certain_moves == 0
        assert result.lives_lost == 0

    def test_win_means_board_cleared(self):
        for seed in range(5):
            result = play_episode('easy', lives=3, seed=seed)
            if result.won:
                assert result.open_fraction == 1.0
                assert result.lives_lost < 3


class TestSummarize:
    """Test aggregate statistics"""

    def test_summary_values(self):
        results = [
            EpisodeResult(won=True, steps=10, certain_moves=8, guesses=2, lives_lost=0,
                          open_fraction=1.0),
            EpisodeResult(won=False, steps=5, certain_moves=2, guesses=3, lives_lost=3,
                          open_fraction=0.5),
        ]

        summary = summarize(results)

        assert summary['games'] == 2
        assert summary['win_rate'] == pytest.approx(0.5)
        assert summary['mean_open_fraction'] == pytest.approx(0.75)
        assert summary['mean_guesses'] == pytest.approx(2.5)
        assert summary['mean_lives_lost'] == pytest.approx(1.5)
        assert summary['certain_move_share'] == pytest.approx(10 / 15)

    def test_empty_results(self):
        summary = summarize([])
        assert summary['games'] == 0
        assert summary['win_rate'] == 0.0
        assert summary['certain_move_share'] == 0.0


class TestMain:
    """Test the command line entry point"""

    def test_evaluate_runs_requested_episodes(self, capsys):
        results = evaluate('easy', episodes=3, lives=3, seed=0)
        assert len(results) == 3
        assert "3/3 games" in capsys.readouterr().out

    def test_main_prints_summary(self, capsys):
        assert main(['--episodes', '2', '--seed', '3']) == 0
        assert "Win rate:" in capsys.readouterr().out

    def test_main_rejects_bad_counts(self, capsys):
        assert main(['--episodes', '0']) == 1

    def test_main_plots(self, tmp_path):
        with patch('evaluation.plot_results') as mock_plot:
            main(['--episodes', '1', '--plot', str(tmp_path / 'out.png')])
        mock_plot.assert_called_once()

    def test_plot_written(self, tmp_path):
        from evaluation import plot_results

        results = [play_episode('easy', lives=3, seed=s) for s in range(3)]
        path = tmp_path / 'plot.png'

        plot_results(results, 'easy', str(path))

        assert path.exists()
