"""
Pytest configuration and shared fixtures
"""

from dataclasses import replace

import pytest

from game.board import Board, Cell, calculate_adjacent_counts, count_mines
from game.engine import count_remaining_mines
from game.session import GameSession, GameStatus


def build_board(layout, opened=(), flagged=()):
    """
    Board from rows of text: '*' is a mine, anything else is safe.
    opened / flagged are iterables of (x, y).
    """
    rows = [[Cell(x, y, is_mine=(ch == '*')) for x, ch in enumerate(line)]
            for y, line in enumerate(layout)]
    board = calculate_adjacent_counts(Board(rows))
    for x, y in opened:
        board.rows[y][x].is_open = True
    for x, y in flagged:
        board.rows[y][x].is_flagged = True
    return board


class FakeClock:
    """Manually advanced replacement for time.time"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def advance(self, seconds: float):
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def make_board():
    return build_board


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    """Easy session on a fake clock"""
    return GameSession('easy', clock=clock)


@pytest.fixture
def start_game(clock):
    """
    Put a session into PLAYING on a known board, as if the first click had
    already placed these mines
    """
    def _start(session, board, lives=None):
        session.state = replace(
            session.state,
            board=board,
            status=GameStatus.PLAYING,
            started_at=clock(),
            lives=session.state.lives if lives is None else lives,
            remaining_mines=count_remaining_mines(board, count_mines(board)),
        )
        return session
    return _start
