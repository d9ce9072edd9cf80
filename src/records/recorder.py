"""
Session observer that keeps the record stores up to date
The session never calls the stores itself; it only reports state changes.
"""

from typing import Callable, Optional

from game.session import GameSession, GameState, GameStatus
from .leaderboard import LeaderboardEntry, LeaderboardStore
from .preferences import PreferencesStore
from .streaks import LOSE, WIN, StreakStore


class GameRecorder:
    """
    Reacts to session transitions:

    - game won: leaderboard entry plus win streak
    - game lost: lose streak
    - game in progress abandoned for a new one: win streak broken
    - preferences or difficulty changed: saved for the next session

    Each game is recorded once, with its first result. Undoing out of
    won/lost and finishing again changes nothing.
    """

    def __init__(self, leaderboard: LeaderboardStore, streaks: StreakStore,
                 preferences: Optional[PreferencesStore] = None):
        self.leaderboard = leaderboard
        self.streaks = streaks
        self.preferences = preferences
        self.last_rank: Optional[int] = None
        # set once the current game has a stored result
        self._recorded = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    def attach(self, session: GameSession) -> 'GameRecorder':
        self.detach()
        self._recorded = session.state.status.is_terminal
        self._unsubscribe = session.subscribe(self)
        return self

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __call__(self, previous: GameState, current: GameState):
        if previous.status is not current.status:
            self._on_status_change(previous, current)

        if self.preferences is not None:
            if previous.preferences != current.preferences:
                self.preferences.save(current.preferences)
            if previous.difficulty != current.difficulty:
                self.preferences.set_last_difficulty(current.difficulty)

    def _on_status_change(self, previous: GameState, current: GameState):
        if current.status is GameStatus.IDLE:
            if previous.status is GameStatus.PLAYING and not self._recorded:
                self.streaks.break_win_streak(previous.difficulty)
            self._recorded = False
            return
        if self._recorded or not current.status.is_terminal:
            return

        self._recorded = True
        if current.status is GameStatus.WON:
            entry = LeaderboardEntry(
                difficulty=current.difficulty,
                time_seconds=current.timer_seconds,
                lives=current.lives,
                assists=current.assist_count,
                auto_solve_used=current.auto_solve_used,
                probability_assist_used=current.probability_assist_used,
                player_name=self.preferences.get_player_name() if self.preferences else "Player",
            )
            self.last_rank = self.leaderboard.append(entry)
            self.streaks.update(current.difficulty, WIN)
        elif current.status is GameStatus.LOST:
            self.last_rank = None
            self.streaks.update(current.difficulty, LOSE)
