"""
Records package initialization
Host-side persistence for leaderboard, streaks and preferences
"""

from .leaderboard import LeaderboardEntry, LeaderboardStore
from .streaks import Streak, StreakStore
from .preferences import PreferencesStore
from .recorder import GameRecorder

__all__ = [
    'LeaderboardEntry', 'LeaderboardStore',
    'Streak', 'StreakStore',
    'PreferencesStore',
    'GameRecorder',
]
