"""
Tiger Sweeper Leaderboard
Best finished games, ranked per difficulty with a penalty for assisted wins
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from game.difficulties import difficulty_rank
from .storage import JsonFileStore, default_data_file


MAX_ENTRIES = 90


@dataclass
class LeaderboardEntry:
    """Represents a single leaderboard entry"""
    difficulty: str
    time_seconds: int
    lives: int = 0
    assists: int = 0
    auto_solve_used: bool = False
    probability_assist_used: bool = False
    player_name: str = "Player"
    created_at: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def assist_penalty(self) -> int:
        """Probability overlay/hints weigh more than auto-solving"""
        if self.probability_assist_used:
            return 2
        if self.auto_solve_used:
            return 1
        return 0

    def sort_key(self) -> tuple:
        return (difficulty_rank(self.difficulty), self.assist_penalty, -self.lives,
                self.time_seconds, self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LeaderboardEntry':
        """Create from dictionary, defaulting fields older files may lack"""
        kwargs = dict(
            difficulty=str(data["difficulty"]),
            time_seconds=int(data.get("time_seconds", 0)),
            lives=int(data.get("lives", 0)),
            assists=int(data.get("assists", 0)),
            auto_solve_used=bool(data.get("auto_solve_used", False)),
            probability_assist_used=bool(data.get("probability_assist_used", False)),
            player_name=str(data.get("player_name", "Player")),
        )
        if "created_at" in data:
            kwargs["created_at"] = float(data["created_at"])
        if "id" in data:
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def format_time(self) -> str:
        """Format time as MM:SS"""
        minutes = self.time_seconds // 60
        seconds = self.time_seconds % 60
        return f"{minutes:02d}:{seconds:02d}"

    def format_date(self) -> str:
        return datetime.fromtimestamp(self.created_at).strftime("%Y-%m-%d %H:%M")


def sort_entries(entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
    return sorted(entries, key=LeaderboardEntry.sort_key)


class LeaderboardStore(JsonFileStore):
    """Manages leaderboard data and persistence"""

    def __init__(self, data_file: Optional[str] = None):
        super().__init__(data_file or default_data_file("leaderboard.json"), list)

    def normalize(self, raw: Any) -> List[Dict[str, Any]]:
        if not isinstance(raw, list):
            return []
        entries = []
        for item in raw:
            try:
                entries.append(LeaderboardEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                continue
        return [e.to_dict() for e in sort_entries(entries)]

    def entries(self, difficulty: Optional[str] = None) -> List[LeaderboardEntry]:
        """All entries in rank order, optionally for one difficulty"""
        entries = [LeaderboardEntry.from_dict(item) for item in self.data]
        if difficulty is not None:
            entries = [e for e in entries if e.difficulty == difficulty]
        return entries

    def append(self, entry: LeaderboardEntry) -> Optional[int]:
        """
        Add a finished game

        Returns:
            The entry's 1-based rank within its difficulty, or None when it
            fell outside the kept entries
        """
        ranked = sort_entries(self.entries() + [entry])[:MAX_ENTRIES]
        self.data = [e.to_dict() for e in ranked]
        self._save_data()

        same_difficulty = [e for e in ranked if e.difficulty == entry.difficulty]
        for rank, kept in enumerate(same_difficulty, 1):
            if kept.id == entry.id:
                return rank
        return None

    def clear(self):
        self.data = []
        self._save_data()
