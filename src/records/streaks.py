"""
Win/lose streaks per difficulty
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from game.difficulties import DIFFICULTIES
from .storage import JsonFileStore, default_data_file


WIN = "win"
LOSE = "lose"
RESULTS = (WIN, LOSE)


@dataclass(frozen=True)
class Streak:
    kind: Optional[str] = None
    count: int = 0

    def describe(self) -> str:
        if self.kind is None or self.count == 0:
            return "no streak"
        label = "wins" if self.kind == WIN else "losses"
        return f"{self.count} {label} in a row"


def _empty_streaks() -> Dict[str, Dict[str, Any]]:
    return {name: {"kind": None, "count": 0} for name in DIFFICULTIES}


class StreakStore(JsonFileStore):
    """Current streak for every difficulty"""

    def __init__(self, data_file: Optional[str] = None):
        super().__init__(data_file or default_data_file("streaks.json"), _empty_streaks)

    def normalize(self, raw: Any) -> Dict[str, Dict[str, Any]]:
        data = _empty_streaks()
        if not isinstance(raw, dict):
            return data
        for difficulty in data:
            item = raw.get(difficulty)
            if not isinstance(item, dict):
                continue
            count = item.get("count")
            count = int(count) if isinstance(count, (int, float)) and count > 0 else 0
            kind = item.get("kind") if item.get("kind") in RESULTS else None
            data[difficulty] = {"kind": kind if count > 0 else None, "count": count}
        return data

    def get(self, difficulty: str) -> Streak:
        item = self.data.get(difficulty) or {}
        return Streak(item.get("kind"), item.get("count", 0))

    def update(self, difficulty: str, result: str) -> Streak:
        """Extend the streak when the result repeats, otherwise start a new one"""
        if result not in RESULTS:
            raise ValueError(f"result must be one of {RESULTS}, got {result!r}")
        current = self.get(difficulty)
        count = current.count + 1 if current.kind == result else 1
        self.data[difficulty] = {"kind": result, "count": count}
        self._save_data()
        return self.get(difficulty)

    def break_win_streak(self, difficulty: str) -> Streak:
        """Abandoning a game ends a running win streak"""
        current = self.get(difficulty)
        if current.kind == WIN and current.count > 0:
            self.data[difficulty] = {"kind": None, "count": 0}
            self._save_data()
        return self.get(difficulty)
