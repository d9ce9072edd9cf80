"""
Persisted player preferences
Theme, assist and sound settings plus the last difficulty played
"""

from dataclasses import asdict, fields
from typing import Any, Dict, Optional

from game.difficulties import DEFAULT_DIFFICULTY, DIFFICULTIES
from game.session import Preferences
from .storage import JsonFileStore, default_data_file


def _default_data() -> Dict[str, Any]:
    return {
        "last_difficulty": DEFAULT_DIFFICULTY,
        "player_name": "Player",
        "preferences": asdict(Preferences()),
    }


class PreferencesStore(JsonFileStore):
    """Loads and saves Preferences between sessions"""

    def __init__(self, data_file: Optional[str] = None):
        super().__init__(data_file or default_data_file("preferences.json"), _default_data)

    def normalize(self, raw: Any) -> Dict[str, Any]:
        data = _default_data()
        if not isinstance(raw, dict):
            return data
        if raw.get("last_difficulty") in DIFFICULTIES:
            data["last_difficulty"] = raw["last_difficulty"]
        if isinstance(raw.get("player_name"), str):
            data["player_name"] = raw["player_name"]
        saved = raw.get("preferences")
        if isinstance(saved, dict):
            known = {f.name for f in fields(Preferences)}
            data["preferences"].update({k: v for k, v in saved.items() if k in known})
        return data

    def load(self) -> Preferences:
        try:
            return Preferences(**self.data["preferences"])
        except TypeError as e:
            print(f"Error reading preferences: {e}")
            return Preferences()

    def save(self, preferences: Preferences):
        self.data["preferences"] = asdict(preferences)
        self._save_data()

    def get_last_difficulty(self) -> str:
        """Get the last played difficulty"""
        return self.data.get("last_difficulty", DEFAULT_DIFFICULTY)

    def set_last_difficulty(self, difficulty: str):
        """Set the last played difficulty"""
        self.data["last_difficulty"] = difficulty
        self._save_data()

    def get_player_name(self) -> str:
        return self.data.get("player_name", "Player")

    def set_player_name(self, name: str):
        self.data["player_name"] = name
        self._save_data()
