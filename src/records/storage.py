"""
JSON file persistence shared by the record stores
Load failures fall back to defaults; save failures are reported and ignored
"""

import json
import os
from typing import Any, Callable, Optional


DATA_DIR_NAME = ".tiger-sweeper"


def default_data_file(filename: str) -> str:
    """Path of a data file under ~/.tiger-sweeper, creating the directory if needed"""
    data_dir = os.path.join(os.path.expanduser("~"), DATA_DIR_NAME)
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, filename)


class JsonFileStore:
    """Holds one JSON document in memory and mirrors it to disk"""

    def __init__(self, data_file: str, default_factory: Callable[[], Any]):
        self.data_file = data_file
        self._default_factory = default_factory
        self.data = self._load_data()

    def _load_data(self) -> Any:
        """Load data from file or create default"""
        try:
            if os.path.exists(self.data_file):
                with open(self.data_file, 'r') as f:
                    return self.normalize(json.load(f))
            return self._default_factory()
        except (json.JSONDecodeError, OSError) as e:
            print(f"Error loading {os.path.basename(self.data_file)}: {e}")
            return self._default_factory()

    def normalize(self, raw: Any) -> Any:
        """Repair a loaded document; subclasses drop or fix malformed entries"""
        return raw

    def _save_data(self) -> bool:
        """Save data to file"""
        try:
            directory: Optional[str] = os.path.dirname(self.data_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.data_file, 'w') as f:
                json.dump(self.data, f, indent=2)
            return True
        except OSError as e:
            print(f"Error saving {os.path.basename(self.data_file)}: {e}")
            return False
