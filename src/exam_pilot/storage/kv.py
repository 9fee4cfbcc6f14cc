"""Local key-value store (JSON file per key + fcntl.flock + atomic write).

Each key lives in its own file so keys are read and written independently;
any subset of them may be absent.
"""

import fcntl
import json
import os
import tempfile
from pathlib import Path
from typing import Any

TOKEN_KEY = "token"
PROFILE_KEY = "profile"
ACCOUNTS_KEY = "accounts"
HISTORY_KEY = "history"
LANGUAGE_KEY = "lang"


class KeyValueStore:
    """Durable JSON key-value store rooted at a directory.

    Args:
        root: Directory holding one ``<key>.json`` file per key.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def _lock_path(self, key: str) -> Path:
        return self.root / f"{key}.json.lock"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value for key, or default when absent.

        Raises:
            json.JSONDecodeError: The stored file is not valid JSON.
        """
        path = self._path(key)
        if not path.exists():
            return default
        with open(path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            data = json.load(f)
            fcntl.flock(f, fcntl.LOCK_UN)
        return data

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        with open(self._lock_path(key), "w") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            with tempfile.NamedTemporaryFile(
                "w", dir=self.root, delete=False, suffix=".json", encoding="utf-8"
            ) as tmp:
                json.dump(value, tmp, default=str, ensure_ascii=False)
            os.replace(tmp.name, path)

    def delete(self, key: str) -> None:
        """Remove key; a missing key is not an error."""
        with open(self._lock_path(key), "w") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            self._path(key).unlink(missing_ok=True)

    def __contains__(self, key: str) -> bool:
        return self._path(key).exists()
