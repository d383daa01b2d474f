# data/repository.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

SESSION_FILE = "session.json"
TOKEN_KEY = "token"


class DataRepository:
    # Durable local storage for client state. The only value kept today is
    # the bearer credential, stored under a fixed key so it survives restarts.

    def __init__(self, storage_dir: str | Path = "data/storage"):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _file_path(self, filename: str) -> Path:
        return self.storage_dir / filename

    def _read_json(self, filename: str) -> dict:
        # Load JSON from disk. Missing, empty or unreadable files yield {}.
        path = self._file_path(filename)
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read().strip()
                if text == "":
                    return {}
                data = json.loads(text)
        except (OSError, ValueError) as e:
            logger.warning("Unreadable %s, treating as empty: %s", path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_json(self, filename: str, data) -> None:
        path = self._file_path(filename)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_credential(self) -> str | None:
        token = self._read_json(SESSION_FILE).get(TOKEN_KEY)
        if isinstance(token, str) and token:
            return token
        return None

    def save_credential(self, token: str) -> None:
        data = self._read_json(SESSION_FILE)
        data[TOKEN_KEY] = token
        self._write_json(SESSION_FILE, data)

    def clear_credential(self) -> None:
        data = self._read_json(SESSION_FILE)
        if TOKEN_KEY in data:
            del data[TOKEN_KEY]
            self._write_json(SESSION_FILE, data)
