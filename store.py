"""store.py — Key-value persistence with JSON-serialized values."""

import json
import os
import tempfile
from pathlib import Path


class JsonFileStore:
    """
    All keys live in one JSON object on disk, rewritten on every change.

    Writes go to a temp file in the same directory and replace the store in
    one step. A store file that exists but cannot be parsed is never
    overwritten: reads see it as empty and writes fail.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict | None:
        """Stored data, {} if there is no file yet, None if the file is unreadable."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            print(f"  Warning: could not read store {self.path}: {e}")
            return None
        if not isinstance(data, dict):
            print(f"  Warning: store {self.path} is not a JSON object")
            return None
        return data

    def _write(self, data: dict) -> bool:
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w", encoding="utf-8", suffix=".tmp", delete=False, dir=self.path.parent
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(json.dumps(data, ensure_ascii=False, indent=2))
            os.replace(tmp_path, self.path)
        except OSError as e:
            print(f"  Warning: could not write store {self.path}: {e}")
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            return False
        return True

    def _refuse(self) -> bool:
        print(f"  Warning: not overwriting unreadable store {self.path}")
        return False

    def get(self, key: str):
        data = self._read()
        return data.get(key) if data else None

    def set(self, key: str, value) -> bool:
        data = self._read()
        if data is None:
            return self._refuse()
        data[key] = value
        return self._write(data)

    def remove(self, key: str) -> bool:
        data = self._read()
        if data is None:
            return self._refuse()
        if key not in data:
            return True
        del data[key]
        return self._write(data)


class MemoryStore:
    """In-process store with the same interface, values kept as JSON text."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str):
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    def set(self, key: str, value) -> bool:
        self._data[key] = json.dumps(value, ensure_ascii=False)
        return True

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True
