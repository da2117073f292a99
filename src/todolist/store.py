"""
String key-value stores holding one preference namespace each.

`FilePreferences` keeps a namespace as a single JSON object on disk:
{directory}/{namespace}.json
"""

from __future__ import annotations

import json
from contextlib import suppress
from pathlib import Path
from typing import Protocol

from todolist.exceptions import StoreError
from todolist.logging_utils import logger


class KeyValueStore(Protocol):
    def get_string(self, key: str, default: str | None = None) -> str | None: ...

    def put_string(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def contains(self, key: str) -> bool: ...


class InMemoryStore:
    """Dict backed store, lost when the process ends"""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def get_string(self, key: str, default: str | None = None) -> str | None:
        return self._values.get(key, default)

    def put_string(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._values


class FilePreferences:
    """
    A named preference namespace persisted as a JSON object file.

    Reads go to disk every time, writes rewrite the whole file through a
    temporary file followed by a rename.
    """

    def __init__(self, directory: Path | str, namespace: str) -> None:
        assert namespace, "Namespace must not be empty."
        self.directory = Path(directory).expanduser()
        self.namespace = namespace

    @property
    def path(self) -> Path:
        return self.directory / f"{self.namespace}.json"

    def get_string(self, key: str, default: str | None = None) -> str | None:
        value = self._read().get(key, default)
        if value is not None and not isinstance(value, str):
            raise StoreError(f"Value under '{key}' in {self.path} is not a string.")
        return value

    def put_string(self, key: str, value: str) -> None:
        values = self._read(replace_corrupt=True)
        values[key] = value
        self._write(values)

    def remove(self, key: str) -> None:
        values = self._read(replace_corrupt=True)
        if values.pop(key, None) is not None:
            self._write(values)

    def contains(self, key: str) -> bool:
        return key in self._read()

    def _read(self, *, replace_corrupt: bool = False) -> dict[str, object]:
        """
        Parse the namespace file. A missing file is an empty namespace.

        With `replace_corrupt`, a file that is not a JSON object is read as empty so
        the next write replaces it. I/O errors are always raised.
        """
        if not self.path.exists():
            return {}

        try:
            with self.path.open(encoding="utf-8") as f:
                values = json.load(f)
        except OSError as e:
            raise StoreError(f"Could not read preferences from {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            if not replace_corrupt:
                raise StoreError(f"Could not read preferences from {self.path}: {e}") from e
            values = None

        if not isinstance(values, dict):
            if not replace_corrupt:
                raise StoreError(f"Preferences file {self.path} does not hold a JSON object.")
            logger.warning(f"Replacing unreadable preferences file {self.path}.")
            return {}
        return values

    def _write(self, values: dict[str, object]) -> None:
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(values, f, indent=2, ensure_ascii=False)
            temp_path.replace(self.path)
        except OSError as e:
            with suppress(OSError):
                temp_path.unlink(missing_ok=True)
            raise StoreError(f"Could not write preferences to {self.path}: {e}") from e

        logger.debug(f"Wrote {len(values)} key(s) to {self.path}.")
