"""Directory-backed store: one JSON file per key."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from regional_redlist.store.base import KeyValueStore, StoreRegistry

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@StoreRegistry.register("json")
class JsonFileStore(KeyValueStore):
    """Persist each key as ``<key>.json`` under *path*.

    Unreadable or malformed files are treated as absent.

    Parameters
    ----------
    path : str | Path
        Directory holding the JSON files. Created on first save.
    """

    name = "json"

    def __init__(self, path: str | Path = ".redlist", **_: Any) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _file_for(self, key: str) -> Path:
        return self._path / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def load(self, key: str) -> Any | None:
        file_path = self._file_for(key)
        if not file_path.exists():
            return None
        try:
            with open(file_path, encoding="utf-8") as fh:
                return json.load(fh)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed JSON in %s", file_path)
            return None

    def save(self, key: str, value: Any) -> None:
        self._path.mkdir(parents=True, exist_ok=True)
        file_path = self._file_for(key)
        file_path.write_text(json.dumps(value, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.debug("Wrote key %r to %s", key, file_path)

    def delete(self, key: str) -> None:
        self._file_for(key).unlink(missing_ok=True)
