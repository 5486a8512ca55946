"""
key_value_store.py
-------------------
Persistence for suggestion state, behind a minimal key-value interface.

The detector never touches storage. Callers inject a KeyValueStore into
PatternRepository (or the pipeline):

    - InMemoryKeyValueStore: process-local dict. Tests and embedding.
    - JsonFileKeyValueStore: one JSON document on local disk, rewritten on
      every set/merge.
"""

import copy
import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping

from store.pattern_state import PatternState
from config.config_loader import get_storage_config

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """
    Abstract key-value store.

    Subclasses implement _read() and _write(). get/set/merge are built on
    top of them.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Returns a deep copy of the stored value, or default."""
        data = self._read()
        if key not in data:
            return default
        return copy.deepcopy(data[key])

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = copy.deepcopy(value)
        self._write(data)

    def merge(self, key: str, values: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Shallow-merge a mapping into the dict stored under key.

        Raises:
            TypeError: If the existing value under key is not a dict.
        """
        data = self._read()
        current = data.get(key, {})
        if not isinstance(current, dict):
            raise TypeError(f"Cannot merge into non-dict value stored under '{key}'")
        merged = {**current, **copy.deepcopy(dict(values))}
        data[key] = merged
        self._write(data)
        return copy.deepcopy(merged)

    # -------------------------------------------------------------------------
    # ABSTRACT METHODS
    # -------------------------------------------------------------------------

    @abstractmethod
    def _read(self) -> Dict[str, Any]:
        """Returns the whole store as a dict the caller may modify."""
        ...

    @abstractmethod
    def _write(self, data: Dict[str, Any]) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed store."""

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._data: Dict[str, Any] = copy.deepcopy(dict(initial or {}))

    def _read(self) -> Dict[str, Any]:
        return self._data

    def _write(self, data: Dict[str, Any]) -> None:
        self._data = data


class JsonFileKeyValueStore(KeyValueStore):
    """Single JSON document on disk. A missing file reads as an empty store."""

    def __init__(self, path: str | None = None):
        self.path = path or get_storage_config()["default_state_path"]

    def _read(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, data: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def __repr__(self) -> str:
        return f"JsonFileKeyValueStore(path={self.path!r})"


class PatternRepository:
    """Loads and saves PatternState under a single store key."""

    def __init__(self, store: KeyValueStore, key: str | None = None):
        self.store = store
        self.key = key or get_storage_config()["patterns_key"]

    def load(self) -> PatternState:
        data = self.store.get(self.key)
        if data is None:
            return PatternState()
        return PatternState.from_dict(data)

    def save(self, state: PatternState) -> None:
        self.store.set(self.key, state.to_dict())
        logger.debug(f"Saved {len(state.suggestions)} suggestions under '{self.key}'.")
