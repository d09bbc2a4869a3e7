"""
State store and configuration provider used by the refs API.

Key components:
- Store: Application state with atomic, shallow-merging updates
- ConfigProvider: Refs configuration, validated against refs_config.schema.json
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import jsonschema

from storytree.schemas import load_schema

logger = logging.getLogger(__name__)


class Store:
    """
    In-memory application state.

    Every set_state() builds a new state dict and swaps it in under a lock,
    so readers only ever see complete states.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._state: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get_state(self) -> Dict[str, Any]:
        """Return the current state (treat as read-only)."""
        return self._state

    def set_state(self, partial: Dict[str, Any]) -> Dict[str, Any]:
        """Merge top-level keys of `partial` into a new state and swap it in."""
        with self._lock:
            self._state = {**self._state, **partial}
            return self._state

    def update_state(self, fn: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Dict[str, Any]:
        """Merge fn(current state) into a new state while holding the lock.

        Use this for read-modify-write updates so concurrent writers don't
        overwrite each other's changes.
        """
        with self._lock:
            self._state = {**self._state, **fn(self._state)}
            return self._state


class ConfigProvider:
    """
    Holds the configuration the refs API reads.

    The configuration is a dict such as:
        {"refs": {"storybookjs": "https://example.com/storybook/"}, "mapper": callable}

    `refs` is validated on construction; `mapper` can only be supplied from Python.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        schema_view = {key: value for key, value in config.items() if key != 'mapper'}
        jsonschema.validate(instance=schema_view, schema=load_schema('refs_config'))

        mapper = config.get('mapper')
        if mapper is not None and not callable(mapper):
            raise TypeError(f"mapper must be callable, got {type(mapper).__name__}")

        self._config = config

    @classmethod
    def from_file(cls, config_path: Path, mapper: Optional[Callable] = None) -> 'ConfigProvider':
        """Load configuration from a JSON file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            json.JSONDecodeError: If the file is not valid JSON
            jsonschema.ValidationError: If the refs section is malformed
        """
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)

        if mapper is not None:
            config['mapper'] = mapper

        logger.info(f"Loaded {len(config.get('refs', {}))} refs from {config_path}")
        return cls(config)

    def get_config(self) -> Dict[str, Any]:
        return self._config
