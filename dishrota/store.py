"""Persistent state store.

The whole household document lives under a single key of a key-value
backend and is always read and written as a unit.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import pydantic

from .errors import DeserializationFailure, PersistenceFailure
from .models.history import HISTORY_LIMIT
from .models.state import HouseholdState, default_state
from .rotation import normalize_names
from .validators.state import validate_document

logger = logging.getLogger(__name__)

STORAGE_KEY = "dishwasher_app_state_v2_pins"


class KeyValueBackend(ABC):
    """Storage for JSON-compatible values by key."""

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the value stored under ``key`` or None if absent."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""


class MemoryBackend(KeyValueBackend):
    """Backend kept in a dict; nothing survives the process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self.values.get(key)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value


class JsonFileBackend(KeyValueBackend):
    """Backend stored as one JSON object in a file on this device."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable store file %s: %s", self.path, e)
            return {}
        except OSError as e:
            raise PersistenceFailure(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            logger.warning("Ignoring store file %s: top level is not an object", self.path)
            return {}
        return data

    def get(self, key: str) -> Any | None:
        return self._read_all().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceFailure(f"Cannot write {self.path}: {e}") from e


def repair(state: HouseholdState) -> HouseholdState:
    """Restore document invariants after loading.

    The queue becomes a permutation of the roster (active then paused),
    credits and pins are keyed by the roster, and the history is capped.
    The revision is left untouched.
    """
    roster = normalize_names(state.roster)
    if not roster:
        raise DeserializationFailure("Stored roster has no names")

    members = set(roster)
    paused = {name: True for name in roster if state.is_paused(name)}
    ordered = [name for name in normalize_names(state.queue) if name in members]
    ordered += [name for name in roster if name not in ordered]
    queue = [n for n in ordered if n not in paused] + [n for n in ordered if n in paused]

    return state.model_copy(
        update={
            "roster": roster,
            "queue": queue,
            "paused": paused,
            "credits": {name: state.credit_for(name) for name in roster},
            "pins": {name: state.pin_for(name) for name in roster},
            "history": state.history[:HISTORY_LIMIT],
        }
    )


def decode(document: Any) -> HouseholdState:
    """Turn a stored document into a state.

    Raises:
        DeserializationFailure: If the document does not describe a valid state.
    """
    is_valid, errors = validate_document(document)
    if not is_valid:
        raise DeserializationFailure("; ".join(errors))
    try:
        state = HouseholdState.model_validate(document)
    except pydantic.ValidationError as e:
        raise DeserializationFailure(str(e)) from e
    return repair(state)


class StateStore:
    """Loads and saves the household document under ``STORAGE_KEY``."""

    def __init__(self, backend: KeyValueBackend, key: str = STORAGE_KEY) -> None:
        self.backend = backend
        self.key = key

    @classmethod
    def at_path(cls, path: Path) -> "StateStore":
        return cls(JsonFileBackend(path))

    def load(self) -> HouseholdState:
        """Load the document, falling back to the default on absence or corruption."""
        document = self.backend.get(self.key)
        if document is None:
            logger.info("No stored state under %s, starting with defaults", self.key)
            return default_state()
        try:
            return decode(document)
        except DeserializationFailure as e:
            logger.warning("Stored state is unreadable, using defaults: %s", e)
            return default_state()

    def save(self, state: HouseholdState) -> None:
        """Write the whole document.

        Raises:
            PersistenceFailure: If the backend rejects the write.
        """
        try:
            self.backend.set(self.key, state.to_document())
        except PersistenceFailure:
            raise
        except OSError as e:
            raise PersistenceFailure(str(e)) from e
        logger.debug("Saved state revision %d", state.revision)
