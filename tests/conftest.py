"""Pytest fixtures for dishrota tests."""

import json
from pathlib import Path

import pytest

from dishrota.audit import AuditLogger
from dishrota.coordinator import ActionCoordinator
from dishrota.models.state import HouseholdState
from dishrota.store import STORAGE_KEY, MemoryBackend, StateStore


@pytest.fixture
def state() -> HouseholdState:
    """Four-person household with no PINs, credits or history."""
    return HouseholdState(
        roster=["A", "B", "C", "D"],
        queue=["A", "B", "C", "D"],
        credits={"A": 0.0, "B": 0.0, "C": 0.0, "D": 0.0},
        pins={"A": None, "B": None, "C": None, "D": None},
    )


@pytest.fixture
def backend(state: HouseholdState) -> MemoryBackend:
    """In-memory backend pre-loaded with the four-person household."""
    return MemoryBackend({STORAGE_KEY: state.to_document()})


@pytest.fixture
def audit_path(tmp_path: Path) -> Path:
    return tmp_path / "audit.log"


@pytest.fixture
def coordinator(backend: MemoryBackend, audit_path: Path) -> ActionCoordinator:
    """Coordinator over the in-memory household with an audit log in tmp_path."""
    return ActionCoordinator(StateStore(backend), AuditLogger(audit_path))


@pytest.fixture
def state_file(tmp_path: Path, state: HouseholdState) -> Path:
    """A state JSON file on disk holding the four-person household."""
    path = tmp_path / "state.json"
    path.write_text(json.dumps({STORAGE_KEY: state.to_document()}, indent=2))
    return path


@pytest.fixture
def legacy_document() -> dict:
    """A document as written by the original browser app (v2 with PINs)."""
    return {
        "roommates": ["Alex", "Brooke", "Casey"],
        "queue": ["Brooke", "Alex"],
        "paused": {"Casey": True, "Alex": False},
        "credits": {"Alex": 1.5, "Brooke": 0.5},
        "history": [
            {
                "id": "k3j2h1",
                "when": "2025-09-01T21:30:00.000Z",
                "kind": "3pm",
                "runBy": "Alex",
                "unloadBy": "Brooke",
                "runCredit": 0.5,
                "unloadCredit": 0.5,
            }
        ],
        "pins": {"Alex": "1234", "Brooke": ""},
    }
