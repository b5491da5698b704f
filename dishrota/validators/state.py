"""State document validation against JSON Schema."""

import json
from functools import lru_cache
from pathlib import Path

import jsonschema

SCHEMA_PATH = Path(__file__).parent.parent / "contracts" / "state_schema.json"


@lru_cache(maxsize=1)
def _load_schema() -> dict:
    """Load the state document JSON schema."""
    with open(SCHEMA_PATH) as f:
        return json.load(f)


def validate_document(document: object) -> tuple[bool, list[str]]:
    """
    Validate a raw stored document before it is turned into a state model.

    Args:
        document: The decoded JSON value read from storage.

    Returns:
        A tuple of (is_valid, list_of_errors).
        If valid, errors list is empty.
    """
    errors: list[str] = []

    try:
        schema = _load_schema()
    except FileNotFoundError:
        return (False, [f"Schema file not found: {SCHEMA_PATH}"])
    except json.JSONDecodeError as e:
        return (False, [f"Schema JSON decode error: {e}"])

    validator = jsonschema.Draft202012Validator(schema)
    errors_found = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.path])
    for error in errors_found:
        location = "/".join(str(part) for part in error.path) or "<root>"
        errors.append(f"Schema validation error at {location}: {error.message}")

    if isinstance(document, dict):
        if "roster" not in document and "roommates" not in document:
            errors.append("Document has no roster (expected 'roster' or 'roommates')")

        # A history entry needs both roles under either the current or legacy key
        for index, entry in enumerate(document.get("history") or []):
            if not isinstance(entry, dict):
                continue
            if "ranBy" not in entry and "runBy" not in entry:
                errors.append(f"History entry {index} has no runner")
            if "unloadedBy" not in entry and "unloadBy" not in entry:
                errors.append(f"History entry {index} has no unloader")

    return (len(errors) == 0, errors)
