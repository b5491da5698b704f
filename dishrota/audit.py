"""Audit trail for roster, PIN and load operations.

One line per state-changing operation:

    2026-02-01T21:30:00Z [COMPLETE] kind=night ran_by=Alex unloaded_by=Brooke

Operations: ROSTER, REORDER, PAUSE, UNPAUSE, PIN_SET, PIN_CLEAR, COMPLETE,
DENIED, RESET. PIN values are never written.
"""

from datetime import datetime, timezone
from pathlib import Path

AuditValue = str | int | float | bool | None


def _quote(value: AuditValue) -> str:
    text = str(value)
    if not text or any(ch in text for ch in ' ="'):
        return '"' + text.replace('"', '\\"') + '"'
    return text


def format_line(operation: str, when: datetime, fields: dict[str, AuditValue]) -> str:
    """Render one audit line, skipping fields whose value is None."""
    stamp = when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    pairs = [f"{key}={_quote(value)}" for key, value in fields.items() if value is not None]
    return " ".join([stamp, f"[{operation}]", *pairs])


class AuditLogger:
    """Appends audit lines to a file, creating it on first use."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path

    def log(self, operation: str, **fields: AuditValue) -> None:
        """Append an audit entry.

        Args:
            operation: Operation name, e.g. COMPLETE or PIN_SET.
            **fields: Key-value pairs for the entry. Roster lists should be
                      joined by the caller.
        """
        line = format_line(operation, datetime.now(timezone.utc), fields)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "a") as f:
            f.write(line + "\n")

    def tail(self, limit: int = 20) -> list[str]:
        """Return the last ``limit`` lines, oldest first."""
        if not self.log_path.exists():
            return []
        with open(self.log_path) as f:
            lines = [line.rstrip("\n") for line in f if line.strip()]
        return lines[-limit:] if limit > 0 else []
