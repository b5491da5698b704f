"""Daily load windows and the brunch buffer.

Times are local wall-clock times. A window covers ``start`` up to but not
including ``end``; a window without an end runs to midnight.
"""

from dataclasses import dataclass
from datetime import datetime, time


@dataclass(frozen=True)
class TimeWindow:
    label: str
    start: time
    end: time | None = None
    target: time | None = None
    note: str = ""

    def contains(self, moment: datetime | time) -> bool:
        clock = moment.time() if isinstance(moment, datetime) else moment
        if clock < self.start:
            return False
        return self.end is None or clock < self.end

    def describe(self) -> str:
        span = f"{self.start:%H:%M}-{self.end:%H:%M}" if self.end else f"after {self.start:%H:%M}"
        parts = [f"{self.label}: {span}"]
        if self.target is not None:
            parts.append(f"aim for {self.target:%H:%M}")
        if self.note:
            parts.append(self.note)
        return ", ".join(parts)


AFTERNOON_WINDOW = TimeWindow("3 PM load", start=time(14, 0), target=time(15, 0))
NIGHT_WINDOW = TimeWindow(
    "Night load", start=time(21, 0), end=time(23, 0), note="unload before bed"
)
BRUNCH_BUFFER = TimeWindow(
    "Brunch buffer", start=time(11, 0), end=time(14, 0), note="don't run the dishwasher"
)

# Keyed by load kind
LOAD_WINDOWS = {"afternoon": AFTERNOON_WINDOW, "night": NIGHT_WINDOW}


def local_now() -> datetime:
    return datetime.now().astimezone()


def in_brunch_buffer(now: datetime | time) -> bool:
    return BRUNCH_BUFFER.contains(now)


def brunch_warning(now: datetime | time) -> str | None:
    """Reminder to print when a load is recorded during the brunch buffer."""
    if not in_brunch_buffer(now):
        return None
    return (
        f"Warning: it is brunch buffer time "
        f"({BRUNCH_BUFFER.start:%H:%M}-{BRUNCH_BUFFER.end:%H:%M}); avoid running mid-brunch"
    )


def schedule_lines() -> list[str]:
    """One line per window, loads first."""
    return [window.describe() for window in (*LOAD_WINDOWS.values(), BRUNCH_BUFFER)]
