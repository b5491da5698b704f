"""Rotation engine: roster, paused set and queue ordering.

The queue is always a permutation of the roster laid out as an active
prefix followed by a paused suffix. Every function takes a state and
returns a new one.
"""

from collections.abc import Iterable

from .errors import IndexOutOfRange, NotFound, ValidationError
from .models.state import HouseholdState


def parse_roster(text: str) -> list[str]:
    """Split a comma-separated roster field into names."""
    return [part.strip() for part in text.split(",") if part.strip()]


def normalize_names(names: Iterable[str]) -> list[str]:
    """Trim names, drop blanks and drop duplicates keeping the first one."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        cleaned = name.strip()
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        result.append(cleaned)
    return result


def _partition(queue: list[str], paused: dict[str, bool]) -> list[str]:
    """Lay out ``queue`` as active members then paused members."""
    active = [name for name in queue if not paused.get(name, False)]
    held = [name for name in queue if paused.get(name, False)]
    return active + held


def active_queue(state: HouseholdState) -> list[str]:
    return [name for name in state.queue if not state.is_paused(name)]


def paused_queue(state: HouseholdState) -> list[str]:
    return [name for name in state.queue if state.is_paused(name)]


def current_assignee(state: HouseholdState) -> str | None:
    """Default assignee for the next load, or None if nobody is active."""
    active = active_queue(state)
    return active[0] if active else None


def next_assignee(state: HouseholdState) -> str | None:
    active = active_queue(state)
    return active[1] if len(active) > 1 else None


def set_roster(state: HouseholdState, names: Iterable[str]) -> HouseholdState:
    """Replace the roster and re-derive queue, paused, credits and pins.

    Names that survive keep their credit, PIN and paused flag. New names
    start with zero credit and no PIN.

    Raises:
        ValidationError: If no names remain after trimming.
    """
    roster = normalize_names(names)
    if not roster:
        raise ValidationError("Roster must contain at least one name")

    paused = {name: True for name in roster if state.is_paused(name)}
    return state.evolve(
        roster=roster,
        queue=_partition(roster, paused),
        paused=paused,
        credits={name: state.credit_for(name) for name in roster},
        pins={name: state.pin_for(name) for name in roster},
    )


def reorder(state: HouseholdState, from_index: int, to_index: int) -> HouseholdState:
    """Move one member within the active queue.

    Raises:
        IndexOutOfRange: If either index is outside the active queue.
    """
    active = active_queue(state)
    for index in (from_index, to_index):
        if not 0 <= index < len(active):
            raise IndexOutOfRange(
                f"Position {index} is outside the active queue (size {len(active)})"
            )
    if from_index == to_index:
        return state

    moved = active.pop(from_index)
    active.insert(to_index, moved)
    return state.evolve(queue=active + paused_queue(state))


def advance(state: HouseholdState) -> HouseholdState:
    """Send the head of the active queue to its tail."""
    active = active_queue(state)
    if not active:
        return state
    rotated = active[1:] + active[:1]
    return state.evolve(queue=rotated + paused_queue(state))


def toggle_pause(state: HouseholdState, name: str) -> HouseholdState:
    """Pause or unpause ``name``.

    An unpaused member rejoins at the end of the active queue.

    Raises:
        NotFound: If ``name`` is not on the roster.
    """
    if name not in state.roster:
        raise NotFound(f"Not on the roster: {name}")

    paused = dict(state.paused)
    if state.is_paused(name):
        paused.pop(name, None)
    else:
        paused[name] = True
    paused = {member: True for member, flag in paused.items() if flag}
    return state.evolve(paused=paused, queue=_partition(state.queue, paused))
