"""Credit ledger: per-person credit and the bounded history of loads."""

from datetime import datetime

from .errors import ActionCancelled
from .models.history import HISTORY_LIMIT, RUN_CREDIT, UNLOAD_CREDIT, HistoryEntry, LoadKind
from .models.state import HouseholdState


def record_completion(
    state: HouseholdState,
    kind: LoadKind,
    ran_by: str,
    unloaded_by: str,
    now: datetime | None = None,
) -> tuple[HouseholdState, HistoryEntry]:
    """Credit a completed load to whoever actually did each step.

    Runner and unloader each get their share independently, so one person
    doing both gets the full load. Missing ledger entries start at zero.

    Args:
        state: Current state.
        kind: "afternoon" or "night".
        ran_by: Who started the dishwasher.
        unloaded_by: Who emptied it.
        now: Timestamp for the history entry (defaults to the current UTC time).

    Returns:
        Tuple of (new state, the history entry that was recorded).
    """
    credits = dict(state.credits)
    credits[ran_by] = credits.get(ran_by, 0.0) + RUN_CREDIT
    credits[unloaded_by] = credits.get(unloaded_by, 0.0) + UNLOAD_CREDIT

    fields = {"kind": kind, "ran_by": ran_by, "unloaded_by": unloaded_by}
    if now is not None:
        fields["timestamp"] = now
    entry = HistoryEntry(**fields)

    history = [entry, *state.history][:HISTORY_LIMIT]
    return state.evolve(credits=credits, history=history), entry


def reset_all(state: HouseholdState, confirmed: bool) -> HouseholdState:
    """Set every roster member's credit back to zero.

    Raises:
        ActionCancelled: If the caller did not confirm the reset.
    """
    if not confirmed:
        raise ActionCancelled("Credit reset was not confirmed")
    return state.evolve(credits={name: 0.0 for name in state.roster})


def recent_history(state: HouseholdState, limit: int = 20) -> list[HistoryEntry]:
    """Most recent loads first."""
    return state.history[:limit]


def standings(state: HouseholdState) -> list[tuple[str, float]]:
    """Credit per roster member, in roster order."""
    return [(name, state.credit_for(name)) for name in state.roster]
