"""Action coordinator: authorize, record, rotate and persist.

Completing a load is a single transaction. Runner and unloader are each
identified and PIN-checked before anything changes; a decline or a PIN
mismatch at either step leaves the state exactly as it was. Only a
committed attempt is written to the store.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from . import ledger, rotation
from .audit import AuditLogger, AuditValue
from .credentials import CredentialSource
from .errors import ActionCancelled, AuthorizationDenied, NotFound, RotaError, ValidationError
from .models.history import LOAD_KINDS, HistoryEntry, LoadKind
from .models.state import HouseholdState
from .security.pin_gate import PinGate, set_pin
from .store import StateStore

logger = logging.getLogger(__name__)

CLAIM_ACTIONS = ("run", "unload")


class AttemptPhase(str, Enum):
    """Progress of one load-completion attempt."""

    IDLE = "idle"
    AWAITING_RUNNER_AUTH = "awaiting_runner_auth"
    AWAITING_UNLOADER_AUTH = "awaiting_unloader_auth"
    COMMITTED = "committed"


@dataclass
class CompletionReceipt:
    """What a committed load changed."""

    entry: HistoryEntry
    ran_by: str
    unloaded_by: str
    next_assignee: str | None


class ActionCoordinator:
    """Owns the live household state and applies user actions to it."""

    def __init__(
        self,
        store: StateStore,
        audit: AuditLogger | None = None,
        gate: PinGate | None = None,
    ) -> None:
        self.store = store
        self.audit = audit
        self.gate = gate or PinGate()
        self.state: HouseholdState = store.load()
        self.phase = AttemptPhase.IDLE

    # ------------------------------------------------------------------
    # Load completion
    # ------------------------------------------------------------------

    def default_assignee(self) -> str | None:
        """Current queue head, or the first roster member if nobody is active."""
        head = rotation.current_assignee(self.state)
        if head is not None:
            return head
        return self.state.roster[0] if self.state.roster else None

    def complete_load(self, kind: LoadKind, source: CredentialSource) -> CompletionReceipt:
        """Record a load after authorizing its runner and unloader.

        Raises:
            ActionCancelled: If the user declines an identity or PIN prompt.
            ValidationError: If ``kind`` is not a known load kind.
            NotFound: If a claimed name is not on the roster.
            AuthorizationDenied: If a PIN does not match.
            PersistenceFailure: If the committed state could not be saved.
        """
        self.phase = AttemptPhase.IDLE
        self._require_kind(kind)
        default = self.default_assignee()
        if default is None:
            raise ValidationError("Set the roster first")

        state = self.state
        try:
            self.phase = AttemptPhase.AWAITING_RUNNER_AUTH
            ran_by = self._authenticate(state, source, "run", default)
            self.phase = AttemptPhase.AWAITING_UNLOADER_AUTH
            unloaded_by = self._authenticate(state, source, "unload", ran_by)
        except RotaError:
            self.phase = AttemptPhase.IDLE
            raise

        return self._commit_load(kind, ran_by, unloaded_by)

    def quick_claim(
        self, kind: LoadKind, name: str, action: str, secret: str | None = None
    ) -> CompletionReceipt:
        """One person claims a single step of a load with one PIN check.

        A run claim credits ``name`` for both steps. An unload claim credits
        the current queue head as runner, falling back to ``name``.
        """
        self.phase = AttemptPhase.IDLE
        self._require_kind(kind)
        if action not in CLAIM_ACTIONS:
            raise ValidationError(f"Unknown claim action: {action}")
        self._require_member(self.state, name)

        self.phase = AttemptPhase.AWAITING_RUNNER_AUTH
        result = self.gate.authorize(self.state, name, secret)
        if not result.allowed:
            self.phase = AttemptPhase.IDLE
            self._audit("DENIED", name=name, action=action, kind=kind)
            raise AuthorizationDenied(f"{result.reason} for {name}")

        if action == "run":
            ran_by = name
        else:
            ran_by = rotation.current_assignee(self.state) or name
        return self._commit_load(kind, ran_by, name)

    def _authenticate(
        self, state: HouseholdState, source: CredentialSource, role: str, default: str
    ) -> str:
        answer = source.identify(role, default)
        if answer is None:
            raise ActionCancelled(f"No {role} identity given")
        name = answer.strip() or default
        self._require_member(state, name)

        secret = None
        if state.pin_for(name) is not None:
            secret = source.secret_for(name)
            if secret is None:
                raise ActionCancelled(f"No PIN entered for {name}")

        result = self.gate.authorize(state, name, secret)
        if not result.allowed:
            self._audit("DENIED", name=name, action=role)
            raise AuthorizationDenied(f"{result.reason} for {name}")
        return name

    def _commit_load(self, kind: LoadKind, ran_by: str, unloaded_by: str) -> CompletionReceipt:
        state, entry = ledger.record_completion(self.state, kind, ran_by, unloaded_by)
        state = rotation.advance(state)
        self.phase = AttemptPhase.COMMITTED
        logger.info("Load %s committed: ran=%s unloaded=%s", kind, ran_by, unloaded_by)
        self._commit(state, "COMPLETE", kind=kind, ran_by=ran_by, unloaded_by=unloaded_by)
        return CompletionReceipt(
            entry=entry,
            ran_by=ran_by,
            unloaded_by=unloaded_by,
            next_assignee=rotation.current_assignee(state),
        )

    # ------------------------------------------------------------------
    # Roster, queue, PIN and credit management
    # ------------------------------------------------------------------

    def set_roster(self, names: list[str]) -> HouseholdState:
        state = rotation.set_roster(self.state, names)
        self._commit(state, "ROSTER", names=",".join(state.roster))
        return state

    def reorder(self, from_index: int, to_index: int) -> HouseholdState:
        state = rotation.reorder(self.state, from_index, to_index)
        if state is not self.state:
            self._commit(state, "REORDER", **{"from": from_index, "to": to_index})
        return state

    def toggle_pause(self, name: str) -> HouseholdState:
        state = rotation.toggle_pause(self.state, name)
        self._commit(state, "PAUSE" if state.is_paused(name) else "UNPAUSE", name=name)
        return state

    def set_pin(self, name: str, candidate: str | None) -> HouseholdState:
        state = set_pin(self.state, name, candidate)
        self._commit(state, "PIN_SET" if state.pin_for(name) else "PIN_CLEAR", name=name)
        return state

    def reset_credits(self, source: CredentialSource) -> HouseholdState:
        """Zero every credit after the source confirms."""
        confirmed = source.confirm("Reset all credits to 0?")
        state = ledger.reset_all(self.state, confirmed)
        self._commit(state, "RESET", members=len(state.roster))
        return state

    # ------------------------------------------------------------------

    def _require_member(self, state: HouseholdState, name: str) -> None:
        if name not in state.roster:
            raise NotFound(f"Not on the roster: {name}")

    def _require_kind(self, kind: str) -> None:
        if kind not in LOAD_KINDS:
            raise ValidationError(
                f"Unknown load kind: {kind} (expected one of {', '.join(LOAD_KINDS)})"
            )

    def _audit(self, operation: str, **fields: AuditValue) -> None:
        if self.audit is None:
            return
        try:
            self.audit.log(operation, **fields)
        except OSError as e:
            # The audit trail is secondary to the state document
            logger.warning("Could not write audit entry %s: %s", operation, e)

    def _commit(
        self, state: HouseholdState, operation: str, **fields: AuditValue
    ) -> None:
        # In-memory state stays authoritative even if the save below fails
        self.state = state
        try:
            self.store.save(state)
        finally:
            self._audit(operation, revision=state.revision, **fields)
