"""PIN authorization gate for claiming completed loads.

The gate never prompts. Callers obtain the candidate secret from whatever
input surface they use and pass it in.
"""

import logging
from dataclasses import dataclass

from ..errors import AuthorizationDenied, NotFound, ValidationError
from ..models.state import HouseholdState
from .policy import PIN_MAX_DIGITS, PIN_MIN_DIGITS, PIN_PATTERN

logger = logging.getLogger(__name__)


@dataclass
class GateResult:
    """Result of a PIN check."""

    allowed: bool
    name: str
    reason: str = ""


class PinGate:
    """Checks a claimed identity against its stored PIN."""

    def authorize(
        self, state: HouseholdState, name: str, supplied: str | None
    ) -> GateResult:
        """
        Check ``supplied`` against the PIN stored for ``name``.

        Args:
            state: State holding the PIN registry
            name: Claimed identity
            supplied: Secret entered by the user, may be None

        Returns:
            GateResult, allowed unconditionally when no PIN is set
        """
        expected = state.pin_for(name)
        if expected is None:
            return GateResult(allowed=True, name=name, reason="no PIN set")

        if (supplied or "").strip() == expected:
            return GateResult(allowed=True, name=name, reason="PIN matched")

        logger.warning("PIN mismatch for %s", name)
        return GateResult(allowed=False, name=name, reason="Incorrect PIN")

    def require(self, state: HouseholdState, name: str, supplied: str | None) -> GateResult:
        """Like ``authorize`` but raises AuthorizationDenied when not allowed."""
        result = self.authorize(state, name, supplied)
        if not result.allowed:
            raise AuthorizationDenied(f"{result.reason} for {name}")
        return result


def set_pin(state: HouseholdState, name: str, candidate: str | None) -> HouseholdState:
    """Set or clear the PIN for ``name``.

    An empty candidate clears the PIN, which disables the gate for that name.

    Raises:
        NotFound: If ``name`` is not on the roster.
        ValidationError: If the candidate is not 4-8 digits.
    """
    if name not in state.roster:
        raise NotFound(f"Not on the roster: {name}")

    pin = (candidate or "").strip()
    if pin and not PIN_PATTERN.match(pin):
        raise ValidationError(
            f"PIN must be {PIN_MIN_DIGITS}-{PIN_MAX_DIGITS} digits"
        )

    pins = dict(state.pins)
    pins[name] = pin or None
    return state.evolve(pins=pins)


def clear_pin(state: HouseholdState, name: str) -> HouseholdState:
    return set_pin(state, name, "")
