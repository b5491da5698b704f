"""Security module for dishrota.

Provides the per-person PIN gate that guards load claims.
"""

from .pin_gate import GateResult, PinGate, clear_pin, set_pin
from .policy import PIN_MAX_DIGITS, PIN_MIN_DIGITS, PIN_PATTERN

__all__ = [
    "GateResult",
    "PinGate",
    "clear_pin",
    "set_pin",
    "PIN_PATTERN",
    "PIN_MIN_DIGITS",
    "PIN_MAX_DIGITS",
]
