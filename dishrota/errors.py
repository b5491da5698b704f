"""Error taxonomy for rotation, ledger, PIN and persistence operations."""


class RotaError(Exception):
    """Base class for errors reported to the user without terminating."""


class ValidationError(RotaError, ValueError):
    """Malformed input: bad PIN format, empty roster."""


class NotFound(RotaError, LookupError):
    """A participant name that is not on the roster."""


class IndexOutOfRange(RotaError, IndexError):
    """Reorder positions outside the active queue."""


class AuthorizationDenied(RotaError):
    """PIN mismatch while claiming a load."""


class ActionCancelled(RotaError):
    """The user declined to supply an identity, secret or confirmation."""


class PersistenceFailure(RotaError):
    """The state store could not be written or read."""


class DeserializationFailure(RotaError):
    """The stored document is unreadable."""
