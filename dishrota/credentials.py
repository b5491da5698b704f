"""Input surfaces that supply identities, PINs and confirmations.

The coordinator asks a source for a claimed identity, then for that
identity's PIN only when one is set. Returning None from either call means
the user declined, which cancels the whole attempt.
"""

import getpass
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

ROLE_LABELS = {"run": "RAN", "unload": "UNLOADED"}


class CredentialSource(ABC):
    """Where claimed identities and secrets come from."""

    @abstractmethod
    def identify(self, role: str, default: str) -> str | None:
        """Return who performed ``role`` ("run" or "unload").

        An empty string accepts ``default``; None declines.
        """

    @abstractmethod
    def secret_for(self, name: str) -> str | None:
        """Return the PIN entered for ``name``, or None to decline."""

    @abstractmethod
    def confirm(self, message: str) -> bool:
        """Ask for an explicit yes before a destructive action."""


@dataclass
class StaticCredentialSource(CredentialSource):
    """Pre-supplied answers, for tests and non-interactive commands.

    Roles missing from ``identities`` accept the default. Names missing
    from ``secrets`` decline the PIN request.
    """

    identities: dict[str, str | None] = field(default_factory=dict)
    secrets: dict[str, str] = field(default_factory=dict)
    confirmed: bool = False
    asked: list[str] = field(default_factory=list)

    def identify(self, role: str, default: str) -> str | None:
        self.asked.append(f"identify:{role}")
        if role in self.identities:
            return self.identities[role]
        return ""

    def secret_for(self, name: str) -> str | None:
        self.asked.append(f"secret:{name}")
        return self.secrets.get(name)

    def confirm(self, message: str) -> bool:
        self.asked.append("confirm")
        return self.confirmed


class PromptCredentialSource(CredentialSource):
    """Interactive terminal prompts. PINs are read without echo."""

    def __init__(
        self,
        title: str = "",
        input_func: Callable[[str], str] = input,
        secret_func: Callable[[str], str] = getpass.getpass,
    ) -> None:
        self.title = title
        self.input_func = input_func
        self.secret_func = secret_func

    def _ask(self, func: Callable[[str], str], prompt: str) -> str | None:
        try:
            return func(prompt)
        except (EOFError, KeyboardInterrupt):
            return None

    def identify(self, role: str, default: str) -> str | None:
        header = f"{self.title}\n" if self.title else ""
        label = ROLE_LABELS.get(role, role.upper())
        return self._ask(
            self.input_func,
            f"{header}Who {label} it? (default: {default}) ",
        )

    def secret_for(self, name: str) -> str | None:
        return self._ask(self.secret_func, f"Enter PIN for {name}: ")

    def confirm(self, message: str) -> bool:
        answer = self._ask(self.input_func, f"{message} [y/N] ")
        return (answer or "").strip().lower() in ("y", "yes")
