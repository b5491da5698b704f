"""Root state document shared by the rotation, ledger and PIN gate."""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    field_validator,
)

from .history import HistoryEntry

DEFAULT_ROSTER = ("A", "B", "C", "D")


class HouseholdState(BaseModel):
    """The whole persisted document.

    Instances are never changed in place. Every operation returns a new
    state built with ``evolve``, which also bumps ``revision``.
    """

    model_config = ConfigDict(frozen=True)

    # The original browser app stored the roster as "roommates"
    roster: list[str] = Field(
        default_factory=lambda: list(DEFAULT_ROSTER),
        validation_alias=AliasChoices("roster", "roommates"),
    )
    queue: list[str] = Field(default_factory=lambda: list(DEFAULT_ROSTER))
    paused: dict[str, bool] = Field(default_factory=dict)
    credits: dict[str, NonNegativeFloat] = Field(default_factory=dict)
    history: list[HistoryEntry] = Field(default_factory=list)
    pins: dict[str, str | None] = Field(default_factory=dict)
    revision: int = 0

    @field_validator("pins", mode="before")
    @classmethod
    def _empty_pin_means_none(cls, value: Any) -> Any:
        # Older documents store "" for "no PIN set"
        if isinstance(value, dict):
            return {name: (pin or None) for name, pin in value.items()}
        return value

    def is_paused(self, name: str) -> bool:
        return bool(self.paused.get(name, False))

    def credit_for(self, name: str) -> float:
        return self.credits.get(name, 0.0)

    def pin_for(self, name: str) -> str | None:
        return self.pins.get(name)

    def evolve(self, **changes: Any) -> "HouseholdState":
        """Return a copy with ``changes`` applied and the revision bumped."""
        changes["revision"] = self.revision + 1
        return self.model_copy(update=changes)

    def to_document(self) -> dict:
        """Serialize to the JSON-ready document stored under the state key."""
        return self.model_dump(mode="json", by_alias=True)


def default_state() -> HouseholdState:
    """The document used on first run or when storage is unreadable."""
    return HouseholdState()
