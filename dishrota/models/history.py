"""History data models for completed loads."""

import uuid
from datetime import datetime, timezone
from typing import Literal, get_args

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

LoadKind = Literal["afternoon", "night"]
LOAD_KINDS: tuple[str, ...] = get_args(LoadKind)

HISTORY_LIMIT = 200
RUN_CREDIT = 0.5
UNLOAD_CREDIT = 0.5

# Kinds written by older documents
LEGACY_KINDS = {"3pm": "afternoon"}


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryEntry(BaseModel):
    """One completed load: who ran it, who unloaded it, and the credit given."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        validation_alias=AliasChoices("timestamp", "when"),
    )
    kind: LoadKind
    ran_by: str = Field(
        validation_alias=AliasChoices("ranBy", "runBy", "ran_by"),
        serialization_alias="ranBy",
    )
    unloaded_by: str = Field(
        validation_alias=AliasChoices("unloadedBy", "unloadBy", "unloaded_by"),
        serialization_alias="unloadedBy",
    )
    run_credit: float = Field(
        default=RUN_CREDIT,
        validation_alias=AliasChoices("runCredit", "run_credit"),
        serialization_alias="runCredit",
    )
    unload_credit: float = Field(
        default=UNLOAD_CREDIT,
        validation_alias=AliasChoices("unloadCredit", "unload_credit"),
        serialization_alias="unloadCredit",
    )

    @field_validator("kind", mode="before")
    @classmethod
    def _upgrade_legacy_kind(cls, value: object) -> object:
        if isinstance(value, str):
            return LEGACY_KINDS.get(value, value)
        return value
