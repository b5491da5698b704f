"""Environment-sourced configuration.

``Settings`` holds what the CLI needs. ``RemoteSyncConfig`` exposes the
remote-sync values as a runtime script for a browser front end; nothing in
the rotation core reads it.
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = Path("data") / "state.json"
DEFAULT_AUDIT_LOG = Path("data") / "audit.log"
DEFAULT_LOG_LEVEL = "INFO"


class Settings:
    STATE_PATH: Path = Path(os.getenv("DISHROTA_STATE_PATH", str(DEFAULT_STATE_PATH)))
    AUDIT_LOG: Path = Path(os.getenv("DISHROTA_AUDIT_LOG", str(DEFAULT_AUDIT_LOG)))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)

    @classmethod
    def get_log_level(cls) -> int:
        level = logging.getLevelName(cls.LOG_LEVEL.upper())
        if not isinstance(level, int):
            logger.warning("Unknown LOG_LEVEL %r, using %s", cls.LOG_LEVEL, DEFAULT_LOG_LEVEL)
            return logging.INFO
        return level


# Environment variable -> runtime key
REMOTE_SYNC_ENV = {
    "FIREBASE_API_KEY": "api_key",
    "FIREBASE_AUTH_DOMAIN": "auth_domain",
    "FIREBASE_PROJECT_ID": "project_id",
    "FIREBASE_STORAGE_BUCKET": "storage_bucket",
    "FIREBASE_MESSAGING_SENDER_ID": "messaging_sender_id",
    "FIREBASE_APP_ID": "app_id",
    "FIREBASE_MEASUREMENT_ID": "measurement_id",
}


class RemoteSyncConfig(BaseModel):
    """Settings a future cross-device sync would need."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str | None = Field(default=None, alias="apiKey")
    auth_domain: str | None = Field(default=None, alias="authDomain")
    project_id: str | None = Field(default=None, alias="projectId")
    storage_bucket: str | None = Field(default=None, alias="storageBucket")
    messaging_sender_id: str | None = Field(default=None, alias="messagingSenderId")
    app_id: str | None = Field(default=None, alias="appId")
    measurement_id: str | None = Field(default=None, alias="measurementId")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RemoteSyncConfig":
        env = os.environ if environ is None else environ
        values = {field: env[var] for var, field in REMOTE_SYNC_ENV.items() if env.get(var)}
        return cls(**values)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.project_id)

    def to_runtime_script(self) -> str:
        """Script that publishes the config as ``window.FIREBASE_CONFIG``.

        Unset values are omitted from the object.
        """
        payload = self.model_dump(by_alias=True, exclude_none=True)
        return f"window.FIREBASE_CONFIG = {json.dumps(payload)};"
