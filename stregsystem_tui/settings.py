"""Persisted user settings (username, room, saved parking details)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError, field_validator

from stregsystem_tui.config import DEFAULT_ROOM_ID, SETTINGS_APP_NAME, SETTINGS_FILENAME
from stregsystem_tui.errors import ConfigError, StorageError
from stregsystem_tui.models import describe_validation_error

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """User settings loaded at startup and written back on every edit.

    Fields may be reassigned freely; ``check_settings`` validates a snapshot
    before it is written.
    """

    username: StrictStr | None = None
    room_id: StrictInt = Field(default=DEFAULT_ROOM_ID, ge=0)
    phone_number: StrictStr | None = None
    license_plate: StrictStr | None = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Username cannot be empty or whitespace only")
        return value


def parse_settings(data: Any) -> Settings:
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {describe_validation_error(exc)}") from exc


def check_settings(settings: Settings) -> dict[str, Any]:
    """Re-validate ``settings`` (fields may have been reassigned) and return the dump to write."""
    return parse_settings(settings.model_dump()).model_dump()


@dataclass
class SettingsStore:
    """JSON settings file under the platform config directory."""

    app_name: str = SETTINGS_APP_NAME
    filename: str = SETTINGS_FILENAME
    directory: Path | None = field(default=None)

    @property
    def path(self) -> Path:
        base = self.directory if self.directory is not None else Path(user_config_dir(self.app_name))
        return base / self.filename

    def load_or_create(self) -> Settings:
        """Load settings, writing the defaults first if no file exists yet."""
        path = self.path
        if not path.exists():
            settings = Settings()
            self.save(settings)
            logger.info("settings_created path=%s", path)
            return settings

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        return parse_settings(data)

    def save(self, settings: Settings) -> None:
        data = check_settings(settings)
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc
        logger.debug("settings_saved path=%s", path)


def load_settings_or_default(store: SettingsStore) -> Settings:
    """Startup helper: any settings failure falls back to the defaults."""
    try:
        return store.load_or_create()
    except (ConfigError, StorageError) as exc:
        logger.warning("settings_fallback error=%s", exc)
        return Settings()
