"""Settings loading: YAML file, then environment variable overrides."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import ConfigurationError
from .garage import DEFAULT_STORAGE_KEY

DEFAULT_SETTINGS_FILE = Path("~/.garagem/settings.yaml")

# Default amount per variant for actions the user triggers without one
DEFAULT_ACTION_AMOUNTS: Dict[str, Dict[str, float]] = {
    "Vehicle": {"accelerate": 15, "brake": 10},
    "SportsCar": {"accelerate": 15, "brake": 10},
    "Truck": {"accelerate": 5, "brake": 3, "load": 1000, "unload": 500},
}


@dataclass
class ActionDefaults:
    """Amounts used when the caller does not give one."""

    amounts: Dict[str, Dict[str, float]] = field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_ACTION_AMOUNTS.items()}
    )

    def amount_for(self, variant: str, action: str) -> Optional[float]:
        per_variant = self.amounts.get(variant) or self.amounts.get("Vehicle", {})
        return per_variant.get(action)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActionDefaults":
        defaults = cls()
        for variant, actions in (data or {}).items():
            if not isinstance(actions, Mapping):
                raise ConfigurationError(f"defaults.{variant} must be a mapping")
            defaults.amounts.setdefault(variant, {}).update(
                {action: float(amount) for action, amount in actions.items()}
            )
        return defaults


@dataclass
class Settings:
    storage_dir: Path = Path("~/.garagem")
    storage_key: str = DEFAULT_STORAGE_KEY
    quota_bytes: Optional[int] = None
    reminder_interval_minutes: float = 5
    reminder_lookahead_days: int = 1
    log_level: str = "WARNING"
    defaults: ActionDefaults = field(default_factory=ActionDefaults)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Settings":
        storage = data.get("storage") or {}
        reminders = data.get("reminders") or {}
        logging_cfg = data.get("logging") or {}
        settings = cls()
        try:
            if "dir" in storage:
                settings.storage_dir = Path(storage["dir"])
            settings.storage_key = storage.get("key", settings.storage_key)
            if storage.get("quotaBytes") is not None:
                settings.quota_bytes = int(storage["quotaBytes"])
            settings.reminder_interval_minutes = float(
                reminders.get("intervalMinutes", settings.reminder_interval_minutes)
            )
            settings.reminder_lookahead_days = int(
                reminders.get("lookaheadDays", settings.reminder_lookahead_days)
            )
            settings.log_level = str(logging_cfg.get("level", settings.log_level)).upper()
            settings.defaults = ActionDefaults.from_dict(data.get("defaults") or {})
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e
        return settings

    def apply_env(self, environ: Mapping[str, str]) -> "Settings":
        """Override values from GARAGEM_* environment variables."""
        if environ.get("GARAGEM_STORAGE_DIR"):
            self.storage_dir = Path(environ["GARAGEM_STORAGE_DIR"])
        if environ.get("GARAGEM_STORAGE_KEY"):
            self.storage_key = environ["GARAGEM_STORAGE_KEY"]
        try:
            if environ.get("GARAGEM_STORAGE_QUOTA"):
                self.quota_bytes = int(environ["GARAGEM_STORAGE_QUOTA"])
            if environ.get("GARAGEM_REMINDER_INTERVAL"):
                self.reminder_interval_minutes = float(environ["GARAGEM_REMINDER_INTERVAL"])
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment setting: {e}") from e
        if environ.get("GARAGEM_LOG_LEVEL"):
            self.log_level = environ["GARAGEM_LOG_LEVEL"].upper()
        return self


def load_settings(
    filename: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from a YAML file (missing file = defaults), then the environment."""
    if environ is None:
        environ = os.environ
    if filename is None:
        filename = environ.get("GARAGEM_SETTINGS") or DEFAULT_SETTINGS_FILE
    path = Path(filename).expanduser()

    data: Any = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as fp:
            try:
                data = yaml.safe_load(fp)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse {path}: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping")
    return Settings.from_dict(data).apply_env(environ)
