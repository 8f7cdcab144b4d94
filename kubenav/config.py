"""User settings for the browser, loaded from YAML and overridden from the CLI."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from kubenav.exceptions import ConfigurationError
from kubenav.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/kubenav/config.yml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class BrowserSettings(BaseModel):
    """Browser settings."""

    kubeconfig: str | None = None
    context: str | None = None
    log_file: str | None = None
    log_level: str = "INFO"
    verbose: bool = False
    command_char_limit: int = 156

    @field_validator("kubeconfig", "log_file")
    @classmethod
    def expand_path(cls, v: str | None) -> str | None:
        """Expand ~ in file paths."""
        if not v:
            return None
        return str(Path(v).expanduser())

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log_level is a known logging level."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {list(LOG_LEVELS)}, got {v}")
        return level

    @field_validator("command_char_limit")
    @classmethod
    def validate_command_char_limit(cls, v: int) -> int:
        """Validate the command input limit is positive."""
        if v <= 0:
            raise ValueError("command_char_limit must be greater than 0")
        return v

    def with_overrides(self, **overrides) -> "BrowserSettings":
        """Return a copy with every non-None override applied."""
        values = self.model_dump()
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return BrowserSettings(**values)
        except ValidationError as e:
            raise ConfigurationError("Invalid settings override", str(e))

    def save(self, path: str) -> None:
        """Save settings to YAML file."""
        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w") as f:
            yaml.dump(self.model_dump(exclude_none=True), f, default_flow_style=False)

    @classmethod
    def load(cls, path: str) -> "BrowserSettings":
        """Load settings from YAML file."""
        source = Path(path).expanduser()
        try:
            with open(source) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Config file not found: {source}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file is not valid YAML: {source}", str(e))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file must contain a mapping: {source}",
                f"Got {type(data).__name__} instead",
            )

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings in {source}", str(e))


def load_settings(config_path: str | None = None) -> BrowserSettings:
    """Resolve settings from an explicit file, the default file, or defaults.

    A missing default file is not an error; a missing explicit file is. An unset
    kubeconfig is left unset so the client resolves ``KUBECONFIG`` on its own.
    """
    if config_path:
        return BrowserSettings.load(config_path)
    if DEFAULT_CONFIG_PATH.expanduser().exists():
        logger.debug(f"Loading settings from {DEFAULT_CONFIG_PATH}")
        return BrowserSettings.load(str(DEFAULT_CONFIG_PATH))
    return BrowserSettings()
