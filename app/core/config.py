"""Userbot configuration settings."""

from typing import Any, Dict, Optional
import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeatureSettings(BaseSettings):
    """Base class for feature module settings.

    All feature settings should inherit from this class to ensure
    consistent configuration behavior (env file loading, case sensitivity).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class CommandsSettings(FeatureSettings):
    """Configuration for command parsing and dispatching.

    Environment Variables:
        COMMAND_PREFIX: Default prefix for commands without their own (e.g. ".")
        COMMAND_INLINE_BOOL_VALUES: Let boolean flags take an inline value
            (`-silent false`) instead of being presence-only
        COMMAND_STRICT_FLAGS: Reject undeclared flag-shaped tokens instead of
            reading them as values
        COMMAND_DURATION_UNITS: JSON object of extra duration unit suffixes

    Duration Units Configuration (COMMAND_DURATION_UNITS):
        Maps a unit suffix to a duration component. Entries extend the
        built-in units (y, mo, w, d, h, m, s) and may override them.

        Schema:
            {
                "min": "minutes",
                "yr": "years"
            }

    Example:
        ```python
        from core.config import settings
        from commands import CommandParser

        parser = CommandParser.from_settings(settings.commands)
        ```
    """

    prefix: str = Field(
        default=".",
        alias="COMMAND_PREFIX",
        description="Default prefix for commands",
    )
    inline_bool_values: bool = Field(
        default=False,
        alias="COMMAND_INLINE_BOOL_VALUES",
        description="Allow boolean flags to consume an inline true/false value",
    )
    strict_flags: bool = Field(
        default=False,
        alias="COMMAND_STRICT_FLAGS",
        description="Raise on undeclared flags instead of reinterpreting them",
    )
    duration_units: Dict[str, str] = Field(
        default_factory=dict,
        alias="COMMAND_DURATION_UNITS",
        description="Extra duration unit suffixes mapped to component names",
    )

    @field_validator("duration_units", mode="before")
    @classmethod
    def _parse_duration_units(cls, v: Optional[Any]) -> Any:
        """Parse COMMAND_DURATION_UNITS from JSON string or dict."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return v
        if isinstance(v, str):
            s = v.strip()
            if (s.startswith("'") and s.endswith("'")) or (
                s.startswith('"') and s.endswith('"')
            ):
                s = s[1:-1]
            try:
                return json.loads(s) if s else {}
            except (json.JSONDecodeError, ValueError) as e:
                raise ValueError(
                    f"Invalid COMMAND_DURATION_UNITS JSON: {e} (value: {s[:80]}...)"
                ) from e
        raise ValueError("COMMAND_DURATION_UNITS must be a JSON string or a mapping")


class Settings(BaseSettings):
    """Userbot configuration settings - main aggregator.

    Environment Variables:
        PREFIX: Environment prefix, empty in production
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    commands: CommandsSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "commands": CommandsSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
