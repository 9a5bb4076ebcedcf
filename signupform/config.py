"""Runtime configuration for the signup form.

FormConfig holds the few knobs the controller and the simulated acceptance
collaborator need. Values come from, highest priority first: constructor
arguments, SIGNUPFORM_* environment variables, then the defaults below.

    SIGNUPFORM_ACCEPTANCE_DELAY_SECONDS=0.5
    SIGNUPFORM_ACCEPTANCE_TIMEOUT_SECONDS=none   # no deadline
    SIGNUPFORM_LOG_LEVEL=debug
"""

import logging
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# camelCase keys accepted by from_dict / produced by to_dict
_CAMEL_KEYS = {
    "acceptanceDelaySeconds": "acceptance_delay_seconds",
    "acceptanceTimeoutSeconds": "acceptance_timeout_seconds",
    "logLevel": "log_level",
}


class FormConfig(BaseSettings):
    """Controller and acceptance settings.

    Attributes:
        acceptance_delay_seconds: Delay of the simulated acceptance call
        acceptance_timeout_seconds: Deadline for the acceptance call, or None
            for no deadline. Must be positive when set.
        log_level: Level applied by configure_logging

    Examples:
        >>> FormConfig(acceptance_timeout_seconds="none").acceptance_timeout_seconds is None
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGNUPFORM_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    acceptance_delay_seconds: float = Field(
        default=1.0, ge=0, description="Delay of the simulated acceptance call"
    )
    acceptance_timeout_seconds: Optional[float] = Field(
        default=10.0, gt=0, description="Acceptance deadline in seconds, None for no deadline"
    )
    log_level: LogLevel = Field(default="INFO", description="Logging level")

    @field_validator("acceptance_timeout_seconds", mode="before")
    @classmethod
    def _none_disables_deadline(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("", "none"):
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dict for serialization."""
        return {camel: getattr(self, name) for camel, name in _CAMEL_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormConfig":
        """Create FormConfig from a camelCase dict; missing keys fall back to env and defaults."""
        return cls(**{name: data[camel] for camel, name in _CAMEL_KEYS.items() if camel in data})


def configure_logging(config: Optional[FormConfig] = None) -> None:
    """Configure root logging for a host process at config.log_level."""
    level = (config or FormConfig()).log_level
    logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger("signupform").setLevel(level)


__all__ = [
    "FormConfig",
    "LogLevel",
    "configure_logging",
]
