"""
Configuration for fluentspec.

`Settings` is an explicit value threaded into the retry engine and the
realization entry point; nothing inside the engines reads the environment.
Fields load from `FLUENTSPEC_*` environment variables through pydantic-settings:

- FLUENTSPEC_MAX_RETRIES: retry attempts for eventual assertions (default 5)
- FLUENTSPEC_SHOULD_MEANS_EVENTUALLY: treat every `should` chain as eventual
- FLUENTSPEC_RETRY_INTERVAL: seconds the default delay waits before a retry

`Settings.from_env` logs unparseable values and keeps their defaults.
"""

import logging
import time
from collections.abc import Callable

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fluentspec.core.types import Delay
from fluentspec.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "FLUENTSPEC_"

DEFAULT_MAX_RETRIES = 5
DEFAULT_RETRY_INTERVAL = 0.1

ENV_MAX_RETRIES = "FLUENTSPEC_MAX_RETRIES"
ENV_SHOULD_MEANS_EVENTUALLY = "FLUENTSPEC_SHOULD_MEANS_EVENTUALLY"
ENV_RETRY_INTERVAL = "FLUENTSPEC_RETRY_INTERVAL"


def immediate_delay(callback: Callable[[], None]) -> None:
    """Run the retry callback right away."""
    callback()


def sleep_delay(seconds: float) -> Delay:
    """
    Build a delay that blocks for `seconds` before running the callback.

    Params:
        seconds: Wait before each retry attempt

    Returns:
        Delay function suitable for `Settings.delay`
    """

    def delay(callback: Callable[[], None]) -> None:
        time.sleep(seconds)
        callback()

    return delay


class Settings(BaseSettings):
    """
    Retry and delay configuration.

    Direct construction reads the environment too; an invalid variable then
    raises `ValidationError`. Use `from_env` to recover from bad input.

    Params:
        max_retries: Retry attempts after the first failing execution
        should_means_should_eventually: Retry plain `should` chains as well
        retry_interval: Seconds waited by the default delay
        delay: Custom delay function; overrides `retry_interval` when set
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        extra="ignore",
        arbitrary_types_allowed=True,
        frozen=True,
    )

    max_retries: int = DEFAULT_MAX_RETRIES
    should_means_should_eventually: bool = Field(
        default=False,
        validation_alias=AliasChoices("should_means_should_eventually", ENV_SHOULD_MEANS_EVENTUALLY),
    )
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    delay: Callable[[Callable[[], None]], None] | None = None

    @field_validator("max_retries")
    @classmethod
    def _check_max_retries(cls, value: int) -> int:
        if value < 0:
            raise ConfigurationError("max_retries", value, "must not be negative")
        return value

    @field_validator("retry_interval")
    @classmethod
    def _check_retry_interval(cls, value: float) -> float:
        if value < 0:
            raise ConfigurationError("retry_interval", value, "must not be negative")
        return value

    def resolve_delay(self) -> Delay:
        """Return the configured delay, or a sleeping delay for `retry_interval`."""
        if self.delay is not None:
            return self.delay
        if self.retry_interval == 0:
            return immediate_delay
        return sleep_delay(self.retry_interval)

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Build settings from environment variables.

        Invalid environment values never raise: each is reported through the
        module logger and the corresponding default is kept. Invalid explicit
        overrides still raise.

        Params:
            **overrides: Explicit field values taking precedence over the environment

        Returns:
            Settings instance

        Raises:
            ValidationError: An override is invalid
        """
        try:
            return cls(**overrides)
        except ValidationError as e:
            fallbacks = {}
            for error in e.errors():
                name = _field_for(error["loc"][0] if error["loc"] else "")
                if name is None or name in overrides:
                    raise
                default = cls.model_fields[name].default
                logger.error(
                    "%s is not parseable: %r (%s); using default %r",
                    _env_name(name),
                    error.get("input"),
                    error["msg"],
                    default,
                )
                fallbacks[name] = default
        return cls(**overrides, **fallbacks)


def _env_name(name: str) -> str:
    alias = Settings.model_fields[name].validation_alias
    if isinstance(alias, AliasChoices):
        return str(alias.choices[-1])
    return f"{ENV_PREFIX}{name}".upper()


def _field_for(key) -> str | None:
    """Map an error location back to the field it belongs to."""
    key = str(key).lower()
    for name, field in Settings.model_fields.items():
        if key in (name, f"{ENV_PREFIX}{name}".lower()):
            return name
        alias = field.validation_alias
        if isinstance(alias, AliasChoices) and key in {str(choice).lower() for choice in alias.choices}:
            return name
    return None
