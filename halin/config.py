import logging
import os
import sys
from pydantic import field_validator
from pydantic.dataclasses import dataclass


MAX_EVENTS = 200


@dataclass(frozen=True)
class Settings:
    event_log_capacity: int = MAX_EVENTS
    log_level: str = "INFO"

    @field_validator("event_log_capacity")
    @classmethod
    def check_capacity(cls, value: int) -> int:
        if value < 1:
            raise ValueError("event_log_capacity must be at least 1")
        return value

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        value = value.upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"Unknown log level: `{value}`")
        return value

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """
        Build settings from ``HALIN_*`` environment variables,
        falling back to the defaults for anything unset.
        """
        environ = os.environ if environ is None else environ
        kwargs = {}
        if "HALIN_EVENT_LOG_CAPACITY" in environ:
            kwargs["event_log_capacity"] = int(environ["HALIN_EVENT_LOG_CAPACITY"])
        if "HALIN_LOG_LEVEL" in environ:
            kwargs["log_level"] = environ["HALIN_LOG_LEVEL"]
        return cls(**kwargs)


def configure_logging(settings: Settings):
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
    )
