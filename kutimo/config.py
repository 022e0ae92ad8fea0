"""
Endpoint configuration for the Korekton scoring service.

The configuration is read once and handed to the operator as an immutable
value, so concurrent evaluations can share it without locking.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional
from urllib.parse import urlparse

from .env import load_env
from .errors import ConfigError

DEFAULT_TIMEOUT = 30

# Setting names used by the host configuration registry
ENDPOINT_KEY = "korekton.endpoint"
TIMEOUT_KEY = "korekton.timeout"
USER_KEY = "korekton.user"
PASSWORD_KEY = "korekton.password"

ENV_VARS = {
    ENDPOINT_KEY: "KUTIMO_KOREKTON_ENDPOINT",
    TIMEOUT_KEY: "KUTIMO_KOREKTON_TIMEOUT",
    USER_KEY: "KUTIMO_KOREKTON_USER",
    PASSWORD_KEY: "KUTIMO_KOREKTON_PASSWORD",
}


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return p.scheme in ("http", "https") and bool(p.netloc)
    except ValueError:
        return False


def _parse_timeout(raw) -> int:
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        return DEFAULT_TIMEOUT
    try:
        timeout = int(raw)
    except (TypeError, ValueError):
        raise ConfigError(f"Setting '{TIMEOUT_KEY}' must be an integer number of seconds, got {raw!r}")
    if timeout <= 0:
        raise ConfigError(f"Setting '{TIMEOUT_KEY}' must be a positive number of seconds, got {timeout}")
    return timeout


@dataclass(frozen=True)
class EndpointConfig:
    """Where and how to reach the scoring service."""

    endpoint: str
    timeout: int = DEFAULT_TIMEOUT
    user: str = ""
    password: str = field(default="", repr=False)

    def __post_init__(self):
        if not isinstance(self.endpoint, str) or not _valid_url(self.endpoint):
            raise ConfigError(
                f"Setting '{ENDPOINT_KEY}' must be an absolute http(s) URL, got {self.endpoint!r}"
            )
        object.__setattr__(self, "endpoint", self.endpoint.rstrip("/"))
        object.__setattr__(self, "timeout", _parse_timeout(self.timeout))
        object.__setattr__(self, "user", self.user or "")
        object.__setattr__(self, "password", self.password or "")

    @property
    def score_item_url(self) -> str:
        return f"{self.endpoint}/scoreItem"

    @property
    def auth(self):
        return (self.user, self.password)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, object]) -> "EndpointConfig":
        """Build from the extension's ``korekton.*`` settings."""
        if not settings.get(ENDPOINT_KEY):
            raise ConfigError(f"Missing required setting: {ENDPOINT_KEY}")
        return cls(
            endpoint=settings[ENDPOINT_KEY],
            timeout=settings.get(TIMEOUT_KEY),
            user=settings.get(USER_KEY) or "",
            password=settings.get(PASSWORD_KEY) or "",
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EndpointConfig":
        """Build from KUTIMO_KOREKTON_* variables.

        When no mapping is given, a project-root .env file is loaded into
        os.environ first.
        """
        if environ is None:
            load_env()
            environ = os.environ
        settings = {key: environ.get(var) for key, var in ENV_VARS.items()}
        if not settings[ENDPOINT_KEY]:
            raise ConfigError(
                f"{ENV_VARS[ENDPOINT_KEY]} not set. Set env var or add it to .env."
            )
        return cls.from_mapping(settings)

    def masked(self) -> dict:
        """Settings as a dict, safe to print or log."""
        return {
            ENDPOINT_KEY: self.endpoint,
            TIMEOUT_KEY: self.timeout,
            USER_KEY: self.user,
            PASSWORD_KEY: "********" if self.password else "",
        }
