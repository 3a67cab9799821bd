"""Configuration for the compile bridge.

Everything the service needs is read once at startup into :class:`Config`
and handed to :func:`onlinecompiler.main.create_app`.

Environment variables:

``JUDGE0_URL``
    Base URL of the Judge0 instance.  Defaults to the RapidAPI hosted CE.

``RAPIDAPI_KEY``
    Key sent as ``X-RapidAPI-Key``.  Leave empty for a self-hosted Judge0.

``RAPIDAPI_HOST``
    Value of ``X-RapidAPI-Host``.  Defaults to the host part of ``JUDGE0_URL``.

``ALLOWED_ORIGIN``
    The single browser origin allowed by CORS.

``HOST`` / ``PORT``
    Listen address for ``onlinecompiler serve``.

``POLL_MAX_ATTEMPTS`` / ``POLL_INTERVAL_MS``
    Status polling budget.  Defaults to 10 attempts, 1000 ms apart.

``JUDGE0_TIMEOUT_SECONDS``
    Per-request HTTP timeout towards Judge0.

``LOG_LEVEL``
    Level of the ``onlinecompiler`` logger.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlparse

DEFAULT_JUDGE0_URL = "https://judge0-ce.p.rapidapi.com"
DEFAULT_ALLOWED_ORIGIN = "https://onlinecompilers.netlify.app"


def _int_var(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {val}")


@dataclass(frozen=True)
class Config:
    """Centralised configuration object."""

    judge0_url: str = DEFAULT_JUDGE0_URL
    rapidapi_key: str = ""
    rapidapi_host: str = ""
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    host: str = "0.0.0.0"
    port: int = 5000
    poll_max_attempts: int = 10
    poll_interval_ms: int = 1000
    judge0_timeout_seconds: int = 10
    log_level: str = "INFO"

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000

    def judge0_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.rapidapi_key:
            headers["X-RapidAPI-Key"] = self.rapidapi_key
            headers["X-RapidAPI-Host"] = self.rapidapi_host or urlparse(self.judge0_url).netloc
        return headers

    @classmethod
    def load(cls) -> "Config":
        judge0_url = os.getenv("JUDGE0_URL", DEFAULT_JUDGE0_URL).rstrip("/")
        if not judge0_url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid JUDGE0_URL: {judge0_url}. Include the http(s) scheme.")

        poll_max_attempts = _int_var("POLL_MAX_ATTEMPTS", 10)
        if poll_max_attempts < 1:
            raise ValueError("POLL_MAX_ATTEMPTS must be at least 1")

        return cls(
            judge0_url=judge0_url,
            rapidapi_key=os.getenv("RAPIDAPI_KEY", ""),
            rapidapi_host=os.getenv("RAPIDAPI_HOST", ""),
            allowed_origin=os.getenv("ALLOWED_ORIGIN", DEFAULT_ALLOWED_ORIGIN),
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int_var("PORT", 5000),
            poll_max_attempts=poll_max_attempts,
            poll_interval_ms=_int_var("POLL_INTERVAL_MS", 1000),
            judge0_timeout_seconds=_int_var("JUDGE0_TIMEOUT_SECONDS", 10),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Alternate constructor used at process startup."""
        return cls.load()
