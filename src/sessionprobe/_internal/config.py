"""Configuration loading for SessionProbe."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sessionprobe._internal.errors import ConfigError

if TYPE_CHECKING:
    from sessionprobe._internal.types import Credentials, Headers


DEFAULT_COOKIE_NAME = "JSESSIONID"


@dataclass(frozen=True)
class SessionProbeConfig:
    """Global SessionProbe configuration.

    Attributes:
        base_url: Target base URL when no in-process app is given.
        cookie_name: Name of the cookie carrying the session token.
        default_headers: HTTP headers sent with every request.
        request_timeout: Request timeout in seconds.
        user: Credentials of the ordinary principal.
        admin: Credentials of the elevated principal.
    """

    base_url: str = ""
    cookie_name: str = DEFAULT_COOKIE_NAME
    default_headers: Headers = field(default_factory=dict)
    request_timeout: float = 30.0
    user: Credentials = ("user", "user")
    admin: Credentials = ("admin", "admin")


def parse_credentials(value: str, *, source: str = "credentials") -> Credentials:
    """Split a ``username:password`` string.

    The password may itself contain colons; only the first one separates.

    Raises:
        ConfigError: If the value has no colon or an empty username.
    """
    username, sep, password = value.partition(":")
    if not sep or not username:
        msg = f"{source} must be in 'username:password' form, got: {value!r}"
        raise ConfigError(msg)
    return username, password


def parse_cookie_name(value: str, *, source: str = "cookie name") -> str:
    """Strip and validate a session cookie name.

    Raises:
        ConfigError: If the name is empty or blank.
    """
    name = value.strip()
    if not name:
        msg = f"{source} must not be empty"
        raise ConfigError(msg)
    return name


def load_config() -> SessionProbeConfig:
    """Load configuration from environment variables with defaults.

    Environment variables:
        SESSIONPROBE_BASE_URL: Target base URL.
        SESSIONPROBE_COOKIE_NAME: Session cookie name (default: JSESSIONID).
        SESSIONPROBE_TIMEOUT: Request timeout in seconds (default: 30.0).
        SESSIONPROBE_USER: ``username:password`` of the ordinary principal.
        SESSIONPROBE_ADMIN: ``username:password`` of the elevated principal.

    Returns:
        Populated SessionProbeConfig instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    timeout_str = os.environ.get("SESSIONPROBE_TIMEOUT", "30.0")
    try:
        timeout = float(timeout_str)
    except ValueError:
        msg = f"SESSIONPROBE_TIMEOUT must be a number, got: {timeout_str!r}"
        raise ConfigError(msg) from None

    if timeout <= 0:
        msg = f"SESSIONPROBE_TIMEOUT must be positive, got: {timeout}"
        raise ConfigError(msg)

    cookie_name = parse_cookie_name(
        os.environ.get("SESSIONPROBE_COOKIE_NAME", DEFAULT_COOKIE_NAME),
        source="SESSIONPROBE_COOKIE_NAME",
    )

    return SessionProbeConfig(
        base_url=os.environ.get("SESSIONPROBE_BASE_URL", ""),
        cookie_name=cookie_name,
        request_timeout=timeout,
        user=parse_credentials(
            os.environ.get("SESSIONPROBE_USER", "user:user"),
            source="SESSIONPROBE_USER",
        ),
        admin=parse_credentials(
            os.environ.get("SESSIONPROBE_ADMIN", "admin:admin"),
            source="SESSIONPROBE_ADMIN",
        ),
    )
