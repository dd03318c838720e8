"""Request driver: Basic-Auth and session-token aware HTTP client."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING

import aiohttp

from sessionprobe._internal.config import DEFAULT_COOKIE_NAME
from sessionprobe._internal.errors import TransportError
from sessionprobe._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from http.cookies import Morsel

    from sessionprobe._internal.types import Credentials

logger = get_logger("driver.http_client")


def _noop_callback(observation: Observation) -> None:
    """Default no-op observation callback."""


@dataclass(frozen=True)
class Observation:
    """What a single request revealed about the target.

    Attributes:
        name: Logical step name (e.g., "user login").
        method: HTTP method.
        path: Request path.
        url: Full request URL.
        status_code: HTTP response status code (0 if the request failed).
        sent_token: Session token attached to the request, if any.
        session_token: Session token present after the request: the one the
            response's session cookie carries, else the one that was sent,
            else None.
        issued: True if the response set a new session cookie value.
        authenticated_as: Username sent as Basic credentials, if any.
        latency_ms: Response time in milliseconds.
        error: Error message if the request failed, None otherwise.
    """

    name: str
    method: str
    path: str
    url: str
    status_code: int
    sent_token: str | None = None
    session_token: str | None = None
    issued: bool = False
    authenticated_as: str | None = None
    latency_ms: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True for HTTP 200."""
        return self.status_code == 200

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready dict."""
        return {
            "name": self.name,
            "method": self.method,
            "path": self.path,
            "status_code": self.status_code,
            "sent_token": self.sent_token,
            "session_token": self.session_token,
            "issued": self.issued,
            "authenticated_as": self.authenticated_as,
            "latency_ms": round(self.latency_ms, 3),
            "error": self.error,
        }


def _expired(morsel: Morsel[str], now: datetime | None = None) -> bool:
    """True if a Set-Cookie morsel deletes the cookie.

    Max-Age takes precedence over Expires when both are present.
    """
    if not morsel.value:
        return True
    max_age = str(morsel["max-age"]).strip()
    if max_age:
        return max_age.lstrip("-").isdigit() and int(max_age) <= 0

    expires = str(morsel["expires"]).strip()
    if not expires:
        return False
    try:
        expires_at = parsedate_to_datetime(expires)
    except (TypeError, ValueError):
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at <= (now or datetime.now(tz=UTC))


class RequestDriver:
    """Async HTTP client that attaches session tokens explicitly.

    The underlying ``aiohttp.ClientSession`` uses a ``DummyCookieJar``, so
    no cookie is ever carried implicitly from one request to the next:
    every request presents exactly the session token its caller passes.

    Attributes:
        base_url: Base URL prepended to all request paths.
        cookie_name: Name of the session cookie.
        headers: Headers applied to every request.
    """

    def __init__(
        self,
        base_url: str,
        *,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        headers: dict[str, str] | None = None,
        observation_callback: Callable[[Observation], None] | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the driver.

        Args:
            base_url: Base URL prepended to all request paths.
            cookie_name: Name of the cookie carrying the session token.
            headers: Default headers applied to every request.
            observation_callback: Callback invoked with an ``Observation``
                after each request. Defaults to a no-op.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.cookie_name = cookie_name
        self.headers: dict[str, str] = dict(headers or {})
        self._observation_callback = observation_callback or _noop_callback
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> RequestDriver:
        """Open the underlying aiohttp session."""
        self._session = aiohttp.ClientSession(
            timeout=self._timeout,
            cookie_jar=aiohttp.DummyCookieJar(),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Close the underlying aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def send(
        self,
        path: str,
        credentials: Credentials | None = None,
        session_token: str | None = None,
        *,
        name: str | None = None,
        method: str = "GET",
    ) -> Observation:
        """Send one request and observe status and session token.

        Args:
            path: URL path appended to base_url.
            credentials: Optional ``(username, password)`` sent as HTTP Basic.
            session_token: Optional session token sent as the session cookie.
            name: Logical step name. Defaults to ``"<METHOD> <path>"``.
            method: HTTP method.

        Returns:
            The observation for this request.

        Raises:
            RuntimeError: If the driver is used outside of an async context
                manager.
            TransportError: If the request could not be completed.
        """
        if self._session is None:
            msg = "RequestDriver must be used as an async context manager"
            raise RuntimeError(msg)

        url = f"{self.base_url}{path}"
        step_name = name or f"{method} {path}"
        headers = {**self.headers}
        if session_token is not None:
            headers["Cookie"] = f"{self.cookie_name}={session_token}"
        auth: aiohttp.BasicAuth | None = None
        if credentials is not None:
            # aiohttp refuses an explicit Authorization header alongside auth=
            headers.pop("Authorization", None)
            auth = aiohttp.BasicAuth(*credentials)

        start = time.monotonic()
        status_code = 0
        result_token = session_token
        issued = False
        error: str | None = None

        try:
            async with self._session.request(method, url, headers=headers, auth=auth) as resp:
                status_code = resp.status
                await resp.read()
                morsel = resp.cookies.get(self.cookie_name)
                if morsel is not None:
                    if _expired(morsel):
                        result_token = None
                    else:
                        issued = morsel.value != session_token
                        result_token = morsel.value
        except (aiohttp.ClientError, TimeoutError) as exc:
            error = f"{type(exc).__name__}: {exc}"
            result_token = None
            msg = f"{step_name}: {method} {url} failed: {error}"
            raise TransportError(msg) from exc
        finally:
            observation = Observation(
                name=step_name,
                method=method,
                path=path,
                url=url,
                status_code=status_code,
                sent_token=session_token,
                session_token=result_token,
                issued=issued,
                authenticated_as=credentials[0] if credentials is not None else None,
                latency_ms=(time.monotonic() - start) * 1000,
                error=error,
            )
            self._observation_callback(observation)

        logger.debug(
            "%s %s -> %d (sent=%s, now=%s)",
            method,
            path,
            status_code,
            session_token,
            result_token,
            extra={"step": step_name, "status": status_code, "session_token": result_token},
        )
        return observation
