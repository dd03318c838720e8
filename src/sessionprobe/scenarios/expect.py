"""Inline assertions on observations.

Every helper raises ``VerificationError`` on mismatch, which aborts the
running scenario.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sessionprobe._internal.errors import VerificationError

if TYPE_CHECKING:
    from sessionprobe.driver.http_client import Observation

_REASONS = {
    200: "OK",
    401: "Unauthorized",
    403: "Forbidden",
}


def describe_status(status: int) -> str:
    """Render a status code as e.g. ``403 Forbidden``."""
    if status == 0:
        return "no response"
    reason = _REASONS.get(status)
    return f"{status} {reason}" if reason else str(status)


def expect_status(observation: Observation, expected: int) -> Observation:
    """Require an exact status code."""
    if observation.status_code != expected:
        raise VerificationError(
            observation.name,
            f"status {describe_status(expected)}",
            f"status {describe_status(observation.status_code)}",
        )
    return observation


def expect_denied(observation: Observation) -> Observation:
    """Require any status other than 200.

    401 (session invalidated) and 403 (session kept but under-privileged)
    are equally acceptable.
    """
    if observation.ok:
        raise VerificationError(
            observation.name,
            "access denied (any status but 200)",
            f"status {describe_status(observation.status_code)}",
        )
    return observation


def expect_token(observation: Observation) -> str:
    """Require that a session was established and return its token."""
    if observation.session_token is None:
        raise VerificationError(observation.name, "a session token", "no session")
    return observation.session_token


def expect_same_token(step: str, expected: str | None, actual: str | None) -> None:
    """Require token identity."""
    if expected != actual:
        raise VerificationError(step, f"session token {expected!r}", f"{actual!r}")
