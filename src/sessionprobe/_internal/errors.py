"""Custom exception hierarchy for SessionProbe."""

from __future__ import annotations


class SessionProbeError(Exception):
    """Base exception for all SessionProbe errors.

    All custom exceptions in SessionProbe inherit from this class, making
    it easy to catch any SessionProbe-specific error with a single except
    clause.
    """


class ScenarioError(SessionProbeError):
    """Raised when a scenario definition or selection is invalid.

    Examples:
        - A function decorated with @scenario is not a coroutine function.
        - Two scenarios are registered under the same name.
        - A scenario requested by name is not registered.
    """


class ConfigError(SessionProbeError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Required environment variable has an invalid value.
        - Credentials are not in ``username:password`` form.
    """


class TargetError(SessionProbeError):
    """Raised when an in-process application target cannot be loaded."""


class TransportError(SessionProbeError):
    """Raised when a request could not be completed at the transport level.

    Transport failures are never retried; they abort the running scenario.
    """


class VerificationError(SessionProbeError, AssertionError):
    """Raised when an observed response does not match the expectation.

    Subclasses ``AssertionError`` so test runners report it as a test
    failure rather than an error.

    Attributes:
        step: Name of the step whose expectation failed.
        expected: Human-readable expected value.
        actual: Human-readable observed value.
    """

    def __init__(self, step: str, expected: object, actual: object) -> None:
        self.step = step
        self.expected = expected
        self.actual = actual
        super().__init__(f"{step}: expected {expected}, got {actual}")
