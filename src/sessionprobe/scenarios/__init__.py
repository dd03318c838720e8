"""Scenario registry, expectations and the built-in fixation scenarios.

Importing this package registers the built-in scenarios
(``authenticated-user`` and ``anonymous-start``) in the global registry.
"""

from __future__ import annotations

from sessionprobe.scenarios.context import Accounts, SessionHolder
from sessionprobe.scenarios.fixation import anonymous_start, authenticated_user
from sessionprobe.scenarios.registry import (
    ScenarioDefinition,
    ScenarioRegistry,
    registry,
    scenario,
)

__all__ = [
    "Accounts",
    "ScenarioDefinition",
    "ScenarioRegistry",
    "SessionHolder",
    "anonymous_start",
    "authenticated_user",
    "registry",
    "scenario",
]
