"""SessionProbe — verify session-fixation protection for HTTP Basic auth."""

from __future__ import annotations

from sessionprobe.driver.http_client import Observation, RequestDriver
from sessionprobe.engine.models import RunResult, ScenarioResult
from sessionprobe.engine.runner import ScenarioRunner
from sessionprobe.scenarios import Accounts, SessionHolder, registry, scenario

__version__ = "0.1.0"

__all__ = [
    "Accounts",
    "Observation",
    "RequestDriver",
    "RunResult",
    "ScenarioResult",
    "ScenarioRunner",
    "SessionHolder",
    "registry",
    "scenario",
]
