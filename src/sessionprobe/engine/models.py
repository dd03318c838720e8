"""Result dataclasses for scenario runs."""

from __future__ import annotations

from dataclasses import dataclass, field

from sessionprobe.driver.http_client import Observation

__all__ = [
    "Observation",
    "RunResult",
    "ScenarioResult",
]


@dataclass
class ScenarioResult:
    """Outcome of one scenario.

    Attributes:
        name: Scenario name.
        observations: Every request the scenario made, in order.
        passed: True if every expectation held.
        failure: Expected-vs-actual message of the first failed expectation
            or the transport error that aborted the scenario.
        failed_step: Name of the step that failed, if any.
        elapsed_seconds: Wall-clock duration of the scenario.
    """

    name: str
    observations: list[Observation] = field(default_factory=list)
    passed: bool = False
    failure: str | None = None
    failed_step: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def status_sequence(self) -> tuple[int, ...]:
        """Status codes in request order."""
        return tuple(obs.status_code for obs in self.observations)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "passed": self.passed,
            "failure": self.failure,
            "failed_step": self.failed_step,
            "elapsed_seconds": round(self.elapsed_seconds, 4),
            "status_sequence": list(self.status_sequence),
            "observations": [obs.to_dict() for obs in self.observations],
        }


@dataclass
class RunResult:
    """Outcome of a full run against one target.

    Attributes:
        target: Base URL the scenarios ran against.
        scenarios: Per-scenario results in execution order.
    """

    target: str
    scenarios: list[ScenarioResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if at least one scenario ran and all of them passed."""
        return bool(self.scenarios) and all(result.passed for result in self.scenarios)

    @property
    def failed(self) -> list[ScenarioResult]:
        return [result for result in self.scenarios if not result.passed]

    def to_dict(self) -> dict[str, object]:
        return {
            "target": self.target,
            "passed": self.passed,
            "scenarios": [result.to_dict() for result in self.scenarios],
        }
