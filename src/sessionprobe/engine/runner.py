"""Sequential scenario runner."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from sessionprobe._internal.config import SessionProbeConfig
from sessionprobe._internal.errors import TransportError, VerificationError
from sessionprobe._internal.logging import get_logger
from sessionprobe.driver.http_client import RequestDriver
from sessionprobe.engine.models import RunResult, ScenarioResult
from sessionprobe.scenarios import registry as default_registry
from sessionprobe.scenarios.context import Accounts

if TYPE_CHECKING:
    from collections.abc import Callable

    from sessionprobe.driver.http_client import Observation
    from sessionprobe.scenarios.registry import ScenarioDefinition, ScenarioRegistry

logger = get_logger("engine.runner")


class ScenarioRunner:
    """Runs verification scenarios one after another against a target.

    Each scenario gets a fresh ``RequestDriver``; nothing but the server's
    own session store is shared between scenarios. Steps are never retried.

    Attributes:
        base_url: Base URL of the target application.
        config: Effective configuration.
        accounts: Principals and paths handed to every scenario.
    """

    def __init__(
        self,
        base_url: str,
        *,
        config: SessionProbeConfig | None = None,
        accounts: Accounts | None = None,
        registry: ScenarioRegistry | None = None,
        on_observation: Callable[[str, Observation], None] | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            base_url: Base URL of the target application.
            config: Configuration. Defaults to ``SessionProbeConfig()``.
            accounts: Principals and paths. Defaults to those in ``config``.
            registry: Scenario registry. Defaults to the built-in registry.
            on_observation: Optional callback invoked with the scenario name
                and each observation as it happens.
        """
        self.base_url = base_url
        self.config = config or SessionProbeConfig()
        self.accounts = accounts or Accounts.from_config(self.config)
        self._registry = registry if registry is not None else default_registry
        self._on_observation = on_observation

    async def run_scenario(self, definition: ScenarioDefinition) -> ScenarioResult:
        """Run one scenario and record its outcome.

        Verification and transport failures end the scenario and are
        reported in the result; any other error propagates.
        """
        result = ScenarioResult(name=definition.name)

        def _record(observation: Observation) -> None:
            result.observations.append(observation)
            if self._on_observation is not None:
                self._on_observation(definition.name, observation)

        logger.info("Running scenario %s against %s", definition.name, self.base_url)
        start = time.monotonic()
        try:
            async with RequestDriver(
                self.base_url,
                cookie_name=self.config.cookie_name,
                headers=self.config.default_headers,
                observation_callback=_record,
                timeout=self.config.request_timeout,
            ) as driver:
                await definition.func(driver, self.accounts)
        except VerificationError as exc:
            result.failure = str(exc)
            result.failed_step = exc.step
        except TransportError as exc:
            result.failure = str(exc)
            result.failed_step = result.observations[-1].name if result.observations else None
        else:
            result.passed = True
        finally:
            result.elapsed_seconds = time.monotonic() - start

        if result.passed:
            logger.info(
                "Scenario %s passed (%d requests)",
                definition.name,
                len(result.observations),
                extra={"scenario": definition.name},
            )
        else:
            logger.warning(
                "Scenario %s failed: %s",
                definition.name,
                result.failure,
                extra={"scenario": definition.name, "step": result.failed_step},
            )
        return result

    async def run(self, names: list[str] | None = None) -> RunResult:
        """Run the named scenarios (default: all registered) in order.

        Raises:
            ScenarioError: If a requested scenario is not registered.
        """
        definitions = self._registry.select(names)
        run_result = RunResult(target=self.base_url)
        for definition in definitions:
            run_result.scenarios.append(await self.run_scenario(definition))
        return run_result
