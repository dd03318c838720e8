"""Integration tests for the ScenarioRunner."""

from __future__ import annotations

import logging

import pytest

from sessionprobe._internal.config import SessionProbeConfig
from sessionprobe._internal.errors import ScenarioError
from sessionprobe.driver.target import serve_app
from sessionprobe.engine.runner import ScenarioRunner
from sessionprobe.scenarios import Accounts
from sessionprobe.scenarios.registry import ScenarioRegistry, scenario

from fixation_target import create_app


@pytest.mark.timeout(30)
class TestScenarioRunner:
    async def test_all_builtin_scenarios_pass(self, secure_target: str):
        result = await ScenarioRunner(secure_target).run()

        assert result.passed
        assert result.target == secure_target
        assert [r.name for r in result.scenarios] == ["authenticated-user", "anonymous-start"]
        assert result.scenarios[0].status_sequence == (200, 200, 403, 200, 401)
        assert result.scenarios[1].status_sequence == (200, 401, 401, 200, 401)
        assert all(r.elapsed_seconds > 0 for r in result.scenarios)

    async def test_vulnerable_target_fails(self, vulnerable_target: str):
        result = await ScenarioRunner(vulnerable_target).run()

        assert not result.passed
        assert len(result.failed) == 2
        first = result.scenarios[0]
        assert first.failed_step == "user session after admin login"
        assert first.status_sequence == (200, 200, 403, 200, 200)
        assert "expected access denied" in first.failure

    async def test_select_single_scenario(self, secure_target: str):
        result = await ScenarioRunner(secure_target).run(["anonymous-start"])
        assert [r.name for r in result.scenarios] == ["anonymous-start"]

    async def test_unknown_scenario_raises(self, secure_target: str):
        with pytest.raises(ScenarioError, match="Unknown scenario"):
            await ScenarioRunner(secure_target).run(["nope"])

    async def test_repeat_from_clean_state_is_identical(self):
        sequences = []
        for _ in range(2):
            async with serve_app(create_app()) as base_url:
                result = await ScenarioRunner(base_url).run()
            sequences.append([r.status_sequence for r in result.scenarios])
        assert sequences[0] == sequences[1]

    async def test_repeat_on_same_server_is_identical(self, secure_target: str):
        runner = ScenarioRunner(secure_target)
        first = await runner.run()
        second = await runner.run()
        assert [r.status_sequence for r in first.scenarios] == [
            r.status_sequence for r in second.scenarios
        ]

    async def test_transport_failure_recorded(self, dead_url: str):
        config = SessionProbeConfig(request_timeout=2.0)
        result = await ScenarioRunner(dead_url, config=config).run(["authenticated-user"])

        scenario_result = result.scenarios[0]
        assert not scenario_result.passed
        assert scenario_result.failed_step == "user login"
        assert scenario_result.status_sequence == (0,)

    async def test_accounts_from_config(self, secure_target: str):
        config = SessionProbeConfig(admin=("admin", "wrong"))
        runner = ScenarioRunner(secure_target, config=config)
        assert runner.accounts == Accounts(admin=("admin", "wrong"))

        result = await runner.run(["anonymous-start"])
        assert result.scenarios[0].failed_step == "admin login on anonymous session"

    async def test_on_observation_callback(self, secure_target: str):
        seen: list[tuple[str, int]] = []
        runner = ScenarioRunner(
            secure_target,
            on_observation=lambda name, obs: seen.append((name, obs.status_code)),
        )
        await runner.run(["authenticated-user"])
        assert seen == [("authenticated-user", s) for s in (200, 200, 403, 200, 401)]

    async def test_custom_registry(self, secure_target: str):
        local = ScenarioRegistry()

        @scenario(name="visit", into=local)
        async def visit(driver, accounts) -> None:
            await driver.send(accounts.public_path)

        result = await ScenarioRunner(secure_target, registry=local).run()
        assert result.passed
        assert result.scenarios[0].status_sequence == (200,)

    async def test_other_errors_propagate(self, secure_target: str):
        local = ScenarioRegistry()

        @scenario(name="boom", into=local)
        async def boom(driver, accounts) -> None:
            raise ScenarioError("bad scenario")

        with pytest.raises(ScenarioError, match="bad scenario"):
            await ScenarioRunner(secure_target, registry=local).run()

    async def test_failure_logged(self, vulnerable_target: str, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="sessionprobe"):
            await ScenarioRunner(vulnerable_target).run(["anonymous-start"])
        assert any("anonymous-start failed" in r.getMessage() for r in caplog.records)
