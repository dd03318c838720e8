"""``sessionprobe run`` — run fixation scenarios and report each step."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sessionprobe._internal.config import load_config, parse_cookie_name, parse_credentials
from sessionprobe._internal.errors import SessionProbeError
from sessionprobe._internal.logging import setup_logging
from sessionprobe.driver.target import load_app, serve_app
from sessionprobe.engine.runner import ScenarioRunner
from sessionprobe.scenarios.expect import describe_status

if TYPE_CHECKING:
    from sessionprobe._internal.config import SessionProbeConfig
    from sessionprobe.driver.http_client import Observation
    from sessionprobe.engine.models import RunResult, ScenarioResult

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _short(token: str | None) -> str:
    if token is None:
        return "-"
    return token if len(token) <= 12 else f"{token[:10]}…"


def _scenario_table(result: ScenarioResult) -> Table:
    """Build a Rich table listing every step of a scenario."""
    verdict = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
    table = Table(
        title=f"{result.name} {verdict}",
        show_header=True,
        header_style="bold cyan",
        expand=True,
    )
    table.add_column("Step", style="bold")
    table.add_column("Request")
    table.add_column("Auth")
    table.add_column("Sent", justify="right")
    table.add_column("Status", justify="right")
    table.add_column("Session", justify="right")

    for obs in result.observations:
        style = "red" if obs.name == result.failed_step else None
        table.add_row(
            obs.name,
            f"{obs.method} {obs.path}",
            obs.authenticated_as or "-",
            _short(obs.sent_token),
            describe_status(obs.status_code),
            _short(obs.session_token) + (" (new)" if obs.issued else ""),
            style=style,
        )
    return table


def _print_observation(scenario_name: str, obs: Observation) -> None:
    """Print one line per request as the scenario runs."""
    console.print(
        f"[dim]{scenario_name}[/dim] {obs.name} -> {describe_status(obs.status_code)}",
        highlight=False,
    )


def _print_result(result: RunResult) -> None:
    for scenario_result in result.scenarios:
        console.print(_scenario_table(scenario_result))
        if scenario_result.failure:
            console.print(f"  [red]{scenario_result.failure}[/red]")

    passed = len(result.scenarios) - len(result.failed)
    console.print(
        f"[bold]{passed}/{len(result.scenarios)}[/bold] scenario(s) passed against {result.target}"
    )


def _write_output(result: RunResult, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(result.to_dict(), indent=2))
    console.print(f"[dim]Result written to {output}[/dim]")


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


async def _execute(
    config: SessionProbeConfig,
    app_spec: str | None,
    scenarios: list[str] | None,
) -> RunResult:
    """Run the selected scenarios, serving ``app_spec`` in-process if given."""
    if app_spec is not None:
        app = load_app(app_spec)
        async with serve_app(app) as base_url:
            return await ScenarioRunner(
                base_url, config=config, on_observation=_print_observation
            ).run(scenarios)
    return await ScenarioRunner(
        config.base_url, config=config, on_observation=_print_observation
    ).run(scenarios)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


def run_cmd(
    base_url: str | None = typer.Option(
        None,
        "--base-url",
        "-u",
        help="Base URL of a running target (default: $SESSIONPROBE_BASE_URL).",
    ),
    app_spec: str | None = typer.Option(
        None,
        "--app",
        "-a",
        help="Serve an aiohttp app in-process, e.g. 'app.py:create_app'.",
    ),
    scenarios: list[str] | None = typer.Option(
        None,
        "--scenario",
        "-s",
        help="Scenario to run (repeatable). Default: all.",
    ),
    cookie_name: str | None = typer.Option(
        None,
        "--cookie-name",
        help="Session cookie name (default: JSESSIONID).",
    ),
    user: str | None = typer.Option(
        None,
        "--user",
        help="Ordinary principal as username:password.",
    ),
    admin: str | None = typer.Option(
        None,
        "--admin",
        help="Admin principal as username:password.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Request timeout in seconds.",
        min=0.001,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the result as JSON to this file.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit structured JSON logs.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging.",
    ),
) -> None:
    """Run fixation scenarios against a target and report each step."""
    setup_logging(level=logging.DEBUG if verbose else logging.WARNING, json_format=json_logs)

    try:
        config = load_config()
        overrides: dict[str, object] = {}
        if base_url is not None:
            overrides["base_url"] = base_url
        if cookie_name is not None:
            overrides["cookie_name"] = parse_cookie_name(cookie_name, source="--cookie-name")
        if user is not None:
            overrides["user"] = parse_credentials(user, source="--user")
        if admin is not None:
            overrides["admin"] = parse_credentials(admin, source="--admin")
        if timeout is not None:
            overrides["request_timeout"] = timeout
        config = dataclasses.replace(config, **overrides)
    except SessionProbeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if app_spec is not None and base_url is not None:
        raise typer.BadParameter("--base-url and --app are mutually exclusive")
    if app_spec is None and not config.base_url:
        raise typer.BadParameter("Give a target with --base-url, --app or SESSIONPROBE_BASE_URL")

    console.print(
        Panel(
            f"[bold]Target:[/bold]    {app_spec or config.base_url}\n"
            f"[bold]Cookie:[/bold]    {config.cookie_name}\n"
            f"[bold]Scenarios:[/bold] {', '.join(scenarios) if scenarios else 'all'}",
            title="SessionProbe",
            border_style="cyan",
        )
    )

    try:
        result = asyncio.run(_execute(config, app_spec, scenarios or None))
    except SessionProbeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _print_result(result)
    if output is not None:
        _write_output(result, output)

    if not result.passed:
        console.print("[red]FAIL:[/red] session fixation protection could not be verified.")
        raise typer.Exit(code=1)

    console.print("[green]Session fixation protection verified.[/green]")
