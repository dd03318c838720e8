"""Scenario definitions, the ``@scenario`` decorator and the registry."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from sessionprobe._internal.errors import ScenarioError

if TYPE_CHECKING:
    from collections.abc import Callable

    from sessionprobe.driver.http_client import RequestDriver
    from sessionprobe.scenarios.context import Accounts


class ScenarioFunc(Protocol):
    """Protocol for scenario coroutines: ``(driver, accounts) -> None``."""

    @property
    def __name__(self) -> str:
        """Function name."""
        ...

    async def __call__(self, driver: RequestDriver, accounts: Accounts) -> None:
        """Run the scenario."""
        ...


@dataclass(frozen=True)
class ScenarioDefinition:
    """A registered verification scenario.

    Attributes:
        name: Unique name used for selection on the command line.
        func: The coroutine implementing the scenario steps.
        description: One-line summary shown by ``sessionprobe list``.
    """

    name: str
    func: ScenarioFunc
    description: str = ""


class ScenarioRegistry:
    """Ordered registry of scenario definitions.

    Registration order is execution order.
    """

    def __init__(self) -> None:
        self._scenarios: dict[str, ScenarioDefinition] = {}

    def register(self, definition: ScenarioDefinition) -> None:
        """Register a scenario definition.

        Raises:
            ScenarioError: If the name is already registered.
        """
        if definition.name in self._scenarios:
            msg = f"Scenario {definition.name!r} is already registered"
            raise ScenarioError(msg)
        self._scenarios[definition.name] = definition

    def get(self, name: str) -> ScenarioDefinition | None:
        """Look up a scenario by name."""
        return self._scenarios.get(name)

    def get_all(self) -> list[ScenarioDefinition]:
        """Return all registered scenarios in registration order."""
        return list(self._scenarios.values())

    def select(self, names: list[str] | None = None) -> list[ScenarioDefinition]:
        """Return the named scenarios, or all of them when ``names`` is empty.

        Raises:
            ScenarioError: If any name is not registered.
        """
        if not names:
            return self.get_all()
        unknown = [name for name in names if name not in self._scenarios]
        if unknown:
            msg = (
                f"Unknown scenario(s): {', '.join(unknown)}. "
                f"Available: {', '.join(self.names())}"
            )
            raise ScenarioError(msg)
        return [self._scenarios[name] for name in names]

    def names(self) -> list[str]:
        """Return registered names in registration order."""
        return list(self._scenarios)

    def clear(self) -> None:
        """Remove all registered scenarios. Primarily for testing."""
        self._scenarios.clear()

    def __len__(self) -> int:
        return len(self._scenarios)


# Global registry holding the built-in scenarios.
registry = ScenarioRegistry()


def scenario(
    *,
    name: str,
    description: str = "",
    into: ScenarioRegistry | None = None,
) -> Callable[[ScenarioFunc], ScenarioFunc]:
    """Register a coroutine function as a verification scenario.

    The function is returned unchanged, so it can still be awaited
    directly with a driver and accounts.

    Args:
        name: Unique scenario name.
        description: One-line summary. Defaults to the first docstring line.
        into: Registry to register into. Defaults to the global registry.

    Raises:
        ScenarioError: If the function is not a coroutine function or the
            name is taken.
    """

    def decorator(func: ScenarioFunc) -> ScenarioFunc:
        if not asyncio.iscoroutinefunction(func):
            msg = f"Scenario {func.__name__} must be an async function"
            raise ScenarioError(msg)
        summary = description or (func.__doc__ or "").strip().split("\n", 1)[0]
        (into if into is not None else registry).register(
            ScenarioDefinition(name=name, func=func, description=summary),
        )
        return func

    return decorator
