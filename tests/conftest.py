"""Shared test fixtures for the SessionProbe test suite."""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from aiohttp import web
from fixation_target import create_app, create_vulnerable_app

from sessionprobe.driver.target import get_free_port, serve_app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

TARGET_MODULE = Path(__file__).parent / "fixation_target.py"


# =============================================================================
# Pytest configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    for item in items:
        test_path = str(item.fspath)
        if "/unit/" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path:
            item.add_marker(pytest.mark.e2e)


# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_logging() -> Iterator[None]:
    """Undo handlers and propagation changes made by setup_logging."""
    logger = logging.getLogger("sessionprobe")
    handlers = list(logger.handlers)
    propagate = logger.propagate
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.propagate = propagate
    logger.setLevel(level)


# =============================================================================
# In-process targets
# =============================================================================


@pytest.fixture
def secure_app() -> web.Application:
    """Fresh target with fixation protection (clean session store)."""
    return create_app()


@pytest.fixture
async def secure_target(secure_app: web.Application) -> AsyncIterator[str]:
    """Base URL of a running target with fixation protection."""
    async with serve_app(secure_app) as base_url:
        yield base_url


@pytest.fixture
async def vulnerable_target() -> AsyncIterator[str]:
    """Base URL of a running target without fixation protection."""
    async with serve_app(create_vulnerable_app()) as base_url:
        yield base_url


@pytest.fixture
def dead_url() -> str:
    """A base URL nothing listens on."""
    return f"http://127.0.0.1:{get_free_port()}"


# =============================================================================
# Sync fixtures for CLI tests
# =============================================================================


def _serve_in_thread(factory: Callable[[], web.Application]) -> Iterator[str]:
    port = get_free_port()
    started = threading.Event()
    loop_holder: list[asyncio.AbstractEventLoop] = []

    def _thread_target() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        runner = web.AppRunner(factory())
        loop.run_until_complete(runner.setup())
        site = web.TCPSite(runner, "127.0.0.1", port)
        loop.run_until_complete(site.start())
        loop_holder.append(loop)
        started.set()
        loop.run_forever()
        loop.run_until_complete(runner.cleanup())
        loop.close()

    thread = threading.Thread(target=_thread_target, daemon=True)
    thread.start()
    started.wait(timeout=5.0)

    yield f"http://127.0.0.1:{port}"

    if loop_holder:
        loop_holder[0].call_soon_threadsafe(loop_holder[0].stop)
    thread.join(timeout=5.0)


@pytest.fixture
def sync_secure_target() -> Iterator[str]:
    """Protected target running in a background thread.

    Needed where the code under test calls ``asyncio.run`` itself.
    """
    yield from _serve_in_thread(create_app)


@pytest.fixture
def sync_vulnerable_target() -> Iterator[str]:
    """Unprotected target running in a background thread."""
    yield from _serve_in_thread(create_vulnerable_app)
