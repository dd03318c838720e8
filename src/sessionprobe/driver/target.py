"""In-process application targets: loading and serving aiohttp apps."""

from __future__ import annotations

import contextlib
import importlib
import importlib.util
import socket
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from aiohttp import web

from sessionprobe._internal.errors import TargetError
from sessionprobe._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import ModuleType

logger = get_logger("driver.target")


def get_free_port(host: str = "127.0.0.1") -> int:
    """Find an available TCP port on ``host``."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((host, 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


@contextlib.asynccontextmanager
async def serve_app(
    app: web.Application,
    *,
    host: str = "127.0.0.1",
    port: int | None = None,
) -> AsyncIterator[str]:
    """Serve an aiohttp application in-process for the duration of the block.

    Args:
        app: The application to serve.
        host: Interface to bind.
        port: Port to bind. Defaults to a free port.

    Yields:
        The base URL of the running application (e.g.
        ``http://127.0.0.1:54321``).
    """
    port = port or get_free_port(host)
    runner = web.AppRunner(app)
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        await site.start()
        base_url = f"http://{host}:{port}"
        logger.info("Serving in-process target at %s", base_url)
        yield base_url
    finally:
        await runner.cleanup()


def _import_file(path: Path) -> ModuleType:
    if path.suffix != ".py":
        msg = f"Target file must be a .py file, got: {path}"
        raise TargetError(msg)

    module_name = f"sessionprobe_target_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Could not create module spec for: {path}"
        raise TargetError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to import target file {path}: {exc}"
        raise TargetError(msg) from exc
    return module


def load_app(target: str) -> web.Application:
    """Resolve ``"<file.py or module>:<attribute>"`` to an aiohttp app.

    The attribute may be a ``web.Application`` or a zero-argument callable
    returning one. ``<file.py>`` is tried as a path first, then as a dotted
    module name.

    Raises:
        TargetError: If the target cannot be resolved to an application.
    """
    location, sep, attr_name = target.rpartition(":")
    if not sep or not location or not attr_name:
        msg = f"Target must be in '<module or file.py>:<attribute>' form, got: {target!r}"
        raise TargetError(msg)

    path = Path(location)
    if path.suffix == ".py" or path.exists():
        if not path.exists():
            msg = f"Target file not found: {path}"
            raise TargetError(msg)
        module = _import_file(path)
    else:
        try:
            module = importlib.import_module(location)
        except ImportError as exc:
            msg = f"Could not import target module {location!r}: {exc}"
            raise TargetError(msg) from exc

    obj = getattr(module, attr_name, None)
    if obj is None:
        msg = f"{location!r} has no attribute {attr_name!r}"
        raise TargetError(msg)

    if not isinstance(obj, web.Application):
        if not callable(obj):
            msg = f"{target!r} is neither an aiohttp Application nor a factory"
            raise TargetError(msg)
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory {target!r} failed: {exc}"
            raise TargetError(msg) from exc

    if not isinstance(obj, web.Application):
        msg = f"Factory {target!r} returned {type(obj).__name__}, not an aiohttp Application"
        raise TargetError(msg)
    return obj
