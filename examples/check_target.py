"""Run the fixation scenarios from Python instead of the CLI.

Prints the JSON result and exits non-zero when protection could not be
verified. Run with:

    python examples/check_target.py http://localhost:8080
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from sessionprobe import ScenarioRunner
from sessionprobe._internal.config import load_config
from sessionprobe._internal.logging import setup_logging


async def main(base_url: str) -> int:
    setup_logging(logging.INFO)
    result = await ScenarioRunner(base_url, config=load_config()).run()
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.passed else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080")))
