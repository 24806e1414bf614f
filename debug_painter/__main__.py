# debug_painter/__main__.py
# =============================================================================
# DEMO ENTRY POINT
# =============================================================================
#
# Usage: python -m debug_painter
#        python -m debug_painter --no-color --slow-threshold 20 --steps 4
#
# =============================================================================

import sys
import time
import asyncio
import logging
import argparse
from typing import List, Optional

from .config import PainterConfig
from .exceptions import ConfigurationError
from .painter import DebugPainter

logger = logging.getLogger(__name__)


class SampleService:
    """Something to watch."""

    def lookup(self, key: str, delay_s: float = 0.0) -> dict:
        time.sleep(delay_s)
        return {"key": key, "rows": [key] * 1000}

    async def fetch(self, url: str) -> int:
        await asyncio.sleep(0.01)
        return len(url)

    def explode(self, reason: str) -> None:
        raise RuntimeError(reason)


def run_demo(painter: DebugPainter, steps: int) -> None:
    service = SampleService()
    for method_name in ("lookup", "fetch", "explode"):
        painter.watch(service, method_name)

    painter.console.info("Starting demo with", steps, "steps")

    service.lookup("fast")
    service.lookup("slow", delay_s=painter.options.slow_threshold * 1.5 / 1000)
    asyncio.run(service.fetch("https://example.invalid/resource"))

    try:
        service.explode("demo failure")
    except RuntimeError:
        painter.console.warn("explode() failed as expected")

    group_id = painter.start_group("demo pipeline")
    for index in range(1, steps + 1):
        time.sleep(0.005 * index)
        painter.add_step(group_id, f"stage {index}")
    painter.end_group(group_id)

    stats = painter.get_stats()
    painter.console.log("Logged", stats["total_logs"], "entries:", stats["by_type"])


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Debug painter demonstration")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colours")
    parser.add_argument("--no-memory", action="store_true", help="Hide memory deltas")
    parser.add_argument("--slow-threshold", type=float, default=None, help="Slow call threshold in ms")
    parser.add_argument("--steps", type=int, default=3, help="Number of steps in the demo group")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    overrides = {}
    if args.no_color:
        overrides["colorize"] = False
    if args.no_memory:
        overrides["show_memory"] = False
    if args.slow_threshold is not None:
        overrides["slow_threshold"] = args.slow_threshold

    try:
        config = PainterConfig.from_env(**overrides)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info(f"[DEBUG_PAINTER] Running demo with {config.model_dump()}")
    run_demo(DebugPainter(config), max(args.steps, 0))
    return 0


if __name__ == "__main__":
    sys.exit(main())
