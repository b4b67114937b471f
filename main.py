#!/usr/bin/env python3
"""Demo runner showing the repeater drivers end to end."""

import argparse
import asyncio
import logging
from typing import Optional

from dotenv import load_dotenv

# Load .env before the repeater package reads its configuration
load_dotenv()

from repeater import Repeater, repeat  # noqa: E402

logger = logging.getLogger(__name__)


def print_call(rt: int) -> None:
    print(rt)


def log_stats(label: str, repeater: Repeater) -> None:
    stats = repeater.stats()
    logger.info(f"{label}: status={stats.status.value}, run_time={stats.run_time:.1f}ms")


async def run_demo(
    count: int, every: str, stop_after: float, infinite_every: str
) -> list[Repeater]:
    """Run a plain repeat, a delayed repeat, an until run and a stopped infinite run."""
    finished: list[Repeater] = []

    r = await repeat(print_call).repeat(count)
    log_stats("repeat", r)
    finished.append(r)

    r = await repeat(print_call).every(every).repeat(count)
    log_stats("repeat with delay", r)
    finished.append(r)

    r = await repeat(print_call).every(every).until(lambda rt: rt >= count)
    log_stats("until", r)
    finished.append(r)

    r = repeat(print_call).every(infinite_every).infinite()
    await asyncio.sleep(stop_after)
    r.stop()
    await r.join()
    log_stats("infinite", r)
    finished.append(r)

    return finished


def main(argv: Optional[list[str]] = None) -> None:
    """Parse arguments and run the demo."""
    parser = argparse.ArgumentParser(description="Repeater demo")
    parser.add_argument(
        "--count", type=int, default=10, help="Calls per bounded run (default: 10)"
    )
    parser.add_argument(
        "--every", type=str, default="1s", help="Delay for the delayed runs (default: 1s)"
    )
    parser.add_argument(
        "--stop-after",
        type=float,
        default=5.0,
        help="Seconds before the infinite run is stopped (default: 5)",
    )
    parser.add_argument(
        "--infinite-every",
        type=str,
        default="500ms",
        help="Delay for the infinite run (default: 500ms)",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO", help="Logging level (default: INFO)"
    )
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger.info("Starting repeater demo...")
    asyncio.run(run_demo(args.count, args.every, args.stop_after, args.infinite_every))


if __name__ == "__main__":
    main()
