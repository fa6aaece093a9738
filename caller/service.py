from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .client import CallerClient
from .config import load_config
from .scheduler import CallerScheduler, CallResult


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


async def run(args: argparse.Namespace) -> Optional[CallResult]:
    settings = load_config(args.env_file)
    if args.tournament:
        settings = settings.copy(tournament_id=args.tournament)
    configure_logging(args.verbose)
    logger = logging.getLogger("tambola.caller")

    client = CallerClient(settings)
    scheduler = CallerScheduler(settings, client, logger=logger)

    if args.once:
        result = await scheduler.run_once()
        if result:
            logger.info(
                "Caller drew %s for tournament=%s total=%s",
                list(result.new_numbers),
                result.tournament_id,
                result.total_called,
            )
        return result

    await scheduler.run_forever()
    return None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tambola number caller")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with settings")
    parser.add_argument("--tournament", type=str, default=None, help="Tournament to call numbers for.")
    parser.add_argument("--once", action="store_true", help="Call a single batch and exit.")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("Caller stopped by user.")


if __name__ == "__main__":
    main()
