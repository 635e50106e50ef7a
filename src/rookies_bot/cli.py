"""Command line entry point.

Usage
-----
::

    rookies-bot [--config config.yml] announce-penalties round-3.yml
    rookies-bot [--config config.yml] race-setup round-3.yml [--output-dir DIR]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rookies_bot.briefing import BriefingGenerator
from rookies_bot.chat import ChatClient
from rookies_bot.client import SimGridClient
from rookies_bot.commands import announce_penalties, race_setup
from rookies_bot.config import load_config
from rookies_bot.exceptions import RookiesBotError
from rookies_bot.penalties import build_penalties

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rookies-bot",
        description="Weekly penalty and race-day automation for the Rookies league.",
    )
    parser.add_argument("-c", "--config", default="config.yml", help="bot config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    announce = subparsers.add_parser(
        "announce-penalties",
        help="Announces penalties to Discord",
    )
    announce.add_argument("round_config", help="round config file, e.g. round-3.yml")

    setup = subparsers.add_parser(
        "race-setup",
        help=(
            "Generates the race briefing doc, schedules the event, announces it in "
            "Discord, and sets up the next round's penalty file"
        ),
    )
    setup.add_argument("round_config", help="round config file, e.g. round-3.yml")
    setup.add_argument(
        "--output-dir",
        default=".",
        help="directory to write the next round's config to (default: current directory)",
    )
    return parser


async def _run(args: argparse.Namespace) -> None:
    config = load_config(args.config, args.round_config)

    with SimGridClient(config.simgrid_api_token) as simgrid:
        driver_lookup = simgrid.build_driver_lookup(config.championship_id)
        logger.debug("Found %d registered drivers", len(driver_lookup))
        penalties = build_penalties(driver_lookup, config)

        async with await ChatClient.connect(config) as chat:
            if args.command == "announce-penalties":
                await announce_penalties(chat, penalties)
            else:
                briefing = BriefingGenerator.connect(config)
                await race_setup(
                    config, simgrid, chat, briefing, penalties, output_dir=args.output_dir
                )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(_run(args))
    except RookiesBotError as exc:
        print(f"{args.command} failed: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
