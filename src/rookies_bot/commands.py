"""The announce-penalties and race-setup workflows."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import discord

from rookies_bot.briefing import BriefingGenerator
from rookies_bot.chat import ChatClient
from rookies_bot.client import SimGridClient
from rookies_bot.config import Config, RoundConfig, next_round_filename, save_round_config
from rookies_bot.models.penalties import Penalties

logger = logging.getLogger(__name__)


async def announce_penalties(chat: ChatClient, penalties: Penalties) -> discord.Message:
    """Post the stewarding results and pin them."""
    content = await chat.build_penalty_message(penalties)
    message = await chat.send_message(content)
    await chat.repin(message)
    logger.info("Announced penalties")
    return message


def generate_next_round_config(
    config: Config,
    simgrid: SimGridClient,
    briefing: BriefingGenerator,
    penalties: Penalties,
) -> RoundConfig:
    """Seed the round config used to steward the round being raced tonight."""
    next_round = simgrid.next_round(config.championship_id, config.next_round)
    tracker_link = briefing.generate_penalty_tracker(next_round)
    return RoundConfig(
        previous_round=config.next_round,
        next_round=next_round.model_copy(update={"penalty_tracker_link": tracker_link}),
        penalties_carried_over=penalties.consolidate(),
    )


async def race_setup(
    config: Config,
    simgrid: SimGridClient,
    chat: ChatClient,
    briefing: BriefingGenerator,
    penalties: Penalties,
    output_dir: str | Path = ".",
) -> Path | None:
    """Generate and announce the briefing, schedule it, and seed the next round.

    Returns:
        Path of the written round config, or None when the season is over.
    """
    # Google and SimGrid clients are blocking; keep them off the event loop.
    briefing_url = await asyncio.to_thread(briefing.generate_briefing, penalties)

    content = await chat.build_briefing_message(penalties, briefing_url)
    message = await chat.send_message(content)
    await chat.repin(message)
    await chat.create_briefing_event()
    logger.info("Announced briefing for round %d", config.next_round.number)

    if not config.next_round.track:
        logger.info("No track set for the next round, not writing a round config")
        return None

    next_round_config = await asyncio.to_thread(
        generate_next_round_config, config, simgrid, briefing, penalties
    )
    path = Path(output_dir) / next_round_filename(config.season, config.next_round)
    save_round_config(next_round_config, path)
    logger.info("Wrote next round config to %s", path)
    return path
