"""Discord announcements for penalties and race-day briefings."""

from __future__ import annotations

import datetime
import logging
from zoneinfo import ZoneInfo

import discord

from rookies_bot.api_logging import log_api_call
from rookies_bot.config import Config
from rookies_bot.exceptions import ChatError
from rookies_bot.models.driver import Driver
from rookies_bot.models.penalties import CATEGORIES, Penalties

logger = logging.getLogger(__name__)


def normalize_handle(handle: str) -> str:
    """Discord usernames are matched lowercased with dots removed."""
    return handle.lower().replace(".", "")


def next_briefing_time(
    now: datetime.datetime,
    weekday: int,
    hour: int,
    minute: int,
    timezone: str,
) -> datetime.datetime:
    """Next briefing slot on ``weekday`` (0 = Monday), counting today."""
    tz = ZoneInfo(timezone)
    local_now = now.astimezone(tz)
    target = local_now.date() + datetime.timedelta(days=(weekday - local_now.weekday()) % 7)
    return datetime.datetime.combine(target, datetime.time(hour, minute), tzinfo=tz)


class ChatClient:
    """Posts to the league's Discord channel over the REST API.

    Usage:
        async with await ChatClient.connect(config) as chat:
            message = await chat.send_message(await chat.build_penalty_message(penalties))
            await chat.repin(message)
    """

    def __init__(self, client: discord.Client, config: Config) -> None:
        self._client = client
        self._config = config
        self._guild: discord.Guild | None = None
        self._members: dict[str, int] | None = None

    @classmethod
    async def connect(cls, config: Config) -> ChatClient:
        """Log in with the bot token. No gateway connection is opened."""
        intents = discord.Intents.none()
        intents.guilds = True
        intents.members = True
        client = discord.Client(intents=intents)
        try:
            await client.login(config.discord_token)
        except (discord.LoginFailure, discord.HTTPException) as exc:
            await client.close()
            raise ChatError(f"Failed to connect to Discord: {exc}") from exc
        return cls(client, config)

    async def __aenter__(self) -> ChatClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    # ── Messages ───────────────────────────────────────────────

    async def build_penalty_message(self, penalties: Penalties) -> str:
        previous = self._config.previous_round
        message = (
            f"\n🚓 **Penalties from Round {previous.number}** 🚓 \n\n"
            f"Stewarding is in from Round {previous.number}. The following penalties "
            f"are to be served next week at {self._config.next_round.track}:\n"
        )
        return message + await self._penalty_summary(penalties)

    async def build_briefing_message(self, penalties: Penalties, briefing_url: str) -> str:
        role = await self._lookup_role(self._config.discord_role_name)
        briefing_time = self.briefing_time()
        message = (
            "\n🏎 **It's Race Day!!** 🏎\n\n"
            f"<@&{role.id}> **Mandatory** drivers' briefing is at "
            f"<t:{int(briefing_time.timestamp())}>. Here's the [briefing doc]({briefing_url}) "
            f"for Round {self._config.next_round.number}.\n\n"
            "**Penalties to be Served This Week**\n"
        )
        return message + await self._penalty_summary(penalties)

    async def _penalty_summary(self, penalties: Penalties) -> str:
        message = ""
        for category in CATEGORIES:
            message += f"\n**{category.chat_heading}**\n"
            carried_over = penalties.carried_over(category.key)
            new = penalties.new(category.key)
            if not carried_over and not new:
                message += "- None!\n"
                continue
            for driver in carried_over:
                message += f"- <@{await self._driver_id(driver)}> (carried over)\n"
            for driver in new:
                message += f"- <@{await self._driver_id(driver)}>\n"

        message += (
            "\n[Explanations of penalties can be found here.]"
            f"({self._config.previous_round.penalty_tracker_link})\n"
        )
        return message

    @log_api_call
    async def send_message(self, content: str) -> discord.Message:
        """Post ``content`` to the announcement channel with link embeds suppressed."""
        channel = await self._channel()
        try:
            return await channel.send(content, suppress_embeds=True)
        except discord.HTTPException as exc:
            raise ChatError(f"Failed to send message: {exc}") from exc

    @log_api_call
    async def repin(self, message: discord.Message) -> None:
        """Unpin the bot's earlier announcements and pin ``message``."""
        channel = await self._channel()
        bot_id = self._client.user.id if self._client.user else None
        try:
            for pinned in await channel.pins():
                if pinned.author.id == bot_id:
                    logger.debug("Unpinning message %s", pinned.id)
                    await pinned.unpin()
            await message.pin()
        except discord.HTTPException as exc:
            raise ChatError(f"Failed to pin message: {exc}") from exc

    # ── Briefing event ─────────────────────────────────────────

    def briefing_time(self, now: datetime.datetime | None = None) -> datetime.datetime:
        config = self._config
        return next_briefing_time(
            now or datetime.datetime.now(datetime.UTC),
            config.briefing_weekday,
            config.briefing_hour,
            config.briefing_minute,
            config.briefing_timezone,
        )

    @log_api_call
    async def create_briefing_event(self) -> discord.ScheduledEvent:
        """Schedule the drivers' briefing as a stage event on the briefing channel."""
        guild = await self._get_guild()
        next_round = self._config.next_round
        try:
            return await guild.create_scheduled_event(
                name=f"Rookies Briefing Round {next_round.number} - {next_round.track}",
                start_time=self.briefing_time(),
                channel=discord.Object(id=self._config.discord_briefing_channel_id),
                entity_type=discord.EntityType.stage_instance,
                privacy_level=discord.PrivacyLevel.guild_only,
            )
        except discord.HTTPException as exc:
            raise ChatError(f"Failed to create briefing event: {exc}") from exc

    # ── Lookups ────────────────────────────────────────────────

    async def _channel(self) -> discord.TextChannel:
        try:
            channel = await self._client.fetch_channel(self._config.discord_channel_id)
        except discord.HTTPException as exc:
            raise ChatError(
                f"Failed to fetch channel {self._config.discord_channel_id}: {exc}"
            ) from exc
        if not isinstance(channel, discord.TextChannel):
            raise ChatError(
                "provided discord_channel_id was not a guild text channel: "
                f"{self._config.discord_channel_id}"
            )
        return channel

    async def _get_guild(self) -> discord.Guild:
        if self._guild is not None:
            return self._guild
        channel = await self._channel()
        try:
            self._guild = await self._client.fetch_guild(channel.guild.id)
        except discord.HTTPException as exc:
            raise ChatError(f"Failed to fetch guild {channel.guild.id}: {exc}") from exc
        return self._guild

    async def _lookup_role(self, role_name: str) -> discord.Role:
        guild = await self._get_guild()
        try:
            roles = await guild.fetch_roles()
        except discord.HTTPException as exc:
            raise ChatError(f"Failed to fetch roles: {exc}") from exc
        for role in roles:
            if role.name == role_name:
                return role
        raise ChatError(f"role {role_name} not found")

    async def _driver_id(self, driver: Driver) -> int:
        if self._members is None:
            guild = await self._get_guild()
            members: dict[str, int] = {}
            try:
                async for member in guild.fetch_members(limit=None):
                    members[normalize_handle(member.name)] = member.id
            except (discord.HTTPException, discord.ClientException) as exc:
                raise ChatError(f"Failed to fetch guild members: {exc}") from exc
            logger.debug("Loaded %d guild members", len(members))
            self._members = members

        try:
            return self._members[normalize_handle(driver.discord_handle)]
        except KeyError:
            raise ChatError(
                f"could not find user {driver.discord_handle} in guild. "
                "check for special characters or league abandonment"
            ) from None
