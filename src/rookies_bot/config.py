"""Bot and round configuration, loaded from YAML.

The bot config holds durable settings (API tokens, template IDs, Discord
channels). The round config holds the penalties handed out after the last
race and the rounds either side of it; ``race-setup`` writes the next one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from rookies_bot.exceptions import ConfigError

M = TypeVar("M", bound=BaseModel)


class PenaltyCarNumbers(BaseModel):
    """Car numbers per penalty category."""

    model_config = ConfigDict(frozen=True)

    quali_bans_r1: list[int] = Field(default_factory=list)
    quali_bans_r2: list[int] = Field(default_factory=list)
    pit_starts_r1: list[int] = Field(default_factory=list)
    pit_starts_r2: list[int] = Field(default_factory=list)


class Round(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int = 0
    track: str = ""
    penalty_tracker_link: str = ""


class BotConfig(BaseModel):
    """Durable bot settings."""

    model_config = ConfigDict(frozen=True)

    simgrid_api_token: str = Field(min_length=1)
    championship_id: str = Field(min_length=1)
    season: str = Field(min_length=1)
    briefing_template_doc_id: str = Field(min_length=1)
    briefing_folder_id: str = Field(min_length=1)
    tracker_template_doc_id: str = Field(min_length=1)
    tracker_folder_id: str = Field(min_length=1)

    discord_token: str = Field(min_length=1)
    discord_channel_id: int = Field(gt=0)
    discord_role_name: str = Field(min_length=1)
    discord_briefing_channel_id: int = Field(gt=0)

    google_credentials_file: str | None = None

    # Briefing slot. Hour and minute are kept apart since YAML 1.1 reads
    # an unquoted 19:30 as a base-60 integer.
    briefing_timezone: str = "America/New_York"
    briefing_weekday: int = Field(default=0, ge=0, le=6)
    briefing_hour: int = Field(default=19, ge=0, le=23)
    briefing_minute: int = Field(default=30, ge=0, le=59)
    briefing_time_text: str = "7:30PM Eastern/4:30PM Pacific"

    @field_validator("briefing_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone {value!r}") from exc
        return value


class RoundConfig(BaseModel):
    """Per-round penalties and schedule."""

    model_config = ConfigDict(frozen=True)

    penalties: PenaltyCarNumbers = Field(default_factory=PenaltyCarNumbers)
    penalties_carried_over: PenaltyCarNumbers = Field(default_factory=PenaltyCarNumbers)
    next_round: Round = Field(default_factory=Round)
    previous_round: Round = Field(default_factory=Round)


class Config(BotConfig, RoundConfig):
    """Bot settings and round settings for a single run."""


def _load_file(path: str | Path, model: type[M]) -> M:
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except OSError as exc:
        raise ConfigError(f"Failed reading {path}: {exc}") from exc

    try:
        data: Any = yaml.safe_load(text) or {}
        return model.model_validate(data)
    except (yaml.YAMLError, ValidationError) as exc:
        raise ConfigError(f"Failed parsing {path}: {exc}") from exc


def load_config(bot_config_path: str | Path, round_config_path: str | Path) -> Config:
    """Load and merge the bot config and round config files.

    Raises:
        ConfigError: If either file is unreadable or fails validation.
    """
    bot_config = _load_file(bot_config_path, BotConfig)
    round_config = _load_file(round_config_path, RoundConfig)
    return Config(**dict(bot_config), **dict(round_config))


def save_round_config(round_config: RoundConfig, path: str | Path) -> None:
    """Write a round config to YAML, keys in declaration order."""
    data = yaml.safe_dump(
        round_config.model_dump(mode="json"),
        sort_keys=False,
        allow_unicode=True,
    )
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(data)
    except OSError as exc:
        raise ConfigError(f"Failed to write round config to {path}: {exc}") from exc


def next_round_filename(season: str, round_: Round) -> str:
    """Name of the round config file seeded after ``round_`` is raced."""
    track = round_.track.replace(" ", "-")
    return f"{season}-round-{round_.number}-{track}.yml".lower()
