"""Shared test fixtures and sample API responses."""

from __future__ import annotations

import logging

import pytest
import yaml

import rookies_bot.api_logging as api_logging
from rookies_bot.config import Config
from rookies_bot.models.driver import Driver, DriverLookup

BASE_URL = "https://www.thesimgrid.com/api/v1"
CHAMPIONSHIP_ID = "4242"


SAMPLE_USERS = [
    {"first_name": "Lando", "last_name": "Norris", "username": "lando.norris"},
    {"first_name": "Oscar", "last_name": "Piastri", "username": "OscarP"},
    {"first_name": "Max", "last_name": "Verstappen", "username": "max_v"},
    {"first_name": "Yuki", "last_name": "Tsunoda", "username": "yuki"},
]

SAMPLE_ENTRY_LIST = {
    "entries": [
        {"raceNumber": 4, "drivers": [{"firstName": "Lando", "lastName": "Norris"}]},
        {
            "raceNumber": 81,
            "drivers": [
                {"firstName": "Oscar", "lastName": "Piastri"},
                {"firstName": "", "lastName": ""},
            ],
        },
        {"raceNumber": 1, "drivers": [{"firstName": "Max", "lastName": "Verstappen"}]},
    ]
}

SAMPLE_CHAMPIONSHIP = {
    "name": "Rookies Championship",
    "races": [{"track": "Monza"}, {"track": "Spa"}, {"track": "Suzuka"}],
}

BOT_CONFIG = {
    "simgrid_api_token": "sg-token",
    "championship_id": CHAMPIONSHIP_ID,
    "season": "S12",
    "briefing_template_doc_id": "briefing-template",
    "briefing_folder_id": "briefing-folder",
    "tracker_template_doc_id": "tracker-template",
    "tracker_folder_id": "tracker-folder",
    "discord_token": "discord-token",
    "discord_channel_id": 1000,
    "discord_role_name": "Rookies",
    "discord_briefing_channel_id": 2000,
}

ROUND_CONFIG = {
    "penalties": {
        "quali_bans_r1": [4],
        "quali_bans_r2": [],
        "pit_starts_r1": [81],
        "pit_starts_r2": [],
    },
    "penalties_carried_over": {
        "quali_bans_r1": [],
        "quali_bans_r2": [],
        "pit_starts_r1": [1],
        "pit_starts_r2": [],
    },
    "next_round": {"number": 2, "track": "Spa", "penalty_tracker_link": ""},
    "previous_round": {
        "number": 1,
        "track": "Monza",
        "penalty_tracker_link": "https://docs.google.com/spreadsheets/d/tracker-1",
    },
}


def make_driver(
    car_number: int,
    first_name: str = "Test",
    last_name: str = "Driver",
    discord_handle: str | None = None,
) -> Driver:
    return Driver(
        first_name=first_name,
        last_name=last_name,
        discord_handle=discord_handle or f"driver{car_number}",
        car_number=car_number,
    )


LANDO = make_driver(4, "Lando", "Norris", "lando.norris")
OSCAR = make_driver(81, "Oscar", "Piastri", "OscarP")
MAX = make_driver(1, "Max", "Verstappen", "max_v")


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def config() -> Config:
    return Config.model_validate({**BOT_CONFIG, **ROUND_CONFIG})


@pytest.fixture
def driver_lookup() -> DriverLookup:
    return DriverLookup({d.car_number: d for d in (LANDO, OSCAR, MAX)})


@pytest.fixture
def config_files(tmp_path):
    """Write the sample bot and round configs, returning their paths."""
    bot_path = tmp_path / "config.yml"
    round_path = tmp_path / "s12-round-1-monza.yml"
    bot_path.write_text(yaml.safe_dump(BOT_CONFIG))
    round_path.write_text(yaml.safe_dump(ROUND_CONFIG))
    return bot_path, round_path


@pytest.fixture(autouse=True)
def api_log_dir(tmp_path, monkeypatch):
    """Redirect the API call log into tmp_path."""
    log_dir = tmp_path / "logs"
    named_logger = logging.getLogger("rookies_bot.api")
    named_logger.handlers.clear()

    monkeypatch.setattr(api_logging, "_logger", None)
    monkeypatch.setattr(api_logging, "_LOG_DIR", str(log_dir))
    monkeypatch.setattr(api_logging, "_LOG_FILE", str(log_dir / "api_calls.log"))

    yield log_dir

    # Close file handlers to release file locks (important on Windows)
    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
