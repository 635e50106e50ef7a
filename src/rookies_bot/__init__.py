"""rookies-bot: weekly penalty and race-day automation for a SimGrid league."""

from rookies_bot.client import SimGridClient
from rookies_bot.config import Config, RoundConfig, load_config, save_round_config
from rookies_bot.exceptions import (
    BriefingError,
    ChatError,
    ConfigError,
    RookiesBotError,
    SimGridAPIError,
    SimGridConnectionError,
    SimGridError,
    SimGridTimeoutError,
    SimGridValidationError,
    UnknownDriverError,
)

__all__ = [
    "BriefingError",
    "ChatError",
    "Config",
    "ConfigError",
    "RookiesBotError",
    "RoundConfig",
    "SimGridAPIError",
    "SimGridClient",
    "SimGridConnectionError",
    "SimGridError",
    "SimGridTimeoutError",
    "SimGridValidationError",
    "UnknownDriverError",
    "load_config",
    "save_round_config",
]

__version__ = "0.1.0"
