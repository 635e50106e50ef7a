"""rookies-bot data models."""

from rookies_bot.models.driver import Driver, DriverLookup
from rookies_bot.models.penalties import CATEGORIES, Penalties, PenaltyCategory
from rookies_bot.models.simgrid import (
    Championship,
    Entry,
    EntryDriver,
    EntryList,
    ParticipatingUser,
    Race,
)

__all__ = [
    "CATEGORIES",
    "Championship",
    "Driver",
    "DriverLookup",
    "Entry",
    "EntryDriver",
    "EntryList",
    "ParticipatingUser",
    "Penalties",
    "PenaltyCategory",
    "Race",
]
