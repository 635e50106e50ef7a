"""Penalties resolved against the driver lookup."""

from __future__ import annotations

from collections.abc import Iterable
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from rookies_bot.config import PenaltyCarNumbers
from rookies_bot.models.driver import Driver


class PenaltyCategory(NamedTuple):
    """A penalty category and how it is labelled in chat and in the briefing doc."""

    key: str
    chat_heading: str
    doc_heading: str


# Display order for announcements and the briefing doc.
CATEGORIES: tuple[PenaltyCategory, ...] = (
    PenaltyCategory("quali_bans_r1", "Quali Bans R1", "Race 1 Quali Bans"),
    PenaltyCategory("pit_starts_r1", "Pit Starts R1", "Race 1 Pit Starts"),
    PenaltyCategory("quali_bans_r2", "Quali Bans R2", "Race 2 Quali Bans"),
    PenaltyCategory("pit_starts_r2", "Pit Starts R2", "Race 2 Pit Starts"),
)


def unique_car_numbers(*driver_lists: Iterable[Driver]) -> list[int]:
    """Union of the given drivers' car numbers, deduplicated and sorted."""
    return sorted({driver.car_number for drivers in driver_lists for driver in drivers})


class Penalties(BaseModel):
    """New and carried-over penalised drivers for each category."""

    model_config = ConfigDict(frozen=True)

    quali_bans_r1: list[Driver] = Field(default_factory=list)
    quali_bans_r1_carried_over: list[Driver] = Field(default_factory=list)
    quali_bans_r2: list[Driver] = Field(default_factory=list)
    quali_bans_r2_carried_over: list[Driver] = Field(default_factory=list)
    pit_starts_r1: list[Driver] = Field(default_factory=list)
    pit_starts_r1_carried_over: list[Driver] = Field(default_factory=list)
    pit_starts_r2: list[Driver] = Field(default_factory=list)
    pit_starts_r2_carried_over: list[Driver] = Field(default_factory=list)

    def new(self, category: str) -> list[Driver]:
        return getattr(self, category)

    def carried_over(self, category: str) -> list[Driver]:
        return getattr(self, f"{category}_carried_over")

    def consolidate(self) -> PenaltyCarNumbers:
        """Merge new and carried-over penalties into next round's carry-over."""
        return PenaltyCarNumbers(
            **{
                category.key: unique_car_numbers(
                    self.new(category.key), self.carried_over(category.key)
                )
                for category in CATEGORIES
            }
        )
