"""Resolve configured penalty car numbers into drivers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from rookies_bot.config import Config
from rookies_bot.exceptions import UnknownDriverError
from rookies_bot.models.driver import Driver
from rookies_bot.models.penalties import CATEGORIES, Penalties

logger = logging.getLogger(__name__)


def build_penalized_driver_list(
    driver_lookup: Mapping[int, Driver], car_numbers: Iterable[int]
) -> list[Driver]:
    """Map car numbers to drivers, keeping their order.

    Raises:
        UnknownDriverError: If a car number is not in the lookup.
    """
    drivers: list[Driver] = []
    for car_number in car_numbers:
        try:
            drivers.append(driver_lookup[car_number])
        except KeyError:
            raise UnknownDriverError(
                f"Could not find driver {car_number} in registered SimGrid drivers. "
                "Please double check the car number and try again. Drivers may have "
                "changed their number, or withdrawn since the last race."
            ) from None
    return drivers


def build_penalties(driver_lookup: Mapping[int, Driver], config: Config) -> Penalties:
    """Build the new and carried-over penalty lists for every category."""
    lists: dict[str, list[Driver]] = {}
    for category in CATEGORIES:
        new = build_penalized_driver_list(
            driver_lookup, getattr(config.penalties, category.key)
        )
        carried_over = build_penalized_driver_list(
            driver_lookup, getattr(config.penalties_carried_over, category.key)
        )

        doubled = {d.car_number for d in new} & {d.car_number for d in carried_over}
        for car_number in sorted(doubled):
            logger.warning(
                "Driver #%d has both a new and a carried over penalty for %s",
                car_number,
                category.chat_heading,
            )

        lists[category.key] = new
        lists[f"{category.key}_carried_over"] = carried_over

    return Penalties(**lists)
