"""Client for the SimGrid league API."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import TypeAdapter

from rookies_bot._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, SyncTransport
from rookies_bot.api_logging import log_api_call
from rookies_bot.config import Round
from rookies_bot.exceptions import SimGridValidationError, UnknownDriverError
from rookies_bot.models.driver import Driver, DriverLookup
from rookies_bot.models.simgrid import Championship, Entry, EntryList, ParticipatingUser

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _validate(model_type: type[T], data: Any) -> T:
    """Validate response data against a Pydantic model."""
    try:
        return TypeAdapter(model_type).validate_python(data)
    except Exception as exc:
        raise SimGridValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


def _validate_list(model_type: type[T], data: Any) -> list[T]:
    """Validate a list of dicts against a Pydantic model."""
    try:
        return TypeAdapter(list[model_type]).validate_python(data)
    except Exception as exc:
        raise SimGridValidationError(
            f"Failed to validate {model_type.__name__} response: {exc}"
        ) from exc


def _name_key(first_name: str, last_name: str) -> str:
    return f"{first_name}{last_name}"


class SimGridClient:
    """Synchronous client for the SimGrid API.

    Usage:
        with SimGridClient(token) as sg:
            lookup = sg.build_driver_lookup("1234")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._transport = SyncTransport(token, base_url=base_url, timeout=timeout)

    def __enter__(self) -> SimGridClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    # ── Endpoints ──────────────────────────────────────────────

    @log_api_call
    def entries(self, championship_id: str) -> list[Entry]:
        """Get the cars entered into a championship."""
        data = self._transport.get(
            f"/championships/{championship_id}/entrylist", {"format": "json"}
        )
        return _validate(EntryList, data).entries

    @log_api_call
    def participating_users(self, championship_id: str) -> list[ParticipatingUser]:
        """Get the users registered for a championship."""
        data = self._transport.get(f"/championships/{championship_id}/participating_users")
        return _validate_list(ParticipatingUser, data)

    @log_api_call
    def championship(self, championship_id: str) -> Championship:
        """Get championship details, including the race schedule."""
        data = self._transport.get(f"/championships/{championship_id}")
        return _validate(Championship, data)

    # ── Derived data ───────────────────────────────────────────

    def build_driver_lookup(self, championship_id: str) -> DriverLookup:
        """Match entry list drivers to registered users by name.

        Raises:
            UnknownDriverError: If an entered driver has no matching user.
        """
        users = {
            _name_key(user.first_name, user.last_name): user
            for user in self.participating_users(championship_id)
        }
        car_numbers: dict[str, int] = {}

        for entry in self.entries(championship_id):
            for entry_driver in entry.drivers:
                if not entry_driver.first_name and not entry_driver.last_name:
                    continue
                name = _name_key(entry_driver.first_name, entry_driver.last_name)
                if name not in users:
                    raise UnknownDriverError(f"Unknown driver: {name}")
                car_numbers[name] = entry.car_number

        drivers: dict[int, Driver] = {}
        for name, car_number in car_numbers.items():
            user = users[name]
            drivers[car_number] = Driver(
                first_name=user.first_name,
                last_name=user.last_name,
                discord_handle=user.discord_handle,
                car_number=car_number,
            )

        unentered = len(users) - len(car_numbers)
        if unentered:
            logger.debug("%d registered users have no entry and were skipped", unentered)
        return DriverLookup(drivers)

    def next_round(self, championship_id: str, previous: Round) -> Round:
        """Work out the round after ``previous`` from the championship schedule.

        The track is left empty once the schedule runs out.
        """
        races = self.championship(championship_id).races
        number = previous.number + 1
        track = races[number - 1].track if len(races) >= number else ""
        return Round(number=number, track=track)

