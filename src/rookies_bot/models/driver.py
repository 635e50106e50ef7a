"""Driver model and the car number lookup built from SimGrid."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from pydantic import BaseModel, ConfigDict


class Driver(BaseModel):
    """A league driver. Identity is the car number."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    discord_handle: str
    car_number: int

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class DriverLookup(Mapping[int, Driver]):
    """Read-only mapping of car number to Driver."""

    def __init__(self, drivers: Mapping[int, Driver] | None = None) -> None:
        self._drivers: dict[int, Driver] = dict(drivers or {})

    def __getitem__(self, car_number: int) -> Driver:
        return self._drivers[car_number]

    def __iter__(self) -> Iterator[int]:
        return iter(self._drivers)

    def __len__(self) -> int:
        return len(self._drivers)

    def __repr__(self) -> str:
        return f"DriverLookup({sorted(self._drivers)!r})"
