"""SimGrid API response models (entry list, users, championship)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EntryDriver(BaseModel):
    """A driver listed on a championship entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")


class Entry(BaseModel):
    """A car entered into a championship."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    car_number: int = Field(alias="raceNumber")
    drivers: list[EntryDriver] = Field(default_factory=list)


class EntryList(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: list[Entry] = Field(default_factory=list)


class ParticipatingUser(BaseModel):
    """A SimGrid user registered for a championship."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_name: str = ""
    last_name: str = ""
    discord_handle: str = Field(default="", alias="username")


class Race(BaseModel):
    model_config = ConfigDict(frozen=True)

    track: str = ""


class Championship(BaseModel):
    """Championship details; only the race schedule is used."""

    model_config = ConfigDict(frozen=True)

    races: list[Race] = Field(default_factory=list)
