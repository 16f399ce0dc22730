"""Data models for the league fixture generator."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional, Union


class DayOfWeek(Enum):
    Mon = 0
    Tue = 1
    Wed = 2
    Thu = 3
    Fri = 4
    Sat = 5
    Sun = 6

    @classmethod
    def from_str(cls, s: str) -> "DayOfWeek":
        return cls[s.strip()[:3].capitalize()]

    @classmethod
    def of(cls, d: date) -> "DayOfWeek":
        return cls(d.weekday())


@dataclass
class Table:
    """A bookable table inside a venue."""
    id: str
    label: str


@dataclass
class Venue:
    """A venue with an ordered list of tables."""
    id: str
    name: str
    tables: list[Table] = field(default_factory=list)

    def table(self, table_id: str | None) -> Optional[Table]:
        for t in self.tables:
            if t.id == table_id:
                return t
        return None


@dataclass
class Division:
    id: str
    name: str
    season_id: Optional[str] = None


@dataclass
class Season:
    """A season's calendar: weekly match nights between two dates."""
    id: str
    name: str
    start_date: date
    end_date: Optional[date] = None
    match_night: DayOfWeek = DayOfWeek.Tue
    match_start_time: time = time(20, 0)
    blackout_dates: list[date] = field(default_factory=list)

    def __post_init__(self):
        if self.end_date is None:
            self.end_date = self.start_date + timedelta(weeks=13)
        self.blackout_dates = sorted(set(self.blackout_dates))

    def is_blacked_out(self, d: date) -> bool:
        return d in self.blackout_dates


@dataclass
class Team:
    """A team in a division, optionally tied to a home venue and table."""
    id: str
    name: str
    division_id: str
    venue_id: Optional[str] = None
    table_id: Optional[str] = None


class Bye:
    """Placeholder opponent for odd-sized divisions. Never reaches allocation."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "BYE"


BYE = Bye()

# One position in the circle: a real team or the bye.
PairingSlot = Union[Team, Bye]


@dataclass
class Matchup:
    """A pairing of two teams with home/away decided."""
    home: Team
    away: Team

    def reversed(self) -> "Matchup":
        return Matchup(self.away, self.home)


@dataclass
class Round:
    """A set of matchups where each team plays at most once."""
    number: int
    matchups: list[Matchup]
    bye_teams: list[str] = field(default_factory=list)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Fixture:
    """A single scheduled match.

    ``fallback`` is set when the pair could not be placed within the retry
    horizon and was parked a year out at the home team's venue/table without
    an availability check.
    """
    season_id: str
    division_id: str
    date: datetime
    home_team_id: str
    away_team_id: str
    venue_id: Optional[str] = None
    table_id: Optional[str] = None
    fallback: bool = False
    id: str = field(default_factory=_new_id)

    @property
    def day(self) -> date:
        return self.date.date()

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def slot_key(self) -> Optional[tuple[date, str, str]]:
        """Return (date, venue, table), or None if venue or table is unset."""
        if self.venue_id is None or self.table_id is None:
            return None
        return (self.day, self.venue_id, self.table_id)


@dataclass
class LeagueData:
    """The league aggregate: divisions, teams, venues and existing fixtures."""
    divisions: list[Division] = field(default_factory=list)
    teams: list[Team] = field(default_factory=list)
    venues: list[Venue] = field(default_factory=list)
    fixtures: list[Fixture] = field(default_factory=list)

    def team(self, team_id: str) -> Optional[Team]:
        for t in self.teams:
            if t.id == team_id:
                return t
        return None

    def venue(self, venue_id: str | None) -> Optional[Venue]:
        for v in self.venues:
            if v.id == venue_id:
                return v
        return None

    def division(self, division_id: str) -> Optional[Division]:
        for d in self.divisions:
            if d.id == division_id:
                return d
        return None

    def teams_in_division(self, division_id: str) -> list[Team]:
        return [t for t in self.teams if t.division_id == division_id]

    def fixtures_for_season(self, season_id: str) -> list[Fixture]:
        return [f for f in self.fixtures if f.season_id == season_id]

    def add_fixtures(self, fixtures: list[Fixture]):
        self.fixtures.extend(fixtures)

    def replace_fixtures_for_season(self, season_id: str,
                                    fixtures: list[Fixture]):
        """Drop every fixture of the season, then append the new batch."""
        if fixtures is None:
            raise ValueError("fixtures is required")
        kept = [f for f in self.fixtures if f.season_id != season_id]
        self.fixtures = kept + list(fixtures)
