"""Venue/table allocation for a single matchup on a single date."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time

from fixturegen.models import Fixture, Matchup, Table, Team, Venue

logger = logging.getLogger(__name__)


@dataclass
class BookingState:
    """Bookings made so far in one generation run.

    slots: date -> {(venue_id, table_id)}
    teams: date -> {team_id}
    """
    slots: dict[date, set[tuple[str, str]]] = field(default_factory=dict)
    teams: dict[date, set[str]] = field(default_factory=dict)

    def is_slot_booked(self, day: date, venue_id: str, table_id: str) -> bool:
        return (venue_id, table_id) in self.slots.get(day, ())

    def is_team_booked(self, day: date, *team_ids: str) -> bool:
        booked = self.teams.get(day, ())
        return any(t in booked for t in team_ids)

    def book(self, day: date, venue_id: str, table_id: str, *team_ids: str):
        self.slots.setdefault(day, set()).add((venue_id, table_id))
        self.teams.setdefault(day, set()).update(team_ids)


def candidate_venues(home: Team, away: Team,
                     venues: list[Venue]) -> list[Venue]:
    """Venues to try, in order.

    The home team's venue first (the away team's if home has none), then
    every other venue in league order. Venues without tables are skipped.
    """
    preferred_id = home.venue_id or away.venue_id

    ordered = []
    for v in venues:
        if v.id == preferred_id and v.tables:
            ordered.append(v)
            break
    for v in venues:
        if v.id != preferred_id and v.tables:
            ordered.append(v)
    return ordered


def candidate_tables(venue: Venue, preferred_table_id: str | None) -> list[Table]:
    """The preferred table if it belongs to this venue, then the rest by label."""
    by_label = sorted(venue.tables, key=lambda t: t.label)
    preferred = venue.table(preferred_table_id)
    if preferred is None:
        return by_label
    return [preferred] + [t for t in by_label if t.id != preferred.id]


def place_fixture(matchup: Matchup, day: date, venues: list[Venue],
                  bookings: BookingState, *, season_id: str,
                  division_id: str, kickoff: time) -> Fixture | None:
    """Try to book a venue/table for the matchup on the given date.

    A slot is taken if it is free on that date and neither team already
    plays that date. Returns the new Fixture, or None if nothing fits, in
    which case bookings are left untouched.
    """
    home = matchup.home
    away = matchup.away

    if bookings.is_team_booked(day, home.id, away.id):
        return None

    for venue in candidate_venues(home, away, venues):
        for table in candidate_tables(venue, home.table_id):
            if bookings.is_slot_booked(day, venue.id, table.id):
                continue

            bookings.book(day, venue.id, table.id, home.id, away.id)
            logger.debug(
                "Placed %s vs %s on %s at %s/%s",
                home.name, away.name, day, venue.name, table.label,
            )
            return Fixture(
                season_id=season_id,
                division_id=division_id,
                date=datetime.combine(day, kickoff),
                home_team_id=home.id,
                away_team_id=away.id,
                venue_id=venue.id,
                table_id=table.id,
            )

    return None
