"""Forward-rolling conflict resolution for matchups that can't be placed.

A matchup that doesn't fit on its round date is retried one week later,
then the week after, up to MAX_ATTEMPTS weeks (one calendar year). If no
week works, the matchup is parked a year after its round date at the home
team's own venue/table without any availability check, and the fixture is
flagged as a fallback. Generation therefore always returns a complete list.
"""

import logging
from datetime import date, datetime, time, timedelta

from fixturegen.allocator import BookingState, place_fixture
from fixturegen.models import Fixture, Matchup, Venue

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 52
FALLBACK_OFFSET = timedelta(days=365)
WEEK = timedelta(days=7)


def resolve(matchup: Matchup, round_date: date, venues: list[Venue],
            bookings: BookingState, *, season_id: str, division_id: str,
            kickoff: time, max_attempts: int = MAX_ATTEMPTS) -> Fixture:
    """Place the matchup on round_date or the first workable later week."""
    for attempt in range(max_attempts + 1):
        trial = round_date + WEEK * attempt
        fixture = place_fixture(
            matchup, trial, venues, bookings,
            season_id=season_id, division_id=division_id, kickoff=kickoff,
        )
        if fixture is not None:
            if attempt:
                logger.debug(
                    "%s vs %s moved %d week(s) from %s to %s",
                    matchup.home.name, matchup.away.name, attempt,
                    round_date, trial,
                )
            return fixture

    home = matchup.home
    fallback_day = round_date + FALLBACK_OFFSET
    logger.warning(
        "No free slot for %s vs %s within %d weeks of %s; "
        "parking on %s at home venue without availability check",
        home.name, matchup.away.name, max_attempts, round_date, fallback_day,
    )
    return Fixture(
        season_id=season_id,
        division_id=division_id,
        date=datetime.combine(fallback_day, kickoff),
        home_team_id=home.id,
        away_team_id=matchup.away.id,
        venue_id=home.venue_id,
        table_id=home.table_id,
        fallback=True,
    )
