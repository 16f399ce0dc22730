"""Main scheduling engine for the league fixture generator.

Per division (by name), teams (by name) go through the round-robin
generator. Each round is then laid on a single match-night date ladder
shared by every division: a round is tried on the current date, clashes
are pushed forward week by week by the resolver, and the ladder moves on
seven days after every round. Later divisions therefore start later than
earlier ones.

Nothing here touches storage; generate_and_apply hands the result to the
in-memory league aggregate.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from fixturegen.allocator import BookingState, place_fixture
from fixturegen.models import DayOfWeek, Fixture, LeagueData, Season
from fixturegen.resolver import MAX_ATTEMPTS, resolve
from fixturegen.roundrobin import generate_round_robin

logger = logging.getLogger(__name__)

DEFAULT_KICKOFF = time(19, 30)


class ArgumentError(ValueError):
    """Invalid generation input, raised before anything is scheduled."""


@dataclass
class GenerateOptions:
    season_id: str
    start_date: date
    match_night: DayOfWeek = DayOfWeek.Tue
    rounds_per_opponent: int = 2
    kickoff: time = DEFAULT_KICKOFF
    replace_existing: bool = True


def align_to_match_night(day: date, match_night: DayOfWeek) -> date:
    """First date on or after day that falls on match_night."""
    diff = (match_night.value - day.weekday()) % 7
    return day + timedelta(days=diff)


def generate_match_nights(season: Season) -> list[datetime]:
    """Every match night of the season, blackout dates skipped.

    Runs from the first match night on or after start_date through
    end_date inclusive, each combined with the season's start time. The
    fixture ladder in schedule() does not consult this calendar.
    """
    start = season.start_date
    end = season.end_date
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    if end < start:
        return []

    nights = []
    day = align_to_match_night(start, season.match_night)
    while day <= end:
        if not season.is_blacked_out(day):
            nights.append(datetime.combine(day, season.match_start_time))
        day += timedelta(days=7)
    return nights


def _check_arguments(league: LeagueData, options: GenerateOptions):
    if league is None:
        raise ArgumentError("league data is required")
    if options is None:
        raise ArgumentError("generation options are required")
    if not options.season_id:
        raise ArgumentError("season id is required")
    if options.start_date is None:
        raise ArgumentError("start date is required")
    if not isinstance(options.match_night, DayOfWeek):
        raise ArgumentError(
            f"match night must be a DayOfWeek, got {options.match_night!r}"
        )
    if options.kickoff is None:
        raise ArgumentError("kickoff time is required")
    rpo = options.rounds_per_opponent
    if isinstance(rpo, bool) or not isinstance(rpo, int) or rpo < 1:
        raise ArgumentError(
            f"rounds per opponent must be an integer >= 1, got {rpo!r}"
        )
    for name in ("divisions", "teams", "venues"):
        if getattr(league, name) is None:
            raise ArgumentError(f"league {name} are required")


def schedule(league: LeagueData, options: GenerateOptions,
             max_attempts: int = MAX_ATTEMPTS) -> list[Fixture]:
    """Generate every fixture of the season.

    Raises ArgumentError for invalid input. Scheduling conflicts never
    raise: they are pushed to later weeks, and as a last resort placed as
    fallback fixtures (Fixture.fallback).
    """
    _check_arguments(league, options)

    start = options.start_date
    if isinstance(start, datetime):
        start = start.date()

    bookings = BookingState()
    venues = list(league.venues)
    fixtures: list[Fixture] = []

    current_round_date = align_to_match_night(start, options.match_night)

    for division in sorted(league.divisions, key=lambda d: d.name):
        teams = sorted(league.teams_in_division(division.id),
                       key=lambda t: t.name)
        if len(teams) < 2:
            logger.info(
                "Skipping division %s: %d team(s), need at least 2",
                division.name, len(teams),
            )
            continue

        rounds = generate_round_robin(teams, options.rounds_per_opponent)
        logger.info(
            "Division %s: %d teams, %d rounds starting %s",
            division.name, len(teams), len(rounds), current_round_date,
        )

        for rnd in rounds:
            for matchup in rnd.matchups:
                fixture = None
                if not bookings.is_team_booked(current_round_date,
                                               matchup.home.id,
                                               matchup.away.id):
                    fixture = place_fixture(
                        matchup, current_round_date, venues, bookings,
                        season_id=options.season_id,
                        division_id=division.id,
                        kickoff=options.kickoff,
                    )
                if fixture is None:
                    fixture = resolve(
                        matchup, current_round_date, venues, bookings,
                        season_id=options.season_id,
                        division_id=division.id,
                        kickoff=options.kickoff,
                        max_attempts=max_attempts,
                    )
                fixtures.append(fixture)

            current_round_date += timedelta(days=7)

    fallbacks = sum(1 for f in fixtures if f.fallback)
    logger.info(
        "Generated %d fixtures for season %s (%d fallback)",
        len(fixtures), options.season_id, fallbacks,
    )
    return fixtures


def generate(season_id: str, start_date: date, match_night: DayOfWeek,
             rounds_per_opponent: int, kickoff: time,
             league: LeagueData) -> list[Fixture]:
    """Keyword-free form of schedule()."""
    options = GenerateOptions(
        season_id=season_id,
        start_date=start_date,
        match_night=match_night,
        rounds_per_opponent=rounds_per_opponent,
        kickoff=kickoff,
    )
    return schedule(league, options)


def generate_and_apply(league: LeagueData,
                       options: GenerateOptions) -> list[Fixture]:
    """Generate the season and store it on the league aggregate.

    With options.replace_existing the season's existing fixtures are
    dropped first; otherwise the new fixtures are appended. Other seasons
    are never touched. Returns the new fixtures.
    """
    fixtures = schedule(league, options)
    if options.replace_existing:
        league.replace_fixtures_for_season(options.season_id, fixtures)
    else:
        league.add_fixtures(fixtures)
    return fixtures
