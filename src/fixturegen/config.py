"""Config loading and validation for the league fixture generator."""

import logging
from datetime import date, time
from pathlib import Path

import yaml

from fixturegen.models import (
    DayOfWeek, Division, LeagueData, Season, Table, Team, Venue,
)
from fixturegen.scheduler import DEFAULT_KICKOFF, ArgumentError, GenerateOptions

logger = logging.getLogger(__name__)


def parse_time(s) -> time:
    """Parse time strings like '7:30pm', '10am', '19:30'.

    YAML 1.1 reads an unquoted 19:30 as the base-60 integer 1170; that
    form is accepted too.
    """
    if isinstance(s, time):
        return s
    if isinstance(s, int):
        h, m = divmod(s, 60)
        return time(h, m)

    s = s.strip()
    s_lower = s.lower()

    is_pm = s_lower.endswith("pm")
    is_am = s_lower.endswith("am")

    # Strip am/pm suffix
    s_clean = s_lower
    if is_pm or is_am:
        s_clean = s_clean[:-2].strip()

    if ":" in s_clean:
        parts = s_clean.split(":")
        h = int(parts[0])
        m = int(parts[1])
    else:
        h = int(s_clean)
        m = 0

    if is_pm and h < 12:
        h += 12
    elif is_am and h == 12:
        h = 0

    return time(h, m)


def parse_date(s) -> date:
    """Parse date string YYYY-MM-DD."""
    if isinstance(s, date):
        return s
    parts = s.strip().split("-")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def _require(mapping: dict, key: str, where: str):
    if key not in mapping or mapping[key] is None:
        raise ArgumentError(f"{where}: missing required key '{key}'")
    return mapping[key]


def load_config(path: str | Path) -> dict:
    """Load league data and generation options from YAML.

    Returns dict with:
    - season: GenerateOptions
    - league: LeagueData (no fixtures)
    - season_name: display name of the season
    - calendar: Season with end date and blackout dates
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    # Season
    sdata = _require(raw, "season", str(path))
    night = sdata.get("match_night", "Tue")
    try:
        match_night = DayOfWeek.from_str(str(night))
    except KeyError as e:
        raise ArgumentError(f"season: unknown match_night {night!r}") from e
    rounds = sdata.get("rounds_per_opponent", 2)
    try:
        rounds_per_opponent = int(rounds)
    except (TypeError, ValueError) as e:
        raise ArgumentError(
            f"season: rounds_per_opponent must be a number, got {rounds!r}"
        ) from e
    season = GenerateOptions(
        season_id=str(_require(sdata, "id", "season")),
        start_date=parse_date(_require(sdata, "start_date", "season")),
        match_night=match_night,
        rounds_per_opponent=rounds_per_opponent,
        kickoff=parse_time(sdata.get("kickoff", DEFAULT_KICKOFF)),
        replace_existing=bool(sdata.get("replace_existing", True)),
    )
    try:
        end_date = sdata.get("end_date")
        calendar = Season(
            id=season.season_id,
            name=sdata.get("name", season.season_id),
            start_date=season.start_date,
            end_date=parse_date(end_date) if end_date is not None else None,
            match_night=season.match_night,
            match_start_time=season.kickoff,
            blackout_dates=[parse_date(d) for d in sdata.get("blackout_dates") or []],
        )
    except (AttributeError, IndexError, ValueError) as e:
        raise ArgumentError(f"season: bad end_date or blackout_dates: {e}") from e

    # Venues
    venues: list[Venue] = []
    for vdata in raw.get("venues") or []:
        vid = str(_require(vdata, "id", "venue"))
        tables = [
            Table(id=str(_require(t, "id", f"venue {vid} table")),
                  label=str(t.get("label", t["id"])))
            for t in vdata.get("tables") or []
        ]
        venues.append(Venue(id=vid, name=vdata.get("name", vid), tables=tables))
    venues_by_id = {v.id: v for v in venues}

    # Divisions and their teams
    divisions: list[Division] = []
    teams: list[Team] = []
    for ddata in raw.get("divisions") or []:
        did = str(_require(ddata, "id", "division"))
        divisions.append(Division(
            id=did,
            name=ddata.get("name", did),
            season_id=season.season_id,
        ))
        for tdata in ddata.get("teams") or []:
            tid = str(_require(tdata, "id", f"division {did} team"))
            venue_id = tdata.get("venue")
            table_id = tdata.get("table")
            teams.append(Team(
                id=tid,
                name=tdata.get("name", tid),
                division_id=did,
                venue_id=str(venue_id) if venue_id is not None else None,
                table_id=str(table_id) if table_id is not None else None,
            ))

    # Validate references
    warnings = []
    seen_ids: set[str] = set()
    for t in teams:
        if t.id in seen_ids:
            warnings.append(f"Team id {t.id} is used more than once")
        seen_ids.add(t.id)
        if t.venue_id is not None and t.venue_id not in venues_by_id:
            warnings.append(f"Team {t.id} references unknown venue {t.venue_id}")
        if t.table_id is not None:
            venue = venues_by_id.get(t.venue_id)
            if venue is None or venue.table(t.table_id) is None:
                warnings.append(
                    f"Team {t.id} table {t.table_id} is not a table "
                    f"of its venue {t.venue_id}"
                )
    for w in warnings:
        logger.warning("Config: %s", w)

    return {
        "season": season,
        "season_name": sdata.get("name", season.season_id),
        "calendar": calendar,
        "league": LeagueData(divisions=divisions, teams=teams, venues=venues),
    }
