"""Constraint validation for the league fixture generator.

Checks a produced fixture list against the whole-schedule invariants, and
checks generation inputs before a run.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta

from fixturegen.models import Fixture, LeagueData


def validate_fixtures(fixtures: list[Fixture], league: LeagueData,
                      rounds_per_opponent: int | None = None) -> dict:
    """Validate a fixture list against all schedule invariants.

    Fallback fixtures were placed without an availability check, so clashes
    they take part in are warnings rather than errors.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues
    """
    errors = []
    warnings = []

    teams = {t.id: t for t in league.teams}

    slot_users: dict[tuple, list[Fixture]] = defaultdict(list)
    team_days: dict[tuple[str, date], list[Fixture]] = defaultdict(list)
    # division -> (team_a, team_b) sorted -> home team -> count
    pair_homes = defaultdict(lambda: defaultdict(lambda: defaultdict(int)))

    for f in fixtures:
        h = f.home_team_id
        a = f.away_team_id

        if f.fallback:
            warnings.append(
                f"FALLBACK: {h} vs {a} parked on {f.day} "
                f"without availability check"
            )

        if h == a:
            errors.append(f"{h} plays itself on {f.day}")
            continue
        if h not in teams:
            errors.append(f"Unknown home team: {h}")
            continue
        if a not in teams:
            errors.append(f"Unknown away team: {a}")
            continue

        key = f.slot_key()
        if key is not None:
            slot_users[key].append(f)
        team_days[(h, f.day)].append(f)
        team_days[(a, f.day)].append(f)

        pair = (h, a) if h < a else (a, h)
        pair_homes[f.division_id][pair][h] += 1

    # Check: at most one fixture per (date, venue, table)
    for (d, venue_id, table_id), users in slot_users.items():
        if len(users) > 1:
            msg = (f"Slot {venue_id}/{table_id} on {d} used by "
                   f"{len(users)} fixtures")
            if any(f.fallback for f in users):
                warnings.append(msg)
            else:
                errors.append(msg)

    # Check: no team plays twice on one date
    for (team_id, d), games in team_days.items():
        if len(games) > 1:
            msg = f"{team_id} plays {len(games)} fixtures on {d}"
            if any(f.fallback for f in games):
                warnings.append(msg)
            else:
                errors.append(msg)

    # Check: pair coverage and home/away alternation per division
    for division in league.divisions:
        div_teams = sorted(t.id for t in league.teams_in_division(division.id))
        counts = pair_homes.get(division.id, {})
        for i, t1 in enumerate(div_teams):
            for t2 in div_teams[i + 1:]:
                homes = counts.get((t1, t2), {})
                played = sum(homes.values())
                if rounds_per_opponent is not None and len(div_teams) >= 2:
                    if played != rounds_per_opponent:
                        errors.append(
                            f"{division.name}: {t1} vs {t2} played {played} "
                            f"times (expected {rounds_per_opponent})"
                        )
                h1 = homes.get(t1, 0)
                h2 = homes.get(t2, 0)
                if abs(h1 - h2) > 1:
                    errors.append(
                        f"{division.name}: {t1} vs {t2} home split "
                        f"{h1}/{h2} is not alternating"
                    )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def validate_generation(league: LeagueData, options,
                        today: date | None = None) -> dict:
    """Pre-flight check of a generation request.

    Returns dict with valid/errors/warnings like validate_fixtures.
    """
    errors = []
    warnings = []
    today = today or date.today()

    playable = []
    for division in league.divisions:
        count = len(league.teams_in_division(division.id))
        if count < 2:
            warnings.append(
                f"Division {division.name} has {count} team(s) and "
                f"will be skipped"
            )
        else:
            playable.append(division)
    if not playable:
        errors.append("At least 2 teams are required to generate fixtures")

    rpo = options.rounds_per_opponent
    if isinstance(rpo, bool) or not isinstance(rpo, int) or rpo < 1:
        errors.append("Number of rounds must be at least 1")
    elif rpo > 10:
        warnings.append(
            f"Generating {rpo} rounds will create many fixtures"
        )

    start = options.start_date
    if isinstance(start, datetime):
        start = start.date()
    if start is not None and start < today - timedelta(days=30):
        warnings.append(
            "Start date is in the past - fixtures will be created for past dates"
        )

    no_venue = [t for t in league.teams if t.venue_id is None]
    if no_venue:
        warnings.append(
            f"{len(no_venue)} team(s) have no venue assigned - fixtures "
            f"will be placed at other venues"
        )

    if not any(v.tables for v in league.venues):
        warnings.append(
            "No venue has any tables - every fixture will be a fallback"
        )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("FIXTURE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
