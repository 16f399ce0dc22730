"""Output formatters for the league fixture generator."""

import csv
import logging
from datetime import date
from io import StringIO
from pathlib import Path

from fixturegen.models import Fixture, LeagueData

logger = logging.getLogger(__name__)


def _names(league: LeagueData):
    teams = {t.id: t.name for t in league.teams}
    venues = {v.id: v for v in league.venues}
    divisions = {d.id: d.name for d in league.divisions}

    def team(tid):
        return teams.get(tid, tid)

    def place(f: Fixture) -> str:
        venue = venues.get(f.venue_id)
        if venue is None:
            return f.venue_id or "TBC"
        table = venue.table(f.table_id)
        label = table.label if table else (f.table_id or "")
        return f"{venue.name} {label}".strip()

    def division(did):
        return divisions.get(did, did)

    return team, place, division


def format_schedule(fixtures: list[Fixture], league: LeagueData) -> str:
    """Format fixtures as human-readable text, by date then per team."""
    team, place, division = _names(league)
    ordered = sorted(fixtures, key=lambda f: (f.date, division(f.division_id),
                                              team(f.home_team_id)))

    lines = []
    lines.append("=" * 80)
    lines.append("SEASON FIXTURES")
    lines.append("=" * 80)

    by_date: dict[date, list[Fixture]] = {}
    for f in ordered:
        by_date.setdefault(f.day, []).append(f)

    for d in sorted(by_date.keys()):
        lines.append(f"\n  {d.strftime('%A %d/%m/%Y')}")
        for f in by_date[d]:
            start = f.date.strftime("%H:%M")
            flag = "  [FALLBACK]" if f.fallback else ""
            lines.append(
                f"    {start}  {division(f.division_id):<12} "
                f"{team(f.home_team_id):<18} vs {team(f.away_team_id):<18} "
                f"@ {place(f)}{flag}"
            )

    # Per-team schedule
    lines.append("\n" + "=" * 80)
    lines.append("PER-TEAM FIXTURES")
    lines.append("=" * 80)

    by_team: dict[str, list[Fixture]] = {}
    for f in ordered:
        by_team.setdefault(f.home_team_id, []).append(f)
        by_team.setdefault(f.away_team_id, []).append(f)

    for team_id in sorted(by_team.keys(), key=team):
        lines.append(f"\n{team(team_id)}:")
        for i, f in enumerate(by_team[team_id], 1):
            is_home = f.home_team_id == team_id
            opponent = f.away_team_id if is_home else f.home_team_id
            h_a = "H" if is_home else "A"
            lines.append(
                f"  {i:>2}. {f.date.strftime('%a %d/%m')} {h_a} "
                f"vs {team(opponent):<18} @ {place(f)}"
            )

    return "\n".join(lines)


def format_fixtures_csv(fixtures: list[Fixture], league: LeagueData) -> str:
    """Format fixtures as CSV, one row per fixture in date order."""
    team, place, division = _names(league)

    output = StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "Fixture_ID", "Season_ID", "Division", "Date", "Time",
        "Home", "Away", "Venue_ID", "Table_ID", "Location", "Fallback",
    ])

    for f in sorted(fixtures, key=lambda x: (x.date, x.division_id)):
        writer.writerow([
            f.id, f.season_id, division(f.division_id),
            f.date.strftime("%Y-%m-%d"), f.date.strftime("%H:%M"),
            team(f.home_team_id), team(f.away_team_id),
            f.venue_id or "", f.table_id or "", place(f),
            "yes" if f.fallback else "",
        ])

    return output.getvalue()


def write_schedule(fixtures: list[Fixture], league: LeagueData,
                   output_prefix: str = "output") -> list[Path]:
    """Write schedule.txt and fixtures.csv into {output_prefix}/."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    schedule_path = out_dir / "schedule.txt"
    schedule_path.write_text(format_schedule(fixtures, league))
    logger.info("Written: %s", schedule_path)

    csv_path = out_dir / "fixtures.csv"
    csv_path.write_text(format_fixtures_csv(fixtures, league))
    logger.info("Written: %s", csv_path)

    return [schedule_path, csv_path]
