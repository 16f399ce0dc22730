"""Statistics and balance reporting for the league fixture generator."""

from collections import defaultdict

from fixturegen.models import Fixture, LeagueData


def compute_stats(fixtures: list[Fixture], league: LeagueData) -> dict:
    """Compute per-team and per-division statistics for a fixture list."""
    home_counts = defaultdict(int)
    away_counts = defaultdict(int)
    total_games = defaultdict(int)
    fixtures_per_date = defaultdict(int)
    matchup_counts = defaultdict(lambda: defaultdict(int))  # team -> opponent -> count
    division_dates = defaultdict(list)

    for f in fixtures:
        h = f.home_team_id
        a = f.away_team_id
        home_counts[h] += 1
        away_counts[a] += 1
        total_games[h] += 1
        total_games[a] += 1
        fixtures_per_date[f.day] += 1
        matchup_counts[h][a] += 1
        matchup_counts[a][h] += 1
        division_dates[f.division_id].append(f.day)

    division_span = {
        div_id: (min(days), max(days))
        for div_id, days in division_dates.items()
    }

    return {
        "all_teams": sorted(t.id for t in league.teams),
        "home_counts": dict(home_counts),
        "away_counts": dict(away_counts),
        "total_games": dict(total_games),
        "fixtures_per_date": dict(sorted(fixtures_per_date.items())),
        "matchup_counts": {k: dict(v) for k, v in matchup_counts.items()},
        "division_span": division_span,
        "fallback_count": sum(1 for f in fixtures if f.fallback),
        "fixture_count": len(fixtures),
    }


def format_stats_report(stats: dict, league: LeagueData) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 70)
    lines.append("FIXTURE STATISTICS")
    lines.append("=" * 70)
    lines.append(f"\nFixtures: {stats['fixture_count']} "
                 f"({stats['fallback_count']} fallback)")

    all_teams = stats["all_teams"]

    # Home/Away Balance
    lines.append("\n--- HOME/AWAY BALANCE ---")
    lines.append(f"{'Team':<12} {'Home':>5} {'Away':>5} {'Total':>5} {'Diff':>5}")
    lines.append("-" * 36)
    for t in all_teams:
        h = stats["home_counts"].get(t, 0)
        a = stats["away_counts"].get(t, 0)
        tot = stats["total_games"].get(t, 0)
        diff = h - a
        flag = " ***" if abs(diff) > 1 else ""
        lines.append(f"{t:<12} {h:>5} {a:>5} {tot:>5} {diff:>+5}{flag}")

    # Division date ranges
    lines.append("\n--- DIVISION DATES ---")
    for division in sorted(league.divisions, key=lambda d: d.name):
        span = stats["division_span"].get(division.id)
        if span is None:
            lines.append(f"{division.name:<20} (no fixtures)")
            continue
        first, last = span
        lines.append(f"{division.name:<20} {first.isoformat()} to {last.isoformat()}")

    # Busiest dates
    lines.append("\n--- FIXTURES PER DATE ---")
    for d, count in stats["fixtures_per_date"].items():
        lines.append(f"{d.strftime('%a %d %b %Y'):<16} {count:>3}")

    return "\n".join(lines)
