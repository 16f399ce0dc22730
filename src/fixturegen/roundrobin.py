"""Round-robin pairing for the league fixture generator."""

from fixturegen.models import BYE, Matchup, PairingSlot, Round, Team


def _base_rounds(teams: list[Team]) -> list[tuple[list[Matchup], list[str]]]:
    """One full cycle of the circle method.

    Returns (matchups, bye_team_ids) per round.
    """
    slots: list[PairingSlot] = list(teams)

    # For odd number of teams, add the bye so the circle is even
    if len(slots) % 2 == 1:
        slots.append(BYE)
    n = len(slots)

    cycle = []
    for r in range(n - 1):
        matchups = []
        byes = []
        for i in range(n // 2):
            t1 = slots[i]
            t2 = slots[n - 1 - i]
            if t1 is BYE:
                byes.append(t2.id)
            elif t2 is BYE:
                byes.append(t1.id)
            elif r % 2 == 0:
                matchups.append(Matchup(t1, t2))
            else:
                matchups.append(Matchup(t2, t1))
        cycle.append((matchups, byes))

        # Rotate: keep position 0 fixed, shift others one place
        slots = [slots[0]] + [slots[-1]] + slots[1:-1]

    return cycle


def generate_round_robin(teams: list[Team],
                         rounds_per_opponent: int = 1) -> list[Round]:
    """Generate a round-robin schedule using the circle method.

    For N teams: N-1 rounds per cycle (with one bye per round if N is odd).
    The first cycle uses the base orientation, the second swaps home and
    away, and further cycles keep alternating, so every pair meets
    rounds_per_opponent times with home advantage shared.

    Team order is taken as given; callers sort for reproducible output.
    """
    if rounds_per_opponent < 1:
        raise ValueError(
            f"rounds_per_opponent must be at least 1, got {rounds_per_opponent}"
        )
    if len(teams) < 2:
        return []

    cycle = _base_rounds(teams)

    rounds = []
    for copy in range(rounds_per_opponent):
        swap = copy % 2 == 1
        for matchups, byes in cycle:
            if swap:
                matchups = [m.reversed() for m in matchups]
            else:
                matchups = list(matchups)
            rounds.append(Round(
                number=len(rounds) + 1,
                matchups=matchups,
                bye_teams=list(byes),
            ))

    return rounds


def verify_round_robin(rounds: list[Round], team_ids: list[str],
                       rounds_per_opponent: int = 1) -> dict:
    """Verify a round-robin schedule is valid and complete.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - matchup_counts: dict of (team_a, team_b) -> count, ids sorted
    - games_per_team: dict of team -> game count
    """
    errors = []
    matchup_counts: dict[tuple[str, str], int] = {}
    games_per_team: dict[str, int] = {t: 0 for t in team_ids}

    for rnd in rounds:
        teams_in_round = set()
        for m in rnd.matchups:
            h = m.home.id
            a = m.away.id
            if h == a:
                errors.append(f"Round {rnd.number}: {h} plays itself")
            # Check for duplicate teams in a round
            if h in teams_in_round:
                errors.append(f"Round {rnd.number}: {h} appears twice")
            if a in teams_in_round:
                errors.append(f"Round {rnd.number}: {a} appears twice")
            teams_in_round.add(h)
            teams_in_round.add(a)

            key = tuple(sorted([h, a]))
            matchup_counts[key] = matchup_counts.get(key, 0) + 1
            games_per_team[h] = games_per_team.get(h, 0) + 1
            games_per_team[a] = games_per_team.get(a, 0) + 1

    # Check every pair plays exactly rounds_per_opponent times
    for i, t1 in enumerate(team_ids):
        for t2 in team_ids[i + 1:]:
            key = tuple(sorted([t1, t2]))
            count = matchup_counts.get(key, 0)
            if count != rounds_per_opponent:
                errors.append(
                    f"{t1} vs {t2}: played {count} times "
                    f"(expected {rounds_per_opponent})"
                )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "matchup_counts": matchup_counts,
        "games_per_team": games_per_team,
    }
