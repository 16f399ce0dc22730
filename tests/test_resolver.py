"""Tests for resolver.py — weekly retry and fallback placement."""

import logging
from datetime import date, datetime, time, timedelta

from fixturegen.allocator import BookingState
from fixturegen.models import Matchup, Table, Team, Venue
from fixturegen.resolver import MAX_ATTEMPTS, resolve

MONDAY = date(2024, 1, 1)
KICKOFF = time(20, 0)


def _league():
    venue = Venue("V", "Venue", [Table("T", "Table 1")])
    home = Team("A", "A", "D", venue_id="V", table_id="T")
    away = Team("B", "B", "D")
    return [venue], Matchup(home, away)


def _resolve(matchup, venues, bookings, **kwargs):
    return resolve(matchup, MONDAY, venues, bookings,
                   season_id="S", division_id="D", kickoff=KICKOFF, **kwargs)


class TestResolve:
    def test_default_horizon_is_a_year_of_weeks(self):
        assert MAX_ATTEMPTS == 52

    def test_places_on_round_date_when_free(self):
        venues, m = _league()
        f = _resolve(m, venues, BookingState())
        assert f.date == datetime(2024, 1, 1, 20, 0)
        assert not f.fallback

    def test_moves_one_week_when_slot_taken(self):
        venues, m = _league()
        bookings = BookingState()
        bookings.book(MONDAY, "V", "T", "X", "Y")
        f = _resolve(m, venues, bookings)
        assert f.day == date(2024, 1, 8)
        assert bookings.is_team_booked(date(2024, 1, 8), "A", "B")

    def test_moves_when_team_busy(self):
        venues = [Venue("V", "Venue", [Table("T1", "1"), Table("T2", "2")])]
        m = Matchup(Team("A", "A", "D", venue_id="V"), Team("B", "B", "D"))
        bookings = BookingState()
        bookings.book(MONDAY, "V", "T1", "A", "C")
        f = _resolve(m, venues, bookings)
        assert f.day == date(2024, 1, 8)

    def test_skips_several_weeks(self):
        venues, m = _league()
        bookings = BookingState()
        for w in range(3):
            bookings.book(MONDAY + timedelta(weeks=w), "V", "T", "X", "Y")
        f = _resolve(m, venues, bookings)
        assert f.day == date(2024, 1, 22)

    def test_attempt_limit(self):
        venues, m = _league()
        bookings = BookingState()
        for w in range(3):
            bookings.book(MONDAY + timedelta(weeks=w), "V", "T", "X", "Y")
        placed = _resolve(m, venues, bookings, max_attempts=3)
        assert not placed.fallback
        assert placed.day == date(2024, 1, 22)

    def test_fallback_when_horizon_exhausted(self):
        venues, m = _league()
        bookings = BookingState()
        for w in range(3):
            bookings.book(MONDAY + timedelta(weeks=w), "V", "T", "X", "Y")
        f = _resolve(m, venues, bookings, max_attempts=2)
        assert f.fallback
        assert f.date == datetime(2024, 12, 31, 20, 0)

    def test_fallback_uses_home_venue_without_booking(self, caplog):
        _, m = _league()
        bookings = BookingState()
        with caplog.at_level(logging.WARNING, logger="fixturegen.resolver"):
            f = _resolve(m, [], bookings)
        assert f.fallback
        assert f.venue_id == "V"
        assert f.table_id == "T"
        assert (f.home_team_id, f.away_team_id) == ("A", "B")
        assert f.day == MONDAY + timedelta(days=365)
        assert bookings.slots == {}
        assert bookings.teams == {}
        assert any("No free slot" in r.message for r in caplog.records)

    def test_fallback_home_without_venue(self):
        m = Matchup(Team("A", "A", "D"), Team("B", "B", "D", venue_id="V"))
        f = _resolve(m, [], BookingState())
        assert f.fallback
        assert f.venue_id is None
        assert f.table_id is None
