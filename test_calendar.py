# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the rotation engine, the override / swap resolver and the
calendar materializer. Pure functions only, no HTTP.
"""

from datetime import date

import pytest
from prometheus_client import REGISTRY

from app.models.domain import UNASSIGNED, SpecialDate, SwapRequest, Team, parse_iso_date
from app.services.calendar import build_schedule, first_sunday_on_or_after, sunday_dates
from app.services.resolver import (
    RULES,
    ResolutionContext,
    approved_swaps,
    effective_team_id,
    resolve,
    valid_overrides,
)
from app.services.rotation import default_team_id, rotation_position

TODAY = date(2026, 1, 4)  # a Sunday
HORIZON = date(2026, 12, 31)
D0, D1, D2, D3, D4 = "2026-01-04", "2026-01-11", "2026-01-18", "2026-01-25", "2026-02-01"

TEAMS = [Team(id=1, leader="Alice"), Team(id=2, leader="Bob")]


def swap(swap_id, from_team, to_team, from_date, to_date, status="approved"):
    return {
        "id": swap_id,
        "fromTeamId": from_team,
        "toTeamId": to_team,
        "fromDate": from_date,
        "toDate": to_date,
        "status": status,
    }


def schedule(teams=TEAMS, overrides=None, swaps=(), dwell_weeks=2, horizon_end=HORIZON,
             special_dates=(), today=TODAY):
    return build_schedule(
        teams=teams,
        overrides=overrides or {},
        swaps=list(swaps),
        dwell_weeks=dwell_weeks,
        horizon_end=horizon_end,
        special_dates=special_dates,
        today=today,
    )


def team_by_date(weeks):
    return {w.date: w.team_id for w in weeks}


# ============================================
# Rotation engine
# ============================================
class TestRotation:
    def test_two_teams_dwell_two_period(self):
        ids = [default_team_id(i, TEAMS, 2) for i in range(8)]
        assert ids == [1, 1, 2, 2, 1, 1, 2, 2]

    def test_dwell_one_alternates(self):
        ids = [default_team_id(i, TEAMS, 1) for i in range(4)]
        assert ids == [1, 2, 1, 2]

    def test_single_team_always_serves(self):
        team = [Team(id=7)]
        assert {default_team_id(i, team, 3) for i in range(12)} == {7}

    def test_period_is_team_count_times_dwell(self):
        teams = [Team(id=i) for i in range(1, 4)]
        for index in range(9):
            assert default_team_id(index, teams, 3) == default_team_id(index + 9, teams, 3)

    def test_uses_sequence_order_not_id_order(self):
        teams = [Team(id=9), Team(id=3)]
        assert default_team_id(0, teams, 1) == 9
        assert default_team_id(1, teams, 1) == 3

    def test_empty_teams_unassigned(self):
        assert default_team_id(5, [], 2) is UNASSIGNED

    def test_rotation_position(self):
        assert rotation_position(5, 3, 2) == 2

    def test_zero_dwell_rejected(self):
        with pytest.raises(ValueError):
            default_team_id(0, TEAMS, 0)

    def test_zero_dwell_rejected_without_teams(self):
        with pytest.raises(ValueError):
            default_team_id(0, [], 0)

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            rotation_position(-1, 2, 2)


# ============================================
# Override / swap resolver
# ============================================
class TestResolver:
    def test_rules_are_override_swap_rotation(self):
        assert [r.__name__ for r in RULES] == ["_override_rule", "_swap_rule", "_rotation_rule"]

    def test_plain_rotation(self):
        assert effective_team_id(D2, 2, TEAMS, 2, {}, []) == 2

    def test_override_wins_over_rotation(self):
        assert effective_team_id(D2, 2, TEAMS, 2, {D2: 1}, []) == 1

    def test_override_wins_over_approved_swap(self):
        swaps = [swap(1, 1, 2, D0, D2)]
        assert effective_team_id(D0, 0, TEAMS, 2, {D0: 1}, swaps) == 1

    def test_override_unknown_team_returned_verbatim(self):
        assert effective_team_id(D0, 0, TEAMS, 2, {D0: 99}, []) == 99

    def test_swap_is_symmetric(self):
        swaps = [swap(1, 1, 2, D0, D2)]
        assert effective_team_id(D0, 0, TEAMS, 2, {}, swaps) == 2
        assert effective_team_id(D2, 2, TEAMS, 2, {}, swaps) == 1

    @pytest.mark.parametrize("status", ["pending", "rejected"])
    def test_unapproved_swaps_are_inert(self, status):
        swaps = [swap(1, 1, 2, D0, D2, status=status)]
        assert effective_team_id(D0, 0, TEAMS, 2, {}, swaps) == 1
        assert effective_team_id(D2, 2, TEAMS, 2, {}, swaps) == 2

    def test_earliest_swap_wins(self):
        # Listed newest first; creation order still decides.
        swaps = [swap(20, 2, 1, D2, D4), swap(10, 1, 2, D0, D2)]
        assert effective_team_id(D2, 2, TEAMS, 2, {}, swaps) == 1
        assert effective_team_id(D4, 4, TEAMS, 2, {}, swaps) == 2

    def test_equal_ids_fall_back_to_input_position(self):
        swaps = [swap(5, 2, 1, D1, D3), swap(5, 1, 2, D1, D2)]
        assert effective_team_id(D1, 1, TEAMS, 2, {}, swaps) == 1

    def test_malformed_swaps_are_skipped(self):
        swaps = [
            {"fromDate": D0},
            {"id": 2, "fromTeamId": 1, "toTeamId": 2, "fromDate": "not-a-date",
             "toDate": D2, "status": "approved"},
            "garbage",
            swap(3, 1, 2, D0, D2),
        ]
        assert effective_team_id(D0, 0, TEAMS, 2, {}, swaps) == 2

    def test_swap_with_unknown_team_is_skipped(self):
        swaps = [swap(1, 1, 99, D0, D2)]
        assert effective_team_id(D0, 0, TEAMS, 2, {}, swaps) == 1

    def test_approved_swaps_filters_and_orders(self):
        swaps = [swap(3, 1, 2, D0, D2), swap(1, 1, 2, D1, D3, status="pending"), swap(2, 2, 1, D2, D4)]
        assert [s.id for s in approved_swaps(swaps, TEAMS)] == [2, 3]

    def test_accepts_swap_models(self):
        model = SwapRequest(id=1, from_team_id=1, to_team_id=2, from_date=D0, to_date=D2,
                            status="approved")
        assert effective_team_id(D0, 0, TEAMS, 2, {}, [model]) == 2

    def test_malformed_override_falls_through(self):
        assert effective_team_id(D0, 0, TEAMS, 2, {D0: "abc"}, []) == 1
        assert effective_team_id(D0, 0, TEAMS, 2, {D0: "abc"}, [swap(1, 1, 2, D0, D2)]) == 2

    def test_valid_overrides_keeps_team_ids(self):
        overrides = {D0: 2, D1: "1", D2: 1.5, D3: {"id": 2}, D4: True, "2026-02-08": None}
        assert valid_overrides(overrides) == {D0: 2, D1: 1}

    def test_malformed_records_gauge_counts_records_not_builds(self):
        swaps = [{"fromDate": D0}, "garbage", swap(1, 1, 2, D0, D2)]
        for _ in range(3):
            approved_swaps(swaps, TEAMS)
        assert REGISTRY.get_sample_value("rota_malformed_records", {"kind": "swap"}) == 2
        valid_overrides({D0: "abc"})
        assert REGISTRY.get_sample_value("rota_malformed_records", {"kind": "override"}) == 1

    def test_resolution_source(self):
        ctx = ResolutionContext(D0, 0, [], 2, {}, [])
        assert resolve(ctx) == (None, "unassigned")
        ctx = ResolutionContext(D0, 0, TEAMS, 2, {D0: 2}, [])
        assert resolve(ctx).source == "override"


# ============================================
# Calendar materializer
# ============================================
class TestSundays:
    def test_first_sunday_on_sunday_is_same_day(self):
        assert first_sunday_on_or_after(TODAY) == TODAY

    def test_first_sunday_from_thursday(self):
        assert first_sunday_on_or_after(date(2026, 1, 1)) == TODAY

    def test_sundays_stop_at_horizon_year(self):
        dates = sunday_dates(TODAY, 2026)
        assert dates[0] == TODAY
        assert dates[-1] == date(2026, 12, 27)
        assert len(dates) == 52


class TestBuildSchedule:
    def test_scenario_plain_rotation(self):
        weeks = schedule()
        assert [w.team_id for w in weeks[:4]] == [1, 1, 2, 2]
        assert [w.date for w in weeks[:4]] == [D0, D1, D2, D3]
        assert [w.index for w in weeks[:4]] == [0, 1, 2, 3]

    def test_scenario_override(self):
        baseline = team_by_date(schedule())
        weeks = team_by_date(schedule(overrides={D2: 1}))
        assert weeks[D2] == 1
        assert {k: v for k, v in weeks.items() if k != D2} == {
            k: v for k, v in baseline.items() if k != D2
        }

    def test_scenario_swap(self):
        weeks = schedule(swaps=[swap(1, 1, 2, D0, D2)])
        assert [w.team_id for w in weeks[:4]] == [2, 1, 1, 2]
        assert weeks[0].source == "swap"
        assert weeks[1].source == "rotation"

    def test_scenario_christmas_on_weekday(self):
        christmas = SpecialDate(year=2026, month=12, day=25, kind="christmas")
        plain = schedule()
        weeks = schedule(special_dates=[christmas])
        matches = [w for w in weeks if w.date == "2026-12-25"]
        assert len(matches) == 1
        assert matches[0].is_christmas is True
        assert len(weeks) == len(plain) + 1
        by_date = team_by_date(weeks)
        assert by_date["2026-12-25"] == by_date["2026-12-27"]

    def test_scenario_no_teams(self):
        weeks = schedule(teams=[])
        assert len(weeks) == 52
        assert all(w.team_id is UNASSIGNED for w in weeks)
        assert all(w.source == "unassigned" for w in weeks)

    def test_deterministic(self):
        args = dict(
            overrides={D3: 2},
            swaps=[swap(1, 1, 2, D0, D2)],
            special_dates=[SpecialDate(year=2026, month=4, day=3, kind="good_friday")],
        )
        assert schedule(**args) == schedule(**args)

    def test_special_on_sunday_merges(self):
        easter = SpecialDate(year=2026, month=4, day=5, kind="easter")
        weeks = schedule(special_dates=[easter])
        assert len(weeks) == 52
        matches = [w for w in weeks if w.date == "2026-04-05"]
        assert len(matches) == 1
        assert matches[0].is_easter is True

    def test_two_specials_same_date_merge_flags(self):
        specials = [
            SpecialDate(year=2026, month=12, day=25, kind="christmas"),
            SpecialDate(year=2026, month=12, day=25, kind="easter"),
        ]
        weeks = [w for w in schedule(special_dates=specials) if w.date == "2026-12-25"]
        assert len(weeks) == 1
        assert weeks[0].is_christmas and weeks[0].is_easter

    def test_no_duplicates_and_sorted(self):
        specials = [
            SpecialDate(year=2026, month=4, day=3, kind="good_friday"),
            SpecialDate(year=2026, month=4, day=5, kind="easter"),
            SpecialDate(year=2026, month=12, day=25, kind="christmas"),
        ]
        dates = [w.date for w in schedule(special_dates=specials)]
        assert len(dates) == len(set(dates))
        assert dates == sorted(dates)
        assert all(a < b for a, b in zip(dates, dates[1:]))

    def test_special_date_gets_overrides_and_swaps(self):
        friday = "2026-04-03"
        good_friday = SpecialDate(year=2026, month=4, day=3, kind="good_friday")
        weeks = team_by_date(schedule(overrides={friday: 2}, special_dates=[good_friday]))
        assert weeks[friday] == 2

    def test_special_dates_outside_window_dropped(self):
        specials = [
            SpecialDate(year=2025, month=12, day=25, kind="christmas"),
            SpecialDate(year=2027, month=12, day=25, kind="christmas"),
        ]
        assert len(schedule(special_dates=specials)) == 52

    def test_special_date_on_today(self):
        today = date(2026, 12, 25)
        christmas = SpecialDate(year=2026, month=12, day=25, kind="christmas")
        weeks = schedule(today=today, horizon_end=date(2027, 12, 31), special_dates=[christmas])
        assert weeks[0].date == "2026-12-25"
        assert weeks[0].index == 0
        assert weeks[1].date == "2026-12-27"

    def test_starts_next_sunday_when_today_is_weekday(self):
        weeks = schedule(today=date(2026, 1, 1))
        assert weeks[0].date == D0

    def test_horizon_covers_following_year(self):
        weeks = schedule(horizon_end=date(2027, 12, 31))
        assert weeks[-1].date == "2027-12-26"
        assert len(weeks) == 104

    def test_malformed_override_does_not_break_build(self):
        weeks = schedule(overrides={D0: "2", D1: "abc", D2: 1.5, D3: {"team": 1}})
        by_date = {w.date: w for w in weeks}
        assert by_date[D0].team_id == 2
        assert by_date[D0].source == "override"
        assert [by_date[d].team_id for d in (D1, D2, D3)] == [1, 2, 2]
        assert all(by_date[d].source == "rotation" for d in (D1, D2, D3))

    def test_every_date_parses(self):
        for week in schedule():
            assert parse_iso_date(week.date).weekday() == 6

    def test_zero_dwell_raises(self):
        with pytest.raises(ValueError):
            schedule(dwell_weeks=0)

    def test_horizon_before_today_raises(self):
        with pytest.raises(ValueError):
            schedule(horizon_end=date(2025, 12, 31))

    def test_malformed_swap_does_not_break_build(self):
        weeks = schedule(swaps=[{"status": "approved"}, swap(1, 1, 2, D0, D2)])
        assert weeks[0].team_id == 2


class TestDomain:
    @pytest.mark.parametrize("value", ["2026-1-4", "20260104", "2026-W01-1", "2026-02-30", ""])
    def test_parse_iso_date_rejects(self, value):
        with pytest.raises(ValueError):
            parse_iso_date(value)

    def test_special_date_rejects_impossible_day(self):
        with pytest.raises(ValueError):
            SpecialDate(year=2026, month=2, day=30, kind="christmas")

    def test_swap_accepts_both_spellings(self):
        a = SwapRequest.model_validate(swap(1, 1, 2, D0, D2))
        b = SwapRequest(id=1, from_team_id=1, to_team_id=2, from_date=D0, to_date=D2, status="approved")
        assert a == b
