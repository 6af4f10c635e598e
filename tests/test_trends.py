"""Tests for session-over-session trend deltas."""

from __future__ import annotations

from core.models import ShotRecord
from core.services.gapping import build_gapping_ladder
from core.services.session_summary import summarize_session
from core.services.trends import NO_BASELINE_SUMMARY, build_trend_deltas, trend_direction


def _session(offset: float = 0.0, eight_iron_median: float = 141.0) -> list[ShotRecord]:
    shots = [ShotRecord(club_type="7 Iron", carry_yds=c + offset, ball_speed_mph=110.0) for c in (150, 152, 148, 154)]
    shift = eight_iron_median - 141.0
    shots += [ShotRecord(club_type="8 Iron", carry_yds=c + shift, ball_speed_mph=105.0) for c in (140, 142, 138, 144)]
    return shots


def test_trend_direction():
    assert trend_direction(None, False) == "insufficient"
    assert trend_direction(-0.05, False) == "flat"
    assert trend_direction(0.1, False) == "improved"
    assert trend_direction(0.5, True) == "worsened"
    assert trend_direction(-2.0, True) == "improved"


def test_no_baseline():
    summary = summarize_session(_session())
    deltas = build_trend_deltas(summary, build_gapping_ladder(summary), 1, None, 0)
    assert deltas.has_baseline is False
    assert deltas.baseline_sessions == 0
    assert [m.direction for m in deltas.metrics] == ["insufficient"] * 3
    assert deltas.primary_constraint_delta is None
    assert deltas.summary == NO_BASELINE_SUMMARY


def test_identical_baseline_is_flat():
    summary = summarize_session(_session())
    ladder = build_gapping_ladder(summary)
    deltas = build_trend_deltas(summary, ladder, 1, summarize_session(_session()), 1)

    assert deltas.has_baseline is True
    assert [m.key for m in deltas.metrics] == ["avg_carry_yds", "avg_ball_speed_mph", "gap_alerts"]
    assert all(m.direction == "flat" for m in deltas.metrics)
    assert all(m.delta == 0 for m in deltas.metrics)
    assert deltas.primary_constraint_delta.direction == "flat"
    assert deltas.primary_constraint_delta.delta_score == 0
    assert deltas.summary == "Trend check: 0 improved, 0 worsened, 3 flat vs baseline."


def test_longer_carry_is_an_improvement():
    latest = summarize_session(_session(offset=10.0, eight_iron_median=151.0))
    baseline = summarize_session(_session())
    deltas = build_trend_deltas(latest, build_gapping_ladder(latest), 1, baseline, 2)

    carry = deltas.metrics[0]
    assert carry.current == 156.0
    assert carry.baseline == 146.0
    assert carry.delta == 10.0
    assert carry.direction == "improved"
    assert carry.unit == "yds"
    assert deltas.baseline_sessions == 2


def test_new_gap_alert_is_a_regression():
    # 8 Iron moved up to within 3 yds of the 7 Iron.
    latest = summarize_session(_session(eight_iron_median=148.0))
    baseline = summarize_session(_session())
    deltas = build_trend_deltas(latest, build_gapping_ladder(latest), 1, baseline, 1)

    gap = deltas.metrics[2]
    assert gap.current == 1
    assert gap.baseline == 0
    assert gap.direction == "worsened"
    assert deltas.primary_constraint_delta.label == "Bag gapping"
    assert deltas.primary_constraint_delta.direction == "worsened"
