"""Tests for the club-distance gapping ladder."""

from __future__ import annotations

import pytest

from core.config import Settings
from core.models import ClubSummary, GappingInsight, SessionSummary
from core.services.gapping import build_gapping_ladder, classify_gap, club_family, gap_warning


def _club(name: str, median: float | None, p10: float | None = None, p90: float | None = None) -> ClubSummary:
    return ClubSummary(
        name=name,
        display_name=name,
        shot_labels=[],
        model_labels=[],
        shots=5,
        avg_carry_yds=median,
        median_carry_yds=median,
        p10_carry_yds=p10,
        p90_carry_yds=p90,
        carry_std_dev_yds=None,
        offline_std_dev_yds=None,
    )


def _summary(*clubs: ClubSummary) -> SessionSummary:
    return SessionSummary(
        shots=5 * len(clubs),
        avg_carry_yds=None,
        avg_ball_speed_mph=None,
        avg_launch_angle_deg=None,
        avg_spin_rpm=None,
        clubs=list(clubs),
    )


@pytest.mark.parametrize(
    "club, family",
    [
        ("Pitching Wedge", "wedge"),
        ("60 Degree Wedge", "wedge"),
        ("7 Iron", "iron"),
        ("4 Hybrid", "hybrid"),
        ("3 Wood", "wood"),
        ("Mini Wood", "wood"),
        ("Driver", "driver"),
        ("Putter", "other"),
    ],
)
def test_club_family(club, family):
    assert club_family(club) == family


@pytest.mark.parametrize(
    "family, gap, status",
    [
        ("iron", 5.0, "compressed"),
        ("iron", 4.9, "overlap"),
        ("iron", 18.0, "healthy"),
        ("iron", 18.1, "cliff"),
        ("wedge", 8.0, "healthy"),
        ("other", 7.9, "compressed"),
        ("hybrid", 25.0, "cliff"),
        ("hybrid", 10.0, "compressed"),
        ("wood", 12.0, "healthy"),
        ("driver", 20.0, "healthy"),
        ("driver", 4.0, "overlap"),
    ],
)
def test_classify_gap(family, gap, status):
    assert classify_gap(family, gap) == status


def test_classify_gap_overlap_threshold_from_settings():
    assert classify_gap("iron", 6.0, Settings(gap_overlap_yds=7.0)) == "overlap"


def test_ladder_orders_by_median_and_classifies():
    summary = _summary(
        _club("Pitching Wedge", 150),
        _club("8 Iron", 157),
        _club("7 Iron", 160),
        _club("3 Wood", 230, p10=222, p90=238),
        _club("Driver", 250, p10=240, p90=262),
    )
    ladder = build_gapping_ladder(summary)
    assert [r.club for r in ladder.rows] == ["Driver", "3 Wood", "7 Iron", "8 Iron", "Pitching Wedge"]
    assert [r.gap_status for r in ladder.rows] == ["healthy", "cliff", "overlap", "compressed", None]
    assert [r.gap_to_next_yds for r in ladder.rows] == [20.0, 70.0, 3.0, 7.0, None]

    driver = ladder.rows[0]
    assert driver.family == "driver"
    assert driver.overlap_yds == 0.0
    assert driver.warning is None

    assert ladder.rows[1].warning == "3 Wood to 7 Iron has a large gap (70.0 yds)."
    assert ladder.rows[2].warning == "7 Iron and 8 Iron overlap (3.0 yds gap)."
    assert ladder.rows[3].warning == "8 Iron to Pitching Wedge is compressed (7.0 yds)."
    assert ladder.rows[-1].warning is None


def test_ladder_insights_count_each_alert_type():
    summary = _summary(_club("3 Wood", 230), _club("7 Iron", 160), _club("8 Iron", 157), _club("Pitching Wedge", 150))
    ladder = build_gapping_ladder(summary)
    assert ladder.insights == [
        GappingInsight("danger", "You have 1 overlapping gap in your bag."),
        GappingInsight("danger", "You have 1 large distance cliff to address."),
        GappingInsight("warning", "1 gap is compressed and may limit club separation."),
    ]


def test_healthy_ladder_insight():
    ladder = build_gapping_ladder(_summary(_club("7 Iron", 160), _club("8 Iron", 150)))
    assert ladder.rows[0].gap_status == "healthy"
    assert ladder.insights == [GappingInsight("info", "Your current gapping profile looks healthy across measured clubs.")]


def test_cliff_with_band_overlap_warning():
    summary = _summary(_club("5 Iron", 190, p10=150, p90=200), _club("7 Iron", 160, p10=150, p90=170))
    row = build_gapping_ladder(summary).rows[0]
    assert row.gap_status == "cliff"
    assert row.overlap_yds == 20.0
    assert row.warning == "5 Iron to 7 Iron has a large gap and 20.0 yds of band overlap."


def test_gap_rounds_half_up():
    ladder = build_gapping_ladder(_summary(_club("7 Iron", 160.25), _club("8 Iron", 150.0)))
    assert ladder.rows[0].gap_to_next_yds == 10.3


def test_clubs_without_median_are_excluded():
    ladder = build_gapping_ladder(_summary(_club("Putter", None), _club("7 Iron", 160), _club("8 Iron", 150)))
    assert [r.club for r in ladder.rows] == ["7 Iron", "8 Iron"]


def test_single_club_ladder():
    ladder = build_gapping_ladder(_summary(_club("7 Iron", 160)))
    assert len(ladder.rows) == 1
    assert ladder.rows[0].gap_to_next_yds is None
    assert ladder.rows[0].gap_status is None
    assert ladder.insights == [GappingInsight("info", "Gapping needs carry data from at least two clubs.")]


def test_empty_ladder():
    ladder = build_gapping_ladder(_summary())
    assert ladder.rows == []
    assert [i.severity for i in ladder.insights] == ["info"]


def test_gap_warning_healthy_is_none():
    assert gap_warning("healthy", "7 Iron", "8 Iron", 12.0, None) is None
