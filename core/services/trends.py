"""Session-over-session trend deltas.

Compares the latest session against a baseline pooled from every other known
session. Constraint scores measure how severe a limiter is, so a falling
score is an improvement.
"""

from __future__ import annotations

from typing import Optional

from core.config import Settings, get_settings
from core.models import ConstraintDelta, GappingLadder, MetricDelta, SessionSummary, TrendDeltas, TrendDirection
from core.services.coach import build_coach_plan
from core.services.gapping import ALERT_STATUSES, build_gapping_ladder
from core.services.stats import round1

NO_BASELINE_SUMMARY = "No baseline yet. Save another session to unlock deterministic progress deltas."


def trend_direction(
    delta: Optional[float], lower_is_better: bool, settings: Settings | None = None
) -> TrendDirection:
    settings = settings or get_settings()
    if delta is None:
        return "insufficient"
    if abs(delta) < settings.trend_flat_threshold:
        return "flat"
    improved = delta < 0 if lower_is_better else delta > 0
    return "improved" if improved else "worsened"


def metric_delta(
    key: str,
    label: str,
    current: Optional[float],
    baseline: Optional[float],
    unit: str,
    lower_is_better: bool,
    settings: Settings | None = None,
) -> MetricDelta:
    delta = None if current is None or baseline is None else round1(current - baseline)
    return MetricDelta(
        key=key,
        label=label,
        current=current,
        baseline=baseline,
        delta=delta,
        direction=trend_direction(delta, lower_is_better, settings),
        unit=unit,
    )


def summarize_trend(metrics: list[MetricDelta], has_baseline: bool) -> str:
    if not has_baseline:
        return NO_BASELINE_SUMMARY
    improved = sum(1 for m in metrics if m.direction == "improved")
    worsened = sum(1 for m in metrics if m.direction == "worsened")
    flat = sum(1 for m in metrics if m.direction == "flat")
    return f"Trend check: {improved} improved, {worsened} worsened, {flat} flat vs baseline."


def build_trend_deltas(
    latest_summary: SessionSummary,
    latest_ladder: GappingLadder,
    latest_session_count: int,
    baseline_summary: Optional[SessionSummary],
    baseline_session_count: int,
    settings: Settings | None = None,
) -> TrendDeltas:
    """Deltas for average carry, average ball speed, gap alerts, and the primary limiter."""
    settings = settings or get_settings()
    latest_plan = build_coach_plan(latest_summary, latest_ladder, latest_session_count, settings)

    baseline_ladder = build_gapping_ladder(baseline_summary, settings) if baseline_summary else None
    baseline_plan = (
        build_coach_plan(baseline_summary, baseline_ladder, baseline_session_count, settings)
        if baseline_summary and baseline_ladder
        else None
    )

    metrics = [
        metric_delta(
            "avg_carry_yds",
            "Average carry",
            latest_summary.avg_carry_yds,
            baseline_summary.avg_carry_yds if baseline_summary else None,
            "yds",
            False,
            settings,
        ),
        metric_delta(
            "avg_ball_speed_mph",
            "Average ball speed",
            latest_summary.avg_ball_speed_mph,
            baseline_summary.avg_ball_speed_mph if baseline_summary else None,
            "mph",
            False,
            settings,
        ),
        metric_delta(
            "gap_alerts",
            "Gap alerts",
            latest_ladder.count_status(*ALERT_STATUSES),
            baseline_ladder.count_status(*ALERT_STATUSES) if baseline_ladder else None,
            "alerts",
            True,
            settings,
        ),
    ]

    constraint_delta: Optional[ConstraintDelta] = None
    if latest_plan and baseline_plan:
        primary = latest_plan.primary_constraint
        baseline_score = next(
            (s.score for s in baseline_plan.constraint_scores if s.key == primary.key),
            baseline_plan.primary_constraint.score,
        )
        delta = primary.score - baseline_score
        constraint_delta = ConstraintDelta(
            label=primary.label,
            current_score=primary.score,
            baseline_score=baseline_score,
            delta_score=delta,
            direction=trend_direction(delta, True, settings),
        )

    has_baseline = baseline_summary is not None
    return TrendDeltas(
        baseline_sessions=baseline_session_count,
        has_baseline=has_baseline,
        metrics=metrics,
        primary_constraint_delta=constraint_delta,
        summary=summarize_trend(metrics, has_baseline),
    )
