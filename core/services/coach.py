"""Coach v2 constraint scorer.

Scores four independent limiters from 0 (no problem) to 100 (severe):

- direction_consistency: widest offline std-dev across clubs
- distance_control: widest carry std-dev across clubs
- bag_gapping: weighted count of overlap / cliff / compressed gaps
- strike_quality: provisional proxy (share of distance-control score)
  until club-level smash data exists

The highest score is the primary limiter; the runner-up is secondary only
when it is non-zero. A confidence score and a fixed-template practice plan
are derived from the same inputs, so identical sessions always produce the
same plan.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from core.config import Settings, get_settings
from core.models import (
    ClubSummary,
    CoachConfidence,
    CoachV2Plan,
    ConfidenceLevel,
    ConstraintScore,
    GappingLadder,
    LegacyCoachPlan,
    PracticePlan,
    PracticePlanStep,
    SessionSummary,
)
from core.services.stats import clamp, round1, round_half_up


def _worst_club(
    clubs: list[ClubSummary], metric: Callable[[ClubSummary], Optional[float]]
) -> tuple[Optional[ClubSummary], Optional[float]]:
    """Club with the largest metric value; first one wins ties."""
    winner: Optional[ClubSummary] = None
    winner_value: Optional[float] = None
    for club in clubs:
        value = metric(club)
        if value is None:
            continue
        if winner_value is None or value > winner_value:
            winner, winner_value = club, value
    return winner, winner_value


def _score(value: float) -> int:
    return int(clamp(round_half_up(value), 0, 100))


def direction_score(summary: SessionSummary, settings: Settings) -> ConstraintScore:
    club, value = _worst_club(summary.clubs, lambda c: c.offline_std_dev_yds)
    focus = club.display_name if club else None
    if value:
        reasons = [f"{focus or 'Focus club'} shows the widest offline spread ({value:.1f} yds std dev)."]
    else:
        reasons = ["Not enough offline data yet to score direction consistency reliably."]
    return ConstraintScore(
        key="direction_consistency",
        label="Direction consistency",
        score=_score((value or 0) * settings.direction_score_multiplier),
        reasons=reasons,
        focus_club=focus,
        target_metric="Offline std dev (yds)",
        current_value=value,
        target_value=round1(value * settings.target_improvement_ratio) if value else None,
    )


def distance_score(summary: SessionSummary, settings: Settings) -> ConstraintScore:
    club, value = _worst_club(summary.clubs, lambda c: c.carry_std_dev_yds)
    focus = club.display_name if club else None
    if value:
        reasons = [f"{focus or 'Focus club'} has the highest carry variance ({value:.1f} yds std dev)."]
    else:
        reasons = ["Not enough carry variance data yet to score distance control reliably."]
    return ConstraintScore(
        key="distance_control",
        label="Distance control",
        score=_score((value or 0) * settings.distance_score_multiplier),
        reasons=reasons,
        focus_club=focus,
        target_metric="Carry std dev (yds)",
        current_value=value,
        target_value=round1(value * settings.target_improvement_ratio) if value else None,
    )


def gapping_score(ladder: GappingLadder, settings: Settings) -> ConstraintScore:
    overlap = ladder.count_status("overlap")
    cliff = ladder.count_status("cliff")
    compressed = ladder.count_status("compressed")
    weighted = (
        overlap * settings.gapping_overlap_weight
        + cliff * settings.gapping_cliff_weight
        + compressed * settings.gapping_compressed_weight
    )
    focus = next((row.display_club for row in ladder.rows if row.gap_status in ("overlap", "cliff")), None)
    alerts = overlap + cliff + compressed
    return ConstraintScore(
        key="bag_gapping",
        label="Bag gapping",
        score=_score(weighted),
        reasons=[f"Detected {overlap} overlap(s), {cliff} cliff(s), and {compressed} compressed gap(s)."],
        focus_club=focus,
        target_metric="Gap alerts",
        current_value=alerts,
        target_value=max(0, alerts - 1),
    )


def strike_score(summary: SessionSummary, distance: ConstraintScore, settings: Settings) -> ConstraintScore:
    # Provisional: carry variability stands in for strike until smash data exists.
    if summary.avg_ball_speed_mph is None:
        score = 0
        reasons = ["Ball speed data is missing, so strike-quality scoring is currently limited."]
    else:
        score = _score(distance.score * settings.strike_proxy_ratio)
        reasons = ["Using carry variability as a strike-quality proxy until club-level smash data is available."]
    return ConstraintScore(
        key="strike_quality",
        label="Strike quality",
        score=score,
        reasons=reasons,
        focus_club=distance.focus_club,
        target_metric="Strike proxy score",
        current_value=score,
        target_value=max(0, score - 10) if score > 0 else None,
    )


def confidence_level(score: int, settings: Settings | None = None) -> ConfidenceLevel:
    settings = settings or get_settings()
    if score >= settings.confidence_high_min:
        return "high"
    if score >= settings.confidence_medium_min:
        return "medium"
    return "low"


def build_confidence(
    summary: SessionSummary,
    sessions_analyzed: int,
    scores: list[ConstraintScore],
    settings: Settings | None = None,
) -> CoachConfidence:
    """Confidence from sample size, bag coverage, history depth, and signal coverage."""
    settings = settings or get_settings()
    clubs = len(summary.clubs)
    populated = sum(1 for s in scores if s.current_value is not None)

    shots_part = clamp(round_half_up(summary.shots / settings.confidence_shots_divisor), 0, settings.confidence_shots_cap)
    clubs_part = clamp(clubs * settings.confidence_clubs_weight, 0, settings.confidence_clubs_cap)
    sessions_part = clamp(sessions_analyzed * settings.confidence_sessions_weight, 0, settings.confidence_sessions_cap)
    coverage_part = clamp(populated * settings.confidence_coverage_weight, 0, settings.confidence_coverage_cap)
    score = int(clamp(shots_part + clubs_part + sessions_part + coverage_part, 0, 100))

    reasons = [
        f"{summary.shots} shot(s) analyzed across {clubs} club(s).",
        f"{sessions_analyzed} saved session(s) included in this analysis.",
    ]
    if populated < 3:
        reasons.append("Some metric families are incomplete, so recommendations are conservative.")

    return CoachConfidence(
        level=confidence_level(score, settings),
        score=score,
        shots_analyzed=summary.shots,
        clubs_analyzed=clubs,
        sessions_analyzed=sessions_analyzed,
        reasons=reasons,
    )


def practice_steps(constraint: ConstraintScore) -> list[PracticePlanStep]:
    focus = constraint.focus_club or "focus club"
    if constraint.key == "direction_consistency":
        return [
            PracticePlanStep(f"Alignment gate ({focus})", "10 balls", "Start line control"),
            PracticePlanStep("Half-speed face control", "15 balls", "Reduce offline misses"),
            PracticePlanStep("Random target test", "10 balls", "Transfer to variable targets"),
        ]
    if constraint.key == "distance_control":
        return [
            PracticePlanStep(f"Stock carry ladder ({focus})", "12 balls", "Tighten carry windows"),
            PracticePlanStep("Tempo lock block", "10 balls", "Stabilize strike rhythm"),
            PracticePlanStep("Distance challenge", "8 balls", "Execute with pressure"),
        ]
    if constraint.key == "bag_gapping":
        return [
            PracticePlanStep("Gap retest around flagged clubs", "12 balls", "Validate median carry"),
            PracticePlanStep("Neighbor club alternation", "12 balls", "Confirm separation"),
            PracticePlanStep("Final ladder check", "6 balls", "Verify gap consistency"),
        ]
    return [
        PracticePlanStep(f"Centered contact block ({focus})", "12 balls", "Improve strike quality"),
        PracticePlanStep("Speed consistency drill", "10 balls", "Limit strike-speed swings"),
        PracticePlanStep("Transfer set", "8 balls", "Keep strike quality under variability"),
    ]


def build_practice_plan(
    constraint: ConstraintScore, confidence: CoachConfidence, settings: Settings | None = None
) -> PracticePlan:
    settings = settings or get_settings()
    duration = {
        "high": settings.practice_minutes_high,
        "medium": settings.practice_minutes_medium,
    }.get(confidence.level, settings.practice_minutes_low)

    if constraint.current_value is not None and constraint.target_value is not None:
        goal = f"{constraint.target_metric}: {constraint.current_value:.1f} -> {constraint.target_value:.1f}"
    else:
        goal = f"Improve {constraint.label.lower()} next session with a consistent baseline set."

    focus_suffix = f" ({constraint.focus_club})" if constraint.focus_club else ""
    return PracticePlan(
        duration_minutes=duration,
        focus=f"{constraint.label}{focus_suffix}",
        goal=goal,
        steps=practice_steps(constraint),
    )


def trend_summary(primary: ConstraintScore, secondary: Optional[ConstraintScore], confidence: CoachConfidence) -> str:
    prefix = f"Confidence is {confidence.level} ({confidence.score}/100)"
    if secondary is None:
        return f"{prefix}. Primary focus is {primary.label.lower()} this session."
    return f"{prefix}. Primary focus is {primary.label.lower()}, with {secondary.label.lower()} as secondary."


def score_constraints(
    summary: SessionSummary, ladder: GappingLadder, settings: Settings | None = None
) -> list[ConstraintScore]:
    """All four limiters, highest score first; ties keep evaluation order."""
    settings = settings or get_settings()
    distance = distance_score(summary, settings)
    scores = [
        direction_score(summary, settings),
        distance,
        gapping_score(ladder, settings),
        strike_score(summary, distance, settings),
    ]
    return sorted(scores, key=lambda s: s.score, reverse=True)


def build_coach_plan(
    summary: SessionSummary,
    ladder: GappingLadder,
    sessions_analyzed: int = 1,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> Optional[CoachV2Plan]:
    """Compose the coaching plan, or ``None`` when no club has data."""
    if not summary.clubs:
        return None
    settings = settings or get_settings()

    ranked = score_constraints(summary, ladder, settings)
    primary = ranked[0]
    secondary = ranked[1] if ranked[1].score > 0 else None
    confidence = build_confidence(summary, sessions_analyzed, ranked, settings)

    return CoachV2Plan(
        constraint_scores=ranked,
        primary_constraint=primary,
        secondary_constraint=secondary,
        confidence=confidence,
        practice_plan=build_practice_plan(primary, confidence, settings),
        trend_summary=trend_summary(primary, secondary, confidence),
        generated_at=(now or datetime.now(timezone.utc)).isoformat(),
    )


def to_legacy_coach_plan(plan: Optional[CoachV2Plan]) -> Optional[LegacyCoachPlan]:
    if plan is None:
        return None
    primary = plan.primary_constraint
    return LegacyCoachPlan(
        primary_limiter=primary.key,
        title=f"Coach v2: Primary limiter is {primary.label.lower()}",
        explanation=primary.reasons[0] if primary.reasons else plan.trend_summary,
        target=plan.practice_plan.goal,
        focus_club=primary.focus_club,
        actions=[
            f"{step.title}: {step.objective} ({step.reps})" if step.reps else f"{step.title}: {step.objective}"
            for step in plan.practice_plan.steps
        ],
    )
