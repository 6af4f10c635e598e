"""If-then rule insights.

Each rule is evaluated independently against one session; several can fire
at once. When none fires, a single informational fallback is returned so
the output is never empty.
"""

from __future__ import annotations

from typing import Optional, Sequence

from core.config import Settings, get_settings
from core.models import DrillMemoryLog, GappingLadder, RuleInsight, SessionSummary, ShotRecord
from core.services.coach import build_coach_plan
from core.services.gapping import SEVERE_STATUSES
from core.services.stats import measured, pearson_correlation, round1, sample_std

FALLBACK_INSIGHT = RuleInsight(
    id="no-major-rule-trigger",
    severity="info",
    title="No major rule alerts",
    if_then="If you repeat this baseline session format, then trend confidence will increase quickly.",
    evidence="Current session metrics show no high-risk deterministic rule trigger.",
    action="Repeat the same protocol next session to unlock stronger trend deltas.",
)


def speed_carry_rule(shots: Sequence[ShotRecord], settings: Settings) -> Optional[RuleInsight]:
    pairs = [(s.ball_speed_mph, s.carry_yds) for s in shots if s.ball_speed_mph is not None and s.carry_yds is not None]
    if len(pairs) < settings.rule_speed_carry_min_pairs:
        return None
    r = pearson_correlation([p[0] for p in pairs], [p[1] for p in pairs])
    if r is None or r <= settings.rule_speed_carry_correlation:
        return None
    return RuleInsight(
        id="speed-carry-linked",
        severity="info",
        title="Speed-carry link detected",
        if_then="If your ball speed stays up, then your carry distance reliably improves.",
        evidence=f"Ball speed/carry correlation is {r:.2f} over {len(pairs)} shot(s).",
        action="Start each session with tempo and centered-contact reps before target practice.",
    )


def fatigue_rule(shots: Sequence[ShotRecord], settings: Settings) -> Optional[RuleInsight]:
    if len(shots) < settings.rule_fatigue_min_shots:
        return None
    split = settings.rule_fatigue_split_shot
    early_std = sample_std(measured(s.side_yds for s in shots[:split]))
    late_std = sample_std(measured(s.side_yds for s in shots[split:]))
    if early_std is None or late_std is None or late_std <= early_std * settings.rule_fatigue_multiplier:
        return None
    return RuleInsight(
        id="fatigue-dispersion",
        severity="warning",
        title="Late-session dispersion spike",
        if_then="If the session runs long, then your directional dispersion increases.",
        evidence=(
            f"Offline std dev rises from {round1(early_std)} yds (first {split}) "
            f"to {round1(late_std)} yds (after {split})."
        ),
        action="Insert a reset break every 25-30 balls and end the session when quality declines.",
    )


def top_club_rule(summary: SessionSummary, settings: Settings) -> Optional[RuleInsight]:
    if not summary.clubs:
        return None
    # max() keeps the first club on ties, matching bag order.
    top = max(summary.clubs, key=lambda club: club.shots)
    spread = top.offline_std_dev_yds
    if top.shots < settings.rule_top_club_min_shots or spread is None or spread <= settings.rule_top_club_offline_std_yds:
        return None
    return RuleInsight(
        id="top-club-dispersion",
        severity="warning",
        title="Primary club direction limiter",
        if_then=(
            f"If you tighten start-line with {top.display_name}, "
            "then most of this session's dispersion cost will drop."
        ),
        evidence=f"{top.display_name} logged {top.shots} shot(s) with {spread:.1f} yds offline std dev.",
        action=f"Use {top.display_name} as your first 20-ball block with alignment-gate constraints.",
    )


def gap_spacing_rule(ladder: GappingLadder) -> Optional[RuleInsight]:
    severe = ladder.count_status(*SEVERE_STATUSES)
    if not severe:
        return None
    return RuleInsight(
        id="gap-alerts-present",
        severity="danger" if severe >= 2 else "warning",
        title="Bag spacing risk",
        if_then="If your gap alerts persist, then on-course club selection variance stays high.",
        evidence=f"{severe} severe gap alert(s) detected (overlap/cliff).",
        action="Run a focused gapping retest on the two clubs around each severe alert.",
    )


def drill_memory_rule(
    summary: SessionSummary,
    ladder: GappingLadder,
    drill_logs: Sequence[DrillMemoryLog],
    settings: Settings,
) -> Optional[RuleInsight]:
    plan = build_coach_plan(summary, ladder, 1, settings)
    if plan is None:
        return None
    primary = plan.primary_constraint
    matching = [
        log for log in drill_logs
        if log.constraint_key == primary.key and isinstance(log.perceived_outcome, (int, float))
    ]
    if len(matching) < settings.rule_drill_memory_min_logs:
        return None

    avg_outcome = sum(log.perceived_outcome for log in matching) / len(matching)
    best = max(matching, key=lambda log: log.perceived_outcome)
    proven = avg_outcome >= settings.rule_drill_memory_good_outcome
    if proven:
        action = f'Start with "{best.drill_name}" for 10-15 balls before adding variability.'
    else:
        action = f'Replace or simplify "{best.drill_name}" and log a fresh outcome after today\'s session.'
    return RuleInsight(
        id="drill-memory",
        severity="info" if proven else "warning",
        title="Drill memory signal",
        if_then=(
            f"If you repeat your proven {primary.label.lower()} drill, "
            "then next-session execution is more likely to hold."
        ),
        evidence=f"{len(matching)} prior drill log(s) for this constraint; average outcome {round1(avg_outcome):.1f}/5.",
        action=action,
    )


def build_rule_insights(
    shots: Sequence[ShotRecord],
    summary: SessionSummary,
    ladder: GappingLadder,
    drill_logs: Sequence[DrillMemoryLog] = (),
    settings: Settings | None = None,
) -> list[RuleInsight]:
    """Evaluate the rule battery in fixed order; never returns an empty list."""
    settings = settings or get_settings()
    candidates = [
        speed_carry_rule(shots, settings),
        fatigue_rule(shots, settings),
        top_club_rule(summary, settings),
        gap_spacing_rule(ladder),
        drill_memory_rule(summary, ladder, drill_logs, settings),
    ]
    insights = [insight for insight in candidates if insight is not None]
    return insights or [FALLBACK_INSIGHT]
