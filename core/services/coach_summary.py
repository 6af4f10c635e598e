"""Structured input for the natural-language coach summary.

The engine hands ``CoachSummaryInput`` to an external summarizer and
otherwise produces a deterministic summary of its own from the same input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from core.models import CoachV2Plan, RuleInsight, TrendDeltas

TONE_PREFIXES = {
    "straight": "Direct take",
    "encouraging": "Coach take",
    "technical": "Technical take",
}


@dataclass(frozen=True)
class InsightBrief:
    title: str
    if_then: str
    evidence: str
    action: str


@dataclass
class CoachSummaryInput:
    tone: str
    detail_level: str
    primary_constraint: str
    secondary_constraint: Optional[str]
    confidence_level: str
    confidence_score: int
    target: str
    trend_summary: str
    top_insights: list[InsightBrief] = field(default_factory=list)


@dataclass(frozen=True)
class CoachSummaryResult:
    summary: str
    source: str = "deterministic"
    model: Optional[str] = None


def build_coach_summary_input(
    plan: CoachV2Plan,
    trend_deltas: TrendDeltas,
    insights: Sequence[RuleInsight],
    tone: str = "encouraging",
    detail_level: str = "balanced",
) -> CoachSummaryInput:
    return CoachSummaryInput(
        tone=tone,
        detail_level=detail_level,
        primary_constraint=plan.primary_constraint.label,
        secondary_constraint=plan.secondary_constraint.label if plan.secondary_constraint else None,
        confidence_level=plan.confidence.level,
        confidence_score=plan.confidence.score,
        target=plan.practice_plan.goal,
        trend_summary=trend_deltas.summary,
        top_insights=[InsightBrief(i.title, i.if_then, i.evidence, i.action) for i in insights[:3]],
    )


def build_deterministic_summary(summary_input: CoachSummaryInput) -> CoachSummaryResult:
    if summary_input.top_insights:
        first = summary_input.top_insights[0]
        insight_line = f"{first.title}: {first.if_then}"
    else:
        insight_line = "No major rule alerts triggered this session."
    prefix = TONE_PREFIXES.get(summary_input.tone, TONE_PREFIXES["encouraging"])
    text = (
        f"{prefix}: your primary limiter is {summary_input.primary_constraint.lower()} "
        f"with {summary_input.confidence_level} confidence ({summary_input.confidence_score}/100). "
        f"{summary_input.trend_summary} Target: {summary_input.target}. {insight_line}"
    )
    return CoachSummaryResult(summary=text)
