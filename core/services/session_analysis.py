"""End-to-end session analysis.

Wires the engine stages together for the two views the product offers:
one saved session against its peers, and an all-time (or windowed) view
across every saved session. Inputs are already-fetched shot lists; nothing
here reads or writes storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

import pandas as pd

from core.config import Settings, get_settings
from core.logging_config import get_logger, log_context
from core.models import (
    CoachV2Plan,
    DrillMemoryLog,
    GappingLadder,
    LegacyCoachPlan,
    RuleInsight,
    SessionSummary,
    ShotRecord,
    TrendDeltas,
)
from core.services.coach import build_coach_plan, to_legacy_coach_plan
from core.services.gapping import build_gapping_ladder
from core.services.insights import build_rule_insights
from core.services.session_summary import summarize_session
from core.services.trends import build_trend_deltas

logger = get_logger(__name__)

TIME_WINDOWS: dict[str, Optional[pd.DateOffset]] = {
    "all": None,
    "1w": pd.DateOffset(days=7),
    "1m": pd.DateOffset(months=1),
    "3m": pd.DateOffset(months=3),
    "9m": pd.DateOffset(months=9),
    "1y": pd.DateOffset(years=1),
}


@dataclass
class DatedSession:
    session_date: datetime
    shots: list[ShotRecord]


@dataclass
class SessionAnalysis:
    summary: SessionSummary
    gapping_ladder: GappingLadder
    coach_v2_plan: Optional[CoachV2Plan]
    coach_plan: Optional[LegacyCoachPlan]
    trend_deltas: Optional[TrendDeltas]
    rule_insights: list[RuleInsight] = field(default_factory=list)


@dataclass
class AllTimeAnalysis(SessionAnalysis):
    time_window: str = "all"
    sessions_count: int = 0


def filter_shots(shots: Sequence[ShotRecord], include_outliers: bool = True) -> list[ShotRecord]:
    """Caller-side outlier toggle."""
    return list(shots) if include_outliers else [s for s in shots if not s.is_outlier]


def resolve_window(window: Optional[str]) -> str:
    return window if window in TIME_WINDOWS else "all"


def window_start(window: str, now: datetime) -> Optional[datetime]:
    offset = TIME_WINDOWS.get(resolve_window(window))
    if offset is None:
        return None
    return (pd.Timestamp(now) - offset).to_pydatetime()


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def analyze_session(
    shots: Sequence[ShotRecord],
    peer_sessions: Sequence[Sequence[ShotRecord]] = (),
    drill_logs: Sequence[DrillMemoryLog] = (),
    include_outliers: bool = True,
    settings: Settings | None = None,
) -> SessionAnalysis:
    """Analyze one session against the pooled shots of every other session."""
    settings = settings or get_settings()
    shots = filter_shots(shots, include_outliers)
    summary = summarize_session(shots)
    ladder = build_gapping_ladder(summary, settings)
    plan = build_coach_plan(summary, ladder, 1, settings)

    peers = [filter_shots(peer, include_outliers) for peer in peer_sessions]
    baseline_shots = [shot for peer in peers for shot in peer]
    baseline_summary = summarize_session(baseline_shots) if baseline_shots else None
    trend_deltas = build_trend_deltas(
        summary,
        ladder,
        1,
        baseline_summary,
        len(peers) if baseline_summary else 0,
        settings,
    )
    insights = build_rule_insights(shots, summary, ladder, list(drill_logs)[: settings.drill_log_limit], settings)

    logger.info(
        "session analyzed",
        extra=log_context(shots=summary.shots, clubs=len(summary.clubs), peers=len(peers), insights=len(insights)),
    )
    return SessionAnalysis(
        summary=summary,
        gapping_ladder=ladder,
        coach_v2_plan=plan,
        coach_plan=to_legacy_coach_plan(plan),
        trend_deltas=trend_deltas,
        rule_insights=insights,
    )


def analyze_all_time(
    sessions: Sequence[DatedSession],
    window: Optional[str] = "all",
    drill_logs: Sequence[DrillMemoryLog] = (),
    now: Optional[datetime] = None,
    include_outliers: bool = True,
    settings: Settings | None = None,
) -> AllTimeAnalysis:
    """Pool every session in the window; trend and rules track the newest one."""
    settings = settings or get_settings()
    window = resolve_window(window)
    now = _as_utc(now or datetime.now(timezone.utc))
    start = window_start(window, now)

    in_window = [
        DatedSession(_as_utc(s.session_date), filter_shots(s.shots, include_outliers))
        for s in sessions
        if start is None or _as_utc(s.session_date) >= start
    ]
    in_window.sort(key=lambda s: s.session_date, reverse=True)

    all_shots = [shot for s in in_window for shot in s.shots]
    summary = summarize_session(all_shots)
    ladder = build_gapping_ladder(summary, settings)
    plan = build_coach_plan(summary, ladder, len(in_window), settings)

    trend_deltas: Optional[TrendDeltas] = None
    insights: list[RuleInsight] = []
    if in_window:
        latest, baseline = in_window[0], in_window[1:]
        latest_summary = summarize_session(latest.shots)
        latest_ladder = build_gapping_ladder(latest_summary, settings)
        baseline_summary = summarize_session([shot for s in baseline for shot in s.shots]) if baseline else None
        trend_deltas = build_trend_deltas(
            latest_summary,
            latest_ladder,
            len(in_window),
            baseline_summary,
            len(baseline),
            settings,
        )
        insights = build_rule_insights(
            latest.shots,
            latest_summary,
            latest_ladder,
            list(drill_logs)[: settings.drill_log_limit],
            settings,
        )

    logger.info(
        "all-time analysis built",
        extra=log_context(window=window, sessions=len(in_window), shots=summary.shots),
    )
    return AllTimeAnalysis(
        summary=summary,
        gapping_ladder=ladder,
        coach_v2_plan=plan,
        coach_plan=to_legacy_coach_plan(plan),
        trend_deltas=trend_deltas,
        rule_insights=insights,
        time_window=window,
        sessions_count=len(sessions),
    )
