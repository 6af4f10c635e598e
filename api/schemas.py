from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from core.models import (
    CoachV2Plan,
    GappingLadder,
    ImportReport,
    LegacyCoachPlan,
    RuleInsight,
    SessionSummary,
    TrendDeltas,
)
from core.validators import CoachProfileInput, DatedSessionInput, DrillLogInput, StoredSessionPayload, StoredShotInput

TimeWindowInput = Literal["all", "1w", "1m", "3m", "9m", "1y"]


class ImportRequest(BaseModel):
    rows: list[dict[str, Optional[str]]] = Field(default_factory=list)


class ImportResponse(BaseModel):
    shots: list[StoredShotInput]
    report: ImportReport
    summary: SessionSummary
    gapping_ladder: GappingLadder


class SessionAnalysisRequest(BaseModel):
    session: StoredSessionPayload
    peer_sessions: list[StoredSessionPayload] = Field(default_factory=list)
    drill_logs: list[DrillLogInput] = Field(default_factory=list)
    include_outliers: bool = True


class SessionAnalysisResponse(BaseModel):
    ok: bool = True
    summary: SessionSummary
    gapping_ladder: GappingLadder
    coach_v2_plan: CoachV2Plan
    coach_plan: Optional[LegacyCoachPlan] = None
    trend_deltas: TrendDeltas
    rule_insights: list[RuleInsight]


class AllTimeRequest(BaseModel):
    sessions: list[DatedSessionInput] = Field(default_factory=list)
    drill_logs: list[DrillLogInput] = Field(default_factory=list)
    window: TimeWindowInput = "all"
    include_outliers: bool = True


class AllTimeResponse(BaseModel):
    time_window: str
    sessions_count: int
    summary: SessionSummary
    gapping_ladder: GappingLadder
    coach_v2_plan: Optional[CoachV2Plan] = None
    coach_plan: Optional[LegacyCoachPlan] = None
    trend_deltas: Optional[TrendDeltas] = None
    rule_insights: list[RuleInsight]


class CoachSummaryRequest(SessionAnalysisRequest, CoachProfileInput):
    pass


class CoachSummaryResponse(BaseModel):
    summary: str
    source: str
    model: Optional[str] = None


class SimpleStatusResponse(BaseModel):
    status: str
