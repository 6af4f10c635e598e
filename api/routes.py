from __future__ import annotations


from fastapi import APIRouter, HTTPException

from api.schemas import (
    AllTimeRequest,
    AllTimeResponse,
    CoachSummaryRequest,
    CoachSummaryResponse,
    ImportRequest,
    ImportResponse,
    SessionAnalysisRequest,
    SessionAnalysisResponse,
    SimpleStatusResponse,
)
from core.config import get_settings
from core.logging_config import get_logger, log_context
from core.services.coach_summary import build_coach_summary_input, build_deterministic_summary
from core.services.gapping import build_gapping_ladder
from core.services.imports import build_import_report
from core.services.normalizer import map_rows_to_shots
from core.services.session_analysis import DatedSession, SessionAnalysis, analyze_all_time, analyze_session
from core.services.session_storage import to_shot_records, to_stored_shots
from core.services.session_summary import summarize_session

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1")


@router.get("/health", response_model=SimpleStatusResponse, tags=["meta"])
def health():
    return SimpleStatusResponse(status="ok")


@router.post("/imports", response_model=ImportResponse, tags=["imports"])
def import_rows(payload: ImportRequest):
    settings = get_settings()
    shots = map_rows_to_shots(payload.rows, settings=settings)
    report = build_import_report(payload.rows, shots, settings=settings)
    summary = summarize_session(shots)
    logger.info("rows imported", extra=log_context(rows=report.total_rows, shots=report.parsed_shots))
    return ImportResponse(
        shots=to_stored_shots(shots),
        report=report,
        summary=summary,
        gapping_ladder=build_gapping_ladder(summary, settings),
    )


def _run_session_analysis(payload: SessionAnalysisRequest) -> SessionAnalysis:
    analysis = analyze_session(
        to_shot_records(payload.session.shots),
        [to_shot_records(peer.shots) for peer in payload.peer_sessions],
        [log.to_memory() for log in payload.drill_logs],
        include_outliers=payload.include_outliers,
    )
    if analysis.coach_v2_plan is None:
        raise HTTPException(status_code=422, detail="Could not generate analysis.")
    return analysis


@router.post("/analysis", response_model=SessionAnalysisResponse, tags=["analysis"])
def session_analysis(payload: SessionAnalysisRequest):
    analysis = _run_session_analysis(payload)
    return SessionAnalysisResponse(
        summary=analysis.summary,
        gapping_ladder=analysis.gapping_ladder,
        coach_v2_plan=analysis.coach_v2_plan,
        coach_plan=analysis.coach_plan,
        trend_deltas=analysis.trend_deltas,
        rule_insights=analysis.rule_insights,
    )


@router.post("/analysis/all-time", response_model=AllTimeResponse, tags=["analysis"])
def all_time_analysis(payload: AllTimeRequest):
    analysis = analyze_all_time(
        [DatedSession(s.session_date, to_shot_records(s.shots)) for s in payload.sessions],
        window=payload.window,
        drill_logs=[log.to_memory() for log in payload.drill_logs],
        include_outliers=payload.include_outliers,
    )
    return AllTimeResponse(
        time_window=analysis.time_window,
        sessions_count=analysis.sessions_count,
        summary=analysis.summary,
        gapping_ladder=analysis.gapping_ladder,
        coach_v2_plan=analysis.coach_v2_plan,
        coach_plan=analysis.coach_plan,
        trend_deltas=analysis.trend_deltas,
        rule_insights=analysis.rule_insights,
    )


@router.post("/coach/summary", response_model=CoachSummaryResponse, tags=["coach"])
def coach_summary(payload: CoachSummaryRequest):
    analysis = _run_session_analysis(payload)
    summary_input = build_coach_summary_input(
        analysis.coach_v2_plan,
        analysis.trend_deltas,
        analysis.rule_insights,
        tone=payload.tone,
        detail_level=payload.detail_level,
    )
    result = build_deterministic_summary(summary_input)
    return CoachSummaryResponse(summary=result.summary, source=result.source, model=result.model)
