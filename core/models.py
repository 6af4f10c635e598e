"""Domain records produced and consumed by the analytics engine.

Everything here is a plain dataclass: recreated on every request, never
persisted by the engine, and serializable with ``dataclasses.asdict``.
Missing measurements are ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

UNKNOWN_CLUB = "Unknown"

GapStatus = Literal["healthy", "compressed", "overlap", "cliff"]
ClubFamily = Literal["wedge", "iron", "hybrid", "wood", "driver", "other"]
Severity = Literal["info", "warning", "danger"]
ConstraintKey = Literal["direction_consistency", "distance_control", "bag_gapping", "strike_quality"]
ConfidenceLevel = Literal["low", "medium", "high"]
TrendDirection = Literal["improved", "worsened", "flat", "insufficient"]

METRIC_FIELDS = (
    "ball_speed_mph",
    "launch_angle_deg",
    "carry_yds",
    "total_yds",
    "side_yds",
    "spin_rpm",
)


# ---------------------------------------------------------------------------
# Shots
# ---------------------------------------------------------------------------

@dataclass
class ShotRecord:
    """One observed launch-monitor shot."""
    club_type: str = UNKNOWN_CLUB
    club_name: Optional[str] = None  # user nickname
    club_model: Optional[str] = None  # brand/model
    display_club: str = ""
    ball_speed_mph: Optional[float] = None
    launch_angle_deg: Optional[float] = None
    carry_yds: Optional[float] = None
    total_yds: Optional[float] = None
    side_yds: Optional[float] = None
    spin_rpm: Optional[float] = None
    is_outlier: bool = False
    quality_flags: list[str] = field(default_factory=list)
    raw: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.club_type:
            self.club_type = UNKNOWN_CLUB
        if not self.display_club:
            self.display_club = display_label(self.club_type, self.club_name)

    @property
    def has_club_identity(self) -> bool:
        return self.club_type != UNKNOWN_CLUB

    def has_any_metric(self) -> bool:
        return any(getattr(self, name) is not None for name in METRIC_FIELDS)


def display_label(club_type: str, club_name: Optional[str]) -> str:
    """Nickname-qualified label, e.g. ``7 Iron (Gamer)``."""
    return f"{club_type} ({club_name})" if club_name else club_type


@dataclass(frozen=True)
class DrillMemoryLog:
    """A prior drill completion with the golfer's 1-5 outcome rating."""
    constraint_key: Optional[str]
    drill_name: str
    perceived_outcome: Optional[int]
    completed_at: datetime | str


# ---------------------------------------------------------------------------
# Session summary
# ---------------------------------------------------------------------------

@dataclass
class ClubSummary:
    name: str
    display_name: str
    shot_labels: list[str]
    model_labels: list[str]
    shots: int
    avg_carry_yds: Optional[float]
    median_carry_yds: Optional[float]
    p10_carry_yds: Optional[float]
    p90_carry_yds: Optional[float]
    carry_std_dev_yds: Optional[float]
    offline_std_dev_yds: Optional[float]


@dataclass
class SessionSummary:
    shots: int
    avg_carry_yds: Optional[float]
    avg_ball_speed_mph: Optional[float]
    avg_launch_angle_deg: Optional[float]
    avg_spin_rpm: Optional[float]
    clubs: list[ClubSummary] = field(default_factory=list)


@dataclass
class ImportReport:
    total_rows: int
    parsed_shots: int
    dropped_rows: int
    outlier_rows: int
    columns_detected: list[str]
    columns_missing: list[str]
    clubs_detected: list[str]
    warnings: list[str]


# ---------------------------------------------------------------------------
# Gapping
# ---------------------------------------------------------------------------

@dataclass
class GappingRow:
    club: str
    display_club: str
    family: ClubFamily
    median_carry_yds: float
    p10_carry_yds: Optional[float]
    p90_carry_yds: Optional[float]
    gap_to_next_yds: Optional[float] = None
    gap_status: Optional[GapStatus] = None
    overlap_yds: Optional[float] = None
    warning: Optional[str] = None


@dataclass(frozen=True)
class GappingInsight:
    severity: Severity
    message: str


@dataclass
class GappingLadder:
    rows: list[GappingRow] = field(default_factory=list)
    insights: list[GappingInsight] = field(default_factory=list)

    def count_status(self, *statuses: str) -> int:
        return sum(1 for row in self.rows if row.gap_status in statuses)


# ---------------------------------------------------------------------------
# Coach v2
# ---------------------------------------------------------------------------

@dataclass
class ConstraintScore:
    key: ConstraintKey
    label: str
    score: int
    reasons: list[str]
    focus_club: Optional[str]
    target_metric: str
    current_value: Optional[float]
    target_value: Optional[float]


@dataclass
class CoachConfidence:
    level: ConfidenceLevel
    score: int
    shots_analyzed: int
    clubs_analyzed: int
    sessions_analyzed: int
    reasons: list[str]


@dataclass(frozen=True)
class PracticePlanStep:
    title: str
    reps: str
    objective: str


@dataclass
class PracticePlan:
    duration_minutes: int
    focus: str
    goal: str
    steps: list[PracticePlanStep]


@dataclass
class CoachV2Plan:
    constraint_scores: list[ConstraintScore]
    primary_constraint: ConstraintScore
    secondary_constraint: Optional[ConstraintScore]
    confidence: CoachConfidence
    practice_plan: PracticePlan
    trend_summary: str
    generated_at: str
    version: int = 2


@dataclass
class LegacyCoachPlan:
    """Single-card view of a CoachV2Plan for older dashboards."""
    primary_limiter: ConstraintKey
    title: str
    explanation: str
    target: str
    focus_club: Optional[str]
    actions: list[str]


# ---------------------------------------------------------------------------
# Trends and rule insights
# ---------------------------------------------------------------------------

@dataclass
class MetricDelta:
    key: str
    label: str
    current: Optional[float]
    baseline: Optional[float]
    delta: Optional[float]
    direction: TrendDirection
    unit: str


@dataclass
class ConstraintDelta:
    label: str
    current_score: int
    baseline_score: int
    delta_score: int
    direction: TrendDirection


@dataclass
class TrendDeltas:
    baseline_sessions: int
    has_baseline: bool
    metrics: list[MetricDelta]
    primary_constraint_delta: Optional[ConstraintDelta]
    summary: str


@dataclass(frozen=True)
class RuleInsight:
    id: str
    severity: Severity
    title: str
    if_then: str
    evidence: str
    action: str
