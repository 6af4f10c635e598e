"""Pydantic validation models for all data entry points."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from core.models import DrillMemoryLog, ShotRecord

ConstraintKeyInput = Literal["direction_consistency", "distance_control", "bag_gapping", "strike_quality"]


class StoredShotInput(BaseModel):
    """A persisted shot: every ShotRecord field except the raw row."""
    club_type: str
    club_name: Optional[str] = None
    club_model: Optional[str] = None
    display_club: str
    ball_speed_mph: Optional[float] = None
    launch_angle_deg: Optional[float] = None
    carry_yds: Optional[float] = None
    total_yds: Optional[float] = None
    side_yds: Optional[float] = None
    spin_rpm: Optional[float] = None
    is_outlier: bool = False
    quality_flags: list[str] = Field(default_factory=list)

    def to_record(self) -> ShotRecord:
        return ShotRecord(**self.model_dump(), raw={})


class StoredSessionPayload(BaseModel):
    version: int = Field(ge=1)
    session_date: Optional[datetime] = None
    shots: list[StoredShotInput]


class DatedSessionInput(BaseModel):
    session_date: datetime
    shots: list[StoredShotInput]


class DrillLogInput(BaseModel):
    shot_session_id: Optional[str] = Field(default=None, min_length=1)
    constraint_key: Optional[ConstraintKeyInput] = None
    drill_name: str = Field(min_length=2, max_length=120)
    duration_mins: Optional[int] = Field(default=None, ge=1, le=180)
    perceived_outcome: Optional[int] = Field(default=None, ge=1, le=5)
    notes: Optional[str] = Field(default=None, max_length=500)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("drill_name", "notes", "shot_session_id", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    def to_memory(self) -> DrillMemoryLog:
        return DrillMemoryLog(
            constraint_key=self.constraint_key,
            drill_name=self.drill_name,
            perceived_outcome=self.perceived_outcome,
            completed_at=self.completed_at,
        )


class CoachProfileInput(BaseModel):
    tone: Literal["straight", "encouraging", "technical"] = "encouraging"
    detail_level: Literal["concise", "balanced", "deep"] = "balanced"
