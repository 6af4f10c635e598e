"""Tests for Pydantic input validation models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from core.validators import (
    CoachProfileInput,
    DatedSessionInput,
    DrillLogInput,
    StoredSessionPayload,
    StoredShotInput,
)


# --- DrillLogInput ---

def test_drill_log_valid():
    log = DrillLogInput(constraint_key="bag_gapping", drill_name="  Gap retest  ", perceived_outcome=4, duration_mins=20)
    assert log.drill_name == "Gap retest"
    assert log.completed_at.tzinfo is not None


def test_drill_log_outcome_out_of_range():
    with pytest.raises(ValidationError):
        DrillLogInput(drill_name="Gap retest", perceived_outcome=6)
    with pytest.raises(ValidationError):
        DrillLogInput(drill_name="Gap retest", perceived_outcome=0)


def test_drill_log_name_too_short_after_strip():
    with pytest.raises(ValidationError):
        DrillLogInput(drill_name=" a ")


def test_drill_log_duration_bounds():
    with pytest.raises(ValidationError):
        DrillLogInput(drill_name="Gap retest", duration_mins=181)


def test_drill_log_unknown_constraint():
    with pytest.raises(ValidationError):
        DrillLogInput(constraint_key="putting", drill_name="Gate drill")


def test_drill_log_notes_limit():
    with pytest.raises(ValidationError):
        DrillLogInput(drill_name="Gap retest", notes="x" * 501)


def test_drill_log_to_memory():
    when = datetime(2026, 2, 1, tzinfo=timezone.utc)
    memory = DrillLogInput(constraint_key="distance_control", drill_name="Ladder", perceived_outcome=3, completed_at=when).to_memory()
    assert memory.constraint_key == "distance_control"
    assert memory.drill_name == "Ladder"
    assert memory.perceived_outcome == 3
    assert memory.completed_at == when


# --- Stored sessions ---

def test_stored_shot_to_record():
    record = StoredShotInput(club_type="7 Iron", display_club="7 Iron", carry_yds=150).to_record()
    assert record.carry_yds == 150.0
    assert record.raw == {}
    assert record.quality_flags == []


def test_stored_session_version_must_be_positive():
    with pytest.raises(ValidationError):
        StoredSessionPayload(version=0, shots=[])


def test_dated_session_requires_date():
    with pytest.raises(ValidationError):
        DatedSessionInput(shots=[])


# --- CoachProfileInput ---

def test_coach_profile_defaults():
    profile = CoachProfileInput()
    assert profile.tone == "encouraging"
    assert profile.detail_level == "balanced"


def test_coach_profile_invalid_tone():
    with pytest.raises(ValidationError):
        CoachProfileInput(tone="harsh")
