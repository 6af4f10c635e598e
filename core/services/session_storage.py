"""Persisted-shape contract for saved sessions.

A stored shot keeps every ShotRecord field except the raw row mapping; shots
rebuilt for analysis get an empty mapping in its place. Reading never
raises: unreadable payloads come back as ``None``.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from pydantic import ValidationError

from core.logging_config import get_logger, log_context
from core.models import ShotRecord
from core.validators import StoredSessionPayload, StoredShotInput

logger = get_logger(__name__)

PAYLOAD_VERSION = 2


def to_stored_shots(shots: Iterable[ShotRecord]) -> list[dict[str, Any]]:
    stored = []
    for shot in shots:
        data = asdict(shot)
        data.pop("raw", None)
        stored.append(data)
    return stored


def to_shot_records(stored: Iterable[StoredShotInput | dict[str, Any]]) -> list[ShotRecord]:
    records = []
    for item in stored:
        shot = item if isinstance(item, StoredShotInput) else StoredShotInput.model_validate(item)
        records.append(shot.to_record())
    return records


def serialize_session_payload(shots: Sequence[ShotRecord], session_date: Optional[datetime] = None) -> str:
    payload: dict[str, Any] = {"version": PAYLOAD_VERSION, "shots": to_stored_shots(shots)}
    if session_date is not None:
        payload["session_date"] = session_date.isoformat()
    return json.dumps(payload)


def parse_stored_session_payload(text: Optional[str]) -> Optional[StoredSessionPayload]:
    """Validate a stored session document; ``None`` for empty, non-JSON, or invalid input."""
    if not text:
        return None
    try:
        return StoredSessionPayload.model_validate_json(text)
    except ValidationError as exc:
        logger.warning("stored session payload rejected", extra=log_context(errors=exc.error_count()))
        return None
