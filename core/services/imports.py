from __future__ import annotations

from typing import Mapping, Sequence

from core.config import Settings, get_settings
from core.models import ImportReport, ShotRecord
from core.services.normalizer import FIELD_ALIASES, normalize_header

# Canonical field -> warning raised when no header maps to it.
_WARN_ON_MISSING = {
    "club_type": "Missing canonical club type column.",
    "carry_yds": "Missing carry distance column.",
    "side_yds": "Missing side/offline distance column for dispersion analysis.",
}


def _as_rows(data) -> list[Mapping[str, str]]:
    if hasattr(data, "to_dict"):
        return data.to_dict("records")
    if isinstance(data, list):
        return data
    return []


def detected_headers(rows: Sequence[Mapping[str, str]]) -> set[str]:
    """Normalized header text seen in any row."""
    return {normalize_header(str(key)) for row in rows for key in row.keys()}


def detect_columns(rows: Sequence[Mapping[str, str]]) -> tuple[list[str], list[str]]:
    """Split canonical fields into (detected, missing), both sorted."""
    seen = detected_headers(rows)
    detected, missing = [], []
    for name, aliases in FIELD_ALIASES.items():
        if any(normalize_header(alias) in seen for alias in aliases):
            detected.append(name)
        else:
            missing.append(name)
    return sorted(detected), sorted(missing)


def build_import_report(data, shots: Sequence[ShotRecord], settings: Settings | None = None) -> ImportReport:
    """Diagnostics for one import: what was read, dropped, flagged, and missing.

    ``data`` is the list of raw rows (or a DataFrame of them) that produced ``shots``.
    """
    settings = settings or get_settings()
    rows = _as_rows(data)
    detected, missing = detect_columns(rows)
    clubs = sorted({shot.club_type for shot in shots})

    warnings = [message for name, message in _WARN_ON_MISSING.items() if name in missing]
    if len(shots) < settings.import_low_shot_count:
        warnings.append("Low shot count; analytics may be noisy.")
    if not clubs:
        warnings.append("No recognizable clubs detected.")

    return ImportReport(
        total_rows=len(rows),
        parsed_shots=len(shots),
        dropped_rows=max(0, len(rows) - len(shots)),
        outlier_rows=sum(1 for shot in shots if shot.is_outlier),
        columns_detected=detected,
        columns_missing=missing,
        clubs_detected=clubs,
        warnings=warnings,
    )
