"""Launch-monitor row normalization.

Maps variant export headers onto canonical shot fields and coerces
locale-formatted numeric cells. Rows arrive already split (one mapping of
header -> cell text per shot); byte-level CSV parsing happens upstream.
"""

from __future__ import annotations

import math
import re
from typing import Mapping, Optional, Sequence

from core.logging_config import get_logger, log_context
from core.models import UNKNOWN_CLUB, ShotRecord, display_label
from core.services.outliers import tag_carry_outliers

logger = get_logger(__name__)

# Canonical field -> accepted normalized header spellings.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "club_type": ("club type", "clubtype", "club"),
    "club_name": ("club name",),
    "club_model": ("brand/model", "brand model"),
    "ball_speed_mph": ("ball speed", "ball speed (mph)"),
    "launch_angle_deg": ("launch angle", "launch angle (deg)"),
    "carry_yds": ("carry", "carry distance", "carry (yds)", "carry (yards)"),
    "total_yds": ("total", "total distance", "total (yds)", "total (yards)"),
    "side_yds": ("side", "side distance", "side (yds)", "carry deviation distance"),
    "spin_rpm": ("spin", "spin rate", "spin (rpm)"),
}

NUMERIC_FIELDS = ("ball_speed_mph", "launch_angle_deg", "carry_yds", "total_yds", "side_yds", "spin_rpm")

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_SEPARATORS = re.compile(r"[_-]")
_SPACES = re.compile(r"\s+")
_NUMERIC_JUNK = re.compile(r"[^\d.\-]")


def normalize_header(value: str) -> str:
    """Canonical header text: no BOM, trimmed, lowercase, single-spaced words."""
    text = value.replace("\ufeff", "").strip().lower()
    text = _NON_ALNUM.sub(" ", text)
    text = _SEPARATORS.sub(" ", text)
    return _SPACES.sub(" ", text).strip()


def _alias_lookup() -> dict[str, set[str]]:
    # Aliases go through the same normalization as headers so punctuation
    # in an alias ("carry (yds)") matches its normalized header form.
    return {name: {normalize_header(a) for a in aliases} | set(aliases) for name, aliases in FIELD_ALIASES.items()}


_ALIASES = _alias_lookup()


def resolve_columns(headers: Sequence[str]) -> dict[str, str]:
    """Map canonical field -> the first header in ``headers`` that matches it."""
    normalized = [(header, normalize_header(header)) for header in headers]
    resolved: dict[str, str] = {}
    for name, aliases in _ALIASES.items():
        for header, norm in normalized:
            if norm in aliases:
                resolved[name] = header
                break
    return resolved


def parse_locale_number(value: Optional[str]) -> Optional[float]:
    """Parse a numeric cell exported with arbitrary locale formatting.

    The separator that appears last is the decimal point: ``"1,234.5"`` and
    ``"1.234,5"`` both read 1234.5. A lone comma is a decimal comma
    (``"1,5"`` -> 1.5). Units and symbols are stripped. Returns ``None`` for
    blank, unparsable, or non-finite input.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    text = _SPACES.sub("", text)
    has_comma = "," in text
    has_dot = "." in text
    if has_comma and has_dot:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".", 1)
        else:
            text = text.replace(",", "")
    elif has_comma:
        text = text.replace(",", ".", 1)

    text = _NUMERIC_JUNK.sub("", text)
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _cell(row: Mapping[str, str], columns: dict[str, str], name: str) -> Optional[str]:
    header = columns.get(name)
    if header is None:
        return None
    value = row.get(header)
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    return str(value)


def _text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_row(row: Mapping[str, str]) -> Optional[ShotRecord]:
    """Build a ShotRecord from one row, or ``None`` when the row carries no value."""
    columns = resolve_columns(list(row.keys()))
    club_type = _text(_cell(row, columns, "club_type")) or UNKNOWN_CLUB
    club_name = _text(_cell(row, columns, "club_name"))
    metrics = {name: parse_locale_number(_cell(row, columns, name)) for name in NUMERIC_FIELDS}

    shot = ShotRecord(
        club_type=club_type,
        club_name=club_name,
        club_model=_text(_cell(row, columns, "club_model")),
        display_club=display_label(club_type, club_name),
        raw=dict(row),
        **metrics,
    )

    if not shot.has_club_identity:
        if not shot.has_any_metric():
            return None
        shot.quality_flags.append("missing_club_type")
    if shot.carry_yds is not None and shot.carry_yds < 0:
        shot.quality_flags.append("invalid_carry_distance")
    return shot


def normalize_rows(rows: Sequence[Mapping[str, str]]) -> list[ShotRecord]:
    """Normalize rows in order, dropping rows without identity and metrics."""
    shots = [shot for shot in (normalize_row(row) for row in rows) if shot is not None]
    dropped = len(rows) - len(shots)
    if dropped:
        logger.debug("dropped rows without club or metrics", extra=log_context(dropped=dropped, rows=len(rows)))
    return shots


def map_rows_to_shots(rows: Sequence[Mapping[str, str]], settings=None) -> list[ShotRecord]:
    """Normalize rows and tag carry outliers: the full import step."""
    return tag_carry_outliers(normalize_rows(rows), settings=settings)
