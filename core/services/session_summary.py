"""Session and per-club carry statistics.

Aggregates a shot list into session-wide averages and a per-club breakdown
of robust carry statistics (median, P10/P90 band, sample std-dev). Quantiles
use linear interpolation; every emitted aggregate is rounded half up to one
decimal.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

import pandas as pd

from core.models import METRIC_FIELDS, UNKNOWN_CLUB, ClubSummary, SessionSummary, ShotRecord
from core.services.stats import round1

WEDGE_ORDER = ("lob wedge", "sand wedge", "gap wedge", "approach wedge", "pitching wedge", "wedge")

_IRON = re.compile(r"^(\d+)\s*iron$")
_HYBRID = re.compile(r"^(\d+)\s*hybrid$")
_WOOD = re.compile(r"^(\d+)\s*wood$")

_FRAME_COLUMNS = ["club_type", "club_name", "club_model", "display_club", *METRIC_FIELDS]


def club_sort_key(club_type: str) -> tuple[int, int, str]:
    """Bag order: wedges, irons (9 before 4), hybrids, woods, driver, then the rest."""
    normalized = club_type.strip().lower()
    if normalized in WEDGE_ORDER:
        return (0, WEDGE_ORDER.index(normalized), normalized)
    match = _IRON.match(normalized)
    if match:
        return (1, 10 - int(match.group(1)), normalized)
    match = _HYBRID.match(normalized)
    if match:
        return (2, int(match.group(1)), normalized)
    match = _WOOD.match(normalized)
    if match:
        return (3, int(match.group(1)), normalized)
    if normalized == "driver":
        return (4, 0, normalized)
    return (5, 999, normalized)


def shots_frame(shots: Sequence[ShotRecord]) -> pd.DataFrame:
    """One row per shot with numeric metric columns (NaN when unmeasured)."""
    records = [
        {
            "club_type": shot.club_type or UNKNOWN_CLUB,
            "club_name": shot.club_name,
            "club_model": shot.club_model,
            "display_club": shot.display_club,
            **{name: getattr(shot, name) for name in METRIC_FIELDS},
        }
        for shot in shots
    ]
    df = pd.DataFrame(records, columns=_FRAME_COLUMNS)
    for name in METRIC_FIELDS:
        df[name] = pd.to_numeric(df[name], errors="coerce")
    return df


def _finite(value) -> Optional[float]:
    return None if pd.isna(value) else round1(float(value))


def _mean(series: pd.Series) -> Optional[float]:
    values = series.dropna()
    return None if values.empty else _finite(values.mean())


def _quantile(series: pd.Series, q: float) -> Optional[float]:
    values = series.dropna()
    return None if values.empty else _finite(values.quantile(q, interpolation="linear"))


def _std(series: pd.Series) -> Optional[float]:
    values = series.dropna()
    return None if len(values) < 2 else _finite(values.std(ddof=1))


def _labels(series: pd.Series) -> list[str]:
    return list(dict.fromkeys(v for v in series if isinstance(v, str) and v))


def summarize_club(name: str, group: pd.DataFrame) -> ClubSummary:
    carries = group["carry_yds"]
    nicknamed = group[group["club_name"].map(lambda v: isinstance(v, str) and bool(v))]
    return ClubSummary(
        name=name,
        display_name=nicknamed["display_club"].iloc[0] if not nicknamed.empty else name,
        shot_labels=_labels(group["club_name"]),
        model_labels=_labels(group["club_model"]),
        shots=len(group),
        avg_carry_yds=_mean(carries),
        median_carry_yds=_quantile(carries, 0.5),
        p10_carry_yds=_quantile(carries, 0.1),
        p90_carry_yds=_quantile(carries, 0.9),
        carry_std_dev_yds=_std(carries),
        offline_std_dev_yds=_std(group["side_yds"]),
    )


def summarize_session(shots: Sequence[ShotRecord]) -> SessionSummary:
    """Aggregate shots into session averages and a bag-ordered club breakdown.

    Outlier inclusion is decided by the caller; every shot given is counted.
    """
    df = shots_frame(shots)
    clubs = [summarize_club(str(name), group) for name, group in df.groupby("club_type", sort=False)]
    clubs.sort(key=lambda club: club_sort_key(club.name))
    return SessionSummary(
        shots=len(df),
        avg_carry_yds=_mean(df["carry_yds"]),
        avg_ball_speed_mph=_mean(df["ball_speed_mph"]),
        avg_launch_angle_deg=_mean(df["launch_angle_deg"]),
        avg_spin_rpm=_mean(df["spin_rpm"]),
        clubs=clubs,
    )
