"""IQR carry-outlier tagging per club.

Outliers are flagged, never removed: whether flagged shots feed a summary is
the caller's decision (see ``session_analysis.filter_shots``).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence

import pandas as pd

from core.config import Settings, get_settings
from core.logging_config import get_logger, log_context
from core.models import UNKNOWN_CLUB, ShotRecord
from core.services.session_summary import shots_frame

logger = get_logger(__name__)

CARRY_OUTLIER_FLAG = "carry_outlier"


@dataclass(frozen=True)
class CarryFence:
    """Tukey fence on one club's carry distribution."""
    q1: float
    q3: float
    lower: float
    upper: float

    def excludes(self, carry: float) -> bool:
        return carry < self.lower or carry > self.upper


def _fence(q1: float, q3: float, multiplier: float) -> CarryFence:
    iqr = q3 - q1
    return CarryFence(q1=q1, q3=q3, lower=q1 - multiplier * iqr, upper=q3 + multiplier * iqr)


def carry_fence(carries: Iterable[Optional[float]], multiplier: float = 1.5) -> Optional[CarryFence]:
    """Build [Q1 - k*IQR, Q3 + k*IQR] for a carry sample."""
    series = pd.Series(list(carries), dtype="float64").dropna()
    if series.empty:
        return None
    return _fence(float(series.quantile(0.25)), float(series.quantile(0.75)), multiplier)


def club_carry_fences(shots: Sequence[ShotRecord], settings: Settings | None = None) -> dict[str, CarryFence]:
    """Fence per club type, for clubs with at least ``outlier_min_carries`` measured carries."""
    settings = settings or get_settings()
    df = shots_frame(shots).dropna(subset=["carry_yds"])
    if df.empty:
        return {}

    grouped = df.groupby("club_type", sort=False)["carry_yds"]
    counts = grouped.count()
    bands = grouped.quantile([0.25, 0.75]).unstack()
    return {
        str(club): _fence(float(bands.at[club, 0.25]), float(bands.at[club, 0.75]), settings.outlier_iqr_multiplier)
        for club, count in counts.items()
        if count >= settings.outlier_min_carries
    }


def tag_carry_outliers(shots: Sequence[ShotRecord], settings: Settings | None = None) -> list[ShotRecord]:
    """Return a copy of ``shots`` with carry outliers flagged per club.

    Clubs with fewer than ``outlier_min_carries`` measured carries are left
    untouched. Input records are not modified. Re-tagging an already tagged
    list does not duplicate the ``carry_outlier`` flag.
    """
    fences = club_carry_fences(shots, settings)
    tagged: list[ShotRecord] = []
    flagged = 0

    for shot in shots:
        fence = fences.get(shot.club_type or UNKNOWN_CLUB)
        if fence is None or shot.carry_yds is None or not fence.excludes(shot.carry_yds):
            tagged.append(shot)
            continue
        flags = list(shot.quality_flags)
        if CARRY_OUTLIER_FLAG not in flags:
            flags.append(CARRY_OUTLIER_FLAG)
        tagged.append(replace(shot, is_outlier=True, quality_flags=flags))
        flagged += 1

    if flagged:
        logger.debug("carry outliers tagged", extra=log_context(flagged=flagged, shots=len(shots)))
    return tagged
