"""Club-distance gapping ladder.

Orders clubs by median carry and classifies each club's gap to the next
shorter club:

- overlap: gap under the global overlap threshold (checked first, every family)
- compressed / healthy / cliff: family-specific bands
  (wedges, irons, other: 8-18 yds healthy; hybrids, woods, driver: 12-20 yds)
"""

from __future__ import annotations

import re
from typing import Optional

from core.config import Settings, get_settings
from core.models import ClubFamily, GappingInsight, GappingLadder, GappingRow, GapStatus, SessionSummary
from core.services.session_summary import WEDGE_ORDER
from core.services.stats import round1

LONG_GAME_FAMILIES = frozenset({"hybrid", "wood", "driver"})
ALERT_STATUSES = ("overlap", "compressed", "cliff")
SEVERE_STATUSES = ("overlap", "cliff")

_IRON = re.compile(r"^\d+\s*iron$")
_HYBRID = re.compile(r"^\d+\s*hybrid$")
_WOOD = re.compile(r"^\d+\s*wood$")


def club_family(club_type: str) -> ClubFamily:
    normalized = club_type.strip().lower()
    if normalized in WEDGE_ORDER or "wedge" in normalized:
        return "wedge"
    if _IRON.match(normalized):
        return "iron"
    if _HYBRID.match(normalized):
        return "hybrid"
    if _WOOD.match(normalized) or "wood" in normalized:
        return "wood"
    if normalized == "driver":
        return "driver"
    return "other"


def classify_gap(family: ClubFamily, gap_yds: float, settings: Settings | None = None) -> GapStatus:
    """Classify a gap. Overlap is global; compressed/cliff bands depend on family."""
    settings = settings or get_settings()
    if gap_yds < settings.gap_overlap_yds:
        return "overlap"

    if family in LONG_GAME_FAMILIES:
        compressed, cliff = settings.gap_long_compressed_yds, settings.gap_long_cliff_yds
    else:
        compressed, cliff = settings.gap_short_compressed_yds, settings.gap_short_cliff_yds

    if gap_yds > cliff:
        return "cliff"
    if gap_yds < compressed:
        return "compressed"
    return "healthy"


def gap_warning(
    status: GapStatus,
    club: str,
    next_club: str,
    gap_yds: float,
    overlap_yds: Optional[float],
) -> Optional[str]:
    if status == "healthy":
        return None
    if status == "overlap":
        return f"{club} and {next_club} overlap ({gap_yds:.1f} yds gap)."
    if status == "compressed":
        return f"{club} to {next_club} is compressed ({gap_yds:.1f} yds)."
    if overlap_yds is not None and overlap_yds > 0:
        return f"{club} to {next_club} has a large gap and {overlap_yds:.1f} yds of band overlap."
    return f"{club} to {next_club} has a large gap ({gap_yds:.1f} yds)."


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def ladder_insights(rows: list[GappingRow]) -> list[GappingInsight]:
    overlap = sum(1 for row in rows if row.gap_status == "overlap")
    cliff = sum(1 for row in rows if row.gap_status == "cliff")
    compressed = sum(1 for row in rows if row.gap_status == "compressed")

    insights: list[GappingInsight] = []
    if overlap:
        insights.append(GappingInsight("danger", f"You have {_plural(overlap, 'overlapping gap')} in your bag."))
    if cliff:
        insights.append(GappingInsight("danger", f"You have {_plural(cliff, 'large distance cliff')} to address."))
    if compressed:
        verb = "gap is" if compressed == 1 else "gaps are"
        insights.append(GappingInsight("warning", f"{compressed} {verb} compressed and may limit club separation."))
    if not insights and len(rows) > 1:
        insights.append(GappingInsight("info", "Your current gapping profile looks healthy across measured clubs."))
    if len(rows) < 2:
        insights.append(GappingInsight("info", "Gapping needs carry data from at least two clubs."))
    return insights


def build_gapping_ladder(summary: SessionSummary, settings: Settings | None = None) -> GappingLadder:
    """Sort clubs by descending median carry and classify each neighbour gap."""
    settings = settings or get_settings()
    eligible = sorted(
        (club for club in summary.clubs if club.median_carry_yds is not None),
        key=lambda club: club.median_carry_yds,
        reverse=True,
    )

    rows: list[GappingRow] = []
    for index, current in enumerate(eligible):
        family = club_family(current.name)
        row = GappingRow(
            club=current.name,
            display_club=current.display_name,
            family=family,
            median_carry_yds=current.median_carry_yds,
            p10_carry_yds=current.p10_carry_yds,
            p90_carry_yds=current.p90_carry_yds,
        )
        if index + 1 < len(eligible):
            shorter = eligible[index + 1]
            row.gap_to_next_yds = round1(current.median_carry_yds - shorter.median_carry_yds)
            if current.p10_carry_yds is not None and shorter.p90_carry_yds is not None:
                row.overlap_yds = max(0.0, round1(shorter.p90_carry_yds - current.p10_carry_yds))
            row.gap_status = classify_gap(family, row.gap_to_next_yds, settings)
            row.warning = gap_warning(
                row.gap_status, current.display_name, shorter.display_name, row.gap_to_next_yds, row.overlap_yds
            )
        rows.append(row)

    return GappingLadder(rows=rows, insights=ladder_insights(rows))
