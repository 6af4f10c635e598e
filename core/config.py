"""Engine configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
Every analytics threshold lives here so rules can be tuned without
touching algorithm code. Selected values can be overridden by
environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Immutable engine settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Outlier tagging
    outlier_iqr_multiplier: float = 1.5
    outlier_min_carries: int = 4

    # Gapping ladder (yards)
    gap_overlap_yds: float = 5.0
    gap_short_compressed_yds: float = 8.0
    gap_short_cliff_yds: float = 18.0
    gap_long_compressed_yds: float = 12.0
    gap_long_cliff_yds: float = 20.0

    # Constraint scorer
    direction_score_multiplier: float = 2.6
    distance_score_multiplier: float = 3.0
    gapping_overlap_weight: int = 35
    gapping_cliff_weight: int = 28
    gapping_compressed_weight: int = 12
    strike_proxy_ratio: float = 0.55
    target_improvement_ratio: float = 0.85

    # Coach confidence
    confidence_shots_divisor: float = 3.0
    confidence_shots_cap: int = 40
    confidence_clubs_weight: int = 3
    confidence_clubs_cap: int = 25
    confidence_sessions_weight: int = 4
    confidence_sessions_cap: int = 20
    confidence_coverage_weight: int = 4
    confidence_coverage_cap: int = 15
    confidence_medium_min: int = 45
    confidence_high_min: int = 75

    # Practice plan durations (minutes)
    practice_minutes_high: int = 30
    practice_minutes_medium: int = 25
    practice_minutes_low: int = 20

    # Trend deltas
    trend_flat_threshold: float = 0.1

    # Rule insights
    rule_speed_carry_min_pairs: int = 20
    rule_speed_carry_correlation: float = 0.55
    rule_fatigue_min_shots: int = 70
    rule_fatigue_split_shot: int = 60
    rule_fatigue_multiplier: float = 1.2
    rule_top_club_min_shots: int = 8
    rule_top_club_offline_std_yds: float = 15.0
    rule_drill_memory_min_logs: int = 2
    rule_drill_memory_good_outcome: float = 3.8
    drill_log_limit: int = 50

    # Import diagnostics
    import_low_shot_count: int = 10

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
    },
    "staging": {
        "log_level": "INFO",
    },
    "production": {
        "log_level": "WARNING",
    },
}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])
    defaults = Settings()

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        outlier_iqr_multiplier=_env_float("OUTLIER_IQR_MULTIPLIER", defaults.outlier_iqr_multiplier),
        outlier_min_carries=_env_int("OUTLIER_MIN_CARRIES", defaults.outlier_min_carries),
        gap_overlap_yds=_env_float("GAP_OVERLAP_YDS", defaults.gap_overlap_yds),
        gap_short_compressed_yds=_env_float("GAP_SHORT_COMPRESSED_YDS", defaults.gap_short_compressed_yds),
        gap_short_cliff_yds=_env_float("GAP_SHORT_CLIFF_YDS", defaults.gap_short_cliff_yds),
        gap_long_compressed_yds=_env_float("GAP_LONG_COMPRESSED_YDS", defaults.gap_long_compressed_yds),
        gap_long_cliff_yds=_env_float("GAP_LONG_CLIFF_YDS", defaults.gap_long_cliff_yds),
        rule_speed_carry_correlation=_env_float("RULE_SPEED_CARRY_CORRELATION", defaults.rule_speed_carry_correlation),
        rule_fatigue_multiplier=_env_float("RULE_FATIGUE_MULTIPLIER", defaults.rule_fatigue_multiplier),
        rule_top_club_offline_std_yds=_env_float("RULE_TOP_CLUB_OFFLINE_STD_YDS", defaults.rule_top_club_offline_std_yds),
        drill_log_limit=_env_int("DRILL_LOG_LIMIT", defaults.drill_log_limit),
    )
