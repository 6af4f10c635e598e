"""Tests for header resolution, locale numbers, and row normalization."""

from __future__ import annotations

import logging

import pandas as pd
import pytest

from core.models import UNKNOWN_CLUB
from core.services.normalizer import (
    map_rows_to_shots,
    normalize_header,
    normalize_row,
    normalize_rows,
    parse_locale_number,
    resolve_columns,
)


# -- Locale numbers --

def test_parse_locale_number_thousands_and_decimal():
    assert parse_locale_number("1,234.5") == 1234.5
    assert parse_locale_number("1.234,5") == 1234.5


def test_parse_locale_number_decimal_comma():
    assert parse_locale_number("1,5") == 1.5


def test_parse_locale_number_units_and_signs():
    assert parse_locale_number("152.3 yds") == 152.3
    assert parse_locale_number("-4.2") == -4.2
    assert parse_locale_number(" 1 234,5 ") == 1234.5


@pytest.mark.parametrize("value", [None, "", "   ", "abc", "--"])
def test_parse_locale_number_blank_or_junk_is_none(value):
    assert parse_locale_number(value) is None


# -- Headers --

def test_normalize_header_strips_bom_and_punctuation():
    assert normalize_header("\ufeffClub Type") == "club type"
    assert normalize_header("  Carry_Distance ") == "carry distance"
    assert normalize_header("Ball Speed (mph)") == "ball speed mph"


def test_resolve_columns_maps_variant_headers():
    columns = resolve_columns(["\ufeffClub Type", "Carry Distance", "Ball Speed (mph)", "Side (yds)", "Spin Rate"])
    assert columns["club_type"] == "\ufeffClub Type"
    assert columns["carry_yds"] == "Carry Distance"
    assert columns["ball_speed_mph"] == "Ball Speed (mph)"
    assert columns["side_yds"] == "Side (yds)"
    assert columns["spin_rpm"] == "Spin Rate"
    assert "total_yds" not in columns


def test_resolve_columns_first_match_wins():
    columns = resolve_columns(["Club", "Club Type"])
    assert columns["club_type"] == "Club"


# -- Rows --

def test_normalize_row_full_record():
    shot = normalize_row({
        "Club Type": "7 Iron",
        "Club Name": "Gamer",
        "Brand/Model": "Acme CB",
        "Carry Distance": "152,4",
        "Side": "-3.1",
    })
    assert shot.club_type == "7 Iron"
    assert shot.club_name == "Gamer"
    assert shot.club_model == "Acme CB"
    assert shot.display_club == "7 Iron (Gamer)"
    assert shot.carry_yds == 152.4
    assert shot.side_yds == -3.1
    assert shot.ball_speed_mph is None
    assert shot.quality_flags == []
    assert shot.raw["Carry Distance"] == "152,4"


def test_normalize_row_drops_empty_row():
    assert normalize_row({"Club Type": "", "Carry": ""}) is None


def test_normalize_row_keeps_club_without_metrics():
    shot = normalize_row({"Club Type": "Driver", "Carry": ""})
    assert shot is not None
    assert shot.carry_yds is None


def test_normalize_row_flags_missing_club():
    shot = normalize_row({"Carry": "140"})
    assert shot.club_type == UNKNOWN_CLUB
    assert shot.quality_flags == ["missing_club_type"]


def test_normalize_row_flags_negative_carry():
    shot = normalize_row({"Club": "9 Iron", "Carry": "-12"})
    assert shot.carry_yds == -12
    assert "invalid_carry_distance" in shot.quality_flags


def test_normalize_rows_preserves_order_and_drops():
    rows = [
        {"Club": "7 Iron", "Carry": "150"},
        {"Club": "", "Carry": ""},
        {"Club": "8 Iron", "Carry": "140"},
    ]
    shots = normalize_rows(rows)
    assert [s.club_type for s in shots] == ["7 Iron", "8 Iron"]


def test_normalize_rows_logs_dropped_count(caplog):
    caplog.set_level(logging.DEBUG, logger="core.services.normalizer")
    normalize_rows([{"Club": "7 Iron", "Carry": "150"}, {"Club": "", "Carry": ""}])
    record = next(r for r in caplog.records if r.name == "core.services.normalizer")
    assert record.ctx_dropped == 1
    assert record.ctx_rows == 2


def test_normalize_rows_ignores_nan_cells_from_frames():
    df = pd.DataFrame([{"Club": "7 Iron", "Carry": 150.0}, {"Club": None, "Carry": None}])
    shots = normalize_rows(df.to_dict("records"))
    assert len(shots) == 1
    assert shots[0].carry_yds == 150.0


def test_map_rows_to_shots_tags_outliers():
    rows = [{"Club": "7 Iron", "Carry": c} for c in ("150", "152", "300", "148")]
    shots = map_rows_to_shots(rows)
    assert [s.is_outlier for s in shots] == [False, False, True, False]
