"""Tests for the per-reading vegetation index functions and NDVI classes."""

import math

import pytest

from palmcarbon.indices.vegetation import (
    INDEX_FUNCTIONS,
    SentinelBands,
    calculate_all_indices,
    calculate_evi,
    calculate_gndvi,
    calculate_index,
    calculate_ndbi,
    calculate_ndii,
    calculate_ndmi,
    calculate_ndsi,
    calculate_ndvi,
    calculate_osavi,
    get_ndvi_color,
    interpret_ndvi,
    ndvi_to_percentage,
    normalize_index,
)


def test_ndvi_reference_value():
    assert calculate_ndvi(SentinelBands(B8=0.4, B4=0.2)) == pytest.approx(
        0.333, abs=1e-3
    )


def test_evi_reference_value():
    bands = SentinelBands(B8=0.42, B4=0.22, B2=0.12)
    assert calculate_evi(bands) == pytest.approx(2.5 * 0.20 / 1.84, abs=1e-4)
    assert calculate_evi(bands) == pytest.approx(0.2717, abs=1e-4)


def test_formulas_match_definitions(full_bands):
    b = full_bands
    assert calculate_ndbi(b) == pytest.approx((b.B11 - b.B8) / (b.B11 + b.B8))
    assert calculate_ndmi(b) == pytest.approx((b.B8 - b.B11) / (b.B8 + b.B11))
    assert calculate_ndsi(b) == pytest.approx((b.B3 - b.B11) / (b.B3 + b.B11))
    assert calculate_gndvi(b) == pytest.approx((b.B8 - b.B3) / (b.B8 + b.B3))
    assert calculate_osavi(b) == pytest.approx((b.B8 - b.B4) / (b.B8 + b.B4 + 0.16))


def test_ndii_equals_ndmi(full_bands):
    assert calculate_ndii(full_bands) == calculate_ndmi(full_bands)


@pytest.mark.parametrize(
    "name, bands",
    [
        ("ndvi", SentinelBands(B8=0.4)),
        ("ndvi", SentinelBands(B4=0.2)),
        ("evi", SentinelBands(B8=0.4, B4=0.2)),
        ("ndbi", SentinelBands(B8=0.4)),
        ("ndmi", SentinelBands(B11=0.3)),
        ("ndii", SentinelBands(B11=0.3)),
        ("ndsi", SentinelBands(B3=0.1)),
        ("gndvi", SentinelBands(B8=0.4)),
        ("osavi", SentinelBands(B4=0.2)),
    ],
)
def test_missing_band_returns_zero(name, bands):
    assert INDEX_FUNCTIONS[name](bands) == 0


def test_zero_reflectance_is_treated_as_no_data():
    assert calculate_ndvi(SentinelBands(B8=0.0, B4=0.2)) == 0


def test_zero_denominator_returns_zero():
    bands = SentinelBands(B8=0.5, B4=0.5, B2=(0.5 + 3.0 + 1) / 7.5)
    assert calculate_evi(bands) == 0
    assert calculate_ndvi(SentinelBands(B8=0.3, B4=-0.3)) == 0


def test_nan_band_degrades_to_zero():
    assert calculate_ndvi(SentinelBands(B8=float("nan"), B4=0.2)) == 0


def test_results_are_clamped():
    # negative reflectances from bad calibration push ratios past +-1
    assert calculate_ndvi(SentinelBands(B8=0.5, B4=-0.4)) == 1.0
    assert calculate_ndvi(SentinelBands(B8=-0.4, B4=0.5)) == -1.0
    assert calculate_evi(SentinelBands(B8=0.9, B4=0.01, B2=0.2)) == 1.0


@pytest.mark.parametrize(
    "bands",
    [
        {"B2": 0.9, "B3": 0.01, "B4": 0.001, "B8": 0.99, "B11": 0.5},
        {"B2": 0.01, "B3": 0.8, "B4": 0.7, "B8": 0.02, "B11": 0.9},
        {"B2": 0.2, "B3": 0.2, "B4": 0.2, "B8": 0.2, "B11": 0.2},
    ],
)
def test_all_indices_within_unit_range(bands):
    values = calculate_all_indices(SentinelBands.from_dict(bands)).to_dict()
    assert set(values) == set(INDEX_FUNCTIONS)
    for value in values.values():
        assert -1 <= value <= 1
        assert not math.isnan(value)


def test_calculate_all_indices_is_idempotent(full_bands):
    assert calculate_all_indices(full_bands) == calculate_all_indices(full_bands)


def test_from_dict_is_case_insensitive_and_ignores_unknown():
    bands = SentinelBands.from_dict({"b8a": 0.4, "B4": 0.2, "SCL": 4})
    assert bands.B8A == 0.4
    assert bands.B4 == 0.2
    assert bands.B8 is None


def test_calculate_index_by_name(full_bands):
    assert calculate_index(full_bands, "NDVI") == calculate_ndvi(full_bands)
    with pytest.raises(ValueError):
        calculate_index(full_bands, "savi")


@pytest.mark.parametrize(
    "ndvi, status",
    [
        (-0.5, "Water"),
        (-0.1, "Bare Soil"),
        (0.05, "Bare Soil"),
        (0.1, "Sparse"),
        (0.3, "Moderate"),
        (0.5, "Good"),
        (0.69, "Good"),
        (0.7, "Excellent"),
        (0.75, "Excellent"),
    ],
)
def test_interpret_ndvi_thresholds(ndvi, status):
    assert interpret_ndvi(ndvi).status == status


def test_interpret_ndvi_carries_color_and_description():
    result = interpret_ndvi(0.75)
    assert result.color == "#006400"
    assert result.description == "Excellent vegetation health"
    assert get_ndvi_color(-0.5) == "#0066cc"


def test_ndvi_to_percentage():
    assert ndvi_to_percentage(0) == 50
    assert ndvi_to_percentage(1) == 100
    assert ndvi_to_percentage(-1) == 0


def test_normalize_index():
    assert normalize_index(-1) == 0
    assert normalize_index(0) == 0.5
    assert normalize_index(1) == 1


def test_ndvi_helpers_accept_non_finite_values():
    nan, inf = float("nan"), float("inf")
    assert ndvi_to_percentage(nan) == 50
    assert ndvi_to_percentage(inf) == 100
    assert ndvi_to_percentage(-inf) == 0
    assert normalize_index(nan) == 0.5
    assert interpret_ndvi(nan).status == "Bare Soil"
    assert interpret_ndvi(inf).status == "Excellent"


def test_non_finite_bands_yield_zero():
    nan, inf = float("nan"), float("inf")
    assert calculate_ndvi(SentinelBands(B8=nan, B4=0.2)) == 0.0
    assert calculate_evi(SentinelBands(B8=inf, B4=0.2, B2=0.1)) == 0.0
    indices = calculate_all_indices(SentinelBands(B8=inf, B4=inf, B3=nan, B11=inf))
    assert all(math.isfinite(v) for v in indices.to_dict().values())
