"""
Module `indices.vegetation` computes normalized vegetation indices from
single Sentinel-2 reflectance readings.

Every index function is pure and never raises: a missing band, a zero
denominator or a non-finite result all yield ``0.0``, and any other result is
clamped to ``[-1, 1]``.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from typing import Callable, Dict, Mapping, Optional

from palmcarbon.core.utils import clamp, round_half_up


@dataclass(frozen=True)
class SentinelBands:
    """Surface reflectance per Sentinel-2 band. Any band may be absent."""

    B2: Optional[float] = None  # Blue (490nm)
    B3: Optional[float] = None  # Green (560nm)
    B4: Optional[float] = None  # Red (665nm)
    B5: Optional[float] = None  # Red edge (705nm)
    B6: Optional[float] = None  # Red edge (740nm)
    B7: Optional[float] = None  # Red edge (783nm)
    B8: Optional[float] = None  # NIR (842nm)
    B8A: Optional[float] = None  # Narrow NIR (865nm)
    B11: Optional[float] = None  # SWIR (1610nm)
    B12: Optional[float] = None  # SWIR (2190nm)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "SentinelBands":
        """Build from a mapping keyed by band name (case-insensitive).

        Unknown keys are ignored; values are passed through unchanged.
        """
        names = {f.name.upper(): f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = names.get(str(key).upper())
            if name is not None:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class VegetationIndices:
    """All indices derived from one set of band readings."""

    ndvi: float
    evi: float
    ndbi: float
    ndmi: float
    ndii: float
    ndsi: float
    gndvi: float
    osavi: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class NdviClass:
    """Qualitative vegetation health label for an NDVI value."""

    status: str
    color: str
    description: str


# Upper bounds (exclusive), checked in order; the final class catches the rest.
NDVI_CLASSES: tuple[tuple[float, NdviClass], ...] = (
    (-0.1, NdviClass("Water", "#0066cc", "Water bodies")),
    (0.1, NdviClass("Bare Soil", "#8B7355", "No vegetation")),
    (0.3, NdviClass("Sparse", "#FFFF00", "Sparse vegetation")),
    (0.5, NdviClass("Moderate", "#90EE90", "Moderate vegetation")),
    (0.7, NdviClass("Good", "#228B22", "Good vegetation")),
)
NDVI_EXCELLENT = NdviClass("Excellent", "#006400", "Excellent vegetation health")


def _present(*values: Optional[float]) -> bool:
    # 0 is the Sentinel-2 L2A no-data value
    return all(v is not None and v != 0 for v in values)


def _finish(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    value = numerator / denominator
    if not math.isfinite(value):
        return 0.0
    return clamp(value)


def _normalized_difference(a: Optional[float], b: Optional[float]) -> float:
    if not _present(a, b):
        return 0.0
    return _finish(a - b, a + b)


def calculate_ndvi(bands: SentinelBands) -> float:
    """Normalized Difference Vegetation Index: (NIR - Red) / (NIR + Red)."""
    return _normalized_difference(bands.B8, bands.B4)


def calculate_evi(bands: SentinelBands) -> float:
    """Enhanced Vegetation Index.

    ``2.5 * (NIR - Red) / (NIR + 6*Red - 7.5*Blue + 1)``; more sensitive to
    canopy variation than NDVI in dense vegetation.
    """
    nir, red, blue = bands.B8, bands.B4, bands.B2
    if not _present(nir, red, blue):
        return 0.0
    return _finish(2.5 * (nir - red), nir + 6 * red - 7.5 * blue + 1)


def calculate_ndbi(bands: SentinelBands) -> float:
    """Normalized Difference Built-up Index: (SWIR - NIR) / (SWIR + NIR)."""
    return _normalized_difference(bands.B11, bands.B8)


def calculate_ndmi(bands: SentinelBands) -> float:
    """Normalized Difference Moisture Index: (NIR - SWIR) / (NIR + SWIR)."""
    return _normalized_difference(bands.B8, bands.B11)


def calculate_ndii(bands: SentinelBands) -> float:
    """Normalized Difference Infrared Index; same formula as NDMI."""
    return calculate_ndmi(bands)


def calculate_ndsi(bands: SentinelBands) -> float:
    """Normalized Difference Snow Index: (Green - SWIR) / (Green + SWIR)."""
    return _normalized_difference(bands.B3, bands.B11)


def calculate_gndvi(bands: SentinelBands) -> float:
    """Green NDVI: (NIR - Green) / (NIR + Green)."""
    return _normalized_difference(bands.B8, bands.B3)


def calculate_osavi(bands: SentinelBands) -> float:
    """Optimized Soil-Adjusted Vegetation Index: (NIR - Red) / (NIR + Red + 0.16)."""
    nir, red = bands.B8, bands.B4
    if not _present(nir, red):
        return 0.0
    return _finish(nir - red, nir + red + 0.16)


INDEX_FUNCTIONS: Dict[str, Callable[[SentinelBands], float]] = {
    "ndvi": calculate_ndvi,
    "evi": calculate_evi,
    "ndbi": calculate_ndbi,
    "ndmi": calculate_ndmi,
    "ndii": calculate_ndii,
    "ndsi": calculate_ndsi,
    "gndvi": calculate_gndvi,
    "osavi": calculate_osavi,
}


def calculate_index(bands: SentinelBands, index: str) -> float:
    """Compute a named index (case-insensitive) from ``INDEX_FUNCTIONS``."""
    key = index.lower()
    if key not in INDEX_FUNCTIONS:
        raise ValueError(
            f"Index '{index}' not supported. Choose from: {list(INDEX_FUNCTIONS)}"
        )
    return INDEX_FUNCTIONS[key](bands)


def calculate_all_indices(bands: SentinelBands) -> VegetationIndices:
    """Compute every supported index for *bands*."""
    return VegetationIndices(
        **{name: func(bands) for name, func in INDEX_FUNCTIONS.items()}
    )


def interpret_ndvi(ndvi: float) -> NdviClass:
    """Map an NDVI value onto a vegetation health class; NaN reads as 0."""
    if math.isnan(ndvi):
        ndvi = 0.0
    for upper, ndvi_class in NDVI_CLASSES:
        if ndvi < upper:
            return ndvi_class
    return NDVI_EXCELLENT


def get_ndvi_color(ndvi: float) -> str:
    """Display color of the health class for *ndvi*."""
    return interpret_ndvi(ndvi).color


def ndvi_to_percentage(ndvi: float) -> int:
    """Scale NDVI from [-1, 1] to an integer percentage in [0, 100]."""
    return int(round_half_up(normalize_index(ndvi) * 100))


def normalize_index(index: float) -> float:
    """Scale an index from [-1, 1] to [0, 1].

    NaN maps to the midpoint and infinities to the nearest end.
    """
    if not math.isfinite(index):
        index = 0.0 if math.isnan(index) else clamp(index)
    return (index + 1) / 2
