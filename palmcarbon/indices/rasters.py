"""
Compute spectral indices over whole band rasters held in memory.
"""

from __future__ import annotations

from typing import Mapping

import numpy as np

from .vegetation import VegetationIndices


def normalized_difference(a, b):
    """Elementwise ``(a - b) / (a + b)``; zero denominators give NaN."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (a - b) / (a + b)


def ndvi(red, nir):
    """Normalized Difference Vegetation Index."""
    return normalized_difference(nir, red)


def evi(red, nir, blue, G=2.5, C1=6.0, C2=7.5, L=1.0):
    """Enhanced Vegetation Index."""
    red = np.asarray(red, dtype=float)
    nir = np.asarray(nir, dtype=float)
    blue = np.asarray(blue, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return G * ((nir - red) / (nir + C1 * red - C2 * blue + L))


def osavi(red, nir, soil=0.16):
    """Optimized Soil-Adjusted Vegetation Index."""
    red = np.asarray(red, dtype=float)
    nir = np.asarray(nir, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (nir - red) / (nir + red + soil)


def mean_index(values) -> float:
    """Mean of the finite pixels of *values*, clamped to [-1, 1].

    Returns 0.0 when no pixel is usable.
    """
    arr = np.asarray(values, dtype=float)
    valid = arr[np.isfinite(arr)]
    if valid.size == 0:
        return 0.0
    return float(np.clip(valid.mean(), -1.0, 1.0))


def _aligned(*arrays):
    """Crop 2-D arrays to their common shape."""
    arrs = [np.atleast_2d(np.asarray(a, dtype=float)) for a in arrays]
    rows = min(a.shape[0] for a in arrs)
    cols = min(a.shape[1] for a in arrs)
    return [a[:rows, :cols] for a in arrs]


def mean_indices(band_arrays: Mapping[str, object]) -> VegetationIndices:
    """Return scene-mean indices from 2-D band rasters keyed by band name.

    Rasters of different sizes are cropped to their overlap. Indices whose
    bands are missing report 0.0.
    """
    bands = {str(k).upper(): v for k, v in band_arrays.items()}

    def _nd(a: str, b: str) -> float:
        if a not in bands or b not in bands:
            return 0.0
        return mean_index(normalized_difference(*_aligned(bands[a], bands[b])))

    if {"B8", "B4", "B2"} <= bands.keys():
        red, nir, blue = _aligned(bands["B4"], bands["B8"], bands["B2"])
        evi_mean = mean_index(evi(red, nir, blue))
    else:
        evi_mean = 0.0

    if {"B8", "B4"} <= bands.keys():
        osavi_mean = mean_index(osavi(*_aligned(bands["B4"], bands["B8"])))
    else:
        osavi_mean = 0.0

    ndmi_mean = _nd("B8", "B11")
    return VegetationIndices(
        ndvi=_nd("B8", "B4"),
        evi=evi_mean,
        ndbi=_nd("B11", "B8"),
        ndmi=ndmi_mean,
        ndii=ndmi_mean,
        ndsi=_nd("B3", "B11"),
        gndvi=_nd("B8", "B3"),
        osavi=osavi_mean,
    )
