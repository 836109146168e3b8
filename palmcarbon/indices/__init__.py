"""Vegetation index engine for Sentinel-2 reflectance data."""

from .vegetation import (
    INDEX_FUNCTIONS,
    NdviClass,
    SentinelBands,
    VegetationIndices,
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
from .rasters import mean_index, mean_indices

__all__ = [
    "INDEX_FUNCTIONS",
    "NdviClass",
    "SentinelBands",
    "VegetationIndices",
    "calculate_all_indices",
    "calculate_evi",
    "calculate_gndvi",
    "calculate_index",
    "calculate_ndbi",
    "calculate_ndii",
    "calculate_ndmi",
    "calculate_ndsi",
    "calculate_ndvi",
    "calculate_osavi",
    "get_ndvi_color",
    "interpret_ndvi",
    "mean_index",
    "mean_indices",
    "ndvi_to_percentage",
    "normalize_index",
]
