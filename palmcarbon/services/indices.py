from __future__ import annotations

"""Index analysis of a single set of band readings."""

from typing import Any, Dict, Mapping

from palmcarbon.indices.vegetation import (
    calculate_all_indices,
    interpret_ndvi,
    ndvi_to_percentage,
    normalize_index,
)
from palmcarbon.schemas.requests import BandsRequest
from .base import BaseService


class IndexService(BaseService):
    """Compute and interpret vegetation indices."""

    def analyze(self, bands: Mapping[str, Any]) -> Dict[str, Any]:
        request = BandsRequest.from_dict(bands)
        indices = calculate_all_indices(request.bands)
        health = interpret_ndvi(indices.ndvi)
        values = indices.to_dict()
        return {
            "indices": values,
            "normalized": {k: normalize_index(v) for k, v in values.items()},
            "ndvi_percentage": ndvi_to_percentage(indices.ndvi),
            "interpretation": {
                "status": health.status,
                "color": health.color,
                "description": health.description,
            },
        }
