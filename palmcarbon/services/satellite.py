from __future__ import annotations

"""Satellite imagery summaries built on an injected Sentinel Hub client."""

import logging
from typing import Any, Dict, Optional

from palmcarbon.core.utils import round_half_up
from palmcarbon.indices.vegetation import interpret_ndvi
from palmcarbon.satellite.sentinelhub import SentinelHubClient
from palmcarbon.schemas.requests import SatelliteQuery
from .base import BaseService


class SatelliteService(BaseService):
    """Filter, sort and summarize scenes for a location."""

    def __init__(
        self, client: SentinelHubClient, logger: logging.Logger | None = None
    ) -> None:
        super().__init__(logger)
        self.client = client

    def summarize(self, query: SatelliteQuery) -> Dict[str, Any]:
        """Historical scenes under the cloud limit, newest first, with averages."""
        images = self.client.get_historical_data(
            query.latitude, query.longitude, query.months
        )
        kept = [img for img in images if img.cloud_cover <= query.max_cloud_cover]
        kept.sort(key=lambda img: img.date, reverse=True)
        self.logger.info(
            "Kept %d of %d scenes under %s%% cloud cover",
            len(kept),
            len(images),
            query.max_cloud_cover,
        )

        if kept:
            avg_cloud = round_half_up(
                sum(img.cloud_cover for img in kept) / len(kept), 2
            )
            avg_ndvi = round_half_up(sum(img.ndvi for img in kept) / len(kept), 2)
            date_range = {"start": kept[-1].date, "end": kept[0].date}
        else:
            avg_cloud = 0.0
            avg_ndvi = 0.0
            date_range = {"start": None, "end": None}

        return {
            "location": {"latitude": query.latitude, "longitude": query.longitude},
            "parameters": {
                "months": query.months,
                "max_cloud_cover": query.max_cloud_cover,
            },
            "images": [img.to_dict() for img in kept],
            "metadata": {
                "total_images": len(kept),
                "date_range": date_range,
                "average_cloud_cover": avg_cloud,
                "average_ndvi": avg_ndvi,
                "vegetation_health": (
                    interpret_ndvi(avg_ndvi).status if kept else None
                ),
            },
        }

    def latest(self, query: SatelliteQuery) -> Optional[Dict[str, Any]]:
        """Least cloudy recent scene, or None when nothing was found."""
        image = self.client.get_latest_image(
            query.latitude, query.longitude, query.max_cloud_cover
        )
        if image is None:
            return None
        health = interpret_ndvi(image.ndvi)
        return {
            "location": {"latitude": query.latitude, "longitude": query.longitude},
            "image": image.to_dict(),
            "vegetation_health": health.status,
        }
