from .sentinelhub import BoundingBox, SatelliteImage, SentinelHubClient

__all__ = ["BoundingBox", "SatelliteImage", "SentinelHubClient"]
