"""Lightweight service-layer helpers used by the CLI and tests."""

from importlib import import_module

__all__ = [
    "CarbonService",
    "IndexService",
    "SatelliteService",
]


def __getattr__(name):
    if name == "CarbonService":
        return import_module(".carbon", __name__).CarbonService
    if name == "IndexService":
        return import_module(".indices", __name__).IndexService
    if name == "SatelliteService":
        return import_module(".satellite", __name__).SatelliteService
    raise AttributeError(name)
