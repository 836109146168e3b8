"""Exception types raised at the boundaries of the calculator core."""

from __future__ import annotations


class PalmCarbonError(Exception):
    """Base class for palmcarbon errors."""


class SchemaValidationError(PalmCarbonError):
    """Raised when a request payload cannot be parsed into a schema."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class FarmValidationError(PalmCarbonError):
    """Raised when farm data is well-formed but outside accepted ranges."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class SatelliteDataError(PalmCarbonError):
    """Raised when satellite imagery cannot be fetched."""
