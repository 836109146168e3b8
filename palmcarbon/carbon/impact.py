from __future__ import annotations

"""Environmental equivalences for a yearly CO2 figure."""

from dataclasses import asdict, dataclass
from typing import Dict

from palmcarbon.core.utils import finite_or, round_half_up


@dataclass(frozen=True)
class EquivalenceConstants:
    """Conversion constants; trees multiply, the others divide."""

    trees_per_ton: float = 16.0  # 1 tree absorbs ~60 kg CO2/year
    car_tons_per_year: float = 4.6
    home_tons_per_year: float = 4.5
    flight_tons: float = 2.0  # round trip


# Constant sets found across the calculator, PDF report and public API.
# "canonical" is the default; the others are kept selectable, not reconciled.
EQUIVALENCE_PRESETS: Dict[str, EquivalenceConstants] = {
    "canonical": EquivalenceConstants(),
    "report": EquivalenceConstants(
        trees_per_ton=16.67,
        car_tons_per_year=4.6,
        home_tons_per_year=4.74,
        flight_tons=0.9,
    ),
    "api": EquivalenceConstants(
        trees_per_ton=1 / 0.021,
        car_tons_per_year=4.6,
        home_tons_per_year=4.8,
        flight_tons=0.9,
    ),
}


@dataclass(frozen=True)
class EnvironmentalImpact:
    """Everyday equivalents of a yearly CO2 figure."""

    trees_equivalent: int
    cars_off_road: int
    houses_off_grid: int
    flights_mitigated: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def get_equivalence_constants(preset: str) -> EquivalenceConstants:
    """Look up a named constant set."""
    try:
        return EQUIVALENCE_PRESETS[preset]
    except KeyError:
        raise ValueError(
            f"Unknown equivalence preset '{preset}'. "
            f"Choose from: {list(EQUIVALENCE_PRESETS)}"
        ) from None


def _whole(value: float) -> int:
    return int(round_half_up(finite_or(value)))


def calculate_environmental_impact(
    co2_tons: float, constants: EquivalenceConstants | None = None
) -> EnvironmentalImpact:
    """Convert *co2_tons* per year into trees, cars, homes and flights."""
    c = constants or EQUIVALENCE_PRESETS["canonical"]
    tons = max(0.0, finite_or(co2_tons))
    return EnvironmentalImpact(
        trees_equivalent=_whole(tons * c.trees_per_ton),
        cars_off_road=_whole(tons / c.car_tons_per_year),
        houses_off_grid=_whole(tons / c.home_tons_per_year),
        flights_mitigated=_whole(tons / c.flight_tons),
    )
