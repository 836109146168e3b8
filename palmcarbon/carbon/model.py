from __future__ import annotations

"""Carbon sequestration model for date-palm and other orchard farms.

Annual sequestration is a per-hectare base rate adjusted by three
multiplicative factors (tree age, soil type, irrigation). Biomass, soil
carbon and credit figures are derived from that annual figure.
"""

import functools
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Literal

import yaml

from palmcarbon.core.utils import finite_or, round_half_up

TreeSpecies = Literal["date_palm", "other"]
SoilType = Literal["sandy", "loamy", "clay"]
IrrigationType = Literal["drip", "flood", "rain_fed"]

TREE_SPECIES: tuple[str, ...] = ("date_palm", "other")
SOIL_TYPES: tuple[str, ...] = ("sandy", "loamy", "clay")
IRRIGATION_TYPES: tuple[str, ...] = ("drip", "flood", "rain_fed")

MAX_TREE_AGE = 100


@dataclass(frozen=True)
class FarmData:
    """Farm attributes driving the sequestration model."""

    area_hectares: float
    tree_count: int
    average_tree_age: float
    tree_species: TreeSpecies = "date_palm"
    soil_type: SoilType = "loamy"
    irrigation_type: IrrigationType = "drip"


@dataclass(frozen=True)
class CarbonMetrics:
    """Derived sequestration and credit figures for one farm."""

    annual_co2_sequestration: float  # tons/year
    monthly_sequestration: float  # tons/month
    total_biomass: float  # tons
    soil_carbon_storage: float  # tons
    estimated_value: float  # currency units/year
    carbon_credits: int  # one per whole ton

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate_farm_data`."""

    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class CarbonFactors:
    """Factor tables for the sequestration model."""

    base_rates: Dict[str, float] = field(
        default_factory=lambda: {"date_palm": 2.5, "other": 1.5}
    )
    soil_factors: Dict[str, float] = field(
        default_factory=lambda: {"sandy": 0.8, "loamy": 1.0, "clay": 1.2}
    )
    irrigation_factors: Dict[str, float] = field(
        default_factory=lambda: {"drip": 1.3, "flood": 1.0, "rain_fed": 0.7}
    )
    age_decay: float = 0.02
    age_floor: float = 0.5
    biomass_factor: float = 0.5
    soil_carbon_fraction: float = 0.4
    price_per_ton: float = 15.0

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CarbonFactors":
        """Load factors from a YAML file; missing keys keep their defaults."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        defaults = cls()
        return cls(
            base_rates={
                k: float(v)
                for k, v in (data.get("base_rates") or defaults.base_rates).items()
            },
            soil_factors={
                k: float(v)
                for k, v in (data.get("soil_factors") or defaults.soil_factors).items()
            },
            irrigation_factors={
                k: float(v)
                for k, v in (
                    data.get("irrigation_factors") or defaults.irrigation_factors
                ).items()
            },
            age_decay=float(data.get("age_decay", defaults.age_decay)),
            age_floor=float(data.get("age_floor", defaults.age_floor)),
            biomass_factor=float(data.get("biomass_factor", defaults.biomass_factor)),
            soil_carbon_fraction=float(
                data.get("soil_carbon_fraction", defaults.soil_carbon_fraction)
            ),
            price_per_ton=float(data.get("price_per_ton", defaults.price_per_ton)),
        )

    def age_factor(self, age: float) -> float:
        """Younger trees sequester more; the factor never drops below the floor."""
        return max(self.age_floor, 1 - age * self.age_decay)


DEFAULT_FACTORS_PATH = (
    Path(__file__).resolve().parent.parent / "config" / "carbon_factors.yaml"
)


@functools.lru_cache(maxsize=1)
def default_factors() -> CarbonFactors:
    """Return factors from the packaged YAML, or built-in defaults.

    The file is read once per process; callers must not mutate the result.
    """
    if DEFAULT_FACTORS_PATH.exists():
        return CarbonFactors.from_yaml(DEFAULT_FACTORS_PATH)
    return CarbonFactors()  # pragma: no cover - packaged file always present


def _lookup(table: Dict[str, float], key: str, label: str) -> float:
    try:
        return table[key]
    except KeyError:
        raise ValueError(
            f"Unknown {label} '{key}'. Choose from: {list(table)}"
        ) from None


def calculate_annual_co2_sequestration(
    farm: FarmData,
    *,
    price_per_ton: float | None = None,
    factors: CarbonFactors | None = None,
) -> CarbonMetrics:
    """Estimate yearly CO2 sequestration and credit value for *farm*.

    Based on IPCC guidelines and FAO data for date palms. Floats are rounded
    to two decimals; ``carbon_credits`` is the floor of the unrounded annual
    tonnage.
    """
    f = factors or default_factors()
    price = f.price_per_ton if price_per_ton is None else price_per_ton

    base_rate = _lookup(f.base_rates, farm.tree_species, "tree species")
    soil_factor = _lookup(f.soil_factors, farm.soil_type, "soil type")
    irrigation_factor = _lookup(
        f.irrigation_factors, farm.irrigation_type, "irrigation type"
    )

    annual = finite_or(
        farm.area_hectares
        * base_rate
        * f.age_factor(farm.average_tree_age)
        * soil_factor
        * irrigation_factor
    )
    biomass = finite_or(annual * f.biomass_factor * farm.average_tree_age)
    soil_carbon = biomass * f.soil_carbon_fraction

    return CarbonMetrics(
        annual_co2_sequestration=round_half_up(annual, 2),
        monthly_sequestration=round_half_up(annual / 12, 2),
        total_biomass=round_half_up(biomass, 2),
        soil_carbon_storage=round_half_up(soil_carbon, 2),
        estimated_value=round_half_up(finite_or(annual * price), 2),
        carbon_credits=int(math.floor(annual)),
    )


def calculate_monthly_earnings(
    monthly_sequestration: float, price_per_ton: float = 15.0
) -> int:
    """Monthly credit earnings in whole currency units."""
    return int(round_half_up(finite_or(monthly_sequestration * price_per_ton)))


def calculate_annual_earnings(
    annual_sequestration: float, price_per_ton: float = 15.0
) -> int:
    """Annual credit earnings in whole currency units."""
    return int(round_half_up(finite_or(annual_sequestration * price_per_ton)))


def validate_farm_data(farm: FarmData) -> ValidationResult:
    """Check farm data ranges, collecting every violation instead of raising."""
    errors: List[str] = []
    if not math.isfinite(farm.area_hectares):
        errors.append("Farm area must be a finite number")
    elif farm.area_hectares <= 0:
        errors.append("Farm area must be greater than 0")
    if not math.isfinite(farm.tree_count):
        errors.append("Tree count must be a finite number")
    elif farm.tree_count <= 0:
        errors.append("Tree count must be greater than 0")
    if not math.isfinite(farm.average_tree_age):
        errors.append("Tree age must be a finite number")
    elif farm.average_tree_age < 0:
        errors.append("Tree age cannot be negative")
    elif farm.average_tree_age > MAX_TREE_AGE:
        errors.append(f"Tree age seems unrealistic (>{MAX_TREE_AGE} years)")
    return ValidationResult(valid=not errors, errors=errors)
