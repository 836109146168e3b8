"""Carbon sequestration model, equivalences and projections."""

from .impact import (
    EQUIVALENCE_PRESETS,
    EnvironmentalImpact,
    EquivalenceConstants,
    calculate_environmental_impact,
)
from .model import (
    CarbonFactors,
    CarbonMetrics,
    FarmData,
    ValidationResult,
    calculate_annual_co2_sequestration,
    calculate_annual_earnings,
    calculate_monthly_earnings,
    validate_farm_data,
)
from .projection import (
    calculate_cumulative_sequestration,
    calculate_growth_projection,
    projection_table,
)

__all__ = [
    "EQUIVALENCE_PRESETS",
    "EnvironmentalImpact",
    "EquivalenceConstants",
    "calculate_environmental_impact",
    "CarbonFactors",
    "CarbonMetrics",
    "FarmData",
    "ValidationResult",
    "calculate_annual_co2_sequestration",
    "calculate_annual_earnings",
    "calculate_monthly_earnings",
    "validate_farm_data",
    "calculate_cumulative_sequestration",
    "calculate_growth_projection",
    "projection_table",
]
