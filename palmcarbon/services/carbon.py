from __future__ import annotations

"""Service assembling a full carbon estimate for one farm."""

import logging
from typing import Any, Dict, Mapping

from palmcarbon.carbon.impact import (
    calculate_environmental_impact,
    get_equivalence_constants,
)
from palmcarbon.carbon.model import (
    CarbonFactors,
    calculate_annual_co2_sequestration,
    calculate_annual_earnings,
    calculate_monthly_earnings,
    default_factors,
    validate_farm_data,
)
from palmcarbon.carbon.projection import (
    calculate_cumulative_sequestration,
    calculate_growth_projection,
)
from palmcarbon.core.config import ConfigManager
from palmcarbon.core.errors import FarmValidationError
from palmcarbon.schemas.requests import FarmRequest
from .base import BaseService


class CarbonService(BaseService):
    """Validate farm payloads and compute metrics, impact and projections."""

    def __init__(
        self,
        config: ConfigManager | None = None,
        factors: CarbonFactors | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(logger, config)
        self.factors = factors or default_factors()

    def estimate(
        self, payload: Mapping[str, Any], *, years: int = 5
    ) -> Dict[str, Any]:
        """Return the estimate for *payload*.

        Raises :class:`SchemaValidationError` for malformed payloads and
        :class:`FarmValidationError` for out-of-range values.
        """
        request = FarmRequest.from_dict(payload)
        farm = request.to_farm_data()
        result = validate_farm_data(farm)
        if not result.valid:
            self.logger.info("Rejected farm data: %s", "; ".join(result.errors))
            raise FarmValidationError(result.errors)

        price = self.config.get_price_per_ton()
        metrics = calculate_annual_co2_sequestration(
            farm, price_per_ton=price, factors=self.factors
        )
        preset = self.config.get(
            "equivalence_preset", ConfigManager.DEFAULT_EQUIVALENCE_PRESET
        )
        constants = get_equivalence_constants(preset)
        annual = metrics.annual_co2_sequestration
        self.logger.debug(
            "Farm %.2f ha -> %.2f t CO2/yr", farm.area_hectares, annual
        )
        return {
            "farm": {
                "area_hectares": farm.area_hectares,
                "tree_count": farm.tree_count,
                "average_tree_age": farm.average_tree_age,
                "tree_species": farm.tree_species,
                "soil_type": farm.soil_type,
                "irrigation_type": farm.irrigation_type,
            },
            "carbon_metrics": metrics.to_dict(),
            "environmental_impact": calculate_environmental_impact(
                annual, constants
            ).to_dict(),
            "growth_projection": calculate_growth_projection(
                annual, years, self.config.get_growth_rate()
            ),
            "cumulative_sequestration": calculate_cumulative_sequestration(
                annual, years, self.config.get_cumulative_growth_rate()
            ),
            "earnings": {
                "monthly": calculate_monthly_earnings(
                    metrics.monthly_sequestration, price
                ),
                "annual": calculate_annual_earnings(annual, price),
            },
        }
