from __future__ import annotations

"""Multi-year sequestration projections.

Two compounding assumptions coexist on purpose:

* :func:`calculate_growth_projection` models farm-level growth of the
  sequestration rate (default 5%/yr) and returns one value per year.
* :func:`calculate_cumulative_sequestration` models slow biomass growth of
  established trees (2%/yr) and returns a single multi-year total.
"""

from typing import List

import pandas as pd

from palmcarbon.core.utils import finite_or, round_half_up

CUMULATIVE_GROWTH_RATE = 0.02


def calculate_growth_projection(
    current_sequestration: float, years: int, growth_rate: float = 0.05
) -> List[float]:
    """Return ``years`` yearly values starting at *current_sequestration*.

    Values that stop being finite are reported as 0.
    """
    projection: List[float] = []
    value = current_sequestration
    for _ in range(max(0, years)):
        projection.append(round_half_up(finite_or(value), 2))
        value *= 1 + growth_rate
    return projection


def calculate_cumulative_sequestration(
    annual_rate: float, years: int, growth_rate: float = CUMULATIVE_GROWTH_RATE
) -> float:
    """Total CO2 over *years*, with the yearly rate rising by *growth_rate*."""
    cumulative = 0.0
    current = annual_rate
    for _ in range(max(0, years)):
        cumulative += current
        current *= 1 + growth_rate
    return round_half_up(finite_or(cumulative), 2)


def projection_table(
    annual_tons: float,
    years: int = 5,
    *,
    growth_rate: float = 0.05,
    price_per_ton: float = 15.0,
) -> pd.DataFrame:
    """Year-by-year sequestration, income and running total as a DataFrame."""
    values = calculate_growth_projection(annual_tons, years, growth_rate)
    df = pd.DataFrame(
        {
            "year": list(range(1, len(values) + 1)),
            "co2_sequestered": values,
        }
    )
    df["estimated_income"] = [
        round_half_up(v * price_per_ton, 2) for v in df["co2_sequestered"]
    ]
    df["cumulative_co2"] = [
        round_half_up(v, 2) for v in df["co2_sequestered"].cumsum()
    ]
    return df
