"""
palmcarbon CLI entrypoint: vegetation indices from band readings, carbon
estimates for a farm, growth projections, and Sentinel Hub scene summaries.
"""

import json
import sys

import click  # type: ignore
from click import echo

from palmcarbon.carbon.model import IRRIGATION_TYPES, SOIL_TYPES, TREE_SPECIES
from palmcarbon.carbon.projection import (
    calculate_cumulative_sequestration,
    calculate_growth_projection,
)
from palmcarbon.core.config import ConfigManager, ConfigValidationError
from palmcarbon.core.errors import FarmValidationError, PalmCarbonError
from palmcarbon.core.logger import Logger
from palmcarbon.satellite.sentinelhub import SentinelHubClient
from palmcarbon.schemas.requests import SatelliteQuery
from palmcarbon.services.carbon import CarbonService
from palmcarbon.services.indices import IndexService
from palmcarbon.services.satellite import SatelliteService

logger = Logger.get_logger(__name__)

BAND_OPTIONS = ("B2", "B3", "B4", "B5", "B6", "B7", "B8", "B8A", "B11", "B12")


def _emit(data) -> None:
    echo(json.dumps(data, indent=2, default=str))


def _fail(message: str, err: Exception) -> None:
    echo(f"❌  {message}: {err}", err=True)
    sys.exit(1)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML, TOML or JSON config file.",
)
@click.pass_context
def cli(ctx, config_path):
    """palmcarbon: carbon credit and vegetation analytics for date-palm farms."""
    Logger.setup()
    try:
        ctx.obj = ConfigManager(config_path)
    except ConfigValidationError as e:
        _fail("Invalid configuration", e)


def _band_options(func):
    for band in reversed(BAND_OPTIONS):
        func = click.option(
            f"--{band.lower()}",
            band,
            type=float,
            default=None,
            help=f"Reflectance of band {band}.",
        )(func)
    return func


@cli.command()
@_band_options
@click.option(
    "--bands-json",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file mapping band names to reflectance; overridden by flags.",
)
def indices(bands_json, **band_values):
    """Compute vegetation indices from Sentinel-2 band reflectances."""
    bands = {}
    try:
        if bands_json:
            with open(bands_json, "r", encoding="utf-8") as f:
                bands.update(json.load(f))
        bands.update({k: v for k, v in band_values.items() if v is not None})
        _emit(IndexService(logger=logger).analyze(bands))
    except (PalmCarbonError, ValueError, OSError) as e:
        logger.error("Index command failed", exc_info=True)
        _fail("Index computation failed", e)


@cli.command()
@click.option("--area", type=float, required=True, help="Farm area in hectares.")
@click.option("--trees", type=int, required=True, help="Number of trees.")
@click.option("--age", type=float, required=True, help="Average tree age (years).")
@click.option(
    "--species", type=click.Choice(TREE_SPECIES), default="date_palm", show_default=True
)
@click.option("--soil", type=click.Choice(SOIL_TYPES), default="loamy", show_default=True)
@click.option(
    "--irrigation",
    type=click.Choice(IRRIGATION_TYPES),
    default="drip",
    show_default=True,
)
@click.option("--price", type=float, default=None, help="Price per ton of CO2.")
@click.option("--years", type=int, default=5, show_default=True, help="Projection years.")
@click.pass_obj
def carbon(config, area, trees, age, species, soil, irrigation, price, years):
    """Estimate annual CO2 sequestration and credit value for a farm."""
    if price is not None:
        config.config["price_per_ton"] = price
    payload = {
        "area_hectares": area,
        "tree_count": trees,
        "average_tree_age": age,
        "tree_species": species,
        "soil_type": soil,
        "irrigation_type": irrigation,
    }
    try:
        _emit(CarbonService(config=config, logger=logger).estimate(payload, years=years))
    except FarmValidationError as e:
        for msg in e.errors:
            echo(f"❌  {msg}", err=True)
        sys.exit(1)
    except (PalmCarbonError, ConfigValidationError, ValueError) as e:
        logger.error("Carbon command failed", exc_info=True)
        _fail("Carbon estimate failed", e)


@cli.command()
@click.argument("current", type=float)
@click.argument("years", type=int)
@click.option("--rate", type=float, default=None, help="Annual growth rate (0.05 = 5%).")
@click.pass_obj
def project(config, current, years, rate):
    """Project CURRENT tons/year over YEARS years."""
    try:
        growth = config.get_growth_rate() if rate is None else rate
        cumulative_rate = config.get_cumulative_growth_rate()
    except ConfigValidationError as e:
        logger.error("Projection command failed", exc_info=True)
        _fail("Projection failed", e)
    _emit(
        {
            "growth_projection": calculate_growth_projection(current, years, growth),
            "cumulative_sequestration": calculate_cumulative_sequestration(
                current, years, cumulative_rate
            ),
        }
    )


@cli.command()
@click.argument("lat", type=float)
@click.argument("lng", type=float)
@click.option("--months", type=int, default=3, show_default=True)
@click.option("--max-cloud-cover", type=float, default=None)
@click.option("--latest", is_flag=True, help="Only the least cloudy recent scene.")
@click.pass_obj
def satellite(config, lat, lng, months, max_cloud_cover, latest):
    """Summarize Sentinel-2 scenes around LAT LNG."""
    cloud = (
        config.get("max_cloud_cover", ConfigManager.DEFAULT_MAX_CLOUD_COVER)
        if max_cloud_cover is None
        else max_cloud_cover
    )
    try:
        query = SatelliteQuery.from_dict(
            {"lat": lat, "lng": lng, "months": months, "max_cloud_cover": cloud}
        )
        client = SentinelHubClient.from_config(config, logger=logger)
        svc = SatelliteService(client, logger=logger)
        if latest:
            result = svc.latest(query)
            if result is None:
                echo("No satellite images found for the given location", err=True)
                sys.exit(1)
            _emit(result)
        else:
            _emit(svc.summarize(query))
    except (PalmCarbonError, ConfigValidationError) as e:
        logger.error("Satellite command failed", exc_info=True)
        _fail("Satellite lookup failed", e)


if __name__ == "__main__":
    cli()
