from __future__ import annotations

"""Request schemas validated with pydantic at the service boundary.

Each ``from_dict`` either returns a frozen model or raises
:class:`SchemaValidationError` naming the first offending field. Keys are
accepted in camelCase or snake_case; ``None`` values count as absent.
"""

from typing import Annotated, Any, ClassVar, Literal, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from palmcarbon.carbon.model import FarmData
from palmcarbon.core.errors import SchemaValidationError
from palmcarbon.indices.vegetation import SentinelBands


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass and would otherwise coerce to 0/1
    if isinstance(value, bool):
        raise ValueError("must be a number")
    return value


def _lower(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


Number = Annotated[float, BeforeValidator(_reject_bool)]
WholeNumber = Annotated[int, BeforeValidator(_reject_bool)]
TreeSpeciesChoice = Annotated[Literal["date_palm", "other"], BeforeValidator(_lower)]
SoilTypeChoice = Annotated[Literal["sandy", "loamy", "clay"], BeforeValidator(_lower)]
IrrigationChoice = Annotated[
    Literal["drip", "flood", "rain_fed"], BeforeValidator(_lower)
]


class RequestModel(BaseModel):
    """Shared settings and error translation for request schemas."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    # Field reported when the payload itself is not an object.
    body_field: ClassVar[str] = "body"

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def field_label(cls, loc: tuple) -> str:
        """Public name of the field at *loc*: its first accepted key."""
        if not loc:
            return cls.body_field
        key = str(loc[0])
        for name, info in cls.model_fields.items():
            alias = info.validation_alias
            choices = alias.choices if isinstance(alias, AliasChoices) else []
            if key == name or key in choices:
                return str(choices[0]) if choices else name
        return key

    @classmethod
    def from_dict(cls, data: Any):
        if not isinstance(data, Mapping):
            raise SchemaValidationError(cls.body_field, "must be an object")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as err:
            first = err.errors()[0]
            raise SchemaValidationError(
                cls.field_label(tuple(first["loc"])), first["msg"]
            ) from None


class FarmRequest(RequestModel):
    """Farm attributes as submitted to the calculator.

    Ranges are left to :func:`validate_farm_data` so every violation can be
    reported at once.
    """

    area_hectares: Number = Field(
        validation_alias=AliasChoices("area_hectares", "areaHectares")
    )
    tree_count: WholeNumber = Field(
        validation_alias=AliasChoices("tree_count", "treeCount")
    )
    average_tree_age: Number = Field(
        validation_alias=AliasChoices("average_tree_age", "averageTreeAge")
    )
    tree_species: TreeSpeciesChoice = Field(
        "date_palm", validation_alias=AliasChoices("tree_species", "treeSpecies")
    )
    soil_type: SoilTypeChoice = Field(
        "loamy", validation_alias=AliasChoices("soil_type", "soilType")
    )
    irrigation_type: IrrigationChoice = Field(
        "drip", validation_alias=AliasChoices("irrigation_type", "irrigationType")
    )

    def to_farm_data(self) -> FarmData:
        return FarmData(
            area_hectares=self.area_hectares,
            tree_count=self.tree_count,
            average_tree_age=self.average_tree_age,
            tree_species=self.tree_species,
            soil_type=self.soil_type,
            irrigation_type=self.irrigation_type,
        )


class SatelliteQuery(RequestModel):
    """Location and filters for a satellite imagery lookup."""

    body_field: ClassVar[str] = "query"

    latitude: Number = Field(
        ge=-90, le=90, validation_alias=AliasChoices("lat", "latitude")
    )
    longitude: Number = Field(
        ge=-180, le=180, validation_alias=AliasChoices("lng", "longitude")
    )
    months: WholeNumber = Field(3, gt=0)
    max_cloud_cover: Number = Field(
        20.0,
        ge=0,
        le=100,
        validation_alias=AliasChoices("max_cloud_cover", "maxCloudCover"),
    )


class BandsRequest(RequestModel):
    """Band reflectances submitted for index computation.

    Band names are case-insensitive; unknown keys are ignored.
    """

    body_field: ClassVar[str] = "bands"

    B2: Optional[Number] = None
    B3: Optional[Number] = None
    B4: Optional[Number] = None
    B5: Optional[Number] = None
    B6: Optional[Number] = None
    B7: Optional[Number] = None
    B8: Optional[Number] = None
    B8A: Optional[Number] = None
    B11: Optional[Number] = None
    B12: Optional[Number] = None

    @model_validator(mode="before")
    @classmethod
    def upper_keys(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {str(k).upper(): v for k, v in data.items()}
        return data

    @property
    def bands(self) -> SentinelBands:
        return SentinelBands(**self.model_dump())


__all__ = ["FarmRequest", "SatelliteQuery", "BandsRequest"]
