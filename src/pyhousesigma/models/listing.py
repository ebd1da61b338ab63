"""Listing search models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SearchCriteria(BaseModel):
    """User-facing filters for a map search.

    Parameters
    ----------
    price_range : tuple[float, float] or None
        Inclusive ``(min, max)`` monthly price.  ``None`` uses the
        default range.
    min_square_footage : int or None
        Lower bound for the square footage filter.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    price_range: tuple[float, float] | None = None
    min_square_footage: int | None = None

    @field_validator("price_range")
    @classmethod
    def _check_price_range(cls, value: tuple[float, float] | None) -> tuple[float, float] | None:
        if value is not None and value[0] > value[1]:
            raise ValueError(f"price range minimum {value[0]} exceeds maximum {value[1]}")
        return value

    @field_validator("min_square_footage")
    @classmethod
    def _check_square_footage(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("minimum square footage must be positive")
        return value


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    lat: float
    lon: float


class MapCluster(BaseModel):
    """One marker/cluster returned by the map search."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    location: GeoPoint | None = None
    count: int = 0
    type: str = ""
    marker: str = ""
    label: str = ""
    ids: list[str] = Field(default_factory=list)


class ListingPreview(BaseModel):
    """Listing preview from the encrypted preview endpoint.

    Only ``id_listing`` is relied upon; every other field the service
    sends is kept on the model (``extra="allow"``) and in ``raw``.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id_listing: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if isinstance(values, dict) and "raw" not in values:
            return {**values, "raw": dict(values)}
        return values


class PreviewManyResponse(BaseModel):
    """Decrypted body of the preview endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    house_list: list[ListingPreview] = Field(default_factory=list, alias="houseList")

    @field_validator("house_list", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value
