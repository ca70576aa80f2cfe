"""Typed records exchanged with the scoring core.

``Property`` is the only validated input type. Listing forms submit numbers
as strings (``"350000"``, ``""``); :func:`parse_property` turns such a record
into a ``Property`` or raises :class:`PropertyParseError` naming the bad
fields, instead of letting ``NaN`` leak into the scores.

Result types (``MatchResult``, ``PricingStats``, ``PriceRange``,
``Evaluation``) are plain frozen dataclasses with an ``as_dict`` helper for
the JSON and export layers.
"""
from __future__ import annotations

import datetime
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator, model_validator

from .errors import PropertyParseError, collect_field_errors


class PropertyType(str, Enum):
    HOUSE = "House"
    APARTMENT = "Apartment"
    RESIDENTIAL_LAND = "Residential land"
    COMMERCIAL_INDUSTRIAL = "Commercial/Industrial"

    @classmethod
    def parse(cls, value: Any) -> "PropertyType":
        """Lenient lookup: ``"ResidentialLand"``, ``"residential land"`` and
        ``"COMMERCIAL_INDUSTRIAL"`` all resolve."""
        if isinstance(value, cls):
            return value
        key = re.sub(r"[^a-z]", "", str(value).lower())
        for member in cls:
            if key in (re.sub(r"[^a-z]", "", member.value.lower()), member.name.replace("_", "").lower()):
                return member
        raise ValueError(f"unknown property type {value!r}")


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and v.strip() == "")


class Property(BaseModel):
    """A base property or comparable listing.

    Field names are snake_case; the camelCase names used by the listing form
    (``listingName``, ``parkingSpots`` ...) are accepted as aliases.
    """

    listing_name: str = Field(alias="listingName", min_length=1)
    property_type: PropertyType = Field(alias="propertyType")
    bedrooms: float = Field(ge=0)
    bathrooms: float = Field(ge=0)
    # display only, never scored; None keeps the listing out of pricing
    price: Optional[float] = Field(default=None, ge=0)
    size: float = Field(ge=0)
    amenity_count: float = Field(alias="amenityCount", ge=0)
    age: float = Field(ge=0)
    parking_spots: float = Field(alias="parkingSpots", ge=0)
    # 1 (poor) .. 4 (excellent); 0 means unknown
    condition: float = Field(ge=0, le=4)
    province: str = ""
    canton: str = ""
    district: str = ""
    year_built: Optional[int] = Field(default=None, alias="yearBuilt", ge=0)
    url: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        allow_inf_nan=False,
    )

    @field_validator("property_type", mode="before")
    @classmethod
    def _parse_property_type(cls, v: Any) -> PropertyType:
        return PropertyType.parse(v)

    @field_validator("price", "year_built", "url", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        return None if _blank(v) else v

    # Location strings are compared verbatim, so only these are trimmed.
    @field_validator("listing_name", "bedrooms", "bathrooms", "price", "size", "amenity_count",
                     "age", "parking_spots", "condition", "year_built", "url", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("province", "canton", "district", mode="before")
    @classmethod
    def _location_none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @model_validator(mode="before")
    @classmethod
    def _derive_age(cls, data: Any, info: ValidationInfo) -> Any:
        # Listing forms collect the construction year; age is derived from it.
        if not isinstance(data, Mapping) or not _blank(data.get("age")):
            return data
        year_built = data.get("yearBuilt", data.get("year_built"))
        if _blank(year_built):
            return data
        try:
            built = int(float(str(year_built).strip()))
        except (TypeError, ValueError, OverflowError):
            return data
        ref = (info.context or {}).get("reference_year") or datetime.date.today().year
        out = dict(data)
        out["age"] = max(0, int(ref) - built)
        return out

    def location(self) -> Tuple[str, str, str]:
        return (self.province, self.canton, self.district)

    def to_record(self) -> Dict[str, Any]:
        """camelCase dict as the listing form submits it."""
        return self.model_dump(by_alias=True, mode="json")


def parse_property(raw: Any, *, reference_year: Optional[int] = None,
                   index: Optional[int] = None) -> Property:
    """Validate one raw record. Raises :class:`PropertyParseError`."""
    if isinstance(raw, Property):
        return raw
    if not isinstance(raw, Mapping):
        raise PropertyParseError({"record": f"expected an object, got {type(raw).__name__}"}, index=index)
    context = {"reference_year": reference_year} if reference_year else None
    try:
        return Property.model_validate(raw, context=context)
    except ValidationError as e:
        name = raw.get("listingName") or raw.get("listing_name")
        raise PropertyParseError(collect_field_errors(e.errors()), index=index,
                                 listing_name=str(name) if name else None) from e


def parse_properties(rows: Iterable[Any], *, reference_year: Optional[int] = None,
                     default_names: bool = True) -> Tuple[List[Property], List[PropertyParseError]]:
    """Validate a list of comparables, keeping the good ones.

    Returns ``(properties, errors)``; each error carries the record index.
    With ``default_names`` a record without a listing name is labelled
    ``"Listing <n>"`` (1-based) like the listing form does.
    """
    good: List[Property] = []
    bad: List[PropertyParseError] = []
    for i, row in enumerate(rows):
        if default_names and isinstance(row, Mapping) and _blank(row.get("listingName")) and _blank(row.get("listing_name")):
            row = {**row, "listingName": f"Listing {i + 1}"}
        try:
            good.append(parse_property(row, reference_year=reference_year, index=i))
        except PropertyParseError as e:
            bad.append(e)
    return good, bad


@dataclass(frozen=True)
class MatchResult:
    listing_name: str
    primary_score: float
    secondary_score: float
    final_score: float

    def as_dict(self, precision: Optional[int] = 2) -> Dict[str, Any]:
        def r(v: float) -> float:
            return round(v, precision) if precision is not None else v
        return {
            'listingName': self.listing_name,
            'primaryScore': r(self.primary_score),
            'secondaryScore': r(self.secondary_score),
            'finalScore': r(self.final_score),
        }


@dataclass(frozen=True)
class PricingStats:
    """Price per unit area summary of the valid comparables."""

    lower_quartile: float
    median: float
    upper_quartile: float
    min: float
    max: float
    average: float
    count: int

    def as_dict(self, precision: Optional[int] = 2) -> Dict[str, Any]:
        def r(v: float) -> float:
            return round(v, precision) if precision is not None else v
        return {
            'lowerQuartile': r(self.lower_quartile),
            'median': r(self.median),
            'upperQuartile': r(self.upper_quartile),
            'min': r(self.min),
            'max': r(self.max),
            'average': r(self.average),
            'count': self.count,
        }


@dataclass(frozen=True)
class PriceRange:
    """Suggested total price for a property of a given size."""

    low: float
    mid: float
    high: float
    size: float

    def as_dict(self, precision: Optional[int] = 2) -> Dict[str, Any]:
        def r(v: float) -> float:
            return round(v, precision) if precision is not None else v
        return {'low': r(self.low), 'mid': r(self.mid), 'high': r(self.high), 'size': self.size}


@dataclass(frozen=True)
class Evaluation:
    matches: List[MatchResult] = field(default_factory=list)
    pricing: Optional[PricingStats] = None
    price_range: Optional[PriceRange] = None

    def as_dict(self, precision: Optional[int] = 2) -> Dict[str, Any]:
        return {
            'matches': [m.as_dict(precision) for m in self.matches],
            'pricing': self.pricing.as_dict(precision) if self.pricing else None,
            'priceRange': self.price_range.as_dict(precision) if self.price_range else None,
        }
