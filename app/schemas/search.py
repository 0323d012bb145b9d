from pydantic import BaseModel, Field
from typing import Any, List, Mapping, Optional
from datetime import date, datetime
import math
from app.errors import ValidationError
from app.models.property import PropertyType

# Wire-level placeholder the listing UI sends for "no constraint"
ANY = "any"

class PropertySearchFilter(BaseModel):
    """Search constraints for one request. Every field is optional and unset
    fields impose no constraint; the ``"any"`` placeholder never reaches here."""

    favorite_ids: List[int] = Field(default_factory=list)
    price_min: Optional[float] = Field(None, ge=0)
    price_max: Optional[float] = Field(None, ge=0)
    beds: Optional[int] = None
    baths: Optional[float] = None
    property_type: Optional[PropertyType] = None
    square_feet_min: Optional[float] = Field(None, ge=0)
    square_feet_max: Optional[float] = Field(None, ge=0)
    amenities: List[str] = Field(default_factory=list)
    available_from: Optional[date] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_point(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "PropertySearchFilter":
        """Parse the raw query string of ``GET /properties``.

        Raises ``ValidationError`` naming the first offending field.
        """
        latitude = _parse_coordinate(params, "latitude", 90.0)
        longitude = _parse_coordinate(params, "longitude", 180.0)
        # Both or neither
        if latitude is None or longitude is None:
            latitude = longitude = None

        return cls(
            favorite_ids=[_to_int("favoriteIds", v) for v in _get_list(params, "favoriteIds")],
            price_min=_parse_amount(params, "priceMin"),
            price_max=_parse_amount(params, "priceMax"),
            beds=_parse_int(params, "beds"),
            baths=_parse_float(params, "baths"),
            property_type=_parse_property_type(params),
            square_feet_min=_parse_amount(params, "squareFeetMin"),
            square_feet_max=_parse_amount(params, "squareFeetMax"),
            amenities=_get_list(params, "amenities", allow_any=True),
            available_from=_parse_date(params, "availableFrom"),
            latitude=latitude,
            longitude=longitude,
        )


def _get(params: Mapping[str, Any], name: str, allow_any: bool = False) -> Optional[str]:
    raw = params.get(name)
    if raw is None:
        return None
    raw = str(raw).strip()
    if not raw or (allow_any and raw == ANY):
        return None
    return raw

def _get_list(params: Mapping[str, Any], name: str, allow_any: bool = False) -> List[str]:
    # Starlette QueryParams keep repeated keys; plain dicts may hold a list
    if hasattr(params, "getlist"):
        raw_values = params.getlist(name)
    else:
        raw = params.get(name)
        raw_values = raw if isinstance(raw, (list, tuple)) else ([] if raw is None else [raw])
    items: List[str] = []
    for raw in raw_values:
        if allow_any and str(raw).strip() == ANY:
            continue
        for part in str(raw).split(","):
            part = part.strip()
            if part:
                items.append(part)
    return items

def _to_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(name, f"expected a number, got {raw!r}")
    if not math.isfinite(value):
        raise ValidationError(name, f"expected a finite number, got {raw!r}")
    return value

def _to_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(name, f"expected an integer, got {raw!r}")

def _parse_float(params, name: str) -> Optional[float]:
    raw = _get(params, name, allow_any=True)
    return None if raw is None else _to_float(name, raw)

def _parse_int(params, name: str) -> Optional[int]:
    raw = _get(params, name, allow_any=True)
    return None if raw is None else _to_int(name, raw)

def _parse_amount(params, name: str) -> Optional[float]:
    raw = _get(params, name)
    if raw is None:
        return None
    value = _to_float(name, raw)
    if value < 0:
        raise ValidationError(name, "must be greater than or equal to 0")
    return value

def _parse_property_type(params) -> Optional[PropertyType]:
    raw = _get(params, "propertyType", allow_any=True)
    if raw is None:
        return None
    try:
        return PropertyType(raw)
    except ValueError:
        allowed = ", ".join(t.value for t in PropertyType)
        raise ValidationError("propertyType", f"unknown property type {raw!r}; expected one of {allowed}")

def _parse_date(params, name: str) -> Optional[date]:
    raw = _get(params, name, allow_any=True)
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        pass
    try:
        # Clients sometimes send a full ISO timestamp
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(name, f"expected an ISO date, got {raw!r}")

def _parse_coordinate(params, name: str, bound: float) -> Optional[float]:
    raw = _get(params, name)
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        # A coordinate that is not a number disables the geo filter
        return None
    if not math.isfinite(value):
        return None
    if abs(value) > bound:
        raise ValidationError(name, f"must be between -{bound:g} and {bound:g}")
    return value
