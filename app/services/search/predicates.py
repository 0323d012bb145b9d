"""Search filters as a flat list of typed predicates.

A filter is turned into zero or more ``Predicate`` values, one per active
constraint, in a fixed order. Renderers (``sql``, ``memory``) turn the same
list into a SQL WHERE clause or a Python row matcher, and AND them together.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from app.schemas.search import PropertySearchFilter


class PredicateKind(str, Enum):
    FAVORITE_IDS = "favorite_ids"
    PRICE_MIN = "price_min"
    PRICE_MAX = "price_max"
    BEDS_MIN = "beds_min"
    BATHS_MIN = "baths_min"
    SQUARE_FEET_MIN = "square_feet_min"
    SQUARE_FEET_MAX = "square_feet_max"
    PROPERTY_TYPE = "property_type"
    AMENITIES_CONTAIN = "amenities_contain"
    AVAILABLE_FROM = "available_from"
    WITHIN_RADIUS = "within_radius"


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class RadiusQuery:
    point: GeoPoint
    radius_km: float


@dataclass(frozen=True)
class Predicate:
    kind: PredicateKind
    value: Any


def build_predicates(search: PropertySearchFilter, radius_km: float) -> List[Predicate]:
    if radius_km <= 0:
        raise ValueError("radius_km must be positive")

    predicates: List[Predicate] = []

    def add(kind: PredicateKind, value: Any) -> None:
        predicates.append(Predicate(kind, value))

    if search.favorite_ids:
        add(PredicateKind.FAVORITE_IDS, tuple(search.favorite_ids))
    if search.price_min is not None:
        add(PredicateKind.PRICE_MIN, search.price_min)
    if search.price_max is not None:
        add(PredicateKind.PRICE_MAX, search.price_max)
    if search.beds is not None:
        add(PredicateKind.BEDS_MIN, search.beds)
    if search.baths is not None:
        add(PredicateKind.BATHS_MIN, search.baths)
    if search.square_feet_min is not None:
        add(PredicateKind.SQUARE_FEET_MIN, search.square_feet_min)
    if search.square_feet_max is not None:
        add(PredicateKind.SQUARE_FEET_MAX, search.square_feet_max)
    if search.property_type is not None:
        add(PredicateKind.PROPERTY_TYPE, search.property_type)
    if search.amenities:
        # Containment is order and duplicate insensitive
        add(PredicateKind.AMENITIES_CONTAIN, tuple(dict.fromkeys(search.amenities)))
    if search.available_from is not None:
        add(PredicateKind.AVAILABLE_FROM, search.available_from)
    if search.has_point:
        point = GeoPoint(latitude=search.latitude, longitude=search.longitude)
        add(PredicateKind.WITHIN_RADIUS, RadiusQuery(point=point, radius_km=radius_km))

    return predicates


def describe(predicates: List[Predicate]) -> List[str]:
    """Predicate kinds only, for log lines."""
    return [p.kind.value for p in predicates]
