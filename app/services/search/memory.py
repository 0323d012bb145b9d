"""Evaluate search predicates against rows already held in memory.

Rows use the same shape the SQL renderer returns: stored column names at the
top level and a ``location`` mapping with ``coordinates``. Lease start dates
are read from an optional ``leases`` list on the row.
"""

from datetime import date, datetime, time, timezone
import math
from typing import Callable, Dict, List, Mapping

from app.services.search.predicates import GeoPoint, Predicate, PredicateKind, RadiusQuery

EARTH_RADIUS_KM = 6371.0

Row = Mapping[str, object]
Matcher = Callable[[Row], bool]


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    p1 = math.radians(a.latitude)
    p2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(p1) * math.cos(p2) * (math.sin(dlon / 2) ** 2)
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def _row_point(row: Row) -> GeoPoint | None:
    coordinates = (row.get("location") or {}).get("coordinates") or {}
    lat, lng = coordinates.get("latitude"), coordinates.get("longitude")
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=float(lat), longitude=float(lng))


def _as_datetime(value) -> datetime:
    if not isinstance(value, datetime):
        if isinstance(value, date):
            value = datetime.combine(value, time.min)
        else:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    # Lease dates are stored as naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _at_least(column: str, bound) -> Matcher:
    return lambda row: row.get(column) is not None and row[column] >= bound


def _at_most(column: str, bound) -> Matcher:
    return lambda row: row.get(column) is not None and row[column] <= bound


def _within_radius(radius: RadiusQuery) -> Matcher:
    def match(row: Row) -> bool:
        point = _row_point(row)
        return point is not None and haversine_km(point, radius.point) <= radius.radius_km
    return match


def _available_from(value: date) -> Matcher:
    cutoff = datetime.combine(value, time.min)

    def match(row: Row) -> bool:
        return any(_as_datetime(lease["startDate"]) <= cutoff for lease in row.get("leases") or [])
    return match


def _property_type(value) -> Matcher:
    return lambda row: str(getattr(row.get("propertyType"), "value", row.get("propertyType"))) == value.value


_MATCHERS: Dict[PredicateKind, Callable[[object], Matcher]] = {
    PredicateKind.FAVORITE_IDS: lambda ids: (lambda row: row.get("id") in ids),
    PredicateKind.PRICE_MIN: lambda v: _at_least("pricePerMonth", v),
    PredicateKind.PRICE_MAX: lambda v: _at_most("pricePerMonth", v),
    PredicateKind.BEDS_MIN: lambda v: _at_least("beds", v),
    PredicateKind.BATHS_MIN: lambda v: _at_least("baths", v),
    PredicateKind.SQUARE_FEET_MIN: lambda v: _at_least("squareFeet", v),
    PredicateKind.SQUARE_FEET_MAX: lambda v: _at_most("squareFeet", v),
    PredicateKind.PROPERTY_TYPE: _property_type,
    PredicateKind.AMENITIES_CONTAIN: lambda tags: (lambda row: set(tags) <= set(row.get("amenities") or [])),
    PredicateKind.AVAILABLE_FROM: _available_from,
    PredicateKind.WITHIN_RADIUS: _within_radius,
}


def compile_matcher(predicates: List[Predicate]) -> Matcher:
    matchers = [_MATCHERS[p.kind](p.value) for p in predicates]
    return lambda row: all(m(row) for m in matchers)
