"""Render search predicates as one PostgreSQL/PostGIS statement."""

from datetime import datetime, time
from typing import Callable, Dict, List

from sqlalchemy import JSON, Select, and_, exists, func, select
from sqlalchemy.dialects import postgresql
from sqlalchemy.sql.elements import ColumnElement

from app.models.property import Lease, Location, Property
from app.services.search.predicates import Predicate, PredicateKind, RadiusQuery

_METRES_PER_KM = 1000.0


def _coordinate_object() -> ColumnElement:
    point = func.geometry(Location.coordinates)
    return func.json_build_object(
        "longitude", func.ST_X(point),
        "latitude", func.ST_Y(point),
    )


def location_object() -> ColumnElement:
    """``location`` as a JSON object with plain longitude/latitude numbers."""
    return func.json_build_object(
        "id", Location.id,
        "address", Location.address,
        "city", Location.city,
        "state", Location.state,
        "country", Location.country,
        "postalCode", Location.postal_code,
        "coordinates", _coordinate_object(),
        type_=JSON,
    )


def property_columns() -> List[ColumnElement]:
    # Keyed by the stored column names so rows read like the public JSON
    return [column.label(column.name) for column in Property.__table__.columns]


def within_radius(radius: RadiusQuery) -> ColumnElement:
    origin = func.ST_SetSRID(func.ST_MakePoint(radius.point.longitude, radius.point.latitude), 4326)
    return func.ST_DWithin(
        Location.coordinates,
        func.geography(origin),
        radius.radius_km * _METRES_PER_KM,
    )


def _available_from(value) -> ColumnElement:
    cutoff = datetime.combine(value, time.min)
    return exists().where(
        Lease.property_id == Property.id,
        Lease.start_date <= cutoff,
    )


_RENDERERS: Dict[PredicateKind, Callable[[object], ColumnElement]] = {
    PredicateKind.FAVORITE_IDS: lambda ids: Property.id.in_(list(ids)),
    PredicateKind.PRICE_MIN: lambda v: Property.price_per_month >= v,
    PredicateKind.PRICE_MAX: lambda v: Property.price_per_month <= v,
    PredicateKind.BEDS_MIN: lambda v: Property.beds >= v,
    PredicateKind.BATHS_MIN: lambda v: Property.baths >= v,
    PredicateKind.SQUARE_FEET_MIN: lambda v: Property.square_feet >= v,
    PredicateKind.SQUARE_FEET_MAX: lambda v: Property.square_feet <= v,
    PredicateKind.PROPERTY_TYPE: lambda v: Property.property_type == v,
    PredicateKind.AMENITIES_CONTAIN: lambda tags: Property.amenities.contains(list(tags)),
    PredicateKind.AVAILABLE_FROM: _available_from,
    PredicateKind.WITHIN_RADIUS: within_radius,
}


def render_predicate(predicate: Predicate) -> ColumnElement:
    return _RENDERERS[predicate.kind](predicate.value)


def compile_search(predicates: List[Predicate]) -> Select:
    stmt = (
        select(*property_columns(), location_object().label("location"))
        .select_from(Property)
        .join(Location, Property.location_id == Location.id)
    )
    if predicates:
        stmt = stmt.where(and_(*[render_predicate(p) for p in predicates]))
    return stmt


def compile_detail(property_id: int) -> Select:
    return compile_search([]).where(Property.id == property_id)


def statement_text(stmt) -> str:
    """SQL as sent to PostgreSQL, with placeholders in place of values."""
    return str(stmt.compile(dialect=postgresql.dialect()))
