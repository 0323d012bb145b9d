from datetime import date, datetime
from sqlalchemy.dialects import postgresql
from app.models.property import PropertyType
from app.schemas.search import PropertySearchFilter
from app.services.search.predicates import GeoPoint, Predicate, PredicateKind, RadiusQuery, build_predicates
from app.services.search.sql import compile_detail, compile_search, statement_text

RADIUS_KM = 1000.0

def compiled(**params):
    search = PropertySearchFilter.from_query_params(params)
    stmt = compile_search(build_predicates(search, RADIUS_KM))
    result = stmt.compile(dialect=postgresql.dialect())
    return str(result), result.params

def test_unset_filter_has_no_predicates_and_no_where():
    assert build_predicates(PropertySearchFilter(), RADIUS_KM) == []
    sql, _ = compiled()
    assert "WHERE" not in sql
    assert 'FROM "Property" JOIN "Location" ON "Property"."locationId" = "Location".id' in sql
    assert "ORDER BY" not in sql

def test_rows_embed_location_with_coordinates():
    sql, _ = compiled()
    assert "json_build_object" in sql
    assert "ST_X(geometry(\"Location\".coordinates))" in sql
    assert "ST_Y(geometry(\"Location\".coordinates))" in sql
    assert "AS location" in sql
    assert '"Property"."pricePerMonth" AS "pricePerMonth"' in sql

def test_predicates_follow_filter_order():
    search = PropertySearchFilter.from_query_params({
        "latitude": "1", "longitude": "2", "availableFrom": "2024-01-01",
        "amenities": "WiFi", "propertyType": "Rooms", "squareFeetMax": "900",
        "squareFeetMin": "100", "baths": "1", "beds": "1", "priceMax": "9",
        "priceMin": "1", "favoriteIds": "4",
    })
    kinds = [p.kind for p in build_predicates(search, RADIUS_KM)]
    assert kinds == list(PredicateKind)

def test_price_bed_and_bath_bounds_are_inclusive():
    sql, params = compiled(priceMin="1000", priceMax="2000", beds="2", baths="1.5")
    assert '"Property"."pricePerMonth" >= %(' in sql
    assert '"Property"."pricePerMonth" <= %(' in sql
    assert '"Property".beds >= %(' in sql
    assert '"Property".baths >= %(' in sql
    for value in (1000.0, 2000.0, 2, 1.5):
        assert value in params.values()

def test_square_feet_range():
    sql, params = compiled(squareFeetMin="500", squareFeetMax="1500")
    assert '"Property"."squareFeet" >= %(' in sql
    assert '"Property"."squareFeet" <= %(' in sql
    assert 500.0 in params.values()
    assert 1500.0 in params.values()

def test_any_sentinel_compiles_like_unset():
    base_sql, base_params = compiled()
    for field in ("beds", "baths", "propertyType", "availableFrom"):
        sql, params = compiled(**{field: "any"})
        assert sql == base_sql
        assert params == base_params

def test_favorite_ids_are_bound_as_a_list():
    sql, params = compiled(favoriteIds="3,5")
    assert '"Property".id IN' in sql
    assert [3, 5] in params.values()

def test_property_type_is_bound():
    sql, params = compiled(propertyType="Cottage")
    assert '"Property"."propertyType" = %(' in sql
    assert PropertyType.Cottage in params.values()

def test_amenities_use_array_containment():
    sql, params = compiled(amenities="WiFi,Parking,WiFi")
    assert '"Property".amenities @> %(' in sql
    assert ["WiFi", "Parking"] in params.values()

def test_available_from_is_an_exists_subquery():
    sql, params = compiled(availableFrom="2024-05-01")
    assert "EXISTS (SELECT" in sql
    assert '"Lease"."propertyId" = "Property".id' in sql
    assert '"Lease"."startDate" <= %(' in sql
    assert "JOIN \"Lease\"" not in sql
    assert datetime(2024, 5, 1) in params.values()

def test_radius_is_a_geography_distance_in_metres():
    sql, params = compiled(latitude="30.2672", longitude="-97.7431")
    assert "ST_DWithin(\"Location\".coordinates, geography(ST_SetSRID(ST_MakePoint(" in sql
    values = list(params.values())
    assert -97.7431 in values
    assert 30.2672 in values
    assert 4326 in values
    assert RADIUS_KM * 1000 in values

def test_radius_is_configurable():
    predicates = build_predicates(PropertySearchFilter(latitude=1.0, longitude=2.0), 25.0)
    assert predicates == [
        Predicate(PredicateKind.WITHIN_RADIUS, RadiusQuery(point=GeoPoint(1.0, 2.0), radius_km=25.0))
    ]
    params = compile_search(predicates).compile(dialect=postgresql.dialect()).params
    assert 25000.0 in params.values()

def test_lone_coordinate_adds_no_radius():
    sql, _ = compiled(latitude="30.2672")
    assert "ST_DWithin" not in sql
    assert "WHERE" not in sql

def test_user_values_never_appear_in_sql_text():
    hostile = "Pool'); DROP TABLE \"Property\";--"
    search = PropertySearchFilter(amenities=[hostile], available_from=date(2024, 1, 1))
    sql = statement_text(compile_search(build_predicates(search, RADIUS_KM)))
    assert "DROP TABLE" not in sql
    assert "2024" not in sql

def test_detail_query_selects_one_id():
    sql = statement_text(compile_detail(42))
    assert '"Property".id = %(' in sql
    assert "42" not in sql
