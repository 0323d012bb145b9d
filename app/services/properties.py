from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger
from redis.asyncio import Redis
from typing import Iterable, List
import enum
import json

from app.config import settings
from app.db import SessionLocal
from app.errors import PropertyNotFoundError, QueryExecutionError, ValidationError
from app.models.property import Lease
from app.schemas.search import PropertySearchFilter
from app.services.search.memory import compile_matcher
from app.services.search.predicates import build_predicates, describe
from app.services.search.sql import compile_detail, compile_search, statement_text

logger = get_logger()

HEALTH_CACHE_KEY = "cached_health_status"

# Initialize Redis client lazily for reuse
redis_client: Redis | None = None

async def get_redis_client():
    global redis_client
    if redis_client is None:
        redis_client = Redis.from_url(settings.REDIS_URL)
    return redis_client

def _normalize_row(row) -> dict:
    """Turn a result mapping into plain JSON-ready values.
    - Enum columns become their string value
    - Null array columns become empty lists
    """
    data = dict(row)
    for key, value in data.items():
        if isinstance(value, enum.Enum):
            data[key] = value.value
    for key in ("photoUrls", "images", "amenities", "highlights"):
        if key in data and data[key] is None:
            data[key] = []
    location = data.get("location")
    if isinstance(location, str):
        data["location"] = json.loads(location)
    return data

async def _execute(session: AsyncSession, stmt, action: str, **context):
    sql = statement_text(stmt)
    try:
        result = await session.execute(stmt)
        return result.mappings().all()
    except (SQLAlchemyError, OSError) as e:
        # Connection failures from the driver surface as OSError, unwrapped
        logger.error(f"{action} failed", statement=sql, error=f"{type(e).__name__}: {e}", **context)
        raise QueryExecutionError(f"{action} failed", statement=sql) from e

def _radius(radius_km: float | None) -> float:
    if radius_km is None:
        return settings.SEARCH_RADIUS_KM
    if radius_km <= 0:
        raise ValidationError("radius_km", "must be greater than 0")
    return radius_km

async def search_properties(
    session: AsyncSession,
    search: PropertySearchFilter,
    radius_km: float | None = None,
) -> List[dict]:
    predicates = build_predicates(search, _radius(radius_km))
    stmt = compile_search(predicates)
    rows = await _execute(session, stmt, "Property search", predicates=describe(predicates))
    properties = [_normalize_row(row) for row in rows]
    logger.info("Searched properties", predicates=describe(predicates), total_properties=len(properties))
    return properties

def filter_properties(
    rows: Iterable[dict],
    search: PropertySearchFilter,
    radius_km: float | None = None,
) -> List[dict]:
    """Apply a search filter to rows that are already loaded."""
    matches = compile_matcher(build_predicates(search, _radius(radius_km)))
    return [row for row in rows if matches(row)]

async def get_property(session: AsyncSession, property_id: int) -> dict:
    rows = await _execute(session, compile_detail(property_id), "Property lookup", property_id=property_id)
    if not rows:
        raise PropertyNotFoundError(property_id)
    prop = _normalize_row(rows[0])
    logger.info(
        "Fetched property",
        property_id=property_id,
        photo_urls=len(prop.get("photoUrls", [])),
        images=len(prop.get("images", [])),
    )
    return prop

async def get_property_leases(session: AsyncSession, property_id: int) -> List[dict]:
    columns = [column.label(column.name) for column in Lease.__table__.columns]
    stmt = select(*columns).where(Lease.property_id == property_id)
    rows = await _execute(session, stmt, "Lease lookup", property_id=property_id)
    logger.info("Fetched property leases", property_id=property_id, total_leases=len(rows))
    return [_normalize_row(row) for row in rows]

async def _check_database() -> dict:
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
            postgis = (await session.execute(text("SELECT postgis_version()"))).scalar()
        return {"status": "ok", "postgis": postgis}
    except Exception as e:
        return {"status": "error", "error": f"{type(e).__name__}: {e}"}

async def _check_redis(redis: Redis) -> dict:
    try:
        await redis.ping()
        return {"status": "ok"}
    except Exception as e:
        return {"status": "error", "error": f"{type(e).__name__}: {e}"}

async def get_health(verbose: bool = False) -> dict:
    redis = await get_redis_client()

    if not verbose: # Only serve from cache if not verbose
        try:
            cached_health = await redis.get(HEALTH_CACHE_KEY)
        except Exception as e:
            logger.warning("Health cache unavailable", error=f"{type(e).__name__}: {e}")
            cached_health = None
        if cached_health:
            logger.info("Returning cached health status")
            return json.loads(cached_health)

    health = {
        "database": await _check_database(),
        "cache": await _check_redis(redis),
    }
    # The cache only backs rate limiting and this endpoint; the database is required
    if health["database"]["status"] != "ok":
        overall = "down"
    elif health["cache"]["status"] != "ok":
        overall = "degraded"
    else:
        overall = "ok"
    health["overall_status"] = overall

    # Cache the non-verbose form; verbose-only fields are added afterwards
    if health["cache"]["status"] == "ok":
        await redis.setex(HEALTH_CACHE_KEY, settings.HEALTH_CACHE_SECONDS, json.dumps(health))
    if verbose:
        health = {**health, "settings": {"search_radius_km": settings.SEARCH_RADIUS_KM}}
    return health
