from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
from redis.asyncio import Redis
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from structlog import get_logger
from app.config import settings
from app.db import engine
from app.errors import PropertyNotFoundError, QueryExecutionError, ValidationError
from app.routers import properties
from app.services.properties import get_health

logger = get_logger()

app = FastAPI(title="Property Search Microservice")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

scheduler = AsyncIOScheduler()
redis_client: Redis | None = None

async def update_health_cache():
    # Non-verbose calls read the cache, so force a fresh check here
    await get_health(verbose=True)

@app.on_event("startup")
async def startup_event():
    global redis_client
    redis_client = Redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
    await FastAPILimiter.init(redis_client)
    # Run once immediately on startup
    await update_health_cache()
    # Refresh on the same cadence the cache expires
    scheduler.add_job(update_health_cache, "interval", seconds=settings.HEALTH_CACHE_SECONDS)
    scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    scheduler.shutdown()
    await FastAPILimiter.close()
    if redis_client:
        await redis_client.close()
    await engine.dispose()

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("Rejected search filter", field=exc.field, reason=exc.message)
    return JSONResponse(status_code=400, content={"detail": [exc.to_detail()]})

@app.exception_handler(QueryExecutionError)
async def query_error_handler(request: Request, exc: QueryExecutionError):
    return JSONResponse(status_code=500, content={"detail": f"Error retrieving properties: {exc}"})

@app.exception_handler(PropertyNotFoundError)
async def not_found_handler(request: Request, exc: PropertyNotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Property not found"})

@app.get("/health")
async def check_health(verbose: bool = False):
    """Database and cache status. Use verbose=true to bypass the cached result."""
    health = await get_health(verbose=verbose)
    logger.info("Fetched health status", verbose=verbose, overall_status=health.get("overall_status"))
    return health

app.include_router(properties.router)
