from fastapi import APIRouter, Depends, Request
from fastapi_limiter.depends import RateLimiter
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.config import settings
from app.db import get_session
from app.schemas.property import LeaseResponse, PropertyResponse
from app.schemas.search import PropertySearchFilter
from app.services import properties as property_service

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

search_rate_limiter = RateLimiter(
    times=settings.SEARCH_RATE_LIMIT_TIMES,
    seconds=settings.SEARCH_RATE_LIMIT_SECONDS,
)

@router.get("", response_model=List[PropertyResponse], dependencies=[Depends(search_rate_limiter)])
@router.get("/", response_model=List[PropertyResponse], dependencies=[Depends(search_rate_limiter)], include_in_schema=False)
async def search_properties(request: Request, session: AsyncSession = Depends(get_session)):
    """
    Public search over all properties.

    Accepts favoriteIds, priceMin, priceMax, beds, baths, propertyType,
    squareFeetMin, squareFeetMax, amenities, availableFrom, latitude and
    longitude as query parameters. "any" leaves beds, baths, propertyType and
    availableFrom unconstrained.
    """
    search = PropertySearchFilter.from_query_params(request.query_params)
    return await property_service.search_properties(session, search)

@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: int, session: AsyncSession = Depends(get_session)):
    return await property_service.get_property(session, property_id)

@router.get("/{property_id}/leases", response_model=List[LeaseResponse])
async def get_property_leases(property_id: int, session: AsyncSession = Depends(get_session)):
    return await property_service.get_property_leases(session, property_id)
