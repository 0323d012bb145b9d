import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from httpx import ASGITransport, AsyncClient
from app.main import app
from app.db import get_session
from app.routers.properties import search_rate_limiter


def make_result(rows):
    result = MagicMock()
    result.mappings.return_value.all.return_value = rows
    return result


def make_property_row(**overrides):
    row = {
        "id": 1,
        "name": "Sunny loft",
        "description": "Top floor, lots of light",
        "pricePerMonth": 1500.0,
        "securityDeposit": 500.0,
        "applicationFee": 50.0,
        "cleaningFee": 0.0,
        "photoUrls": None,
        "images": [],
        "amenities": ["WiFi", "Parking"],
        "highlights": [],
        "isPetsAllowed": True,
        "isParkingIncluded": True,
        "beds": 2,
        "baths": 1.5,
        "squareFeet": 900,
        "propertyType": "Apartment",
        "status": "Available",
        "postedDate": None,
        "averageRating": 4.5,
        "numberOfReviews": 12,
        "locationId": 7,
        "managerCognitoId": "manager-1",
        "location": {
            "id": 7,
            "address": "1 Main St",
            "city": "Austin",
            "state": "TX",
            "country": "US",
            "postalCode": "78701",
            "coordinates": {"longitude": -97.7431, "latitude": 30.2672},
        },
    }
    row.update(overrides)
    return row


@pytest.fixture
def session():
    fake = MagicMock()
    fake.execute = AsyncMock(return_value=make_result([]))
    return fake


@pytest_asyncio.fixture
async def client(session):
    async def override_session():
        yield session

    async def no_rate_limit():
        return None

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[search_rate_limiter] = no_rate_limit
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
