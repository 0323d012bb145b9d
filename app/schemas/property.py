from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from app.models.property import PropertyType

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Coordinates(CamelModel):
    longitude: Optional[float] = None
    latitude: Optional[float] = None

class LocationResponse(CamelModel):
    id: int
    address: str
    city: str
    state: str
    country: str
    postal_code: str
    coordinates: Coordinates

class PropertyResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price_per_month: float
    security_deposit: Optional[float] = None
    application_fee: Optional[float] = None
    cleaning_fee: Optional[float] = None
    photo_urls: List[str] = []
    images: List[str] = []
    amenities: List[str] = []
    highlights: List[str] = []
    is_pets_allowed: bool = False
    is_parking_included: bool = False
    beds: int
    baths: float
    square_feet: int
    property_type: PropertyType
    status: Optional[str] = None
    posted_date: Optional[datetime] = None
    average_rating: Optional[float] = None
    number_of_reviews: Optional[int] = None
    location_id: int
    manager_cognito_id: Optional[str] = None
    location: LocationResponse

class LeaseResponse(CamelModel):
    id: int
    start_date: datetime
    end_date: datetime
    rent: float
    deposit: float
    property_id: int
    tenant_cognito_id: str
