from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, relationship
from geoalchemy2 import Geography
from datetime import datetime
import enum

class Base(AsyncAttrs, DeclarativeBase):
    pass

class PropertyType(str, enum.Enum):
    Rooms = "Rooms"
    Tinyhouse = "Tinyhouse"
    Apartment = "Apartment"
    Villa = "Villa"
    Townhouse = "Townhouse"
    Cottage = "Cottage"

class PropertyStatus(str, enum.Enum):
    Available = "Available"
    Closed = "Closed"
    UnderMaintenance = "UnderMaintenance"

class Location(Base):
    __tablename__ = "Location"
    id = Column(Integer, primary_key=True)
    address = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    country = Column(String, nullable=False)
    postal_code = Column("postalCode", String, nullable=False)
    # Stored as geography so distances come back in metres on the spheroid
    coordinates = Column(Geography(geometry_type="POINT", srid=4326), nullable=False)

    properties = relationship("Property", back_populates="location")

class Property(Base):
    __tablename__ = "Property"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    price_per_month = Column("pricePerMonth", Float, nullable=False)
    security_deposit = Column("securityDeposit", Float, nullable=False)
    application_fee = Column("applicationFee", Float, nullable=False)
    cleaning_fee = Column("cleaningFee", Float, default=0)
    photo_urls = Column("photoUrls", ARRAY(String), default=list)
    images = Column(ARRAY(String), default=list)
    amenities = Column(ARRAY(String), default=list)
    highlights = Column(ARRAY(String), default=list)
    is_pets_allowed = Column("isPetsAllowed", Boolean, default=False)
    is_parking_included = Column("isParkingIncluded", Boolean, default=False)
    beds = Column(Integer, nullable=False)
    baths = Column(Float, nullable=False)
    square_feet = Column("squareFeet", Integer, nullable=False)
    property_type = Column("propertyType", SAEnum(PropertyType, name="PropertyType"), nullable=False)
    status = Column(SAEnum(PropertyStatus, name="PropertyStatus"), default=PropertyStatus.Available)
    posted_date = Column("postedDate", DateTime, default=datetime.utcnow)
    average_rating = Column("averageRating", Float, default=0)
    number_of_reviews = Column("numberOfReviews", Integer, default=0)
    location_id = Column("locationId", Integer, ForeignKey("Location.id"), nullable=False)
    manager_cognito_id = Column("managerCognitoId", String, nullable=False)

    location = relationship("Location", back_populates="properties")
    leases = relationship("Lease", back_populates="property")

class Lease(Base):
    __tablename__ = "Lease"
    id = Column(Integer, primary_key=True)
    start_date = Column("startDate", DateTime, nullable=False)
    end_date = Column("endDate", DateTime, nullable=False)
    rent = Column(Float, nullable=False)
    deposit = Column(Float, nullable=False)
    property_id = Column("propertyId", Integer, ForeignKey("Property.id"), nullable=False)
    tenant_cognito_id = Column("tenantCognitoId", String, nullable=False)

    property = relationship("Property", back_populates="leases")
