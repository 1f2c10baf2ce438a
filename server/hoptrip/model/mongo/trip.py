"""
Trip Model - MongoDB Pydantic Schema
=====================================

Purpose:
- Define the trip aggregate stored in the `trips` collection
- Validate request payloads before they reach the service layer
- Keep the camelCase wire/document format (tripName, placesToVisit, ...)

Structure:
- Trip: root document (host, travelers, budget, status, visibility, tags)
  - itinerary: one ItineraryDay per calendar day, each with Activities
  - placesToVisit: Places resolved through the place lookup provider
  - expenses: Expenses (paidBy / splitBy are free text)
"""

from typing import List, Optional
from datetime import datetime, date, timezone
from enum import Enum
from urllib.parse import urlparse

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def new_object_id() -> str:
    """Id for embedded sub-documents (activities, places, expenses)."""
    return str(ObjectId())


class TripStatusEnum(str, Enum):
    """Trip status lifecycle."""
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class VisibilityEnum(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"
    FRIENDS = "friends"


class MongoModel(BaseModel):
    """Base model: snake_case attributes, camelCase document keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_document(self) -> dict:
        """Dump with document keys, ready for insert/$push."""
        return self.model_dump(by_alias=True)


# ============================================
# Geometry & reviews
# ============================================

class LatLng(MongoModel):
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


class Viewport(MongoModel):
    northeast: LatLng
    southwest: LatLng


class Geometry(MongoModel):
    """Point plus optional bounding viewport."""
    location: Optional[LatLng] = None
    viewport: Optional[Viewport] = None


class Review(MongoModel):
    author_name: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    text: Optional[str] = None


# ============================================
# Nested collections
# ============================================

class Activity(MongoModel):
    """Activity nested in an itinerary day."""
    id: str = Field(default_factory=new_object_id, alias="_id")
    name: str = Field(..., min_length=1, max_length=200)
    date: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    opening_hours: Optional[List[str]] = None
    photos: List[str] = Field(default_factory=list)
    reviews: List[Review] = Field(default_factory=list)
    brief_description: Optional[str] = None
    geometry: Optional[Geometry] = None


class Place(Activity):
    """Place to visit: Activity fields plus address and place types."""
    formatted_address: Optional[str] = Field(None, alias="formatted_address")
    types: List[str] = Field(default_factory=list)


class ItineraryDay(MongoModel):
    """One calendar day of the trip (date is YYYY-MM-DD)."""
    date: str
    activities: List[Activity] = Field(default_factory=list)


class Expense(MongoModel):
    """
    Expense entry.

    paidBy / splitBy are free-text identifiers; they are not checked
    against the users collection.
    """
    id: str = Field(default_factory=new_object_id, alias="_id")
    category: str = Field(..., min_length=1, max_length=50)
    price: float = Field(..., ge=0)
    paid_by: str = Field(..., min_length=1)
    split_by: str = Field(..., min_length=1)

    @field_validator('category', 'paid_by', 'split_by', mode='before')
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('price', mode='before')
    @classmethod
    def reject_bool_price(cls, v):
        if isinstance(v, bool):
            raise ValueError("Price must be a number")
        return v


# ============================================
# Trip document
# ============================================

class Trip(MongoModel):
    """
    Trip aggregate for MongoDB.

    startDate / endDate are display strings ("01 June 2024"),
    startDay / endDay are weekday names, itinerary dates are ISO.
    host is stored apart from travelers; create() also enrolls the host
    into travelers.
    """

    trip_name: str = Field(..., min_length=1, max_length=100)
    start_date: str
    end_date: str
    start_day: Optional[str] = None
    end_day: Optional[str] = None
    background: Optional[str] = None

    host: str
    travelers: List[str] = Field(default_factory=list)

    itinerary: List[ItineraryDay] = Field(default_factory=list)
    places_to_visit: List[Place] = Field(default_factory=list)
    expenses: List[Expense] = Field(default_factory=list)

    budget: Optional[float] = Field(None, ge=0)
    status: TripStatusEnum = Field(default=TripStatusEnum.PLANNING)
    visibility: VisibilityEnum = Field(default=VisibilityEnum.PRIVATE)
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))


class TripStats(MongoModel):
    """Derived read-only view of a trip."""
    total_places: int
    total_activities: int
    total_expenses: float
    budget_remaining: Optional[float] = None
    traveler_count: int
    days_count: int


# ============================================
# Request payloads
# ============================================

def _check_background_url(v):
    if v is None:
        return v
    parsed = urlparse(v.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Background must be a valid URL")
    return v.strip()


class TripCreateRequest(MongoModel):
    """Request payload for creating a trip. Dates are ISO (YYYY-MM-DD)."""
    trip_name: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date
    start_day: Optional[str] = None
    end_day: Optional[str] = None
    background: str

    @field_validator('trip_name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('background')
    @classmethod
    def validate_background(cls, v):
        return _check_background_url(v)

    @model_validator(mode='after')
    def check_date_order(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class TripUpdateRequest(MongoModel):
    """
    Whitelisted patch for a trip. Unknown keys are ignored.

    When either date is present the itinerary is re-derived from the new range.
    """
    trip_name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_day: Optional[str] = None
    end_day: Optional[str] = None
    status: Optional[TripStatusEnum] = None
    visibility: Optional[VisibilityEnum] = None
    tags: Optional[List[str]] = None
    background: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator('trip_name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator('background')
    @classmethod
    def validate_background(cls, v):
        return _check_background_url(v)

    @model_validator(mode='after')
    def check_date_order(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class ActivityCreateRequest(Activity):
    """Activity payload; `_id` is always generated server-side."""
    model_config = ConfigDict(extra='ignore')


class ExpenseCreateRequest(Expense):
    """Expense payload; `_id` is always generated server-side."""
    model_config = ConfigDict(extra='ignore')


class BudgetRequest(MongoModel):
    budget: float = Field(..., ge=0)

    @field_validator('budget', mode='before')
    @classmethod
    def reject_bool_budget(cls, v):
        if isinstance(v, bool):
            raise ValueError("Budget must be a number")
        return v


class AddPlaceRequest(MongoModel):
    place_id: str = Field(..., min_length=1, max_length=300)


class AddTravelerRequest(MongoModel):
    email: str = Field(..., min_length=3, max_length=320)
