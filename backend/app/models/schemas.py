"""Pydantic schemas - API request/response models

Requests carry their own snapshots (user, listings, filters); to_domain()
converts them into the dataclasses the engine works on.
"""

from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from app.exceptions import InvalidRecordError
from app.models import domain
from app.models.domain import (
    GenderPreference,
    ListingStatus,
    RoomType,
    SocialLevel,
    SortOption,
)


class CoordinatesIn(BaseModel):
    lat: float
    lng: float

    def to_domain(self) -> domain.Coordinates:
        return domain.Coordinates(lat=self.lat, lng=self.lng)


# ========== User ==========

class UserPreferencesIn(BaseModel):
    """Lifestyle/budget preferences (all optional)"""
    smoking_allowed: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    study_friendly: Optional[bool] = None
    social_level: Optional[SocialLevel] = None
    max_budget: Optional[float] = Field(default=None, ge=0, description="Monthly budget")
    preferred_room_types: Optional[list[str]] = None
    preferred_amenities: Optional[list[str]] = None

    def to_domain(self) -> domain.UserPreferences:
        return domain.UserPreferences(**self.model_dump())


class BudgetRangeIn(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)


class MatchingPreferencesIn(BaseModel):
    max_distance: Optional[float] = Field(default=None, gt=0, description="Max distance (miles)")
    same_university: bool = False
    similar_year: bool = False
    budget_range: Optional[BudgetRangeIn] = None

    def to_domain(self) -> domain.MatchingPreferences:
        budget_range = None
        if self.budget_range is not None:
            if self.budget_range.min > self.budget_range.max:
                raise InvalidRecordError(
                    f"budget_range.min ({self.budget_range.min}) exceeds max ({self.budget_range.max})"
                )
            budget_range = domain.BudgetRange(min=self.budget_range.min, max=self.budget_range.max)
        return domain.MatchingPreferences(
            max_distance=self.max_distance,
            same_university=self.same_university,
            similar_year=self.similar_year,
            budget_range=budget_range,
        )


class UserLocationIn(BaseModel):
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    coordinates: Optional[CoordinatesIn] = None

    def to_domain(self) -> domain.UserLocation:
        return domain.UserLocation(
            address=self.address,
            city=self.city,
            state=self.state,
            country=self.country,
            coordinates=self.coordinates.to_domain() if self.coordinates else None,
        )


class UserProfileIn(BaseModel):
    """Prospective tenant"""
    id: str = Field(..., min_length=1)
    name: str = ""
    university: str = Field(default="", description="University name (free text)")
    year: str = Field(default="", description="Enrollment year/level")
    location: Optional[UserLocationIn] = None
    preferences: Optional[UserPreferencesIn] = None
    matching_preferences: Optional[MatchingPreferencesIn] = None

    def to_domain(self) -> domain.UserProfile:
        return domain.UserProfile(
            id=self.id,
            name=self.name,
            university=self.university,
            year=self.year,
            location=self.location.to_domain() if self.location else None,
            preferences=self.preferences.to_domain() if self.preferences else None,
            matching_preferences=(
                self.matching_preferences.to_domain() if self.matching_preferences else None
            ),
        )


# ========== Listing ==========

class NearbyUniversityIn(BaseModel):
    name: str
    distance: float = Field(ge=0, description="Distance (miles)")


class ListingLocationIn(BaseModel):
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    latitude: float = Field(default=0.0, description="0/0 means unset")
    longitude: float = 0.0
    nearby_universities: list[NearbyUniversityIn] = Field(default_factory=list)

    def to_domain(self) -> domain.ListingLocation:
        return domain.ListingLocation(
            address=self.address,
            city=self.city,
            state=self.state,
            country=self.country,
            latitude=self.latitude,
            longitude=self.longitude,
            nearby_universities=[
                domain.NearbyUniversity(name=u.name, distance=u.distance)
                for u in self.nearby_universities
            ],
        )


class UtilitiesIn(BaseModel):
    included: bool = False
    cost: Optional[float] = Field(default=None, ge=0)


class ListingPreferencesIn(BaseModel):
    gender: Optional[GenderPreference] = None
    smoking_allowed: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    study_friendly: Optional[bool] = None


class ListingIn(BaseModel):
    """Housing listing snapshot"""
    id: str = Field(..., min_length=1)
    host_id: str
    host: Optional[UserProfileIn] = None
    title: str = ""
    description: str = ""
    price: float = Field(..., ge=0, description="Monthly price")
    location: Optional[ListingLocationIn] = None
    room_type: str = Field(
        default=RoomType.SINGLE.value,
        description="single | shared | studio | apartment (other values kept as-is)"
    )
    max_occupants: int = Field(default=1, ge=1)
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    available_from: date
    available_to: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: ListingStatus = ListingStatus.ACTIVE
    preferences: ListingPreferencesIn = Field(default_factory=ListingPreferencesIn)
    deposit: Optional[float] = Field(default=None, ge=0)
    utilities: Optional[UtilitiesIn] = None

    def to_domain(self) -> domain.Listing:
        if self.available_to is not None and self.available_to < self.available_from:
            raise InvalidRecordError(
                f"Listing {self.id}: available_to precedes available_from"
            )
        return domain.Listing(
            id=self.id,
            host_id=self.host_id,
            host=self.host.to_domain() if self.host else None,
            title=self.title,
            description=self.description,
            price=self.price,
            location=self.location.to_domain() if self.location else None,
            room_type=self.room_type,
            max_occupants=self.max_occupants,
            amenities=list(self.amenities),
            images=list(self.images),
            available_from=self.available_from,
            available_to=self.available_to,
            created_at=self.created_at,
            updated_at=self.updated_at,
            status=self.status,
            preferences=domain.ListingPreferences(**self.preferences.model_dump()),
            deposit=self.deposit,
            utilities=(
                domain.Utilities(included=self.utilities.included, cost=self.utilities.cost)
                if self.utilities else None
            ),
        )


def _plain_dict(items) -> dict:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in items}


class ListingOut(ListingIn):
    """Listing with derived values for this viewer"""
    total_cost: float = Field(description="Price plus non-included utilities")
    match_score: Optional[int] = Field(default=None, description="Compatibility 0-100")
    relevance_score: Optional[int] = Field(default=None, description="Relevance 0-100")

    @classmethod
    def from_domain(cls, listing: domain.Listing) -> "ListingOut":
        data = asdict(listing, dict_factory=_plain_dict)
        data["total_cost"] = listing.total_cost
        return cls.model_validate(data)


# ========== Search filters ==========

class CustomUniversityIn(BaseModel):
    """University not in the directory"""
    custom: str


class PriceRangeIn(BaseModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)


class SearchFiltersIn(BaseModel):
    query: Optional[str] = None
    location: Optional[str] = None
    university: Optional[Union[str, CustomUniversityIn]] = Field(
        default=None,
        description='University name, or {"custom": name} for unlisted universities'
    )
    max_distance: Optional[float] = Field(default=None, gt=0, description="Miles")
    price_range: Optional[PriceRangeIn] = None
    room_types: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    move_in_date: Optional[str] = Field(default=None, description="ISO date, latest availability")
    available_from: Optional[date] = Field(default=None, description="Earliest availability")
    sort_by: str = SortOption.RELEVANCE.value

    def to_domain(self) -> domain.SearchFilters:
        university = None
        if isinstance(self.university, CustomUniversityIn):
            university = domain.CustomUniversity(name=self.university.custom)
        elif self.university:
            university = domain.ExactUniversity(name=self.university)

        price_range = None
        if self.price_range is not None:
            price_range = domain.PriceRange(min=self.price_range.min, max=self.price_range.max)

        return domain.SearchFilters(
            query=self.query,
            location=self.location,
            university=university,
            max_distance=self.max_distance,
            price_range=price_range,
            room_types=list(self.room_types),
            amenities=list(self.amenities),
            move_in_date=self.move_in_date,
            available_from=self.available_from,
            sort_by=self.sort_by,
        )


# ========== Requests / responses ==========

class SearchRequest(BaseModel):
    """Browse request"""
    user: Optional[UserProfileIn] = Field(default=None, description="Signed-in user, if any")
    listings: list[ListingIn]
    filters: SearchFiltersIn = Field(default_factory=SearchFiltersIn)


class SearchResponse(BaseModel):
    listings: list[ListingOut]
    total_count: int


class RecommendationRequest(BaseModel):
    user: UserProfileIn
    listings: list[ListingIn]
    limit: Optional[int] = Field(default=None, ge=0, description="Max results")


class RecommendationResponse(BaseModel):
    user_id: str
    listings: list[ListingOut]


class ScoreRequest(BaseModel):
    user: UserProfileIn
    listing: ListingIn


class ScoreResponse(BaseModel):
    listing_id: str
    match_score: int
    relevance_score: int


class RoommateRequest(BaseModel):
    user: UserProfileIn
    candidates: list[UserProfileIn]
    limit: Optional[int] = Field(default=None, ge=0)


class AnnotateRequest(BaseModel):
    listings: list[ListingIn]
    radius: Optional[float] = Field(default=None, gt=0, description="Radius (miles)")


class AnnotateResponse(BaseModel):
    listings: list[ListingOut]


class RoommateItem(BaseModel):
    id: str
    name: str
    university: str
    year: str


class RoommateResponse(BaseModel):
    user_id: str
    matches: list[RoommateItem]


class UniversityOut(BaseModel):
    id: str
    name: str
    city: str
    state: str
    country: str
    coordinates: CoordinatesIn
    student_count: int
    popular_areas: list[str]
    average_rent: dict[str, float]


class NearbyUniversityOut(BaseModel):
    name: str
    distance: float
    distance_text: str


class DistanceResponse(BaseModel):
    distance: float
    unit: str
    distance_text: str = Field(description="Display text in miles")
    transport_mode: str
    transport_time: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
