"""Domain types for the matching engine

Pydantic models are for the API surface; these dataclasses are what the
scoring, filtering and sorting functions operate on.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union


class RoomType(str, Enum):
    SINGLE = "single"
    SHARED = "shared"
    STUDIO = "studio"
    APARTMENT = "apartment"


class ListingStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    RENTED = "rented"


class SocialLevel(str, Enum):
    QUIET = "quiet"
    MODERATE = "moderate"
    SOCIAL = "social"


class GenderPreference(str, Enum):
    MALE = "male"
    FEMALE = "female"
    ANY = "any"


class SortOption(str, Enum):
    RELEVANCE = "relevance"
    MATCH = "match"
    DISTANCE = "distance"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "newest"


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


# ========== User ==========

@dataclass
class UserPreferences:
    """Lifestyle and budget preferences; every field may be absent"""
    smoking_allowed: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    study_friendly: Optional[bool] = None
    social_level: Optional[SocialLevel] = None
    max_budget: Optional[float] = None
    preferred_room_types: Optional[List[str]] = None
    preferred_amenities: Optional[List[str]] = None


@dataclass(frozen=True)
class BudgetRange:
    min: float
    max: float


@dataclass
class MatchingPreferences:
    """Hard filters applied by filter_listings_for_user"""
    max_distance: Optional[float] = None  # miles
    same_university: bool = False
    similar_year: bool = False
    budget_range: Optional[BudgetRange] = None


@dataclass
class UserLocation:
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    coordinates: Optional[Coordinates] = None


@dataclass
class UserProfile:
    """Prospective tenant"""
    id: str
    name: str = ""
    university: str = ""
    year: str = ""
    location: Optional[UserLocation] = None
    preferences: Optional[UserPreferences] = None
    matching_preferences: Optional[MatchingPreferences] = None


# ========== Listing ==========

@dataclass(frozen=True)
class NearbyUniversity:
    name: str
    distance: float  # miles


@dataclass
class ListingLocation:
    """Listing address; latitude/longitude 0/0 means unset"""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    nearby_universities: List[NearbyUniversity] = field(default_factory=list)


@dataclass
class Utilities:
    included: bool = False
    cost: Optional[float] = None


@dataclass
class ListingPreferences:
    gender: Optional[GenderPreference] = None
    smoking_allowed: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    study_friendly: Optional[bool] = None


@dataclass
class Listing:
    """Housing unit

    match_score and relevance_score are transient: they are attached to a
    copy by the scorer for one ranking operation and never persisted.
    """
    id: str
    host_id: str
    price: float
    location: Optional[ListingLocation]
    room_type: str = RoomType.SINGLE.value
    title: str = ""
    description: str = ""
    host: Optional[UserProfile] = None
    max_occupants: int = 1
    amenities: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    available_from: Optional[date] = None
    available_to: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: ListingStatus = ListingStatus.ACTIVE
    preferences: ListingPreferences = field(default_factory=ListingPreferences)
    deposit: Optional[float] = None
    utilities: Optional[Utilities] = None
    match_score: Optional[int] = None
    relevance_score: Optional[int] = None

    @property
    def total_cost(self) -> float:
        """Monthly price plus utilities cost when utilities are not included"""
        utilities_cost = 0.0
        if self.utilities is not None and not self.utilities.included:
            utilities_cost = self.utilities.cost or 0.0
        return (self.price or 0.0) + utilities_cost

    def with_scores(self, match_score: int, relevance_score: int) -> "Listing":
        """Copy of the listing with transient scores attached"""
        return replace(self, match_score=match_score, relevance_score=relevance_score)


# ========== Search filters ==========

@dataclass(frozen=True)
class ExactUniversity:
    """University picked from the directory"""
    name: str


@dataclass(frozen=True)
class CustomUniversity:
    """Free-text university not present in the directory"""
    name: str


UniversityFilter = Union[ExactUniversity, CustomUniversity]


@dataclass(frozen=True)
class PriceRange:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass
class SearchFilters:
    """Declarative subset of listings to browse"""
    query: Optional[str] = None
    location: Optional[str] = None
    university: Optional[UniversityFilter] = None
    max_distance: Optional[float] = None
    price_range: Optional[PriceRange] = None
    room_types: List[str] = field(default_factory=list)
    amenities: List[str] = field(default_factory=list)
    move_in_date: Optional[str] = None  # ISO date, upper bound on available_from
    available_from: Optional[date] = None  # lower bound on available_from
    sort_by: str = SortOption.RELEVANCE.value


# ========== University directory ==========

@dataclass(frozen=True)
class AverageRent:
    single: float
    shared: float
    studio: float
    apartment: float


@dataclass(frozen=True)
class UniversityData:
    id: str
    name: str
    city: str
    state: str
    country: str
    coordinates: Coordinates
    student_count: int
    popular_areas: tuple
    average_rent: AverageRent
