"""User ↔ listing scoring

Two independent scores per (user, listing) pair:
- match score: absolute compatibility (0-100), comparable across sessions
- relevance score: contextual ranking signal (0-100), the default sort key

Both are pure functions. Relevance depends on "now", so callers pass a fixed
instant when results must be reproducible.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from app.data import universities as university_directory
from app.models.domain import Listing, ListingPreferences, UserProfile
from .dates import as_utc, utc_now
from .geo import calculate_distance, has_valid_coordinates
from .numbers import is_number, round_half_up


@dataclass(frozen=True)
class MatchWeights:
    """Point allocation per scoring dimension

    Attributes:
        university: university proximity (35)
        budget: budget compatibility (25)
        room_type: room type preference (15)
        lifestyle: study/smoking/pets compatibility (15)
        amenities: amenity overlap (10)
    """
    university: int = 35
    budget: int = 25
    room_type: int = 15
    lifestyle: int = 15
    amenities: int = 10

    @property
    def total(self) -> int:
        return self.university + self.budget + self.room_type + self.lifestyle + self.amenities


# (max miles, points), checked in order
UNIVERSITY_DISTANCE_BANDS = (
    (1, 35),
    (3, 30),
    (5, 25),
    (10, 20),
    (20, 15),
)
UNIVERSITY_FAR_POINTS = 5
UNIVERSITY_NAME_MATCH_POINTS = 28
UNIVERSITY_NO_INFO_POINTS = 5

BUDGET_GREAT_VALUE_RATIO = 0.8
BUDGET_WITHIN_POINTS = 20
BUDGET_UNSET_POINTS = 15

ROOM_TYPE_MISS_POINTS = 5

STUDY_FRIENDLY_POINTS = 8
SMOKING_POINTS = 4
PETS_POINTS = 3

AMENITIES_DEFAULT_POINTS = 5

SAME_UNIVERSITY_RELEVANCE = 50
SAME_CITY_RELEVANCE = 30
SAME_STATE_RELEVANCE = 20
NEW_LISTING_DAYS = 7
NEW_LISTING_RELEVANCE = 20
RECENT_LISTING_DAYS = 30
RECENT_LISTING_RELEVANCE = 10

SECONDS_PER_DAY = 60 * 60 * 24


def _is_scoreable(user: Optional[UserProfile], listing: Optional[Listing]) -> bool:
    return (
        user is not None
        and listing is not None
        and listing.location is not None
        and bool(user.university)
    )


def _near_user_university(user: UserProfile, listing: Listing) -> bool:
    nearby = listing.location.nearby_universities or []
    return any(uni.name == user.university for uni in nearby)


def _university_points(user: UserProfile, listing: Listing) -> float:
    university = university_directory.get_university_by_name(user.university)
    location = listing.location

    if (
        university is not None
        and university.coordinates is not None
        and has_valid_coordinates(location.latitude, location.longitude)
    ):
        distance = calculate_distance(
            university.coordinates.lat,
            university.coordinates.lng,
            location.latitude,
            location.longitude
        )
        for max_miles, points in UNIVERSITY_DISTANCE_BANDS:
            if distance <= max_miles:
                return points
        return UNIVERSITY_FAR_POINTS

    # no valid coordinates to measure (missing, out of range or 0/0): fall back to the precomputed name list
    if _near_user_university(user, listing):
        return UNIVERSITY_NAME_MATCH_POINTS
    return UNIVERSITY_NO_INFO_POINTS


def _budget_points(user: UserProfile, listing: Listing, weight: int) -> float:
    prefs = user.preferences
    max_budget = prefs.max_budget if prefs is not None else None

    if not max_budget or not is_number(max_budget):
        return BUDGET_UNSET_POINTS

    total_cost = listing.total_cost
    if total_cost <= max_budget:
        if total_cost / max_budget <= BUDGET_GREAT_VALUE_RATIO:
            return weight
        return BUDGET_WITHIN_POINTS

    over_budget = total_cost - max_budget
    penalty = min(weight, (over_budget / max_budget) * weight)
    return max(0, weight - penalty)


def _room_type_points(user: UserProfile, listing: Listing, weight: int) -> float:
    prefs = user.preferences
    preferred = prefs.preferred_room_types if prefs is not None else None
    if isinstance(preferred, list) and listing.room_type in preferred:
        return weight
    return ROOM_TYPE_MISS_POINTS


def _lifestyle_points(user: UserProfile, listing: Listing) -> float:
    prefs = user.preferences
    if prefs is None:
        return 0

    listing_prefs = listing.preferences or ListingPreferences()
    points = 0

    # only an explicit, equal boolean on both sides counts
    if isinstance(prefs.study_friendly, bool) and prefs.study_friendly == listing_prefs.study_friendly:
        points += STUDY_FRIENDLY_POINTS
    if isinstance(prefs.smoking_allowed, bool) and prefs.smoking_allowed == listing_prefs.smoking_allowed:
        points += SMOKING_POINTS
    if isinstance(prefs.pets_allowed, bool) and prefs.pets_allowed == listing_prefs.pets_allowed:
        points += PETS_POINTS

    return points


def _amenity_points(user: UserProfile, listing: Listing, weight: int) -> float:
    prefs = user.preferences
    preferred = prefs.preferred_amenities if prefs is not None else None

    if not isinstance(preferred, list) or not isinstance(listing.amenities, list):
        return AMENITIES_DEFAULT_POINTS
    if not preferred:
        return AMENITIES_DEFAULT_POINTS

    matched = [amenity for amenity in preferred if amenity in listing.amenities]
    return (len(matched) / len(preferred)) * weight


def calculate_match_score(
    user: Optional[UserProfile],
    listing: Optional[Listing],
    weights: MatchWeights = MatchWeights()
) -> int:
    """Absolute compatibility score

    Dimensions (default weights):
    - university proximity: 35
    - budget: 25
    - room type: 15
    - lifestyle: 15 (study 8, smoking 4, pets 3)
    - amenities: 10

    Every dimension has a fallback contribution, so a user without any
    preferences still gets a meaningful score.

    Args:
        user: viewing user
        listing: listing to score
        weights: point allocation

    Returns:
        0-100 (0 when user, listing, listing.location or user.university is missing)
    """
    if not _is_scoreable(user, listing):
        return 0

    score = (
        _university_points(user, listing)
        + _budget_points(user, listing, weights.budget)
        + _room_type_points(user, listing, weights.room_type)
        + _lifestyle_points(user, listing)
        + _amenity_points(user, listing, weights.amenities)
    )

    normalized = (score / weights.total) * 100
    return round_half_up(max(0, min(100, normalized)))


def calculate_relevance_score(
    user: Optional[UserProfile],
    listing: Optional[Listing],
    now: Optional[datetime] = None
) -> int:
    """Contextual relevance score

    - same university (nearby list contains the user's university): +50
    - otherwise geographic: same city +30, else same state +20
    - created within 7 days +20, within 30 days +10

    Args:
        user: viewing user
        listing: listing to score
        now: reference instant for recency (current UTC time when None)

    Returns:
        0-100, capped
    """
    if not _is_scoreable(user, listing):
        return 0

    score = 0
    location = listing.location

    user_location = user.location
    if _near_user_university(user, listing):
        score += SAME_UNIVERSITY_RELEVANCE
    elif user_location is not None and user_location.city and location.city and \
            user_location.city == location.city:
        score += SAME_CITY_RELEVANCE
    elif user_location is not None and user_location.state and location.state and \
            user_location.state == location.state:
        score += SAME_STATE_RELEVANCE

    if isinstance(listing.created_at, datetime):
        reference = as_utc(now or utc_now())
        age_days = (reference - as_utc(listing.created_at)).total_seconds() / SECONDS_PER_DAY
        if age_days <= NEW_LISTING_DAYS:
            score += NEW_LISTING_RELEVANCE
        elif age_days <= RECENT_LISTING_DAYS:
            score += RECENT_LISTING_RELEVANCE

    return min(100, score)


def score_listing(
    user: UserProfile,
    listing: Listing,
    now: Optional[datetime] = None
) -> Listing:
    """Copy of the listing with match and relevance scores attached"""
    return listing.with_scores(
        match_score=calculate_match_score(user, listing),
        relevance_score=calculate_relevance_score(user, listing, now=now),
    )
