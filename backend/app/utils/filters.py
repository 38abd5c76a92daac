"""
Listing filtering utilities - shared by recommendations and the browse pipeline

Per-user hard filters (matching preferences) and per-criterion predicates for
SearchFilters. Every predicate takes one listing and returns bool.
"""
from datetime import date, datetime
from typing import List, Optional

from app.exceptions import InvalidFilterError
from app.models.domain import (
    Listing,
    PriceRange,
    UniversityFilter,
    UserProfile,
)
from .dates import as_date
from .geo import calculate_distance, has_valid_coordinates


def user_coordinates(user: Optional[UserProfile]) -> Optional[tuple]:
    """(lat, lng) of the user when present, valid and not 0/0"""
    if user is None or user.location is None or user.location.coordinates is None:
        return None
    coords = user.location.coordinates
    if not has_valid_coordinates(coords.lat, coords.lng):
        return None
    return coords.lat, coords.lng


def listing_coordinates(listing: Listing) -> Optional[tuple]:
    """(lat, lng) of the listing when present, valid and not 0/0"""
    location = listing.location
    if location is None or not has_valid_coordinates(location.latitude, location.longitude):
        return None
    return location.latitude, location.longitude


def is_near_university(listing: Listing, university: str) -> bool:
    """Exact name match against the listing's precomputed nearby list"""
    if listing.location is None:
        return False
    return any(uni.name == university for uni in listing.location.nearby_universities or [])


def filter_listings_for_user(
    user: Optional[UserProfile],
    listings: List[Listing]
) -> List[Listing]:
    """Hard filters from the user's matching preferences

    Always:
    - listings without a location are dropped
    - the user's own listings are dropped

    Only when user.matching_preferences is set:
    - max_distance: requires valid user coordinates; listings without valid
      coordinates are dropped while this filter is active
    - same_university: listing must be near the user's university
    - budget_range: total cost within [min, max]

    Args:
        user: viewing user (None → empty result)
        listings: candidate listings

    Returns:
        new list of listings that pass, input order kept
    """
    if user is None or listings is None:
        return []

    criteria = user.matching_preferences
    origin = user_coordinates(user)
    results: List[Listing] = []

    for listing in listings:
        if listing is None or listing.location is None:
            continue
        if listing.host_id == user.id:
            continue

        if criteria is None:
            results.append(listing)
            continue

        if criteria.max_distance and origin is not None:
            target = listing_coordinates(listing)
            if target is None:
                continue
            if calculate_distance(*origin, *target) > criteria.max_distance:
                continue

        if criteria.same_university and not is_near_university(listing, user.university):
            continue

        if criteria.budget_range is not None:
            total_cost = listing.total_cost
            if total_cost < criteria.budget_range.min or total_cost > criteria.budget_range.max:
                continue

        results.append(listing)

    return results


# ========== SearchFilters predicates ==========

def matches_query(listing: Listing, query: Optional[str]) -> bool:
    """Case-insensitive substring over title, description and city"""
    if not query:
        return True
    term = query.lower()
    city = listing.location.city if listing.location is not None else ""
    return (
        term in (listing.title or "").lower()
        or term in (listing.description or "").lower()
        or term in (city or "").lower()
    )


def matches_location_text(listing: Listing, location_text: Optional[str]) -> bool:
    """Case-insensitive substring over city, address and nearby university names"""
    if not location_text:
        return True
    location = listing.location
    if location is None:
        return False
    term = location_text.lower()
    return (
        term in (location.city or "").lower()
        or term in (location.address or "").lower()
        or any(term in uni.name.lower() for uni in location.nearby_universities or [])
    )


def matches_university(listing: Listing, university: Optional[UniversityFilter]) -> bool:
    """Exact, case-insensitive match on host university or any nearby university

    ExactUniversity and CustomUniversity are matched the same way.
    """
    if university is None or not university.name:
        return True
    wanted = university.name.lower()

    host = listing.host
    if host is not None and (host.university or "").lower() == wanted:
        return True

    nearby = listing.location.nearby_universities if listing.location is not None else []
    return any(uni.name.lower() == wanted for uni in nearby or [])


def matches_max_distance(
    listing: Listing,
    origin: Optional[tuple],
    max_distance: Optional[float]
) -> bool:
    """Distance from origin within max_distance miles

    No origin or no max_distance → passes. Listings without valid coordinates
    never pass an active distance filter.
    """
    if max_distance is None or origin is None:
        return True
    target = listing_coordinates(listing)
    if target is None:
        return False
    return calculate_distance(*origin, *target) <= max_distance


def matches_price_range(listing: Listing, price_range: Optional[PriceRange]) -> bool:
    """Inclusive bounds; missing min is 0, missing max is unbounded"""
    if price_range is None:
        return True
    price = listing.price or 0
    min_price = price_range.min if price_range.min is not None else 0
    max_price = price_range.max if price_range.max is not None else float("inf")
    return min_price <= price <= max_price


def matches_room_types(listing: Listing, room_types: Optional[List[str]]) -> bool:
    if not room_types:
        return True
    return listing.room_type in room_types


def matches_amenities(listing: Listing, amenities: Optional[List[str]]) -> bool:
    """Listing must offer every requested amenity"""
    if not amenities:
        return True
    offered = listing.amenities or []
    return all(amenity in offered for amenity in amenities)


def matches_available_from(listing: Listing, available_from: Optional[date]) -> bool:
    """Listing becomes available on or after the bound"""
    bound = as_date(available_from)
    if bound is None:
        return True
    listing_date = as_date(listing.available_from)
    return listing_date is not None and listing_date >= bound


def parse_move_in_date(value: str) -> date:
    """ISO date ("2025-08-01") or datetime string → date

    Raises:
        InvalidFilterError: unparseable value
    """
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidFilterError(f"Invalid move-in date: {value!r}")


def matches_move_in_date(listing: Listing, move_in_date: Optional[date]) -> bool:
    """Listing is available on or before the requested move-in date"""
    if move_in_date is None:
        return True
    listing_date = as_date(listing.available_from)
    return listing_date is not None and listing_date <= move_in_date
