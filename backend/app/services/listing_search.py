"""Listing search service - filter → score → sort pipelines

Recommendations, the full browse pipeline and roommate matching. All inputs
are snapshots; nothing here stores state between calls.
"""

import logging
from datetime import datetime
from typing import List, Optional

from app.config import settings
from app.exceptions import InvalidFilterError
from app.logging_config import log_funnel, log_timing
from app.models.domain import (
    Listing,
    ListingStatus,
    SearchFilters,
    SortOption,
    UserProfile,
)
from app.utils.dates import utc_now
from app.utils.filters import (
    filter_listings_for_user,
    matches_amenities,
    matches_available_from,
    matches_location_text,
    matches_max_distance,
    matches_move_in_date,
    matches_price_range,
    matches_query,
    matches_room_types,
    matches_university,
    parse_move_in_date,
    user_coordinates,
)
from app.utils.matching import score_listing
from app.utils.sorting import sort_listings, sort_listings_without_user

logger = logging.getLogger(__name__)


def active_listings(listings: List[Listing]) -> List[Listing]:
    """Listings whose status is active (upstream status filter)"""
    return [l for l in listings if l.status == ListingStatus.ACTIVE]


def score_listings(
    user: UserProfile,
    listings: List[Listing],
    now: Optional[datetime] = None
) -> List[Listing]:
    """Copies of the listings with match/relevance scores for this user"""
    now = now or utc_now()
    return [score_listing(user, listing, now=now) for listing in listings]


def get_recommendations(
    user: Optional[UserProfile],
    listings: List[Listing],
    limit: Optional[int] = None,
    now: Optional[datetime] = None
) -> List[Listing]:
    """
    Personalized top-N listings

    Always relevance-first: filter for the user, attach scores, sort by
    relevance, truncate.

    Args:
        user: viewing user (None → empty result)
        listings: candidate listings
        limit: max results (settings.DEFAULT_RECOMMENDATION_LIMIT when None)
        now: reference instant for recency scoring

    Returns:
        at most `limit` scored listings
    """
    if user is None or not listings:
        logger.info("No user or listings to generate recommendations")
        return []

    if limit is None:
        limit = settings.DEFAULT_RECOMMENDATION_LIMIT

    try:
        candidates = filter_listings_for_user(user, listings)
        scored = score_listings(user, candidates, now=now)
        ranked = sort_listings(scored, SortOption.RELEVANCE.value, user)
        recommendations = ranked[:max(0, limit)]
    except Exception as e:
        logger.exception(f"Recommendation error: {e}")
        return []

    log_funnel(logger, f"recommendations user={user.id}", len(listings), len(recommendations))
    return recommendations


def _apply_search_filters(
    listings: List[Listing],
    filters: SearchFilters,
    user: Optional[UserProfile]
) -> List[Listing]:
    move_in_date = None
    if filters.move_in_date:
        try:
            move_in_date = parse_move_in_date(filters.move_in_date)
        except InvalidFilterError as e:
            # an unreadable move-in date matches no listing
            logger.warning(f"{e} - excluding all listings")
            return []

    origin = user_coordinates(user) if filters.max_distance is not None else None

    results = []
    for listing in listings:
        if not matches_query(listing, filters.query):
            continue
        if not matches_location_text(listing, filters.location):
            continue
        if not matches_university(listing, filters.university):
            continue
        if not matches_max_distance(listing, origin, filters.max_distance):
            continue
        if not matches_price_range(listing, filters.price_range):
            continue
        if not matches_room_types(listing, filters.room_types):
            continue
        if not matches_amenities(listing, filters.amenities):
            continue
        if not matches_available_from(listing, filters.available_from):
            continue
        if not matches_move_in_date(listing, move_in_date):
            continue
        results.append(listing)
    return results


def browse_listings(
    listings: List[Listing],
    filters: Optional[SearchFilters] = None,
    user: Optional[UserProfile] = None,
    now: Optional[datetime] = None
) -> List[Listing]:
    """
    Full browse pipeline

    1. search filters (query, location text, university, max distance,
       price range, room types, amenities, available-from, move-in date)
    2. with a user: drop own listings, attach scores, sort by filters.sort_by
    3. without a user: price/newest sort only

    An unparseable move_in_date matches no listing.

    Filtering is best-effort: on any error the unfiltered listings are
    returned instead of raising.

    Args:
        listings: listings to browse (status filtering happens upstream)
        filters: search criteria (no filtering when None)
        user: viewing user, if signed in
        now: reference instant for recency scoring

    Returns:
        new list of filtered, sorted listings
    """
    filters = filters or SearchFilters()
    sort_by = filters.sort_by or SortOption.RELEVANCE.value

    logger.info(f"Browse start: {len(listings)} listings, user={user.id if user else None}, "
                f"sort={sort_by}")

    try:
        with log_timing("browse listings", logger):
            results = _apply_search_filters(listings, filters, user)

            if user is not None:
                results = [l for l in results if l.host_id != user.id]
                results = score_listings(user, results, now=now)
                results = sort_listings(results, sort_by, user)
            else:
                results = sort_listings_without_user(results, sort_by)

    except Exception as e:
        logger.exception(f"Error applying filters - returning unfiltered listings: {e}")
        return list(listings)

    log_funnel(logger, "browse", len(listings), len(results))
    return results


def find_roommate_matches(
    user: Optional[UserProfile],
    all_users: List[UserProfile],
    limit: Optional[int] = None
) -> List[UserProfile]:
    """
    Potential roommates for a user

    Criteria:
    - same university (required)
    - when both have preferences: identical smoking, pets, study-friendly and
      social level, plus at least one shared room type / amenity when both
      sides list any

    Args:
        user: user looking for roommates
        all_users: candidate users (the user itself is skipped)
        limit: max results (settings.ROOMMATE_MATCH_LIMIT when None)

    Returns:
        matching users, input order kept
    """
    if user is None or not all_users:
        return []

    if limit is None:
        limit = settings.ROOMMATE_MATCH_LIMIT

    matches = []
    for other in all_users:
        if len(matches) >= limit:
            break
        if other is None or other.id == user.id:
            continue
        if other.university != user.university:
            continue
        if user.preferences is not None and other.preferences is not None:
            if not _compatible_preferences(user, other):
                continue
        matches.append(other)

    return matches


def _compatible_preferences(user: UserProfile, other: UserProfile) -> bool:
    mine = user.preferences
    theirs = other.preferences

    lifestyle_match = (
        mine.smoking_allowed == theirs.smoking_allowed
        and mine.pets_allowed == theirs.pets_allowed
        and mine.study_friendly == theirs.study_friendly
        and mine.social_level == theirs.social_level
    )
    if not lifestyle_match:
        return False

    if mine.preferred_room_types and theirs.preferred_room_types:
        if not set(mine.preferred_room_types) & set(theirs.preferred_room_types):
            return False

    if mine.preferred_amenities and theirs.preferred_amenities:
        if not set(mine.preferred_amenities) & set(theirs.preferred_amenities):
            return False

    return True
