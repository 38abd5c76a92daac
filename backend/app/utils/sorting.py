"""Listing sort strategies

All functions return a new list; the input is never reordered in place.
Python's sort is stable, so ties keep their input order.
"""

import logging
from typing import Any, List, Optional

from app.models.domain import Listing, SortOption, UserProfile
from .dates import timestamp_or_epoch
from .filters import listing_coordinates, user_coordinates
from .geo import calculate_distance

logger = logging.getLogger(__name__)


def _sort_key(sort_by: Any) -> str:
    return getattr(sort_by, "value", sort_by)


def _by_distance(listings: List[Listing], user: Optional[UserProfile]) -> List[Listing]:
    origin = user_coordinates(user)
    if origin is None:
        logger.warning("No valid user coordinates for distance sort - keeping input order")
        return list(listings)

    def key(listing: Listing):
        target = listing_coordinates(listing)
        # listings without coordinates go last
        if target is None:
            return (1, 0.0)
        return (0, calculate_distance(*origin, *target))

    return sorted(listings, key=key)


def sort_listings(
    listings: List[Listing],
    sort_by: str,
    user: Optional[UserProfile] = None
) -> List[Listing]:
    """
    Sort listings by the selected strategy

    Strategies:
    - relevance: relevance_score descending (missing → 0)
    - match: match_score descending (missing → 0)
    - distance: ascending from the user's coordinates; without valid user
      coordinates the input order is kept
    - price-asc / price-desc
    - newest: created_at descending (missing → epoch)

    relevance and match read scores already attached to the listings
    (see app.utils.matching.score_listing).

    Args:
        listings: listings to sort
        sort_by: strategy key; unknown keys keep the input order
        user: viewing user (distance only)

    Returns:
        new sorted list
    """
    key = _sort_key(sort_by)

    if key == SortOption.RELEVANCE.value:
        return sorted(listings, key=lambda l: l.relevance_score or 0, reverse=True)
    if key == SortOption.MATCH.value:
        return sorted(listings, key=lambda l: l.match_score or 0, reverse=True)
    if key == SortOption.DISTANCE.value:
        return _by_distance(listings, user)
    if key == SortOption.PRICE_ASC.value:
        return sorted(listings, key=lambda l: l.price or 0)
    if key == SortOption.PRICE_DESC.value:
        return sorted(listings, key=lambda l: l.price or 0, reverse=True)
    if key == SortOption.NEWEST.value:
        return sorted(listings, key=lambda l: timestamp_or_epoch(l.created_at), reverse=True)

    logger.warning(f"Unknown sort option: {sort_by!r} - keeping input order")
    return list(listings)


ANONYMOUS_SORT_OPTIONS = (
    SortOption.PRICE_ASC.value,
    SortOption.PRICE_DESC.value,
    SortOption.NEWEST.value,
)


def sort_listings_without_user(listings: List[Listing], sort_by: str) -> List[Listing]:
    """Reduced sort for anonymous browsing

    Scores are meaningless without a viewing user, so only price and date
    orders apply; anything else keeps the input order.
    """
    key = _sort_key(sort_by)
    if key in ANONYMOUS_SORT_OPTIONS:
        return sort_listings(listings, key)
    return list(listings)
