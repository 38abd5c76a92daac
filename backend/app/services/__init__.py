"""Listing services"""
from .listing_search import (
    active_listings,
    browse_listings,
    find_roommate_matches,
    get_recommendations,
    score_listings,
)

__all__ = [
    "active_listings",
    "browse_listings",
    "find_roommate_matches",
    "get_recommendations",
    "score_listings",
]
