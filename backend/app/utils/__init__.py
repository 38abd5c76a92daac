"""Matching engine utility modules"""

from .geo import (
    calculate_distance,
    has_valid_coordinates,
    format_distance,
    calculate_walking_time,
    get_transportation_mode,
    TransportSuggestion,
)
from .filters import filter_listings_for_user
from .matching import (
    calculate_match_score,
    calculate_relevance_score,
    score_listing,
    MatchWeights,
)
from .sorting import sort_listings, sort_listings_without_user

__all__ = [
    # geo
    "calculate_distance",
    "has_valid_coordinates",
    "format_distance",
    "calculate_walking_time",
    "get_transportation_mode",
    "TransportSuggestion",
    # filters
    "filter_listings_for_user",
    # matching
    "calculate_match_score",
    "calculate_relevance_score",
    "score_listing",
    "MatchWeights",
    # sorting
    "sort_listings",
    "sort_listings_without_user",
]
