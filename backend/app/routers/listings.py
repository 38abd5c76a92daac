"""Listing API router - search, recommendations, scoring, roommates, directory"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from app.config import settings
from app.data.universities import (
    UNIVERSITIES,
    annotate_nearby_universities,
    get_nearby_universities,
    get_universities_by_city,
)
from app.exceptions import HousingError
from app.models.schemas import (
    AnnotateRequest,
    AnnotateResponse,
    DistanceResponse,
    ListingIn,
    ListingOut,
    NearbyUniversityOut,
    RecommendationRequest,
    RecommendationResponse,
    RoommateItem,
    RoommateRequest,
    RoommateResponse,
    ScoreRequest,
    ScoreResponse,
    SearchRequest,
    SearchResponse,
    UniversityOut,
)
from app.services.listing_search import (
    active_listings,
    browse_listings,
    find_roommate_matches,
    get_recommendations,
)
from app.utils.geo import (
    EARTH_RADIUS_KM,
    EARTH_RADIUS_MILES,
    calculate_distance,
    format_distance,
    get_transportation_mode,
)
from app.utils.matching import score_listing

router = APIRouter()
logger = logging.getLogger(__name__)


def _to_domain_listings(listings: List[ListingIn]):
    return [listing.to_domain() for listing in listings]


@router.post("/listings/search", response_model=SearchResponse)
async def search_listings(request: SearchRequest):
    """
    Browse listings with search filters

    Only active listings are considered. With a user the results carry
    match/relevance scores and the user's own listings are excluded.

    Args:
        request.user: signed-in user (optional)
        request.listings: listing snapshot
        request.filters: search criteria and sort option

    Returns:
        filtered, sorted listings
    """
    try:
        user = request.user.to_domain() if request.user else None
        listings = active_listings(_to_domain_listings(request.listings))
        filters = request.filters.to_domain()

        results = browse_listings(listings, filters, user)

        return SearchResponse(
            listings=[ListingOut.from_domain(l) for l in results],
            total_count=len(results)
        )

    except HTTPException:
        raise
    except HousingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Search API error: {e}")
        raise HTTPException(status_code=500, detail="Internal service error.")


@router.post("/listings/recommendations", response_model=RecommendationResponse)
async def recommendations(request: RecommendationRequest):
    """
    Personalized top-N listings for a user

    limit defaults to DEFAULT_RECOMMENDATION_LIMIT and is capped at
    MAX_RECOMMENDATION_LIMIT.
    """
    try:
        user = request.user.to_domain()
        listings = active_listings(_to_domain_listings(request.listings))

        limit = request.limit
        if limit is None:
            limit = settings.DEFAULT_RECOMMENDATION_LIMIT
        if limit > settings.MAX_RECOMMENDATION_LIMIT:
            logger.info(f"Recommendation limit {limit} capped at {settings.MAX_RECOMMENDATION_LIMIT}")
            limit = settings.MAX_RECOMMENDATION_LIMIT

        results = get_recommendations(user, listings, limit=limit)

        return RecommendationResponse(
            user_id=user.id,
            listings=[ListingOut.from_domain(l) for l in results]
        )

    except HTTPException:
        raise
    except HousingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Recommendation API error: {e}")
        raise HTTPException(status_code=500, detail="Internal service error.")


@router.post("/listings/score", response_model=ScoreResponse)
async def score(request: ScoreRequest):
    """Match and relevance score of one listing for one user"""
    try:
        scored = score_listing(request.user.to_domain(), request.listing.to_domain())

        return ScoreResponse(
            listing_id=scored.id,
            match_score=scored.match_score,
            relevance_score=scored.relevance_score
        )

    except HTTPException:
        raise
    except HousingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Score API error: {e}")
        raise HTTPException(status_code=500, detail="Internal service error.")


@router.post("/roommates/matches", response_model=RoommateResponse)
async def roommate_matches(request: RoommateRequest):
    """
    Potential roommates: same university and compatible lifestyle

    Args:
        request.user: user looking for roommates
        request.candidates: other users to consider
        request.limit: max results (ROOMMATE_MATCH_LIMIT when omitted)
    """
    try:
        user = request.user.to_domain()
        candidates = [c.to_domain() for c in request.candidates]

        matches = find_roommate_matches(user, candidates, limit=request.limit)

        return RoommateResponse(
            user_id=user.id,
            matches=[
                RoommateItem(id=m.id, name=m.name, university=m.university, year=m.year)
                for m in matches
            ]
        )

    except HTTPException:
        raise
    except HousingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Roommate API error: {e}")
        raise HTTPException(status_code=500, detail="Internal service error.")


@router.post("/listings/annotate", response_model=AnnotateResponse)
async def annotate_listings(request: AnnotateRequest):
    """
    Recompute nearby_universities for each listing from the directory

    The precomputation step that feeds university matching and relevance.
    Listings without a location come back unchanged.
    """
    try:
        listings = _to_domain_listings(request.listings)
        annotated = [annotate_nearby_universities(l, request.radius) for l in listings]

        return AnnotateResponse(listings=[ListingOut.from_domain(l) for l in annotated])

    except HTTPException:
        raise
    except HousingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Annotate API error: {e}")
        raise HTTPException(status_code=500, detail="Internal service error.")


@router.get("/universities", response_model=List[UniversityOut])
async def list_universities(
    city: Optional[str] = Query(default=None, description="Only universities in this city")
):
    """University directory, optionally narrowed to one city (case-insensitive)"""
    universities = get_universities_by_city(city) if city else UNIVERSITIES
    return [
        UniversityOut(
            id=u.id,
            name=u.name,
            city=u.city,
            state=u.state,
            country=u.country,
            coordinates={"lat": u.coordinates.lat, "lng": u.coordinates.lng},
            student_count=u.student_count,
            popular_areas=list(u.popular_areas),
            average_rent={
                "single": u.average_rent.single,
                "shared": u.average_rent.shared,
                "studio": u.average_rent.studio,
                "apartment": u.average_rent.apartment,
            },
        )
        for u in universities
    ]


@router.get("/universities/nearby", response_model=List[NearbyUniversityOut])
async def nearby_universities(
    lat: float,
    lng: float,
    radius: Optional[float] = Query(default=None, gt=0, description="Radius (miles)")
):
    """Universities within `radius` miles of a point, closest first"""
    nearby = get_nearby_universities(lat, lng, radius)
    return [
        NearbyUniversityOut(
            name=u.name,
            distance=u.distance,
            distance_text=format_distance(u.distance)
        )
        for u in nearby
    ]


@router.get("/distance", response_model=DistanceResponse)
async def distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    unit: str = Query(default="miles", description="miles | km")
):
    """
    Distance between two points with a display text and transport suggestion

    Invalid coordinates yield distance 0. Display text and transport mode are
    always based on miles.
    """
    unit = "km" if unit == "km" else "miles"
    miles = calculate_distance(lat1, lng1, lat2, lng2)
    value = miles * EARTH_RADIUS_KM / EARTH_RADIUS_MILES if unit == "km" else miles
    transport = get_transportation_mode(miles)

    return DistanceResponse(
        distance=value,
        unit=unit,
        distance_text=format_distance(miles),
        transport_mode=transport.mode,
        transport_time=transport.time
    )
