"""Static university directory

Read-only reference data loaded once at import. Listings carry a precomputed
`nearby_universities` list derived from this directory; annotate_nearby_universities()
is that precomputation step.
"""

from dataclasses import replace
from typing import List, Optional

from app.config import settings
from app.models.domain import (
    AverageRent,
    Coordinates,
    Listing,
    NearbyUniversity,
    UniversityData,
)
from app.utils.geo import calculate_distance, has_valid_coordinates


UNIVERSITIES: List[UniversityData] = [
    UniversityData(
        id="uc-berkeley",
        name="UC Berkeley",
        city="Berkeley",
        state="California",
        country="USA",
        coordinates=Coordinates(lat=37.8719, lng=-122.2585),
        student_count=45000,
        popular_areas=("Berkeley", "Oakland", "Albany", "El Cerrito"),
        average_rent=AverageRent(single=1200, shared=800, studio=1800, apartment=2500),
    ),
    UniversityData(
        id="stanford",
        name="Stanford University",
        city="Stanford",
        state="California",
        country="USA",
        coordinates=Coordinates(lat=37.4275, lng=-122.1697),
        student_count=17000,
        popular_areas=("Palo Alto", "Stanford", "Menlo Park", "Mountain View"),
        average_rent=AverageRent(single=1800, shared=1200, studio=2500, apartment=3500),
    ),
    UniversityData(
        id="ucla",
        name="UCLA",
        city="Los Angeles",
        state="California",
        country="USA",
        coordinates=Coordinates(lat=34.0689, lng=-118.4452),
        student_count=47000,
        popular_areas=("Westwood", "Santa Monica", "Brentwood", "West LA"),
        average_rent=AverageRent(single=1000, shared=700, studio=1600, apartment=2200),
    ),
    UniversityData(
        id="usc",
        name="USC",
        city="Los Angeles",
        state="California",
        country="USA",
        coordinates=Coordinates(lat=34.0224, lng=-118.2851),
        student_count=48000,
        popular_areas=("University Park", "Downtown LA", "Koreatown", "Mid-City"),
        average_rent=AverageRent(single=950, shared=650, studio=1500, apartment=2000),
    ),
    UniversityData(
        id="ucsd",
        name="UC San Diego",
        city="San Diego",
        state="California",
        country="USA",
        coordinates=Coordinates(lat=32.8801, lng=-117.2340),
        student_count=39000,
        popular_areas=("La Jolla", "Pacific Beach", "Mission Beach", "Clairemont"),
        average_rent=AverageRent(single=900, shared=600, studio=1400, apartment=1900),
    ),
]


def get_university_by_name(name: Optional[str]) -> Optional[UniversityData]:
    """Exact name lookup"""
    if not name:
        return None
    for university in UNIVERSITIES:
        if university.name == name:
            return university
    return None


def get_universities_by_city(city: str) -> List[UniversityData]:
    """Case-insensitive city lookup"""
    city_lower = (city or "").lower()
    return [u for u in UNIVERSITIES if u.city.lower() == city_lower]


def get_nearby_universities(
    lat: float,
    lng: float,
    radius_miles: Optional[float] = None
) -> List[NearbyUniversity]:
    """
    Universities within a radius of a point, closest first

    Args:
        lat, lng: centre point
        radius_miles: search radius (settings.NEARBY_UNIVERSITY_RADIUS_MILES when None)

    Returns:
        NearbyUniversity list; empty for an invalid or 0/0 centre
    """
    if radius_miles is None:
        radius_miles = settings.NEARBY_UNIVERSITY_RADIUS_MILES

    if not has_valid_coordinates(lat, lng):
        return []

    nearby = []
    for university in UNIVERSITIES:
        coords = university.coordinates
        if not has_valid_coordinates(coords.lat, coords.lng):
            continue
        distance = calculate_distance(lat, lng, coords.lat, coords.lng)
        if distance <= radius_miles:
            nearby.append(NearbyUniversity(name=university.name, distance=distance))

    nearby.sort(key=lambda uni: uni.distance)
    return nearby


def annotate_nearby_universities(
    listing: Listing,
    radius_miles: Optional[float] = None
) -> Listing:
    """Copy of the listing with location.nearby_universities recomputed

    Listings without a location are returned unchanged.
    """
    if listing.location is None:
        return listing

    location = replace(
        listing.location,
        nearby_universities=get_nearby_universities(
            listing.location.latitude,
            listing.location.longitude,
            radius_miles
        )
    )
    return replace(listing, location=location)
