"""
pytest fixtures for matching engine tests
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from app.models.domain import (
    Coordinates,
    Listing,
    ListingLocation,
    NearbyUniversity,
    UserLocation,
    UserProfile,
)

# UC Berkeley campus and a listing ~0.31 mi south of it
BERKELEY = (37.8719, -122.2585)
NEAR_BERKELEY = (37.8674, -122.2576)

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference instant for recency scoring"""
    return FIXED_NOW


@pytest.fixture
def make_user():
    """UserProfile factory: a Berkeley student with no preferences"""
    def _make(**overrides):
        data = {
            "id": "user-1",
            "name": "Alex Kim",
            "university": "UC Berkeley",
            "year": "junior",
            "location": UserLocation(
                city="Berkeley",
                state="California",
                country="USA",
                coordinates=Coordinates(lat=BERKELEY[0], lng=BERKELEY[1]),
            ),
            "preferences": None,
            "matching_preferences": None,
        }
        data.update(overrides)
        return UserProfile(**data)
    return _make


@pytest.fixture
def make_location():
    """ListingLocation factory: walking distance from UC Berkeley"""
    def _make(**overrides):
        data = {
            "address": "2400 Durant Ave",
            "city": "Berkeley",
            "state": "California",
            "country": "USA",
            "latitude": NEAR_BERKELEY[0],
            "longitude": NEAR_BERKELEY[1],
            "nearby_universities": [NearbyUniversity(name="UC Berkeley", distance=0.31)],
        }
        data.update(overrides)
        return ListingLocation(**data)
    return _make


@pytest.fixture
def make_listing(make_location):
    """Listing factory: active single room near campus, created 3 days before FIXED_NOW"""
    def _make(**overrides):
        data = {
            "id": "listing-1",
            "host_id": "host-1",
            "title": "Sunny single near campus",
            "description": "Quiet room, five minutes from Sather Gate",
            "price": 1000,
            "location": make_location(),
            "room_type": "single",
            "amenities": [],
            "available_from": date(2025, 8, 1),
            "created_at": FIXED_NOW - timedelta(days=3),
        }
        data.update(overrides)
        return Listing(**data)
    return _make
