"""HTTP API tests"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.utils.geo import EARTH_RADIUS_KM, EARTH_RADIUS_MILES


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user_payload():
    return {
        "id": "user-1",
        "name": "Alex Kim",
        "university": "UC Berkeley",
        "year": "junior",
        "location": {
            "city": "Berkeley",
            "state": "California",
            "coordinates": {"lat": 37.8719, "lng": -122.2585},
        },
    }


@pytest.fixture
def listing_payload():
    def _make(**overrides):
        data = {
            "id": "listing-1",
            "host_id": "host-1",
            "title": "Sunny single near campus",
            "price": 1000,
            "location": {
                "address": "2400 Durant Ave",
                "city": "Berkeley",
                "state": "California",
                "latitude": 37.8674,
                "longitude": -122.2576,
                "nearby_universities": [{"name": "UC Berkeley", "distance": 0.31}],
            },
            "room_type": "single",
            "amenities": ["Wi-Fi"],
            "available_from": "2025-08-01",
        }
        data.update(overrides)
        return data
    return _make


class TestServiceEndpoints:
    """health / root tests"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "environment" in body

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"


class TestSearchEndpoint:
    """POST /listings/search tests"""

    def test_search_with_user(self, client, user_payload, listing_payload):
        listings = [
            listing_payload(id="a"),
            listing_payload(id="own", host_id="user-1"),
            listing_payload(id="rented", status="rented"),
        ]
        response = client.post("/listings/search", json={
            "user": user_payload,
            "listings": listings,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["total_count"] == 1
        item = body["listings"][0]
        assert item["id"] == "a"
        assert item["match_score"] == 60
        assert item["relevance_score"] == 50
        assert item["total_cost"] == 1000

    def test_unreadable_move_in_date_matches_nothing(self, client, user_payload, listing_payload):
        response = client.post("/listings/search", json={
            "user": user_payload,
            "listings": [listing_payload(id="own", host_id="user-1"), listing_payload(id="x")],
            "filters": {"move_in_date": "soon"},
        })

        assert response.status_code == 200
        assert response.json() == {"listings": [], "total_count": 0}

    def test_anonymous_search_has_no_scores(self, client, listing_payload):
        response = client.post("/listings/search", json={"listings": [listing_payload()]})

        assert response.status_code == 200
        item = response.json()["listings"][0]
        assert item["match_score"] is None
        assert item["relevance_score"] is None

    def test_custom_university_filter(self, client, listing_payload):
        listings = [
            listing_payload(id="berkeley"),
            listing_payload(id="elsewhere", location={"city": "Columbus", "latitude": 39.99, "longitude": -83.03}),
        ]
        exact = client.post("/listings/search", json={
            "listings": listings,
            "filters": {"university": "UC Berkeley"},
        }).json()
        custom = client.post("/listings/search", json={
            "listings": listings,
            "filters": {"university": {"custom": "UC Berkeley"}},
        }).json()

        assert [l["id"] for l in exact["listings"]] == ["berkeley"]
        assert exact == custom

    def test_price_sort_and_utilities(self, client, listing_payload):
        listings = [
            listing_payload(id="pricey", price=1500),
            listing_payload(id="cheap", price=900, utilities={"included": False, "cost": 120}),
        ]
        response = client.post("/listings/search", json={
            "listings": listings,
            "filters": {"sort_by": "price-asc"},
        })
        body = response.json()

        assert [l["id"] for l in body["listings"]] == ["cheap", "pricey"]
        assert body["listings"][0]["total_cost"] == 1020

    def test_negative_price_rejected(self, client, listing_payload):
        response = client.post("/listings/search", json={"listings": [listing_payload(price=-1)]})
        assert response.status_code == 422

    def test_zero_occupants_rejected(self, client, listing_payload):
        response = client.post("/listings/search", json={"listings": [listing_payload(max_occupants=0)]})
        assert response.status_code == 422

    def test_availability_window_reversed(self, client, listing_payload):
        payload = listing_payload(available_from="2025-08-01", available_to="2025-07-01")
        response = client.post("/listings/search", json={"listings": [payload]})
        assert response.status_code == 400

    def test_unexpected_error_is_500(self, client, listing_payload, mocker):
        mocker.patch("app.routers.listings.browse_listings", side_effect=RuntimeError("boom"))
        response = client.post("/listings/search", json={"listings": [listing_payload()]})
        assert response.status_code == 500


class TestRecommendationEndpoint:
    """POST /listings/recommendations tests"""

    def test_recommendations(self, client, user_payload, listing_payload):
        listings = [listing_payload(id=f"l{i}") for i in range(8)]
        response = client.post("/listings/recommendations", json={
            "user": user_payload,
            "listings": listings,
        })

        assert response.status_code == 200
        body = response.json()
        assert body["user_id"] == "user-1"
        assert len(body["listings"]) == 6

    def test_limit_capped(self, client, user_payload, listing_payload, mocker):
        spy = mocker.patch("app.routers.listings.get_recommendations", return_value=[])
        client.post("/listings/recommendations", json={
            "user": user_payload,
            "listings": [listing_payload()],
            "limit": 500,
        })
        assert spy.call_args.kwargs["limit"] == 50

    def test_negative_limit_rejected(self, client, user_payload, listing_payload):
        response = client.post("/listings/recommendations", json={
            "user": user_payload,
            "listings": [listing_payload()],
            "limit": -1,
        })
        assert response.status_code == 422

    def test_invalid_budget_range(self, client, user_payload, listing_payload):
        user_payload["matching_preferences"] = {"budget_range": {"min": 1500, "max": 500}}
        response = client.post("/listings/recommendations", json={
            "user": user_payload,
            "listings": [listing_payload()],
        })
        assert response.status_code == 400


class TestScoreEndpoint:
    """POST /listings/score tests"""

    def test_score(self, client, user_payload, listing_payload):
        response = client.post("/listings/score", json={
            "user": user_payload,
            "listing": listing_payload(),
        })

        assert response.status_code == 200
        assert response.json() == {
            "listing_id": "listing-1",
            "match_score": 60,
            "relevance_score": 50,
        }


class TestRoommateEndpoint:
    """POST /roommates/matches tests"""

    def test_matches(self, client, user_payload):
        candidates = [
            {"id": "u2", "name": "Sam", "university": "UC Berkeley", "year": "senior"},
            {"id": "u3", "name": "Jo", "university": "UCLA", "year": "junior"},
        ]
        response = client.post("/roommates/matches", json={
            "user": user_payload,
            "candidates": candidates,
        })

        assert response.status_code == 200
        assert response.json()["matches"] == [
            {"id": "u2", "name": "Sam", "university": "UC Berkeley", "year": "senior"}
        ]


class TestDirectoryEndpoints:
    """universities / distance tests"""

    def test_universities(self, client):
        response = client.get("/universities")
        assert response.status_code == 200
        body = response.json()
        assert len(body) == 5
        assert body[0]["average_rent"]["single"] == 1200

    def test_universities_by_city(self, client):
        response = client.get("/universities", params={"city": "los angeles"})
        assert response.status_code == 200
        assert [u["name"] for u in response.json()] == ["UCLA", "USC"]

    def test_universities_unknown_city(self, client):
        response = client.get("/universities", params={"city": "Fresno"})
        assert response.json() == []

    def test_nearby(self, client):
        response = client.get("/universities/nearby", params={
            "lat": 37.8674, "lng": -122.2576, "radius": 10
        })
        assert response.status_code == 200
        body = response.json()
        assert [u["name"] for u in body] == ["UC Berkeley"]
        assert body[0]["distance_text"] == "0.3 mi"

    def test_distance(self, client):
        response = client.get("/distance", params={
            "lat1": 37.8674, "lng1": -122.2576, "lat2": 37.8719, "lng2": -122.2585
        })
        body = response.json()

        assert body["distance"] == pytest.approx(0.31, abs=0.05)
        assert body["unit"] == "miles"
        assert body["transport_mode"] == "walking"

    def test_distance_km(self, client):
        response = client.get("/distance", params={
            "lat1": 37.8674, "lng1": -122.2576, "lat2": 37.8719, "lng2": -122.2585, "unit": "km"
        })
        body = response.json()

        assert body["unit"] == "km"
        assert body["distance"] == pytest.approx(0.51, abs=0.08)
        assert body["distance_text"] == "0.3 mi"

    def test_km_is_converted_from_one_measurement(self, client, mocker):
        measure = mocker.patch("app.routers.listings.calculate_distance", return_value=1.0)

        response = client.get("/distance", params={
            "lat1": 37.8674, "lng1": -122.2576, "lat2": 37.8719, "lng2": -122.2585, "unit": "km"
        })
        body = response.json()

        assert measure.call_count == 1
        assert body["distance"] == pytest.approx(EARTH_RADIUS_KM / EARTH_RADIUS_MILES)
        assert body["distance_text"] == "1.0 mi"

    def test_distance_out_of_range_is_zero(self, client):
        response = client.get("/distance", params={"lat1": 91, "lng1": 0, "lat2": 0, "lng2": 0})
        body = response.json()

        assert body["distance"] == 0
        assert body["distance_text"] == "0 ft"


class TestAnnotateEndpoint:
    """POST /listings/annotate tests"""

    def test_recomputes_nearby_universities(self, client, listing_payload):
        payload = listing_payload()
        payload["location"]["nearby_universities"] = []

        response = client.post("/listings/annotate", json={"listings": [payload], "radius": 5})

        assert response.status_code == 200
        location = response.json()["listings"][0]["location"]
        assert [u["name"] for u in location["nearby_universities"]] == ["UC Berkeley"]
        assert location["nearby_universities"][0]["distance"] == pytest.approx(0.31, abs=0.05)

    def test_unset_coordinates_clear_the_list(self, client, listing_payload):
        payload = listing_payload()
        payload["location"]["latitude"] = 0
        payload["location"]["longitude"] = 0

        response = client.post("/listings/annotate", json={"listings": [payload]})

        assert response.status_code == 200
        assert response.json()["listings"][0]["location"]["nearby_universities"] == []

    def test_listing_without_location_unchanged(self, client, listing_payload):
        response = client.post("/listings/annotate", json={"listings": [listing_payload(location=None)]})

        assert response.status_code == 200
        assert response.json()["listings"][0]["location"] is None

    def test_non_positive_radius_rejected(self, client, listing_payload):
        response = client.post("/listings/annotate", json={"listings": [listing_payload()], "radius": 0})
        assert response.status_code == 422
