"""University directory tests"""

from app.data.universities import (
    UNIVERSITIES,
    annotate_nearby_universities,
    get_nearby_universities,
    get_universities_by_city,
    get_university_by_name,
)


class TestLookups:
    """name / city lookup tests"""

    def test_directory_size(self):
        assert len(UNIVERSITIES) == 5

    def test_by_name(self):
        ucla = get_university_by_name("UCLA")
        assert ucla is not None
        assert ucla.city == "Los Angeles"

    def test_by_name_is_exact(self):
        assert get_university_by_name("ucla") is None
        assert get_university_by_name("") is None
        assert get_university_by_name(None) is None

    def test_by_city_case_insensitive(self):
        names = [u.name for u in get_universities_by_city("los angeles")]
        assert names == ["UCLA", "USC"]

    def test_by_unknown_city(self):
        assert get_universities_by_city("Columbus") == []


class TestNearbyUniversities:
    """get_nearby_universities tests"""

    def test_default_radius_closest_first(self):
        nearby = get_nearby_universities(37.8719, -122.2585)
        assert [u.name for u in nearby] == ["UC Berkeley", "Stanford University"]
        assert nearby[0].distance == 0

    def test_custom_radius(self):
        nearby = get_nearby_universities(37.8674, -122.2576, radius_miles=10)
        assert [u.name for u in nearby] == ["UC Berkeley"]

    def test_los_angeles(self):
        nearby = get_nearby_universities(34.05, -118.35, radius_miles=20)
        assert {u.name for u in nearby} == {"UCLA", "USC"}

    def test_invalid_centre(self):
        assert get_nearby_universities(0, 0) == []
        assert get_nearby_universities(95, 0) == []


class TestAnnotateNearbyUniversities:
    """annotate_nearby_universities tests"""

    def test_recomputes_on_copy(self, make_listing, make_location):
        listing = make_listing(location=make_location(nearby_universities=[]))
        annotated = annotate_nearby_universities(listing, radius_miles=5)

        assert [u.name for u in annotated.location.nearby_universities] == ["UC Berkeley"]
        assert listing.location.nearby_universities == []

    def test_without_location(self, make_listing):
        listing = make_listing(location=None)
        assert annotate_nearby_universities(listing) is listing
