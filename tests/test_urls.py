"""Tests for URL building."""

import json
from urllib.parse import parse_qs, urlsplit

import pytest

from estate_api.urls import attach_location, build_url


ENDPOINTS = [
    "properties",
    "/properties",
    "properties?status=active",
    "chat/unread-count",
    "/api-keys",
    "admin/users?limit=10",
]


class TestBuildUrl:
    """Tests for build_url()."""

    @pytest.mark.parametrize("endpoint", ENDPOINTS)
    def test_no_base_is_same_origin(self, endpoint):
        expected = "/api/" + (endpoint[1:] if endpoint.startswith("/") else endpoint)
        assert build_url(endpoint) == expected

    def test_base_without_api_suffix(self):
        assert build_url("/properties", "https://api.example.com") == "https://api.example.com/api/properties"

    def test_base_with_api_suffix(self):
        assert build_url("properties", "https://api.example.com/api") == "https://api.example.com/api/properties"

    @pytest.mark.parametrize("base", ["", "https://x.example.com", "https://x.example.com/api"])
    @pytest.mark.parametrize("endpoint", ENDPOINTS)
    def test_never_doubles_api_segment(self, base, endpoint):
        assert "/api/api" not in build_url(endpoint, base)

    def test_strips_only_one_leading_slash(self):
        assert build_url("//properties") == "/api//properties"

    def test_pure(self):
        assert build_url("banners", "https://x.example.com") == build_url("banners", "https://x.example.com")

    def test_malformed_endpoint_is_not_validated(self):
        assert build_url("  spaces ") == "/api/  spaces "


class TestAttachLocation:
    """Tests for attach_location()."""

    def _query(self, url):
        return {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}

    def test_coordinates(self):
        pref = {"coords": {"lat": 28.6, "lng": 77.2}, "cityId": "delhi"}
        url = attach_location("http://localhost/api/properties", "properties", pref)
        assert self._query(url) == {"lat": "28.6", "lng": "77.2", "radiusKm": "10"}

    def test_city_id_without_coordinates(self):
        url = attach_location("http://localhost/api/ads", "ads", {"cityId": "pune"})
        assert self._query(url) == {"cityId": "pune"}

    def test_json_string_preference(self):
        pref = json.dumps({"cityId": "pune"})
        url = attach_location("/api/properties?status=active", "properties?status=active", pref)
        assert url.startswith("/api/properties?")
        assert self._query(url) == {"status": "active", "cityId": "pune"}

    def test_existing_params_are_kept(self):
        url = attach_location("/api/properties?cityId=goa", "properties?cityId=goa", {"cityId": "pune"})
        assert url == "/api/properties?cityId=goa"

    def test_other_endpoints_untouched(self):
        url = attach_location("/api/banners", "banners", {"cityId": "pune"})
        assert url == "/api/banners"

    def test_prefix_must_be_whole_word(self):
        url = attach_location("/api/adsense", "adsense", {"cityId": "pune"})
        assert url == "/api/adsense"

    @pytest.mark.parametrize("pref", [None, "not json", "null", [], {"coords": {"lat": "x"}}])
    def test_unusable_preference_ignored(self, pref):
        assert attach_location("/api/properties", "properties", pref) == "/api/properties"

    def test_repeated_params_are_kept(self):
        url = attach_location(
            "http://h/api/properties?type=a&type=b", "properties?type=a&type=b", {"cityId": "c1"}
        )
        assert url == "http://h/api/properties?type=a&type=b&cityId=c1"
        assert parse_qs(urlsplit(url).query) == {"type": ["a", "b"], "cityId": ["c1"]}
