"""
Tests for sitewrap.naming module.

The identity slug decides where an app keeps its user data, so these
tests pin exact values.
"""

from __future__ import annotations

import hashlib

import pytest

from sitewrap.naming import (
    SLUG_SEPARATOR,
    normalize_app_name,
    normalize_name,
    url_hash_prefix,
)


class TestUrlHashPrefix:
    """Tests for url_hash_prefix."""

    def test_known_value(self):
        """Test the hash prefix for a known URL."""
        assert url_hash_prefix("https://example.com/") == "182cce"

    def test_matches_md5(self):
        """Test that the prefix is the first six hex chars of MD5."""
        url = "https://example.org/"
        expected = hashlib.md5(url.encode("utf-8")).hexdigest()[:6]

        assert url_hash_prefix(url) == expected

    def test_url_is_not_normalized(self):
        """Test that a trailing slash changes the hash."""
        assert url_hash_prefix("https://example.com") != url_hash_prefix(
            "https://example.com/"
        )


@pytest.mark.unit
class TestNormalizeName:
    """Tests for normalize_name."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("My App", "my-app"),
            ("Google Calendar", "google-calendar"),
            ("some_app", "some-app"),
            ("Hello, World: v1.2", "hello-world-v12"),
            ("Tabs\tand  spaces", "tabs-and-spaces"),
            ("mixed _ run", "mixed-run"),
            ("already-slugged", "already-slugged"),
        ],
    )
    def test_normalization(self, name, expected):
        """Test lower-casing, stripping and separator collapsing."""
        assert normalize_name(name) == expected


@pytest.mark.unit
class TestNormalizeAppName:
    """Tests for normalize_app_name."""

    def test_example_slug(self):
        """Test the slug for a simple app."""
        assert normalize_app_name("My App", "https://example.com/") == (
            "my-app-sitewrap-182cce"
        )

    def test_google_calendar_slug(self):
        """Test the slug for a name with a space and a bare-host URL."""
        assert normalize_app_name("Google Calendar", "https://calendar.google.com") == (
            "google-calendar-sitewrap-3526be"
        )

    def test_deterministic(self):
        """Test that the same inputs always give the same slug."""
        first = normalize_app_name("Example", "https://example.org/")
        second = normalize_app_name("Example", "https://example.org/")

        assert first == second == "example-sitewrap-ef57f6"

    def test_case_only_changes_keep_slug(self):
        """Test that renaming by case alone keeps the same data directory."""
        assert normalize_app_name("EXAMPLE", "https://example.com/") == (
            normalize_app_name("example", "https://example.com/")
        )

    def test_name_and_url_parts_are_independent(self):
        """Test that each input only changes its own half of the slug."""
        base_name, base_hash = normalize_app_name(
            "Example", "https://example.com/"
        ).rsplit(SLUG_SEPARATOR, 1)
        new_url_name, new_url_hash = normalize_app_name(
            "Example", "https://example.org/"
        ).rsplit(SLUG_SEPARATOR, 1)
        new_name_name, new_name_hash = normalize_app_name(
            "Other App", "https://example.com/"
        ).rsplit(SLUG_SEPARATOR, 1)

        assert new_url_name == base_name == "example"
        assert new_url_hash != base_hash
        assert new_name_hash == base_hash == "182cce"
        assert new_name_name == "other-app"
