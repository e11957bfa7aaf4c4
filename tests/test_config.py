"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from pipes_feed.config import CustomSettings


class TestCustomSettings:
    """Tests for CustomSettings validators."""

    def test_defaults(self):
        config = CustomSettings()
        assert config.default_per_page == 20
        assert config.max_per_page == 100
        assert config.epg_max_results == 100

    def test_base_url_gets_trailing_slash(self):
        assert CustomSettings(base_url="https://feeds.example.com").base_url == "https://feeds.example.com/"

    def test_base_url_must_be_http(self):
        with pytest.raises(ValidationError):
            CustomSettings(base_url="ftp://feeds.example.com/")

    def test_catalog_source_scheme(self):
        assert CustomSettings(catalog_source="https://cdn.example.com/c.json").catalog_source.startswith("https")
        with pytest.raises(ValidationError):
            CustomSettings(catalog_source="s3://bucket/catalog.json")
        with pytest.raises(ValidationError):
            CustomSettings(catalog_source="  ")

    @pytest.mark.parametrize("field", ["default_per_page", "max_per_page", "epg_max_results"])
    def test_positive_ints(self, field):
        with pytest.raises(ValidationError):
            CustomSettings(**{field: 0})

    def test_default_per_page_within_max(self):
        with pytest.raises(ValidationError):
            CustomSettings(default_per_page=50, max_per_page=10)

    def test_score_cutoff_range(self):
        with pytest.raises(ValidationError):
            CustomSettings(search_score_cutoff=120)

    def test_time_zone(self):
        assert CustomSettings(default_time_zone="Europe/Berlin").default_time_zone == "Europe/Berlin"
        with pytest.raises(ValidationError):
            CustomSettings(default_time_zone="Nowhere/City")

    def test_log_level_is_normalized(self):
        assert CustomSettings(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            CustomSettings(log_level="chatty")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PER_PAGE", "5")
        assert CustomSettings().default_per_page == 5
