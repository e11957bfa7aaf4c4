"""Tests for field-equality filtering."""

import math

from pipes_feed.models import Episode, Series
from pipes_feed.services.predicates import coerce_expected, filter_records, matches


class TestCoerceExpected:
    """Tests for predicate value coercion."""

    def test_true_string_becomes_boolean(self):
        assert coerce_expected("isLive", "true") is True

    def test_other_strings_unchanged(self):
        assert coerce_expected("genre", "genre-1") == "genre-1"
        assert coerce_expected("isLive", "false") == "false"

    def test_season_and_episode_numbers_become_numbers(self):
        assert coerce_expected("seasonNumber", "3") == 3
        assert coerce_expected("episodeNumber", "2") == 2
        assert coerce_expected("episodeNumber", "2.5") == 2.5

    def test_non_numeric_number_never_matches(self):
        assert math.isnan(coerce_expected("seasonNumber", "abc"))

    def test_other_numeric_strings_stay_strings(self):
        assert coerce_expected("id", "42") == "42"


class TestFilterRecords:
    """Tests for filter_records."""

    def test_empty_predicates_return_everything(self, media):
        assert filter_records(media, {}) == media
        assert filter_records(media, None) == media

    def test_single_predicate(self, media):
        result = filter_records(media, {"type": "series"})
        assert [record.id for record in result] == ["series-1", "series-2", "series-3"]

    def test_all_predicates_must_match(self, media):
        result = filter_records(
            media,
            {"type": "episode", "seriesId": "series-1", "seasonNumber": "2"},
        )
        assert [record.id for record in result] == ["ep-2-1", "ep-2-2"]

    def test_attribute_names_are_accepted(self, media):
        result = filter_records(media, {"series_id": "series-2"})
        assert [record.id for record in result] == ["ep-iron-1"]

    def test_missing_field_excludes_record(self, media):
        # Channels and genres have no seriesId
        result = filter_records(media, {"seriesId": "series-1"})
        assert all(isinstance(record, Episode) for record in result)
        assert len(result) == 4

    def test_unknown_field_matches_nothing(self, media):
        assert filter_records(media, {"colour": "red"}) == []

    def test_none_value_counts_as_missing(self):
        series = Series(id="s", title="S", channel=None)
        assert not matches(series, {"channel": "None"})

    def test_boolean_predicate(self, media):
        live = media[-1].model_copy(update={"is_live": True})
        records = media[:-1] + [live]
        result = filter_records(records, {"isLive": "true"})
        assert [record.id for record in result] == ["ep-iron-1"]

    def test_boolean_does_not_match_number(self):
        episode = Episode(id="e", season_number=1)
        assert not matches(episode, {"seasonNumber": True})

    def test_order_is_preserved(self, media):
        result = filter_records(media, {"genre": "genre-1"})
        positions = [media.index(record) for record in result]
        assert positions == sorted(positions)
