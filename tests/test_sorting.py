"""Tests for multi-key sorting."""

from pipes_feed.models import Episode, Series
from pipes_feed.services.sorting import SortKey, parse_sort_key, sort_records


def _ids(records):
    return [record.id for record in records]


class TestParseSortKey:
    """Tests for sort key parsing."""

    def test_bare_field_is_ascending(self):
        assert parse_sort_key("episodeNumber") == SortKey("episodeNumber")

    def test_desc_suffix(self):
        assert parse_sort_key("episodeNumber:desc") == SortKey("episodeNumber", descending=True)

    def test_legacy_decs_suffix(self):
        assert parse_sort_key("seasonNumber:decs") == SortKey("seasonNumber", descending=True)

    def test_asc_suffix(self):
        assert parse_sort_key("genre:ASC") == SortKey("genre")

    def test_blank_key(self):
        assert parse_sort_key("  ") is None


class TestSortRecords:
    """Tests for sort_records."""

    def test_no_keys_returns_input_order(self, media):
        assert sort_records(media, []) == media
        assert sort_records(media, None) == media

    def test_single_key_descending(self, media):
        episodes = [record for record in media if isinstance(record, Episode) and record.series_id == "series-1"]
        result = sort_records(episodes, ["episodeNumber:desc"])
        assert [record.episode_number for record in result] == [2, 2, 1, 1]
        # Equal keys keep input order
        assert _ids(result) == ["ep-1-2", "ep-2-2", "ep-1-1", "ep-2-1"]

    def test_multi_key_lexicographic(self, media):
        episodes = [record for record in media if isinstance(record, Episode) and record.series_id == "series-1"]
        result = sort_records(episodes, ["seasonNumber:desc", "episodeNumber"])
        assert _ids(result) == ["ep-2-1", "ep-2-2", "ep-1-1", "ep-1-2"]

    def test_sort_is_repeatable(self, media):
        keys = ["genre", "title:desc"]
        assert sort_records(media, keys) == sort_records(media, keys)

    def test_unknown_field_keeps_input_order(self, media):
        assert sort_records(media, ["noSuchField"]) == media

    def test_missing_values_lead_ascending(self):
        records = [Series(id="b", genre="x"), Series(id="a"), Series(id="c", genre="w")]
        assert _ids(sort_records(records, ["genre"])) == ["a", "c", "b"]

    def test_missing_values_lead_descending(self):
        records = [Series(id="b", genre="x"), Series(id="a"), Series(id="c", genre="w")]
        assert _ids(sort_records(records, ["genre:desc"])) == ["a", "b", "c"]

    def test_input_is_not_mutated(self, media):
        snapshot = list(media)
        sort_records(media, ["title:desc"])
        assert media == snapshot
