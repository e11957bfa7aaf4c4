"""HTTP tests for the feed endpoints."""

from fastapi.testclient import TestClient

from pipes_feed.catalog import set_catalog
from pipes_feed.config import settings
from pipes_feed.main import app
from pipes_feed.services.rendering_service import PIPES2_MEDIA_TYPE
from pipes_feed.utils.context import encode_context

MONDAY_MILLIS = 1760313600000
WEDNESDAY_MILLIS = 1760486400000


def _entry_ids(response):
    return [entry["id"] for entry in response.json()["entry"]]


class TestServiceEndpoints:
    """Root and health endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "/media" in response.json()["endpoints"]["media"]

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["catalog"]["episode"] == 5
        assert body["catalog"]["program"] == 6

    def test_catalog_not_loaded(self):
        set_catalog(None)
        response = TestClient(app).get("/media")
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "CATALOG_UNAVAILABLE"


class TestMediaEndpoint:
    """Tests for /media."""

    def test_headers(self, client):
        response = client.get("/media")
        assert response.headers["content-type"].startswith(PIPES2_MEDIA_TYPE)
        assert response.headers["cache-control"] == f"public, max-age={settings.cache_max_age_sec}"

    def test_filter_sort_and_next_link(self, client):
        response = client.get(
            "/media",
            params={
                "byType": "episode",
                "bySeriesId": "series-1",
                "sortBy": "episodeNumber:desc",
                "perPage": "2",
            },
        )
        body = response.json()
        assert _entry_ids(response) == ["ep-1-2", "ep-2-2"]
        assert body["type"] == {"value": "feed"}
        assert body["next"].startswith("http://testserver/media?")
        assert "page=2" in body["next"]
        assert "perPage=2" in body["next"]

    def test_numeric_predicate(self, client):
        response = client.get("/media", params={"byType": "episode", "bySeasonNumber": "2"})
        assert _entry_ids(response) == ["ep-2-1", "ep-2-2"]
        assert "next" not in response.json()

    def test_text_search(self, client):
        response = client.get("/media", params={"byType": "episode", "q": "E2S1"})
        assert _entry_ids(response)[0] == "ep-1-2"

    def test_feed_title(self, client):
        assert client.get("/media", params={"feedTitle": "Shows"}).json()["title"] == "Shows"
        assert "title" not in client.get("/media").json()

    def test_malformed_paging_falls_back(self, client):
        response = client.get("/media", params={"perPage": "lots", "page": "-1"})
        assert response.status_code == 200
        assert len(response.json()["entry"]) == 12

    def test_context_time_zone(self, client):
        ctx = encode_context({"timeZoneOffset": "America/New_York"})
        response = client.get("/media", params={"byId": "ep-iron-1", "ctx": ctx})
        [entry] = response.json()["entry"]
        assert entry["extensions"]["broadcastDate"] == "Oct 15, 7:59AM"
        assert entry["extensions"]["isLive"] is True


class TestEpgEndpoint:
    """Tests for /epg."""

    def test_now(self, client):
        response = client.get("/epg", params={"now": "true"})
        [entry] = response.json()["entry"]
        assert entry["id"] == "p4"
        assert entry["extensions"]["isLive"] is True

    def test_just_ended(self, client):
        assert _entry_ids(client.get("/epg", params={"justEnded": "true"})) == ["p3", "p2", "p1"]

    def test_now_takes_precedence(self, client):
        response = client.get("/epg", params={"upNext": "true", "now": "true"})
        assert _entry_ids(response) == ["p4"]

    def test_false_flag_does_not_enable_mode(self, client):
        assert len(client.get("/epg", params={"now": "false"}).json()["entry"]) == 6
        assert _entry_ids(client.get("/epg", params={"now": "0", "justEnded": "1"})) == ["p3", "p2", "p1"]

    def test_non_numeric_day_falls_through(self, client):
        response = client.get("/epg", params={"forDay": "today", "futureForDay": str(WEDNESDAY_MILLIS)})
        assert _entry_ids(response) == ["p4", "p5"]

    def test_for_day_on_channel(self, client):
        response = client.get("/epg", params={"forDay": str(WEDNESDAY_MILLIS), "byChannel": "channel-2"})
        assert _entry_ids(response) == ["p2", "p4"]

    def test_limit(self, client):
        assert _entry_ids(client.get("/epg", params={"limit": "3"})) == ["p1", "p2", "p3"]


class TestEpgDaysEndpoint:
    """Tests for /epg/days."""

    def test_week_starts_monday(self, client):
        body = client.get("/epg/days").json()
        assert body["title"] == "EPG"
        assert len(body["entry"]) == 7
        assert body["entry"][0] == {"id": MONDAY_MILLIS, "title": "Monday"}
        assert body["entry"][6]["title"] == "Sunday"

    def test_start_today(self, client):
        body = client.get("/epg/days", params={"startToday": "true", "feedTitle": "Guide"}).json()
        assert body["title"] == "Guide"
        assert body["entry"][0] == {"id": WEDNESDAY_MILLIS, "title": "Wednesday"}
        assert body["entry"][1]["title"] == "Thursday"


class TestCollectionsEndpoints:
    """Tests for /collections and /user/collections."""

    def test_genres(self, client):
        response = client.get("/collections/genres")
        body = response.json()
        assert body["title"] == "genres"
        assert _entry_ids(response) == ["genre-1", "genre-2"]
        assert body["entry"][0]["title"] == "genre-1"

    def test_unknown_collection(self, client):
        response = client.get("/collections/unknown")
        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "error"
        assert body["error"]["code"] == "COLLECTION_NOT_FOUND"
        assert body["error"]["context"] == {"collection": "unknown"}

    def test_my_favorites(self, client):
        ctx = encode_context({"userToken": "token-1"})
        response = client.get("/user/collections/myFavorites", params={"ctx": ctx})
        assert response.status_code == 200
        assert len(response.json()["entry"]) == 4

    def test_unknown_user_collection(self, client):
        assert client.get("/user/collections/watchLater").status_code == 404
