"""
Health endpoint tests
"""

from config import settings

HEALTH = f"{settings.API_VERSION}/health"


class TestHealth:

    def test_healthy(self, client):
        response = client.get(HEALTH)

        assert response.status_code == 200
        assert response.json() == {"checksRun": 1}

    def test_search_index_down(self, client, search_index):
        search_index.fail("ping")

        response = client.get(HEALTH)

        assert response.status_code == 503
        assert response.json()["message"].startswith("Search index is unavailable")

    def test_primary_store_down(self, client, primary_store):
        primary_store.fail("ping")

        response = client.get(HEALTH)

        assert response.status_code == 503
        assert response.json()["message"].startswith("Primary store is unavailable")

    def test_trace_id_header(self, client):
        assert client.get(HEALTH).headers["X-Trace-ID"]
