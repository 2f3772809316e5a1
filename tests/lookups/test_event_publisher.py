"""
Event publisher tests against a mocked bus API
"""

import json

import httpx
import pytest

from services.event_publisher import EventPublisher, M2MTokenProvider

BUS_URL = "https://bus.example/v5"
AUTH_URL = "https://auth.example/oauth/token"


class BusApi:
    """Records requests; serves tokens and accepts events"""

    def __init__(self, event_status: int = 204):
        self.event_status = event_status
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == AUTH_URL:
            return httpx.Response(200, json={"access_token": "m2m-token", "expires_in": 3600})
        return httpx.Response(self.event_status)

    def events(self):
        return [json.loads(r.content) for r in self.requests if str(r.url) != AUTH_URL]


def make_publisher(bus: BusApi, bus_url=BUS_URL):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(bus.handler))
    provider = M2MTokenProvider(http_client, auth_url=AUTH_URL, audience="https://bus.example",
                                client_id="client", client_secret="secret", cache_seconds=600)
    return EventPublisher(http_client=http_client, bus_url=bus_url, token_provider=provider,
                          originator="lookups-api", error_topic="common.error.reporting")


class TestEventPublisher:

    @pytest.mark.asyncio
    async def test_publish_message_shape(self):
        bus = BusApi()
        publisher = make_publisher(bus)

        assert await publisher.publish("lookups.notification.create", {"id": "c1", "resource": "country"})

        event_request = bus.requests[-1]
        assert str(event_request.url) == f"{BUS_URL}/bus/events"
        assert event_request.headers["Authorization"] == "Bearer m2m-token"
        message = bus.events()[0]
        assert message["topic"] == "lookups.notification.create"
        assert message["originator"] == "lookups-api"
        assert message["mime-type"] == "application/json"
        assert message["payload"] == {"id": "c1", "resource": "country"}
        assert message["timestamp"].endswith("Z")

    @pytest.mark.asyncio
    async def test_token_is_cached(self):
        bus = BusApi()
        publisher = make_publisher(bus)

        await publisher.publish("t", {})
        await publisher.publish("t", {})

        assert [str(r.url) for r in bus.requests].count(AUTH_URL) == 1

    @pytest.mark.asyncio
    async def test_error_report_carries_action(self):
        bus = BusApi()
        publisher = make_publisher(bus)

        await publisher.publish_error({"name": "Wakanda"}, "country.create")

        message = bus.events()[0]
        assert message["topic"] == "common.error.reporting"
        assert message["payload"] == {"name": "Wakanda", "apiAction": "country.create"}

    @pytest.mark.asyncio
    async def test_delivery_failure_is_swallowed(self):
        publisher = make_publisher(BusApi(event_status=500))

        assert await publisher.publish("t", {"id": "c1"}) is False

    @pytest.mark.asyncio
    async def test_unconfigured_bus_only_logs(self):
        bus = BusApi()
        publisher = make_publisher(bus, bus_url=None)

        assert await publisher.publish("t", {"id": "c1"}) is True
        assert bus.requests == []
