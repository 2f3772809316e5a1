"""
Event publisher - posts lookup change notifications and error reports to the bus API.
Publishing is best effort: failures are logged and never reach the caller.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import httpx

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class M2MToken:
    """Machine-to-machine access token with expiration"""
    access_token: str
    expires_at: datetime

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        return datetime.utcnow() >= (self.expires_at - timedelta(seconds=buffer_seconds))


class M2MTokenProvider:
    """Client-credentials token fetcher with caching"""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        auth_url: Optional[str] = settings.AUTH0_URL,
        audience: Optional[str] = settings.AUTH0_AUDIENCE,
        client_id: Optional[str] = settings.AUTH0_CLIENT_ID,
        client_secret: Optional[str] = settings.AUTH0_CLIENT_SECRET,
        cache_seconds: int = settings.TOKEN_CACHE_TIME
    ):
        self.http_client = http_client
        self.auth_url = auth_url
        self.audience = audience
        self.client_id = client_id
        self.client_secret = client_secret
        self.cache_seconds = cache_seconds
        self._cached_token: Optional[M2MToken] = None

    @property
    def enabled(self) -> bool:
        return bool(self.auth_url and self.client_id and self.client_secret)

    async def get_token(self) -> Optional[str]:
        if not self.enabled:
            return None

        if self._cached_token is None or self._cached_token.is_expired():
            response = await self.http_client.post(self.auth_url, json={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "audience": self.audience,
            })
            response.raise_for_status()
            token_data = response.json()
            lifetime = min(int(token_data.get("expires_in", self.cache_seconds)), self.cache_seconds)
            self._cached_token = M2MToken(
                access_token=token_data["access_token"],
                expires_at=datetime.utcnow() + timedelta(seconds=lifetime)
            )
            logger.debug("Fetched new M2M token for bus API")

        return self._cached_token.access_token


class EventPublisher:
    """Bus API event publisher"""

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        bus_url: Optional[str] = settings.BUSAPI_URL,
        token_provider: Optional[M2MTokenProvider] = None,
        originator: str = settings.KAFKA_MESSAGE_ORIGINATOR,
        error_topic: str = settings.KAFKA_ERROR_TOPIC
    ):
        self.http_client = http_client
        self.bus_url = bus_url.rstrip("/") if bus_url else None
        self.token_provider = token_provider
        self.originator = originator
        self.error_topic = error_topic

    def build_message(self, topic: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "topic": topic,
            "originator": self.originator,
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "mime-type": "application/json",
            "payload": payload,
        }

    async def post_event(self, message: Dict[str, Any]) -> None:
        """Deliver one message to the bus API; raises on transport or HTTP errors"""
        if not self.bus_url or self.http_client is None:
            logger.info(f"Bus API not configured, event for topic {message['topic']} not sent")
            return

        headers = {}
        if self.token_provider is not None:
            token = await self.token_provider.get_token()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        response = await self.http_client.post(f"{self.bus_url}/bus/events", json=message, headers=headers)
        response.raise_for_status()

    async def publish(self, topic: str, payload: Dict[str, Any]) -> bool:
        """Publish a change notification, returns False when delivery failed"""
        logger.info(f"Publish event to topic {topic}")
        try:
            await self.post_event(self.build_message(topic, payload))
            return True
        except Exception as e:
            logger.error(f"Failed to publish event to topic {topic}: {e}", exc_info=True)
            return False

    async def publish_error(self, payload: Dict[str, Any], api_action: str) -> bool:
        """Publish an error report tagged with the failing API action"""
        payload = dict(payload, apiAction=api_action)
        logger.info(f"Publish error to topic {self.error_topic} for action {api_action}")
        try:
            await self.post_event(self.build_message(self.error_topic, payload))
            return True
        except Exception as e:
            logger.error(f"Failed to publish error for action {api_action}: {e}", exc_info=True)
            return False
