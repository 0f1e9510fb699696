"""Parse Server client lifecycle.

Initialized at app startup from PARSE_SERVER_URL, PARSE_APP_ID and
PARSE_MASTER_KEY. The lifespan hands the client to every component that
needs it; nothing else reaches for it globally.
"""

import logging

from cloudcode.core.config import Settings
from cloudcode.infrastructure.parse._rest_client import ParseRESTClient

logger = logging.getLogger(__name__)


def create_parse_client(settings: Settings) -> ParseRESTClient:
    """Build the REST client from settings (owns its own httpx.AsyncClient)."""
    client = ParseRESTClient(
        settings.parse_server_url,
        settings.parse_app_id,
        settings.parse_master_key.get_secret_value(),
        page_size=settings.parse_page_size,
        timeout=settings.parse_request_timeout_seconds,
    )
    logger.info("Parse client configured for %s", client.server_url)
    return client


async def close_parse_client(client: ParseRESTClient) -> None:
    """Close the client's HTTP connection pool. Call from app shutdown."""
    await client.aclose()
    logger.info("Parse HTTP client closed")
