# backend/utils/marketplace_client.py
import asyncio
import httpx
import logging
from typing import Optional, Sequence
from urllib.parse import urljoin

from config import Settings
from models.integration import IntegrationConfig
from models.product import Product
from pos.errors import MarketplaceSyncError

logger = logging.getLogger(__name__)

class MarketplaceClient:
    """Pushes the catalog's stock and prices to the Shopee shop.

    Simulated when ``MARKETPLACE_API_URL`` is not configured.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = settings.MARKETPLACE_API_URL
        self.timeout = settings.MARKETPLACE_TIMEOUT_SECONDS
        self.simulated_latency = settings.MARKETPLACE_SIMULATED_LATENCY_SECONDS
        self._transport = transport

    async def sync_inventory(self, config: IntegrationConfig, products: Sequence[Product]) -> bool:
        logger.info("Connecting to Shopee API... shop_id=%s", config.shopee_shop_id)
        if not self.api_url:
            await asyncio.sleep(self.simulated_latency)
            logger.info("Synced %s items to Shopee successfully.", len(products))
            return True

        sync_url = urljoin(self.api_url, f"/api/shops/{config.shopee_shop_id}/items/sync")
        headers = {"Authorization": f"Bearer {config.shopee_api_key}"}
        payload = {
            "items": [
                {
                    "itemId": p.shopee_id or p.id,
                    "name": p.name,
                    "price": p.effective_price,
                    "originalPrice": p.price,
                    "stock": p.stock,
                }
                for p in products
            ]
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(sync_url, json=payload, headers=headers)
                response.raise_for_status()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Shopee sync error: {e}")
                raise MarketplaceSyncError(str(e)) from e

        logger.info("Synced %s items to Shopee successfully.", len(products))
        return True
