# backend/utils/invoice_client.py
import asyncio
import httpx
import logging
import random
from typing import Optional
from urllib.parse import urljoin

from config import Settings
from models.integration import IntegrationConfig
from pos.errors import InvoiceServiceError

logger = logging.getLogger(__name__)

class InvoiceClient:
    """E-invoice provider client.

    With ``INVOICE_API_URL`` configured, invoices are issued over HTTP.
    Without it the provider is simulated: a short delay, then an
    ``AB-<8 digits>`` number.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = settings.INVOICE_API_URL
        self.timeout = settings.INVOICE_TIMEOUT_SECONDS
        self.simulated_latency = settings.INVOICE_SIMULATED_LATENCY_SECONDS
        self._transport = transport

    async def issue_invoice(self, config: IntegrationConfig, amount: int) -> str:
        if not self.api_url:
            return await self._simulate(config, amount)

        # Submit invoice request to the provider API
        invoice_url = urljoin(self.api_url, "/api/invoices")
        headers = {
            "Content-Type": "application/json",
            "X-Api-Key": config.invoice_api_key,
            "X-Api-Secret": config.invoice_api_secret,
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(invoice_url, json={"amount": amount}, headers=headers)
                response.raise_for_status()
                invoice_number = response.json().get("invoiceNumber")
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Invoice issue error: {e}")
                raise InvoiceServiceError(str(e)) from e

        if not invoice_number:
            raise InvoiceServiceError("Invoice provider returned no invoice number")
        logger.info("Invoice issued: %s for amount %s", invoice_number, amount)
        return invoice_number

    async def _simulate(self, config: IntegrationConfig, amount: int) -> str:
        logger.info("Connecting to simulated invoice API (key=%s...)", config.invoice_api_key[:4])
        await asyncio.sleep(self.simulated_latency)
        invoice_number = f"AB-{random.randrange(100000000):08d}"
        logger.info("Invoice issued: %s for amount %s", invoice_number, amount)
        return invoice_number
