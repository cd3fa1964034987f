"""Tests for the outbound HTTP clients, driven through httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from config import Settings
from models.integration import IntegrationConfig
from models.product import Product
from pos.errors import InvoiceServiceError, MarketplaceSyncError
from utils.description_client import FAILURE_TEXT, MISSING_KEY_TEXT, DescriptionClient
from utils.invoice_client import InvoiceClient
from utils.marketplace_client import MarketplaceClient


@pytest.fixture
def remote_settings():
    return Settings(
        _env_file=None,
        INVOICE_API_URL="https://invoice.test",
        MARKETPLACE_API_URL="https://shopee.test",
        GEMINI_API_URL="https://gemini.test",
        GEMINI_API_KEY="gem-key",
        INVOICE_SIMULATED_LATENCY_SECONDS=0,
        MARKETPLACE_SIMULATED_LATENCY_SECONDS=0,
    )


CONFIG = IntegrationConfig(
    shopee_api_key="shop-key",
    shopee_shop_id="42",
    invoice_api_key="inv-key",
    invoice_api_secret="inv-secret",
)


class TestInvoiceClient:
    def test_issue_invoice(self, remote_settings):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"invoiceNumber": "AB-11112222"})

        client = InvoiceClient(remote_settings, transport=httpx.MockTransport(handler))
        number = asyncio.run(client.issue_invoice(CONFIG, 860))

        assert number == "AB-11112222"
        assert seen["url"] == "https://invoice.test/api/invoices"
        assert seen["headers"]["X-Api-Key"] == "inv-key"
        assert seen["headers"]["X-Api-Secret"] == "inv-secret"
        assert seen["body"] == {"amount": 860}

    def test_http_error_raises(self, remote_settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(503))
        client = InvoiceClient(remote_settings, transport=transport)
        with pytest.raises(InvoiceServiceError):
            asyncio.run(client.issue_invoice(CONFIG, 100))

    def test_missing_number_raises(self, remote_settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        client = InvoiceClient(remote_settings, transport=transport)
        with pytest.raises(InvoiceServiceError):
            asyncio.run(client.issue_invoice(CONFIG, 100))

    def test_simulated_provider(self, settings):
        number = asyncio.run(InvoiceClient(settings).issue_invoice(CONFIG, 100))
        assert number.startswith("AB-")
        assert len(number) == 11
        assert number[3:].isdigit()


class TestMarketplaceClient:
    def test_sync_inventory(self, remote_settings, coffee):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        client = MarketplaceClient(remote_settings, transport=httpx.MockTransport(handler))
        assert asyncio.run(client.sync_inventory(CONFIG, [coffee])) is True

        assert seen["url"] == "https://shopee.test/api/shops/42/items/sync"
        assert seen["auth"] == "Bearer shop-key"
        assert seen["body"]["items"] == [
            {"itemId": "1", "name": "Roost Coffee", "price": 180, "originalPrice": 200, "stock": 50}
        ]

    def test_uses_shopee_id_when_linked(self, remote_settings):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200)

        product = Product(id="9", name="Lamp", price=300, category="Furniture", shopee_id="SP-9")
        client = MarketplaceClient(remote_settings, transport=httpx.MockTransport(handler))
        asyncio.run(client.sync_inventory(CONFIG, [product]))
        assert seen["body"]["items"][0]["itemId"] == "SP-9"

    def test_http_error_raises(self, remote_settings, coffee):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        client = MarketplaceClient(remote_settings, transport=transport)
        with pytest.raises(MarketplaceSyncError):
            asyncio.run(client.sync_inventory(CONFIG, [coffee]))

    def test_simulated_sync(self, settings, coffee):
        assert asyncio.run(MarketplaceClient(settings).sync_inventory(CONFIG, [coffee])) is True


class TestDescriptionClient:
    def test_missing_key(self, settings):
        text = asyncio.run(DescriptionClient(settings).generate_description("Lamp", "Furniture"))
        assert text == MISSING_KEY_TEXT

    def test_generate_description(self, remote_settings):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "candidates": [{"content": {"parts": [{"text": "  A lamp that glows with joy.  "}]}}]
            })

        client = DescriptionClient(remote_settings, transport=httpx.MockTransport(handler))
        text = asyncio.run(client.generate_description("Lamp", "Furniture"))

        assert text == "A lamp that glows with joy."
        assert seen["url"].path.endswith(":generateContent")
        assert seen["url"].params["key"] == "gem-key"
        prompt = seen["body"]["contents"][0]["parts"][0]["text"]
        assert '"Lamp"' in prompt and '"Furniture"' in prompt

    def test_failure_returns_placeholder(self, remote_settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        client = DescriptionClient(remote_settings, transport=transport)
        assert asyncio.run(client.generate_description("Lamp", "Furniture")) == FAILURE_TEXT

    def test_malformed_response_returns_placeholder(self, remote_settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"candidates": []}))
        client = DescriptionClient(remote_settings, transport=transport)
        assert asyncio.run(client.generate_description("Lamp", "Furniture")) == FAILURE_TEXT
