# backend/utils/description_client.py
import httpx
import logging
from typing import Optional
from urllib.parse import urljoin

from config import Settings

logger = logging.getLogger(__name__)

MISSING_KEY_TEXT = "Please configure an API key to enable AI description generation."
FAILURE_TEXT = "Could not generate a description, please try again later."

PROMPT_TEMPLATE = """
You are a copywriter for a cozy island general store.
Write a short, cute, and funny description (max 2 sentences) for an item.
The item is "{name}" and category is "{category}".
Tone: playful and warm.
Return ONLY the description text.
"""

class DescriptionClient:
    """Generates catalog descriptions with the Gemini ``generateContent`` API.

    Never raises: a missing key or a failed call yields a human-readable
    placeholder instead.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_url = settings.GEMINI_API_URL
        self.api_key = settings.GEMINI_API_KEY
        self.model = settings.GEMINI_MODEL
        self.timeout = settings.GEMINI_TIMEOUT_SECONDS
        self._transport = transport

    async def generate_description(self, name: str, category: str) -> str:
        if not self.api_key:
            return MISSING_KEY_TEXT

        url = urljoin(self.api_url, f"/v1beta/models/{self.model}:generateContent")
        payload = {
            "contents": [
                {"parts": [{"text": PROMPT_TEMPLATE.format(name=name, category=category)}]}
            ]
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            try:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
                response.raise_for_status()
                data = response.json()
                return data["candidates"][0]["content"]["parts"][0]["text"].strip()
            except (httpx.RequestError, httpx.HTTPStatusError) as e:
                logger.error(f"Gemini API error: {e}")
            except (KeyError, IndexError, TypeError, ValueError) as e:
                logger.error(f"Unexpected Gemini response: {e}")
        return FAILURE_TEXT
