# backend/schemas/settings.py
from pydantic import BaseModel
from typing import Optional

from models.integration import IntegrationConfig

MASK = "********"


def _mask(value: str) -> str:
    return MASK if value else ""


# Integration settings as shown to the operator; secrets are masked
class IntegrationConfigOut(BaseModel):
    shopee_api_key: str
    shopee_shop_id: str
    invoice_api_key: str
    invoice_api_secret: str
    invoicing_enabled: bool
    marketplace_enabled: bool

    @classmethod
    def from_config(cls, config: IntegrationConfig) -> "IntegrationConfigOut":
        return cls(
            shopee_api_key=_mask(config.shopee_api_key),
            shopee_shop_id=config.shopee_shop_id,
            invoice_api_key=config.invoice_api_key,
            invoice_api_secret=_mask(config.invoice_api_secret),
            invoicing_enabled=config.invoicing_enabled,
            marketplace_enabled=config.marketplace_enabled,
        )


# Partial update; omitted fields keep their value, "" clears one
class IntegrationConfigUpdate(BaseModel):
    shopee_api_key: Optional[str] = None
    shopee_shop_id: Optional[str] = None
    invoice_api_key: Optional[str] = None
    invoice_api_secret: Optional[str] = None


class MarketplaceSyncResult(BaseModel):
    success: bool
    synced: int
