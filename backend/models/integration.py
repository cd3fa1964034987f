# backend/models/integration.py
from dataclasses import dataclass, replace


# Credentials for the marketplace (Shopee) and e-invoice providers
@dataclass(frozen=True)
class IntegrationConfig:
    shopee_api_key: str = ""
    shopee_shop_id: str = ""
    invoice_api_key: str = ""
    invoice_api_secret: str = ""

    @property
    def invoicing_enabled(self) -> bool:
        return bool(self.invoice_api_key)

    @property
    def marketplace_enabled(self) -> bool:
        return bool(self.shopee_api_key)

    def with_changes(self, **changes) -> "IntegrationConfig":
        return replace(self, **changes)
