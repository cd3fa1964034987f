# backend/store.py
"""In-memory application state.

``AppStore`` owns the catalog, the members, the integration settings, the
audit log and one checkout session per operator.  It lives on
``app.state.store`` and reaches the routes through :func:`get_store`.
"""
import asyncio
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from fastapi import Request

from config import Settings
from models.integration import IntegrationConfig
from models.log import Log
from models.member import Member
from models.product import Product
from models.users import User
from pos.checkout import CheckoutSession, LocalInvoiceNumbers
from utils.description_client import DescriptionClient
from utils.invoice_client import InvoiceClient
from utils.marketplace_client import MarketplaceClient


class Catalog:
    """Products keyed by id, kept in insertion order."""

    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products: Dict[str, Product] = {p.id: p for p in products}

    def list(self) -> List[Product]:
        return list(self._products.values())

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def save(self, product: Product) -> Product:
        self._products[product.id] = product
        return product

    def delete(self, product_id: str) -> bool:
        return self._products.pop(product_id, None) is not None

    def categories(self) -> List[str]:
        return list(dict.fromkeys(p.category for p in self._products.values() if p.category))

    def __len__(self) -> int:
        return len(self._products)


class MemberStore:
    """Members keyed by id.

    Balance and history changes go through :meth:`update`, which holds a
    per-member lock so concurrent checkouts for one member cannot lose an
    update.
    """

    def __init__(self, members: Iterable[Member] = ()) -> None:
        self._members: Dict[str, Member] = {m.id: m for m in members}
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def list(self) -> List[Member]:
        return list(self._members.values())

    def get(self, member_id: str) -> Optional[Member]:
        return self._members.get(member_id)

    def add(self, member: Member) -> Member:
        self._members[member.id] = member
        return member

    async def update(self, member_id: str, change: Callable[[Member], Member]) -> Member:
        async with self._locks[member_id]:
            member = self._members.get(member_id)
            if member is None:
                raise KeyError(f"Member {member_id} not found")
            updated = change(member)
            self._members[member_id] = updated
            return updated


class AppStore:
    def __init__(
        self,
        settings: Settings,
        products: Iterable[Product] = (),
        members: Iterable[Member] = (),
        invoice_client: Optional[InvoiceClient] = None,
        marketplace_client: Optional[MarketplaceClient] = None,
        description_client: Optional[DescriptionClient] = None,
    ) -> None:
        self.settings = settings
        self.catalog = Catalog(products)
        self.members = MemberStore(members)
        self.integration = IntegrationConfig(
            shopee_api_key=settings.SHOPEE_API_KEY,
            shopee_shop_id=settings.SHOPEE_SHOP_ID,
            invoice_api_key=settings.INVOICE_API_KEY,
            invoice_api_secret=settings.INVOICE_API_SECRET,
        )
        self.invoice_client = invoice_client or InvoiceClient(settings)
        self.marketplace_client = marketplace_client or MarketplaceClient(settings)
        self.description_client = description_client or DescriptionClient(settings)
        self.local_invoice_numbers = LocalInvoiceNumbers(settings.LOCAL_INVOICE_PREFIX)
        self.logs: List[Log] = []
        self._sessions: Dict[str, CheckoutSession] = {}

    def session_for(self, user: User) -> CheckoutSession:
        # One isolated cart/checkout per operator
        session = self._sessions.get(user.id)
        if session is None:
            session = CheckoutSession(
                members=self.members,
                integration=lambda: self.integration,
                issue_invoice=self.invoice_client.issue_invoice,
                local_numbers=self.local_invoice_numbers,
                invoice_timeout=self.settings.INVOICE_TIMEOUT_SECONDS,
            )
            self._sessions[user.id] = session
        return session


def get_store(request: Request) -> AppStore:
    return request.app.state.store
