# backend/pos/checkout.py
"""Checkout orchestration for one till.

A :class:`CheckoutSession` owns the cart and the attached member for a single
operator and walks the checkout state machine::

    idle -> confirm_pending -> processing -> completed -> idle
                 |
                 +-> idle (cancel)

Settlement on confirm acquires an invoice number (external provider with a
local fallback), freezes the cart into a :class:`Transaction`, credits the
attached member and resets the cart.
"""
import asyncio
import enum
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional

from models.integration import IntegrationConfig
from models.member import Member, Transaction
from models.product import Product
from pos import cart, loyalty
from pos.errors import CheckoutAbortedError, CheckoutStateError, EmptyCartError
from pos.pricing import Totals, compute_totals

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

InvoiceIssuer = Callable[[IntegrationConfig, int], Awaitable[str]]


class CheckoutState(str, enum.Enum):
    IDLE = "idle"
    CONFIRM_PENDING = "confirm_pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


# States in which the cart and member selection may change
MUTABLE_STATES = {CheckoutState.IDLE, CheckoutState.CONFIRM_PENDING}


class LocalInvoiceNumbers:
    """Issues ``<prefix>-<last six digits of a millisecond clock>`` ids.

    The full millisecond stamp never repeats within one instance, so two
    checkouts in the same millisecond still get different numbers.  Only the
    last six digits are kept, so ids issued exactly a multiple of 1000
    seconds apart can coincide.
    """

    def __init__(self, prefix: str = "NK", clock: Callable[[], float] = time.time) -> None:
        self.prefix = prefix
        self._clock = clock
        self._last = 0

    def next(self) -> str:
        stamp = max(int(self._clock() * 1000), self._last + 1)
        self._last = stamp
        return f"{self.prefix}-{str(stamp)[-6:]}"


class CheckoutSession:
    def __init__(
        self,
        *,
        members,
        integration: Callable[[], IntegrationConfig],
        issue_invoice: InvoiceIssuer,
        local_numbers: LocalInvoiceNumbers,
        invoice_timeout: float = 10.0,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._members = members
        self._integration = integration
        self._issue_invoice = issue_invoice
        self._local_numbers = local_numbers
        self._invoice_timeout = invoice_timeout
        self._clock = clock

        self.items: cart.CartItems = cart.clear()
        self.member_id: Optional[str] = None
        self.state = CheckoutState.IDLE
        self.last_transaction: Optional[Transaction] = None
        self.last_member_id: Optional[str] = None

        self._invoice_task: Optional[asyncio.Task] = None
        self._aborted = False

    @property
    def totals(self) -> Totals:
        return compute_totals(self.items)

    # ---- cart ----

    def _ensure_mutable(self, operation: str) -> None:
        if self.state not in MUTABLE_STATES:
            raise CheckoutStateError(operation, self.state)

    def add_item(self, product: Product) -> Totals:
        self._ensure_mutable("change the cart")
        self.items = cart.add_item(self.items, product)
        return self.totals

    def remove_item(self, product_id: str) -> Totals:
        self._ensure_mutable("change the cart")
        self.items = cart.remove_item(self.items, product_id)
        return self.totals

    def change_quantity(self, product_id: str, delta: int) -> Totals:
        self._ensure_mutable("change the cart")
        self.items = cart.change_quantity(self.items, product_id, delta)
        return self.totals

    def select_member(self, member_id: Optional[str]) -> None:
        self._ensure_mutable("change the member")
        self.member_id = member_id

    # ---- checkout flow ----

    def request_checkout(self) -> Totals:
        if self.state is not CheckoutState.IDLE:
            raise CheckoutStateError("start checkout", self.state)
        if not self.items:
            raise EmptyCartError("Cart is empty")
        self.state = CheckoutState.CONFIRM_PENDING
        return self.totals

    def cancel(self) -> None:
        if self.state is not CheckoutState.CONFIRM_PENDING:
            raise CheckoutStateError("cancel checkout", self.state)
        self.state = CheckoutState.IDLE

    async def confirm(self) -> Transaction:
        if self.state is not CheckoutState.CONFIRM_PENDING:
            raise CheckoutStateError("confirm checkout", self.state)

        # Totals are frozen at this point; later cart edits are rejected
        self.state = CheckoutState.PROCESSING
        self._aborted = False
        items = self.items
        totals = compute_totals(items)
        member_id = self.member_id

        task = asyncio.ensure_future(self._acquire_invoice_id(totals.final_total))
        self._invoice_task = task
        try:
            invoice_id = await task
        except asyncio.CancelledError:
            self.state = CheckoutState.IDLE
            if self._aborted:
                logger.info("Checkout aborted while waiting for an invoice number")
                raise CheckoutAbortedError("Checkout was aborted") from None
            raise
        finally:
            if self._invoice_task is task:
                self._invoice_task = None

        try:
            transaction = Transaction(
                id=invoice_id,
                date=self._clock().strftime(DATE_FORMAT),
                items=items,
                total=totals.final_total,
                original_total=totals.subtotal,
                discount_amount=totals.discount_total,
            )
            if member_id is not None:
                await self._members.update(
                    member_id, lambda member: loyalty.apply_transaction(member, transaction)
                )
        except BaseException:
            self.state = CheckoutState.CONFIRM_PENDING
            raise

        self.items = cart.clear()
        self.member_id = None
        self.last_transaction = transaction
        self.last_member_id = member_id
        self.state = CheckoutState.COMPLETED
        logger.info(
            "Checkout completed: invoice=%s total=%s member=%s",
            transaction.id, transaction.total, member_id,
        )
        return transaction

    def abort(self) -> None:
        """Abandon an in-flight confirm that is still waiting on the invoice."""
        task = self._invoice_task
        if self.state is not CheckoutState.PROCESSING or task is None or task.done():
            raise CheckoutStateError("abort checkout", self.state)
        self._aborted = True
        task.cancel()
        self.state = CheckoutState.IDLE

    def dismiss_receipt(self) -> None:
        if self.state is not CheckoutState.COMPLETED:
            raise CheckoutStateError("dismiss the receipt", self.state)
        self.last_transaction = None
        self.last_member_id = None
        self.state = CheckoutState.IDLE

    async def _acquire_invoice_id(self, amount: int) -> str:
        config = self._integration()
        if not config.invoicing_enabled:
            return self._local_numbers.next()

        try:
            return await asyncio.wait_for(
                self._issue_invoice(config, amount), timeout=self._invoice_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Invoice service timed out after %ss, using a local invoice number",
                self._invoice_timeout,
            )
        except Exception as e:
            logger.warning("Invoice service failed (%s), using a local invoice number", e)
        return self._local_numbers.next()


def attached_member(session: CheckoutSession, members) -> Optional[Member]:
    if session.member_id is None:
        return None
    return members.get(session.member_id)
