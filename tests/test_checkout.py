"""Tests for the checkout state machine."""

import asyncio
from datetime import datetime

import pytest

from models.integration import IntegrationConfig
from models.member import Member
from pos.checkout import CheckoutSession, CheckoutState, LocalInvoiceNumbers
from pos.errors import CheckoutAbortedError, CheckoutStateError, EmptyCartError, InvoiceServiceError
from store import MemberStore

FIXED_NOW = datetime(2024, 3, 1, 12, 30, 0)


async def _never_called(config, amount):
    raise AssertionError("invoice provider should not be called")


def make_session(members=None, issuer=_never_called, invoice_key="", timeout=10.0, numbers=None):
    config = IntegrationConfig(invoice_api_key=invoice_key)
    return CheckoutSession(
        members=members or MemberStore(),
        integration=lambda: config,
        issue_invoice=issuer,
        local_numbers=numbers or LocalInvoiceNumbers("NK", clock=lambda: 1700000000.0),
        invoice_timeout=timeout,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def members():
    return MemberStore([Member(id="m2", name="Timmy", phone="0987654321", points=50)])


class TestLocalInvoiceNumbers:
    def test_format(self):
        numbers = LocalInvoiceNumbers("NK", clock=lambda: 1700000123.456)
        number = numbers.next()
        assert number.startswith("NK-")
        assert len(number) == len("NK-") + 6
        assert number[3:].isdigit()

    def test_same_millisecond_gives_distinct_ids(self):
        numbers = LocalInvoiceNumbers("NK", clock=lambda: 1700000000.0)
        assert numbers.next() == "NK-000000"
        assert numbers.next() == "NK-000001"

    def test_six_digit_suffix_wraps_every_thousand_seconds(self):
        ticks = iter([1700000000.0, 1700001000.0])
        numbers = LocalInvoiceNumbers("NK", clock=lambda: next(ticks))
        assert numbers.next() == numbers.next() == "NK-000000"


class TestRequestAndCancel:
    def test_empty_cart_rejected(self):
        session = make_session()
        with pytest.raises(EmptyCartError):
            session.request_checkout()
        assert session.state is CheckoutState.IDLE

    def test_request_moves_to_confirm_pending(self, coffee):
        session = make_session()
        session.add_item(coffee)
        totals = session.request_checkout()
        assert session.state is CheckoutState.CONFIRM_PENDING
        assert totals.final_total == 180

    def test_cancel_returns_to_idle_with_cart_intact(self, coffee):
        session = make_session()
        session.add_item(coffee)
        session.request_checkout()
        session.cancel()
        assert session.state is CheckoutState.IDLE
        assert session.items[0].product_id == "1"

    def test_cancel_from_idle_rejected(self):
        with pytest.raises(CheckoutStateError):
            make_session().cancel()

    def test_cart_edits_allowed_while_confirm_pending(self, coffee, apple):
        session = make_session()
        session.add_item(coffee)
        session.request_checkout()
        totals = session.add_item(apple)
        assert totals.final_total == 680

    def test_request_twice_rejected(self, coffee):
        session = make_session()
        session.add_item(coffee)
        session.request_checkout()
        with pytest.raises(CheckoutStateError):
            session.request_checkout()


class TestConfirm:
    def test_walk_in_checkout_uses_local_number(self, coffee, apple):
        session = make_session()
        session.add_item(coffee)
        session.add_item(coffee)
        session.add_item(apple)
        session.request_checkout()

        tx = asyncio.run(session.confirm())

        assert tx.id == "NK-000000"
        assert tx.date == "2024-03-01 12:30:00"
        assert (tx.total, tx.original_total, tx.discount_amount) == (860, 900, 40)
        assert [(it.product_id, it.quantity) for it in tx.items] == [("1", 2), ("2", 1)]
        assert session.state is CheckoutState.COMPLETED
        assert session.items == ()
        assert session.member_id is None
        assert session.last_transaction == tx
        assert session.last_member_id is None

    def test_walk_in_checkout_leaves_members_untouched(self, coffee, apple):
        members = MemberStore([
            Member(id="m1", name="Isabelle", phone="0912345678", points=1200),
            Member(id="m2", name="Timmy", phone="0987654321", points=50),
        ])
        before = {m.id: (m.points, m.history) for m in members.list()}

        session = make_session(members=members)
        session.add_item(coffee)
        session.add_item(apple)
        session.request_checkout()
        tx = asyncio.run(session.confirm())

        after = {m.id: (m.points, m.history) for m in members.list()}
        assert after == before
        assert tx.total == 680
        assert session.last_member_id is None

    def test_member_checkout_credits_points(self, members, coffee, apple):
        session = make_session(members=members)
        session.add_item(coffee)
        session.add_item(coffee)
        session.add_item(apple)
        session.select_member("m2")
        session.request_checkout()

        tx = asyncio.run(session.confirm())

        member = members.get("m2")
        assert member.points == 58
        assert member.history[0] == tx
        assert session.last_member_id == "m2"

    def test_two_checkouts_get_distinct_ids(self, coffee):
        session = make_session()
        ids = []
        for _ in range(2):
            session.add_item(coffee)
            session.request_checkout()
            ids.append(asyncio.run(session.confirm()).id)
            session.dismiss_receipt()
        assert ids[0] != ids[1]

    def test_external_invoice_number_used(self, coffee):
        calls = []

        async def issuer(config, amount):
            calls.append((config.invoice_api_key, amount))
            return "AB-12345678"

        session = make_session(issuer=issuer, invoice_key="key")
        session.add_item(coffee)
        session.request_checkout()

        tx = asyncio.run(session.confirm())

        assert tx.id == "AB-12345678"
        assert calls == [("key", 180)]

    def test_invoice_failure_falls_back_to_local_number(self, coffee):
        async def issuer(config, amount):
            raise InvoiceServiceError("provider down")

        session = make_session(issuer=issuer, invoice_key="key")
        session.add_item(coffee)
        session.request_checkout()

        tx = asyncio.run(session.confirm())

        assert tx.id.startswith("NK-")
        assert session.state is CheckoutState.COMPLETED

    def test_invoice_timeout_falls_back_to_local_number(self, coffee):
        async def issuer(config, amount):
            await asyncio.sleep(5)
            return "AB-00000001"

        session = make_session(issuer=issuer, invoice_key="key", timeout=0.01)
        session.add_item(coffee)
        session.request_checkout()

        tx = asyncio.run(session.confirm())

        assert tx.id.startswith("NK-")

    def test_confirm_from_idle_rejected(self):
        with pytest.raises(CheckoutStateError):
            asyncio.run(make_session().confirm())

    def test_unknown_member_restores_confirm_pending(self, coffee):
        session = make_session()
        session.add_item(coffee)
        session.select_member("ghost")
        session.request_checkout()

        with pytest.raises(KeyError):
            asyncio.run(session.confirm())

        assert session.state is CheckoutState.CONFIRM_PENDING
        assert len(session.items) == 1

    def test_dismiss_receipt(self, coffee):
        session = make_session()
        session.add_item(coffee)
        session.request_checkout()
        asyncio.run(session.confirm())

        with pytest.raises(CheckoutStateError):
            session.add_item(coffee)

        session.dismiss_receipt()
        assert session.state is CheckoutState.IDLE
        assert session.last_transaction is None


class TestProcessing:
    def test_cart_locked_and_double_confirm_rejected(self, coffee):
        async def scenario():
            started = asyncio.Event()
            release = asyncio.Event()

            async def issuer(config, amount):
                started.set()
                await release.wait()
                return "AB-00000002"

            session = make_session(issuer=issuer, invoice_key="key")
            session.add_item(coffee)
            session.request_checkout()
            pending = asyncio.ensure_future(session.confirm())
            await started.wait()

            assert session.state is CheckoutState.PROCESSING
            with pytest.raises(CheckoutStateError):
                session.add_item(coffee)
            with pytest.raises(CheckoutStateError):
                session.select_member("m2")
            with pytest.raises(CheckoutStateError):
                await session.confirm()

            release.set()
            return await pending, session

        tx, session = asyncio.run(scenario())
        assert tx.id == "AB-00000002"
        assert session.state is CheckoutState.COMPLETED

    def test_abort_returns_to_idle_without_settling(self, members, coffee):
        async def scenario():
            started = asyncio.Event()

            async def issuer(config, amount):
                started.set()
                await asyncio.sleep(5)
                return "AB-00000003"

            session = make_session(members=members, issuer=issuer, invoice_key="key")
            session.add_item(coffee)
            session.select_member("m2")
            session.request_checkout()
            pending = asyncio.ensure_future(session.confirm())
            await started.wait()

            session.abort()
            with pytest.raises(CheckoutAbortedError):
                await pending
            return session

        session = asyncio.run(scenario())
        assert session.state is CheckoutState.IDLE
        assert len(session.items) == 1
        assert session.last_transaction is None
        assert members.get("m2").points == 50
        assert members.get("m2").history == ()

    def test_abort_outside_processing_rejected(self, coffee):
        session = make_session()
        session.add_item(coffee)
        with pytest.raises(CheckoutStateError):
            session.abort()


def test_concurrent_checkouts_for_one_member_both_credit(members, coffee, apple):
    async def scenario():
        numbers = LocalInvoiceNumbers("NK", clock=lambda: 1700000000.0)
        first = make_session(members=members, numbers=numbers)
        second = make_session(members=members, numbers=numbers)
        for session, product in ((first, coffee), (second, apple)):
            session.add_item(product)
            session.select_member("m2")
            session.request_checkout()
        return await asyncio.gather(first.confirm(), second.confirm())

    txs = asyncio.run(scenario())
    member = members.get("m2")
    # 180 -> 1 point, 500 -> 5 points
    assert member.points == 56
    assert len(member.history) == 2
    assert {tx.id for tx in member.history} == {"NK-000000", "NK-000001"} == {tx.id for tx in txs}
