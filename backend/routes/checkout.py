# backend/routes/checkout.py
from fastapi import APIRouter, Depends, HTTPException, Request
from store import AppStore, get_store
from utils.tokenJWT import get_current_user
from utils.audit import write_log
from models.users import User
from pos.checkout import CheckoutSession
from pos.loyalty import points_earned
from routes.cart import _cart_to_out
from schemas.checkout import CartOut, ReceiptOut
from schemas.member import MemberOut, TransactionOut

router = APIRouter(prefix="/checkout", tags=["Checkout"])

def _receipt_to_out(session: CheckoutSession, store: AppStore) -> ReceiptOut:
    transaction = session.last_transaction
    member = store.members.get(session.last_member_id) if session.last_member_id else None
    return ReceiptOut(
        transaction=TransactionOut.from_transaction(transaction),
        points_earned=points_earned(transaction.total) if member else 0,
        member=MemberOut.from_member(member) if member else None,
    )

def _client_ip(request: Request):
    return request.client.host if request.client else None

# Open the confirmation step; the cart must not be empty
@router.post("", response_model=CartOut)
def request_checkout(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    session.request_checkout()
    return _cart_to_out(session, store)

# Close the confirmation step without paying
@router.post("/cancel", response_model=CartOut)
def cancel_checkout(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    session.cancel()
    return _cart_to_out(session, store)

# Settle the sale: invoice number, transaction, member points, cart reset
@router.post("/confirm", response_model=ReceiptOut)
async def confirm_checkout(
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    member_id = session.member_id
    transaction = await session.confirm()

    write_log(
        store,
        user_id=current_user.id,
        action="CHECKOUT",
        resource="checkout",
        status="SUCCESS",
        ip=_client_ip(request),
        meta={
            "invoice": transaction.id,
            "total": transaction.total,
            "original_total": transaction.original_total,
            "discount": transaction.discount_amount,
            "member_id": member_id,
        },
    )
    return _receipt_to_out(session, store)

# Abandon a settlement that is still waiting on the invoice provider.
# Must stay async: the invoice task may only be cancelled from its event loop
@router.post("/abort", response_model=CartOut)
async def abort_checkout(
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    session.abort()
    write_log(
        store, user_id=current_user.id, action="CHECKOUT_ABORT", resource="checkout",
        status="SUCCESS", ip=_client_ip(request),
    )
    return _cart_to_out(session, store)

@router.get("/receipt", response_model=ReceiptOut)
def get_receipt(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    if session.last_transaction is None:
        raise HTTPException(status_code=404, detail="No receipt to show")
    return _receipt_to_out(session, store)

@router.post("/receipt/dismiss", response_model=CartOut)
def dismiss_receipt(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    session.dismiss_receipt()
    return _cart_to_out(session, store)
