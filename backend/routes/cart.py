# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException, Request
from store import AppStore, get_store
from utils.tokenJWT import get_current_user
from utils.audit import write_log
from models.users import User
from pos.checkout import CheckoutSession, attached_member
from schemas.cart import CartAddItem, CartQuantityChange, CartMemberSelect, CartItemOut, TotalsOut
from schemas.checkout import CartOut
from schemas.member import MemberOut

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(session: CheckoutSession, store: AppStore) -> CartOut:
    member = attached_member(session, store.members)
    return CartOut(
        items=[CartItemOut.from_item(it) for it in session.items],
        totals=TotalsOut.from_totals(session.totals),
        member=MemberOut.from_member(member) if member else None,
        state=session.state,
    )

def _client_ip(request: Request):
    return request.client.host if request.client else None

@router.get("", response_model=CartOut)
def get_cart(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    return _cart_to_out(store.session_for(current_user), store)

@router.post("/add", response_model=CartOut)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    product = store.catalog.get(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    session = store.session_for(current_user)
    totals = session.add_item(product)

    write_log(
        store,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=_client_ip(request),
        meta={"product_id": product.id, "cart_items": len(session.items), "total": totals.final_total},
    )
    return _cart_to_out(session, store)

@router.patch("/items/{product_id}", response_model=CartOut)
def change_cart_item_quantity(
    product_id: str,
    payload: CartQuantityChange,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    # Quantities never drop below one here; removal is a separate call
    totals = session.change_quantity(product_id, payload.delta)

    write_log(
        store,
        user_id=current_user.id,
        action="CART_UPDATE",
        resource="cart",
        status="SUCCESS",
        ip=_client_ip(request),
        meta={"product_id": product_id, "delta": payload.delta, "total": totals.final_total},
    )
    return _cart_to_out(session, store)

@router.delete("/items/{product_id}", response_model=CartOut)
def delete_cart_item(
    product_id: str,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    session = store.session_for(current_user)
    totals = session.remove_item(product_id)

    write_log(
        store,
        user_id=current_user.id,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        ip=_client_ip(request),
        meta={"product_id": product_id, "cart_items": len(session.items), "total": totals.final_total},
    )
    return _cart_to_out(session, store)

@router.put("/member", response_model=CartOut)
def select_cart_member(
    payload: CartMemberSelect,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user)
):
    if payload.member_id is not None and not store.members.get(payload.member_id):
        raise HTTPException(status_code=404, detail="Member not found")

    session = store.session_for(current_user)
    session.select_member(payload.member_id)
    return _cart_to_out(session, store)
