# backend/routes/members.py
from datetime import date
from typing import Optional
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from store import AppStore, get_store
from utils.tokenJWT import get_current_user
from utils.audit import write_log
from models.member import Member
from models.users import User
from schemas.member import MemberCreate, MemberDetail, MemberList, MemberOut

router = APIRouter(prefix="/members", tags=["Members"])


# List members, filtered by name or phone
@router.get("", response_model=MemberList)
def list_members(
    q: Optional[str] = Query(None, description="Search by name or phone"),
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    members = store.members.list()
    if q:
        needle = q.lower()
        members = [m for m in members if needle in m.name.lower() or q in m.phone]
    return {"items": [MemberOut.from_member(m) for m in members], "total": len(members)}


# Register a new member with an empty history
@router.post("", response_model=MemberOut, status_code=201)
def create_member(
    payload: MemberCreate,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    stamp = int(time.time() * 1000)
    while store.members.get(f"m{stamp}"):
        stamp += 1

    member = store.members.add(Member(
        id=f"m{stamp}",
        name=payload.name.strip(),
        phone=payload.phone.strip(),
        points=0,
        join_date=date.today().isoformat(),
    ))

    write_log(
        store, user_id=current_user.id, action="MEMBER_CREATE", resource="members",
        status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"id": member.id},
    )
    return MemberOut.from_member(member)


# Member details with full purchase history
@router.get("/{member_id}", response_model=MemberDetail)
def get_member(
    member_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    member = store.members.get(member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    return MemberDetail.from_member(member)
