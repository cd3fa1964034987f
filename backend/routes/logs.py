# backend/routes/logs.py
from fastapi import APIRouter, Depends, Query
from typing import List, Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from store import AppStore, get_store
from models.users import User
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/logs", tags=["Logs"])

# --- SCHEMAS ---
class LogResponse(BaseModel):
    id: int
    user_id: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None

    model_config = ConfigDict(from_attributes=True)

class LogPage(BaseModel):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int

# --- ENDPOINT ---
@router.get("", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    user_id: Optional[str] = Query(None, description="Filter by user ID"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="Filter by status (SUCCESS/FAIL)"),
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    logs = store.logs

    if action:
        logs = [log for log in logs if action.upper() in log.action.upper()]
    if user_id is not None:
        logs = [log for log in logs if log.user_id == user_id]
    if resource:
        logs = [log for log in logs if resource.lower() in log.resource.lower()]
    if status:
        logs = [log for log in logs if log.status == status]

    # Newest first
    logs = sorted(logs, key=lambda log: log.id, reverse=True)

    total = len(logs)
    start = (page - 1) * page_size
    return {
        "items": logs[start:start + page_size],
        "total": total,
        "page": page,
        "page_size": page_size,
    }
