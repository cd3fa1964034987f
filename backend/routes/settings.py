# backend/routes/settings.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from store import AppStore, get_store
from utils.tokenJWT import require_admin
from utils.audit import write_log
from models.users import User
from pos.errors import MarketplaceSyncError
from schemas.settings import IntegrationConfigOut, IntegrationConfigUpdate, MarketplaceSyncResult

router = APIRouter(prefix="/settings", tags=["Settings"])
logger = logging.getLogger(__name__)


@router.get("/integrations", response_model=IntegrationConfigOut)
def get_integrations(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    return IntegrationConfigOut.from_config(store.integration)


@router.put("/integrations", response_model=IntegrationConfigOut)
def update_integrations(
    payload: IntegrationConfigUpdate,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    changes = payload.model_dump(exclude_none=True)
    store.integration = store.integration.with_changes(**changes)

    # Never log secret values, only which keys changed
    write_log(
        store, user_id=current_user.id, action="SETTINGS_UPDATE", resource="settings",
        status="SUCCESS", ip=request.client.host if request.client else None,
        meta={"fields": sorted(changes)},
    )
    return IntegrationConfigOut.from_config(store.integration)


# Push the current catalog to the marketplace shop
@router.post("/marketplace/sync", response_model=MarketplaceSyncResult)
async def sync_marketplace(
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
):
    config = store.integration
    if not config.marketplace_enabled:
        raise HTTPException(status_code=400, detail="Configure the Shopee API key first")

    products = store.catalog.list()
    ip = request.client.host if request.client else None
    try:
        success = await store.marketplace_client.sync_inventory(config, products)
    except MarketplaceSyncError as e:
        logger.exception("Marketplace sync failed: %s", e)
        write_log(
            store, user_id=current_user.id, action="MARKETPLACE_SYNC", resource="settings",
            status="FAIL", ip=ip, meta={"error": str(e)},
        )
        raise HTTPException(status_code=502, detail=f"Marketplace sync failed: {e}")

    write_log(
        store, user_id=current_user.id, action="MARKETPLACE_SYNC", resource="settings",
        status="SUCCESS", ip=ip, meta={"count": len(products)},
    )
    return {"success": success, "synced": len(products)}
