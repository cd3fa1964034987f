# backend/main.py
import logging
from typing import Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

load_dotenv()

from config import Settings, settings as default_settings
from demo_data import DEMO_MEMBERS, DEMO_PRODUCTS
from pos.errors import (
    CheckoutAbortedError, CheckoutStateError, EmptyCartError,
    InvoiceServiceError, MarketplaceSyncError, PosError,
)
from store import AppStore

# Router imports
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.cart import router as cart_router
from routes.checkout import router as checkout_router
from routes.members import router as members_router
from routes.settings import router as settings_router
from routes.logs import router as logs_router

logger = logging.getLogger(__name__)

# Map domain errors to HTTP status codes
ERROR_STATUS_CODES: Dict[type, int] = {
    EmptyCartError: 400,
    CheckoutStateError: 409,
    CheckoutAbortedError: 409,
    InvoiceServiceError: 502,
    MarketplaceSyncError: 502,
}


def create_app(settings: Optional[Settings] = None, store: Optional[AppStore] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if store is None:
        if settings.SEED_DEMO_DATA:
            store = AppStore(settings, products=DEMO_PRODUCTS, members=DEMO_MEMBERS)
        else:
            store = AppStore(settings)

    app = FastAPI(title="Nook POS API", version="1.0.0")
    app.state.store = store

    # CORS configuration for the till frontend
    origins = ["http://localhost:5173", "http://127.0.0.1:5173"]
    if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
        origins.append(settings.FRONTEND_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PosError)
    async def pos_error_handler(request: Request, exc: PosError) -> JSONResponse:
        status_code = ERROR_STATUS_CODES.get(type(exc), 500)
        if status_code >= 500:
            logger.error("Unhandled point-of-sale error: %s", exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error_type": type(exc).__name__},
        )

    # Router registration
    app.include_router(auth_router)
    app.include_router(products_router)
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(members_router)
    app.include_router(settings_router)
    app.include_router(logs_router)

    @app.get("/")
    def read_root():
        return {"message": "Nook POS API is running", "products": len(store.catalog)}

    logger.info("Nook POS API ready with %s products and %s members",
                len(store.catalog), len(store.members.list()))
    return app


app = create_app()
