# backend/routes/products.py
from typing import Optional, List
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile, File
from fastapi.responses import Response
from pydantic import ValidationError
import pandas as pd

from demo_data import CATEGORIES
from store import AppStore, get_store
from utils.tokenJWT import get_current_user
from utils.audit import write_log
from utils.catalog_csv import export_products, import_products
from models.users import User
from models.product import Product
import schemas.product as product_schemas

router = APIRouter(tags=["Products"])

ALL_CATEGORIES = "all"
DEFAULT_CATEGORY = "Uncategorized"


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _to_out(product: Product) -> product_schemas.ProductOut:
    return product_schemas.ProductOut.model_validate(product)


def _get_or_404(store: AppStore, product_id: str) -> Product:
    product = store.catalog.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# =========================
# PRODUCT LIST
# =========================
@router.get("/products", response_model=product_schemas.ProductList)
def list_products(
    category: Optional[str] = Query(None, description="Filter by category, 'all' for every category"),
    q: Optional[str] = Query(None, description="Search by product name"),
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    products = store.catalog.list()

    if category and category.lower() != ALL_CATEGORIES:
        products = [p for p in products if p.category == category]
    if q:
        needle = q.lower()
        products = [p for p in products if needle in p.name.lower()]

    return {"items": [_to_out(p) for p in products], "total": len(products)}


# =========================
# HELPER ENDPOINTS
# =========================
@router.get("/products/categories", response_model=List[str])
def get_product_categories(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return list(dict.fromkeys(CATEGORIES + store.catalog.categories()))


@router.get("/products/export")
def export_products_csv(
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    products = store.catalog.list()
    body = export_products(products)

    write_log(
        store, user_id=current_user.id, action="PRODUCTS_EXPORT", resource="products",
        status="SUCCESS", ip=_client_ip(request), meta={"count": len(products)},
    )
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="inventory_nook.csv"'},
    )


@router.post("/products/import", response_model=product_schemas.ProductImportResult)
async def import_products_csv(
    request: Request,
    file: UploadFile = File(...),
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    content = await file.read()
    try:
        products, skipped = import_products(content)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        write_log(
            store, user_id=current_user.id, action="PRODUCTS_IMPORT", resource="products",
            status="FAIL", ip=_client_ip(request), meta={"error": str(e)},
        )
        raise HTTPException(status_code=400, detail=f"Invalid CSV file: {e}")
    finally:
        await file.close()

    for product in products:
        store.catalog.save(product)

    write_log(
        store, user_id=current_user.id, action="PRODUCTS_IMPORT", resource="products",
        status="SUCCESS", ip=_client_ip(request), meta={"imported": len(products), "skipped": skipped},
    )
    return {"imported": len(products), "skipped": skipped}


@router.post("/products/describe", response_model=product_schemas.DescriptionResponse)
async def describe_product(
    payload: product_schemas.DescriptionRequest,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    description = await store.description_client.generate_description(
        payload.name, payload.category or "Items"
    )
    return {"description": description}


# =========================
# SINGLE PRODUCT
# =========================
@router.get("/products/{product_id}", response_model=product_schemas.ProductOut)
def get_product(
    product_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return _to_out(_get_or_404(store, product_id))


@router.post("/products", response_model=product_schemas.ProductOut, status_code=201)
def add_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    data["category"] = data.get("category") or DEFAULT_CATEGORY
    product = Product(id=str(int(time.time() * 1000)), **data)

    # Millisecond ids can collide on quick successive adds
    while store.catalog.get(product.id):
        product = product.with_changes(id=str(int(product.id) + 1))
    store.catalog.save(product)

    write_log(
        store, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=_client_ip(request), meta={"id": product.id, "name": product.name},
    )
    return _to_out(product)


@router.patch("/products/{product_id}", response_model=product_schemas.ProductOut)
def update_product(
    product_id: str,
    payload: product_schemas.ProductEditRequest,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    product = _get_or_404(store, product_id)
    changes = payload.model_dump(exclude_unset=True)

    # Re-validate the merged product (e.g. a new price below the discount)
    merged = {**product_schemas.ProductBase.model_validate(product).model_dump(), **changes}
    try:
        validated = product_schemas.ProductBase.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    data = validated.model_dump()
    data["category"] = data.get("category") or DEFAULT_CATEGORY
    updated = product.with_changes(**data)
    store.catalog.save(updated)

    write_log(
        store, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=_client_ip(request), meta={"id": product_id, "changes": list(changes)},
    )
    return _to_out(updated)


@router.delete("/products/{product_id}", status_code=204)
def delete_product(
    product_id: str,
    request: Request,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    _get_or_404(store, product_id)
    store.catalog.delete(product_id)

    write_log(
        store, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
        status="SUCCESS", ip=_client_ip(request), meta={"id": product_id},
    )
    return Response(status_code=204)
