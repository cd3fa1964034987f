# backend/utils/catalog_csv.py
import io
import logging
import time
from typing import List, Sequence, Tuple

import pandas as pd

from models.product import Product

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["id", "name", "price", "costPrice", "discountPrice", "stock", "category", "description"]
DEFAULT_IMPORT_CATEGORY = "Other"
DEFAULT_IMAGE_URL = "https://picsum.photos/200/200"


def _to_int(value) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def export_products(products: Sequence[Product]) -> str:
    """Serialize the catalog to CSV text with a header row."""
    rows = [
        {
            "id": p.id,
            "name": p.name,
            "price": p.price,
            "costPrice": p.cost_price or 0,
            "discountPrice": p.discount_price if p.discount_price else "",
            "stock": p.stock,
            "category": p.category,
            "description": p.description or "",
        }
        for p in products
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    return df.to_csv(index=False)


def import_products(content: bytes) -> Tuple[List[Product], int]:
    """Parse uploaded CSV into products.

    Returns the parsed products and the number of rows skipped for lacking a
    name or a positive price.  A discount that is not below the price is
    dropped.
    """
    df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False, skip_blank_lines=True)
    stamp = int(time.time() * 1000)

    products: List[Product] = []
    skipped = 0
    for index, row in enumerate(df.to_dict("records")):
        name = (row.get("name") or "").strip()
        price = _to_int(row.get("price"))
        if not name or price <= 0:
            skipped += 1
            continue

        discount = _to_int(row.get("discountPrice")) if row.get("discountPrice") else None
        if discount is not None and not 0 < discount < price:
            discount = None

        products.append(Product(
            id=(row.get("id") or "").strip() or f"imp-{stamp}-{index}",
            name=name,
            price=price,
            cost_price=_to_int(row.get("costPrice")),
            discount_price=discount,
            stock=max(_to_int(row.get("stock")), 0),
            category=(row.get("category") or "").strip() or DEFAULT_IMPORT_CATEGORY,
            description=(row.get("description") or "").replace('"', ""),
            image_url=DEFAULT_IMAGE_URL,
        ))

    if skipped:
        logger.warning("CSV import skipped %s invalid rows", skipped)
    return products, skipped
