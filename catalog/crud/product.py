# catalog/crud/product.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.models.product import Product
from catalog.schemas.product import ProductCreate, ProductUpdate

# columns overwritten by a create or a full-replace update
WRITABLE_FIELDS = (
    "name",
    "collection",
    "scent_family",
    "size_ml",
    "price_thb",
    "description",
    "image_url",
)


def list_products(
    db: Session,
    *,
    collection: Optional[str] = None,
    scent_family: Optional[str] = None,
    name_contains: Optional[str] = None,
) -> List[Product]:
    """
    All products in insertion order (id ascending).

    Optional filters:
      - collection / scent_family: exact, case-insensitive match.
      - name_contains: case-insensitive literal substring on name; % and _ are escaped.
    """
    conditions = []
    if collection:
        conditions.append(func.lower(Product.collection) == collection.strip().lower())
    if scent_family:
        conditions.append(func.lower(Product.scent_family) == scent_family.strip().lower())
    if name_contains:
        conditions.append(func.lower(Product.name).contains(name_contains.strip().lower(), autoescape=True))

    stmt = select(Product)
    if conditions:
        stmt = stmt.where(*conditions)
    stmt = stmt.order_by(Product.id.asc())
    return list(db.execute(stmt).scalars().all())


def count(db: Session) -> int:
    return int(db.scalar(select(func.count(Product.id))) or 0)


def get(db: Session, product_id: int) -> Optional[Product]:
    """Product by id, or None."""
    return db.get(Product, product_id)


def create(db: Session, data: ProductCreate) -> Product:
    obj = Product(**data.model_dump(include=set(WRITABLE_FIELDS)))
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


def replace(db: Session, obj: Product, data: ProductUpdate) -> Product:
    """
    Full overwrite: every writable column takes the payload value,
    including optional fields left out of the request (they reset to "").
    """
    payload = data.model_dump(include=set(WRITABLE_FIELDS))
    for k, v in payload.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj


def delete(db: Session, obj: Product) -> None:
    db.delete(obj)
    db.commit()
