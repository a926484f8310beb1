# catalog/routers/product.py
from __future__ import annotations

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response, status
from sqlalchemy.orm import Session

from catalog.crud import product as crud
from catalog.database import get_db
from catalog.schemas.product import ProductCreate, ProductRead, ProductUpdate

router = APIRouter(prefix="/products", tags=["products"])

NOT_FOUND = "Product not found"

# ids are stored in an INTEGER column
MAX_PRODUCT_ID = 2**31 - 1
ProductId = Annotated[int, Path(ge=1, le=MAX_PRODUCT_ID, description="Product id")]


@router.get(
    "",
    response_model=List[ProductRead],
    summary="List products",
)
def list_products(
    response: Response,
    collection: str | None = Query(default=None, min_length=1, description="Exact collection (case-insensitive)"),
    scent_family: str | None = Query(default=None, min_length=1, description="Exact scent family (case-insensitive)"),
    q: str | None = Query(default=None, min_length=1, description="Substring (case-insensitive) to match in name"),
    db: Session = Depends(get_db),
):
    """
    Returns every product ordered by id (insertion order).
    Filters are optional; without them the whole catalog is returned.
    """
    items = crud.list_products(db, collection=collection, scent_family=scent_family, name_contains=q)
    response.headers["X-Total-Count"] = str(len(items))
    return items


@router.get(
    "/{product_id}",
    response_model=ProductRead,
    summary="Get a product by id",
)
def get_product(product_id: ProductId, db: Session = Depends(get_db)):
    obj = crud.get(db, product_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return obj


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return crud.create(db, payload)


@router.put(
    "/{product_id}",
    response_model=ProductRead,
    summary="Replace a product",
)
def update_product(product_id: ProductId, payload: ProductUpdate, db: Session = Depends(get_db)):
    obj = crud.get(db, product_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return crud.replace(db, obj, payload)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
)
def delete_product(product_id: ProductId, db: Session = Depends(get_db)):
    obj = crud.get(db, product_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    crud.delete(db, obj)
    return None
