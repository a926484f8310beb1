# tests/utils.py
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

import httpx

from catalog.crud import product as crud
from catalog.database import SessionLocal
from catalog.models import Product


def dump_response(r: httpx.Response) -> str:
    """Compact diagnostic for assertion messages."""
    try:
        j = r.json()
    except Exception:
        j = None
    snippet = (r.text or "")[:400].replace("\n", "\\n")
    return f"status={r.status_code} {r.request.method} {r.request.url} json={j!r} text='{snippet}...'"


def assert_status(r: httpx.Response, expected: int | tuple[int, ...]):
    if isinstance(expected, int):
        ok = r.status_code == expected
        exp_str = str(expected)
    else:
        ok = r.status_code in expected
        exp_str = "|".join(map(str, expected))
    assert ok, f"expected {exp_str} but got: {dump_response(r)}"


def product_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": f"Perfume_{uuid.uuid4().hex[:8]}",
        "collection": "Siam Heritage",
        "scent_family": "Woody",
        "size_ml": 50,
        "price_thb": 3290,
        "description": "Smoky oud with a jasmine heart",
        "image_url": "https://example.com/oud.jpg",
    }
    payload.update(overrides)
    return payload


def create_product(c: httpx.Client, **overrides: Any) -> Dict[str, Any]:
    r = c.post("/products", json=product_payload(**overrides))
    assert_status(r, 201)
    j = r.json()
    assert "id" in j and isinstance(j["id"], int), j
    return j


def store_count() -> int:
    with SessionLocal() as db:
        return crud.count(db)


def store_get(product_id: int) -> Optional[Product]:
    with SessionLocal() as db:
        return crud.get(db, product_id)
