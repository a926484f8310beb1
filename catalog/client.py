# catalog/client.py
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

import httpx

from catalog.core.settings import settings

logger = logging.getLogger("catalog.client")

EDITABLE_FIELDS = (
    "name",
    "collection",
    "scent_family",
    "size_ml",
    "price_thb",
    "description",
    "image_url",
)
REQUIRED_TEXT_FIELDS = ("name", "collection", "scent_family")
NUMERIC_FIELDS = ("size_ml", "price_thb")


def empty_form() -> Dict[str, str]:
    return {f: "" for f in EDITABLE_FIELDS}


class CatalogClientError(Exception):
    """A call to the catalog service failed; `message` is what the UI shows."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FormValidationError(CatalogClientError):
    """The local form was rejected before any request was sent."""


def _error_message(r: httpx.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        body = None
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict) and detail.get("message"):
        return str(detail["message"])
    if isinstance(detail, list) and detail:
        parts = []
        for err in detail:
            loc = [str(p) for p in err.get("loc", []) if p != "body"]
            msg = err.get("msg", "invalid")
            parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
        return "; ".join(parts)
    return f"Request failed: {r.status_code}"


def _parse_number(raw: str) -> Optional[float]:
    try:
        val = float(raw)
    except (TypeError, ValueError):
        return None
    return val if math.isfinite(val) else None


class CatalogClient:
    """
    Client-side state for the catalog: the last fetched rows, a form of string
    values and the edit-vs-create mode (`editing_id`).

    The cache is only reconciled after the service confirms a write; nothing
    is applied optimistically.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        http: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        self._owns_http = http is None
        self._http = http or httpx.Client(
            base_url=base_url or settings.CATALOG_API_URL,
            timeout=timeout if timeout is not None else settings.CATALOG_API_TIMEOUT,
        )
        self.rows: List[Dict[str, Any]] = []
        self.form: Dict[str, str] = empty_form()
        self.editing_id: Optional[int] = None

    # --- lifecycle ---
    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "CatalogClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- transport ---
    def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            r = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise CatalogClientError(str(exc) or exc.__class__.__name__) from exc
        if r.is_error:
            msg = _error_message(r)
            logger.error("%s %s -> %s: %s", method, url, r.status_code, msg)
            raise CatalogClientError(msg, status_code=r.status_code)
        return r

    # --- reads ---
    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health").json()

    def refresh(self, **filters: Optional[str]) -> List[Dict[str, Any]]:
        """Replaces the local cache with the service's current rows."""
        params = {k: v for k, v in filters.items() if v}
        self.rows = list(self._request("GET", "/products", params=params).json())
        return self.rows

    def get(self, product_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/products/{product_id}").json()

    def find_cached(self, product_id: int) -> Optional[Dict[str, Any]]:
        return next((p for p in self.rows if p.get("id") == product_id), None)

    # --- form ---
    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def set_field(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise KeyError(f"unknown form field: {name}")
        self.form[name] = "" if value is None else str(value)

    def update_form(self, **values: Any) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def reset_form(self) -> None:
        self.form = empty_form()
        self.editing_id = None

    def start_edit(self, product_id: int) -> Dict[str, str]:
        """Loads a cached row into the form and switches to edit mode."""
        row = self.find_cached(product_id)
        if row is None:
            raise CatalogClientError(f"Product {product_id} is not in the current list", status_code=404)
        self.editing_id = product_id
        self.form = {f: "" if row.get(f) is None else str(row[f]) for f in EDITABLE_FIELDS}
        return self.form

    def cancel_edit(self) -> None:
        self.reset_form()

    def build_payload(self) -> Dict[str, Any]:
        """Validates the form the same way the service will and returns the JSON body."""
        missing = [f for f in REQUIRED_TEXT_FIELDS if not self.form.get(f, "").strip()]
        if missing:
            raise FormValidationError("Name, Collection and Scent Family are required.")
        numbers = {f: _parse_number(self.form.get(f, "")) for f in NUMERIC_FIELDS}
        if any(v is None for v in numbers.values()):
            raise FormValidationError("Size (ml) and Price (THB) must be numeric.")
        payload: Dict[str, Any] = {f: self.form.get(f, "").strip() for f in EDITABLE_FIELDS}
        payload.update(numbers)
        return payload

    # --- writes ---
    def submit(self) -> Dict[str, Any]:
        """
        POST in create mode, PUT in edit mode. On success the cache is
        reconciled (append or replace) and the form is reset.
        """
        payload = self.build_payload()
        if self.is_editing:
            saved = self._request("PUT", f"/products/{self.editing_id}", json=payload).json()
            self.rows = [saved if p.get("id") == self.editing_id else p for p in self.rows]
        else:
            saved = self._request("POST", "/products", json=payload).json()
            self.rows = [*self.rows, saved]
        self.reset_form()
        return saved

    def delete(self, product_id: int) -> None:
        self._request("DELETE", f"/products/{product_id}")
        self.rows = [p for p in self.rows if p.get("id") != product_id]
        if self.editing_id == product_id:
            self.reset_form()
