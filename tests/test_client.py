# tests/test_client.py
from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from catalog.client import CatalogClient, CatalogClientError, FormValidationError, empty_form
from tests.utils import create_product, store_count


@pytest.fixture
def catalog(client: TestClient) -> CatalogClient:
    return CatalogClient(http=client)


def _fill(c: CatalogClient, **overrides):
    values = {
        "name": "Heritage Oud",
        "collection": "Siam Heritage",
        "scent_family": "Woody",
        "size_ml": "50",
        "price_thb": "3290",
        "description": "Smoky oud",
        "image_url": "",
    }
    values.update(overrides)
    c.update_form(**values)


@pytest.mark.timeout(10)
def test_refresh_replaces_cache(client: TestClient, catalog: CatalogClient):
    assert catalog.refresh() == []
    p = create_product(client)
    rows = catalog.refresh()
    assert [r["id"] for r in rows] == [p["id"]]
    assert catalog.rows is rows


@pytest.mark.timeout(10)
def test_submit_in_create_mode_appends_and_resets(client: TestClient, catalog: CatalogClient):
    existing = create_product(client)
    catalog.refresh()
    _fill(catalog)

    saved = catalog.submit()

    assert saved["name"] == "Heritage Oud"
    assert saved["size_ml"] == 50
    assert [r["id"] for r in catalog.rows] == [existing["id"], saved["id"]]
    assert catalog.form == empty_form()
    assert catalog.editing_id is None


@pytest.mark.timeout(10)
def test_edit_mode_replaces_matching_row(client: TestClient, catalog: CatalogClient):
    a = create_product(client)
    b = create_product(client)
    catalog.refresh()

    form = catalog.start_edit(b["id"])
    assert catalog.is_editing
    assert form["name"] == b["name"]
    assert form["size_ml"] == str(b["size_ml"])

    catalog.set_field("price_thb", "4100")
    saved = catalog.submit()

    assert saved["id"] == b["id"]
    assert saved["price_thb"] == 4100
    assert catalog.rows[0] == a
    assert catalog.rows[1] == saved
    assert not catalog.is_editing


@pytest.mark.timeout(10)
def test_cancel_edit_resets_form(client: TestClient, catalog: CatalogClient):
    p = create_product(client)
    catalog.refresh()
    catalog.start_edit(p["id"])
    catalog.cancel_edit()
    assert catalog.form == empty_form()
    assert catalog.editing_id is None


@pytest.mark.timeout(10)
def test_start_edit_unknown_row(catalog: CatalogClient):
    catalog.refresh()
    with pytest.raises(CatalogClientError):
        catalog.start_edit(12345)


@pytest.mark.timeout(10)
@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"name": ""}, "Name, Collection and Scent Family are required."),
        ({"scent_family": "  "}, "Name, Collection and Scent Family are required."),
        ({"size_ml": "abc"}, "Size (ml) and Price (THB) must be numeric."),
        ({"price_thb": ""}, "Size (ml) and Price (THB) must be numeric."),
    ],
)
def test_local_validation_sends_nothing(catalog: CatalogClient, overrides, message):
    catalog.refresh()
    _fill(catalog, **overrides)
    form_before = dict(catalog.form)

    with pytest.raises(FormValidationError) as ei:
        catalog.submit()

    assert ei.value.message == message
    assert store_count() == 0
    assert catalog.rows == []
    assert catalog.form == form_before


@pytest.mark.timeout(10)
def test_server_rejection_leaves_state_untouched(catalog: CatalogClient):
    catalog.refresh()
    _fill(catalog, size_ml="-5")

    with pytest.raises(CatalogClientError) as ei:
        catalog.submit()

    assert ei.value.status_code == 422
    assert "size_ml" in ei.value.message
    assert catalog.rows == []
    assert catalog.form["size_ml"] == "-5"


@pytest.mark.timeout(10)
def test_delete_removes_row_after_success(client: TestClient, catalog: CatalogClient):
    a = create_product(client)
    b = create_product(client)
    catalog.refresh()

    catalog.delete(a["id"])
    assert [r["id"] for r in catalog.rows] == [b["id"]]

    with pytest.raises(CatalogClientError) as ei:
        catalog.delete(a["id"])
    assert ei.value.status_code == 404
    assert ei.value.message == "Product not found"
    assert [r["id"] for r in catalog.rows] == [b["id"]]


@pytest.mark.timeout(10)
def test_failed_delete_keeps_cached_row(client: TestClient, catalog: CatalogClient):
    p = create_product(client)
    catalog.refresh()
    # row disappears server-side behind the client's back
    client.delete(f"/products/{p['id']}")

    with pytest.raises(CatalogClientError):
        catalog.delete(p["id"])
    assert [r["id"] for r in catalog.rows] == [p["id"]]


@pytest.mark.timeout(10)
def test_transport_errors_are_wrapped():
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.Client(base_url="http://catalog.invalid", transport=httpx.MockTransport(_refuse))
    with CatalogClient(http=http) as c:
        with pytest.raises(CatalogClientError) as ei:
            c.refresh()
    assert "connection refused" in ei.value.message
    assert ei.value.status_code is None
    http.close()


def test_unknown_form_field_is_rejected(catalog: CatalogClient):
    with pytest.raises(KeyError):
        catalog.set_field("stock", "3")
