import pytest

from conftest import add_theme


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/admin/dashboard"),
        ("get", "/api/admin/products"),
        ("post", "/api/admin/products"),
        ("delete", "/api/admin/products/some-id"),
        ("get", "/api/admin/events"),
    ],
)
def test_admin_requires_session(client, method, path):
    res = getattr(client, method)(path)
    assert res.status_code == 401
    assert res.json() == {"error": "Unauthorized"}


def test_create_product_derives_slug_and_parses_price(client, auth_headers):
    res = client.post(
        "/api/admin/products",
        json={"name": "Fog Lantern", "price": "28.50", "summary": "  ", "status": "draft"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    product = res.json()["product"]
    assert product["slug"] == "fog-lantern"
    assert product["price_cents"] == 2850
    assert product["price_display"] == "$28.50"
    assert product["summary"] is None
    assert product["status"] == "draft"

    items = client.get("/api/admin/products", headers=auth_headers).json()["items"]
    assert [p["id"] for p in items] == [product["id"]]


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"name": "Lantern", "price": "twelve"}, "Invalid price"),
        ({"name": "   ", "price": "4"}, "Product name is required."),
    ],
)
def test_create_product_rejects_bad_input(client, auth_headers, payload, message):
    res = client.post("/api/admin/products", json=payload, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["error"].startswith(message)


def test_update_toggle_and_delete_product(client, auth_headers):
    pid = client.post(
        "/api/admin/products", json={"name": "Fog Lantern", "price": "10"}, headers=auth_headers
    ).json()["product"]["id"]

    res = client.put(
        f"/api/admin/products/{pid}",
        json={"name": "Fog Lantern XL", "slug": "lantern-xl", "price": "12.5"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["product"]["slug"] == "lantern-xl"
    assert res.json()["product"]["price_cents"] == 1250

    toggled = client.post(f"/api/admin/products/{pid}/toggle-status", headers=auth_headers).json()
    assert toggled["product"]["status"] == "draft"
    assert client.get("/api/products/lantern-xl").status_code == 404

    toggled = client.post(f"/api/admin/products/{pid}/toggle-status", headers=auth_headers).json()
    assert toggled["product"]["status"] == "published"
    assert client.get("/api/products/lantern-xl").status_code == 200

    assert client.delete(f"/api/admin/products/{pid}", headers=auth_headers).json() == {"ok": True}
    res = client.delete(f"/api/admin/products/{pid}", headers=auth_headers)
    assert res.status_code == 404
    assert res.json() == {"error": "Product not found."}


def test_event_crud_stores_blanks_as_null(client, auth_headers):
    res = client.post(
        "/api/admin/events",
        json={"title": "Winter Market", "description": "", "starts_at": "2025-12-01T00:00:00Z", "ends_at": ""},
        headers=auth_headers,
    )
    assert res.status_code == 200
    created = res.json()["event"]
    assert created["description"] is None
    assert created["ends_at"] is None
    assert created["starts_at"].startswith("2025-12-01T00:00:00")

    eid = created["id"]
    res = client.put(
        f"/api/admin/events/{eid}",
        json={"title": "Winter Night Market", "description": "Lanterns and cocoa"},
        headers=auth_headers,
    )
    assert res.json()["event"]["title"] == "Winter Night Market"
    assert res.json()["event"]["starts_at"] is None

    assert client.delete(f"/api/admin/events/{eid}", headers=auth_headers).json() == {"ok": True}
    assert client.get("/api/admin/events", headers=auth_headers).json()["items"] == []


def test_event_rejects_bad_timestamp(client, auth_headers):
    res = client.post(
        "/api/admin/events", json={"title": "Market", "starts_at": "next tuesday"}, headers=auth_headers
    )
    assert res.status_code == 400
    assert "starts_at" in res.json()["error"]


def test_deleting_event_removes_its_themes(client, auth_headers, db, event):
    theme = add_theme(db, event, "Merry Christmas")
    client.delete(f"/api/admin/events/{event.id}", headers=auth_headers)

    res = client.patch(f"/api/themes/{theme.id}", json={"enabled": False}, headers=auth_headers)
    assert res.status_code == 404


def test_dashboard_groups_themes_by_event(client, auth_headers, db, event):
    add_theme(db, event, "Merry Christmas", status="building", enabled=False)
    client.post("/api/admin/products", json={"name": "Mug", "price": "8"}, headers=auth_headers)

    body = client.get("/api/admin/dashboard", headers=auth_headers).json()
    assert body["user"] == {"id": "admin-1", "email": "admin@example.com"}
    assert [p["name"] for p in body["products"]] == ["Mug"]
    assert len(body["events"]) == 1
    themes = body["events"][0]["themes"]
    assert [(t["title"], t["status"], t["enabled"]) for t in themes] == [("Merry Christmas", "building", False)]
