from datetime import datetime

from conftest import add_theme, at
from nightmarket.models.event import Event
from nightmarket.models.product import Product
from nightmarket.services.storefront_service import (
    CAMERA_IMAGE,
    FALLBACK_PRODUCT_IMAGES,
    StorefrontService,
    product_image,
    resolve_variant,
)
from nightmarket.utils.text import hash_string


def _product(db, name, status="published", **kw):
    p = Product(name=name, slug=kw.pop("slug", None), price_cents=kw.pop("price_cents", 2800), status=status, **kw)
    db.add(p)
    db.commit()
    return p


def test_default_storefront_without_active_theme(client, db):
    _product(db, "Giftable mug", slug="giftable-mug", summary="Stoneware mug")
    res = client.get("/api/storefront")
    assert res.status_code == 200
    body = res.json()
    assert body["theme"] is None
    assert body["active_theme"] is None
    assert body["copy"]["hero_heading"].startswith("Night Market Supply")
    assert body["copy"]["add_to_cart_label"] == "Add to bag"
    assert body["product_count"] == 1
    assert body["hero_product"]["price"] == "$28"
    assert body["show_admin_links"] is False


def test_ready_enabled_theme_applies_flag(client, db, event):
    _product(db, "Giftable mug")
    add_theme(db, event, "Merry Christmas", status="ready", enabled=True)
    body = client.get("/api/storefront").json()
    assert body["theme"] == "merry-christmas"
    assert body["copy"]["hero_heading"].startswith("Merry Market Supply")
    assert body["copy"]["stock_badge"] == "North Pole ready"
    assert body["copy"]["highlights"][0] == "Complimentary gift wrap"


def test_not_ready_or_disabled_themes_are_ignored(client, db, event):
    add_theme(db, event, "Merry Christmas", status="building", enabled=True)
    add_theme(db, event, "Merry Christmas", status="ready", enabled=False)
    assert client.get("/api/storefront").json()["theme"] is None


def test_most_recently_updated_theme_wins(db, event):
    add_theme(db, event, "Merry Christmas", updated_at=at(1))
    newest = add_theme(db, event, "Neon Nights", updated_at=at(3))
    add_theme(db, event, "Spring", updated_at=at(2))

    active = StorefrontService(db).active_theme()
    assert active.id == newest.id


def test_unknown_flag_renders_default_copy(client, db, event):
    add_theme(db, event, "Neon Nights!!", status="ready", enabled=True)
    body = client.get("/api/storefront").json()
    assert body["theme"] is None
    assert body["active_theme"]["flag"] == "neon-nights"
    assert body["copy"]["hero_heading"].startswith("Night Market Supply")


def test_only_published_content_is_listed(client, db):
    _product(db, "Draft hoodie", status="draft")
    _product(db, "Camera strap")
    db.add(Event(title="Hidden", status="draft"))
    db.add(Event(title="Later", status="published", starts_at=datetime(2025, 12, 20, 18, 30)))
    db.add(Event(title="Sooner", status="published", starts_at=datetime(2025, 12, 1, 0, 0)))
    db.commit()

    body = client.get("/api/storefront").json()
    assert [p["name"] for p in body["featured_products"]] == ["Camera strap"]
    assert [e["title"] for e in body["events"]] == ["Sooner", "Later"]
    assert body["events"][0]["starts_at_label"] == "Dec 1, 2025, 12:00 AM"
    assert body["events"][1]["starts_at_label"] == "Dec 20, 2025, 6:30 PM"


def test_featured_products_capped_at_six(client, db):
    for i in range(8):
        _product(db, f"Item {i}")
    body = client.get("/api/storefront").json()
    assert body["product_count"] == 8
    assert len(body["featured_products"]) == 6


def test_admin_links_follow_session(client, auth_headers):
    assert client.get("/api/storefront", headers=auth_headers).json()["show_admin_links"] is True

    nav = client.get("/api/storefront/nav", headers=auth_headers).json()
    assert [l["label"] for l in nav["links"]] == ["Admin dashboard"]
    assert [a["label"] for a in nav["actions"]] == ["Logout"]

    nav = client.get("/api/storefront/nav").json()
    assert [l["label"] for l in nav["links"]] == ["Login"]
    assert nav["actions"] == []


def test_product_image_heuristics():
    explicit = Product(name="Mug", image_url="https://cdn.example.com/mug.jpg")
    assert product_image(explicit) == "https://cdn.example.com/mug.jpg"

    curated = Product(name="Retro Camera Kit")
    assert product_image(curated) == CAMERA_IMAGE

    plain = Product(name="Stoneware", slug="stoneware")
    expected = FALLBACK_PRODUCT_IMAGES[hash_string("stoneware") % len(FALLBACK_PRODUCT_IMAGES)]
    assert product_image(plain) == expected


def test_variant_registry_lookup():
    assert resolve_variant("merry-christmas").cta_label == "Shop holiday picks"
    assert resolve_variant("does-not-exist") is None
    assert resolve_variant(None) is None


def test_hero_and_cards_have_separate_summary_fallbacks(client, db):
    _product(db, "Plain tote")
    body = client.get("/api/storefront").json()
    assert body["hero_product"]["summary"] == "Curated gear ready to ship."
    assert body["featured_products"][0]["summary"] == "Minimal description pending."
