#!/usr/bin/env python3
"""
Seed the store with demo products and events, optionally from a JSON file
shaped like {"products": [...], "events": [...]}, and optionally print an
admin session token for local testing.

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --file demo.json --token admin@example.com
"""
import argparse
import json
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from nightmarket.adapters.identity_provider import IdentityProvider
from nightmarket.config import Settings, require_store_config
from nightmarket.db import Store
from nightmarket.schemas.event_schema import EventForm
from nightmarket.schemas.product_schema import ProductForm
from nightmarket.services.catalog_service import CatalogService
from nightmarket.utils.text import to_slug

DEMO_PRODUCTS = [
    {"name": "Giftable mug", "price": "28", "summary": "Stoneware mug"},
    {"name": "Night Market tee", "price": "32", "summary": "Heavyweight cotton tee"},
    {"name": "Canvas tote bag", "price": "24.50", "summary": "Carries a week of groceries"},
    {"name": "Studio headphones", "price": "149", "summary": "Closed-back, flat response"},
    {"name": "House blend beans", "price": "18", "summary": "Roasted on Mondays", "status": "draft"},
]

DEMO_EVENTS = [
    {"title": "Fall Launch", "description": "New drops and cider", "starts_at": "2025-10-04T18:00"},
    {"title": "Winter Gala", "description": "Gift wrap station all night", "starts_at": "2025-12-13T19:00"},
]


def load_source(path):
    if not path:
        return DEMO_PRODUCTS, DEMO_EVENTS
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        return data, []
    return data.get("products", []), data.get("events", [])


def seed(store: Store, products, events):
    db = store.session()
    try:
        svc = CatalogService(db)
        existing = {p.slug for p in svc.list_products()}
        created = 0
        for entry in products:
            form = ProductForm(
                name=entry.get("name") or entry.get("title") or "",
                slug=entry.get("slug", ""),
                price=str(entry.get("price", "0")),
                status=entry.get("status", "published"),
                summary=entry.get("summary", ""),
                description=entry.get("description", ""),
                image_url=entry.get("image_url"),
            )
            if (form.slug or to_slug(form.name)) in existing:
                continue
            p = svc.create_product(form)
            existing.add(p.slug)
            created += 1
        titles = {e.title for e in svc.list_events()}
        for entry in events:
            if entry.get("title") in titles:
                continue
            svc.create_event(EventForm(**entry))
            created += 1
        print("Seeded rows:", created)
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="JSON with products/events (defaults to built-in demo data)")
    parser.add_argument("--token", default=None, help="print an admin session token for this user id/email")
    args = parser.parse_args()

    settings = Settings()
    require_store_config(settings)
    store = Store(settings.STORE_URL)
    store.init_db()
    products, events = load_source(args.file)
    seed(store, products, events)

    if args.token:
        session = IdentityProvider(settings.STORE_KEY, settings.SESSION_TTL_SECONDS).issue(args.token, email=args.token)
        print("Bearer", session.access_token)
