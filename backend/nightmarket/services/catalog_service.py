from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from nightmarket.exceptions import NotFound, ValidationFailed
from nightmarket.models.event import Event
from nightmarket.models.product import Product, PublishStatus
from nightmarket.repositories.event_repo import EventRepository
from nightmarket.repositories.product_repo import ProductRepository
from nightmarket.repositories.theme_repo import ThemeRepository
from nightmarket.schemas.event_schema import EventForm
from nightmarket.schemas.product_schema import ProductForm
from nightmarket.utils.log import get_logger
from nightmarket.utils.text import parse_price_to_cents, to_slug
from nightmarket.utils.transactions import committed

log = get_logger("catalog")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_timestamp(value: Optional[str], field: str) -> Optional[datetime]:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationFailed(f"Invalid {field}: {value}")


class CatalogService:
    """Product and event CRUD behind the admin dashboard."""

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductRepository(db)
        self.events = EventRepository(db)
        self.themes = ThemeRepository(db)

    # products

    def _product_fields(self, form: ProductForm) -> Dict:
        name = form.name.strip()
        if not name:
            raise ValidationFailed("Product name is required.")
        try:
            price_cents = parse_price_to_cents(form.price)
        except (ValueError, ArithmeticError):
            raise ValidationFailed(f"Invalid price: {form.price}")
        return {
            "name": name,
            "slug": _blank_to_none(form.slug) or to_slug(name),
            "price_cents": price_cents,
            "status": form.status.value,
            "summary": _blank_to_none(form.summary),
            "description": _blank_to_none(form.description),
            "image_url": _blank_to_none(form.image_url),
        }

    def list_products(self) -> List[Product]:
        return self.products.list_all()

    def get_product(self, product_id: str) -> Product:
        p = self.products.get(product_id)
        if p is None:
            raise NotFound("Product not found.")
        return p

    def create_product(self, form: ProductForm) -> Product:
        fields = self._product_fields(form)
        with committed(self.db):
            p = self.products.create(fields)
        log.info("Created product %s (%s)", p.id, p.slug)
        return p

    def update_product(self, product_id: str, form: ProductForm) -> Product:
        p = self.get_product(product_id)
        fields = self._product_fields(form)
        with committed(self.db):
            self.products.update(p, fields)
        return p

    def delete_product(self, product_id: str) -> None:
        p = self.get_product(product_id)
        with committed(self.db):
            self.products.delete(p)
        log.info("Deleted product %s", product_id)

    def toggle_product_status(self, product_id: str) -> Product:
        p = self.get_product(product_id)
        new_status = (
            PublishStatus.DRAFT.value
            if p.status == PublishStatus.PUBLISHED.value
            else PublishStatus.PUBLISHED.value
        )
        with committed(self.db):
            self.products.update(p, {"status": new_status})
        return p

    # events

    def _event_fields(self, form: EventForm) -> Dict:
        title = form.title.strip()
        if not title:
            raise ValidationFailed("Event title is required.")
        return {
            "title": title,
            "description": _blank_to_none(form.description),
            "status": form.status.value,
            "starts_at": _parse_timestamp(form.starts_at, "starts_at"),
            "ends_at": _parse_timestamp(form.ends_at, "ends_at"),
        }

    def list_events(self) -> List[Event]:
        return self.events.list_all()

    def get_event(self, event_id: str) -> Event:
        e = self.events.get(event_id)
        if e is None:
            raise NotFound("Event not found.")
        return e

    def create_event(self, form: EventForm) -> Event:
        fields = self._event_fields(form)
        with committed(self.db):
            e = self.events.create(fields)
        log.info("Created event %s", e.id)
        return e

    def update_event(self, event_id: str, form: EventForm) -> Event:
        e = self.get_event(event_id)
        fields = self._event_fields(form)
        with committed(self.db):
            self.events.update(e, fields)
        return e

    def delete_event(self, event_id: str) -> None:
        e = self.get_event(event_id)
        with committed(self.db):
            self.events.delete(e)
        log.info("Deleted event %s and its themes", event_id)

    def dashboard(self) -> Dict:
        """Everything the admin screen shows: catalog, events and each event's themes."""
        themes_by_event: Dict[str, list] = {}
        for t in self.themes.list():
            themes_by_event.setdefault(t.event_id, []).append(t)
        return {
            "products": self.list_products(),
            "events": self.list_events(),
            "themes_by_event": themes_by_event,
        }
