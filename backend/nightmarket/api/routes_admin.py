from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from nightmarket.adapters.identity_provider import AuthSession
from nightmarket.api.deps import get_db, require_session
from nightmarket.schemas.event_schema import EventForm, EventOut
from nightmarket.schemas.product_schema import ProductForm, ProductOut
from nightmarket.schemas.theme_schema import ThemeOut
from nightmarket.services.catalog_service import CatalogService
from nightmarket.utils.text import format_money

# every admin route needs a live session
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_session)])


def _product_dict(p) -> dict:
    data = ProductOut.model_validate(p).model_dump(mode="json")
    data["price_display"] = format_money(p.price_cents)
    return data


def _event_dict(e) -> dict:
    return EventOut.model_validate(e).model_dump(mode="json")


@router.get("/dashboard", summary="Products, events and per-event themes")
def dashboard(session: AuthSession = Depends(require_session), db: Session = Depends(get_db)):
    snapshot = CatalogService(db).dashboard()
    themes_by_event = snapshot["themes_by_event"]
    return {
        "user": {"id": session.user_id, "email": session.email},
        "products": [_product_dict(p) for p in snapshot["products"]],
        "events": [
            dict(
                _event_dict(e),
                themes=[ThemeOut.model_validate(t).model_dump(mode="json") for t in themes_by_event.get(e.id, [])],
            )
            for e in snapshot["events"]
        ],
    }


@router.get("/products", summary="List all products")
def list_products(db: Session = Depends(get_db)):
    return {"items": [_product_dict(p) for p in CatalogService(db).list_products()]}


@router.post("/products", summary="Create a product")
def create_product(payload: ProductForm, db: Session = Depends(get_db)):
    return {"product": _product_dict(CatalogService(db).create_product(payload))}


@router.put("/products/{product_id}", summary="Update a product")
def update_product(product_id: str, payload: ProductForm, db: Session = Depends(get_db)):
    return {"product": _product_dict(CatalogService(db).update_product(product_id, payload))}


@router.delete("/products/{product_id}", summary="Delete a product")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    CatalogService(db).delete_product(product_id)
    return {"ok": True}


@router.post("/products/{product_id}/toggle-status", summary="Publish or unpublish a product")
def toggle_product_status(product_id: str, db: Session = Depends(get_db)):
    return {"product": _product_dict(CatalogService(db).toggle_product_status(product_id))}


@router.get("/events", summary="List all events")
def list_events(db: Session = Depends(get_db)):
    return {"items": [_event_dict(e) for e in CatalogService(db).list_events()]}


@router.post("/events", summary="Create an event")
def create_event(payload: EventForm, db: Session = Depends(get_db)):
    return {"event": _event_dict(CatalogService(db).create_event(payload))}


@router.put("/events/{event_id}", summary="Update an event")
def update_event(event_id: str, payload: EventForm, db: Session = Depends(get_db)):
    return {"event": _event_dict(CatalogService(db).update_event(event_id, payload))}


@router.delete("/events/{event_id}", summary="Delete an event and its themes")
def delete_event(event_id: str, db: Session = Depends(get_db)):
    CatalogService(db).delete_event(event_id)
    return {"ok": True}
