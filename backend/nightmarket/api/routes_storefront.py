from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from nightmarket.adapters.identity_provider import AuthSession
from nightmarket.api.deps import get_db, optional_session
from nightmarket.exceptions import NotFound
from nightmarket.repositories.product_repo import ProductRepository
from nightmarket.services.storefront_service import StorefrontService, nav_model, product_card

router = APIRouter(tags=["storefront"])


@router.get("/api/storefront", summary="Themed storefront view model")
def storefront(
    db: Session = Depends(get_db),
    session: Optional[AuthSession] = Depends(optional_session),
):
    return StorefrontService(db).render(authenticated=session is not None)


@router.get("/api/storefront/nav", summary="Navigation for the current visitor")
def storefront_nav(session: Optional[AuthSession] = Depends(optional_session)):
    return nav_model(session is not None)


@router.get("/api/products", summary="List published products")
def list_products(
    q: Optional[str] = Query(None, description="search term"),
    db: Session = Depends(get_db),
):
    items = ProductRepository(db).list_published(q=q)
    return {"items": [product_card(p) for p in items], "total": len(items)}


@router.get("/api/products/{slug}", summary="Get a published product by slug")
def get_product(slug: str, db: Session = Depends(get_db)):
    p = ProductRepository(db).get_published_by_slug(slug)
    if not p:
        raise NotFound("Product not found")
    return product_card(p)
