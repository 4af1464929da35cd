from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from nightmarket.models.event import Event
from nightmarket.models.product import Product
from nightmarket.models.theme import Theme
from nightmarket.repositories.event_repo import EventRepository
from nightmarket.repositories.product_repo import ProductRepository
from nightmarket.repositories.theme_repo import ThemeRepository
from nightmarket.utils.text import format_event_time, format_price, hash_string, to_slug

FEATURED_LIMIT = 6
CARD_SUMMARY_FALLBACK = "Minimal description pending."
HERO_SUMMARY_FALLBACK = "Curated gear ready to ship."

_UNSPLASH = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&w=1200&q=80"
TEE_IMAGE = _UNSPLASH.format("1521572267360-ee0c2909d518")
HOODIE_IMAGE = _UNSPLASH.format("1542293787938-4d36393d5a29")
BAG_IMAGE = _UNSPLASH.format("1512499617640-c2f999098c01")
HEADPHONES_IMAGE = _UNSPLASH.format("1505740420928-5e560c06d30e")
CAMERA_IMAGE = _UNSPLASH.format("1526170375885-4d8ecf77b99f")
WATCH_IMAGE = _UNSPLASH.format("1523275335684-37898b6baf30")

DEFAULT_PRODUCT_IMAGE = HOODIE_IMAGE
FALLBACK_PRODUCT_IMAGES = [
    TEE_IMAGE,
    WATCH_IMAGE,
    HOODIE_IMAGE,
    BAG_IMAGE,
    HEADPHONES_IMAGE,
    CAMERA_IMAGE,
]
# first keyword found in the product's slug or name wins
CURATED_BY_KEYWORD = {
    "tee": TEE_IMAGE,
    "shirt": TEE_IMAGE,
    "apparel": TEE_IMAGE,
    "hoodie": HOODIE_IMAGE,
    "bag": BAG_IMAGE,
    "headphones": HEADPHONES_IMAGE,
    "camera": CAMERA_IMAGE,
}


@dataclass(frozen=True)
class ThemeVariant:
    hero_heading: str
    hero_description: str
    highlights: List[str] = field(default_factory=list)
    ribbon_label: str = "New drop"
    cta_label: str = "Shop the collection"
    secondary_cta_label: Optional[str] = None
    featured_label: str = "Featured"
    featured_badge: str = "Ready to ship"
    stock_badge: str = "In stock"
    add_to_cart_label: str = "Add to bag"
    product_footer_label: str = "On hand"
    products_heading: str = "Fresh arrivals"
    events_heading: str = "In-store happenings"
    empty_events_message: str = "No events scheduled. Add one from the admin area."


DEFAULT_VARIANT = ThemeVariant(
    hero_heading="Night Market Supply — a one-page storefront powered by Codex + Supabase.",
    hero_description=(
        "Merch, tech, coffee gear, whatever you dream up. Publish in the admin, "
        "let customers browse here. Codex can even ship a new theme via GitHub PR."
    ),
    highlights=["Free shipping over $75", "45-day returns", "Live inventory sync"],
)

THEME_VARIANTS: Dict[str, ThemeVariant] = {
    "merry-christmas": ThemeVariant(
        hero_heading="Merry Market Supply — a cozy gifting storefront powered by Codex + Supabase.",
        hero_description=(
            "Cheerful merch, beans, and tech wrapped up for the season. Publish in the "
            "admin, let the elves fulfill live inventory, and refresh the vibe with a "
            "single theme flag."
        ),
        highlights=[
            "Complimentary gift wrap",
            "Extended returns through Jan 15",
            "Next-day sleigh delivery",
        ],
        ribbon_label="Holiday shop open",
        cta_label="Shop holiday picks",
        secondary_cta_label="Peek at festivities",
        featured_label="Featured gift",
        featured_badge="Wrapped today",
        stock_badge="North Pole ready",
        add_to_cart_label="Add to sleigh",
        product_footer_label="Packed with care",
        products_heading="Fresh from the North Pole",
        events_heading="Holiday happenings",
        empty_events_message="No events scheduled yet. Add a cozy gathering from the admin area.",
    ),
}


def resolve_variant(flag: Optional[str]) -> Optional[ThemeVariant]:
    """Variant for a theme flag; None means the flag has no styling registered."""
    if not flag:
        return None
    return THEME_VARIANTS.get(flag)


def product_image(product: Product) -> str:
    if product.image_url:
        return product.image_url
    key = product.slug or product.name or "product"
    text = (product.slug or product.name or "").lower()
    for keyword, url in CURATED_BY_KEYWORD.items():
        if keyword in text:
            return url
    return FALLBACK_PRODUCT_IMAGES[hash_string(key) % len(FALLBACK_PRODUCT_IMAGES)]


def product_card(product: Product, summary_fallback: str = CARD_SUMMARY_FALLBACK) -> Dict:
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "summary": product.summary or summary_fallback,
        "price_cents": product.price_cents,
        "price": format_price(product.price_cents),
        "image_url": product_image(product),
    }


def event_card(event: Event) -> Dict:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description or "Details coming soon.",
        "starts_at": event.starts_at.isoformat() if event.starts_at else None,
        "starts_at_label": format_event_time(event.starts_at),
    }


def nav_model(authenticated: bool) -> Dict:
    if authenticated:
        links = [{"label": "Admin dashboard", "href": "/admin"}]
        actions = [{"label": "Logout", "action": "logout"}]
    else:
        links = [{"label": "Login", "href": "/login"}]
        actions = []
    return {
        "brand": "Night Market",
        "tagline": "Everyday goods & drops",
        "authenticated": authenticated,
        "links": links,
        "actions": actions,
    }


class StorefrontService:
    def __init__(self, db: Session):
        self.products = ProductRepository(db)
        self.events = EventRepository(db)
        self.themes = ThemeRepository(db)

    def active_theme(self) -> Optional[Theme]:
        return self.themes.get_active()

    def render(self, authenticated: bool = False) -> Dict:
        products = self.products.list_published()
        events = self.events.list_published()
        theme = self.active_theme()

        flag = to_slug(theme.title) if theme else None
        variant = resolve_variant(flag)
        hero = products[0] if products else None

        return {
            "theme": flag if variant else None,
            "active_theme": (
                {"id": theme.id, "title": theme.title, "flag": flag} if theme else None
            ),
            "copy": asdict(variant or DEFAULT_VARIANT),
            "product_count": len(products),
            "hero_product": product_card(hero, HERO_SUMMARY_FALLBACK) if hero else None,
            "hero_image_url": product_image(hero) if hero else DEFAULT_PRODUCT_IMAGE,
            "featured_products": [product_card(p) for p in products[:FEATURED_LIMIT]],
            "events": [event_card(e) for e in events],
            "show_admin_links": authenticated,
            "nav": nav_model(authenticated),
        }
