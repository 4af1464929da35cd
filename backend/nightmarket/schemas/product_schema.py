from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from nightmarket.models.product import PublishStatus


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: Optional[str] = None
    price_cents: int
    status: PublishStatus
    summary: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductForm(BaseModel):
    """Admin product form; price is entered in major units, e.g. "28.50"."""

    name: str
    slug: Optional[str] = ""
    price: Optional[str] = ""
    status: PublishStatus = PublishStatus.PUBLISHED
    summary: Optional[str] = ""
    description: Optional[str] = ""
    image_url: Optional[str] = None
