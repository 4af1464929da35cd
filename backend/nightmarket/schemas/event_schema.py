from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from nightmarket.models.product import PublishStatus


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    status: PublishStatus
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventForm(BaseModel):
    # blank strings are stored as null
    title: str
    description: Optional[str] = ""
    status: PublishStatus = PublishStatus.PUBLISHED
    starts_at: Optional[str] = ""
    ends_at: Optional[str] = ""
