from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from nightmarket.models.theme import ThemeStatus


class ThemeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    title: str
    notes: Optional[str] = None
    status: ThemeStatus
    enabled: bool
    issue_number: Optional[int] = None
    issue_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ThemeRequestIn(BaseModel):
    # fields are optional here so missing values get the lifecycle's own 400 message
    model_config = ConfigDict(populate_by_name=True)

    event_id: Optional[str] = Field(None, alias="eventId")
    title: Optional[str] = None
    notes: Optional[str] = None


class ThemeToggleIn(BaseModel):
    enabled: bool


class IssueIn(BaseModel):
    title: Optional[str] = None
    body: Optional[str] = None
    labels: Optional[List[str]] = None
