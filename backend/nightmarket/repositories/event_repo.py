from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from nightmarket.models.event import Event
from nightmarket.models.product import PublishStatus


class EventRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, event_id: str) -> Optional[Event]:
        return self.db.get(Event, event_id)

    def list_published(self) -> List[Event]:
        return (
            self.db.query(Event)
            .filter(Event.status == PublishStatus.PUBLISHED.value)
            .order_by(Event.starts_at.asc())
            .all()
        )

    def list_all(self) -> List[Event]:
        # undated events first, then by start time
        return (
            self.db.query(Event)
            .order_by(Event.starts_at.is_(None).desc(), Event.starts_at.asc())
            .all()
        )

    def create(self, fields: Dict[str, Any]) -> Event:
        e = Event(**fields)
        self.db.add(e)
        self.db.flush()
        return e

    def update(self, event: Event, fields: Dict[str, Any]) -> Event:
        for key, value in fields.items():
            setattr(event, key, value)
        self.db.flush()
        return event

    def delete(self, event: Event) -> None:
        self.db.delete(event)
        self.db.flush()
