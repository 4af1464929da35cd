from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from nightmarket.models.theme import Theme, ThemeStatus


class ThemeRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, theme_id: str) -> Optional[Theme]:
        return self.db.get(Theme, theme_id)

    def insert(self, event_id: str, title: str, notes: Optional[str]) -> Theme:
        t = Theme(
            event_id=event_id,
            title=title,
            notes=notes,
            enabled=False,
            status=ThemeStatus.REQUESTED.value,
        )
        self.db.add(t)
        self.db.flush()
        return t

    def update(self, theme: Theme, fields: Dict[str, Any]) -> Theme:
        for key, value in fields.items():
            setattr(theme, key, value)
        self.db.flush()
        return theme

    def list(self, event_id: Optional[str] = None) -> List[Theme]:
        query = self.db.query(Theme)
        if event_id:
            query = query.filter(Theme.event_id == event_id)
        return query.order_by(Theme.created_at.desc()).all()

    def get_active(self) -> Optional[Theme]:
        """The ready, enabled theme updated most recently (there may be several)."""
        return (
            self.db.query(Theme)
            .filter(Theme.status == ThemeStatus.READY.value, Theme.enabled.is_(True))
            .order_by(Theme.updated_at.desc())
            .limit(1)
            .first()
        )

    def list_requested_before(self, cutoff: datetime) -> List[Theme]:
        return (
            self.db.query(Theme)
            .filter(Theme.status == ThemeStatus.REQUESTED.value, Theme.created_at < cutoff)
            .order_by(Theme.created_at)
            .all()
        )
