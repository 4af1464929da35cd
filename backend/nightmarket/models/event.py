from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from nightmarket.db import Base
from nightmarket.models.product import PublishStatus, new_id, utcnow
from nightmarket.models.theme import Theme


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=PublishStatus.PUBLISHED.value, index=True)
    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    themes = relationship(Theme, back_populates="event", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Event title={self.title} status={self.status}>"
