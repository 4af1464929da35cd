import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from nightmarket.db import Base
from nightmarket.models.product import new_id, utcnow


class ThemeStatus(str, enum.Enum):
    REQUESTED = "requested"
    BUILDING = "building"
    READY = "ready"
    FAILED = "failed"


class Theme(Base):
    __tablename__ = "themes"

    id = Column(String(36), primary_key=True, default=new_id)
    event_id = Column(String(36), ForeignKey("events.id"), nullable=False, index=True)
    title = Column(String(256), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=ThemeStatus.REQUESTED.value, index=True)
    enabled = Column(Boolean, nullable=False, default=False)
    issue_number = Column(Integer, nullable=True)
    issue_url = Column(String(1024), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    event = relationship("Event", back_populates="themes")

    def __repr__(self):
        return f"<Theme title={self.title} status={self.status} enabled={self.enabled}>"
