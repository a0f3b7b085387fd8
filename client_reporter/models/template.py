import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from client_reporter.models.base import Base, new_id, utcnow


class TemplateCategory(str, enum.Enum):
    SEO = "SEO"
    ADS = "ADS"
    SOCIAL = "SOCIAL"
    CUSTOM = "CUSTOM"


class Template(Base):
    __tablename__ = "templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    # NULL team for the built-in defaults shared by every team
    team_id: Mapped[Optional[str]] = mapped_column(ForeignKey("teams.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(20), default=TemplateCategory.CUSTOM.value)
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)
    sections: Mapped[List[str]] = mapped_column(JSON, default=list)
    usage_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    team: Mapped[Optional["Team"]] = relationship(back_populates="templates")
    reports: Mapped[List["Report"]] = relationship(back_populates="template")

    def __repr__(self):
        return f"<Template(name='{self.name}', default={self.is_default})>"

    def __str__(self):
        return self.name
