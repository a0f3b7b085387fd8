import enum
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from client_reporter.models.base import Base, new_id, utcnow


class IntegrationStatus(str, enum.Enum):
    CONNECTED = "connected"
    PARTIAL = "partial"
    DISCONNECTED = "disconnected"


class Integration(Base):
    __tablename__ = "integrations"
    __table_args__ = (UniqueConstraint("client_id", "provider", name="uq_client_provider"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    client_id: Mapped[str] = mapped_column(ForeignKey("clients.id", ondelete="CASCADE"), index=True)
    provider: Mapped[str] = mapped_column(String(50), index=True)  # google-analytics, search-console, google-ads
    status: Mapped[str] = mapped_column(String(20), default=IntegrationStatus.CONNECTED.value)
    account_id: Mapped[Optional[str]] = mapped_column(String(100))
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    last_synced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    client: Mapped["Client"] = relationship(back_populates="integrations")

    def __repr__(self):
        return f"<Integration(provider='{self.provider}', client_id={self.client_id})>"

    def __str__(self):
        return f"{self.provider} (Client ID: {self.client_id})"
