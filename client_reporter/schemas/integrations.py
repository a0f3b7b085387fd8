from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from client_reporter.schemas.validators import blank_to_none


class IntegrationRead(BaseModel):
    id: str
    client_id: str
    provider: str
    status: str
    account_id: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class IntegrationConnect(BaseModel):
    account_id: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("account_id")
    @classmethod
    def _account_id(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class ProviderSummary(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    available: bool
    status: str
    connected: int
    total: int
    last_sync: Optional[datetime] = None
