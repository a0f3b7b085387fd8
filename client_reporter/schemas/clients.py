from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from client_reporter.schemas.integrations import IntegrationRead
from client_reporter.schemas.validators import (
    blank_to_none,
    check_name,
    check_optional_email,
    check_optional_url,
)


class ClientBase(BaseModel):
    name: str
    email: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return check_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_email(v)

    @field_validator("website")
    @classmethod
    def _website(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)

    @field_validator("industry", "description")
    @classmethod
    def _text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_email(v)

    @field_validator("website", "logo_url")
    @classmethod
    def _url(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)

    @field_validator("industry", "description")
    @classmethod
    def _text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class ClientRead(BaseModel):
    id: str
    team_id: str
    name: str
    email: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ClientCounts(BaseModel):
    reports: int = 0


class ClientListItem(ClientRead):
    integrations: List[IntegrationRead] = Field(default_factory=list)
    count: ClientCounts = Field(default_factory=ClientCounts, serialization_alias="_count")
