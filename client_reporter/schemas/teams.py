from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from client_reporter.models.team import TeamRole
from client_reporter.schemas.validators import (
    blank_to_none,
    check_email,
    check_name,
    check_optional_url,
)


class MemberRead(BaseModel):
    id: str
    user_id: str
    name: Optional[str] = None
    email: str
    role: str
    created_at: datetime


class TeamRead(BaseModel):
    id: str
    name: str
    slug: str
    owner_id: str
    brand_color: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime
    role: Optional[str] = None
    members: List[MemberRead] = []
    model_config = ConfigDict(from_attributes=True)


class TeamUpdate(BaseModel):
    name: Optional[str] = None
    brand_color: Optional[str] = None
    logo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_name(v, "Team name")

    @field_validator("brand_color")
    @classmethod
    def _brand_color(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)

    @field_validator("logo_url")
    @classmethod
    def _logo_url(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)


class MemberAdd(BaseModel):
    email: str
    role: TeamRole = TeamRole.MEMBER

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("role")
    @classmethod
    def _role(cls, v: TeamRole) -> TeamRole:
        if v == TeamRole.OWNER:
            raise ValueError("A team can only have one owner")
        return v


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_email(v)

    @field_validator("company")
    @classmethod
    def _company(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)
