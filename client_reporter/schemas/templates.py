from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from client_reporter.models.template import TemplateCategory
from client_reporter.schemas.validators import blank_to_none, check_name


class TemplateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: TemplateCategory = TemplateCategory.CUSTOM
    sections: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return check_name(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class TemplateRead(BaseModel):
    id: str
    team_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    category: str
    is_default: bool
    sections: List[str] = Field(default_factory=list)
    usage_count: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
