from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from client_reporter.models.report import ReportStatus
from client_reporter.schemas.validators import blank_to_none, check_optional_url


class ReportCreate(BaseModel):
    client_id: str
    template_id: str
    date_from: date
    date_to: date
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)

    @model_validator(mode="after")
    def _date_order(self):
        if self.date_to < self.date_from:
            raise ValueError("End date must be after start date")
        return self


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    pdf_url: Optional[str] = None
    error_message: Optional[str] = None

    @field_validator("pdf_url")
    @classmethod
    def _pdf_url(cls, v: Optional[str]) -> Optional[str]:
        return check_optional_url(v)


class ReportRead(BaseModel):
    id: str
    client_id: str
    template_id: Optional[str] = None
    created_by_id: Optional[str] = None
    name: str
    date_from: date
    date_to: date
    status: str
    pdf_url: Optional[str] = None
    sent_at: Optional[datetime] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ReportListItem(ReportRead):
    client_name: Optional[str] = None
    template_name: Optional[str] = None
