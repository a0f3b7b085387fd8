import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from client_reporter.core.logging import log_db, log_warning
from client_reporter.models import Client, Report, ReportStatus
from client_reporter.models.base import utcnow
from client_reporter.schemas.reports import ReportListItem
from client_reporter.services.templates import TemplateService

logger = logging.getLogger(__name__)

# Generation itself is not wired up yet; these are the moves an operator
# (or a future worker) may make on a report.
ALLOWED_TRANSITIONS: Dict[ReportStatus, Set[ReportStatus]] = {
    ReportStatus.DRAFT: {ReportStatus.GENERATING},
    ReportStatus.GENERATING: {ReportStatus.COMPLETED, ReportStatus.FAILED},
    ReportStatus.FAILED: {ReportStatus.GENERATING},
    ReportStatus.COMPLETED: {ReportStatus.SENT},
    ReportStatus.SENT: set(),
}

WIZARD_STEPS = [
    (1, "Select Client"),
    (2, "Date Range"),
    (3, "Template"),
    (4, "Review"),
]


def can_transition(current: str, target: str) -> bool:
    return ReportStatus(target) in ALLOWED_TRANSITIONS[ReportStatus(current)]


def default_report_name(client_name: str, date_from: date) -> str:
    return f"{client_name} Report – {date_from.strftime('%b %Y')}"


@dataclass
class ReportWizard:
    """
    Four linear steps: client, date range, template, review.
    Nothing is stored between steps; the form state travels with each request.
    """
    step: int = 1
    client_id: str = ""
    date_from: str = ""
    date_to: str = ""
    template_id: str = ""
    name: str = ""
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_form(cls, data: dict) -> "ReportWizard":
        try:
            step = int(data.get("step") or 1)
        except (TypeError, ValueError):
            step = 1
        return cls(
            step=min(max(step, 1), len(WIZARD_STEPS)),
            client_id=(data.get("client_id") or "").strip(),
            date_from=(data.get("date_from") or "").strip(),
            date_to=(data.get("date_to") or "").strip(),
            template_id=(data.get("template_id") or "").strip(),
            name=(data.get("name") or "").strip(),
        )

    def step_errors(self, step: Optional[int] = None) -> List[str]:
        step = step or self.step
        errors: List[str] = []
        if step == 1 and not self.client_id:
            errors.append("Please select a client")
        elif step == 2:
            if not self.date_from or not self.date_to:
                errors.append("Please choose a start and end date")
            else:
                try:
                    start = date.fromisoformat(self.date_from)
                    end = date.fromisoformat(self.date_to)
                except ValueError:
                    errors.append("Dates must use the YYYY-MM-DD format")
                else:
                    if end < start:
                        errors.append("End date must be after start date")
        elif step == 3 and not self.template_id:
            errors.append("Please select a template")
        return errors

    def next(self) -> "ReportWizard":
        self.errors = self.step_errors()
        if not self.errors and self.step < len(WIZARD_STEPS):
            self.step += 1
        return self

    def prev(self) -> "ReportWizard":
        self.errors = []
        if self.step > 1:
            self.step -= 1
        return self

    def clamp(self) -> "ReportWizard":
        """Send a deep link back to the first step that is still incomplete."""
        for step, _ in WIZARD_STEPS[: self.step - 1]:
            if self.step_errors(step):
                self.step = step
                break
        return self

    def can_submit(self) -> bool:
        return all(not self.step_errors(s) for s, _ in WIZARD_STEPS[:-1])

    def as_payload(self) -> dict:
        return {
            "client_id": self.client_id,
            "template_id": self.template_id,
            "date_from": self.date_from,
            "date_to": self.date_to,
            "name": self.name or None,
        }


class ReportService:
    def __init__(self, db: AsyncSession, team_id: str):
        self.db = db
        self.team_id = team_id

    def _query(self):
        return (
            select(Report)
            .join(Client, Report.client_id == Client.id)
            .options(selectinload(Report.client), selectinload(Report.template))
            .where(Client.team_id == self.team_id)
        )

    @staticmethod
    def to_list_item(report: Report) -> ReportListItem:
        item = ReportListItem.model_validate(report)
        item.client_name = report.client.name if report.client else None
        item.template_name = report.template.name if report.template else None
        return item

    async def list_reports(
        self, status_filter: Optional[str] = None, client_id: Optional[str] = None
    ) -> List[Report]:
        query = self._query()
        if status_filter:
            query = query.where(Report.status == status_filter)
        if client_id:
            query = query.where(Report.client_id == client_id)
        result = await self.db.execute(query.order_by(Report.created_at.desc()))
        return list(result.scalars().all())

    async def get_report(self, report_id: str) -> Report:
        result = await self.db.execute(
            self._query()
            .where(Report.id == report_id)
            .execution_options(populate_existing=True)
        )
        report = result.scalar_one_or_none()
        if not report:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
        return report

    async def create_report(self, data: dict, created_by_id: str) -> Report:
        result = await self.db.execute(
            select(Client).where(Client.id == data["client_id"], Client.team_id == self.team_id)
        )
        client = result.scalar_one_or_none()
        if not client:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")

        template = await TemplateService(self.db, self.team_id).get_template(data["template_id"])

        report = Report(
            client_id=client.id,
            template_id=template.id,
            created_by_id=created_by_id,
            name=data.get("name") or default_report_name(client.name, data["date_from"]),
            date_from=data["date_from"],
            date_to=data["date_to"],
            status=ReportStatus.DRAFT.value,
        )
        template.usage_count = (template.usage_count or 0) + 1
        self.db.add(report)
        await self.db.commit()
        log_db(logger, f"Created report {report.id} for client {client.id}")
        return await self.get_report(report.id)

    async def change_status(
        self,
        report_id: str,
        target: ReportStatus,
        pdf_url: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> Report:
        report = await self.get_report(report_id)
        if not can_transition(report.status, target.value):
            log_warning(logger, f"Rejected transition {report.status} -> {target.value} for report {report_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot move report from {report.status} to {target.value}",
            )

        report.status = target.value
        if target == ReportStatus.GENERATING:
            report.error_message = None
        elif target == ReportStatus.COMPLETED:
            report.pdf_url = pdf_url
        elif target == ReportStatus.FAILED:
            report.error_message = error_message or "Report generation failed"
        elif target == ReportStatus.SENT:
            report.sent_at = utcnow()

        await self.db.commit()
        log_db(logger, f"Report {report_id} moved to {target.value}")
        return await self.get_report(report_id)

    async def delete_report(self, report_id: str) -> None:
        report = await self.get_report(report_id)
        await self.db.delete(report)
        await self.db.commit()
        log_db(logger, f"Deleted report {report_id}")
