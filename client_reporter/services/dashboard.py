import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.models import Client, Integration, IntegrationStatus, Report, ReportStatus
from client_reporter.models.base import utcnow
from client_reporter.utils.formatting import calculate_change, format_number, format_percent

logger = logging.getLogger(__name__)

GENERATED_STATUSES = (ReportStatus.COMPLETED.value, ReportStatus.SENT.value)


@dataclass
class StatCard:
    title: str
    value: int
    change: float

    @property
    def display_value(self) -> str:
        return format_number(self.value)

    @property
    def display_change(self) -> str:
        return format_percent(self.change)

    @property
    def trend(self) -> str:
        return "up" if self.change >= 0 else "down"


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Start of the current month and start of the previous month."""
    this_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if this_month.month == 1:
        last_month = this_month.replace(year=this_month.year - 1, month=12)
    else:
        last_month = this_month.replace(month=this_month.month - 1)
    return this_month, last_month


class DashboardService:
    def __init__(self, db: AsyncSession, team_id: str):
        self.db = db
        self.team_id = team_id

    async def _count(self, query) -> int:
        return await self.db.scalar(query) or 0

    def _reports(self):
        return (
            select(func.count(Report.id))
            .join(Client, Report.client_id == Client.id)
            .where(Client.team_id == self.team_id)
        )

    async def stats(self, now: datetime | None = None) -> List[StatCard]:
        now = now or utcnow()
        this_month, last_month = month_bounds(now)

        clients_q = select(func.count(Client.id)).where(Client.team_id == self.team_id)
        total_clients = await self._count(clients_q)
        clients_before = await self._count(clients_q.where(Client.created_at < this_month))

        generated_q = self._reports().where(Report.status.in_(GENERATED_STATUSES))
        generated = await self._count(generated_q)
        generated_before = await self._count(generated_q.where(Report.created_at < this_month))

        integrations_q = (
            select(func.count(Integration.id))
            .join(Client, Integration.client_id == Client.id)
            .where(
                Client.team_id == self.team_id,
                Integration.status == IntegrationStatus.CONNECTED.value,
            )
        )
        active_integrations = await self._count(integrations_q)
        integrations_before = await self._count(integrations_q.where(Integration.created_at < this_month))

        this_month_reports = await self._count(self._reports().where(Report.created_at >= this_month))
        last_month_reports = await self._count(
            self._reports().where(Report.created_at >= last_month, Report.created_at < this_month)
        )

        return [
            StatCard("Total Clients", total_clients, calculate_change(total_clients, clients_before)),
            StatCard("Reports Generated", generated, calculate_change(generated, generated_before)),
            StatCard(
                "Active Integrations",
                active_integrations,
                calculate_change(active_integrations, integrations_before),
            ),
            StatCard(
                "Reports This Month",
                this_month_reports,
                calculate_change(this_month_reports, last_month_reports),
            ),
        ]
