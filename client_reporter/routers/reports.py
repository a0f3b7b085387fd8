from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.models import ReportStatus, TeamMember
from client_reporter.routers.deps import get_current_membership
from client_reporter.schemas.reports import ReportCreate, ReportListItem, ReportStatusUpdate
from client_reporter.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=List[ReportListItem])
async def list_reports(
    status_filter: Optional[ReportStatus] = Query(None, alias="status"),
    client_id: Optional[str] = None,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    service = ReportService(db, membership.team_id)
    reports = await service.list_reports(
        status_filter.value if status_filter else None, client_id
    )
    return [service.to_list_item(r) for r in reports]


@router.post("", response_model=ReportListItem, status_code=status.HTTP_201_CREATED)
async def create_report(
    payload: ReportCreate,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    service = ReportService(db, membership.team_id)
    report = await service.create_report(payload.model_dump(), created_by_id=membership.user_id)
    return service.to_list_item(report)


@router.get("/{report_id}", response_model=ReportListItem)
async def get_report(
    report_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    service = ReportService(db, membership.team_id)
    return service.to_list_item(await service.get_report(report_id))


@router.post("/{report_id}/status", response_model=ReportListItem)
async def change_report_status(
    report_id: str,
    payload: ReportStatusUpdate,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    service = ReportService(db, membership.team_id)
    report = await service.change_status(
        report_id, payload.status, pdf_url=payload.pdf_url, error_message=payload.error_message
    )
    return service.to_list_item(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    await ReportService(db, membership.team_id).delete_report(report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
