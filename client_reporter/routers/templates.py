from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.models import TeamMember
from client_reporter.routers.deps import get_current_membership
from client_reporter.schemas.templates import TemplateCreate, TemplateRead
from client_reporter.services.templates import TemplateService

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[TemplateRead])
async def list_templates(
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await TemplateService(db, membership.team_id).list_templates()


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: TemplateCreate,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await TemplateService(db, membership.team_id).create_template(payload.model_dump(mode="json"))


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    await TemplateService(db, membership.team_id).delete_template(template_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
