from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.models import TeamMember
from client_reporter.routers.deps import get_current_membership
from client_reporter.schemas.integrations import ProviderSummary
from client_reporter.services.integrations import IntegrationService

router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get("", response_model=List[ProviderSummary])
async def integration_catalog(
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await IntegrationService(db, membership.team_id).catalog()
