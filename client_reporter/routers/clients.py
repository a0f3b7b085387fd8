from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.models import TeamMember
from client_reporter.routers.deps import get_current_membership
from client_reporter.schemas.clients import ClientCreate, ClientListItem, ClientRead, ClientUpdate
from client_reporter.schemas.integrations import IntegrationConnect, IntegrationRead
from client_reporter.services.clients import ClientService
from client_reporter.services.integrations import IntegrationService

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=List[ClientListItem])
async def list_clients(
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await ClientService(db, membership.team_id).list_clients()


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await ClientService(db, membership.team_id).create_client(payload.model_dump())


@router.get("/{client_id}", response_model=ClientListItem)
async def get_client(
    client_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    service = ClientService(db, membership.team_id)
    client = await service.get_client(client_id)
    item = ClientListItem.model_validate(client)
    item.count.reports = (await service.report_counts([client.id])).get(client.id, 0)
    return item


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    changes = payload.model_dump(exclude_unset=True)
    return await ClientService(db, membership.team_id).update_client(client_id, changes)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    await ClientService(db, membership.team_id).delete_client(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{client_id}/integrations", response_model=List[IntegrationRead])
async def list_client_integrations(
    client_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await IntegrationService(db, membership.team_id).list_for_client(client_id)


@router.put("/{client_id}/integrations/{provider}", response_model=IntegrationRead)
async def connect_integration(
    client_id: str,
    provider: str,
    payload: IntegrationConnect,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await IntegrationService(db, membership.team_id).connect(
        client_id, provider, payload.account_id, payload.settings
    )


@router.delete("/{client_id}/integrations/{provider}", status_code=status.HTTP_204_NO_CONTENT)
async def disconnect_integration(
    client_id: str,
    provider: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    await IntegrationService(db, membership.team_id).disconnect(client_id, provider)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
