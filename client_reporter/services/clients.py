import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from client_reporter.core.logging import log_db
from client_reporter.models import Client, Report
from client_reporter.schemas.clients import ClientCounts, ClientListItem

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, db: AsyncSession, team_id: str):
        self.db = db
        self.team_id = team_id

    async def list_clients(self) -> List[ClientListItem]:
        result = await self.db.execute(
            select(Client)
            .options(selectinload(Client.integrations))
            .where(Client.team_id == self.team_id)
            .order_by(Client.created_at.desc())
        )
        clients = result.scalars().all()

        counts = await self.report_counts([c.id for c in clients])
        items = []
        for client in clients:
            item = ClientListItem.model_validate(client)
            item.count = ClientCounts(reports=counts.get(client.id, 0))
            items.append(item)
        return items

    async def report_counts(self, client_ids: List[str]) -> dict[str, int]:
        if not client_ids:
            return {}
        result = await self.db.execute(
            select(Report.client_id, func.count(Report.id))
            .where(Report.client_id.in_(client_ids))
            .group_by(Report.client_id)
        )
        return {client_id: count for client_id, count in result.all()}

    async def get_client(self, client_id: str) -> Client:
        result = await self.db.execute(
            select(Client)
            .options(selectinload(Client.integrations))
            .where(Client.id == client_id, Client.team_id == self.team_id)
            .execution_options(populate_existing=True)
        )
        client = result.scalar_one_or_none()
        if not client:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
        return client

    async def create_client(self, data: dict) -> Client:
        client = Client(team_id=self.team_id, **data)
        self.db.add(client)
        await self.db.commit()
        await self.db.refresh(client)
        log_db(logger, f"Created client {client.id} for team {self.team_id}")
        return client

    async def update_client(self, client_id: str, changes: dict) -> Client:
        client = await self.get_client(client_id)
        for field, value in changes.items():
            if field == "name" and value is None:
                continue
            setattr(client, field, value)
        await self.db.commit()
        return await self.get_client(client_id)

    async def delete_client(self, client_id: str) -> None:
        client = await self.get_client(client_id)
        await self.db.delete(client)
        await self.db.commit()
        log_db(logger, f"Deleted client {client_id}")
