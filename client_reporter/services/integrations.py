import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.logging import log_db
from client_reporter.models import Client, Integration, IntegrationStatus
from client_reporter.schemas.integrations import ProviderSummary
from client_reporter.services.clients import ClientService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Provider:
    id: str
    name: str
    description: str
    icon: str
    available: bool = True


PROVIDERS: Dict[str, Provider] = {
    p.id: p
    for p in [
        Provider(
            "google-analytics",
            "Google Analytics 4",
            "Connect to Google Analytics 4 to pull website traffic and user behavior data.",
            "📊",
        ),
        Provider(
            "search-console",
            "Google Search Console",
            "Connect to Search Console for SEO performance and keyword rankings.",
            "🔍",
        ),
        Provider(
            "google-ads",
            "Google Ads",
            "Connect to Google Ads for advertising performance metrics.",
            "📢",
        ),
        Provider(
            "facebook-ads",
            "Facebook Ads",
            "Connect to Meta Ads Manager for social advertising data.",
            "📱",
            available=False,
        ),
        Provider(
            "linkedin-ads",
            "LinkedIn Ads",
            "Connect to LinkedIn Campaign Manager for B2B advertising.",
            "💼",
            available=False,
        ),
    ]
}


def get_provider(provider_id: str) -> Provider:
    provider = PROVIDERS.get(provider_id)
    if not provider:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown integration provider")
    return provider


def aggregate_status(provider: Provider, connected: int, total: int) -> str:
    if not provider.available:
        return "coming_soon"
    if connected == 0:
        return IntegrationStatus.DISCONNECTED.value
    if connected >= total:
        return IntegrationStatus.CONNECTED.value
    return IntegrationStatus.PARTIAL.value


class IntegrationService:
    def __init__(self, db: AsyncSession, team_id: str):
        self.db = db
        self.team_id = team_id

    async def catalog(self) -> List[ProviderSummary]:
        total = await self.db.scalar(
            select(func.count(Client.id)).where(Client.team_id == self.team_id)
        ) or 0

        result = await self.db.execute(
            select(
                Integration.provider,
                func.count(Integration.id),
                func.max(Integration.last_synced_at),
            )
            .join(Client, Integration.client_id == Client.id)
            .where(
                Client.team_id == self.team_id,
                Integration.status == IntegrationStatus.CONNECTED.value,
            )
            .group_by(Integration.provider)
        )
        stats: Dict[str, tuple[int, Optional[datetime]]] = {
            provider: (count, last_sync) for provider, count, last_sync in result.all()
        }

        summaries = []
        for provider in PROVIDERS.values():
            connected, last_sync = stats.get(provider.id, (0, None))
            summaries.append(
                ProviderSummary(
                    id=provider.id,
                    name=provider.name,
                    description=provider.description,
                    icon=provider.icon,
                    available=provider.available,
                    status=aggregate_status(provider, connected, total),
                    connected=connected if provider.available else 0,
                    total=total if provider.available else 0,
                    last_sync=last_sync,
                )
            )
        return summaries

    async def list_for_client(self, client_id: str) -> List[Integration]:
        client = await ClientService(self.db, self.team_id).get_client(client_id)
        return sorted(client.integrations, key=lambda i: i.provider)

    async def connect(
        self, client_id: str, provider_id: str, account_id: Optional[str], settings: dict
    ) -> Integration:
        provider = get_provider(provider_id)
        if not provider.available:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{provider.name} is coming soon",
            )
        client = await ClientService(self.db, self.team_id).get_client(client_id)

        integration = next((i for i in client.integrations if i.provider == provider.id), None)
        if integration:
            integration.account_id = account_id
            integration.settings = settings
            integration.status = IntegrationStatus.CONNECTED.value
        else:
            integration = Integration(
                client_id=client.id,
                provider=provider.id,
                account_id=account_id,
                settings=settings,
                status=IntegrationStatus.CONNECTED.value,
            )
            self.db.add(integration)

        await self.db.commit()
        await self.db.refresh(integration)
        log_db(logger, f"Connected {provider.id} for client {client.id}")
        return integration

    async def disconnect(self, client_id: str, provider_id: str) -> None:
        get_provider(provider_id)
        client = await ClientService(self.db, self.team_id).get_client(client_id)
        integration = next((i for i in client.integrations if i.provider == provider_id), None)
        if not integration:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Integration not found")
        await self.db.delete(integration)
        await self.db.commit()
        log_db(logger, f"Disconnected {provider_id} for client {client_id}")
