import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.logging import log_db, log_skip
from client_reporter.models import Template, TemplateCategory

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES = [
    {
        "name": "SEO Performance Report",
        "description": "Track organic traffic, rankings, and SEO metrics",
        "category": TemplateCategory.SEO.value,
        "sections": ["Organic Traffic", "Keyword Rankings", "Top Pages", "Backlinks"],
    },
    {
        "name": "Paid Ads Report",
        "description": "Google Ads performance with conversion tracking",
        "category": TemplateCategory.ADS.value,
        "sections": ["Spend", "Impressions & Clicks", "Conversions", "Cost per Acquisition"],
    },
    {
        "name": "Social Media Report",
        "description": "Social engagement and audience growth metrics",
        "category": TemplateCategory.SOCIAL.value,
        "sections": ["Audience Growth", "Engagement", "Top Posts"],
    },
]


async def seed_default_templates(db: AsyncSession) -> int:
    """Insert the built-in templates that are missing. Returns how many were added."""
    result = await db.execute(select(Template.name).where(Template.is_default.is_(True)))
    existing = set(result.scalars().all())

    added = 0
    for entry in DEFAULT_TEMPLATES:
        if entry["name"] in existing:
            continue
        db.add(Template(team_id=None, is_default=True, **entry))
        added += 1

    if added:
        await db.commit()
        log_db(logger, f"Seeded {added} default templates")
    else:
        log_skip(logger, "Default templates already present")
    return added


class TemplateService:
    def __init__(self, db: AsyncSession, team_id: str):
        self.db = db
        self.team_id = team_id

    def _visible(self):
        return or_(Template.is_default.is_(True), Template.team_id == self.team_id)

    async def list_templates(self) -> List[Template]:
        result = await self.db.execute(
            select(Template)
            .where(self._visible())
            .order_by(Template.is_default.desc(), Template.created_at)
        )
        return list(result.scalars().all())

    async def get_template(self, template_id: str) -> Template:
        result = await self.db.execute(
            select(Template).where(Template.id == template_id, self._visible())
        )
        template = result.scalar_one_or_none()
        if not template:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found")
        return template

    async def create_template(self, data: dict) -> Template:
        template = Template(team_id=self.team_id, is_default=False, **data)
        self.db.add(template)
        await self.db.commit()
        await self.db.refresh(template)
        log_db(logger, f"Created template {template.id} for team {self.team_id}")
        return template

    async def delete_template(self, template_id: str) -> None:
        template = await self.get_template(template_id)
        if template.is_default:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Default templates cannot be deleted",
            )
        await self.db.delete(template)
        await self.db.commit()
        log_db(logger, f"Deleted template {template_id}")
