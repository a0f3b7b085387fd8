import logging

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from client_reporter.core.logging import log_db
from client_reporter.models import Team, TeamMember, TeamRole
from client_reporter.schemas.teams import MemberRead, TeamRead
from client_reporter.services.accounts import AccountService

logger = logging.getLogger(__name__)


def require_manager(membership: TeamMember) -> None:
    if not membership.can_manage:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")


class TeamService:
    def __init__(self, db: AsyncSession, membership: TeamMember):
        self.db = db
        self.membership = membership
        self.team_id = membership.team_id

    async def get_team(self) -> Team:
        result = await self.db.execute(
            select(Team)
            .options(
                selectinload(Team.members).selectinload(TeamMember.user),
                selectinload(Team.members).selectinload(TeamMember.team),
            )
            .where(Team.id == self.team_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def read_team(self) -> TeamRead:
        team = await self.get_team()
        members = [
            MemberRead(
                id=m.id,
                user_id=m.user_id,
                name=m.user.name,
                email=m.user.email,
                role=m.role,
                created_at=m.created_at,
            )
            for m in sorted(team.members, key=lambda m: m.created_at)
        ]
        return TeamRead(
            id=team.id,
            name=team.name,
            slug=team.slug,
            owner_id=team.owner_id,
            brand_color=team.brand_color,
            logo_url=team.logo_url,
            created_at=team.created_at,
            role=self.membership.role,
            members=members,
        )

    async def update_team(self, changes: dict) -> TeamRead:
        require_manager(self.membership)
        team = await self.get_team()
        for field, value in changes.items():
            if field == "name" and value is None:
                continue
            setattr(team, field, value)
        await self.db.commit()
        log_db(logger, f"Updated team {team.id}")
        return await self.read_team()

    async def add_member(self, email: str, role: TeamRole) -> TeamRead:
        require_manager(self.membership)
        user = await AccountService(self.db).get_user_by_email(email)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        team = await self.get_team()
        if any(m.user_id == user.id for m in team.members):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User is already a team member",
            )

        self.db.add(TeamMember(team_id=team.id, user_id=user.id, role=role.value))
        await self.db.commit()
        log_db(logger, f"Added {user.id} to team {team.id} as {role.value}")
        return await self.read_team()

    async def remove_member(self, member_id: str) -> TeamRead:
        require_manager(self.membership)
        team = await self.get_team()
        member = next((m for m in team.members if m.id == member_id), None)
        if not member:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
        if member.role == TeamRole.OWNER.value:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The team owner cannot be removed",
            )

        await self.db.delete(member)
        await self.db.commit()
        log_db(logger, f"Removed member {member_id} from team {team.id}")
        return await self.read_team()
