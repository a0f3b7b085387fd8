import logging

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from client_reporter.core.logging import log_auth, log_db, log_success, log_warning
from client_reporter.core.security import hash_password, verify_password
from client_reporter.models import Team, TeamMember, TeamRole, User

logger = logging.getLogger(__name__)


def default_team_name(name: str | None) -> str:
    return f"{name or 'My'}'s Team"


def default_team_slug(user_id: str) -> str:
    return f"team-{user_id[:8]}"


class AccountService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def register(self, name: str, email: str, password: str) -> User:
        """
        Create a credentials user together with a personal team owned by them.
        """
        if await self.get_user_by_email(email):
            log_warning(logger, f"Registration rejected, email already used: {email}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User with this email already exists",
            )

        user = User(name=name, email=email.lower(), password_hash=hash_password(password))
        self.db.add(user)
        await self.db.flush()

        self.create_default_team(user)
        await self.db.commit()
        await self.db.refresh(user)

        log_db(logger, f"Created user {user.id} with default team {default_team_slug(user.id)}")
        return user

    def create_default_team(self, user: User) -> Team:
        team = Team(
            name=default_team_name(user.name),
            slug=default_team_slug(user.id),
            owner_id=user.id,
        )
        team.members.append(TeamMember(user_id=user.id, role=TeamRole.OWNER.value))
        self.db.add(team)
        return team

    async def authenticate(self, email: str, password: str) -> User:
        if not email or not password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email and password are required",
            )

        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            log_auth(logger, f"Failed login for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
            )

        log_success(logger, f"User {user.id} logged in")
        return user

    async def get_membership(self, user_id: str) -> TeamMember | None:
        # A user may belong to several teams; the oldest membership is the active one
        result = await self.db.execute(
            select(TeamMember)
            .options(selectinload(TeamMember.team))
            .where(TeamMember.user_id == user_id)
            .order_by(TeamMember.created_at)
            .limit(1)
        )
        return result.scalars().first()

    async def update_profile(self, user: User, changes: dict) -> User:
        new_email = changes.get("email")
        if new_email and new_email != user.email:
            existing = await self.get_user_by_email(new_email)
            if existing and existing.id != user.id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="User with this email already exists",
                )

        for field, value in changes.items():
            if value is None and field in ("name", "email"):
                continue
            setattr(user, field, value)

        await self.db.commit()
        await self.db.refresh(user)
        log_db(logger, f"Updated profile for user {user.id}")
        return user
