from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.models import TeamMember, User
from client_reporter.routers.deps import get_current_membership, get_current_user
from client_reporter.schemas.auth import SessionUser
from client_reporter.schemas.teams import MemberAdd, ProfileUpdate, TeamRead, TeamUpdate
from client_reporter.services.accounts import AccountService
from client_reporter.services.teams import TeamService

router = APIRouter(tags=["team"])


@router.get("/team", response_model=TeamRead)
async def read_team(
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await TeamService(db, membership).read_team()


@router.patch("/team", response_model=TeamRead)
async def update_team(
    payload: TeamUpdate,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await TeamService(db, membership).update_team(payload.model_dump(exclude_unset=True))


@router.post("/team/members", response_model=TeamRead)
async def add_member(
    payload: MemberAdd,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await TeamService(db, membership).add_member(payload.email, payload.role)


@router.delete("/team/members/{member_id}", response_model=TeamRead)
async def remove_member(
    member_id: str,
    membership: TeamMember = Depends(get_current_membership),
    db: AsyncSession = Depends(get_session),
):
    return await TeamService(db, membership).remove_member(member_id)


@router.patch("/profile", response_model=SessionUser)
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await AccountService(db).update_profile(user, payload.model_dump(exclude_unset=True))
