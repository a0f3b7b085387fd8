from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.core.security import end_session, session_user_id
from client_reporter.models import TeamMember, User
from client_reporter.services.accounts import AccountService


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_session),
) -> User | None:
    user_id = session_user_id(request)
    if not user_id:
        return None
    user = await db.get(User, user_id)
    if not user:
        # Cookie outlived the account
        end_session(request)
    return user


async def get_current_user(user: User | None = Depends(get_optional_user)) -> User:
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


async def get_current_membership(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> TeamMember:
    membership = await AccountService(db).get_membership(user.id)
    if not membership:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No team found")
    return membership
