import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from client_reporter.core.db import get_session
from client_reporter.core.logging import log_auth, log_start
from client_reporter.core.security import end_session, session_payload, start_session
from client_reporter.models import User
from client_reporter.routers.deps import get_current_user
from client_reporter.schemas.auth import LoginRequest, RegisterRequest, RegisterResponse, SessionRead
from client_reporter.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_session)):
    log_start(logger, f"Registering {payload.email}")
    user = await AccountService(db).register(payload.name, payload.email, payload.password)
    return RegisterResponse(message="User created successfully", user_id=user.id)


@router.post("/login", response_model=SessionRead)
async def login(request: Request, payload: LoginRequest, db: AsyncSession = Depends(get_session)):
    user = await AccountService(db).authenticate(payload.email.strip(), payload.password)
    start_session(request, user)
    return {"user": session_payload(user)}


@router.post("/logout")
async def logout(request: Request):
    end_session(request)
    log_auth(logger, "Session cleared")
    return {"status": "ok"}


@router.get("/session", response_model=SessionRead)
async def read_session(user: User = Depends(get_current_user)):
    return {"user": session_payload(user)}
