"""Password hashing and cookie-session helpers.

Sessions live in the Starlette ``SessionMiddleware`` signed cookie; only the
user id and platform role are stored there.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import bcrypt
from starlette.requests import Request

from client_reporter.core.config import settings

SESSION_USER_KEY = "user_id"
SESSION_ROLE_KEY = "role"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash stored for this user
        return False


def start_session(request: Request, user: Any) -> None:
    end_session(request)
    request.session.update({SESSION_USER_KEY: user.id, SESSION_ROLE_KEY: user.role})


def end_session(request: Request) -> None:
    # The admin back-office shares this cookie; only drop our own keys
    request.session.pop(SESSION_USER_KEY, None)
    request.session.pop(SESSION_ROLE_KEY, None)


def session_user_id(request: Request) -> Optional[str]:
    return request.session.get(SESSION_USER_KEY)


def session_payload(user: Any) -> Dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "image": user.image,
        "role": user.role,
    }
