from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from client_reporter.schemas.validators import check_email, check_name, check_password


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return check_name(v)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return check_password(v)


class RegisterResponse(BaseModel):
    message: str
    user_id: str = Field(serialization_alias="userId")


class LoginRequest(BaseModel):
    # Presence is checked by the handler so both fields share one message
    email: str = ""
    password: str = ""


class SessionUser(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    role: str
    model_config = ConfigDict(from_attributes=True)


class SessionRead(BaseModel):
    user: SessionUser
