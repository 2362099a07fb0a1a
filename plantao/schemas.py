from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from .shared.validators import validate_email


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str
    userType: Literal["doctor", "hospital"] = "doctor"

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class PasswordResetRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class UserResponse(BaseModel):
    id: int
    firebase_uid: str
    email: str
    full_name: Optional[str] = None
    user_type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    idToken: str
    refreshToken: str
    expiresIn: int
    uid: str


class AuthResponse(BaseModel):
    user: UserResponse
    session: Optional[SessionResponse] = None
