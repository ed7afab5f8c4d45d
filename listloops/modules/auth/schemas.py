from pydantic import BaseModel, EmailStr, field_validator, model_validator
from typing import Literal, Optional

from listloops.modules.users.schemas import ViewUser


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    first_name: str
    last_name: str
    phone: str
    role: Literal["individual", "team_member"] = "individual"

    @field_validator("first_name", "last_name", "phone")
    @classmethod
    def not_blank(cls, value: str, info) -> str:
        if not value.strip():
            label = info.field_name.replace("_", " ").capitalize()
            raise ValueError(f"{label} is required")
        return value.strip()

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        if len(value) < 6:
            raise ValueError("Password must be at least 6 characters")
        return value

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class Identity(BaseModel):
    """The identity provider's own user, as opposed to the stored profile"""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class AuthResult(BaseModel):
    success: bool
    user: Optional[Identity] = None
    error: Optional[str] = None


class AuthViewState(BaseModel):
    user: Optional[ViewUser] = None
    is_authenticated: bool = False
    is_loading: bool = True
    error: Optional[str] = None
