from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from config.constants import MIN_PASSWORD_LENGTH
from utils.validators import normalize_email, normalize_phone


def clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Name is required")
    return v


class Identity(BaseModel):
    """Claims resolved from a verified bearer token."""
    id: str
    email: str


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    phone: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return clean_name(v)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, v):
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("phone")
    @classmethod
    def clean_phone(cls, v: str) -> str:
        return normalize_phone(v)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: str) -> str:
        return normalize_email(v)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    profile_picture: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return clean_name(v)

    @field_validator("phone")
    @classmethod
    def clean_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone(v) if v is not None else v
