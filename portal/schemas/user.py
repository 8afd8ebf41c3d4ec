"""Schemas for users, credentials and sessions"""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from portal.schemas.common import Role, Timestamp


class UserOut(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: Role
    avatar_initials: Optional[str] = None
    avatar_url: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    created_at: Timestamp

    class Config:
        from_attributes = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UserAccount(UserOut):
    """Stored user row; never returned over HTTP."""

    password_hash: str

    def public(self) -> UserOut:
        return UserOut.model_validate(self.model_dump(exclude={"password_hash"}))


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    company: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None


class UserCreate(RegisterRequest):
    role: Role = "client"
    avatar_initials: Optional[str] = Field(None, max_length=4)


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[Role] = None
    company: Optional[str] = None
    position: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class UserLogin(BaseModel):
    email: str
    password: str


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str


class PasswordSet(BaseModel):
    password: str


class PasswordResetRequest(BaseModel):
    email: str


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserOut


class ContactOut(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    avatar_initials: Optional[str]


class SessionOut(BaseModel):
    token: str
    user_id: int
    created_at: Timestamp
    expires_at: Timestamp

    class Config:
        from_attributes = True
