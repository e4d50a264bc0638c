from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Annotated, Literal, Optional


class UserInfo(BaseModel):
    """Identity fields expanded into issue listings."""
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True

class UserDetail(UserInfo):
    department: Optional[str] = None

class CommentAuthor(UserInfo):
    role: Literal['student', 'admin']

class ChangedBy(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class UserBase(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=100)]
    email: Annotated[str, Field(min_length=3, max_length=255)]
    department: Optional[Annotated[str, Field(max_length=100)]] = None

    @field_validator('name')
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('Name is required')
        return value

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if '@' not in value:
            raise ValueError('Please provide a valid email')
        return value

class UserCreate(UserBase):
    password: Annotated[str, Field(min_length=6)]

class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class UserUpdate(BaseModel):
    name: Optional[Annotated[str, Field(min_length=1, max_length=100)]] = None
    department: Optional[Annotated[str, Field(max_length=100)]] = None
    password: Optional[Annotated[str, Field(min_length=6)]] = None

class UserOut(UserDetail):
    role: Literal['student', 'admin']
    created_at: datetime

class AuthenticatedUser(UserOut):
    token: str
