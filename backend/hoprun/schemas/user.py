"""사용자 / 토큰 스키마"""
import re
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")


class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=100)

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        """영문자와 숫자를 각각 1개 이상 포함"""
        if not _HAS_LETTER.search(v):
            raise ValueError("비밀번호에 영문자가 1개 이상 필요합니다.")
        if not _HAS_DIGIT.search(v):
            raise ValueError("비밀번호에 숫자가 1개 이상 필요합니다.")
        return v


class UserResponse(UserBase):
    id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
