"""프로젝트 관련 스키마"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="프로젝트 이름")


class ProjectListRequest(BaseModel):
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=10, ge=1, le=100)


class ProjectResponse(BaseModel):
    id: int
    name: str
    user_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
