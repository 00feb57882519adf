"""DB 연결 관련 스키마"""
from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class DBConnectionCreate(BaseModel):
    project_id: int = Field(..., ge=1, description="프로젝트 ID")
    db_type: Literal["postgresql", "sqlite"] = Field(default="postgresql", description="DB 종류")
    host: str = Field(default="localhost", max_length=255)
    port: int = Field(default=5432, ge=1, le=65535)
    database: str = Field(..., min_length=1, max_length=255, description="데이터베이스명 (sqlite는 파일 경로)")
    username: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=255)


class DBConnectionListRequest(BaseModel):
    project_id: int = Field(..., ge=1)


class DBConnectionResponse(BaseModel):
    id: int
    project_id: int
    db_type: str
    host: str
    port: int
    database: str
    username: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DBConnectionListResponse(BaseModel):
    connections: List[DBConnectionResponse]


class DBConnectionTestResponse(BaseModel):
    status: Literal["connected", "disconnected"]
    detail: str


class DBSchemaResponse(BaseModel):
    connection_id: int
    schema_description: str
