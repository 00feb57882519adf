"""자연어 쿼리 요청 스키마"""
from pydantic import BaseModel, Field


class QueryInput(BaseModel):
    project_id: int = Field(..., ge=1, description="프로젝트 ID")
    query: str = Field(..., min_length=1, max_length=5000, description="자연어 질문")
    visualization: str = Field(default="raw", max_length=50, description="결과 형태 (raw, table, markdown)")

    class Config:
        json_schema_extra = {
            "example": {
                "project_id": 1,
                "query": "list all users",
                "visualization": "raw",
            }
        }
