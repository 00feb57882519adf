"""
프로젝트 API 엔드포인트
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.api.deps import get_current_user
from hoprun.crud.project import create_project, delete_project, get_project, list_projects
from hoprun.db.session import get_db
from hoprun.models.user import User
from hoprun.schemas.project import (
    ProjectCreate,
    ProjectListRequest,
    ProjectListResponse,
    ProjectResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/project", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project_endpoint(
    data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """프로젝트를 생성합니다."""
    project = await create_project(db, current_user.id, data.name)
    logger.info(f"[PROJECT] created: id={project.id}, user={current_user.id}")
    return project


@router.post("/getproject", response_model=ProjectListResponse)
async def list_projects_endpoint(
    data: Optional[ProjectListRequest] = None,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """현재 사용자의 프로젝트 목록을 반환합니다."""
    data = data or ProjectListRequest()
    projects = await list_projects(db, current_user.id, skip=data.skip, limit=data.limit)
    return ProjectListResponse(projects=projects)


@router.get("/project/{project_id}", response_model=ProjectResponse)
async def get_project_endpoint(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project = await get_project(db, current_user.id, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="프로젝트를 찾을 수 없습니다.")
    return project


@router.delete("/project/{project_id}")
async def delete_project_endpoint(
    project_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """프로젝트와 연결 정보를 삭제합니다."""
    deleted = await delete_project(db, current_user.id, project_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="프로젝트를 찾을 수 없습니다.")
    logger.info(f"[PROJECT] deleted: id={project_id}")
    return {"message": "프로젝트가 삭제되었습니다."}
