"""
프로젝트 CRUD
모든 조회는 user_id로 범위를 제한합니다.
"""
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.models.project import Project


async def create_project(db: AsyncSession, user_id: int, name: str) -> Project:
    """프로젝트를 생성합니다."""
    project = Project(name=name, user_id=user_id)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def list_projects(db: AsyncSession, user_id: int, skip: int = 0, limit: int = 10) -> List[Project]:
    """사용자의 프로젝트 목록을 생성 순으로 반환합니다."""
    stmt = (
        select(Project)
        .where(Project.user_id == user_id)
        .order_by(Project.id)
        .offset(skip)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_project(db: AsyncSession, user_id: int, project_id: int,
                      for_update: bool = False) -> Optional[Project]:
    """project_id + user_id로 프로젝트를 조회합니다. for_update=True면 행을 잠급니다."""
    stmt = select(Project).where(Project.id == project_id, Project.user_id == user_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def delete_project(db: AsyncSession, user_id: int, project_id: int) -> bool:
    """프로젝트를 삭제합니다 (연결 포함)."""
    project = await get_project(db, user_id, project_id)
    if not project:
        return False
    await db.delete(project)
    await db.commit()
    return True
