"""
DB 연결 CRUD
- 비밀번호는 Fernet으로 암호화하여 저장
- 프로젝트당 연결 수 제한 (쓰기 시점에 검사)
"""
import logging
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.core.encryption import encrypt_value
from hoprun.core.exceptions import ConnectionLimitError, NotFoundError
from hoprun.crud.project import get_project
from hoprun.models.db_connection import DbConnection
from hoprun.models.project import Project
from hoprun.schemas.db_connection import DBConnectionCreate

logger = logging.getLogger(__name__)


async def count_connections(db: AsyncSession, project_id: int) -> int:
    """프로젝트에 등록된 연결 수를 반환합니다."""
    stmt = select(func.count(DbConnection.id)).where(DbConnection.project_id == project_id)
    result = await db.execute(stmt)
    return result.scalar_one()


async def create_connection(db: AsyncSession, user_id: int, data: DBConnectionCreate,
                            max_connections: int = 1) -> DbConnection:
    """
    프로젝트에 DB 연결을 추가합니다.

    Raises:
        NotFoundError: 사용자의 프로젝트가 아닌 경우
        ConnectionLimitError: 연결 수 제한에 도달한 경우 (저장 상태 변경 없음)
    """
    # 프로젝트 행 잠금으로 같은 프로젝트의 동시 등록을 직렬화
    project = await get_project(db, user_id, data.project_id, for_update=True)
    if not project:
        raise NotFoundError("프로젝트를 찾을 수 없습니다.")

    if await count_connections(db, project.id) >= max_connections:
        raise ConnectionLimitError()

    conn = DbConnection(
        project_id=project.id,
        db_type=data.db_type,
        host=data.host,
        port=data.port,
        database=data.database,
        username=data.username,
        encrypted_password=encrypt_value(data.password) if data.password else None,
    )
    db.add(conn)
    await db.flush()

    # 행 잠금이 없는 드라이버(SQLite)에서는 삽입 후 다시 세어 확인
    if await count_connections(db, project.id) > max_connections:
        await db.rollback()
        logger.warning(f"[CONN] concurrent create over limit: project={project.id}")
        raise ConnectionLimitError()

    await db.commit()
    await db.refresh(conn)
    return conn


async def list_connections(db: AsyncSession, user_id: int, project_id: int) -> List[DbConnection]:
    """프로젝트의 연결 목록을 반환합니다."""
    stmt = (
        select(DbConnection)
        .join(Project, Project.id == DbConnection.project_id)
        .where(Project.user_id == user_id, DbConnection.project_id == project_id)
        .order_by(DbConnection.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_connection(db: AsyncSession, user_id: int, conn_id: int) -> Optional[DbConnection]:
    """연결 ID로 조회합니다 (소유자 확인 포함)."""
    stmt = (
        select(DbConnection)
        .join(Project, Project.id == DbConnection.project_id)
        .where(Project.user_id == user_id, DbConnection.id == conn_id)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_connection_for_project(db: AsyncSession, user_id: int, project_id: int) -> Optional[DbConnection]:
    """프로젝트의 (첫 번째) 연결을 반환합니다."""
    stmt = (
        select(DbConnection)
        .join(Project, Project.id == DbConnection.project_id)
        .where(Project.user_id == user_id, DbConnection.project_id == project_id)
        .order_by(DbConnection.id)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def delete_connection(db: AsyncSession, user_id: int, conn_id: int) -> bool:
    """연결을 삭제합니다."""
    conn = await get_connection(db, user_id, conn_id)
    if not conn:
        return False
    await db.delete(conn)
    await db.commit()
    return True
