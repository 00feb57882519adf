"""
DB 연결 API 엔드포인트
- 프로젝트별 DB 연결 등록 (비밀번호 암호화 저장, 연결 수 제한)
- 목록/삭제
- 연결 테스트, 스키마 조회
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.api.deps import get_current_user
from hoprun.core.config import settings
from hoprun.core.exceptions import HoprunError
from hoprun.crud.db_connection import (
    create_connection,
    delete_connection,
    get_connection,
    list_connections,
)
from hoprun.crud.project import get_project
from hoprun.db.session import get_db
from hoprun.models.user import User
from hoprun.schemas.db_connection import (
    DBConnectionCreate,
    DBConnectionListRequest,
    DBConnectionListResponse,
    DBConnectionResponse,
    DBConnectionTestResponse,
    DBSchemaResponse,
)
from hoprun.services.t2sql.executor import QueryExecutor
from hoprun.services.t2sql.introspector import SchemaIntrospector
from hoprun.services.t2sql.target import TargetDatabase, open_target_database

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_target(db: AsyncSession, user: User, conn_id: int) -> TargetDatabase:
    conn = await get_connection(db, user.id, conn_id)
    if not conn:
        raise HTTPException(status_code=404, detail="연결을 찾을 수 없습니다.")
    try:
        return TargetDatabase.from_connection(conn)
    except HoprunError as e:
        raise HTTPException(status_code=e.status_code, detail=e.public_message)


@router.post("/connection", response_model=DBConnectionResponse, status_code=status.HTTP_201_CREATED)
async def create_connection_endpoint(
    data: DBConnectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """프로젝트에 외부 DB 연결을 등록합니다."""
    try:
        conn = await create_connection(
            db, current_user.id, data, max_connections=settings.MAX_CONNECTIONS_PER_PROJECT
        )
    except HoprunError as e:
        logger.warning(f"[CONN] create rejected: project={data.project_id}: {type(e).__name__}")
        raise HTTPException(status_code=e.status_code, detail=e.public_message)

    logger.info(f"[CONN] created: id={conn.id}, project={conn.project_id} ({conn.db_type})")
    return conn


@router.post("/getconnections", response_model=DBConnectionListResponse)
async def list_connections_endpoint(
    data: DBConnectionListRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """프로젝트의 DB 연결 목록을 반환합니다 (비밀번호 제외)."""
    if not await get_project(db, current_user.id, data.project_id):
        raise HTTPException(status_code=404, detail="프로젝트를 찾을 수 없습니다.")
    connections = await list_connections(db, current_user.id, data.project_id)
    return DBConnectionListResponse(connections=connections)


@router.delete("/connection/{conn_id}")
async def delete_connection_endpoint(
    conn_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """DB 연결을 삭제합니다."""
    if not await delete_connection(db, current_user.id, conn_id):
        raise HTTPException(status_code=404, detail="연결을 찾을 수 없습니다.")
    logger.info(f"[CONN] deleted: id={conn_id}")
    return {"message": "연결이 삭제되었습니다."}


@router.post("/connection/{conn_id}/test", response_model=DBConnectionTestResponse)
async def test_connection_endpoint(
    conn_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """DB 연결을 테스트합니다."""
    target = await _get_target(db, current_user, conn_id)
    try:
        async with open_target_database(target, settings.TARGET_CONNECT_TIMEOUT_SECONDS) as conn:
            await QueryExecutor(timeout=settings.QUERY_TIMEOUT_SECONDS).execute(conn, "SELECT 1")
    except HoprunError as e:
        return DBConnectionTestResponse(status="disconnected", detail=e.public_message)
    return DBConnectionTestResponse(status="connected", detail="연결 성공")


@router.get("/connection/{conn_id}/schema", response_model=DBSchemaResponse)
async def get_schema_endpoint(
    conn_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """대상 DB의 스키마 설명을 조회합니다."""
    target = await _get_target(db, current_user, conn_id)
    try:
        async with open_target_database(target, settings.TARGET_CONNECT_TIMEOUT_SECONDS) as conn:
            description = await SchemaIntrospector().describe(conn, target.schema)
    except HoprunError as e:
        raise HTTPException(status_code=e.status_code, detail=e.public_message)
    return DBSchemaResponse(connection_id=conn_id, schema_description=description)
