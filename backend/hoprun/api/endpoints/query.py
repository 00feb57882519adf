"""
자연어 쿼리 API 엔드포인트
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.api.deps import get_current_user, get_orchestrator
from hoprun.core.exceptions import HoprunError
from hoprun.db.session import get_db
from hoprun.models.user import User
from hoprun.schemas.query import QueryInput
from hoprun.services.t2sql.orchestrator import QueryOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/query")
async def query_endpoint(
    query_input: QueryInput,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    orchestrator: QueryOrchestrator = Depends(get_orchestrator),
):
    """
    자연어 질문 → SQL 생성 → 실행 → 포맷팅된 결과 반환
    """
    try:
        result = await orchestrator.run(db, current_user.id, query_input)
    except HoprunError as e:
        # 내부 에러 메시지는 로그로만 남김
        logger.warning(
            f"[T2SQL] failed: project={query_input.project_id}, "
            f"{type(e).__name__}: {e.__cause__ or e}"
        )
        raise HTTPException(status_code=e.status_code, detail=e.public_message)

    return result.payload
