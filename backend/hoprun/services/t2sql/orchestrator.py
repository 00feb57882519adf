"""
Text-to-SQL 오케스트레이터
요청마다: 연결 조회 → 대상 DB 연결 → 스키마 분석 → SQL 생성 → 실행 → 포맷팅

- 단계 실패 시 즉시 중단 (부분 성공/보상 작업 없음)
- 대상 DB 연결은 요청 범위로 열고 모든 경로에서 해제
- 구성 요소는 생성자로 주입
"""
import logging
from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.core.config import Settings, settings
from hoprun.core.exceptions import NotFoundError
from hoprun.crud.db_connection import get_connection_for_project
from hoprun.schemas.query import QueryInput
from hoprun.services.t2sql.executor import BaseExecutor, QueryExecutor
from hoprun.services.t2sql.formatter import ResultFormatter
from hoprun.services.t2sql.guard import SqlGuard
from hoprun.services.t2sql.introspector import BaseIntrospector, SchemaIntrospector
from hoprun.services.t2sql.target import TargetDatabase, open_target_database
from hoprun.services.t2sql.translator import BaseTranslator, SqlTranslator, build_chat_model
from hoprun.services.t2sql.types import QueryResult

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    def __init__(
        self,
        introspector: BaseIntrospector,
        translator: BaseTranslator,
        executor: BaseExecutor,
        formatter: ResultFormatter,
        guard: Optional[SqlGuard] = None,
        connect_timeout: float = 15,
    ):
        self.introspector = introspector
        self.translator = translator
        self.executor = executor
        self.formatter = formatter
        self.guard = guard
        self.connect_timeout = connect_timeout

    async def resolve_target(self, db: AsyncSession, user_id: int, project_id: int) -> TargetDatabase:
        """프로젝트의 대상 DB를 조회합니다. 없으면 NotFoundError."""
        conn = await get_connection_for_project(db, user_id, project_id)
        if conn is None:
            raise NotFoundError("프로젝트에 등록된 DB 연결이 없습니다.")
        return TargetDatabase.from_connection(conn)

    async def run(self, db: AsyncSession, user_id: int, query_input: QueryInput) -> QueryResult:
        logger.info(f"[T2SQL] start: project={query_input.project_id}, user={user_id}")

        # Step 1: 연결 정보 조회
        target = await self.resolve_target(db, user_id, query_input.project_id)
        return await self.run_on_target(target, query_input.query, query_input.visualization)

    async def run_on_target(self, target: TargetDatabase, question: str, visualization: str) -> QueryResult:
        # Step 2: 요청 범위 대상 DB 연결
        async with open_target_database(target, self.connect_timeout) as conn:
            # Step 3: 스키마 분석
            schema = await self.introspector.describe(conn, target.schema)

            # Step 4: NL → SQL
            sql = await self.translator.translate(question, schema)

            if self.guard is not None:
                self.guard.check(sql)

            # Step 5: 실행
            rows = await self.executor.execute(conn, sql)

        # Step 6: 포맷팅
        payload = self.formatter.format(rows, visualization)
        return QueryResult(sql=sql, rows=rows, visualization=visualization, payload=payload)


def build_query_orchestrator(config: Settings) -> QueryOrchestrator:
    """설정으로 오케스트레이터를 구성합니다."""
    return QueryOrchestrator(
        introspector=SchemaIntrospector(),
        translator=SqlTranslator(build_chat_model(config), timeout=config.LLM_TIMEOUT_SECONDS),
        executor=QueryExecutor(timeout=config.QUERY_TIMEOUT_SECONDS, max_rows=config.QUERY_MAX_ROWS),
        formatter=ResultFormatter(),
        guard=SqlGuard() if config.SQL_READ_ONLY else None,
        connect_timeout=config.TARGET_CONNECT_TIMEOUT_SECONDS,
    )


@lru_cache()
def get_query_orchestrator() -> QueryOrchestrator:
    """애플리케이션 설정 기반 QueryOrchestrator 인스턴스 반환"""
    return build_query_orchestrator(settings)
