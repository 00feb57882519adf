"""
SQL 실행기
전달받은 SQL을 그대로 실행하고 결과를 ResultRow 리스트로 반환합니다.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from hoprun.core.exceptions import ExecutionFailureError, QueryTimeoutError
from hoprun.services.t2sql.types import ResultRow

logger = logging.getLogger(__name__)


class BaseExecutor(ABC):
    """SQL 실행기 인터페이스"""

    @abstractmethod
    async def execute(self, conn: AsyncConnection, sql: str) -> List[ResultRow]:
        ...


class QueryExecutor(BaseExecutor):
    def __init__(self, timeout: Optional[float] = None, max_rows: Optional[int] = None):
        self.timeout = timeout
        self.max_rows = max_rows

    async def execute(self, conn: AsyncConnection, sql: str) -> List[ResultRow]:
        try:
            rows = await asyncio.wait_for(self._run(conn, sql), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"[T2SQL] SQL execution timeout ({self.timeout}s)")
            raise QueryTimeoutError(sql=sql) from e
        except SQLAlchemyError as e:
            logger.error(f"[T2SQL] SQL execution error: {e}")
            raise ExecutionFailureError(sql=sql) from e

        logger.info(f"[T2SQL] SQL executed: {len(rows)} rows")
        return rows

    async def _run(self, conn: AsyncConnection, sql: str) -> List[ResultRow]:
        # 바인드 파라미터 파싱 없이 드라이버에 그대로 전달
        result = await conn.exec_driver_sql(sql)

        # DDL/DML 등 결과 집합이 없는 구문
        if not result.returns_rows:
            await conn.commit()
            return []

        columns = list(result.keys())
        if self.max_rows is None:
            fetched = result.fetchall()
        else:
            fetched = result.fetchmany(self.max_rows)
        await conn.commit()
        return [ResultRow.from_driver(columns, row) for row in fetched]
