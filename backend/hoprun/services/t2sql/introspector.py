"""
스키마 분석기
대상 DB의 테이블/컬럼을 LLM 프롬프트용 텍스트로 변환합니다.

    Table users:
      id (INTEGER)
      email (VARCHAR(255))

매 요청마다 새로 생성합니다 (캐시 없음).
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from sqlalchemy import inspect
from sqlalchemy.exc import CompileError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from hoprun.core.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

TableColumns = List[Tuple[str, List[Tuple[str, str]]]]


def _type_name(col_type, dialect) -> str:
    try:
        return col_type.compile(dialect=dialect)
    except CompileError:
        return type(col_type).__name__


class BaseIntrospector(ABC):
    """스키마 분석기 인터페이스"""

    @abstractmethod
    async def describe(self, conn: AsyncConnection, schema: Optional[str] = None) -> str:
        ...


class SchemaIntrospector(BaseIntrospector):
    """SQLAlchemy Inspector 기반 스키마 분석기"""

    async def describe(self, conn: AsyncConnection, schema: Optional[str] = None) -> str:
        try:
            tables = await conn.run_sync(self._collect, schema)
        except SQLAlchemyError as e:
            # 부분 결과는 반환하지 않음
            logger.error(f"[T2SQL] schema introspection failed: {e}")
            raise UpstreamUnavailableError("데이터베이스 스키마를 조회하지 못했습니다.") from e

        description = self.render(tables)
        logger.info(f"[T2SQL] schema loaded: {len(tables)} tables, {len(description)} chars")
        return description

    @staticmethod
    def _collect(sync_conn, schema: Optional[str]) -> TableColumns:
        inspector = inspect(sync_conn)
        # 뷰도 질의 대상이므로 테이블과 같은 형식으로 포함
        names = set(inspector.get_table_names(schema=schema))
        names.update(inspector.get_view_names(schema=schema))
        tables = []
        for table_name in sorted(names):
            columns = [
                (col["name"], _type_name(col["type"], sync_conn.dialect))
                for col in inspector.get_columns(table_name, schema=schema)
            ]
            tables.append((table_name, columns))
        return tables

    @staticmethod
    def render(tables: TableColumns) -> str:
        blocks = []
        for table_name, columns in tables:
            lines = [f"Table {table_name}:"]
            lines.extend(f"  {name} ({data_type})" for name, data_type in columns)
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)
