"""
대상 DB 핸들
- 저장된 연결 정보 → SQLAlchemy 비동기 URL
- 요청 단위로 연결을 열고, 모든 종료 경로에서 반드시 닫습니다 (풀 재사용 없음)
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.pool import NullPool

from hoprun.core.encryption import decrypt_value
from hoprun.core.exceptions import UpstreamTimeoutError, UpstreamUnavailableError
from hoprun.models.db_connection import DbConnection

logger = logging.getLogger(__name__)

_DRIVERS = {
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}

# 스키마 설명 대상 스키마 (sqlite는 기본 스키마)
_DEFAULT_SCHEMAS = {
    "postgresql": "public",
    "sqlite": None,
}


@dataclass(frozen=True)
class TargetDatabase:
    """질의 대상 DB"""

    url: URL
    schema: Optional[str] = None

    @property
    def backend(self) -> str:
        return self.url.get_backend_name()

    @property
    def safe_url(self) -> str:
        """로그용 URL (비밀번호 숨김)"""
        return self.url.render_as_string(hide_password=True)

    @classmethod
    def from_connection(cls, conn: DbConnection) -> "TargetDatabase":
        """저장된 DbConnection으로 TargetDatabase를 생성합니다 (비밀번호 복호화)."""
        if conn.db_type not in _DRIVERS:
            raise ValueError(f"Unsupported db_type: {conn.db_type}")

        if conn.db_type == "sqlite":
            url = URL.create(_DRIVERS["sqlite"], database=conn.database)
        else:
            password = decrypt_value(conn.encrypted_password) if conn.encrypted_password else None
            url = URL.create(
                _DRIVERS[conn.db_type],
                username=conn.username or None,
                password=password,
                host=conn.host or None,
                port=conn.port,
                database=conn.database,
            )
        return cls(url=url, schema=_DEFAULT_SCHEMAS[conn.db_type])

    @classmethod
    def from_uri(cls, uri: str, schema: Optional[str] = None) -> "TargetDatabase":
        return cls(url=make_url(uri), schema=schema)

    def connect_args(self, timeout: float) -> dict:
        if self.backend == "postgresql":
            return {"timeout": timeout}
        return {}


@asynccontextmanager
async def open_target_database(target: TargetDatabase, connect_timeout: float) -> AsyncIterator[AsyncConnection]:
    """
    대상 DB 연결을 열어 반환합니다.
    컨텍스트 종료 시 (예외 포함) 연결을 닫고 엔진을 폐기합니다.
    """
    engine = create_async_engine(
        target.url,
        poolclass=NullPool,
        connect_args=target.connect_args(connect_timeout),
    )
    try:
        try:
            conn = await asyncio.wait_for(engine.connect().start(), timeout=connect_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"[T2SQL] target connect timeout ({connect_timeout}s): {target.safe_url}")
            raise UpstreamTimeoutError("데이터베이스 연결 시간이 초과되었습니다.") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"[T2SQL] target connect failed: {target.safe_url}: {e}")
            raise UpstreamUnavailableError("데이터베이스에 연결할 수 없습니다.") from e

        try:
            yield conn
        finally:
            await conn.close()
    finally:
        await engine.dispose()
        logger.debug(f"[T2SQL] target released: {target.safe_url}")
