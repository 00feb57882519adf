"""
Hoprun API 진입점
    uvicorn hoprun.main:app --reload   (backend/ 에서 실행)
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hoprun.api.api import api_router
from hoprun.core.config import settings
from hoprun.db.base import Base
from hoprun.db.session import engine
from hoprun.services.rate_limiter import get_rate_limiter

# create_all 대상 테이블 등록
import hoprun.models.user  # noqa: F401
import hoprun.models.project  # noqa: F401
import hoprun.models.db_connection  # noqa: F401

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL), format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.PROJECT_NAME} starting ({settings.ENVIRONMENT}, llm={settings.LLM_PROVIDER})")

    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("metadata tables ensured (development)")

    limiter = get_rate_limiter()
    await limiter.connect()

    yield

    await limiter.close()
    await engine.dispose()
    logger.info(f"{settings.PROJECT_NAME} stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=APP_VERSION,
    description="Natural-language to SQL query API",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


async def _metadata_db_ok() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"[HEALTH] metadata db check failed: {e}")
        return False
    return True


@app.get("/health")
async def health_check():
    """메타 DB / Redis 상태. 대상 DB와 LLM 공급자는 검사하지 않습니다."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "services": {
            "database": await _metadata_db_ok(),
            "redis": await get_rate_limiter().ping(),
            "llm_provider": settings.LLM_PROVIDER,
        },
    }
