"""
테스트 공통 설정 및 Fixtures
"""
import os

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

# 환경변수 먼저 설정 (settings import 전)
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379")
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "development")

from hoprun.db.base import Base
from hoprun.models.user import User
from hoprun.models.project import Project
from hoprun.models.db_connection import DbConnection  # noqa: F401
from hoprun.core.security import get_password_hash
from hoprun.services.rate_limiter import get_rate_limiter
from hoprun.services.t2sql.target import TargetDatabase


# ============================================================
# 데이터베이스 Fixtures
# ============================================================

@pytest.fixture
async def test_engine(tmp_path):
    """테스트별 SQLite 비동기 엔진 (메타 DB)"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'meta.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    """각 테스트별 DB 세션"""
    async_session = sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest.fixture
async def test_user(db_session):
    user = User(
        email="test@example.com",
        name="테스트유저",
        hashed_password=get_password_hash("TestPass1"),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def other_user(db_session):
    user = User(
        email="other@example.com",
        name="다른유저",
        hashed_password=get_password_hash("OtherPass1"),
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_project(db_session, test_user):
    project = Project(name="analytics", user_id=test_user.id)
    db_session.add(project)
    await db_session.commit()
    await db_session.refresh(project)
    return project


# ============================================================
# 대상 DB (Text-to-SQL 질의 대상)
# ============================================================

@pytest.fixture
async def target_db_path(tmp_path):
    """users(id, email) 3행 + orders 테이블이 있는 SQLite 대상 DB"""
    path = tmp_path / "target.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
    async with engine.begin() as conn:
        await conn.exec_driver_sql(
            "CREATE TABLE users (id INTEGER PRIMARY KEY, email VARCHAR(255) NOT NULL)"
        )
        await conn.exec_driver_sql(
            "CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER, total NUMERIC(10, 2), created_at TIMESTAMP)"
        )
        await conn.exec_driver_sql(
            "INSERT INTO users (id, email) VALUES "
            "(1, 'a@example.com'), (2, 'b@example.com'), (3, 'c@example.com')"
        )
    await engine.dispose()
    return str(path)


@pytest.fixture
def target_db(target_db_path):
    return TargetDatabase.from_uri(f"sqlite+aiosqlite:///{target_db_path}")


# ============================================================
# FastAPI 테스트 클라이언트
# ============================================================

@pytest.fixture(autouse=True)
def reset_rate_limit():
    """인메모리 Rate Limit 기록 초기화"""
    get_rate_limiter().fallback.clear()
    yield
    get_rate_limiter().fallback.clear()


@pytest.fixture
async def async_client(db_session):
    """FastAPI 비동기 테스트 클라이언트"""
    from httpx import AsyncClient, ASGITransport
    from hoprun.main import app
    from hoprun.db.session import get_db

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(db_session, test_user):
    """인증된 테스트 클라이언트 (test_user)"""
    from httpx import AsyncClient, ASGITransport
    from hoprun.main import app
    from hoprun.db.session import get_db
    from hoprun.api.deps import get_current_user

    async def override_get_db():
        yield db_session

    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user_data():
    """테스트 유저 데이터"""
    return {
        "email": "new@example.com",
        "password": "TestPass123",
        "name": "새유저",
    }
