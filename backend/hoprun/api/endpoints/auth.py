"""
회원가입 / 로그인
두 엔드포인트 모두 클라이언트 IP 단위로 요청 수를 제한합니다.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.core.config import settings
from hoprun.core.exceptions import ConflictError
from hoprun.core.security import create_access_token, get_dummy_hash, verify_password
from hoprun.crud.user import create_user, get_user_by_email
from hoprun.db.session import get_db
from hoprun.schemas.user import Token, UserCreate, UserResponse
from hoprun.services.rate_limiter import get_rate_limiter

logger = logging.getLogger(__name__)
router = APIRouter()


async def limit_auth_requests(request: Request) -> None:
    client_ip = request.client.host if request.client else "unknown"
    decision = await get_rate_limiter().hit(
        f"auth:{client_ip}",
        limit=settings.RATE_LIMIT_AUTH_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    if not decision.allowed:
        logger.warning(f"[AUTH] rate limited: {client_ip} ({decision.count} requests)")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"요청이 너무 많습니다. {decision.retry_after}초 후에 다시 시도해주세요.",
            headers={"Retry-After": str(decision.retry_after)},
        )


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_auth_requests)],
)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    if await get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="이미 등록된 이메일입니다.")

    try:
        user = await create_user(db, user_in)
    except ConflictError as e:
        raise HTTPException(status_code=e.status_code, detail=e.public_message)
    except SQLAlchemyError as e:
        logger.error(f"[AUTH] register failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="사용자 생성 중 오류가 발생했습니다.",
        )

    logger.info(f"[AUTH] registered: {user.email}")
    return user


@router.post("/login", response_model=Token, dependencies=[Depends(limit_auth_requests)])
async def login(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    """OAuth2 password flow. username 필드에 이메일을 넣습니다."""
    user = await get_user_by_email(db, form_data.username)

    # 사용자가 없어도 해시 검증 1회 수행
    hashed = user.hashed_password if user else get_dummy_hash()
    password_ok = verify_password(form_data.password, hashed) and user is not None

    if not password_ok:
        logger.warning(f"[AUTH] login failed: {form_data.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="이메일 또는 비밀번호가 올바르지 않습니다.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="비활성화된 계정입니다.")

    logger.info(f"[AUTH] login: {user.email}")
    return Token(access_token=create_access_token({"sub": user.email}), token_type="bearer")
