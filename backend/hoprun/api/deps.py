"""
공통 API 의존성
"""
import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.core.config import settings
from hoprun.core.security import decode_access_token
from hoprun.crud.user import get_user_by_email
from hoprun.db.session import get_db
from hoprun.models.user import User
from hoprun.services.t2sql.orchestrator import QueryOrchestrator, get_query_orchestrator

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Bearer 토큰으로 현재 사용자를 조회합니다."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="인증 정보를 확인할 수 없습니다.",
        headers={"WWW-Authenticate": "Bearer"},
    )

    email = decode_access_token(token)
    if email is None:
        raise credentials_exception

    user = await get_user_by_email(db, email)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def get_orchestrator() -> QueryOrchestrator:
    """요청 핸들러에 주입할 QueryOrchestrator (테스트에서 override)"""
    return get_query_orchestrator()
