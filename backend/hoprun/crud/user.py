"""
사용자 CRUD
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hoprun.core.exceptions import ConflictError
from hoprun.core.security import get_password_hash
from hoprun.models.user import User
from hoprun.schemas.user import UserCreate


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """이메일로 사용자를 조회합니다."""
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, user_in: UserCreate) -> User:
    """사용자를 생성합니다. 이메일이 중복되면 ConflictError."""
    user = User(
        email=user_in.email,
        name=user_in.name,
        hashed_password=get_password_hash(user_in.password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        # 동시 가입 요청으로 unique 인덱스에 걸린 경우
        await db.rollback()
        raise ConflictError("이미 등록된 이메일입니다.") from e
    await db.refresh(user)
    return user
