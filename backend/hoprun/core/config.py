"""
Hoprun 설정
.env / 환경변수에서 읽어오며, 모듈 import 시 한 번 생성됩니다.
"""
import logging
from typing import List, Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

_PLACEHOLDER_SECRET = "CHANGE_THIS_TO_A_SUPER_SECRET_KEY"


class Settings(BaseSettings):
    """Hoprun 서버 설정"""

    # ============================================================
    # 서버
    # ============================================================
    PROJECT_NAME: str = "Hoprun API"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = Field(default="development", description="development | staging | production")
    CORS_ORIGINS: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="허용 Origin (쉼표 구분)",
    )

    # ============================================================
    # 인증 / 암호화
    # ============================================================
    SECRET_KEY: str = Field(..., min_length=32, description="JWT 서명 키")
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30, ge=1, le=1440)

    # 연결 비밀번호용 Fernet 키. 없으면 SECRET_KEY에서 파생
    ENCRYPTION_KEY: Optional[str] = None

    RATE_LIMIT_AUTH_REQUESTS: int = Field(default=10, ge=1, description="윈도우당 register/login 요청 수")
    RATE_LIMIT_WINDOW_SECONDS: int = Field(default=60, ge=1)

    # ============================================================
    # 메타 DB / Redis
    # ============================================================
    DATABASE_URL: str = Field(..., description="사용자/프로젝트/연결 정보 저장소 (postgresql+asyncpg://...)")
    REDIS_URL: str = "redis://localhost:6379"
    REDIS_PASSWORD: Optional[str] = None

    # ============================================================
    # SQL 생성 모델
    # ============================================================
    LLM_PROVIDER: Literal["openai", "ollama"] = "openai"
    LLM_MODEL: str = "gpt-3.5-turbo"
    OPENAI_API_KEY: Optional[str] = None
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    LLM_TEMPERATURE: float = Field(default=0.0, ge=0.0, le=2.0)
    LLM_TIMEOUT_SECONDS: float = Field(default=90, gt=0)

    # ============================================================
    # 대상 DB 질의
    # ============================================================
    TARGET_CONNECT_TIMEOUT_SECONDS: float = Field(default=15, gt=0)
    QUERY_TIMEOUT_SECONDS: float = Field(default=30, gt=0)
    QUERY_MAX_ROWS: Optional[int] = Field(default=None, ge=1, description="None이면 전체 행 반환")
    SQL_READ_ONLY: bool = Field(default=False, description="True면 SELECT 계열만 실행")
    MAX_CONNECTIONS_PER_PROJECT: int = Field(default=1, ge=1)

    # ============================================================
    # 로깅
    # ============================================================
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("SECRET_KEY")
    @classmethod
    def reject_placeholder_secret(cls, v: str) -> str:
        if v == _PLACEHOLDER_SECRET:
            raise ValueError("SECRET_KEY가 예시 값 그대로입니다. 새 키를 생성해 설정하세요.")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def validate_production_settings(self) -> List[str]:
        """production 환경에서 위험한 설정 조합에 대한 경고 목록"""
        if self.ENVIRONMENT != "production":
            return []

        checks = [
            (self.DEBUG, "DEBUG=True 상태로 운영 중입니다."),
            ("localhost" in self.CORS_ORIGINS, "CORS_ORIGINS에 localhost가 포함되어 있습니다."),
            ("localhost" in self.DATABASE_URL, "DATABASE_URL이 localhost를 가리킵니다."),
            (
                self.LLM_PROVIDER == "openai" and not self.OPENAI_API_KEY,
                "LLM_PROVIDER=openai 이지만 OpenAI API 키가 없습니다.",
            ),
            (not self.SQL_READ_ONLY, "SQL_READ_ONLY=False: 생성된 SQL이 검증 없이 그대로 실행됩니다."),
        ]
        return [message for failed, message in checks if failed]


settings = Settings()

for _warning in settings.validate_production_settings():
    logger.warning(f"[CONFIG] {_warning}")
