"""
자연어 → SQL 변환기
- 스키마 + 질문으로 프롬프트 1개 생성, LLM 1회 호출 (재시도/스트리밍 없음)
- 응답 앞뒤의 마크다운 코드 펜스 제거

생성된 SQL은 신뢰할 수 없는 입력입니다. 문법 검증, 구문 종류 제한, 파라미터화를
하지 않으며 QueryExecutor는 이 출력을 그대로 실행합니다.
"""
import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from hoprun.core.config import Settings
from hoprun.core.exceptions import UpstreamTimeoutError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

SQL_PROMPT = (
    "You are a SQL expert. Given the following database schema:\n\n"
    "{schema}\n\n"
    "Convert the following natural language query to SQL:\n"
    "{question}\n\n"
    "Return only the SQL query without any markdown formatting, explanations, or additional text."
)

# 언어 태그는 알려진 이름 + 공백일 때만 제거 (```SELECT ...``` 의 첫 키워드 보존)
_FENCE_LANGS = ("postgresql", "postgres", "pgsql", "psql", "sqlite", "mysql", "plsql", "tsql", "sql")
_LEADING_FENCE = re.compile(
    r"^```(?:(?:" + "|".join(_FENCE_LANGS) + r")(?=\s))?\s*",
    re.IGNORECASE,
)
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """응답 앞뒤의 ```sql ... ``` 펜스와 공백을 제거합니다."""
    sql = text.strip()
    sql = _LEADING_FENCE.sub("", sql, count=1)
    sql = _TRAILING_FENCE.sub("", sql, count=1)
    return sql.strip()


def build_chat_model(settings: Settings) -> Any:
    """설정에 따라 LangChain 채팅 모델을 생성합니다."""
    if settings.LLM_PROVIDER == "ollama":
        from langchain_ollama import ChatOllama
        return ChatOllama(
            model=settings.LLM_MODEL,
            base_url=settings.OLLAMA_BASE_URL,
            temperature=settings.LLM_TEMPERATURE,
        )

    from langchain_openai import ChatOpenAI
    return ChatOpenAI(
        model=settings.LLM_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        api_key=settings.OPENAI_API_KEY,
        max_retries=0,
    )


class BaseTranslator(ABC):
    """자연어 → SQL 변환기 인터페이스"""

    @abstractmethod
    async def translate(self, question: str, schema: str) -> str:
        ...


class SqlTranslator(BaseTranslator):
    """LangChain 체인 (prompt | llm | parser) 기반 변환기"""

    def __init__(self, llm: Any, timeout: Optional[float] = None):
        self.llm = llm
        self.timeout = timeout
        self.prompt = ChatPromptTemplate.from_template(SQL_PROMPT)
        self.chain = self.prompt | llm | StrOutputParser()

    async def translate(self, question: str, schema: str) -> str:
        try:
            raw_sql = await asyncio.wait_for(
                self.chain.ainvoke({"schema": schema, "question": question}),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"[T2SQL] LLM timeout ({self.timeout}s)")
            raise UpstreamTimeoutError("SQL 생성 시간이 초과되었습니다.") from e
        except Exception as e:
            # 공급자 예외는 모두 업스트림 실패
            logger.error(f"[T2SQL] SQL generation failed: {type(e).__name__}: {e}")
            raise UpstreamUnavailableError("SQL 생성 서비스에 연결할 수 없습니다.") from e

        sql = strip_code_fences(raw_sql)
        logger.info(f"[T2SQL] SQL generated: {sql[:200]}")
        return sql
