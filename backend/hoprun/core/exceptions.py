"""
도메인 에러 정의
- 각 에러는 HTTP 상태 코드와 외부 노출용 메시지를 가집니다.
- 내부 에러 메시지(드라이버, 연결 문자열, LLM 응답 등)는 로그로만 남기고
  클라이언트에는 public_message만 전달합니다.
"""
from fastapi import status


class HoprunError(Exception):
    """서비스 공통 에러"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "요청을 처리하는 중 오류가 발생했습니다."

    def __init__(self, public_message: str | None = None):
        if public_message is not None:
            self.public_message = public_message
        super().__init__(self.public_message)


class NotFoundError(HoprunError):
    """프로젝트 또는 DB 연결 없음"""
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "요청한 리소스를 찾을 수 없습니다."


class ConflictError(HoprunError):
    """중복 리소스 (예: 이미 등록된 이메일)"""
    status_code = status.HTTP_409_CONFLICT
    public_message = "이미 존재하는 리소스입니다."


class ConnectionLimitError(ConflictError):
    """프로젝트당 DB 연결 수 초과"""
    public_message = "프로젝트의 DB 연결 수 제한에 도달했습니다."


class CredentialDecryptError(HoprunError):
    """저장된 DB 비밀번호 복호화 실패"""
    public_message = "저장된 연결 정보를 읽을 수 없습니다."


# ============================================================
# Text-to-SQL 파이프라인 에러
# ============================================================

class QueryPipelineError(HoprunError):
    """Text-to-SQL 파이프라인 에러"""
    pass


class UpstreamUnavailableError(QueryPipelineError):
    """대상 DB 연결/카탈로그 조회 실패, LLM 공급자 실패"""
    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = "외부 서비스에 연결할 수 없습니다."


class UpstreamTimeoutError(UpstreamUnavailableError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    public_message = "외부 서비스 응답 시간이 초과되었습니다."


class ExecutionFailureError(QueryPipelineError):
    """SQL 실행 실패 (모델이 생성한 잘못된 SQL 포함)"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    public_message = "생성된 SQL을 실행하지 못했습니다."

    def __init__(self, public_message: str | None = None, sql: str | None = None):
        super().__init__(public_message)
        self.sql = sql


class QueryTimeoutError(ExecutionFailureError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    public_message = "SQL 실행 시간이 초과되었습니다."


class UnsafeQueryError(ExecutionFailureError):
    """읽기 전용 모드에서 데이터 변경 쿼리 감지"""
    public_message = "안전하지 않은 쿼리가 감지되었습니다. SELECT 쿼리만 허용됩니다."
