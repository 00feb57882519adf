"""
읽기 전용 SQL 검사 (SQL_READ_ONLY=True일 때만 사용)
"""
import re

from hoprun.core.exceptions import UnsafeQueryError

ALLOWED_FIRST_WORDS = ("SELECT", "WITH", "EXPLAIN", "SHOW", "DESCRIBE")
FORBIDDEN_KEYWORDS = (
    "DROP", "DELETE", "UPDATE", "INSERT", "ALTER",
    "TRUNCATE", "CREATE", "GRANT", "REVOKE", "EXEC",
)


class SqlGuard:
    def is_read_only(self, sql: str) -> bool:
        """SELECT 계열 쿼리만 허용. 데이터 변경 쿼리 차단."""
        normalized = sql.strip().upper()
        words = normalized.split()
        first_word = words[0] if words else ""
        if first_word not in ALLOWED_FIRST_WORDS:
            return False
        for kw in FORBIDDEN_KEYWORDS:
            if re.search(rf'\b{kw}\b', normalized):
                return False
        return True

    def check(self, sql: str) -> None:
        if not self.is_read_only(sql):
            raise UnsafeQueryError(sql=sql)
