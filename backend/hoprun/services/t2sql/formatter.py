"""
결과 포맷터
(rows, visualization) → 응답 payload 순수 함수.
새로운 시각화 형태는 register()로 추가하며 실행기는 수정하지 않습니다.
"""
import logging
from typing import Any, Callable, Dict, List

from tabulate import tabulate

from hoprun.services.t2sql.types import ResultRow

logger = logging.getLogger(__name__)

FormatFn = Callable[[List[ResultRow]], Any]

DEFAULT_VISUALIZATION = "raw"


def format_raw(rows: List[ResultRow]) -> List[Dict[str, Any]]:
    """행 매핑 리스트 (기본). 중복 컬럼명은 마지막 값만 남습니다."""
    if rows and rows[0].has_duplicate_keys():
        logger.warning(f"[T2SQL] duplicate column names in raw result, last value kept: {rows[0].keys()}")
    return [row.as_dict() for row in rows]


def format_table(rows: List[ResultRow]) -> Dict[str, Any]:
    """컬럼 목록 + 값 배열"""
    columns = rows[0].keys() if rows else []
    return {"columns": columns, "rows": [row.values() for row in rows]}


def format_markdown(rows: List[ResultRow]) -> Dict[str, str]:
    """마크다운 표"""
    if not rows:
        return {"markdown": "결과가 없습니다."}
    return {"markdown": tabulate([row.values() for row in rows], headers=rows[0].keys(), tablefmt="pipe")}


class ResultFormatter:
    def __init__(self):
        self._formatters: Dict[str, FormatFn] = {
            "raw": format_raw,
            "table": format_table,
            "markdown": format_markdown,
        }

    def register(self, visualization: str, fn: FormatFn) -> None:
        self._formatters[visualization.lower()] = fn

    @property
    def supported(self) -> List[str]:
        return sorted(self._formatters)

    def format(self, rows: List[ResultRow], visualization: str = DEFAULT_VISUALIZATION) -> Any:
        key = (visualization or DEFAULT_VISUALIZATION).strip().lower()
        fn = self._formatters.get(key)
        if fn is None:
            # 알 수 없는 형태는 기본 형태로
            logger.debug(f"[T2SQL] unknown visualization '{visualization}', using raw")
            fn = self._formatters[DEFAULT_VISUALIZATION]
        return fn(rows)
