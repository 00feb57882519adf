"""
Text-to-SQL 결과 타입
- CellValue: 결과 셀 값의 허용 도메인 (null/int/float/text/bool/timestamp)
- ResultRow: (컬럼명, 값) 쌍의 순서 있는 시퀀스
"""
import json
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Tuple, Union
from uuid import UUID

CellValue = Union[None, bool, int, float, str, datetime]


def to_cell_value(value: Any) -> CellValue:
    """드라이버가 반환한 값을 CellValue 도메인으로 명시적으로 변환합니다."""
    # bool은 int의 하위 타입이므로 먼저 검사
    if value is None or isinstance(value, (bool, int, float, str, datetime)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


@dataclass(frozen=True)
class ResultRow:
    """조회 결과 한 행. 컬럼 순서와 중복 컬럼명을 보존합니다."""

    cells: Tuple[Tuple[str, CellValue], ...]

    @classmethod
    def from_driver(cls, columns: List[str], values: Any) -> "ResultRow":
        return cls(tuple((col, to_cell_value(v)) for col, v in zip(columns, values)))

    def keys(self) -> List[str]:
        return [col for col, _ in self.cells]

    def values(self) -> List[CellValue]:
        return [v for _, v in self.cells]

    def as_dict(self) -> Dict[str, CellValue]:
        """
        컬럼명 → 값 매핑.
        컬럼명이 중복되면 마지막 값만 남습니다. 모든 값이 필요하면 cells / values()를 사용하세요.
        """
        return dict(self.cells)

    def has_duplicate_keys(self) -> bool:
        keys = self.keys()
        return len(set(keys)) < len(keys)


@dataclass
class QueryResult:
    """파이프라인 최종 결과"""

    sql: str
    rows: List[ResultRow] = field(default_factory=list)
    visualization: str = "raw"
    payload: Any = None
