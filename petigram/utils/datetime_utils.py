# petigram/utils/datetime_utils.py
"""
게시물/댓글 타임스탬프 처리 유틸리티

메모리 안에서는 항상 UTC timezone-aware datetime 을 쓰고,
저장소에는 웹 클라이언트의 Date.toISOString() 과 같은
'YYYY-MM-DDTHH:MM:SS.sssZ' 문자열로 씁니다.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    # tzinfo 가 없는 값은 UTC 로 간주합니다.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class DateTimeUtils:
    """UTC 기준 시간 변환 모음"""

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 8601 문자열을 UTC datetime 으로 읽습니다.
        'Z' 접미사, 밀리초, 임의의 오프셋, 오프셋 없는 값 모두 허용합니다.
        """
        if not iso_string:
            raise ValueError("타임스탬프 문자열이 비어 있습니다")
        try:
            parsed = dateutil_parser.isoparse(iso_string)
        except (TypeError, ValueError) as e:
            logger.warning(f"타임스탬프 파싱 실패: {iso_string!r} ({e})")
            raise ValueError(f"ISO 8601 형식이 아닙니다: {iso_string}") from e
        return _as_utc(parsed)

    @staticmethod
    def to_iso_string(dt: datetime, timespec: str = 'milliseconds') -> str:
        """저장소 포맷 문자열. 예: 2024-01-15T10:30:00.000Z"""
        return _as_utc(dt).isoformat(timespec=timespec).replace('+00:00', 'Z')

    @staticmethod
    def validate_datetime_field(value: Any, field_name: str = "timestamp") -> datetime:
        """문자열 또는 datetime 값을 UTC datetime 으로 맞춥니다. 그 밖의 값은 ValueError."""
        if isinstance(value, datetime):
            return _as_utc(value)
        if isinstance(value, str):
            return DateTimeUtils.parse_iso_datetime(value)
        if value is None:
            raise ValueError(f"{field_name} 값이 없습니다")
        raise ValueError(f"{field_name} 은(는) ISO 문자열 또는 datetime 이어야 합니다: {type(value).__name__}")

    @staticmethod
    def to_timestamp_ms(dt: datetime) -> int:
        """Unix epoch 밀리초. 댓글 id('comment_<ms>')에 사용됩니다."""
        if not isinstance(dt, datetime):
            raise ValueError(f"datetime 이 필요합니다: {type(dt).__name__}")
        return int(_as_utc(dt).timestamp() * 1000)
