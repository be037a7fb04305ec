# petigram/utils/test_datetime_utils.py
"""
타임스탬프 유틸리티 테스트

사용법: python -m pytest petigram/utils/test_datetime_utils.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from petigram.utils.datetime_utils import DateTimeUtils

KST = timezone(timedelta(hours=9))


@pytest.mark.parametrize('raw', [
    "2024-01-15T10:30:00Z",
    "2024-01-15T10:30:00.123Z",
    "2024-01-15T19:30:00+09:00",
    "2024-01-15T10:30:00",
])
def test_parse_iso_datetime_normalizes_to_utc(raw):
    dt = DateTimeUtils.parse_iso_datetime(raw)
    assert dt.tzinfo == timezone.utc
    assert (dt.hour, dt.minute) == (10, 30)

def test_to_iso_string_matches_web_client_format():
    """웹 클라이언트 toISOString() 과 같은 모양"""
    dt = datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00.123Z"
    assert DateTimeUtils.to_iso_string(datetime(2024, 1, 15, 19, 30, tzinfo=KST)) == "2024-01-15T10:30:00.000Z"

def test_validate_datetime_field_accepts_strings_and_datetimes():
    naive = DateTimeUtils.validate_datetime_field(datetime(2024, 1, 15, 10, 30))
    assert naive.tzinfo == timezone.utc
    assert DateTimeUtils.validate_datetime_field("2024-01-15T10:30:00.000Z") == naive

@pytest.mark.parametrize('bad', [None, 12345, "", "invalid-date"])
def test_validate_datetime_field_rejects(bad):
    with pytest.raises(ValueError):
        DateTimeUtils.validate_datetime_field(bad)

def test_to_timestamp_ms():
    assert DateTimeUtils.to_timestamp_ms(datetime(2024, 1, 1, tzinfo=timezone.utc)) == 1704067200000
    with pytest.raises(ValueError):
        DateTimeUtils.to_timestamp_ms("2024-01-01")
