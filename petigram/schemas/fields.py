# petigram/schemas/fields.py
"""
Realtime Database 문서를 읽을 때 쓰는 커스텀 marshmallow 필드.

Realtime Database 는 빈 리스트를 저장하지 않고(경로 자체가 사라짐),
배열을 인덱스 키를 가진 객체로 돌려주기도 합니다. 이런 모양 차이는
모두 이 필드들에서 흡수하고, 서비스 코드는 항상 정상적인 리스트만 봅니다.
"""

from marshmallow import fields

from petigram.utils.datetime_utils import DateTimeUtils


def _index_key(key):
    try:
        return (0, int(key), "")
    except (TypeError, ValueError):
        return (1, 0, str(key))


class StoreList(fields.List):
    """값이 없거나 null 이면 빈 리스트로, 인덱스 키 객체면 인덱스 순서의 리스트로 읽습니다."""

    def __init__(self, cls_or_instance, **kwargs):
        kwargs.setdefault('load_default', list)
        super().__init__(cls_or_instance, **kwargs)

    def deserialize(self, value, attr=None, data=None, **kwargs):
        if value is None:
            return []
        return super().deserialize(value, attr, data, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, dict):
            value = [item for _, item in sorted(value.items(), key=lambda kv: _index_key(kv[0]))]
        if isinstance(value, list):
            # 중간 원소가 삭제된 배열은 null 구멍을 가질 수 있습니다.
            value = [item for item in value if item is not None]
        return super()._deserialize(value, attr, data, **kwargs)


class IsoTimestamp(fields.Field):
    """UTC datetime <-> 'YYYY-MM-DDTHH:MM:SS.sssZ' 문자열."""

    default_error_messages = {"invalid": "잘못된 ISO 날짜 형식입니다."}

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return DateTimeUtils.to_iso_string(value)

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return DateTimeUtils.validate_datetime_field(value, attr or "timestamp")
        except ValueError as e:
            raise self.make_error("invalid") from e
