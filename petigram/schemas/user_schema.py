# petigram/schemas/user_schema.py
from marshmallow import Schema, fields, EXCLUDE

class UserProfileSchema(Schema):
    """'users/<uid>' 프로필 레코드 스키마. 값이 비어 있으면 None 으로 읽습니다."""
    class Meta:
        unknown = EXCLUDE

    username = fields.Str(load_default=None, allow_none=True)
    avatar = fields.Str(load_default=None, allow_none=True)

user_profile_schema = UserProfileSchema()
