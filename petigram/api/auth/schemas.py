#petigram/api/auth/schemas.py
from marshmallow import Schema, fields, validate

class SignUpSchema(Schema):
    """회원가입 요청의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True)
    # Firebase Authentication 은 6자 미만 비밀번호를 거부합니다.
    password = fields.Str(required=True, validate=validate.Length(min=6), load_only=True)
    username = fields.Str(required=True, validate=validate.Length(min=1, max=30))

class LogInSchema(Schema):
    """로그인 요청의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

class UserResponseSchema(Schema):
    """로그인 사용자 정보 응답 스키마"""
    id = fields.Str(dump_only=True)
    email = fields.Str(dump_only=True)
    username = fields.Str(dump_only=True)
    avatar = fields.Str(dump_only=True)
