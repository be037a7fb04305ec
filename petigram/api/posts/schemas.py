# petigram/api/posts/schemas.py
from marshmallow import Schema, fields, validate, post_load

from petigram.models.post import Category, PostDraft

# --- 재사용을 위한 중첩 스키마 ---
class CommentResponseSchema(Schema):
    """게시물 응답에 포함될 댓글 스키마."""
    id = fields.Str(required=True)
    user_id = fields.Str(required=True)
    username = fields.Str(required=True)
    text = fields.Str(required=True)
    timestamp = fields.DateTime(required=True)

# --- API 요청/응답 스키마 ---
class PostCreateSchema(Schema):
    """POST /api/posts 요청 본문의 유효성을 검사합니다."""
    image_url = fields.Str(required=True, validate=validate.Length(min=1))
    caption = fields.Str(load_default="", validate=validate.Length(max=2200))
    category = fields.Enum(Category, by_value=True, required=True)
    filter = fields.Str(load_default="none")

    @post_load
    def make_draft(self, data, **kwargs):
        return PostDraft(**data)

class CommentCreateSchema(Schema):
    """POST /api/posts/{post_id}/comments 요청 본문의 유효성을 검사합니다."""
    text = fields.Str(required=True, validate=validate.Length(min=1, max=2000))

class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    id = fields.Str(dump_only=True)
    user_id = fields.Str(required=True)
    username = fields.Str(required=True)
    user_avatar = fields.Str(required=True)
    image_url = fields.Str(required=True)
    caption = fields.Str(required=True)
    hashtags = fields.List(fields.Str(), required=True)
    likes = fields.List(fields.Str(), required=True)
    like_count = fields.Function(lambda post: len(post.likes))
    comments = fields.List(fields.Nested(CommentResponseSchema), required=True)
    category = fields.Enum(Category, by_value=True, required=True)
    timestamp = fields.DateTime(required=True)
    filter = fields.Str(required=True)
