# petigram/api/feed/schemas.py
from marshmallow import Schema, fields

from petigram.api.auth.schemas import UserResponseSchema
from petigram.api.posts.schemas import PostResponseSchema
from petigram.api.feed.controller import FeedState
from petigram.models.post import Category


def _category_value(snapshot) -> str:
    category = snapshot['category']
    return category.value if isinstance(category, Category) else category


class CategorySelectSchema(Schema):
    """PUT /api/feed/category 요청 본문. 'all' 또는 카테고리 값."""
    category = fields.Str(required=True)

class FeedResponseSchema(Schema):
    """피드 상태 응답 스키마."""
    state = fields.Enum(FeedState, by_value=True)
    user = fields.Nested(UserResponseSchema, allow_none=True)
    category = fields.Function(_category_value)
    posts = fields.List(fields.Nested(PostResponseSchema))
    is_loading = fields.Bool()
    is_upload_modal_open = fields.Bool()
    last_read_failed = fields.Bool()
