# petigram/schemas/post_schema.py
"""
'posts/<id>' 문서 <-> Post 데이터클래스 변환 스키마.

저장소 문서는 웹 클라이언트와 공유하므로 camelCase 키를 그대로 사용합니다.
문서 id 는 필드가 아니라 경로의 키이므로, 읽을 때는 호출자가 'id' 를 합쳐서
넘기고 쓸 때는 post_to_document() 가 'id' 를 제거합니다.
"""

from typing import Any, Dict

from marshmallow import Schema, fields, post_load, EXCLUDE

from petigram.models.comment import Comment
from petigram.models.post import Category, Post
from petigram.schemas.fields import StoreList, IsoTimestamp


class CommentDocumentSchema(Schema):
    """게시물 문서 안에 값으로 포함되는 댓글 스키마."""
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    user_id = fields.Str(required=True, data_key="userId")
    username = fields.Str(required=True)
    text = fields.Str(required=True)
    timestamp = IsoTimestamp(required=True)

    @post_load
    def make_comment(self, data, **kwargs):
        return Comment(**data)


class PostDocumentSchema(Schema):
    """
    게시물 문서 스키마. likes/comments/hashtags 는 저장소에서 빠져 있을 수 있으므로
    StoreList 로 읽어 항상 리스트를 돌려줍니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    user_id = fields.Str(required=True, data_key="userId")
    username = fields.Str(required=True)
    user_avatar = fields.Str(load_default="", data_key="userAvatar")
    image_url = fields.Str(required=True, data_key="imageUrl")
    caption = fields.Str(load_default="")
    hashtags = StoreList(fields.Str())
    likes = StoreList(fields.Str())
    comments = StoreList(fields.Nested(CommentDocumentSchema))
    category = fields.Enum(Category, by_value=True, required=True)
    timestamp = IsoTimestamp(required=True)
    filter = fields.Str(load_default="none")

    @post_load
    def make_post(self, data, **kwargs):
        return Post(**data)


post_document_schema = PostDocumentSchema()
comment_document_schema = CommentDocumentSchema()


def post_from_document(post_id: str, document: Dict[str, Any]) -> Post:
    """저장소에서 읽은 문서를 Post 로 변환합니다. 형식 오류 시 ValidationError."""
    return post_document_schema.load({**document, "id": post_id})


def post_to_document(post: Post) -> Dict[str, Any]:
    """Post 를 저장소에 쓸 문서로 변환합니다. id 는 경로 키이므로 포함하지 않습니다."""
    document = post_document_schema.dump(post)
    document.pop("id", None)
    return document


def comments_to_documents(comments) -> list:
    return comment_document_schema.dump(comments, many=True)
