# petigram/api/posts/routes.py
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from petigram.api.posts.schemas import PostCreateSchema, CommentCreateSchema, PostResponseSchema

posts_bp = Blueprint('posts_bp', __name__)

@posts_bp.route('', methods=['POST'])
def create_post():
    """
    새 게시물을 작성합니다.
    - 성공 시 생성된 게시물을 201 과 함께 반환하고, 피드는 전체 재조회됩니다.
    """
    feed = current_app.services['feed']
    try:
        draft = PostCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    new_post = feed.add_post(draft)
    return jsonify(PostResponseSchema().dump(new_post)), 201

@posts_bp.route('/<string:post_id>/like', methods=['POST'])
def toggle_like(post_id: str):
    """게시물 좋아요를 누르거나 취소합니다."""
    feed = current_app.services['feed']
    post = feed.toggle_like(post_id)
    if post is None:
        return jsonify({"error_code": "UNAUTHENTICATED", "message": "User not authenticated"}), 401
    return jsonify(PostResponseSchema().dump(post)), 200

@posts_bp.route('/<string:post_id>/comments', methods=['POST'])
def create_comment(post_id: str):
    """특정 게시글에 새로운 댓글을 작성합니다."""
    feed = current_app.services['feed']
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    post = feed.add_comment(post_id, data['text'])
    return jsonify(PostResponseSchema().dump(post)), 201
