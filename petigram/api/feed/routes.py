# petigram/api/feed/routes.py
"""
피드 API. 앱 하나가 FeedController 하나(로컬 세션 하나)를 가지며 모든 클라이언트가 이를 공유합니다.
필터 변경은 PUT /category 로만 하고, GET 은 상태를 바꾸지 않습니다.
"""
from flask import Blueprint, request, jsonify, current_app, Response
from marshmallow import ValidationError

from petigram.api.feed.schemas import CategorySelectSchema, FeedResponseSchema

feed_bp = Blueprint('feed_bp', __name__)

def _feed_response(feed, status: int = 200, category=None):
    return jsonify(FeedResponseSchema().dump(feed.snapshot(category))), status

@feed_bp.route('', methods=['GET'])
def get_feed():
    """
    현재 피드 상태와 카테고리로 걸러진 게시물 목록을 반환합니다.
    - ?category=dog 처럼 넘기면 선택된 필터는 두고 그 카테고리로 걸러낸 결과만 반환합니다.
    """
    feed = current_app.services['feed']
    category = request.args.get('category', None, type=str)
    try:
        return _feed_response(feed, category=category)
    except ValueError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": {"category": [str(e)]}}), 400

@feed_bp.route('/category', methods=['PUT'])
def select_category():
    """필터 카테고리를 변경합니다."""
    feed = current_app.services['feed']
    try:
        data = CategorySelectSchema().load(request.get_json(silent=True) or {})
        feed.set_category(data['category'])
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": {"category": [str(e)]}}), 400
    return _feed_response(feed)

@feed_bp.route('/refresh', methods=['POST'])
def refresh_feed():
    """전체 게시물을 다시 불러옵니다."""
    feed = current_app.services['feed']
    if feed.current_user is None:
        return jsonify({"error_code": "UNAUTHENTICATED", "message": "User not authenticated"}), 401
    feed.refresh()
    return _feed_response(feed)

@feed_bp.route('/modal', methods=['POST'])
def open_upload_modal():
    current_app.services['feed'].open_upload_modal()
    return Response(status=204)

@feed_bp.route('/modal', methods=['DELETE'])
def close_upload_modal():
    current_app.services['feed'].close_upload_modal()
    return Response(status=204)
