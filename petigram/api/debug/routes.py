# petigram/api/debug/routes.py
"""개발 환경 전용 운영 도구. 운영 설정(DEBUG=False)에서는 등록되지 않습니다."""

import logging
from flask import Blueprint, jsonify, current_app

from petigram.core.constants import build_demo_posts

debug_bp = Blueprint('debug_bp', __name__)

@debug_bp.route('/force-seed', methods=['POST'])
def force_seed():
    """기존 게시물을 데모 게시물로 덮어쓰고 피드를 다시 불러옵니다."""
    fixtures = build_demo_posts()
    current_app.services['posts'].force_seed(fixtures)
    feed = current_app.services['feed']
    if feed.current_user is not None:
        feed.refresh()
    logging.info(f"Uploaded {len(fixtures)} posts via debug endpoint.")
    return jsonify({"message": "데모 데이터를 다시 채웠습니다.", "count": len(fixtures)}), 200
