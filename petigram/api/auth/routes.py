# petigram/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from petigram.api.auth.schemas import SignUpSchema, LogInSchema, UserResponseSchema

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/signup', methods=['POST'])
def sign_up():
    """이메일/비밀번호 회원가입. 가입 직후 로그인 상태가 됩니다."""
    session_manager = current_app.services['auth']
    try:
        data = SignUpSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    user = session_manager.sign_up(data['email'], data['password'], data['username'])
    return jsonify(UserResponseSchema().dump(user)), 201

@auth_bp.route('/login', methods=['POST'])
def log_in():
    """이메일/비밀번호 로그인."""
    session_manager = current_app.services['auth']
    try:
        data = LogInSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    user = session_manager.log_in(data['email'], data['password'])
    return jsonify(UserResponseSchema().dump(user)), 200

# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def log_out():
    """현재 세션을 종료합니다."""
    current_app.services['auth'].log_out()
    return jsonify({"message": "로그아웃 되었습니다."}), 200

@auth_bp.route('/me', methods=['GET'])
def me():
    """현재 로그인된 사용자 정보를 반환합니다."""
    user = current_app.services['auth'].current_user()
    if user is None:
        logging.info("세션 없이 /me 요청")
        return jsonify({"error_code": "UNAUTHENTICATED", "message": "User not authenticated"}), 401
    return jsonify(UserResponseSchema().dump(user)), 200
