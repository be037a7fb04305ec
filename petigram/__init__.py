# petigram/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional
import click
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import firebase_admin
from firebase_admin import credentials

# - 설정
from petigram.core.config import config_by_name
from petigram.core.constants import build_demo_posts
from petigram.core.errors import PetigramError

# - API 블루프린트
from petigram.api.auth.routes import auth_bp
from petigram.api.posts.routes import posts_bp
from petigram.api.feed.routes import feed_bp
from petigram.api.debug.routes import debug_bp

# - 서비스 모듈
from petigram.services.document_store import RealtimeDatabaseStore, InMemoryDocumentStore
from petigram.services.auth_provider import FirebaseAuthProvider, InMemoryAuthProvider
from petigram.api.auth.services import AuthSessionManager
from petigram.api.posts.services import PostService
from petigram.api.feed.controller import FeedController

def _init_firebase(app: Flask):
    """firebase_admin 기본 앱을 한 번만 초기화합니다."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
    database_url = app.config.get('FIREBASE_DATABASE_URL')
    if not database_url:
        raise ValueError("FIREBASE_DATABASE_URL 설정이 .env 또는 설정 파일에 필요합니다.")

    cred = credentials.Certificate(cred_path)
    return firebase_admin.initialize_app(cred, {'databaseURL': database_url})

def create_app(config_name: Optional[str] = None, store=None, auth_provider=None):
    """
    Flask 애플리케이션 팩토리 함수.
    store/auth_provider 를 넘기면 설정과 관계없이 그 구현을 사용합니다(테스트용).
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 외부 서비스 초기화 (저장소, 인증 제공자)
    # =====================================================================================
    if store is None or auth_provider is None:
        if app.config['BACKEND'] == 'memory':
            store = store or InMemoryDocumentStore()
            auth_provider = auth_provider or InMemoryAuthProvider()
            logging.info("In-memory backend selected")
        else:
            firebase_app = _init_firebase(app)
            store = store or RealtimeDatabaseStore(app=firebase_app)
            auth_provider = auth_provider or FirebaseAuthProvider(
                api_key=app.config['FIREBASE_API_KEY'],
                app=firebase_app,
                timeout=app.config['IDENTITY_TOOLKIT_TIMEOUT'],
            )
            logging.info("Firebase backend initialized successfully")

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}
    app.services['store'] = store
    app.services['auth'] = AuthSessionManager(auth_provider=auth_provider, store=store)
    app.services['posts'] = PostService(store=store)
    app.services['feed'] = FeedController(
        session_manager=app.services['auth'],
        post_service=app.services['posts'],
        auth_timeout=app.config['AUTH_BOOTSTRAP_TIMEOUT'],
        seed_demo_data=app.config['SEED_DEMO_DATA'],
    )
    app.services['feed'].start()

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(feed_bp, url_prefix='/api/feed')

    # - 데모 데이터 강제 시드는 디버그 환경에서만 노출합니다.
    if app.config.get('DEBUG'):
        app.register_blueprint(debug_bp, url_prefix='/api/debug')
        logging.info("💡 Tip: POST /api/debug/force-seed 또는 'flask force-seed' 로 데모 데이터를 다시 채울 수 있습니다.")

    @app.cli.command('force-seed')
    def force_seed_command():
        """게시물 컬렉션을 데모 게시물로 덮어씁니다."""
        fixtures = build_demo_posts()
        app.services['posts'].force_seed(fixtures)
        click.echo(f"Uploaded {len(fixtures)} posts.")

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(PetigramError)
    def handle_petigram_error(err):
        if err.status_code >= 500:
            logging.error(f"{err.error_code}: {err.message}", exc_info=True)
        response = {"error_code": err.error_code, "message": err.message}
        return jsonify(response), err.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 라우팅 오류(404, 405 등)는 그대로 돌려보냅니다.
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
