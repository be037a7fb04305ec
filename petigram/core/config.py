# petigram/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 'firebase' 는 실제 Firebase 프로젝트, 'memory' 는 프로세스 내부 저장소/인증을 사용합니다.
    BACKEND = os.getenv('PETIGRAM_BACKEND', 'firebase')

    # Realtime Database 주소 (예: https://<project>-default-rtdb.firebaseio.com/)
    FIREBASE_DATABASE_URL = os.getenv('FIREBASE_DATABASE_URL')
    # 이메일/비밀번호 로그인(Identity Toolkit REST API)에 사용하는 웹 API 키
    FIREBASE_API_KEY = os.getenv('FIREBASE_API_KEY')
    IDENTITY_TOOLKIT_TIMEOUT = float(os.getenv('IDENTITY_TOOLKIT_TIMEOUT', 10))

    # 인증 상태 콜백이 이 시간(초) 안에 오지 않으면 로그아웃 상태로 간주합니다.
    AUTH_BOOTSTRAP_TIMEOUT = float(os.getenv('AUTH_BOOTSTRAP_TIMEOUT', 5.0))
    # 로그인 시 게시물 컬렉션이 비어 있으면 데모 게시물을 채웁니다.
    SEED_DEMO_DATA = _env_flag('SEED_DEMO_DATA', True)

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다. 외부 서비스 없이 메모리 백엔드로 동작합니다."""
    TESTING = True
    DEBUG = False
    BACKEND = 'memory'
    SEED_DEMO_DATA = True
    AUTH_BOOTSTRAP_TIMEOUT = 0.5
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')

class ProductionConfig(Config):
    """운영 환경 설정. 디버그용 강제 시드 엔드포인트가 등록되지 않습니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app 에서 적절한 설정을 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
