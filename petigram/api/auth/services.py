# petigram/api/auth/services.py
import logging
from typing import Callable, Optional
from urllib.parse import quote

from marshmallow import ValidationError

from petigram.core.errors import AuthError, DuplicateAccount, InvalidCredentials, TransportFailure, WriteError
from petigram.models.user import User
from petigram.schemas.user_schema import user_profile_schema
from petigram.services.auth_provider import (
    AuthProvider, AuthProviderError, Identity,
    EMAIL_ALREADY_REGISTERED, INVALID_CREDENTIAL, USER_NOT_FOUND, WRONG_PASSWORD,
)
from petigram.services.document_store import DocumentStore

USERS_PATH = 'users'
DEFAULT_USERNAME = 'User'

# 어떤 이유로 로그인이 거부되었는지 노출하지 않기 위해 하나로 합칩니다.
_INVALID_LOGIN_CODES = {INVALID_CREDENTIAL, USER_NOT_FOUND, WRONG_PASSWORD}


def seeded_avatar_url(seed: str) -> str:
    """seed 로부터 항상 같은 placeholder 아바타 URL 을 만듭니다."""
    return f"https://picsum.photos/seed/{quote(seed, safe='')}/48/48"


class AuthSessionManager:
    """
    회원가입/로그인/로그아웃과 세션 변경 구독을 담당하는 서비스 클래스.
    인증 제공자의 계정 정보를 'users/<uid>' 프로필 레코드와 합쳐 User 로 만들어 줍니다.
    """
    def __init__(self, auth_provider: AuthProvider, store: DocumentStore):
        self.auth_provider = auth_provider
        self.store = store

    # --- 프로필 ---
    def hydrate(self, identity: Optional[Identity]) -> Optional[User]:
        """
        계정 정보로 User 를 만듭니다. 프로필 레코드가 없으면 기본값으로 생성해 저장하고,
        있으면 저장된 값이 인증 제공자의 표시 이름/사진보다 우선합니다.
        """
        if identity is None:
            return None

        profile_path = f"{USERS_PATH}/{identity.uid}"
        raw_profile = self.store.read(profile_path)
        fallback_username = identity.display_name or DEFAULT_USERNAME
        fallback_avatar = identity.photo_url or seeded_avatar_url(identity.uid)

        if raw_profile is None:
            user = User(
                id=identity.uid,
                email=identity.email or '',
                username=fallback_username,
                avatar=fallback_avatar,
            )
            self.store.write(profile_path, {'username': user.username, 'avatar': user.avatar})
            logging.info(f"기본 프로필 레코드 생성 (uid: {identity.uid})")
            return user

        try:
            profile = user_profile_schema.load(raw_profile if isinstance(raw_profile, dict) else {})
        except ValidationError as e:
            logging.warning(f"프로필 레코드 형식 오류, 기본값 사용 (uid: {identity.uid}): {e.messages}")
            profile = {}

        return User(
            id=identity.uid,
            email=identity.email or '',
            username=profile.get('username') or fallback_username,
            avatar=profile.get('avatar') or fallback_avatar,
        )

    def current_user(self) -> Optional[User]:
        return self.hydrate(self.auth_provider.current_identity)

    # --- 인증 ---
    def sign_up(self, email: str, password: str, username: str) -> User:
        """계정을 만들고 표시 이름과 프로필 레코드를 설정한 뒤 로그인합니다."""
        try:
            identity = self.auth_provider.create_identity(email, password)
            identity = self.auth_provider.update_display_name(identity, username)
        except AuthProviderError as e:
            if e.code == EMAIL_ALREADY_REGISTERED:
                raise DuplicateAccount() from e
            raise AuthError(e.message or 'Failed to sign up.') from e

        # 프로필 레코드를 먼저 써 두어야 세션 리스너가 올바른 username 을 받습니다.
        try:
            self.store.write(f"{USERS_PATH}/{identity.uid}", {
                'username': username,
                'avatar': seeded_avatar_url(username),
            })
        except WriteError as e:
            logging.error(f"회원가입 프로필 저장 실패 (uid: {identity.uid}): {e}")
            raise AuthError(e.message or 'Failed to sign up.') from e

        try:
            identity = self.auth_provider.authenticate(email, password)
        except AuthProviderError as e:
            raise AuthError(e.message or 'Failed to sign up.') from e

        logging.info(f"회원가입 완료 (uid: {identity.uid})")
        try:
            return self.hydrate(identity)
        except (TransportFailure, WriteError) as e:
            logging.error(f"회원가입 후 사용자 정보 로드 실패 (uid: {identity.uid}): {e}")
            raise AuthError(e.message or 'Failed to sign up.') from e

    def log_in(self, email: str, password: str) -> User:
        try:
            identity = self.auth_provider.authenticate(email, password)
        except AuthProviderError as e:
            if e.code in _INVALID_LOGIN_CODES:
                raise InvalidCredentials() from e
            raise AuthError(e.message or 'Failed to log in.') from e
        return self.hydrate(identity)

    def log_out(self) -> None:
        try:
            self.auth_provider.terminate_session()
        except AuthProviderError as e:
            raise AuthError(e.message or 'Failed to log out.') from e
        logging.info("로그아웃 처리 완료")

    # --- 세션 구독 ---
    def subscribe_to_session(self, callback: Callable[[Optional[User]], None]) -> Callable[[], None]:
        """
        세션 변경 리스너를 등록합니다. 등록 즉시 현재 상태로 한 번 호출되고,
        이후 로그인/로그아웃 때마다 프로필이 채워진 User 또는 None 으로 호출됩니다.
        반환된 해제 함수는 여러 번 호출해도 안전합니다.
        """
        state = {'active': True}

        def on_identity(identity: Optional[Identity]):
            if not state['active']:
                return
            try:
                user = self.hydrate(identity)
            except (TransportFailure, WriteError) as e:
                # 프로필을 읽지 못한 이벤트는 전달하지 않습니다.
                logging.error(f"세션 사용자 정보 로드 실패 (uid: {getattr(identity, 'uid', None)}): {e}", exc_info=True)
                return
            callback(user)

        provider_unsubscribe = self.auth_provider.on_session_change(on_identity)

        def unsubscribe():
            if not state['active']:
                return
            state['active'] = False
            provider_unsubscribe()

        return unsubscribe
