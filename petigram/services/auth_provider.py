# petigram/services/auth_provider.py
"""
인증 제공자 어댑터.

- FirebaseAuthProvider: firebase_admin.auth (계정 생성/프로필 수정/조회) +
  Identity Toolkit REST API (이메일/비밀번호 로그인)
- InMemoryAuthProvider: 개발/테스트용 프로세스 내부 구현

두 구현 모두 이 클라이언트의 '현재 세션' 하나를 보관하고, 세션이 바뀔 때마다
등록된 리스너에게 Identity(또는 None)를 전달합니다.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

import requests
from firebase_admin import auth as firebase_auth, exceptions as firebase_exceptions

# 제공자 오류 코드 (백엔드별 코드를 이 값들로 정규화합니다)
EMAIL_ALREADY_REGISTERED = "email-already-registered"
INVALID_CREDENTIAL = "invalid-credential"
USER_NOT_FOUND = "user-not-found"
WRONG_PASSWORD = "wrong-password"
NETWORK_REQUEST_FAILED = "network-request-failed"


class AuthProviderError(Exception):
    """인증 제공자가 돌려준 {code, message} 오류."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class Identity:
    """인증 제공자가 관리하는 계정 정보."""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


SessionListener = Callable[[Optional[Identity]], None]


class AuthProvider:
    """세션 보관과 리스너 알림을 담당하는 공통 기반 클래스."""

    def __init__(self):
        self._current: Optional[Identity] = None
        self._listeners: List[SessionListener] = []
        self._lock = threading.RLock()

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._current

    def create_identity(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    def authenticate(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    def update_display_name(self, identity: Identity, name: str) -> Identity:
        raise NotImplementedError

    def terminate_session(self) -> None:
        self._set_session(None)

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """
        리스너를 등록하고 현재 세션 상태로 즉시 한 번 호출합니다.
        반환된 함수를 호출하면 등록이 해제되며, 여러 번 호출해도 안전합니다.
        """
        with self._lock:
            self._listeners.append(callback)
            current = self._current
        callback(current)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _set_session(self, identity: Optional[Identity]) -> None:
        with self._lock:
            self._current = identity
            listeners = list(self._listeners)
        for listener in listeners:
            listener(identity)


class FirebaseAuthProvider(AuthProvider):
    """Firebase Authentication 어댑터."""

    _sign_in_url = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

    # Identity Toolkit 오류 메시지 -> 정규화된 코드
    _rest_error_codes = {
        "EMAIL_EXISTS": EMAIL_ALREADY_REGISTERED,
        "EMAIL_NOT_FOUND": USER_NOT_FOUND,
        "INVALID_PASSWORD": WRONG_PASSWORD,
        "INVALID_LOGIN_CREDENTIALS": INVALID_CREDENTIAL,
    }

    def __init__(self, api_key: str, app=None, session: Optional[requests.Session] = None, timeout: float = 10):
        super().__init__()
        if not api_key:
            raise ValueError("FIREBASE_API_KEY 설정이 .env 또는 설정 파일에 필요합니다.")
        self.api_key = api_key
        self.app = app
        self.http = session or requests.Session()
        self.timeout = timeout
        self.id_token: Optional[str] = None

    @staticmethod
    def _to_identity(record) -> Identity:
        return Identity(
            uid=record.uid,
            email=record.email,
            display_name=record.display_name,
            photo_url=record.photo_url,
        )

    def create_identity(self, email: str, password: str) -> Identity:
        """
        계정을 생성합니다. 세션은 열지 않으며, 프로필 레코드가 준비된 뒤
        authenticate() 로 로그인해야 합니다.
        """
        try:
            record = firebase_auth.create_user(email=email, password=password, app=self.app)
            logging.info(f"Firebase Auth 사용자 생성 성공 (uid: {record.uid})")
            return self._to_identity(record)
        except firebase_auth.EmailAlreadyExistsError as e:
            raise AuthProviderError(EMAIL_ALREADY_REGISTERED, str(e)) from e
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            code = getattr(e, 'code', None) or 'invalid-argument'
            raise AuthProviderError(str(code).lower(), str(e)) from e

    def authenticate(self, email: str, password: str) -> Identity:
        try:
            response = self.http.post(
                self._sign_in_url,
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logging.error(f"Identity Toolkit 요청 실패: {e}")
            raise AuthProviderError(NETWORK_REQUEST_FAILED, str(e)) from e

        if not response.ok:
            code, message = self._parse_rest_error(response)
            raise AuthProviderError(code, message)

        payload = response.json()
        uid = payload["localId"]
        try:
            identity = self._to_identity(firebase_auth.get_user(uid, app=self.app))
        except firebase_exceptions.FirebaseError as e:
            raise AuthProviderError(str(e.code).lower(), str(e)) from e

        self.id_token = payload.get("idToken")
        self._set_session(identity)
        logging.info(f"로그인 성공 (uid: {uid})")
        return identity

    def _parse_rest_error(self, response) -> Tuple[str, str]:
        try:
            message = response.json().get("error", {}).get("message", "")
        except ValueError:
            message = response.text
        # 예: "INVALID_PASSWORD" 또는 "TOO_MANY_ATTEMPTS_TRY_LATER : ..."
        key = message.split(" ")[0].strip() if message else ""
        code = self._rest_error_codes.get(key, key.lower().replace('_', '-') or "unknown")
        return code, message or f"HTTP {response.status_code}"

    def update_display_name(self, identity: Identity, name: str) -> Identity:
        try:
            record = firebase_auth.update_user(identity.uid, display_name=name, app=self.app)
        except (firebase_exceptions.FirebaseError, ValueError) as e:
            code = getattr(e, 'code', None) or 'invalid-argument'
            raise AuthProviderError(str(code).lower(), str(e)) from e
        return self._to_identity(record)

    def terminate_session(self) -> None:
        # 클라이언트 세션만 종료합니다. 다른 기기의 refresh token 은 건드리지 않습니다.
        self.id_token = None
        super().terminate_session()


class InMemoryAuthProvider(AuthProvider):
    """메모리 안에서 계정을 관리하는 인증 제공자."""

    def __init__(self):
        super().__init__()
        self._accounts: Dict[str, Tuple[str, Identity]] = {}

    def create_identity(self, email: str, password: str) -> Identity:
        key = (email or "").strip().lower()
        if not key or not password:
            raise AuthProviderError("invalid-argument", "이메일과 비밀번호가 필요합니다.")
        with self._lock:
            if key in self._accounts:
                raise AuthProviderError(EMAIL_ALREADY_REGISTERED, "The email address is already in use by another account.")
            identity = Identity(uid=uuid.uuid4().hex, email=email)
            self._accounts[key] = (password, identity)
        return identity

    def authenticate(self, email: str, password: str) -> Identity:
        account = self._accounts.get((email or "").strip().lower())
        if account is None:
            raise AuthProviderError(USER_NOT_FOUND, "There is no user record corresponding to this identifier.")
        stored_password, identity = account
        if stored_password != password:
            raise AuthProviderError(WRONG_PASSWORD, "The password is invalid.")
        self._set_session(identity)
        return identity

    def update_display_name(self, identity: Identity, name: str) -> Identity:
        with self._lock:
            for key, (password, stored) in self._accounts.items():
                if stored.uid == identity.uid:
                    updated = replace(stored, display_name=name)
                    self._accounts[key] = (password, updated)
                    if self._current and self._current.uid == identity.uid:
                        self._current = updated
                    return updated
        raise AuthProviderError(USER_NOT_FOUND, f"No user record for uid {identity.uid}")
