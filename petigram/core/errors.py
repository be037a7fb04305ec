# petigram/core/errors.py
"""
Petigram 전역 예외 정의.

각 예외는 HTTP 셸의 전역 에러 핸들러가 그대로 응답으로 바꿀 수 있도록
error_code 와 status_code 를 함께 가집니다.
"""


class PetigramError(RuntimeError):
    """모든 Petigram 도메인 예외의 기반 클래스."""
    error_code = "PETIGRAM_ERROR"
    status_code = 500
    default_message = "요청을 처리하지 못했습니다."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class Unauthenticated(PetigramError):
    """로그인 세션이 필요한 작업을 세션 없이 호출한 경우."""
    error_code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "User not authenticated"


class InvalidCredentials(PetigramError):
    """로그인 거부. 계정 없음/비밀번호 오류를 구분하지 않습니다."""
    error_code = "INVALID_CREDENTIALS"
    status_code = 401
    default_message = "Invalid email or password."


class DuplicateAccount(PetigramError):
    """이미 가입된 이메일로 회원가입을 시도한 경우."""
    error_code = "DUPLICATE_ACCOUNT"
    status_code = 409
    default_message = "User with this email already exists."


class AuthError(PetigramError):
    """그 밖의 인증 백엔드 오류. 백엔드 메시지를 그대로 전달합니다."""
    error_code = "AUTH_ERROR"
    status_code = 400
    default_message = "Authentication failed."


class WriteError(PetigramError):
    """저장소 쓰기 실패."""
    error_code = "WRITE_FAILED"
    status_code = 502
    default_message = "Failed to write to the document store."


class PostNotFound(PetigramError):
    """변경하려는 게시물이 저장소에 없는 경우."""
    error_code = "POST_NOT_FOUND"
    status_code = 404
    default_message = "게시물을 찾을 수 없습니다."

    def __init__(self, post_id: str = None, message: str = None):
        super().__init__(message or (f"게시물을 찾을 수 없습니다: {post_id}" if post_id else None))
        self.post_id = post_id


class TransportFailure(PetigramError):
    """저장소 읽기 실패."""
    error_code = "TRANSPORT_FAILURE"
    status_code = 502
    default_message = "Failed to read from the document store."
