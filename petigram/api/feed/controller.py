# petigram/api/feed/controller.py
import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from petigram.api.auth.services import AuthSessionManager
from petigram.api.posts.services import PostService
from petigram.core.constants import build_demo_posts
from petigram.core.errors import PetigramError, Unauthenticated
from petigram.models.post import Category, Post, PostDraft
from petigram.models.user import User

ALL_CATEGORIES = 'all'


class FeedState(Enum):
    """피드 화면의 상태"""
    AUTH_PENDING = "auth_pending"
    SIGNED_OUT = "signed_out"
    LOADING = "loading"
    READY = "ready"


def parse_category(value: Union[str, Category, None]) -> Union[str, Category]:
    """'all', Category, 또는 카테고리 값 문자열을 정규화합니다."""
    if value is None or value == ALL_CATEGORIES:
        return ALL_CATEGORIES
    if isinstance(value, Category):
        return value
    try:
        return Category(str(value).lower())
    except ValueError:
        raise ValueError(f"'{value}'은(는) 유효한 카테고리가 아닙니다.") from None


def filter_posts(posts: List[Post], category: Union[str, Category]) -> List[Post]:
    if category == ALL_CATEGORIES:
        return list(posts)
    return [post for post in posts if post.category == category]


class FeedController:
    """
    세션 이벤트를 받아 피드를 불러오고, 변경 후에는 항상 전체를 다시 불러오는 상태 머신.

    AUTH_PENDING --(첫 세션 콜백)--> SIGNED_OUT | LOADING
    AUTH_PENDING --(부트스트랩 타임아웃)--> SIGNED_OUT
    SIGNED_OUT --(로그인)--> LOADING --(list_posts 완료)--> READY
    READY --(변경 후 재조회)--> LOADING,  READY --(로그아웃)--> SIGNED_OUT
    """
    def __init__(
        self,
        session_manager: AuthSessionManager,
        post_service: PostService,
        auth_timeout: float = 5.0,
        seed_demo_data: bool = True,
        fixture_factory: Callable[[], List[Post]] = build_demo_posts,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self.session_manager = session_manager
        self.post_service = post_service
        self.auth_timeout = auth_timeout
        self.seed_demo_data = seed_demo_data
        self.fixture_factory = fixture_factory
        self.timer_factory = timer_factory

        self.state = FeedState.AUTH_PENDING
        self.current_user: Optional[User] = None
        self.posts: List[Post] = []
        self.category: Union[str, Category] = ALL_CATEGORIES
        self.visible_posts: List[Post] = []
        self.is_upload_modal_open = False

        self._lock = threading.RLock()
        self._timer = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    # --- 생명주기 ---
    def start(self) -> None:
        """세션 구독을 시작합니다. 첫 콜백이 늦으면 타임아웃 후 로그아웃 상태로 넘어갑니다."""
        with self._lock:
            if self._unsubscribe is not None:
                return
            self._unsubscribe = self.session_manager.subscribe_to_session(self._on_session_changed)
            if self.state is FeedState.AUTH_PENDING:
                self._timer = self.timer_factory(self.auth_timeout, self._on_auth_timeout)
                self._timer.daemon = True
                self._timer.start()

    def stop(self) -> None:
        with self._lock:
            self._cancel_timer()
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_auth_timeout(self) -> None:
        with self._lock:
            self._timer = None
            if self.state is FeedState.AUTH_PENDING:
                logging.warning("Auth state check timed out, continuing anyway...")
                self.state = FeedState.SIGNED_OUT

    def _on_session_changed(self, user: Optional[User]) -> None:
        with self._lock:
            self._cancel_timer()
            if user is None:
                self.current_user = None
                self._set_posts([])
                self.is_upload_modal_open = False
                self.state = FeedState.SIGNED_OUT
                return

            self.current_user = user
            logging.info(f"세션 시작 (user_id: {user.id}), 피드를 불러옵니다.")
            if self.seed_demo_data:
                try:
                    self.post_service.seed_if_empty(self.fixture_factory())
                except PetigramError as e:
                    logging.error(f"데모 데이터 시드 실패: {e}", exc_info=True)
            self.refresh()

    # --- 조회/필터 ---
    def refresh(self) -> List[Post]:
        """전체 게시물을 다시 불러옵니다. 실패해도 빈 목록으로 READY 가 됩니다."""
        with self._lock:
            self.state = FeedState.LOADING
            try:
                posts = self.post_service.list_posts()
            finally:
                self.state = FeedState.READY if self.current_user else FeedState.SIGNED_OUT
            self._set_posts(posts)
            return self.visible_posts

    def set_category(self, category: Union[str, Category, None]) -> List[Post]:
        with self._lock:
            self.category = parse_category(category)
            self.visible_posts = filter_posts(self.posts, self.category)
            return self.visible_posts

    def _set_posts(self, posts: List[Post]) -> None:
        self.posts = posts
        self.visible_posts = filter_posts(posts, self.category)

    @property
    def is_loading(self) -> bool:
        return self.state in (FeedState.AUTH_PENDING, FeedState.LOADING)

    @property
    def last_read_failed(self) -> bool:
        return self.post_service.last_read_error is not None

    # --- 업로드 모달 ---
    def open_upload_modal(self) -> None:
        with self._lock:
            if self.current_user is None:
                raise Unauthenticated()
            self.is_upload_modal_open = True

    def close_upload_modal(self) -> None:
        with self._lock:
            self.is_upload_modal_open = False

    # --- 변경 (쓰기 후 전체 재조회) ---
    def add_post(self, draft: PostDraft) -> Post:
        with self._lock:
            post = self.post_service.create_post(self.current_user, draft)
            self.refresh()
            self.is_upload_modal_open = False
            return post

    def toggle_like(self, post_id: str) -> Optional[Post]:
        with self._lock:
            if self.current_user is None:
                return None
            post = self.post_service.toggle_like(post_id, self.current_user.id)
            self.refresh()
            return post

    def add_comment(self, post_id: str, text: str) -> Post:
        with self._lock:
            post = self.post_service.add_comment(self.current_user, post_id, text)
            self.refresh()
            return post

    def snapshot(self, category: Union[str, Category, None] = None) -> Dict[str, Any]:
        """
        현재 상태를 반환합니다. category 를 주면 선택된 필터는 그대로 두고
        그 카테고리로 걸러낸 목록만 돌려줍니다. 잘못된 값은 ValueError.
        """
        with self._lock:
            if category is None:
                selected, visible = self.category, list(self.visible_posts)
            else:
                selected = parse_category(category)
                visible = filter_posts(self.posts, selected)
            return {
                'state': self.state,
                'user': self.current_user,
                'category': selected,
                'posts': visible,
                'is_loading': self.is_loading,
                'is_upload_modal_open': self.is_upload_modal_open,
                'last_read_failed': self.last_read_failed,
            }
