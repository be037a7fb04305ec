# petigram/api/posts/services.py
import logging
from typing import Iterable, List, Optional

from marshmallow import ValidationError

from petigram.core.errors import PostNotFound, TransportFailure, Unauthenticated, WriteError
from petigram.models.comment import Comment
from petigram.models.post import Post, PostDraft, extract_hashtags
from petigram.models.user import User
from petigram.schemas.post_schema import comments_to_documents, post_from_document, post_to_document
from petigram.services.document_store import DocumentStore
from petigram.utils.datetime_utils import DateTimeUtils

POSTS_PATH = 'posts'


class PostService:
    """
    게시물 관련 데이터 접근을 담당하는 서비스 클래스.
    모든 변경은 '읽고-수정하고-통째로 쓰기' 방식이며, 동시에 같은 필드를 쓰면
    마지막에 쓴 쪽이 이깁니다(last-writer-wins).
    """
    def __init__(self, store: DocumentStore):
        self.store = store
        # 가장 최근 list_posts() 의 읽기 실패. 성공하면 None 으로 돌아갑니다.
        self.last_read_error: Optional[Exception] = None

    # --- 조회 ---
    def list_posts(self) -> List[Post]:
        """
        전체 게시물을 최신순으로 반환합니다.
        읽기 실패 시 예외를 올리지 않고 빈 리스트를 반환합니다(fail-open).
        """
        try:
            raw_posts = self.store.read(POSTS_PATH)
        except TransportFailure as e:
            self.last_read_error = e
            logging.warning(f"게시물 목록 조회 실패, 빈 목록으로 대체합니다: {e}")
            return []

        self.last_read_error = None
        if not raw_posts or not isinstance(raw_posts, dict):
            return []

        posts = []
        for post_id, document in raw_posts.items():
            if not isinstance(document, dict):
                logging.warning(f"게시물 문서 형식 오류로 건너뜀 (post_id: {post_id})")
                continue
            try:
                posts.append(post_from_document(post_id, document))
            except ValidationError as e:
                logging.warning(f"게시물 문서 형식 오류로 건너뜀 (post_id: {post_id}): {e.messages}")

        # sorted 는 안정 정렬이므로 같은 timestamp 는 저장소 순서를 유지합니다.
        return sorted(posts, key=lambda post: post.timestamp, reverse=True)

    def get_post(self, post_id: str) -> Post:
        """단일 게시물을 읽습니다. 없으면 PostNotFound."""
        document = self.store.read(f"{POSTS_PATH}/{post_id}")
        if not isinstance(document, dict):
            raise PostNotFound(post_id)
        try:
            return post_from_document(post_id, document)
        except ValidationError as e:
            logging.error(f"게시물 문서 형식 오류 (post_id: {post_id}): {e.messages}")
            raise PostNotFound(post_id, f"게시물 문서를 읽을 수 없습니다: {post_id}") from e

    # --- 생성/변경 ---
    def create_post(self, user: Optional[User], draft: PostDraft) -> Post:
        """새로운 게시물을 생성하고 저장소에 저장합니다."""
        if user is None:
            raise Unauthenticated()

        post_id = self.store.append_child(POSTS_PATH)
        new_post = Post(
            id=post_id,
            user_id=user.id,
            username=user.username,
            user_avatar=user.avatar,
            image_url=draft.image_url,
            caption=draft.caption,
            category=draft.category,
            hashtags=extract_hashtags(draft.caption),
            likes=[],
            comments=[],
            timestamp=DateTimeUtils.now(),
            filter=draft.filter,
        )
        self.store.write(f"{POSTS_PATH}/{post_id}", post_to_document(new_post))
        logging.info(f"게시물 생성 완료 (post_id: {post_id}, user_id: {user.id})")
        return new_post

    def toggle_like(self, post_id: str, user_id: str) -> Post:
        """좋아요가 있으면 한 번 제거하고, 없으면 추가한 뒤 likes 전체를 덮어씁니다."""
        post = self._get_post_for_update(post_id)

        likes = list(post.likes)
        if user_id in likes:
            likes.remove(user_id)
        else:
            likes.append(user_id)

        self.store.merge(f"{POSTS_PATH}/{post_id}", {'likes': likes})
        post.likes = likes
        return post

    def add_comment(self, user: Optional[User], post_id: str, text: str) -> Post:
        """게시물에 댓글을 추가한 뒤 comments 전체를 덮어씁니다."""
        if user is None:
            raise Unauthenticated()

        post = self._get_post_for_update(post_id)
        timestamp = DateTimeUtils.now()
        comment = Comment(
            id=f"comment_{DateTimeUtils.to_timestamp_ms(timestamp)}",
            user_id=user.id,
            username=user.username,
            text=text,
            timestamp=timestamp,
        )
        comments = post.comments + [comment]

        self.store.merge(f"{POSTS_PATH}/{post_id}", {'comments': comments_to_documents(comments)})
        post.comments = comments
        return post

    def _get_post_for_update(self, post_id: str) -> Post:
        try:
            return self.get_post(post_id)
        except TransportFailure as e:
            raise WriteError(f"게시물을 읽지 못해 변경할 수 없습니다: {e}") from e

    # --- 데모 데이터 ---
    def seed_if_empty(self, fixture_posts: Iterable[Post]) -> bool:
        """게시물 컬렉션이 비어 있을 때만 fixture 를 씁니다. 시드했으면 True."""
        existing = self.store.read(POSTS_PATH)
        if existing:
            logging.info("Database already contains data. Skipping seed.")
            return False

        logging.info("Seeding initial data...")
        self.store.write(POSTS_PATH, self._fixture_documents(fixture_posts))
        logging.info("Initial data seeded successfully!")
        return True

    def force_seed(self, fixture_posts: Iterable[Post]) -> None:
        """기존 데이터와 관계없이 게시물 컬렉션을 fixture 로 덮어씁니다. 디버그용."""
        documents = self._fixture_documents(fixture_posts)
        self.store.write(POSTS_PATH, documents)
        logging.info(f"Initial data force-seeded successfully! ({len(documents)} posts)")

    @staticmethod
    def _fixture_documents(fixture_posts: Iterable[Post]) -> dict:
        return {post.id: post_to_document(post) for post in fixture_posts}
