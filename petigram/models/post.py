# petigram/models/post.py
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List

from petigram.models.comment import Comment
from petigram.utils.datetime_utils import DateTimeUtils

# 웹 클라이언트의 /#\w+/g 와 같이 ASCII 단어 문자만 토큰으로 봅니다.
HASHTAG_PATTERN = re.compile(r'#\w+', re.ASCII)


class Category(Enum):
    """게시물 카테고리. 생성 시 하나를 고르며 이후 바뀌지 않습니다."""
    DOG = "dog"
    CAT = "cat"
    BIRD = "bird"
    OTHER = "other"


def extract_hashtags(caption: str) -> List[str]:
    """
    캡션에서 '#단어' 토큰을 등장 순서대로 추출합니다.
    대소문자와 중복은 그대로 유지됩니다.
    """
    return HASHTAG_PATTERN.findall(caption or "")


@dataclass
class PostDraft:
    """업로드 모달에서 넘어오는 새 게시물 입력값."""
    image_url: str
    caption: str
    category: Category
    filter: str = "none"


@dataclass
class Post:
    """
    Realtime Database 'posts/<id>' 문서 구조를 정의하는 데이터클래스.
    username/user_avatar 는 작성 시점의 프로필 스냅샷입니다.
    """
    id: str
    user_id: str
    username: str
    user_avatar: str
    image_url: str
    caption: str
    category: Category
    hashtags: List[str] = field(default_factory=list)
    likes: List[str] = field(default_factory=list) # 좋아요를 누른 user_id 목록 (중복 없음)
    comments: List[Comment] = field(default_factory=list)
    timestamp: datetime = field(default_factory=DateTimeUtils.now)
    filter: str = "none"

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.likes
