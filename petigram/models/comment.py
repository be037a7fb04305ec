# petigram/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime

from petigram.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    게시물 문서의 'comments' 리스트 안에 값으로 저장되는 댓글.
    생성 후에는 변경되지 않습니다.
    """
    id: str
    user_id: str
    username: str
    text: str
    timestamp: datetime = field(default_factory=DateTimeUtils.now)
