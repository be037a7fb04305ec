# petigram/models/user.py
from dataclasses import dataclass

@dataclass
class User:
    """
    인증된 사용자. id 는 인증 제공자가 발급한 uid 이며,
    username/avatar 는 Realtime Database 'users/<uid>' 프로필 레코드에서 옵니다.
    """
    id: str
    email: str
    username: str
    avatar: str
