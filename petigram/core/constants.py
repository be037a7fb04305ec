# petigram/core/constants.py
"""빈 저장소를 채울 데모 게시물(fixture set)."""

from datetime import datetime, timedelta
from typing import List, Optional

from petigram.models.comment import Comment
from petigram.models.post import Category, Post
from petigram.utils.datetime_utils import DateTimeUtils


def build_demo_posts(now: Optional[datetime] = None) -> List[Post]:
    """호출 시각을 기준으로 상대 시간이 찍힌 데모 게시물 3개를 만듭니다."""
    now = now or DateTimeUtils.now()
    return [
        Post(
            id='post_1',
            user_id='user2',
            username='GoldenRetrieverLover',
            user_avatar='https://picsum.photos/id/237/48/48',
            image_url='https://picsum.photos/id/1025/600/600',
            caption='Enjoying a beautiful day at the park! ☀️ #dogsofinstagram #goldenretriever',
            hashtags=['#dogsofinstagram', '#goldenretriever'],
            likes=['user1', 'user2', 'user3'],
            comments=[
                Comment(id='comment_1', user_id='user3', username='PoodleFan', text='So cute!',
                        timestamp=now - timedelta(minutes=5)),
            ],
            category=Category.DOG,
            timestamp=now - timedelta(minutes=10),
            filter='none',
        ),
        Post(
            id='post_2',
            user_id='user3',
            username='CatPerson',
            user_avatar='https://picsum.photos/id/10/48/48',
            image_url='https://picsum.photos/id/1074/600/600',
            caption='Nap time is the best time. 😴 #catlife #sleepycat',
            hashtags=['#catlife', '#sleepycat'],
            likes=['user4'],
            comments=[],
            category=Category.CAT,
            timestamp=now - timedelta(hours=2),
            filter='sepia(0.6)',
        ),
        Post(
            id='post_3',
            user_id='user4',
            username='BirdWatcher',
            user_avatar='https://picsum.photos/id/40/48/48',
            image_url='https://picsum.photos/id/1062/600/600',
            caption='My colorful friend saying hello! #parrot #birdlovers',
            hashtags=['#parrot', '#birdlovers'],
            likes=['user1', 'user5', 'user6', 'user7'],
            comments=[
                Comment(id='comment_2', user_id='user1', username='NatureLover', text='Stunning colors!',
                        timestamp=now - timedelta(minutes=30)),
                Comment(id='comment_3', user_id='user3', username='CatPerson', text='Wow!',
                        timestamp=now - timedelta(minutes=25)),
            ],
            category=Category.BIRD,
            timestamp=now - timedelta(hours=24),
            filter='grayscale(1)',
        ),
    ]
