from .comment import Comment
from .post import Category, Post, PostDraft, extract_hashtags
from .user import User

__all__ = ['Category', 'Comment', 'Post', 'PostDraft', 'User', 'extract_hashtags']
