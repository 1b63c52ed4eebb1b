"""
Models for django-solo-blog.

All models are importable from solo_blog.models:

    from solo_blog.models import Account, Post
"""
from .accounts import Account
from .posts import Post

__all__ = [
    "Account",
    "Post",
]
