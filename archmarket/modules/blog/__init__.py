"""
Blog module - articles, comments and likes.

Components:
- Controllers: BlogController (``/blog``)
- Services: BlogService
- Faults: PostNotFoundFault, CommentNotFoundFault
"""

from .controllers import BlogController
from .faults import CommentNotFoundFault, PostNotFoundFault
from .models import POSTS, BlogCategory, PostStatus
from .services import BlogService

__all__ = [
    "BlogController",
    "BlogService",
    "PostNotFoundFault",
    "CommentNotFoundFault",
    "POSTS",
    "BlogCategory",
    "PostStatus",
]
