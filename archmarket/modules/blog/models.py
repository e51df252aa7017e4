"""
Blog post model.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..shared.enums import TextChoices

POSTS = "blog_posts"


class BlogCategory(TextChoices):
    INDUSTRY_NEWS = "industry-news", "Industry news"
    DESIGN_TRENDS = "design-trends", "Design trends"
    SUSTAINABILITY = "sustainability", "Sustainability"
    TECHNOLOGY = "technology", "Technology"
    CASE_STUDIES = "case-studies", "Case studies"
    TIPS_TRICKS = "tips-tricks", "Tips & tricks"
    INTERVIEWS = "interviews", "Interviews"
    EVENTS = "events", "Events"


class PostStatus(TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"
    ARCHIVED = "archived", "Archived"


def find_comment(post: Dict[str, Any], comment_id: str) -> Optional[Dict[str, Any]]:
    for comment in post.get("comments", []):
        if comment.get("id") == comment_id:
            return comment
    return None


def with_like(likes: List[str], user_id: str) -> List[str]:
    return likes if user_id in likes else likes + [user_id]


def without_like(likes: List[str], user_id: str) -> List[str]:
    return [uid for uid in likes if uid != user_id]
