"""
Blog Faults.
"""

from archmarket.faults import FaultDomain, NotFoundFault

BLOG_DOMAIN = FaultDomain("blog", "Blog faults")


class PostNotFoundFault(NotFoundFault):
    domain = BLOG_DOMAIN
    code = "POST_NOT_FOUND"

    def __init__(self, post_id: str):
        super().__init__("Blog post not found", metadata={"post_id": post_id})


class CommentNotFoundFault(NotFoundFault):
    domain = BLOG_DOMAIN
    code = "COMMENT_NOT_FOUND"

    def __init__(self, comment_id: str):
        super().__init__("Comment not found", metadata={"comment_id": comment_id})
