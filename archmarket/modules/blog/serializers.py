"""
Blog module serializers.
"""

from archmarket.serializers import (
    BooleanField,
    CharField,
    ChoiceField,
    DateTimeField,
    IntegerField,
    JSONField,
    ListField,
    Serializer,
)

from .models import BlogCategory, PostStatus


class ImageSerializer(Serializer):
    url = CharField(max_length=2000)
    alt = CharField(max_length=200, required=False, allow_blank=True)
    caption = CharField(max_length=300, required=False, allow_blank=True)


class SeoSerializer(Serializer):
    metaTitle = CharField(max_length=200, required=False, allow_blank=True)
    metaDescription = CharField(max_length=300, required=False, allow_blank=True)
    keywords = ListField(child=CharField(max_length=50), required=False)
    ogImage = CharField(max_length=2000, required=False, allow_blank=True)


class PostCreateSerializer(Serializer):
    title = CharField(min_length=5, max_length=200)
    excerpt = CharField(min_length=10, max_length=300)
    content = CharField(min_length=20)
    category = ChoiceField(
        BlogCategory.values,
        error_messages={"required": "Invalid category", "invalid": "Invalid category"},
    )
    tags = ListField(child=CharField(max_length=50), required=False)
    featuredImage = ImageSerializer(required=False, allow_null=True)
    images = ListField(child=ImageSerializer(), required=False)
    seo = SeoSerializer(required=False, allow_null=True)


class PostUpdateSerializer(PostCreateSerializer):
    status = ChoiceField(PostStatus.values, required=False)
    isFeatured = BooleanField(required=False)


class CommentSerializer(Serializer):
    content = CharField(min_length=2, max_length=1000)


class PostSerializer(Serializer):
    id = CharField()
    title = CharField()
    slug = CharField()
    excerpt = CharField()
    content = CharField()
    author = CharField()
    category = CharField()
    tags = ListField(child=CharField())
    featuredImage = JSONField()
    images = JSONField()
    status = CharField()
    isFeatured = BooleanField()
    isPublished = BooleanField()
    publishedAt = DateTimeField()
    readTime = IntegerField()
    viewCount = IntegerField()
    likeCount = IntegerField()
    commentCount = IntegerField()
    seo = JSONField()
    comments = JSONField()
    createdAt = DateTimeField()
    updatedAt = DateTimeField()


def render_post(post: dict) -> dict:
    return PostSerializer(instance=post).data
