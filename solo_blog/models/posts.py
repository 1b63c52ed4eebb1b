"""
Post model for django-solo-blog.
"""
from django.db import models
from django.utils import timezone


class Post(models.Model):
    """
    Blog post.

    Lifecycle:
    - Created by its author as a draft
    - Published exactly once by its author (no way back to draft)
    - Edited and deleted only by its author

    The slug is derived from the title once, at creation, and is the lookup
    key from then on. The excerpt is re-derived whenever content changes.
    Writes go through solo_blog.publishing.PostManager, never through save().
    """

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    content = models.TextField()
    excerpt = models.TextField(blank=True)

    author = models.ForeignKey(
        "solo_blog.Account",
        on_delete=models.CASCADE,
        related_name="posts",
    )

    # Status
    published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)

    # Engagement stats
    view_count = models.PositiveIntegerField(default=0)

    # Timestamps. updated_at is set explicitly because queryset updates
    # bypass auto_now.
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["published", "-created_at"]),
            models.Index(fields=["author", "created_at"]),
        ]

    def __str__(self):
        return self.title

    @property
    def is_draft(self):
        return not self.published

    @property
    def was_updated(self):
        """Check if the post has been edited after creation."""
        return self.updated_at > self.created_at

    def as_dict(self):
        """Return the outward representation of the post."""
        return {
            "id": self.pk,
            "title": self.title,
            "slug": self.slug,
            "content": self.content,
            "excerpt": self.excerpt,
            "author": self.author_id,
            "published": self.published,
            "view_count": self.view_count,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
