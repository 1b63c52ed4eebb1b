"""
Post lifecycle manager for django-solo-blog.

Posts move Draft -> Published, once, at the author's request. Every mutation
(update, publish, delete) passes the same authorization guard: the acting
session must belong to the post's author. Reads by slug count a view in the
background without delaying or failing the read.
"""
import logging

from django.db.models import F, Q
from django.utils import timezone

from .exceptions import (
    DuplicateRecord,
    NotFound,
    StorageError,
    Unauthorized,
    ValidationError,
)
from .sanitize import check_reserved, make_excerpt, make_slug

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"title", "content"})

# Attempts at finding a free slug when concurrent inserts race for it
SLUG_ATTEMPTS = 5


def authorize(identity, post):
    """Return True if identity may mutate post."""
    return identity is not None and identity.pk is not None and post.author_id == identity.pk


class PostManager:
    """Post CRUD, publishing and view counting."""

    def __init__(self, storage, accounts, scheduler):
        self.storage = storage
        self.accounts = accounts
        self.scheduler = scheduler

    def _require_author(self, identity, post):
        if not authorize(identity, post):
            logger.warning(
                "Account %s denied access to post %s", getattr(identity, "pk", None), post.pk
            )
            raise Unauthorized()

    def _load(self, slug):
        return self.storage.get_by_unique_field("slug", slug)

    def _load_for_author(self, session_token, slug):
        identity = self.accounts.resolve_session(session_token)
        post = self._load(slug)
        self._require_author(identity, post)
        return post

    def _free_slug(self, base):
        """Return base, or base-1, base-2, ... whichever is not taken yet."""
        slug = base
        counter = 1
        while True:
            try:
                self._load(slug)
            except NotFound:
                return slug
            slug = f"{base}-{counter}"
            counter += 1

    def create(self, session_token, title, content):
        """
        Create a draft post owned by the session's account.

        Raises Unauthenticated without a valid session and ValidationError
        for a missing title or content.
        """
        identity = self.accounts.resolve_session(session_token)
        title = (title or "").strip()
        if not title or not content:
            raise ValidationError("title and content are required")
        base = make_slug(title)

        now = timezone.now()
        for _ in range(SLUG_ATTEMPTS):
            slug = self._free_slug(base)
            try:
                post = self.storage.insert(
                    title=title,
                    content=content,
                    excerpt=make_excerpt(content),
                    slug=slug,
                    author_id=identity.pk,
                    published=False,
                    created_at=now,
                    updated_at=now,
                )
            except DuplicateRecord:
                continue
            logger.info("Post %s created by account %s", post.slug, identity.pk)
            return post
        raise StorageError()

    def get(self, slug):
        """
        Return the post with slug and count a view in the background.

        The returned post carries the view count from before this read.
        """
        check_reserved(slug)
        post = self._load(slug)
        self.scheduler.submit(self.increment_views, post.pk)
        return post

    def increment_views(self, post_id):
        self.storage.update_fields(post_id, view_count=F("view_count") + 1)

    def update(self, session_token, slug, **fields):
        """
        Apply title/content changes to the post with slug.

        Slug and author never change. Returns the post as committed.
        """
        post = self._load_for_author(session_token, slug)
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update {', '.join(sorted(unknown))}")

        changes = {"updated_at": timezone.now()}
        if "title" in fields:
            title = (fields["title"] or "").strip()
            if not title:
                raise ValidationError("title cannot be empty")
            changes["title"] = title
        if "content" in fields:
            if not fields["content"]:
                raise ValidationError("content cannot be empty")
            changes["content"] = fields["content"]
            changes["excerpt"] = make_excerpt(fields["content"])
        return self.storage.update_fields(post.pk, **changes)

    def publish(self, session_token, slug):
        """Publish the post with slug. Publishing twice changes nothing."""
        post = self._load_for_author(session_token, slug)
        if post.published:
            return
        self.storage.update_fields(post.pk, published=True, published_at=timezone.now())
        logger.info("Post %s published", post.slug)

    def delete(self, session_token, slug):
        post = self._load_for_author(session_token, slug)
        self.storage.delete(post.pk)
        logger.info("Post %s deleted", post.slug)

    def list_published(self):
        """Return published posts, newest first. Drafts never appear here."""
        return self.storage.list_filtered(Q(published=True), order=("-created_at", "-id"))

    def list_by_author(self, session_token):
        """Return every post of the session's account, oldest first."""
        identity = self.accounts.resolve_session(session_token)
        return self.storage.list_filtered(
            Q(author_id=identity.pk), order=("created_at", "id")
        )

    def posts_of(self, account_id):
        """Return the published posts of account_id, oldest first, for its profile."""
        return self.storage.list_filtered(
            Q(author_id=account_id, published=True), order=("created_at", "id")
        )
