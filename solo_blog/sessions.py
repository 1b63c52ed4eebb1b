"""
Session store for django-solo-blog.

Maps an opaque session token to an account id. Tokens live in a Django cache
(SESSION_CACHE_ALIAS) under SESSION_KEY_PREFIX and expire after
SESSION_TTL_SECONDS.
"""
import secrets

from django.core.cache import caches

from .conf import blog_settings


def new_token():
    """Return a fresh URL-safe session token."""
    return secrets.token_urlsafe(32)


class CacheSessionStore:
    """Session store backed by the Django cache framework."""

    def __init__(self, alias=None, prefix=None, timeout=None):
        self.alias = alias or blog_settings.SESSION_CACHE_ALIAS
        self.prefix = prefix or blog_settings.SESSION_KEY_PREFIX
        self.timeout = timeout or blog_settings.SESSION_TTL_SECONDS

    @property
    def cache(self):
        return caches[self.alias]

    def _key(self, token):
        return f"{self.prefix}{token}"

    def get(self, token):
        """Return the account id stored for token, or None."""
        if not token:
            return None
        return self.cache.get(self._key(token))

    def set(self, token, account_id):
        self.cache.set(self._key(token), account_id, self.timeout)

    def clear(self, token):
        if token:
            self.cache.delete(self._key(token))
