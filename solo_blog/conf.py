"""
Configuration settings for django-solo-blog.

Override these in your Django settings.py:

    SOLO_BLOG = {
        'RECOVERY_TTL_MINUTES': 180,
        'SEARCH_THRESHOLD': 0.9,
        'RESERVED_SLUGS': ['new'],
        ...
    }

The persisted site settings file (name, hostname, secret, first-run flag) is
handled separately by solo_blog.site_settings; point SITE_SETTINGS_PATH at it
to have BlogEngine load it on startup.
"""
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

DEFAULTS = {
    # Password recovery
    "RECOVERY_TTL_MINUTES": 180,
    "RECOVERY_FROM_EMAIL": None,  # falls back to DEFAULT_FROM_EMAIL
    "RECOVERY_URL": "/user/reset/{id}/{token}",

    # Sessions
    "SESSION_CACHE_ALIAS": "default",
    "SESSION_KEY_PREFIX": "solo_blog:session:",
    "SESSION_TTL_SECONDS": 60 * 60 * 24 * 14,

    # Posts
    "EXCERPT_WORDS": 15,
    "SLUG_MAX_LENGTH": 100,
    # Slugs that collide with route keywords, e.g. /post/new
    "RESERVED_SLUGS": ["new"],

    # Search
    "SEARCH_THRESHOLD": 0.9,

    # Background tasks
    "BACKGROUND_WORKERS": 4,

    # Site settings file, None disables it
    "SITE_SETTINGS_PATH": None,
}


class BlogSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from solo_blog.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid solo_blog setting: {name}")

        user_settings = getattr(settings, "SOLO_BLOG", {})
        return user_settings.get(name, DEFAULTS[name])

    @property
    def RESERVED_SLUGS(self):
        """Return reserved slugs as a frozenset for membership tests."""
        user_settings = getattr(settings, "SOLO_BLOG", {})
        return frozenset(user_settings.get("RESERVED_SLUGS", DEFAULTS["RESERVED_SLUGS"]))


blog_settings = BlogSettings()


def validate_settings():
    """
    Check configured values and raise ImproperlyConfigured on bad ones.

    Called from AppConfig.ready() so misconfiguration surfaces at startup.
    """
    if blog_settings.RECOVERY_TTL_MINUTES <= 0:
        raise ImproperlyConfigured(
            f"SOLO_BLOG['RECOVERY_TTL_MINUTES'] must be > 0, "
            f"got {blog_settings.RECOVERY_TTL_MINUTES}"
        )
    if blog_settings.EXCERPT_WORDS <= 0:
        raise ImproperlyConfigured(
            f"SOLO_BLOG['EXCERPT_WORDS'] must be > 0, got {blog_settings.EXCERPT_WORDS}"
        )
    if not 0.0 < blog_settings.SEARCH_THRESHOLD <= 1.0:
        raise ImproperlyConfigured(
            f"SOLO_BLOG['SEARCH_THRESHOLD'] must be in (0, 1], "
            f"got {blog_settings.SEARCH_THRESHOLD}"
        )
    if blog_settings.BACKGROUND_WORKERS < 1:
        raise ImproperlyConfigured(
            f"SOLO_BLOG['BACKGROUND_WORKERS'] must be >= 1, "
            f"got {blog_settings.BACKGROUND_WORKERS}"
        )
    if "{token}" not in blog_settings.RECOVERY_URL:
        raise ImproperlyConfigured("SOLO_BLOG['RECOVERY_URL'] must contain '{token}'")
