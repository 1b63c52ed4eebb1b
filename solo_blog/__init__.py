"""
django-solo-blog - the core of a single-author Django blog engine.

Features:
- Accounts with salted password digests and cache-backed session tokens
- Password recovery tokens that expire on a background timer
- Draft/publish workflow with author-only mutation
- Stable slugs and plain-text excerpts derived from post content
- Asynchronous view counting
- Fuzzy word-level search (Jaro-Winkler)
"""

__version__ = "0.1.0"
__author__ = "Nestor Wheelock"

default_app_config = "solo_blog.apps.SoloBlogConfig"
