"""
Fuzzy search over published posts.

Each word of a post is compared with the whole query using Jaro-Winkler
similarity. A word scoring at least SEARCH_THRESHOLD (0.9 by default) matches;
that is strict enough to only forgive a one letter typo. Scoring is case
sensitive: "GO" shares no letter with "go". Content is scanned before the
title, and the first matching word ends the scan for that post.
"""
import jellyfish

from .conf import blog_settings
from .exceptions import ValidationError
from .sanitize import plain_text


def similarity(word, query):
    """Return the Jaro-Winkler similarity of word and query."""
    return jellyfish.jaro_winkler_similarity(word, query)


class SearchEngine:
    """Word-level approximate matching over PostManager.list_published()."""

    def __init__(self, posts, threshold=None):
        self.posts = posts
        self.threshold = threshold or blog_settings.SEARCH_THRESHOLD

    def _any_word_matches(self, text, query):
        return any(similarity(word, query) >= self.threshold for word in text.split())

    def matches(self, post, query):
        """Check if any content word, then any title word, is close to query."""
        return (
            self._any_word_matches(plain_text(post.content), query)
            or self._any_word_matches(post.title, query)
        )

    def search(self, query, corpus=None):
        """
        Return posts matching query, in corpus order.

        corpus defaults to the published posts, newest first. No ranking by
        score is applied and a post appears at most once. Drafts in a
        caller-supplied corpus are skipped.
        """
        query = (query or "").strip()
        if not query:
            raise ValidationError("query is required")
        if corpus is None:
            corpus = self.posts.list_published()
        return [post for post in corpus if post.published and self.matches(post, query)]
