"""
Text helpers for post content: tag stripping, line-break normalization,
excerpt and slug derivation.
"""
from django.utils.html import strip_tags as _strip_tags
from django.utils.text import slugify

from .conf import blog_settings
from .exceptions import ValidationError

# Markup that ends a line in contenteditable output
LINE_BREAKS = ("</p>", "<br>", "</br>", "<br/>", "<br />")


def strip_tags(html):
    """Return html with all tags removed."""
    return _strip_tags(html or "")


def normalize_line_breaks(html):
    """
    Collapse <br> and </p> variants to newlines.

    Raw newlines are dropped first since they carry no meaning outside
    tags, so only the markup breaks survive as line breaks.
    """
    html = (html or "").replace("\r", "").replace("\n", "")
    for tag in LINE_BREAKS:
        html = html.replace(tag, "\n")
    return html


def plain_text(html):
    """Return content as plain text with markup line breaks kept as newlines."""
    return strip_tags(normalize_line_breaks(html))


def make_excerpt(content, words=None):
    """
    Return the first `words` whitespace-delimited tokens of content as plain text.

    Tokens are joined with single spaces before tags are stripped, so the
    excerpt never carries markup even when content is rich HTML.
    """
    words = words or blog_settings.EXCERPT_WORDS
    head = " ".join((content or "").split()[:words])
    return strip_tags(normalize_line_breaks(head).strip()).strip()


def make_slug(title):
    """
    Return the base slug for title.

    Raises ValidationError when the title has nothing to slugify or the slug
    would shadow a reserved route keyword.
    """
    slug = slugify(title or "")[:blog_settings.SLUG_MAX_LENGTH].strip("-")
    if not slug:
        raise ValidationError("title must contain letters or digits")
    check_reserved(slug)
    return slug


def check_reserved(slug):
    if slug in blog_settings.RESERVED_SLUGS:
        raise ValidationError(f"'{slug}' collides with a route name")
