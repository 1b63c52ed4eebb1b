"""
Shared fixtures for django-solo-blog tests.
"""
import pytest
from django.core.cache import caches

from solo_blog.engine import BlogEngine
from solo_blog.tasks import run_task, to_seconds


class ManualScheduler:
    """Scheduler that queues tasks until the test runs them."""

    def __init__(self):
        self.submitted = []
        self.delayed = []

    def submit(self, func, *args, **kwargs):
        self.submitted.append((func, args, kwargs))

    def schedule(self, delay, func, *args, **kwargs):
        self.delayed.append((to_seconds(delay), func, args, kwargs))

    def run_pending(self):
        tasks, self.submitted = self.submitted, []
        for func, args, kwargs in tasks:
            run_task(func, *args, **kwargs)

    def fire_delayed(self):
        tasks, self.delayed = self.delayed, []
        for _, func, args, kwargs in tasks:
            run_task(func, *args, **kwargs)

    def shutdown(self, wait=True):
        pass


@pytest.fixture(autouse=True)
def clear_sessions():
    """Sessions live in locmem cache, which outlives a test."""
    caches["default"].clear()
    yield
    caches["default"].clear()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def blog(db, scheduler):
    """Create a blog engine with a manual scheduler."""
    return BlogEngine(scheduler=scheduler)


@pytest.fixture
def author(blog):
    """Register the blog's author."""
    return blog.accounts.register(
        name="Juuso",
        email="juuso@example.com",
        password="testpass123",
        location="Europe/Helsinki",
    )


@pytest.fixture
def author_token(blog, author):
    return blog.accounts.start_session(author)


@pytest.fixture
def intruder(blog):
    """Register a second account that does not own the author's posts."""
    return blog.accounts.register(
        name="Mallory",
        email="mallory@example.com",
        password="otherpass456",
        location="UTC",
    )


@pytest.fixture
def intruder_token(blog, intruder):
    return blog.accounts.start_session(intruder)


@pytest.fixture
def post(blog, author_token):
    """Create a draft post."""
    return blog.posts.create(author_token, "Hello World", "My first <b>post</b> body.")
