"""
Process-wide blog context.

Build one BlogEngine at startup (for instance in your project's AppConfig or
WSGI module) and hand it to request handlers:

    from solo_blog.engine import BlogEngine

    blog = BlogEngine()

    def login_view(request):
        account = blog.accounts.login(request.POST["email"], request.POST["password"])
        token = blog.accounts.start_session(account)
        ...

    def post_view(request, slug):
        post = blog.posts.get(slug)
        ...

Collaborators can be swapped through keyword arguments, which is how the
tests inject a manual scheduler.
"""
import logging

from django.core.exceptions import ImproperlyConfigured

from .accounts import AccountManager
from .conf import blog_settings
from .credentials import CredentialService
from .models import Account, Post
from .notifications import EmailRecoveryDispatcher
from .publishing import PostManager
from .search import SearchEngine
from .sessions import CacheSessionStore
from .site_settings import SettingsFile
from .storage import ModelStorage
from .tasks import TaskScheduler

logger = logging.getLogger(__name__)


class BlogEngine:
    """Wires storage, sessions, background tasks and notifications into the managers."""

    def __init__(
        self,
        scheduler=None,
        sessions=None,
        dispatcher=None,
        account_storage=None,
        post_storage=None,
        site=None,
    ):
        self.scheduler = scheduler or TaskScheduler(max_workers=blog_settings.BACKGROUND_WORKERS)
        self.sessions = sessions or CacheSessionStore()
        self.dispatcher = dispatcher or EmailRecoveryDispatcher()

        if site is None and blog_settings.SITE_SETTINGS_PATH:
            site = SettingsFile(blog_settings.SITE_SETTINGS_PATH)
            site.load()
        self.site = site

        account_storage = account_storage or ModelStorage(Account)
        post_storage = post_storage or ModelStorage(Post)

        self.credentials = CredentialService(account_storage, self.scheduler, self.dispatcher)
        self.accounts = AccountManager(
            account_storage, self.sessions, self.credentials, site=self.site
        )
        self.posts = PostManager(post_storage, self.accounts, self.scheduler)
        self.search = SearchEngine(self.posts)
        logger.info("Blog engine ready")

    def shutdown(self, wait=True):
        """Stop background tasks. Pending recovery expiries are dropped."""
        self.scheduler.shutdown(wait=wait)

    def update_settings(self, session_token, **fields):
        """Change site settings on behalf of a signed-in account."""
        identity = self.accounts.resolve_session(session_token)
        if self.site is None:
            raise ImproperlyConfigured("SOLO_BLOG['SITE_SETTINGS_PATH'] is not set")
        settings = self.site.update(**fields)
        logger.info("Site settings changed by account %s", identity.pk)
        return settings
