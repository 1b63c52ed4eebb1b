"""
Credential service for django-solo-blog.

Password digests come from django.contrib.auth.hashers, so the algorithm and
salt handling follow the host project's PASSWORD_HASHERS.
"""
import logging
import uuid
from datetime import timedelta

from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ImproperlyConfigured

from .conf import blog_settings
from .exceptions import HashingError

logger = logging.getLogger(__name__)


class CredentialService:
    """
    Hashes and verifies passwords, issues and expires recovery tokens.

    Only AccountManager calls into this service.
    """

    def __init__(self, storage, scheduler, dispatcher, ttl=None):
        self.storage = storage
        self.scheduler = scheduler
        self.dispatcher = dispatcher
        self.ttl = ttl or timedelta(minutes=blog_settings.RECOVERY_TTL_MINUTES)

    def hash(self, password):
        """Return a salted digest of password."""
        try:
            return make_password(password)
        except (TypeError, ValueError, ImproperlyConfigured) as exc:
            raise HashingError() from exc

    def verify(self, digest, password):
        """Check password against digest in constant time. Never raises."""
        if not digest or password is None:
            return False
        return check_password(password, digest)

    def issue_recovery(self, account):
        """
        Issue a fresh recovery token for account and notify its owner.

        Any previous token is overwritten. The expiry task is scheduled before
        the notification goes out, so a DispatchError leaves a valid token
        that still expires on time.
        """
        token = str(uuid.uuid4())
        self.storage.update_fields(account.pk, recovery=token)
        self.scheduler.schedule(self.ttl, self.expire_recovery, account.pk)
        logger.info("Recovery token issued for account %s", account.pk)

        self.dispatcher.send_recovery(account.pk, account.name, account.email, token)
        return token

    def expire_recovery(self, account_id):
        """Clear the recovery token of account_id, whatever its value."""
        self.storage.update_fields(account_id, recovery=None)
        logger.info("Recovery token expired for account %s", account_id)
