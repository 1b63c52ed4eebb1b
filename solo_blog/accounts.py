"""
Account manager for django-solo-blog.

Registration, login, session resolution, profile updates and the password
recovery flow. Accounts handed back to callers have their credential fields
stripped.
"""
import copy
import logging
import zoneinfo

from django.utils.crypto import constant_time_compare

from .exceptions import (
    AuthError,
    DuplicateRecord,
    NotFound,
    Unauthenticated,
    Unauthorized,
    ValidationError,
)
from .sessions import new_token

logger = logging.getLogger(__name__)

# Fields update_profile may write. The recovery flow reuses the generic
# update, which is why digest and recovery are on the list.
PROFILE_FIELDS = frozenset({"name", "digest", "location", "recovery"})


def normalize_email(email):
    return (email or "").strip().lower()


def is_valid_location(location):
    """Check if location is a known IANA timezone name."""
    if not location:
        return False
    try:
        zoneinfo.ZoneInfo(location)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError):
        # OSError covers tz database directories such as "America"
        return False
    return True


def strip_credentials(account):
    """Return a detached copy of account without digest and recovery token."""
    public = copy.copy(account)
    public.digest = ""
    public.recovery = None
    return public


class AccountManager:
    """Account CRUD, login and session-to-identity resolution."""

    def __init__(self, storage, sessions, credentials, site=None):
        self.storage = storage
        self.sessions = sessions
        self.credentials = credentials
        self.site = site

    def registrations_open(self):
        return self.site is None or self.site.current.allow_registrations

    def register(self, name, email, password, location):
        """
        Create an account.

        Raises Unauthorized when the site settings close registrations, and
        ValidationError for missing fields, an e-mail address that is already
        registered, or a location that is not a timezone name.
        """
        if not self.registrations_open():
            logger.warning("Registration refused, registrations are closed")
            raise Unauthorized("registrations are closed")
        name = (name or "").strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise ValidationError("name, email and password are required")
        if not is_valid_location(location):
            raise ValidationError("invalid location")
        try:
            self.storage.get_by_unique_field("email", email)
        except NotFound:
            pass
        else:
            raise ValidationError("email exists")

        digest = self.credentials.hash(password)
        try:
            account = self.storage.insert(
                name=name, email=email, digest=digest, location=location
            )
        except DuplicateRecord:
            # Lost a race with a concurrent registration
            raise ValidationError("email exists") from None
        logger.info("Account %s registered", account.pk)
        return strip_credentials(account)

    def login(self, email, password):
        """
        Return the account for email if password matches its digest.

        Raises NotFound for an unknown address and AuthError for a wrong
        password.
        """
        account = self.storage.get_by_unique_field("email", normalize_email(email))
        if not self.credentials.verify(account.digest, password):
            logger.warning("Failed login for account %s", account.pk)
            raise AuthError("invalid credentials")
        logger.info("Account %s logged in", account.pk)
        return strip_credentials(account)

    def start_session(self, account):
        """Open a session for account and return its token."""
        token = new_token()
        self.sessions.set(token, account.pk)
        return token

    def end_session(self, token):
        self.sessions.clear(token)

    def resolve_session(self, token):
        """
        Return the account a session token belongs to.

        Raises Unauthenticated when the token is missing, unknown, or refers
        to an account that no longer exists.
        """
        account_id = self.sessions.get(token)
        if account_id is None:
            raise Unauthenticated()
        try:
            account = self.storage.get_by_id(account_id)
        except NotFound:
            self.sessions.clear(token)
            raise Unauthenticated() from None
        return strip_credentials(account)

    def get(self, account_id):
        return strip_credentials(self.storage.get_by_id(account_id))

    def list_accounts(self):
        return [strip_credentials(a) for a in self.storage.list_filtered(order=("id",))]

    def update_profile(self, account_id, **fields):
        """
        Write profile fields of account_id.

        Only name, digest, location and recovery can be changed here.
        """
        forbidden = set(fields) - PROFILE_FIELDS
        if forbidden:
            raise ValidationError(f"cannot update {', '.join(sorted(forbidden))}")
        if "location" in fields and not is_valid_location(fields["location"]):
            raise ValidationError("invalid location")
        if "digest" in fields and not fields["digest"]:
            raise ValidationError("digest cannot be empty")
        if "name" in fields and not (fields["name"] or "").strip():
            raise ValidationError("name cannot be empty")
        account = self.storage.update_fields(account_id, **fields)
        return strip_credentials(account)

    def request_recovery(self, email):
        """
        Issue a recovery token for the account registered with email.

        Raises NotFound for an unknown address. A DispatchError from the
        notification reaches the caller, but the token is already issued.
        """
        account = self.storage.get_by_unique_field("email", normalize_email(email))
        self.credentials.issue_recovery(account)

    def reset_password(self, account_id, new_password):
        """Replace the digest and clear any recovery token."""
        if not new_password:
            raise ValidationError("password is required")
        digest = self.credentials.hash(new_password)
        self.update_profile(account_id, digest=digest, recovery=None)
        logger.info("Password reset for account %s", account_id)

    def redeem_recovery(self, account_id, token, new_password):
        """Reset the password of account_id if token is its outstanding recovery token."""
        account = self.storage.get_by_id(account_id)
        if not account.recovery or not constant_time_compare(account.recovery, token or ""):
            logger.warning("Rejected recovery token for account %s", account_id)
            raise Unauthorized("invalid recovery token")
        self.reset_password(account_id, new_password)
