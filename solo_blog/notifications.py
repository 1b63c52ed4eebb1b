"""
Recovery notification dispatch for django-solo-blog.

Sends the password recovery e-mail through django.core.mail, so the delivery
backend (SMTP, console, locmem in tests) is whatever EMAIL_BACKEND says.
"""
import logging
import smtplib

from django.conf import settings
from django.core.mail import send_mail

from .conf import blog_settings
from .exceptions import DispatchError

logger = logging.getLogger(__name__)

RECOVERY_SUBJECT = "Reset your password"

RECOVERY_BODY = """Hello {name},

Somebody asked to reset the password of your account. If it was you, open
the link below within {ttl} minutes to choose a new password:

{url}

If you did not ask for this, you can ignore this message.
"""


class EmailRecoveryDispatcher:
    """Sends recovery tokens by e-mail."""

    def __init__(self, from_email=None, url_template=None, base_url=""):
        self.from_email = from_email or blog_settings.RECOVERY_FROM_EMAIL or settings.DEFAULT_FROM_EMAIL
        self.url_template = url_template or blog_settings.RECOVERY_URL
        self.base_url = base_url.rstrip("/")

    def recovery_url(self, account_id, token):
        return self.base_url + self.url_template.format(id=account_id, token=token)

    def send_recovery(self, account_id, name, email, token):
        """
        Send the recovery link for account_id to email.

        Raises DispatchError when the backend fails to deliver.
        """
        body = RECOVERY_BODY.format(
            name=name,
            ttl=blog_settings.RECOVERY_TTL_MINUTES,
            url=self.recovery_url(account_id, token),
        )
        try:
            send_mail(RECOVERY_SUBJECT, body, self.from_email, [email])
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Recovery e-mail for account %s failed: %s", account_id, exc)
            raise DispatchError() from exc
        logger.info("Recovery e-mail sent for account %s", account_id)
