"""
Account model for django-solo-blog.
"""
from django.db import models
from django.utils import timezone


class Account(models.Model):
    """
    Blog author account.

    The password is stored only as a salted digest. The recovery field holds at
    most one outstanding recovery token, cleared on reset or when its expiry
    task fires. Neither field is ever serialized outward.
    """

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=254, unique=True)
    digest = models.CharField(max_length=255)
    recovery = models.CharField(max_length=64, null=True, blank=True)
    location = models.CharField(
        max_length=64,
        default="UTC",
        help_text="IANA timezone name, e.g. Europe/Helsinki",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def has_pending_recovery(self):
        """Check if a recovery token is outstanding."""
        return bool(self.recovery)

    def as_dict(self):
        """Return the outward representation, without credential fields."""
        return {
            "id": self.pk,
            "name": self.name,
            "email": self.email,
            "location": self.location,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
