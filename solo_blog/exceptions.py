"""
Error taxonomy for django-solo-blog.

Every error the core raises derives from BlogError, so request handlers can map
the concrete kinds to responses:

    NotFound        -> 404
    Unauthenticated -> 401 (no or invalid session)
    Unauthorized    -> 401/403 (ownership or token check failed)
    AuthError       -> 401 (wrong credentials on login)
    ValidationError -> 400/406
    StorageError    -> 500, message carries no internal detail
    DispatchError   -> 502, recovery e-mail could not be sent
"""


class BlogError(Exception):
    """Base class for all solo_blog errors."""

    default_message = "blog error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(BlogError):
    default_message = "not found"


class Unauthorized(BlogError):
    default_message = "unauthorized"


class Unauthenticated(Unauthorized):
    default_message = "unauthenticated"


class AuthError(BlogError):
    default_message = "invalid credentials"


class ValidationError(BlogError):
    default_message = "invalid input"


class StorageError(BlogError):
    """Opaque persistence failure. The original exception is chained."""

    default_message = "internal server error"


class DuplicateRecord(StorageError):
    """A unique constraint rejected an insert or update."""

    default_message = "record already exists"


class DispatchError(BlogError):
    default_message = "could not deliver notification"


class HashingError(BlogError):
    default_message = "could not hash password"
