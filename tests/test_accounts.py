"""
Tests for account registration, login, sessions and profile updates.
"""
from datetime import timedelta

import pytest

from solo_blog.accounts import is_valid_location, normalize_email
from solo_blog.exceptions import (
    AuthError,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from solo_blog.models import Account, Post


class TestRegister:
    """Tests for AccountManager.register."""

    def test_register_hashes_password(self, blog, author):
        """Test the stored digest is not the plaintext."""
        stored = Account.objects.get(pk=author.pk)
        assert stored.digest
        assert stored.digest != "testpass123"
        assert stored.location == "Europe/Helsinki"

    def test_register_returns_stripped_account(self, author):
        assert author.digest == ""
        assert author.recovery is None

    def test_duplicate_email(self, blog, author):
        """Test e-mail uniqueness, ignoring case and whitespace."""
        with pytest.raises(ValidationError, match="email exists"):
            blog.accounts.register("Other", " JUUSO@example.com ", "pass", "UTC")

    @pytest.mark.parametrize("location", ["Mars/Olympus", "America", "Europe", "Etc"])
    def test_invalid_location(self, blog, location):
        """Test unknown zones and tz database directory names are rejected."""
        with pytest.raises(ValidationError, match="invalid location"):
            blog.accounts.register("Juuso", "juuso@example.com", "pass", location)

    def test_missing_fields(self, blog):
        with pytest.raises(ValidationError):
            blog.accounts.register("", "juuso@example.com", "pass", "UTC")
        with pytest.raises(ValidationError):
            blog.accounts.register("Juuso", "juuso@example.com", "", "UTC")


class TestLogin:
    """Tests for AccountManager.login."""

    def test_login_succeeds_without_digest(self, blog, author):
        account = blog.accounts.login("juuso@example.com", "testpass123")
        assert account.pk == author.pk
        assert account.digest == ""
        assert "digest" not in account.as_dict()

    def test_login_does_not_touch_stored_digest(self, blog, author):
        blog.accounts.login("juuso@example.com", "testpass123")
        assert Account.objects.get(pk=author.pk).digest

    def test_wrong_password_is_auth_error(self, blog, author):
        """Test a wrong password never looks like a missing account."""
        with pytest.raises(AuthError):
            blog.accounts.login("juuso@example.com", "wrong")

    def test_unknown_email(self, blog, author):
        with pytest.raises(NotFound):
            blog.accounts.login("nobody@example.com", "testpass123")


class TestSessions:
    """Tests for session start, resolution and logout."""

    def test_resolve_session(self, blog, author, author_token):
        account = blog.accounts.resolve_session(author_token)
        assert account.pk == author.pk
        assert account.digest == ""

    def test_missing_token(self, blog):
        with pytest.raises(Unauthenticated):
            blog.accounts.resolve_session(None)

    def test_unknown_token(self, blog):
        with pytest.raises(Unauthenticated):
            blog.accounts.resolve_session("not-a-session")

    def test_end_session(self, blog, author_token):
        blog.accounts.end_session(author_token)
        with pytest.raises(Unauthenticated):
            blog.accounts.resolve_session(author_token)

    def test_stale_session_of_deleted_account(self, blog, author, author_token):
        Account.objects.filter(pk=author.pk).delete()
        with pytest.raises(Unauthenticated):
            blog.accounts.resolve_session(author_token)
        assert blog.sessions.get(author_token) is None


class TestProfile:
    """Tests for profile reads and updates."""

    def test_update_name_and_location(self, blog, author):
        account = blog.accounts.update_profile(author.pk, name="J. Doe", location="UTC")
        assert account.name == "J. Doe"
        assert account.location == "UTC"

    def test_update_rejects_other_fields(self, blog, author):
        """Test email cannot be changed through the profile path."""
        with pytest.raises(ValidationError, match="email"):
            blog.accounts.update_profile(author.pk, email="new@example.com")
        assert Account.objects.get(pk=author.pk).email == "juuso@example.com"

    @pytest.mark.parametrize("location", ["Nowhere", "America"])
    def test_update_rejects_bad_location(self, blog, author, location):
        with pytest.raises(ValidationError, match="invalid location"):
            blog.accounts.update_profile(author.pk, location=location)

    def test_update_missing_account(self, blog):
        with pytest.raises(NotFound):
            blog.accounts.update_profile(999, name="Ghost")

    def test_get_and_list(self, blog, author, author_token, intruder):
        assert blog.accounts.get(author.pk).name == "Juuso"
        accounts = blog.accounts.list_accounts()
        assert [a.pk for a in accounts] == [author.pk, intruder.pk]
        assert all(a.digest == "" for a in accounts)

        older = blog.posts.create(author_token, "Older", "Written first.")
        newer = blog.posts.create(author_token, "Newer", "Written second.")
        blog.posts.create(author_token, "Draft", "Not published.")
        Post.objects.filter(pk=newer.pk).update(
            created_at=older.created_at + timedelta(minutes=1)
        )
        blog.posts.publish(author_token, "newer")
        blog.posts.publish(author_token, "older")

        assert [p.slug for p in blog.posts.posts_of(author.pk)] == ["older", "newer"]
        assert blog.posts.posts_of(intruder.pk) == []


class TestHelpers:
    def test_normalize_email(self):
        assert normalize_email("  Foo@Example.COM ") == "foo@example.com"
        assert normalize_email(None) == ""

    @pytest.mark.parametrize("location", ["UTC", "Europe/Helsinki", "America/New_York"])
    def test_valid_locations(self, location):
        assert is_valid_location(location)

    @pytest.mark.parametrize(
        "location", ["", None, "Mars/Olympus", "../etc/passwd", "America", "Europe", "Etc"]
    )
    def test_invalid_locations(self, location):
        assert not is_valid_location(location)
