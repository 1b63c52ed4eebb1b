"""
Persisted site settings for django-solo-blog.

The settings file is JSON on local disk. It is created on first run with a
random secret and firstrun=True. Later saves always keep the secret that is
already on disk, so it cannot be replaced through a settings update. After
installation, update() changes the editable fields, including whether new
accounts may register.

Load once at startup and pass the SettingsFile around; SiteSettings snapshots
are immutable and save() swaps the current snapshot under a lock.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import os
import secrets
import threading
from pathlib import Path

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

# Fields an authenticated author may change after installation
EDITABLE_FIELDS = frozenset({"name", "hostname", "description", "allow_registrations"})


@dataclasses.dataclass(frozen=True)
class SiteSettings:
    name: str = ""
    hostname: str = ""
    description: str = ""
    firstrun: bool = True
    secret: str = ""
    allow_registrations: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "SiteSettings":
        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def as_dict(self) -> dict:
        return dataclasses.asdict(self)

    def public_dict(self) -> dict:
        """Settings safe to render: no secret, no first-run flag."""
        return {
            "name": self.name,
            "hostname": self.hostname,
            "description": self.description,
            "allow_registrations": self.allow_registrations,
        }


class SettingsFile:
    """Reads and writes SiteSettings at path."""

    def __init__(self, path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._current: SiteSettings | None = None

    @property
    def current(self) -> SiteSettings:
        if self._current is None:
            return self.load()
        return self._current

    def _read(self) -> dict | None:
        if not self.path.exists():
            return None
        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return None
        return json.loads(raw)

    def _write(self, settings: SiteSettings) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(settings.as_dict(), fh, indent=2)
        os.replace(tmp, self.path)

    def load(self) -> SiteSettings:
        """Read the file, creating it with a fresh secret if missing or empty."""
        with self._lock:
            data = self._read()
            if data is None:
                settings = SiteSettings(secret=secrets.token_hex(32), firstrun=True)
                self._write(settings)
                logger.info("Created site settings at %s", self.path)
            else:
                settings = SiteSettings.from_dict(data)
            self._current = settings
            return settings

    def save(self, settings: SiteSettings) -> SiteSettings:
        """Persist settings, keeping the secret already on disk."""
        with self._lock:
            on_disk = self._read() or {}
            secret = on_disk.get("secret") or settings.secret
            settings = dataclasses.replace(settings, secret=secret)
            self._write(settings)
            self._current = settings
            return settings

    def finish_installation(self, name: str, hostname: str, description: str) -> SiteSettings:
        """
        Store the site's identity and leave first-run mode.

        Only allowed while firstrun is still set.
        """
        current = self.current
        if not current.firstrun:
            logger.warning("Refused settings change after installation")
            raise ValidationError("settings can only be changed during installation")
        if not name or not hostname:
            raise ValidationError("name and hostname are required")
        return self.save(
            dataclasses.replace(
                current,
                name=name,
                hostname=hostname,
                description=description,
                firstrun=False,
            )
        )

    def update(self, **fields) -> SiteSettings:
        """
        Change settings of an installed site.

        Only name, hostname, description and allow_registrations are
        editable; the secret and the first-run flag are never written here.
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update {', '.join(sorted(unknown))}")
        current = self.current
        if current.firstrun:
            raise ValidationError("installation is not finished")
        for key in ("name", "hostname"):
            if key in fields and not fields[key]:
                raise ValidationError(f"{key} cannot be empty")
        if "allow_registrations" in fields and not isinstance(fields["allow_registrations"], bool):
            raise ValidationError("allow_registrations must be true or false")
        return self.save(dataclasses.replace(current, **fields))
