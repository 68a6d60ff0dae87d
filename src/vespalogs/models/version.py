"""Semantic versions as reported by Vespa clients and platforms."""

from __future__ import annotations

import re
from dataclasses import dataclass

_VERSION_RE = re.compile(
    r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?(?:-(?P<label>[0-9A-Za-z.-]+))?$"
)


@dataclass(frozen=True, slots=True)
class Version:
    """A major.minor.patch version with an optional pre-release label."""

    major: int
    minor: int = 0
    patch: int = 0
    label: str = ""

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``8.358.0``, ``v8.1`` or ``8.0.0-rc1``. Raises ValueError."""
        m = _VERSION_RE.match(text.strip())
        if not m:
            raise ValueError(f"invalid version: {text!r}")
        return cls(
            major=int(m.group("major")),
            minor=int(m.group("minor") or 0),
            patch=int(m.group("patch") or 0),
            label=m.group("label") or "",
        )

    @property
    def is_dev(self) -> bool:
        """True for unreleased builds, which report 0.0.0."""
        return (self.major, self.minor, self.patch) == (0, 0, 0)

    def _key(self) -> tuple[int, int, int, int, str]:
        # A labelled version precedes the release it labels.
        return (self.major, self.minor, self.patch, 0 if self.label else 1, self.label)

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        base = f"{self.major}.{self.minor}.{self.patch}"
        return f"{base}-{self.label}" if self.label else base


@dataclass(frozen=True, slots=True)
class VersionRequirement:
    """An observed version checked against the version a feature requires."""

    observed: Version
    required: Version

    @property
    def compatible(self) -> bool:
        return self.observed >= self.required
