# src/gameblocker/blocker/versioning.py
from __future__ import annotations

import re
from dataclasses import dataclass, replace

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


@dataclass(frozen=True)
class Version:
    major: int = 1
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``vMAJOR.MINOR.PATCH`` (the leading ``v`` is optional)."""
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise ValueError(f"not a version string: {text!r}")
        major, minor, patch = (int(part) for part in match.groups())
        return cls(major=major, minor=minor, patch=patch)

    def bump_patch(self) -> "Version":
        return replace(self, patch=self.patch + 1)

    def as_dict(self) -> dict:
        return {"major": self.major, "minor": self.minor, "patch": self.patch}

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"
