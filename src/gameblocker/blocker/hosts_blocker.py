# src/gameblocker/blocker/hosts_blocker.py
"""Hosts-file model behind the generated scripts.

The batch scripts edit the real hosts file on the end user's machine. This
module describes the same edits as plain list-of-lines transforms so the
block/unblock behaviour can be reasoned about (and tested) without cmd.exe.
"""
from __future__ import annotations

import re
from typing import Iterable, List

from .config import BLOCK_MARK, REDIRECT_IP


def start_marker(version: str) -> str:
    return f"# ====== {BLOCK_MARK} {version} - START ======"


def end_marker(version: str) -> str:
    return f"# ====== {BLOCK_MARK} {version} - END ======"


def registered_domain(url: str) -> str:
    """Last two dot-separated labels of a hostname (``sub.games.com`` -> ``games.com``)."""
    parts = url.split(".")
    if len(parts) >= 2:
        return ".".join(parts[-2:])
    return url


def unique_domains(urls: Iterable[str]) -> List[str]:
    """Distinct registered domains in first-seen order."""
    seen: List[str] = []
    for url in urls:
        domain = registered_domain(url)
        if domain not in seen:
            seen.append(domain)
    return seen


# A hostname is delimited by a space, tab or (for subdomains) a dot on the
# left, and by end of line, space, tab or a comment on the right. findstr
# has no \t escape, so the tab is a literal character in both classes.
_LEFT = "[ \t.]"
_RIGHT = "[ \t#]"


def escape_domain(domain: str) -> str:
    """Escape ``domain`` for a findstr (and Python ``re``) regular expression."""
    return re.sub(r"([.\\\[\]^$*])", r"\\\1", domain)


def domain_patterns(domain: str) -> List[str]:
    """Regexes matching a hosts line that names ``domain`` or one of its subdomains.

    The same strings are emitted into the unblock script's findstr calls.
    """
    escaped = escape_domain(domain)
    return [f"{_LEFT}{escaped}$", f"{_LEFT}{escaped}{_RIGHT}"]


def names_domain(line: str, domain: str) -> bool:
    return any(re.search(p, line, re.IGNORECASE) for p in domain_patterns(domain))


def block_lines(lines: Iterable[str], urls: Iterable[str], version: str) -> List[str]:
    out = list(lines)
    out.append("")
    out.append(start_marker(version))
    for url in urls:
        out.append(f"{REDIRECT_IP} {url}")
    out.append(end_marker(version))
    return out


def unblock_lines(lines: Iterable[str], domains: Iterable[str]) -> List[str]:
    """Drop tagged lines and any line naming one of ``domains`` (or a subdomain)."""
    domains = list(domains)
    return [
        line
        for line in lines
        if BLOCK_MARK not in line and not any(names_domain(line, d) for d in domains)
    ]
