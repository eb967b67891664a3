"""
L2 Resolver — Composite key resolution.

A manifest value can be overridden per installer, OS and architecture
by writing a composite key. For a field ``prefix`` the most specific key
that yields a usable value wins:

    prefix:installer:osID:arch      apt:debian:x64
    prefix:installer:osID           apt:debian
    prefix:installer:osFamily:arch  apt:linux:x64
    prefix:installer:osFamily       apt:linux
    prefix:installer:arch           apt:x64
    prefix:installer                apt:apt   (installer-scoped field)
    prefix                          apt

Without an installer the same chain is used with the installer segment
left out. Plan building passes the installer name as the prefix and no
installer; wrapper generation passes a metadata prefix (``_bin``,
``_app``) together with an installer (``flatpak``, ``cask``).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)


def candidate_keys(
    prefix: str,
    installer: str | None,
    os_id: str,
    os_family: str,
    arch: str,
) -> list[str]:
    """Return the lookup chain for a field, most specific first.

    Empty segments (unknown OS id, unknown arch) are skipped, and
    duplicate keys are only tried once.
    """
    head = f"{prefix}:{installer}" if installer else prefix
    chain: list[str] = []
    if os_id:
        if arch:
            chain.append(f"{head}:{os_id}:{arch}")
        chain.append(f"{head}:{os_id}")
    if os_family:
        if arch:
            chain.append(f"{head}:{os_family}:{arch}")
        chain.append(f"{head}:{os_family}")
    if arch:
        chain.append(f"{head}:{arch}")
    if installer:
        chain.append(head)
    chain.append(prefix)

    seen: set[str] = set()
    out: list[str] = []
    for key in chain:
        if key not in seen:
            seen.add(key)
            out.append(key)
    return out


def _usable(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], str):
        return value[0]
    return None


def resolve_field(
    values: Mapping[str, Any],
    prefix: str,
    installer: str | None,
    os_id: str,
    os_family: str,
    arch: str,
) -> str | None:
    """Resolve the most specific usable value for *prefix*.

    A string value is returned as-is. A non-empty list yields its first
    element when that element is a string. Any other shape (numbers,
    maps, empty lists) does not count as a match and the next key in the
    chain is tried.

    Returns:
        The resolved string, or ``None`` when no key in the chain matches.
    """
    for key in candidate_keys(prefix, installer, os_id, os_family, arch):
        if key not in values:
            continue
        value = _usable(values[key])
        if value is not None:
            return value
        logger.debug("Ignoring non-string value for %s: %r", key, values[key])
    return None
