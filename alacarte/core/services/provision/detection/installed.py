"""
L3 Detection — Installed-package detection.

Asks each supported package manager what it already has installed and
merges the answers into one set of identifiers. Every source is
optional: a manager that is missing or fails contributes nothing and
never aborts detection.

Each parser is a pure function over command output text.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable

from alacarte.core.services.provision.errors import CommandError

if TYPE_CHECKING:
    from alacarte.adapters.base import CommandRunner

logger = logging.getLogger(__name__)

_NPM_NAME_RE = re.compile(r"([A-Za-z0-9._-]+)@")


# ── Parsers ──


def parse_dpkg(text: str) -> set[str]:
    """``dpkg -l``: lines starting ``ii `` carry the name in field two."""
    pkgs: set[str] = set()
    for line in text.splitlines():
        if line.startswith("ii "):
            fields = line.split()
            if len(fields) > 1:
                pkgs.add(fields[1])
    return pkgs


def parse_brew(text: str) -> set[str]:
    """``brew list -1``: one formula per non-blank line."""
    return {line.strip() for line in text.splitlines() if line.strip()}


def parse_pipx(text: str) -> set[str]:
    """``pipx list``: lines starting ``  - `` name an installed app."""
    pkgs: set[str] = set()
    for line in text.splitlines():
        if line.startswith("  - "):
            name = line[4:].strip()
            if name:
                pkgs.add(name)
    return pkgs


def parse_cargo(text: str) -> set[str]:
    """``cargo install --list``: unindented ``<name> <version>:`` headers."""
    pkgs: set[str] = set()
    for line in text.splitlines():
        if line and not line[0].isspace() and " " in line:
            pkgs.add(line.split()[0])
    return pkgs


def parse_npm(text: str) -> set[str]:
    """``npm list -g --depth=0``: the name right before the first ``@``."""
    pkgs: set[str] = set()
    for line in text.splitlines():
        if "@" in line:
            m = _NPM_NAME_RE.search(line)
            if m:
                pkgs.add(m.group(1))
    return pkgs


def parse_pacman(text: str) -> set[str]:
    """``pacman -Q``: ``<name> <version>`` per line."""
    pkgs: set[str] = set()
    for line in text.splitlines():
        fields = line.split()
        if fields:
            pkgs.add(fields[0])
    return pkgs


def parse_flatpak(text: str) -> set[str]:
    """``flatpak list --app --columns=application``: one app id per line."""
    return {line.strip() for line in text.splitlines() if line.strip()}


# (label, argv, parser)
DETECTION_SOURCES: tuple[tuple[str, tuple[str, ...], Callable[[str], set[str]]], ...] = (
    ("dpkg", ("dpkg", "-l"), parse_dpkg),
    ("brew", ("brew", "list", "-1"), parse_brew),
    ("pipx", ("pipx", "list"), parse_pipx),
    ("cargo", ("cargo", "install", "--list"), parse_cargo),
    ("npm", ("npm", "list", "-g", "--depth=0"), parse_npm),
    ("pacman", ("pacman", "-Q"), parse_pacman),
    ("flatpak", ("flatpak", "list", "--app", "--columns=application"), parse_flatpak),
)


def _query(runner: CommandRunner, label: str, argv: tuple[str, ...]) -> str | None:
    try:
        out = runner.output(*argv)
    except (CommandError, OSError) as e:
        logger.debug("Installed-package query %s skipped: %s", label, e)
        return None
    return out.decode("utf-8", errors="replace")


def get_installed_packages(runner: CommandRunner) -> set[str]:
    """Return every identifier any supported package manager reports.

    Args:
        runner: Command runner used for the read-only queries.

    Returns:
        Union of all per-manager results. Empty when nothing answers.
    """
    installed: set[str] = set()
    for label, argv, parser in DETECTION_SOURCES:
        text = _query(runner, label, argv)
        if text is None:
            continue
        found = parser(text)
        logger.debug("Installed-package query %s: %d entries", label, len(found))
        installed |= found
    return installed
