"""
L5 Orchestration — Post-install launcher wrappers.

Flatpak apps and macOS application bundles do not put a command on
``PATH``. For entries that declare a binary name for them, a small bash
wrapper is written to ``~/.local/bin/<family>/<bin>``:

    flatpak   flatpak run '<app-id>' "$@"
    cask      open '<path to .app>' "$@"

Wrappers are written through the command runner, so a dry run writes
nothing. Re-running produces identical files.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import TYPE_CHECKING

from alacarte.core.models.manifest import Manifest, SoftwareEntry
from alacarte.core.services.provision.detection.system_probe import SystemProbe
from alacarte.core.services.provision.errors import CommandError
from alacarte.core.services.provision.resolver.key_resolution import resolve_field

if TYPE_CHECKING:
    from alacarte.adapters.base import CommandRunner

logger = logging.getLogger(__name__)

SYSTEM_APPS_DIR = Path("/Applications")


def wrapper_dir(home: Path, family: str) -> Path:
    return home / ".local" / "bin" / family


def wrapper_script(command: str) -> str:
    """Full text of a wrapper that runs *command* with the caller's arguments."""
    return f'#!/usr/bin/env bash\n{command} "$@"\n'


def write_wrapper(runner: CommandRunner, path: Path, command: str) -> None:
    """Create (or overwrite) an executable wrapper at *path*."""
    lines = wrapper_script(command).splitlines()
    quoted = " ".join(shlex.quote(line) for line in lines)
    runner.run("mkdir", "-p", str(path.parent))
    runner.run("sh", "-c", f"printf '%s\\n' {quoted} > {shlex.quote(str(path))}")
    runner.run("chmod", "+x", str(path))


def _valid_bin_name(bin_name: str) -> bool:
    """A wrapper name must be a single file name inside its family directory."""
    if bin_name in (".", "..") or "/" in bin_name or "\0" in bin_name:
        logger.warning("Ignoring wrapper name %r: not a plain file name", bin_name)
        return False
    return True


def _resolve(entry: SoftwareEntry, probe: SystemProbe, prefix: str, installer: str | None) -> str:
    return resolve_field(
        entry.values, prefix, installer, probe.os_id, probe.os_family, probe.arch,
    ) or ""


def flatpak_wrapper(
    entry: SoftwareEntry, probe: SystemProbe, home: Path,
) -> tuple[Path, str] | None:
    """Return ``(wrapper path, command)`` for a flatpak entry, or ``None``."""
    app_id = _resolve(entry, probe, "flatpak", None)
    if not app_id:
        return None
    bin_name = _resolve(entry, probe, "_bin", "flatpak")
    if not bin_name or not _valid_bin_name(bin_name):
        return None
    return wrapper_dir(home, "flatpak") / bin_name, f"flatpak run {shlex.quote(app_id)}"


def cask_wrapper(
    entry: SoftwareEntry,
    probe: SystemProbe,
    home: Path,
    system_apps_dir: Path = SYSTEM_APPS_DIR,
) -> tuple[Path, str] | None:
    """Return ``(wrapper path, command)`` for an app bundle, or ``None``.

    The bundle is looked up in *system_apps_dir* first, then in
    ``<home>/Applications``. A bundle found in neither place yields
    ``None``.
    """
    has_cask = bool(_resolve(entry, probe, "cask", None))
    if not has_cask and not (probe.os_id == "darwin" and entry.app):
        return None
    bin_name = _resolve(entry, probe, "_bin", "cask")
    if not bin_name or not _valid_bin_name(bin_name):
        return None
    app_name = _resolve(entry, probe, "_app", "cask")
    if not app_name:
        return None

    for apps_dir in (system_apps_dir, home / "Applications"):
        app_path = apps_dir / app_name
        if app_path.exists():
            break
    else:
        logger.debug("App bundle %s not found, no wrapper for %s", app_name, bin_name)
        return None

    return wrapper_dir(home, "cask") / bin_name, f"open {shlex.quote(str(app_path))}"


def generate_wrappers(
    manifest: Manifest,
    probe: SystemProbe,
    runner: CommandRunner,
    home: Path,
    system_apps_dir: Path = SYSTEM_APPS_DIR,
) -> list[Path]:
    """Write every flatpak and cask wrapper the manifest calls for.

    A wrapper whose commands fail is logged and skipped; the rest are
    still written.

    Returns:
        Paths of the wrappers written, in manifest order.
    """
    written: list[Path] = []
    for key, entry in manifest.items():
        wanted = [
            flatpak_wrapper(entry, probe, home),
            cask_wrapper(entry, probe, home, system_apps_dir),
        ]
        for target in wanted:
            if target is None:
                continue
            path, command = target
            try:
                write_wrapper(runner, path, command)
            except CommandError as e:
                logger.warning("Could not write wrapper %s for %s: %s", path, key, e)
                continue
            logger.info("Wrote wrapper %s", path)
            written.append(path)
    return written
