"""
L2 Resolver — Install plan building.

Turns an expanded key list into ordered ``InstallInstruction`` values:
script snippets first, then exactly one package-manager instruction
chosen by installer preference order.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from alacarte.core.models.manifest import Manifest, SoftwareEntry
from alacarte.core.models.plan import SCRIPT, InstallInstruction
from alacarte.core.services.provision.data.installers import (
    DEFAULT_INSTALLER_ORDER,
    LINE_ORIENTED_MANAGERS,
)
from alacarte.core.services.provision.detection.system_probe import SystemProbe
from alacarte.core.services.provision.errors import ManifestKeyError
from alacarte.core.services.provision.resolver.key_resolution import resolve_field

logger = logging.getLogger(__name__)


def skip_reason(
    key: str,
    entry: SoftwareEntry,
    probe: SystemProbe,
    installed: set[str] | frozenset[str],
    lazy_only: bool,
) -> str | None:
    """Return why *key* is left out of the plan, or ``None`` to plan it."""
    if key in installed:
        return "already installed"
    if probe.headless and entry.app:
        return "headless mode"
    if lazy_only and not entry.lazy:
        return "not marked lazy"
    return None


def _normalize_package(installer: str, value: str) -> str:
    # "sudo apt-get install foo" -> "foo"
    if installer in LINE_ORIENTED_MANAGERS and len(value.split()) > 1:
        return value.split()[-1]
    return value


def select_installer(
    entry: SoftwareEntry,
    probe: SystemProbe,
    installer_order: Iterable[str] = DEFAULT_INSTALLER_ORDER,
) -> InstallInstruction | None:
    """Pick the first installer in *installer_order* whose field resolves."""
    for installer in installer_order:
        value = resolve_field(
            entry.values, installer, None, probe.os_id, probe.os_family, probe.arch,
        )
        if value is not None:
            return InstallInstruction(installer, _normalize_package(installer, value))
    return None


def build_plan(
    expanded_keys: Iterable[str],
    manifest: Manifest,
    probe: SystemProbe,
    installed: set[str] | frozenset[str] = frozenset(),
    installer_order: Iterable[str] = DEFAULT_INSTALLER_ORDER,
    lazy_only: bool = False,
    notify: Callable[[str], None] | None = None,
) -> list[InstallInstruction]:
    """Build the install plan for keys already in dependency order.

    Args:
        expanded_keys: Output of ``expand_dependencies``.
        manifest: Source of entries.
        probe: Host facts used for skipping and key resolution.
        installed: Keys that are already present on the host.
        installer_order: Installer preference, most preferred first.
        lazy_only: Only plan entries marked lazy.
        notify: Receives one human-readable note per skipped key.

    Raises:
        ManifestKeyError: A key is missing from the manifest.
    """
    order = list(installer_order)
    plan: list[InstallInstruction] = []
    for key in expanded_keys:
        entry = manifest.get(key)
        if entry is None:
            raise ManifestKeyError(key)

        reason = skip_reason(key, entry, probe, installed, lazy_only)
        if reason is not None:
            logger.debug("Skipping %s: %s", key, reason)
            if notify is not None:
                notify(f"Skipping {key}: {reason}")
            continue

        for snippet in entry.script:
            plan.append(InstallInstruction(SCRIPT, snippet))

        instruction = select_installer(entry, probe, order)
        if instruction is None:
            logger.debug("No installer resolves for %s on %s/%s", key, probe.os_id, probe.arch)
            continue
        plan.append(instruction)
    return plan
