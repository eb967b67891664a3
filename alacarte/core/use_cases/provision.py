"""
Provision use case — select keys, detect, plan, execute, post-install.

The CLI builds the runner and probe; everything else happens here so
the whole flow can be driven with a ``MockRunner`` in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Sequence

from alacarte.core.models.manifest import Manifest
from alacarte.core.models.plan import InstallInstruction
from alacarte.core.services.provision.data.installers import DEFAULT_INSTALLER_ORDER
from alacarte.core.services.provision.detection.installed import get_installed_packages
from alacarte.core.services.provision.detection.system_probe import SystemProbe
from alacarte.core.services.provision.errors import ManifestKeyError, PlanExecutionError
from alacarte.core.services.provision.orchestration.provisioner import Provisioner

if TYPE_CHECKING:
    from alacarte.adapters.base import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class ProvisionResult:
    """Outcome of one provisioning run."""

    keys: list[str] = field(default_factory=list)
    plan: list[InstallInstruction] = field(default_factory=list)
    installed: set[str] = field(default_factory=set)
    errors: list[str] = field(default_factory=list)
    dry_run_commands: list[str] = field(default_factory=list)
    wrappers: list[Path] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.errors

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "keys": self.keys,
            "plan": [i.to_dict() for i in self.plan],
            "errors": self.errors,
            "dry_run_commands": self.dry_run_commands,
            "wrappers": [str(p) for p in self.wrappers],
            "error": self.error,
        }


def select_keys(
    manifest: Manifest,
    *,
    only: Sequence[str] = (),
    groups: Sequence[str] = (),
    all_keys: bool = False,
    preload_keys: Sequence[str] = (),
) -> list[str]:
    """Choose which manifest keys a run starts from.

    Precedence: ``only`` > ``groups`` > ``all_keys`` > ``preload_keys``
    > every key. Keys keep manifest order except for ``only`` and
    ``preload_keys``, which keep the order given.
    """
    if only:
        return list(only)
    if groups:
        return manifest.keys_in_groups(groups)
    if all_keys:
        return list(manifest)
    if preload_keys:
        return list(preload_keys)
    return list(manifest)


def build_provisioner(
    manifest: Manifest,
    runner: CommandRunner,
    probe: SystemProbe,
    *,
    installer_order: Iterable[str] = DEFAULT_INSTALLER_ORDER,
    lazy_only: bool = False,
    dry_run: bool = False,
    log_file: str | Path | None = None,
    home: Path | None = None,
) -> Provisioner:
    kwargs = {}
    if home is not None:
        kwargs["home"] = home
    return Provisioner(
        manifest=manifest,
        runner=runner,
        probe=probe,
        installer_order=list(installer_order),
        lazy_only=lazy_only,
        dry_run=dry_run,
        log_file=log_file,
        **kwargs,
    )


def plan_only(provisioner: Provisioner, keys: Sequence[str]) -> ProvisionResult:
    """Detect and plan without executing anything."""
    result = ProvisionResult(keys=list(keys))
    result.installed = get_installed_packages(provisioner.runner)
    try:
        result.plan = provisioner.plan_provision(keys, result.installed)
    except ManifestKeyError as e:
        result.error = str(e)
    return result


def run_provision(
    provisioner: Provisioner,
    keys: Sequence[str],
    *,
    post_install: bool = True,
) -> ProvisionResult:
    """Run the full provisioning flow for *keys*.

    Planning errors stop the run before anything is installed. Failed
    install steps are reported in ``errors``; the remaining steps and
    post-install still run.
    """
    result = plan_only(provisioner, keys)
    if result.error is not None:
        logger.error("Planning failed: %s", result.error)
        return result

    try:
        provisioner.execute_plan(result.plan)
    except PlanExecutionError as e:
        result.errors = [str(err) for err in e.errors]

    if post_install:
        result.wrappers = provisioner.post_install()

    result.dry_run_commands = provisioner.dry_run_commands()
    return result
