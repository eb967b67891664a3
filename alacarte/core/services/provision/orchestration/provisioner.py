"""
L5 Orchestration — Provisioner.

The aggregate that ties planning, execution and post-install together
for one manifest, one host and one command runner:

    provisioner = Provisioner(manifest, runner, probe)
    installed = get_installed_packages(runner)
    plan = provisioner.plan_provision(["bat", "docker"], installed)
    provisioner.execute_plan(plan)       # raises PlanExecutionError
    provisioner.post_install()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Sequence

from alacarte.core.models.manifest import Manifest
from alacarte.core.models.plan import InstallInstruction
from alacarte.core.services.provision.data.installers import (
    DEFAULT_INSTALLER_ORDER,
    INFO,
    SECTION,
)
from alacarte.core.services.provision.detection.system_probe import SystemProbe
from alacarte.core.services.provision.errors import PlanExecutionError
from alacarte.core.services.provision.execution.plan_executor import (
    execute_plan as run_plan,
)
from alacarte.core.services.provision.orchestration.wrappers import (
    SYSTEM_APPS_DIR,
    generate_wrappers,
)
from alacarte.core.services.provision.resolver.dependency_expansion import (
    expand_dependencies,
)
from alacarte.core.services.provision.resolver.plan_builder import build_plan

if TYPE_CHECKING:
    from alacarte.adapters.base import CommandRunner

logger = logging.getLogger(__name__)


@dataclass
class Provisioner:
    """Plan and apply a manifest on one host.

    ``installer_order`` belongs to the instance; changing it never
    affects another provisioner. ``errors`` accumulates failures across
    ``execute_plan`` calls until ``clear_errors()``.
    """

    manifest: Manifest
    runner: CommandRunner
    probe: SystemProbe
    installer_order: list[str] = field(default_factory=lambda: list(DEFAULT_INSTALLER_ORDER))
    lazy_only: bool = False
    dry_run: bool = False
    dry_run_log: list[str] = field(default_factory=list)
    errors: list[Exception] = field(default_factory=list)
    log_file: str | Path | None = None
    home: Path = field(default_factory=Path.home)
    system_apps_dir: Path = SYSTEM_APPS_DIR

    # ── Planning ──

    def plan_provision(
        self,
        keys: Iterable[str],
        installed: set[str] | frozenset[str] = frozenset(),
    ) -> list[InstallInstruction]:
        """Expand *keys* and build the install plan.

        Raises:
            ManifestKeyError: A requested key or a dependency is unknown.
        """
        self.runner.run(SECTION, "Planning")
        expanded = expand_dependencies(keys, self.manifest)
        plan = build_plan(
            expanded,
            self.manifest,
            self.probe,
            installed=installed,
            installer_order=self.installer_order,
            lazy_only=self.lazy_only,
            notify=lambda msg: self.runner.run(INFO, msg),
        )
        for instruction in plan:
            self.runner.run(INFO, f"Will install: {instruction}")
        logger.info("Planned %d install steps for %d keys", len(plan), len(expanded))
        return plan

    # ── Execution ──

    def execute_plan(self, plan: Sequence[InstallInstruction]) -> None:
        """Run *plan*, then raise one combined error if any step failed.

        Raises:
            PlanExecutionError: Carries every failure of this run.
        """
        failures = run_plan(
            plan,
            self.runner,
            dry_run=self.dry_run,
            dry_run_log=self.dry_run_log,
            log_file=self.log_file,
        )
        if failures:
            self.errors.extend(failures)
            raise PlanExecutionError(failures)

    def aggregated_error(self) -> PlanExecutionError | None:
        """One error describing every stored failure, or ``None``."""
        if not self.errors:
            return None
        return PlanExecutionError(self.errors)

    def clear_errors(self) -> None:
        self.errors.clear()

    def dry_run_commands(self) -> list[str]:
        """Copy of the dry-run log."""
        return list(self.dry_run_log)

    # ── Post-install ──

    def post_install(self) -> list[Path]:
        """Write launcher wrappers for flatpak and cask apps.

        Skipped entirely in dry-run mode.
        """
        if self.dry_run:
            logger.info("Dry run: post-install wrappers skipped")
            return []
        return generate_wrappers(
            self.manifest, self.probe, self.runner, self.home, self.system_apps_dir,
        )
