"""
L4 Execution — Plan execution.

Runs install instructions strictly in plan order through a command
runner. A failing instruction does not stop the run: its error is
collected and execution moves on to the next instruction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence, TextIO

from alacarte.core.models.plan import SCRIPT, InstallInstruction
from alacarte.core.services.provision.data.installers import SECTION, VERB_INSTALLERS
from alacarte.core.services.provision.errors import CommandError

if TYPE_CHECKING:
    from alacarte.adapters.base import CommandRunner

logger = logging.getLogger(__name__)


def instruction_command(instruction: InstallInstruction) -> tuple[str, ...]:
    """Translate an instruction into the runner call that performs it.

    ``script`` snippets pass through as ``("script", text)``. Verb
    installers get an explicit ``install`` verb. Every other family is
    called as ``(type, package)`` and shaped by the runner.
    """
    if instruction.type == SCRIPT:
        return (SCRIPT, instruction.package)
    if instruction.type in VERB_INSTALLERS:
        return (instruction.type, "install", instruction.package)
    return (instruction.type, instruction.package)


def _open_log(log_file: str | Path) -> TextIO | None:
    """Open the plain-text log for appending, or warn and return ``None``."""
    path = Path(log_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return open(path, "a", encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot open log file %s, continuing without it: %s", path, e)
        return None


def execute_plan(
    plan: Sequence[InstallInstruction],
    runner: CommandRunner,
    *,
    dry_run: bool = False,
    dry_run_log: list[str] | None = None,
    log_file: str | Path | None = None,
) -> list[Exception]:
    """Execute *plan* and return every failure, in plan order.

    Args:
        plan: Instructions to run.
        runner: Where commands go. Only the ``section`` annotations
            reach it during a dry run.
        dry_run: Record ``"<type> <package>"`` lines instead of running.
        dry_run_log: List the dry-run lines are appended to.
        log_file: Optional plain-text log. Every attempted instruction
            is appended as a line and every failure as ``[ERROR] <msg>``.
            Missing parent directories are created. A log that cannot be
            opened is skipped with a warning. Never opened in a dry run.

    Returns:
        The collected errors. Empty on success or for an empty plan.
    """
    if not plan:
        return []

    runner.run(SECTION, "Installing")
    errors: list[Exception] = []
    log = _open_log(log_file) if log_file and not dry_run else None
    try:
        for instruction in plan:
            line = str(instruction)
            if dry_run:
                if dry_run_log is not None:
                    dry_run_log.append(line)
                logger.debug("[dry-run] %s", line)
                continue

            if log is not None:
                log.write(line + "\n")
            try:
                runner.run(*instruction_command(instruction))
            except (CommandError, OSError) as e:
                logger.error("Install step failed: %s", e)
                errors.append(e)
                if log is not None:
                    log.write(f"[ERROR] {e}\n")
    finally:
        if log is not None:
            log.close()

    runner.run(SECTION, "Complete")
    if errors:
        logger.warning("%d of %d install steps failed", len(errors), len(plan))
    return errors
