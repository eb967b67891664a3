"""
Provisioning errors.

Planning errors (``ManifestKeyError``) abort the whole operation.
Execution errors (``CommandError``) are collected per instruction and
surfaced together as one ``PlanExecutionError`` at the end of a run.
"""

from __future__ import annotations

from typing import Sequence


class ProvisionError(Exception):
    """Base class for all provisioning failures."""


class ManifestKeyError(ProvisionError):
    """A requested or depended-upon key does not exist in the manifest."""

    def __init__(self, key: str, *, required_by: str | None = None) -> None:
        self.key = key
        self.required_by = required_by
        msg = f"manifest key not found: {key}"
        if required_by:
            msg += f" (required by {required_by})"
        super().__init__(msg)


class CommandError(ProvisionError):
    """A single command run through the execution port failed."""

    def __init__(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        returncode: int | None = None,
        detail: str = "",
    ) -> None:
        self.command = command
        self.args_ = tuple(args)
        self.returncode = returncode
        self.detail = detail
        line = " ".join([command, *self.args_])
        if returncode is None:
            msg = f"{line}: {detail or 'failed'}"
        else:
            msg = f"{line}: exit status {returncode}"
            if detail:
                msg += f": {detail}"
        super().__init__(msg)


class PlanExecutionError(ProvisionError):
    """One or more plan instructions failed.

    ``errors`` holds every collected failure, in plan order.
    """

    def __init__(self, errors: Sequence[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(format_errors(self.errors))


def format_errors(errors: Sequence[BaseException]) -> str:
    """Render errors as one numbered, human-readable block."""
    lines = [f"{len(errors)} errors occurred:"]
    for i, err in enumerate(errors, start=1):
        lines.append(f"[{i}] {err}")
    return "\n".join(lines) + "\n"
