"""
Dry-run runner — log what would run, run nothing.

Install commands are logged at INFO level and never executed. Read-only
queries are delegated to an optional *query_runner* so installed-package
detection stays accurate during a dry run; without one they return
empty output.
"""

from __future__ import annotations

import logging

from alacarte.adapters.base import CommandRunner

logger = logging.getLogger(__name__)


class DryRunRunner(CommandRunner):
    """Runner that records commands instead of executing them."""

    def __init__(self, query_runner: CommandRunner | None = None):
        self._query_runner = query_runner
        self.planned: list[str] = []

    @property
    def name(self) -> str:
        return "dry-run"

    def run(self, command: str, *args: str) -> None:
        text = " ".join(args)
        if command == "section":
            logger.info("== %s ==", text)
            return
        if command == "info":
            logger.info("%s", text)
            return
        line = " ".join((command, *args))
        self.planned.append(line)
        logger.info("[dry-run] %s", line)

    def output(self, command: str, *args: str) -> bytes:
        if self._query_runner is None:
            logger.debug("[dry-run] query skipped: %s", " ".join((command, *args)))
            return b""
        return self._query_runner.output(command, *args)
