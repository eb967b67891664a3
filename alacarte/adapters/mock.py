"""
Mock runner — test double for every runner operation.

Records each call without touching the host. Configurable to fail
specific commands or to return canned output for queries.
"""

from __future__ import annotations

from alacarte.adapters.base import CommandRunner
from alacarte.core.services.provision.errors import CommandError


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    By default every ``run`` succeeds and every ``output`` returns
    ``b""``. Failures and outputs are keyed by the joined command line
    (``"apt foo"``) or by the bare command (``"dpkg"``); the full line
    is checked first.
    """

    def __init__(self, runner_name: str = "mock"):
        self._name = runner_name
        self._call_log: list[tuple[str, ...]] = []
        self._failures: dict[str, str] = {}
        self._outputs: dict[str, bytes] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[tuple[str, ...]]:
        """Every ``(command, *args)`` tuple received, pseudo-commands included."""
        return self._call_log

    @property
    def commands(self) -> list[str]:
        """Joined command lines of real (non-pseudo) calls, in order."""
        return [" ".join(call) for call in self._call_log if not self.is_pseudo(call[0])]

    @property
    def notes(self) -> list[str]:
        """Text of every ``info`` pseudo-command, in order."""
        return [" ".join(call[1:]) for call in self._call_log if call[0] == "info"]

    @property
    def sections(self) -> list[str]:
        """Titles of every ``section`` pseudo-command, in order."""
        return [" ".join(call[1:]) for call in self._call_log if call[0] == "section"]

    @property
    def call_count(self) -> int:
        return len(self.commands)

    def set_failure(self, command_line: str, error: str = "Mock failure") -> None:
        """Make calls matching *command_line* raise ``CommandError``."""
        self._failures[command_line] = error

    def set_output(self, command_line: str, output: bytes | str) -> None:
        """Make ``output()`` for *command_line* return *output*."""
        if isinstance(output, str):
            output = output.encode()
        self._outputs[command_line] = output

    def _lookup(self, table: dict, command: str, args: tuple[str, ...]):
        line = " ".join((command, *args))
        if line in table:
            return table[line]
        return table.get(command)

    def run(self, command: str, *args: str) -> None:
        self._call_log.append((command, *args))
        error = self._lookup(self._failures, command, args)
        if error is not None and not self.is_pseudo(command):
            raise CommandError(command, args, returncode=1, detail=error)

    def output(self, command: str, *args: str) -> bytes:
        self._call_log.append((command, *args))
        error = self._lookup(self._failures, command, args)
        if error is not None:
            raise CommandError(command, args, returncode=1, detail=error)
        return self._lookup(self._outputs, command, args) or b""

    def reset(self) -> None:
        """Clear call log, failures and canned outputs."""
        self._call_log.clear()
        self._failures.clear()
        self._outputs.clear()
