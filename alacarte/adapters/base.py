"""
Runner base — the contract between the provisioning engine and the OS.

The engine never spawns processes itself. Every install, script and
detection query goes through a ``CommandRunner``:

    run(command, *args)     perform a side effect, raise on failure
    output(command, *args)  run a read-only query, return stdout bytes

``section`` and ``info`` are reserved pseudo-commands. They carry
progress annotations and never start a process.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from alacarte.core.services.provision.data.installers import INFO, PSEUDO_COMMANDS, SECTION


class CommandRunner(ABC):
    """Abstract base class for all command runners.

    Runners raise ``CommandError`` when a command fails; they never
    return a status flag.

    To create a new runner:
        1. Subclass CommandRunner
        2. Implement name, run, output
        3. Handle (or log) the ``section``/``info`` pseudo-commands in run
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'dry-run', 'mock')."""

    @abstractmethod
    def run(self, command: str, *args: str) -> None:
        """Run *command* with *args*.

        Raises:
            CommandError: The command could not be started or exited
                non-zero.
        """

    @abstractmethod
    def output(self, command: str, *args: str) -> bytes:
        """Run a read-only query and return its standard output.

        Raises:
            CommandError: The command could not be started or exited
                non-zero.
        """

    def section(self, title: str) -> None:
        """Announce a new phase (``Planning``, ``Installing``, ``Complete``)."""
        self.run(SECTION, title)

    def info(self, message: str) -> None:
        """Emit an informational note."""
        self.run(INFO, message)

    @staticmethod
    def is_pseudo(command: str) -> bool:
        return command in PSEUDO_COMMANDS

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
