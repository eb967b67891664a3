"""
Subprocess runner — execute install commands on the host.

This is the SINGLE PLACE where install processes are spawned. It shapes
the engine's logical commands (``apt foo``, ``cask install iterm2``)
into the real, non-interactive argv for each package manager, runs
script snippets through the template renderer and ``bash``, and turns
every failure into ``CommandError``.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from typing import Callable

from alacarte.adapters.base import CommandRunner
from alacarte.core.models.plan import SCRIPT
from alacarte.core.services.provision.data.installers import (
    SYSTEM_INSTALL_COMMANDS,
    VERB_INSTALL_COMMANDS,
)
from alacarte.core.services.provision.errors import CommandError
from alacarte.core.services.provision.execution.script_template import (
    ChezmoiTemplateRenderer,
)

logger = logging.getLogger(__name__)

def _is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def build_command(command: str, *args: str) -> list[str]:
    """Shape a logical command into the argv that actually runs.

    ``apt foo`` becomes the full unattended ``apt-get install`` line,
    ``cask install x`` becomes ``brew install --cask x``. Anything
    without a rule runs exactly as given. A leading ``sudo`` is dropped
    when already running as root.
    """
    if command in SYSTEM_INSTALL_COMMANDS:
        argv = [*SYSTEM_INSTALL_COMMANDS[command], *args]
    elif command in VERB_INSTALL_COMMANDS and args and args[0] == "install":
        argv = [*VERB_INSTALL_COMMANDS[command], *args[1:]]
    else:
        argv = [command, *args]

    if argv[0] == "sudo" and _is_root():
        argv = argv[1:]
    return argv


class SubprocessRunner(CommandRunner):
    """Run commands as real processes.

    Output of install commands goes straight to the terminal unless an
    *on_output* callback is given, in which case it is read line by line
    (stdout and stderr merged) and handed to the callback.

    Args:
        renderer: Object with ``render(script) -> str``. Defaults to
            ``ChezmoiTemplateRenderer``.
        on_output: Optional per-line output sink.
        query_timeout: Seconds before a read-only query is abandoned.
    """

    def __init__(
        self,
        renderer=None,
        on_output: Callable[[str], None] | None = None,
        query_timeout: int = 120,
    ):
        self.renderer = renderer if renderer is not None else ChezmoiTemplateRenderer()
        self.on_output = on_output
        self.query_timeout = query_timeout

    @property
    def name(self) -> str:
        return "subprocess"

    def run(self, command: str, *args: str) -> None:
        if self.is_pseudo(command):
            logger.info("%s", " ".join(args))
            return
        if command == SCRIPT and args:
            self._run_script(args[0])
            return
        self._exec(build_command(command, *args), command, args)

    def output(self, command: str, *args: str) -> bytes:
        argv = [command, *args]
        logger.debug("Query: %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                timeout=self.query_timeout,
            )
        except FileNotFoundError:
            raise CommandError(
                command, args, returncode=127, detail=f"{command} not found on PATH",
            ) from None
        except subprocess.TimeoutExpired:
            raise CommandError(
                command, args, detail=f"timed out after {self.query_timeout}s",
            ) from None
        if result.returncode != 0:
            raise CommandError(
                command, args,
                returncode=result.returncode,
                detail=result.stderr.decode(errors="replace").strip(),
            )
        return result.stdout

    # ── internals ──

    def _run_script(self, script: str) -> None:
        rendered = self.renderer.render(script)
        fd, path = tempfile.mkstemp(prefix="provision-script-", suffix=".sh")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(rendered)
            self._exec(["bash", path], SCRIPT, (script,))
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

    def _exec(self, argv: list[str], command: str, args: tuple[str, ...]) -> None:
        logger.info("Running: %s", " ".join(argv))
        try:
            if self.on_output is None:
                returncode = subprocess.run(argv).returncode
            else:
                returncode = self._exec_streaming(argv)
        except FileNotFoundError:
            raise CommandError(
                command, args, returncode=127, detail=f"{argv[0]} not found on PATH",
            ) from None
        if returncode != 0:
            raise CommandError(command, args, returncode=returncode)

    def _exec_streaming(self, argv: list[str]) -> int:
        with subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        ) as proc:
            assert proc.stdout is not None
            for line in proc.stdout:
                self.on_output(line.rstrip("\n"))
            return proc.wait()
