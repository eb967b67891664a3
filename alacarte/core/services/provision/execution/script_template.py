"""
L4 Execution — Script template rendering.

Manifest script snippets may contain template expressions
(``{{ .chezmoi.os }}``). Before a snippet runs it is rendered by an
external templating tool; the rendered text is what ``bash`` executes.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile

from alacarte.core.services.provision.errors import CommandError

logger = logging.getLogger(__name__)


class PassthroughRenderer:
    """Renderer that returns scripts unchanged."""

    def render(self, script: str) -> str:
        return script


class ChezmoiTemplateRenderer:
    """Render scripts with ``chezmoi execute-template``.

    The snippet is written to a temporary file, rendered, and the file
    is removed again whatever the outcome.
    """

    def __init__(self, executable: str = "chezmoi", timeout: int = 60):
        self.executable = executable
        self.timeout = timeout

    def render(self, script: str) -> str:
        fd, path = tempfile.mkstemp(prefix="provision-script-raw-", suffix=".sh")
        args = ("execute-template", path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(script)
            logger.debug("Rendering script template via %s %s", self.executable, path)
            result = subprocess.run(
                [self.executable, *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise CommandError(
                self.executable, args, returncode=127,
                detail=f"{self.executable} not found on PATH",
            ) from None
        except subprocess.TimeoutExpired:
            raise CommandError(
                self.executable, args,
                detail=f"timed out after {self.timeout}s",
            ) from None
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass

        if result.returncode != 0:
            raise CommandError(
                self.executable, args,
                returncode=result.returncode,
                detail=result.stderr.strip(),
            )
        return result.stdout
