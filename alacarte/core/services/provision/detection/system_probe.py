"""
L3 Detection — System environment probe.

Answers four read-only questions about the host: OS family
(``linux``, ``darwin``, ``windows``), normalized CPU architecture
(``x64``, ``arm64``), distribution identifier (``debian``, ``fedora``,
``darwin`` on macOS) and whether a graphical display is available.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

from alacarte.core.services.provision.data.installers import ARCH_MAP

logger = logging.getLogger(__name__)

OS_RELEASE = Path("/etc/os-release")


class SystemProbe(Protocol):
    """Read-only host facts the planner and wrapper generator rely on."""

    @property
    def os_family(self) -> str: ...

    @property
    def arch(self) -> str: ...

    @property
    def os_id(self) -> str: ...

    @property
    def headless(self) -> bool: ...


def normalize_arch(machine: str) -> str:
    """Map ``platform.machine()`` output to manifest architecture names."""
    return ARCH_MAP.get(machine, ARCH_MAP.get(machine.lower(), machine.lower()))


def read_os_id(path: Path = OS_RELEASE) -> str:
    """Return the ``ID=`` value of an os-release file, or ``""``."""
    try:
        with open(path, encoding="utf-8") as f:
            for line in f:
                if line.startswith("ID="):
                    return line.split("=", 1)[1].strip().strip('"').strip("'")
    except (FileNotFoundError, OSError):
        logger.debug("No readable os-release at %s", path)
    return ""


@dataclass(frozen=True)
class StaticSystemProbe:
    """A probe with fixed answers, for tests and explicit overrides."""

    os_family: str = "linux"
    arch: str = "x64"
    os_id: str = "debian"
    headless: bool = False


class HostSystemProbe:
    """Probe the machine this process runs on.

    Values are read once, at construction.

    Args:
        environ: Environment mapping used for the display check.
            Defaults to ``os.environ``.
        os_release: Path of the os-release file.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        os_release: Path = OS_RELEASE,
    ):
        env = os.environ if environ is None else environ
        self._os_family = platform.system().lower()
        self._arch = normalize_arch(platform.machine())

        if self._os_family == "darwin":
            self._os_id = "darwin"
        elif self._os_family == "linux":
            self._os_id = read_os_id(os_release)
        else:
            self._os_id = self._os_family

        self._headless = self._os_family == "linux" and not (
            env.get("DISPLAY") or env.get("WAYLAND_DISPLAY")
        )
        logger.debug(
            "Host: family=%s arch=%s id=%s headless=%s",
            self._os_family, self._arch, self._os_id, self._headless,
        )

    @property
    def os_family(self) -> str:
        return self._os_family

    @property
    def arch(self) -> str:
        return self._arch

    @property
    def os_id(self) -> str:
        return self._os_id

    @property
    def headless(self) -> bool:
        return self._headless
