"""
Command runners — the only way the provisioning engine reaches the OS.
"""

from alacarte.adapters.base import CommandRunner  # noqa: F401
from alacarte.adapters.dry_run import DryRunRunner  # noqa: F401
from alacarte.adapters.mock import MockRunner  # noqa: F401
from alacarte.adapters.shell.command import SubprocessRunner  # noqa: F401
from alacarte.adapters.shell.streaming import EventStreamRunner, LogEvent  # noqa: F401
