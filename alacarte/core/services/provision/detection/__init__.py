"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from alacarte.core.services.provision.detection.installed import (  # noqa: F401
    get_installed_packages,
)
from alacarte.core.services.provision.detection.system_probe import (  # noqa: F401
    HostSystemProbe,
    StaticSystemProbe,
    SystemProbe,
    normalize_arch,
)
