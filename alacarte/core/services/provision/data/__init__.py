"""
L0 Data — installer tables shared by the resolver, executor and runners.
"""

from alacarte.core.services.provision.data.installers import (  # noqa: F401
    ARCH_MAP,
    DEFAULT_INSTALLER_ORDER,
    INFO,
    INSTALLER_FAMILIES,
    LINE_ORIENTED_MANAGERS,
    PSEUDO_COMMANDS,
    SECTION,
    SYSTEM_INSTALL_COMMANDS,
    VERB_INSTALL_COMMANDS,
    VERB_INSTALLERS,
)
