"""
L5 Orchestration — the Provisioner aggregate and post-install hooks.
"""

from alacarte.core.services.provision.orchestration.provisioner import (  # noqa: F401
    Provisioner,
)
from alacarte.core.services.provision.orchestration.wrappers import (  # noqa: F401
    generate_wrappers,
)
