"""
Provisioning service — package re-exports.

Each symbol lives in its single-responsibility module inside the
appropriate layer (data → resolver → detection → execution →
orchestration)::

    from alacarte.core.services.provision import Provisioner
"""

# ── L0: Data ──
from alacarte.core.services.provision.data.installers import (  # noqa: F401
    DEFAULT_INSTALLER_ORDER,
)

# ── Errors ──
from alacarte.core.services.provision.errors import (  # noqa: F401
    CommandError,
    ManifestKeyError,
    PlanExecutionError,
    ProvisionError,
)

# ── L2: Resolver ──
from alacarte.core.services.provision.resolver.dependency_expansion import (  # noqa: F401
    expand_dependencies,
)
from alacarte.core.services.provision.resolver.key_resolution import (  # noqa: F401
    candidate_keys,
    resolve_field,
)
from alacarte.core.services.provision.resolver.plan_builder import (  # noqa: F401
    build_plan,
)

# ── L3: Detection ──
from alacarte.core.services.provision.detection.installed import (  # noqa: F401
    get_installed_packages,
)
from alacarte.core.services.provision.detection.system_probe import (  # noqa: F401
    HostSystemProbe,
    StaticSystemProbe,
)

# ── L4: Execution ──
from alacarte.core.services.provision.execution.plan_executor import (  # noqa: F401
    execute_plan,
)

# ── L5: Orchestration ──
from alacarte.core.services.provision.orchestration.provisioner import (  # noqa: F401
    Provisioner,
)
from alacarte.core.services.provision.orchestration.wrappers import (  # noqa: F401
    generate_wrappers,
)
