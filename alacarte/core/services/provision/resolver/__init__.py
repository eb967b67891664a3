"""
L2 Resolver — ``__init__.py`` re-exports all resolver functions.

These functions are pure: manifest and host facts in, keys or
instructions out. They never run commands.
"""

from alacarte.core.services.provision.resolver.dependency_expansion import (  # noqa: F401
    expand_dependencies,
)
from alacarte.core.services.provision.resolver.key_resolution import (  # noqa: F401
    candidate_keys,
    resolve_field,
)
from alacarte.core.services.provision.resolver.plan_builder import (  # noqa: F401
    build_plan,
    select_installer,
    skip_reason,
)
