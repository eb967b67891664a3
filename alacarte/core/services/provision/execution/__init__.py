"""
L4 Execution — ``__init__.py`` re-exports plan execution helpers.
"""

from alacarte.core.services.provision.execution.plan_executor import (  # noqa: F401
    execute_plan,
    instruction_command,
)
from alacarte.core.services.provision.execution.script_template import (  # noqa: F401
    ChezmoiTemplateRenderer,
    PassthroughRenderer,
)
