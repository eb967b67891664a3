"""
Plan model — the contract between the plan builder and the executor.

The builder emits ``InstallInstruction`` values in execution order; the
executor consumes them one by one. Instructions never change after they
are built.
"""

from __future__ import annotations

from dataclasses import dataclass

SCRIPT = "script"


@dataclass(frozen=True)
class InstallInstruction:
    """One step of a provisioning plan.

    ``type`` is either ``"script"`` (``package`` holds the literal shell
    snippet) or an installer family id such as ``"apt"`` or ``"brew"``
    (``package`` holds the resolved package name or argument).
    """

    type: str
    package: str

    @property
    def is_script(self) -> bool:
        return self.type == SCRIPT

    def __str__(self) -> str:
        return f"{self.type} {self.package}"

    def to_dict(self) -> dict:
        return {"type": self.type, "package": self.package}
