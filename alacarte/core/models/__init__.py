"""
Domain models for the provisioner.

    from alacarte.core.models import Manifest, SoftwareEntry, StringList, InstallInstruction
"""

from alacarte.core.models.manifest import Manifest, SoftwareEntry, StringList
from alacarte.core.models.plan import SCRIPT, InstallInstruction

__all__ = [
    # plan.py
    "InstallInstruction",
    # manifest.py
    "Manifest",
    "SCRIPT",
    "SoftwareEntry",
    "StringList",
]
