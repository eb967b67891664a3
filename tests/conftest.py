"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from alacarte.adapters.mock import MockRunner
from alacarte.core.models.manifest import Manifest
from alacarte.core.services.provision.detection.system_probe import StaticSystemProbe


@pytest.fixture(autouse=True)
def reset_app_logger():
    """CLI runs configure the ``alacarte`` logger; undo that after each test."""
    app = logging.getLogger("alacarte")
    yield
    for handler in list(app.handlers):
        app.removeHandler(handler)
        handler.close()
    app.setLevel(logging.NOTSET)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_runner() -> MockRunner:
    return MockRunner()


@pytest.fixture
def debian_probe() -> StaticSystemProbe:
    return StaticSystemProbe(os_family="linux", arch="x64", os_id="debian")


@pytest.fixture
def chain_manifest() -> Manifest:
    """``a`` needs ``b`` and ``c``; ``b`` needs ``c``."""
    return Manifest.from_mapping({
        "a": {"deps": ["b", "c"], "apt": "a-pkg"},
        "b": {"deps": ["c"], "apt": "b-pkg"},
        "c": {"apt": "c-pkg"},
    })


SAMPLE_MANIFEST = textwrap.dedent("""\
    bat:
      _name: bat
      _short: A cat clone with wings
      _bin: bat
      _groups: [cli, dev]
      apt: bat
      brew: bat
      apt:debian:arm64: bat-arm
    ripgrep:
      _bin: rg
      _groups: dev
      apt: sudo apt-get install ripgrep
      brew: ripgrep
    gimp:
      _app: GIMP.app
      _bin:flatpak: gimp
      flatpak: org.gimp.GIMP
      cask:darwin: gimp
    tldr:
      lazy: true
      deps: [ripgrep]
      pipx: tldr
    starship:
      script:
        - curl -sS https://starship.rs/install.sh | sh -s -- -y
""")


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    """Write the sample manifest and return its path."""
    path = tmp_path / "software.yml"
    path.write_text(SAMPLE_MANIFEST)
    return path
