"""
Manifest loader — reads software.yml into a ``Manifest``.

The file is a YAML mapping of manifest key to entry body. Every key the
author wrote is preserved on the entry, so composite override keys
(``apt:debian:x64``, ``_bin:flatpak``) reach installer resolution.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from alacarte.core.models.manifest import Manifest

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Raised when the software manifest is missing or malformed."""


def parse_manifest(text: str, source: str = "<string>") -> Manifest:
    """Parse manifest YAML text.

    Raises:
        ManifestError: Invalid YAML, a non-mapping document, or an entry
            that fails validation.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {source}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError(f"Expected a YAML mapping in {source}, got {type(data).__name__}")

    for key, body in data.items():
        if body is not None and not isinstance(body, dict):
            raise ManifestError(
                f"Entry '{key}' in {source} must be a mapping, got {type(body).__name__}"
            )

    try:
        return Manifest.from_mapping(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest entry in {source}: {e}") from e


def load_manifest(path: Path) -> Manifest:
    """Load and validate a manifest file.

    Raises:
        ManifestError: If the file is missing, unreadable or invalid.
    """
    if not path.is_file():
        raise ManifestError(f"Manifest file not found: {path}")

    logger.debug("Loading manifest from %s", path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e

    manifest = parse_manifest(raw, str(path))
    logger.info("Loaded manifest %s with %d entries", path, len(manifest))
    return manifest
