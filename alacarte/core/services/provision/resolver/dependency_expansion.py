"""
L2 Resolver — Dependency expansion.

Turns a list of requested manifest keys into a flat install order in
which every key appears after all of its dependencies.
"""

from __future__ import annotations

import logging
from typing import Iterable

from alacarte.core.models.manifest import Manifest
from alacarte.core.services.provision.errors import ManifestKeyError

logger = logging.getLogger(__name__)


def _visit(
    key: str,
    manifest: Manifest,
    visited: set[str],
    stack: list[str],
    order: list[str],
    required_by: str | None,
) -> None:
    """Walk one key depth-first, appending it after its dependencies.

    Mutates *visited*, *stack* and *order* in place.

    Args:
        key: Manifest key to expand.
        manifest: Source of dependency lists.
        visited: Keys already entered (cycle and duplicate guard).
        stack: Keys on the current traversal path, for cycle reporting.
        order: Accumulator for the final install order.
        required_by: Parent key, used in the error message.
    """
    if key in visited:
        if key in stack:
            cycle = stack[stack.index(key):] + [key]
            logger.info("Dependency cycle %s ignored", " -> ".join(cycle))
        return

    entry = manifest.get(key)
    if entry is None:
        raise ManifestKeyError(key, required_by=required_by)

    visited.add(key)
    stack.append(key)
    for dep in entry.deps:
        _visit(dep, manifest, visited, stack, order, key)
    stack.pop()
    order.append(key)


def expand_dependencies(keys: Iterable[str], manifest: Manifest) -> list[str]:
    """Expand *keys* into dependency-first order without duplicates.

    A shared visited set means a key reachable from several requested
    keys is emitted once, at its first position. A cycle is broken at
    the back-edge, so every member is still emitted exactly once.

    Raises:
        ManifestKeyError: A requested key, or any transitive dependency,
            is missing from the manifest. Nothing is returned in that case.
    """
    requested = list(keys)
    visited: set[str] = set()
    order: list[str] = []
    for key in requested:
        _visit(key, manifest, visited, [], order, None)
    logger.debug("Expanded %d requested keys into %d", len(requested), len(order))
    return order
