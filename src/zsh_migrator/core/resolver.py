"""Feature dependency resolution.

Two rules are applied repeatedly until a full pass changes nothing:

- propagation: a child whose parent is disabled is disabled
- aggregation: a container whose listed children are all disabled is
  disabled

Rules that mention flags missing from the input are skipped. Callers can
list them with ``find_unknown_references`` and log them.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from zsh_migrator.domain.features import (
    CONTAINER_RULES,
    DEPENDENCY_EDGES,
    ContainerRule,
    DependencyEdge,
    Feature,
)


def resolve(
    flags: Mapping[Feature, bool],
    edges: Iterable[DependencyEdge] = DEPENDENCY_EDGES,
    containers: Iterable[ContainerRule] = CONTAINER_RULES,
) -> Mapping[Feature, bool]:
    """Make a flag selection internally consistent.

    Args:
        flags: Initial selection
        edges: Child-requires-parent constraints
        containers: Container flags gated on their children

    Returns:
        Read-only mapping with the same keys as ``flags``

    """
    resolved = dict(flags)
    active_edges = [
        edge
        for edge in edges
        if edge.child in resolved and edge.parent in resolved
    ]
    active_containers = [
        rule
        for rule in containers
        if rule.container in resolved
        and all(child in resolved for child in rule.children)
    ]

    changed = True
    while changed:
        changed = False
        for edge in active_edges:
            if not resolved[edge.parent] and resolved[edge.child]:
                resolved[edge.child] = False
                changed = True
        for rule in active_containers:
            if resolved[rule.container] and not any(
                resolved[child] for child in rule.children
            ):
                resolved[rule.container] = False
                changed = True

    return MappingProxyType(resolved)


def find_unknown_references(
    flags: Mapping[Feature, bool],
    edges: Iterable[DependencyEdge] = DEPENDENCY_EDGES,
    containers: Iterable[ContainerRule] = CONTAINER_RULES,
) -> list[Feature]:
    """List flags referenced by rules but absent from ``flags``."""
    unknown: list[Feature] = []
    referenced: list[Feature] = []
    for edge in edges:
        referenced.extend((edge.child, edge.parent))
    for rule in containers:
        referenced.append(rule.container)
        referenced.extend(rule.children)

    for feature in referenced:
        if feature not in flags and feature not in unknown:
            unknown.append(feature)
    return unknown
