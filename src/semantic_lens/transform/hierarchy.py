from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models import ColumnMapping, Dataset, HierarchyBuild, HierarchyNode, QualityIssue, Severity
from ..utils import to_number
from .roles import read_text, resolve_hierarchy_roles

logger = logging.getLogger(__name__)


class HierarchyIntegrityError(ValueError):
    """Raised in strict mode when the rows do not form a clean forest."""

    def __init__(self, issues: list[QualityIssue]) -> None:
        self.issues = issues
        super().__init__("; ".join(i.message for i in issues))


def build_hierarchy_report(
    dataset: Dataset,
    mappings: Sequence[ColumnMapping],
    *,
    strict: bool = False,
) -> HierarchyBuild:
    """Build a forest from parent/child rows and report structural findings.

    Three passes:
    1. one node per row keyed by the stringified node_id; a later row with
       the same id replaces the earlier node but keeps its position
    2. link each node under its parent; a node whose parent id is empty,
       unknown or its own id becomes a root
    3. assign depths top-down from the roots

    Duplicate ids, promoted roots and nodes caught in a parent cycle (never
    reachable from a root, so absent from the forest) are reported as
    issues. With strict=True any finding raises HierarchyIntegrityError.
    """
    roles = resolve_hierarchy_roles(mappings)

    # Pass 1: nodes
    nodes: dict[str, HierarchyNode] = {}
    duplicates = 0
    for row in dataset.rows:
        node_id = read_text(row, roles.node_id)
        label = read_text(row, roles.node_label, default=node_id) if roles.node_label else node_id

        metrics: dict[str, float] = {}
        for mm in roles.metrics:
            metrics[mm.display_name] = to_number(row.get(mm.source_column)) or 0.0

        if node_id in nodes:
            duplicates += 1
        nodes[node_id] = HierarchyNode(
            id=node_id,
            label=label,
            parent_id=roles.parent_of(row),
            metrics=metrics,
        )

    # Pass 2: link
    roots: list[HierarchyNode] = []
    promoted = 0
    for node in nodes.values():
        pid = node.parent_id
        if not pid:
            roots.append(node)
        elif pid == node.id or pid not in nodes:
            promoted += 1
            roots.append(node)
        else:
            nodes[pid].children.append(node)

    # Pass 3: depths
    visited = _assign_depths(roots)
    unreachable = len(nodes) - len(visited)

    issues: list[QualityIssue] = []
    if duplicates:
        logger.warning("Hierarchy: %d row(s) overwrote an earlier node with the same id", duplicates)
        issues.append(
            QualityIssue(
                type="duplicate_ids",
                severity=Severity.WARNING,
                message=f"{duplicates} row(s) reused an existing node id; the last row wins",
                count=duplicates,
            )
        )
    if promoted:
        logger.warning("Hierarchy: %d node(s) promoted to root (unknown or self parent)", promoted)
        issues.append(
            QualityIssue(
                type="dangling_parents",
                severity=Severity.INFO,
                message=f"{promoted} node(s) reference an unknown parent and were promoted to root",
                count=promoted,
            )
        )
    if unreachable:
        logger.warning("Hierarchy: %d node(s) unreachable from any root (parent cycle)", unreachable)
        issues.append(
            QualityIssue(
                type="cycle",
                severity=Severity.ERROR,
                message=f"{unreachable} node(s) form a parent cycle and are not part of the tree",
                count=unreachable,
            )
        )

    if strict and issues:
        raise HierarchyIntegrityError(issues)

    logger.debug("Hierarchy: %d nodes, %d roots", len(nodes), len(roots))
    return HierarchyBuild(roots=roots, issues=issues)


def build_hierarchy(dataset: Dataset, mappings: Sequence[ColumnMapping]) -> list[HierarchyNode]:
    """Forest of root nodes; see build_hierarchy_report for the rules."""
    return build_hierarchy_report(dataset, mappings).roots


def _assign_depths(roots: list[HierarchyNode]) -> set[int]:
    """Set depth on every node reachable from `roots`; returns the visited node ids (by identity)."""
    visited: set[int] = set()
    stack: list[tuple[HierarchyNode, int]] = [(r, 0) for r in reversed(roots)]
    while stack:
        node, depth = stack.pop()
        if id(node) in visited:
            logger.warning("Hierarchy: node %r reached twice; skipping branch", node.id)
            continue
        visited.add(id(node))
        node.depth = depth
        for child in reversed(node.children):
            stack.append((child, depth + 1))
    return visited


def flatten_hierarchy(roots: Sequence[HierarchyNode]) -> list[HierarchyNode]:
    """All nodes in pre-order (each node before its children, siblings in order)."""
    flat: list[HierarchyNode] = []
    seen: set[int] = set()
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        flat.append(node)
        stack.extend(reversed(node.children))
    return flat


def find_node_by_id(roots: Sequence[HierarchyNode], node_id: str) -> Optional[HierarchyNode]:
    for node in flatten_hierarchy(roots):
        if node.id == node_id:
            return node
    return None
