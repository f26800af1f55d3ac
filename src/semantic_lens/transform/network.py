from __future__ import annotations

import logging
from typing import Sequence

from ..models import ColumnMapping, Dataset, NetworkData, NetworkEdge, NetworkNode
from ..utils import is_null, to_number
from .roles import read_optional_text, read_text, resolve_network_roles

logger = logging.getLogger(__name__)


def build_network(dataset: Dataset, mappings: Sequence[ColumnMapping]) -> NetworkData:
    """Derive a node set and edge list from source/target rows.

    Every row with a non-empty source and target yields exactly one edge,
    so repeated pairs stay repeated. Nodes are deduplicated by id in
    first-seen order; the row that first introduces a node decides its
    group. Rows missing either endpoint are skipped without side effects.
    """
    roles = resolve_network_roles(mappings)

    nodes: dict[str, NetworkNode] = {}
    edges: list[NetworkEdge] = []
    skipped = 0

    for row in dataset.rows:
        source_id = read_text(row, roles.source_node)
        target_id = read_text(row, roles.target_node)
        if not source_id or not target_id:
            skipped += 1
            continue

        group = read_optional_text(row, roles.node_group)
        for node_id in (source_id, target_id):
            if node_id not in nodes:
                nodes[node_id] = NetworkNode(id=node_id, label=node_id, group=group)

        weight = 1.0
        if roles.edge_weight is not None:
            raw = row.get(roles.edge_weight.source_column)
            w = None if is_null(raw) else to_number(raw)
            if w is not None:
                weight = w

        edges.append(
            NetworkEdge(
                source=source_id,
                target=target_id,
                weight=weight,
                label=read_optional_text(row, roles.edge_label),
                relationship_type=read_optional_text(row, roles.relationship_type),
                cardinality=read_optional_text(row, roles.cardinality),
            )
        )

    if skipped:
        logger.debug("Network: skipped %d row(s) without both endpoints", skipped)
    logger.debug("Network: %d nodes, %d edges", len(nodes), len(edges))
    return NetworkData(nodes=list(nodes.values()), edges=edges)
