from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..models import ColumnMapping
from ..utils import apply_transform, is_null, stringify


class MappingConfigError(ValueError):
    """Raised when a builder is missing a role mapping it requires."""


def _find(mappings: Sequence[ColumnMapping], role_id: str) -> Optional[ColumnMapping]:
    for m in mappings:
        if m.role_id == role_id:
            return m
    return None


def read_text(row: dict[str, Any], mapping: ColumnMapping, default: str = "") -> str:
    """Stringified, transformed cell value; `default` when the cell is null or missing."""
    value = row.get(mapping.source_column)
    if is_null(value):
        return default
    return apply_transform(stringify(value), mapping.transform)


def read_optional_text(row: dict[str, Any], mapping: Optional[ColumnMapping]) -> Optional[str]:
    if mapping is None:
        return None
    return read_text(row, mapping)


@dataclass(frozen=True)
class HierarchyRoles:
    node_id: ColumnMapping
    parent_id: ColumnMapping
    node_label: Optional[ColumnMapping] = None
    metrics: tuple[ColumnMapping, ...] = ()

    def parent_of(self, row: dict[str, Any]) -> Optional[str]:
        value = row.get(self.parent_id.source_column)
        if is_null(value):
            return None
        return apply_transform(stringify(value), self.parent_id.transform) or None


@dataclass(frozen=True)
class NetworkRoles:
    source_node: ColumnMapping
    target_node: ColumnMapping
    edge_weight: Optional[ColumnMapping] = None
    edge_label: Optional[ColumnMapping] = None
    node_group: Optional[ColumnMapping] = None
    relationship_type: Optional[ColumnMapping] = None
    cardinality: Optional[ColumnMapping] = None


def resolve_hierarchy_roles(mappings: Sequence[ColumnMapping]) -> HierarchyRoles:
    node_id = _find(mappings, "node_id")
    parent_id = _find(mappings, "parent_id")
    if node_id is None or parent_id is None:
        raise MappingConfigError("Hierarchy requires node_id and parent_id mappings")

    return HierarchyRoles(
        node_id=node_id,
        parent_id=parent_id,
        node_label=_find(mappings, "node_label"),
        metrics=tuple(m for m in mappings if m.role_id == "metric"),
    )


def resolve_network_roles(mappings: Sequence[ColumnMapping]) -> NetworkRoles:
    source = _find(mappings, "source_node")
    target = _find(mappings, "target_node")
    if source is None or target is None:
        raise MappingConfigError("Network requires source_node and target_node mappings")

    return NetworkRoles(
        source_node=source,
        target_node=target,
        edge_weight=_find(mappings, "edge_weight"),
        edge_label=_find(mappings, "edge_label"),
        node_group=_find(mappings, "node_group"),
        relationship_type=_find(mappings, "relationship_type"),
        cardinality=_find(mappings, "cardinality"),
    )
