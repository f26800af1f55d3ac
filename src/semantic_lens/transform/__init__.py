from .hierarchy import (
    HierarchyIntegrityError,
    build_hierarchy,
    build_hierarchy_report,
    find_node_by_id,
    flatten_hierarchy,
)
from .network import build_network
from .roles import (
    HierarchyRoles,
    MappingConfigError,
    NetworkRoles,
    resolve_hierarchy_roles,
    resolve_network_roles,
)

__all__ = [
    "HierarchyIntegrityError",
    "HierarchyRoles",
    "MappingConfigError",
    "NetworkRoles",
    "build_hierarchy",
    "build_hierarchy_report",
    "build_network",
    "find_node_by_id",
    "flatten_hierarchy",
    "resolve_hierarchy_roles",
    "resolve_network_roles",
]
