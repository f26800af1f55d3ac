from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional, Sequence

from .models import ColumnMapping, ColumnType, DataType, SemanticRole, SemanticSchema


def _role(
    role_id: str,
    name: str,
    description: str,
    *,
    required: bool = False,
    multiple: bool = False,
    data_type: ColumnType = ColumnType.STRING,
) -> SemanticRole:
    return SemanticRole(
        id=role_id,
        name=name,
        description=description,
        required=required,
        multiple=multiple,
        data_type=data_type,
    )


N, D = ColumnType.NUMBER, ColumnType.DATE


def default_schemas() -> list[SemanticSchema]:
    """
    Built-in schemas, one per data type.

    A fresh list is returned on every call so callers can edit their copy.
    """
    return [
        SemanticSchema(
            id="hierarchy-default",
            data_type=DataType.HIERARCHY,
            name="Hierarchy",
            description="Tree-structured data with parent-child relationships (e.g., FLOC, org charts, folder structures)",
            roles=[
                _role("node_id", "Node ID", "Unique identifier for each node in the hierarchy", required=True),
                _role("node_label", "Node Label", "Display name or description for the node"),
                _role("parent_id", "Parent ID", "Reference to the parent node (empty/null for root nodes)", required=True),
                _role("metric", "Metric", "Numeric value to visualize (e.g., count, cost, score)", multiple=True, data_type=N),
            ],
        ),
        SemanticSchema(
            id="tabular-default",
            data_type=DataType.TABULAR,
            name="Tabular",
            description="Flat dataset for profiling and exploration (e.g., transactions, records, logs)",
            roles=[
                _role("row_id", "Row Identifier", "Unique identifier for each row"),
                _role("category", "Category Field", "Categorical field for grouping and filtering", multiple=True),
                _role("measure", "Measure Field", "Numeric field for aggregation and statistics", multiple=True, data_type=N),
                _role("timestamp", "Timestamp", "Date/time field for temporal analysis", data_type=D),
                _role("text", "Text Field", "Free-form text field for content analysis", multiple=True),
            ],
        ),
        SemanticSchema(
            id="network-default",
            data_type=DataType.NETWORK,
            name="Network",
            description="Graph data with nodes and edges (e.g., relationships, dependencies, flows)",
            roles=[
                _role("source_node", "Source Node", "Starting node of an edge/relationship", required=True),
                _role("target_node", "Target Node", "Ending node of an edge/relationship", required=True),
                _role("edge_weight", "Edge Weight", "Numeric weight or strength of the relationship", data_type=N),
                _role("edge_label", "Edge Label", "Label or type of the relationship"),
                _role("node_group", "Node Group", "Category or group for node coloring"),
                _role("relationship_type", "Relationship Type", "Type of relationship between nodes (e.g., sources from, depends on)"),
                _role("cardinality", "Cardinality", "Cardinality of the relationship (e.g., 1:1, 1:N, N:M)"),
            ],
        ),
        SemanticSchema(
            id="timeline-default",
            data_type=DataType.TIMELINE,
            name="Timeline / Events",
            description="Time-based events and milestones (e.g., project timelines, audit trails)",
            roles=[
                _role("event_id", "Event ID", "Unique identifier for each event"),
                _role("event_name", "Event Name", "Name or title of the event", required=True),
                _role("start_date", "Start Date/Time", "When the event starts or occurs", required=True, data_type=D),
                _role("end_date", "End Date/Time", "When the event ends (optional for point events)", data_type=D),
                _role("duration", "Duration", "Duration of the event", data_type=N),
                _role("category", "Category/Type", "Type or category of event for grouping and coloring"),
                _role("status", "Status", "Current status of the event (e.g., planned, in progress, completed)"),
                _role("description", "Description", "Detailed description or notes about the event"),
            ],
        ),
        SemanticSchema(
            id="treemap-default",
            data_type=DataType.TREEMAP,
            name="Tree Map",
            description="Hierarchical data with proportional sizing (e.g., budget breakdowns, disk usage)",
            roles=[
                _role("category", "Category", "Name of the category or item", required=True),
                _role("parent_category", "Parent Category", "Parent category for nested structures (empty/null for top-level)"),
                _role("value", "Value/Size", "Numeric value that determines rectangle size", required=True, data_type=N),
                _role("color_metric", "Color Metric", "Secondary metric for color coding", data_type=N),
                _role("label", "Label", "Display label or formatted text"),
            ],
        ),
        SemanticSchema(
            id="heatmap-default",
            data_type=DataType.HEATMAP,
            name="Heat Map / Matrix",
            description="Matrix data with color-coded values (e.g., correlation or confusion matrices)",
            roles=[
                _role("row_label", "Row Label", "Label for the row dimension", required=True),
                _role("column_label", "Column Label", "Label for the column dimension", required=True),
                _role("cell_value", "Cell Value", "Numeric value to encode as color intensity", required=True, data_type=N),
                _role("cell_label", "Cell Label", "Display label or formatted value for the cell"),
                _role("color_scale", "Color Scale Type", "Type of color scale (e.g., sequential, diverging)"),
            ],
        ),
        SemanticSchema(
            id="geographic-default",
            data_type=DataType.GEOGRAPHIC,
            name="Geographic / Map",
            description="Location-based data with coordinates (e.g., store locations, delivery routes)",
            roles=[
                _role("location_id", "Location ID", "Unique identifier for the location"),
                _role("location_name", "Location Name", "Name or label for the location", required=True),
                _role("latitude", "Latitude", "Latitude coordinate (decimal degrees)", required=True, data_type=N),
                _role("longitude", "Longitude", "Longitude coordinate (decimal degrees)", required=True, data_type=N),
                _role("address", "Address", "Full address or location description"),
                _role("region", "Region/Zone", "Geographic region or zone for grouping"),
                _role("metric_value", "Metric Value", "Numeric value for sizing markers", data_type=N),
                _role("category", "Category", "Type or category for marker styling"),
            ],
        ),
        SemanticSchema(
            id="flow-default",
            data_type=DataType.FLOW,
            name="Flow / Sankey",
            description="Flow data showing movement or transformation (e.g., budget flows, conversion funnels)",
            roles=[
                _role("source", "Source", "Starting point of the flow", required=True),
                _role("target", "Target", "Ending point of the flow", required=True),
                _role("flow_value", "Flow Value", "Magnitude or volume of the flow", required=True, data_type=N),
                _role("flow_type", "Flow Type/Category", "Type or category of flow for coloring"),
                _role("description", "Description", "Additional details about the flow"),
            ],
        ),
    ]


class SchemaRegistry:
    """
    Explicit catalogue of semantic schemas.

    Builders never read a global schema set; callers construct a registry
    (usually from default_schemas()) and pass it in.
    """

    def __init__(self, schemas: Optional[Iterable[SemanticSchema]] = None) -> None:
        self._schemas: dict[str, SemanticSchema] = {}
        for schema in default_schemas() if schemas is None else schemas:
            self.register(schema)

    def register(self, schema: SemanticSchema) -> None:
        if not schema.id:
            raise ValueError("Schema id must be provided.")
        self._schemas[schema.id] = schema

    def list_schemas(self) -> list[str]:
        return sorted(self._schemas.keys())

    def get_schema(self, schema_id: str) -> SemanticSchema:
        try:
            return self._schemas[schema_id]
        except KeyError as exc:
            raise KeyError(self._unknown_schema_msg(schema_id)) from exc

    def get_schema_by_data_type(self, data_type: DataType | str) -> Optional[SemanticSchema]:
        """First registered schema declaring this data type, if any."""
        dt = DataType(data_type)
        for schema in self._schemas.values():
            if schema.data_type == dt:
                return schema
        return None

    def describe_schema(self, schema_id: str) -> dict[str, object]:
        schema = self.get_schema(schema_id)
        return {
            "id": schema.id,
            "name": schema.name,
            "data_type": schema.data_type.value,
            "description": schema.description,
            "required_roles": [r.id for r in schema.roles if r.required],
            "optional_roles": [r.id for r in schema.roles if not r.required],
            "multiple_roles": [r.id for r in schema.roles if r.multiple],
        }

    def _unknown_schema_msg(self, schema_id: str) -> str:
        available = ", ".join(self.list_schemas()) or "none"
        return f"Unknown schema '{schema_id}'. Available schemas: {available}."


def validate_mappings(
    schema: SemanticSchema,
    mappings: Sequence[ColumnMapping],
    columns: Optional[Sequence[str]] = None,
) -> list[str]:
    """Check mappings against a schema; returns problems in a stable order.

    Reports unknown roles, required roles with no mapping, single-valued
    roles mapped more than once and, when `columns` is given, mappings to
    columns the dataset does not have. Never raises.
    """
    problems: list[str] = []
    known = {r.id: r for r in schema.roles}
    per_role = Counter(m.role_id for m in mappings)

    for m in mappings:
        if m.role_id not in known:
            problems.append(f"Unknown role '{m.role_id}' for schema '{schema.id}' (column '{m.source_column}').")

    for role in schema.roles:
        n = per_role.get(role.id, 0)
        if role.required and n == 0:
            problems.append(f"Required role '{role.id}' is not mapped.")
        if not role.multiple and n > 1:
            problems.append(f"Role '{role.id}' accepts one column but {n} are mapped.")

    if columns is not None:
        available = set(columns)
        for m in mappings:
            if m.source_column not in available:
                problems.append(f"Column '{m.source_column}' (role '{m.role_id}') is not in the dataset.")

    return problems
