from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    """
    Base for all engine models.

    Fields are snake_case in Python; `model_dump(by_alias=True)` produces the
    camelCase wire shape (sourceColumn, parentId, qualityScore, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataType(str, Enum):
    """Visualization data types a semantic schema can declare."""
    HIERARCHY = "hierarchy"
    TABULAR = "tabular"
    NETWORK = "network"
    TIMELINE = "timeline"
    TREEMAP = "treemap"
    HEATMAP = "heatmap"
    GEOGRAPHIC = "geographic"
    FLOW = "flow"


class ColumnType(str, Enum):
    """Per-column value types produced by type inference."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    MIXED = "mixed"


class ColumnTransform(str, Enum):
    NONE = "none"
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    TRIM = "trim"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class SourceType(str, Enum):
    CSV = "csv"
    JSON = "json"


# ---- schema ----


class SemanticRole(_Model):
    """
    A named semantic slot a schema declares.

    multiple: more than one column may be bound to this role (e.g. metrics)
    data_type: the value type the role expects, informational only
    """
    id: str
    name: str
    description: str = ""
    required: bool = False
    multiple: bool = False
    data_type: Optional[ColumnType] = None


class SemanticSchema(_Model):
    id: str
    data_type: DataType
    name: str
    description: str = ""
    roles: list[SemanticRole] = Field(default_factory=list)

    def role(self, role_id: str) -> Optional[SemanticRole]:
        for r in self.roles:
            if r.id == role_id:
                return r
        return None


class ColumnMapping(_Model):
    """
    Binds one raw dataset column to one semantic role.

    The engine does not check that source_column exists in the dataset; see
    schemas.validate_mappings for a caller-side check.
    """
    source_column: str
    role_id: str
    display_name: str
    transform: ColumnTransform = ColumnTransform.NONE


# ---- input data ----


class Dataset(_Model):
    """
    Parsed tabular data: ordered column names plus one mapping per row.

    Missing keys, None, NaN and "" all count as null values.
    """
    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    source_type: SourceType = SourceType.CSV
    file_name: Optional[str] = None

    def column_values(self, column: str) -> list[Any]:
        return [row.get(column) for row in self.rows]


class Bundle(_Model):
    """A dataset plus its schema choice and column mappings."""
    dataset: Dataset
    schema_id: str
    mappings: list[ColumnMapping] = Field(default_factory=list)
    name: Optional[str] = None


# ---- hierarchy ----


class HierarchyNode(_Model):
    id: str
    label: str
    parent_id: Optional[str] = None
    metrics: dict[str, float] = Field(default_factory=dict)
    children: list[HierarchyNode] = Field(default_factory=list)
    depth: int = 0


# ---- tabular ----


class QualityIssue(_Model):
    """
    Non-fatal finding about a column (or a hierarchy build).

    type: high_nulls | low_cardinality | outliers | format_inconsistency |
          duplicate_ids | dangling_parents | cycle
    """
    type: str
    severity: Severity
    message: str
    count: Optional[int] = None


class ValueCount(_Model):
    value: str
    count: int


class NumericStats(_Model):
    min: float
    max: float
    mean: float
    median: float
    std_dev: float


class TabularProfile(_Model):
    column: str
    display_name: str
    data_type: ColumnType
    null_count: int
    unique_count: int
    total_count: int
    top_values: Optional[list[ValueCount]] = None
    numeric_stats: Optional[NumericStats] = None
    quality_score: int = 0
    quality_issues: list[QualityIssue] = Field(default_factory=list)


# ---- network ----


class NetworkNode(_Model):
    id: str
    label: str
    group: Optional[str] = None


class NetworkEdge(_Model):
    source: str
    target: str
    weight: float = 1
    label: Optional[str] = None
    relationship_type: Optional[str] = None
    cardinality: Optional[str] = None


class NetworkData(_Model):
    nodes: list[NetworkNode] = Field(default_factory=list)
    edges: list[NetworkEdge] = Field(default_factory=list)


# ---- results ----


class HierarchyBuild(_Model):
    """Forest plus the structural findings gathered while building it."""
    roots: list[HierarchyNode] = Field(default_factory=list)
    issues: list[QualityIssue] = Field(default_factory=list)


class TransformResult(_Model):
    """
    Output of running a bundle through the engine.

    Exactly one of hierarchy / profiles / network is populated, matching
    data_type.
    """
    data_type: DataType
    schema_id: str
    hierarchy: Optional[list[HierarchyNode]] = None
    hierarchy_issues: list[QualityIssue] = Field(default_factory=list)
    profiles: Optional[list[TabularProfile]] = None
    network: Optional[NetworkData] = None


HierarchyNode.model_rebuild()
