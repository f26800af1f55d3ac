from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from ..config import ProfileSettings
from ..models import Bundle, DataType, TransformResult
from ..profile import profile_tabular_data
from ..schemas import SchemaRegistry
from ..transform import MappingConfigError, build_hierarchy_report, build_network

logger = logging.getLogger(__name__)


class UnsupportedDataTypeError(MappingConfigError):
    """Raised when a bundle's schema declares a data type the engine cannot derive."""


SUPPORTED_DATA_TYPES: tuple[DataType, ...] = (DataType.HIERARCHY, DataType.TABULAR, DataType.NETWORK)


def transform_bundle(
    bundle: Bundle,
    registry: SchemaRegistry,
    *,
    settings: Optional[ProfileSettings] = None,
    strict: bool = False,
) -> TransformResult:
    """Run a bundle through the builder its schema's data type selects.

    hierarchy -> forest (+ structural issues), tabular -> column profiles,
    network -> nodes and edges. Any other data type raises
    UnsupportedDataTypeError; unknown schema ids raise KeyError.
    """
    schema = registry.get_schema(bundle.schema_id)
    dt = schema.data_type
    logger.debug(
        "Transforming bundle %r with schema %s (%s), %d mapping(s)",
        bundle.name,
        schema.id,
        dt.value,
        len(bundle.mappings),
    )

    if dt == DataType.HIERARCHY:
        built = build_hierarchy_report(bundle.dataset, bundle.mappings, strict=strict)
        return TransformResult(
            data_type=dt,
            schema_id=schema.id,
            hierarchy=built.roots,
            hierarchy_issues=built.issues,
        )
    if dt == DataType.TABULAR:
        profiles = profile_tabular_data(bundle.dataset, bundle.mappings, settings=settings)
        return TransformResult(data_type=dt, schema_id=schema.id, profiles=profiles)
    if dt == DataType.NETWORK:
        network = build_network(bundle.dataset, bundle.mappings)
        return TransformResult(data_type=dt, schema_id=schema.id, network=network)

    supported = ", ".join(d.value for d in SUPPORTED_DATA_TYPES)
    raise UnsupportedDataTypeError(
        f"Schema '{schema.id}' has data type '{dt.value}'; supported data types: {supported}."
    )


def write_result(result: TransformResult, out_path: Path, *, by_alias: bool = False) -> None:
    """Write a result as stable JSON (sorted keys, trailing newline)."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = result.model_dump(mode="json", by_alias=by_alias, exclude_none=True)
    out_path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8")
