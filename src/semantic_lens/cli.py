from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError

from .config import ProfileSettings
from .ingest import DatasetParseError, load_dataset
from .models import Bundle, ColumnMapping
from .pipeline import transform_bundle, write_result
from .profile import profile_tabular_data
from .schemas import SchemaRegistry, validate_mappings
from .transform import HierarchyIntegrityError, MappingConfigError, build_hierarchy_report, build_network
from .utils import read_json, write_json

app = typer.Typer(add_completion=False, help="Semantic Lens: derive trees, profiles and graphs from flat data")

# ---- Schema commands ----
schemas_app = typer.Typer(help="Inspect available semantic schemas.")
app.add_typer(schemas_app, name="schemas")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@schemas_app.command("list")
def list_schemas() -> None:
    """
    List built-in schema ids with their data type.
    """
    registry = SchemaRegistry()
    for schema_id in registry.list_schemas():
        schema = registry.get_schema(schema_id)
        typer.echo(f"{schema_id} ({schema.data_type.value})")


@schemas_app.command("describe")
def describe_schema(
    schema: str = typer.Option(..., "--schema", help="Schema id to describe")
) -> None:
    """
    Show the roles of a schema as JSON.
    """
    registry = SchemaRegistry()
    try:
        meta = registry.describe_schema(schema)
    except KeyError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(meta, indent=2, sort_keys=True))


def parse_mapping_specs(specs: list[str]) -> list[ColumnMapping]:
    """
    Parse repeatable `column=role[:Display Name]` options.

    The display name defaults to the column name.
    """
    mappings: list[ColumnMapping] = []
    for spec in specs:
        if "=" not in spec:
            raise typer.BadParameter(f"Invalid mapping (expected column=role[:Display]): {spec}")
        column, rest = spec.split("=", 1)
        role, _, display = rest.partition(":")
        column, role = column.strip(), role.strip()
        if not column or not role:
            raise typer.BadParameter(f"Invalid mapping (expected column=role[:Display]): {spec}")
        mappings.append(
            ColumnMapping(source_column=column, role_id=role, display_name=display.strip() or column)
        )
    return mappings


def _load_mappings(specs: list[str], mappings_file: Optional[Path]) -> list[ColumnMapping]:
    mappings: list[ColumnMapping] = []
    if mappings_file is not None:
        raw = read_json(mappings_file)
        if not isinstance(raw, list):
            raise typer.BadParameter(f"{mappings_file} must contain a JSON list of mappings")
        mappings.extend(ColumnMapping.model_validate(m) for m in raw)
    mappings.extend(parse_mapping_specs(specs))
    return mappings


def _emit(payload: Any, out: Optional[Path]) -> None:
    if out is not None:
        write_json(out, payload)
        typer.echo(f"Wrote {out}")
    else:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))


_DATA_OPT = typer.Option(..., "--data", help="Path to a CSV or JSON file")
_MAP_OPT = typer.Option([], "--map", help="Column mapping like name=node_label:Name (repeatable)")
_MAPPINGS_FILE_OPT = typer.Option(None, "--mappings", help="JSON file with a list of column mappings")
_OUT_OPT = typer.Option(None, "--out", help="Write JSON here instead of stdout")
_CAMEL_OPT = typer.Option(False, "--camel", help="Emit camelCase keys")


@app.command()
def profile(
    data: Path = _DATA_OPT,
    map_: list[str] = _MAP_OPT,
    mappings_file: Optional[Path] = _MAPPINGS_FILE_OPT,
    out: Optional[Path] = _OUT_OPT,
    camel: bool = _CAMEL_OPT,
):
    """
    Profile every column of a dataset: types, counts, value frequencies and quality scores.
    """
    try:
        dataset = load_dataset(data)
        mappings = _load_mappings(map_, mappings_file)
        profiles = profile_tabular_data(dataset, mappings, settings=ProfileSettings.from_env())
        _emit([p.model_dump(mode="json", by_alias=camel, exclude_none=True) for p in profiles], out)
    except (FileNotFoundError, DatasetParseError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except (ValidationError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def hierarchy(
    data: Path = _DATA_OPT,
    map_: list[str] = _MAP_OPT,
    mappings_file: Optional[Path] = _MAPPINGS_FILE_OPT,
    strict: bool = typer.Option(False, "--strict", help="Fail on duplicate ids, dangling parents or cycles"),
    out: Optional[Path] = _OUT_OPT,
    camel: bool = _CAMEL_OPT,
):
    """
    Build a parent/child forest. Requires node_id and parent_id mappings.
    """
    try:
        dataset = load_dataset(data)
        built = build_hierarchy_report(dataset, _load_mappings(map_, mappings_file), strict=strict)
        for issue in built.issues:
            typer.echo(f"{issue.severity.value}: {issue.message}", err=True)
        _emit(built.model_dump(mode="json", by_alias=camel, exclude_none=True), out)
    except (FileNotFoundError, DatasetParseError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except (MappingConfigError, HierarchyIntegrityError, ValidationError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def network(
    data: Path = _DATA_OPT,
    map_: list[str] = _MAP_OPT,
    mappings_file: Optional[Path] = _MAPPINGS_FILE_OPT,
    out: Optional[Path] = _OUT_OPT,
    camel: bool = _CAMEL_OPT,
):
    """
    Build nodes and edges. Requires source_node and target_node mappings.
    """
    try:
        dataset = load_dataset(data)
        graph = build_network(dataset, _load_mappings(map_, mappings_file))
        _emit(graph.model_dump(mode="json", by_alias=camel, exclude_none=True), out)
    except (FileNotFoundError, DatasetParseError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except (MappingConfigError, ValidationError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def transform(
    data: Path = _DATA_OPT,
    schema: str = typer.Option(..., "--schema", help="Schema id, e.g. hierarchy-default"),
    map_: list[str] = _MAP_OPT,
    mappings_file: Optional[Path] = _MAPPINGS_FILE_OPT,
    strict: bool = typer.Option(False, "--strict", help="Fail on hierarchy integrity issues"),
    out: Optional[Path] = _OUT_OPT,
    camel: bool = _CAMEL_OPT,
):
    """
    Run a dataset through the builder selected by the schema's data type.
    """
    try:
        bundle = Bundle(
            dataset=load_dataset(data),
            schema_id=schema,
            mappings=_load_mappings(map_, mappings_file),
            name=data.stem,
        )
        result = transform_bundle(
            bundle,
            SchemaRegistry(),
            settings=ProfileSettings.from_env(),
            strict=strict,
        )
        if out is not None:
            write_result(result, out, by_alias=camel)
            typer.echo(f"Wrote {out}")
        else:
            typer.echo(json.dumps(result.model_dump(mode="json", by_alias=camel, exclude_none=True), indent=2, sort_keys=True))
    except (FileNotFoundError, DatasetParseError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except KeyError as e:
        typer.echo(f"ERROR: {e.args[0] if e.args else e}", err=True)
        raise typer.Exit(code=1)
    except (MappingConfigError, HierarchyIntegrityError, ValidationError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def validate(
    data: Path = _DATA_OPT,
    schema: str = typer.Option(..., "--schema", help="Schema id to validate against"),
    map_: list[str] = _MAP_OPT,
    mappings_file: Optional[Path] = _MAPPINGS_FILE_OPT,
):
    """
    Check mappings against a schema and the dataset's columns.
    """
    try:
        dataset = load_dataset(data)
        sch = SchemaRegistry().get_schema(schema)
        problems = validate_mappings(sch, _load_mappings(map_, mappings_file), columns=dataset.columns)
    except (FileNotFoundError, DatasetParseError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except KeyError as e:
        typer.echo(f"ERROR: {e.args[0] if e.args else e}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)

    if problems:
        for p in problems:
            typer.echo(f"- {p}")
        raise typer.Exit(code=1)
    typer.echo("Mappings OK.")
