"""
Root Typer application for the hearing-spine CLI.

Commands operate on local files and the configured artefact store, so an
operator can check an upload or a payload before it reaches the service.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.table import Table

from hearing_spine.core.errors import HearingSpineError
from hearing_spine.core.logging import configure_logging
from hearing_spine.core.settings import get_settings

from hearing_spine.cli.utils import console, fail, print_json, print_records

app = typer.Typer(
    name="hearing-spine",
    help="hearing-spine: convert, validate and export court hearing lists.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from hearing_spine import __version__

        try:
            v = pkg_version("hearing-spine")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"hearing-spine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override HEARING_SPINE_LOG_LEVEL."),
) -> None:
    """hearing-spine CLI: spreadsheet conversion, payload validation and SJP export."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_format=settings.json_logs)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("convert")
def convert(
    list_type_id: int = typer.Argument(..., help="List type id, e.g. 9 for Care Standards Tribunal"),
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Uploaded .xlsx file"),
    json_out: bool = typer.Option(False, "--json", help="Print the converted JSON."),
) -> None:
    """Convert a spreadsheet with the list type's converter."""
    from hearing_spine.conversion.registry import build_converter_registry

    registry = build_converter_registry()
    try:
        converted = registry.convert_excel_for_list_type(list_type_id, file.read_bytes())
    except HearingSpineError as e:
        fail(e)

    if json_out:
        print_json(converted)
    elif isinstance(converted, dict):
        for name, records in converted.items():
            print_records(records, title=name)
    else:
        print_records(converted, title=f"List type {list_type_id}")


@app.command("validate")
def validate(
    payload: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Publication request JSON"),
    locations: Path | None = typer.Option(None, "--locations", help="Location records JSON file."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Validate a publication request payload and report every error."""
    from hearing_spine.ingestion import IngestionRequest, validate_ingestion_request
    from hearing_spine.reference import InMemoryLocationDirectory

    settings = get_settings()
    raw = payload.read_bytes()
    try:
        data = json.loads(raw)
    except ValueError as e:
        fail(f"Payload is not valid JSON: {e}")
    if not isinstance(data, dict):
        fail("Payload must be a JSON object")

    try:
        locations_file = locations or settings.locations_file
        directory = (
            InMemoryLocationDirectory.from_json_file(locations_file)
            if locations_file
            else InMemoryLocationDirectory.default()
        )
    except HearingSpineError as e:
        fail(e)

    result = validate_ingestion_request(
        IngestionRequest.from_dict(data),
        len(raw),
        location_directory=directory,
        max_payload_bytes=settings.max_payload_bytes,
    )

    if json_out:
        print_json(result)
    elif result.is_valid:
        console.print(f"[green]Valid[/green] (list type {result.list_type_id}, location exists: {result.location_exists})")
    else:
        table = Table(title="Validation errors")
        table.add_column("Field", style="cyan")
        table.add_column("Message")
        for issue in result.errors:
            table.add_row(issue.field, issue.message)
        console.print(table)

    if not result.is_valid:
        raise typer.Exit(code=1)


@app.command("sjp-export")
def sjp_export(
    artefact_id: str = typer.Argument(..., help="Artefact id of a stored SJP press list"),
    search: str | None = typer.Option(None, "--search", "-s", help="Name or reference contains."),
    postcode: list[str] | None = typer.Option(None, "--postcode", "-p", help="Postcode prefix; repeatable. LONDON_POSTCODES selects London."),
    prosecutor: list[str] | None = typer.Option(None, "--prosecutor", help="Prosecutor name; repeatable."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write CSV here instead of stdout."),
    storage_dir: Path | None = typer.Option(None, "--storage-dir", help="Override HEARING_SPINE_STORAGE_DIR."),
) -> None:
    """Export the filtered SJP press list as CSV."""
    from hearing_spine.sjp import SearchFilters, SjpCaseService, generate_csv
    from hearing_spine.storage import ArtefactStore

    settings = get_settings()
    service = SjpCaseService(ArtefactStore(storage_dir or settings.storage_dir), settings.cases_per_page)
    filters = SearchFilters(
        search_query=search,
        postcodes=tuple(postcode or ()),
        prosecutors=tuple(prosecutor or ()),
    )
    try:
        cases = service.get_all_press_cases(artefact_id, filters)
    except HearingSpineError as e:
        fail(e)

    csv = generate_csv(cases)
    if output is None:
        typer.echo(csv)
    else:
        output.write_text(csv, encoding="utf-8")
        console.print(f"Wrote {len(cases)} case(s) to {output}")


@app.command("list-types")
def list_types(json_out: bool = typer.Option(False, "--json")) -> None:
    """Show the known list types and whether spreadsheets can be converted for them."""
    from hearing_spine.conversion.registry import build_converter_registry
    from hearing_spine.reference import KNOWN_LIST_TYPES

    registry = build_converter_registry()
    if json_out:
        print_json(
            [
                {
                    "id": lt.id,
                    "name": lt.name,
                    "englishFriendlyName": lt.english_friendly_name,
                    "provenance": lt.provenance,
                    "hasConverter": registry.has_converter_for_list_type(lt.id),
                }
                for lt in KNOWN_LIST_TYPES
            ]
        )
        return

    table = Table(title="List types")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Friendly name")
    table.add_column("Provenance")
    table.add_column("Converter")
    for lt in KNOWN_LIST_TYPES:
        table.add_row(
            str(lt.id),
            lt.name,
            lt.english_friendly_name,
            lt.provenance,
            "yes" if registry.has_converter_for_list_type(lt.id) else "",
        )
    console.print(table)


__all__ = ["app"]
