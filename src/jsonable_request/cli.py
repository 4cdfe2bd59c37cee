"""Command-line interface for rendering and sending request templates."""
from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NoReturn

import requests
import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install jsonable-request[cli]' to enable this command."
    ) from exc

from .builder import RequestBuilder
from .config import TemplateRegistry
from .exceptions import JsonableRequestError
from .http import parse_json
from .interpolation import find_placeholders
from .template import validate

app = typer.Typer(help="Render and send declarative HTTP request templates.", no_args_is_help=True)

console = Console(force_terminal=False, color_system=None)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


def _handle_template_error(exc: JsonableRequestError) -> NoReturn:
    typer.secho(f"Template error: {exc}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _coerce_simple(value: str):
    v = value.strip()
    if not v:
        return ""
    low = v.lower()
    if low in {"true", "yes", "on"}:
        return True
    if low in {"false", "no", "off"}:
        return False
    if low in {"null", "none"}:
        return None
    try:
        if "." in v:
            return float(v)
        return int(v)
    except ValueError:
        return v


def parse_data_pairs(pairs: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` pairs into a data record with simple coercion."""
    out: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'.", param_hint="--data")
        key, val = pair.split("=", 1)
        out[key.strip()] = _coerce_simple(val)
    return out


def _load_record(pairs: list[str], data_file: Path | None) -> dict[str, Any]:
    record: dict[str, Any] = {}
    if data_file:
        try:
            content = json.loads(data_file.expanduser().read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise typer.BadParameter(f"Cannot read data file: {exc}", param_hint="--data-file")
        if not isinstance(content, Mapping):
            raise typer.BadParameter("Data file must contain a JSON object.", param_hint="--data-file")
        record.update(content)
    record.update(parse_data_pairs(pairs))
    return record


def _load_template(template_file: Path, name: str | None) -> dict[str, Any]:
    try:
        return TemplateRegistry.from_path(template_file).get(name)
    except OSError as exc:
        raise typer.BadParameter(f"Cannot read template file: {exc}", param_hint="TEMPLATE_FILE")
    except JsonableRequestError as exc:
        _handle_template_error(exc)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    return {
        "template_file": typer.Argument(..., help="JSON file holding one or more templates."),
        "name": typer.Option(
            None,
            "--name",
            "-n",
            help="Template name when the file holds several templates.",
        ),
        "data": typer.Option(
            [],
            "--data",
            "-d",
            help="Placeholder value in key=value form (repeatable).",
            show_default=False,
        ),
        "data_file": typer.Option(
            None,
            "--data-file",
            help="JSON object of placeholder values; --data entries override it.",
        ),
        "coerce_numbers": typer.Option(
            False,
            "--coerce-numbers/--no-coerce-numbers",
            envvar="JSONABLE_REQUEST_COERCE_NUMBERS",
            help="Turn fully numeric strings produced by substitution into numbers.",
            show_default=True,
        ),
        "output_json": typer.Option(
            False,
            "--json",
            "-j",
            help="Return raw JSON instead of rendering a table.",
        ),
    }


_SHARED_OPTIONS = _shared_options()


@app.command("render")
def render(
    template_file: Path = _SHARED_OPTIONS["template_file"],
    name: str | None = _SHARED_OPTIONS["name"],
    data: list[str] = _SHARED_OPTIONS["data"],
    data_file: Path | None = _SHARED_OPTIONS["data_file"],
    coerce_numbers: bool = _SHARED_OPTIONS["coerce_numbers"],
) -> None:
    """Print the resolved template without sending it."""

    template = _load_template(template_file, name)
    record = _load_record(data, data_file)
    with RequestBuilder(coerce_numeric_strings=coerce_numbers) as builder:
        try:
            resolved = builder.parse(template, record)
        except JsonableRequestError as exc:
            _handle_template_error(exc)
            return

    _echo_json(resolved.to_dict())


@app.command("inspect")
def inspect_template(
    template_file: Path = _SHARED_OPTIONS["template_file"],
    name: str | None = _SHARED_OPTIONS["name"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """Validate a template and list the placeholders it references."""

    template = _load_template(template_file, name)
    try:
        validated = validate(template)
    except JsonableRequestError as exc:
        _handle_template_error(exc)
        return

    sections = {
        "endpoint": validated.endpoint,
        "headers": validated.headers,
        "data": validated.data,
        "auth": validated.auth.to_dict(),
    }
    rows = [
        {"placeholder": placeholder, "section": section}
        for section, value in sections.items()
        for placeholder in find_placeholders(value)
    ]
    if output_json:
        _echo_json(
            {
                "method": validated.method,
                "body_format": validated.body_format,
                "placeholders": rows,
            }
        )
        return

    table = Table(
        title=f"{validated.method} {validated.endpoint} ({validated.body_format})",
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    table.add_column("Placeholder")
    table.add_column("Section")
    for row in rows:
        table.add_row(row["placeholder"], row["section"])
    console.print(table)


@app.command("send")
def send(
    template_file: Path = _SHARED_OPTIONS["template_file"],
    name: str | None = _SHARED_OPTIONS["name"],
    data: list[str] = _SHARED_OPTIONS["data"],
    data_file: Path | None = _SHARED_OPTIONS["data_file"],
    coerce_numbers: bool = _SHARED_OPTIONS["coerce_numbers"],
    verify_ssl: bool = typer.Option(
        True,
        "--verify/--no-verify",
        envvar="JSONABLE_REQUEST_VERIFY_SSL",
        help="Enable or disable TLS certificate verification.",
        show_default=True,
    ),
    timeout: float = typer.Option(
        30.0,
        "--timeout",
        envvar="JSONABLE_REQUEST_TIMEOUT",
        help="Request timeout (seconds).",
        show_default=True,
    ),
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """Resolve a template and send it, printing the response."""

    template = _load_template(template_file, name)
    record = _load_record(data, data_file)
    with RequestBuilder(
        timeout=timeout,
        verify_ssl=verify_ssl,
        coerce_numeric_strings=coerce_numbers,
    ) as builder:
        try:
            response = builder.send(template, record or None)
        except JsonableRequestError as exc:
            _handle_template_error(exc)
            return
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            typer.secho(f"Request failed: {reason}", err=True, fg=typer.colors.RED)
            raise typer.Exit(code=1)

    body = parse_json(response)
    if output_json:
        _echo_json(
            {
                "status_code": response.status_code,
                "headers": dict(response.headers),
                "body": body,
            }
        )
    else:
        table = Table(
            title=f"HTTP {response.status_code}",
            box=box.SIMPLE,
            show_lines=False,
            header_style="bold cyan",
        )
        table.add_column("Header")
        table.add_column("Value")
        for header, value in response.headers.items():
            table.add_row(header, value)
        console.print(table)
        if isinstance(body, str):
            typer.echo(body)
        elif body is not None:
            _echo_json(body)

    if not response.ok:
        raise typer.Exit(code=1)


def main() -> None:  # pragma: no cover - console script shim
    app()


if __name__ == "__main__":  # pragma: no cover - module execution
    main()
