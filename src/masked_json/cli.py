"""Command-line interface for masked-json."""

from __future__ import annotations

import importlib
import json
import logging
import sys
from pathlib import Path  # noqa: TC003
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .core import apply_spec, load_spec, mask_and_serialize
from .directives import Mask, masked_fields
from .hashing import to_hash, verify_hash
from .models import SerializationOptions
from .password import generate_password

app = typer.Typer(help="Mask sensitive fields in JSON documents")
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _check_verbosity(verbose: bool, quiet: bool) -> None:
    if verbose and quiet:
        err_console.print("[red]Error: --verbose and --quiet cannot be used together[/red]")
        sys.exit(1)
    _configure_logging(verbose, quiet)


def _read_document(input_file: Path) -> Any:
    """Read a JSON document from a file, or from stdin when the path is '-'."""
    text = sys.stdin.read() if str(input_file) == "-" else input_file.read_text(encoding="utf-8")
    return json.loads(text)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")


@app.command()
def mask(
    input_file: Path = typer.Argument(..., help="JSON document to mask ('-' for stdin)"),
    paths: list[str] | None = typer.Option(None, "--path", "-p", help="Dotted path of a field to mask (repeatable)"),
    literal: str | None = typer.Option(None, "--literal", help="Replace values with this text"),
    char: str | None = typer.Option(None, "--char", help="Mask values character by character"),
    start: int = typer.Option(0, "--start", help="Leading characters left unmasked (with --char)"),
    end: int = typer.Option(0, "--end", help="Trailing characters left unmasked (with --char)"),
    hash_type: str | None = typer.Option(None, "--hash", help="Replace values with their digest (SHA256, SHA384, SHA512)"),
    salt_length: int = typer.Option(0, "--salt-length", help="Random salt length (with --hash)"),
    save_salt: bool = typer.Option(False, "--save-salt", help="Prefix digests with the hex-encoded salt"),
    indent: bool = typer.Option(False, "--indent", help="Indent the output"),
    camel_case: bool = typer.Option(False, "--camel-case", help="Write camelCase names (explicit aliases win)"),
    include_nulls: bool = typer.Option(False, "--include-nulls", help="Keep null values in the output"),
    strict: bool = typer.Option(False, "--strict", help="Fail on paths that do not resolve"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result to a file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode (minimal output)"),
) -> None:
    """Mask fields of a JSON document by dotted path."""
    _check_verbosity(verbose, quiet)
    try:
        directive = Mask(
            literal,
            char=char,
            unmasked_start=start,
            unmasked_end=end,
            hash_type=hash_type,
            salt_length=salt_length,
            save_salt=save_salt,
        )
        options = SerializationOptions(
            indented=indent,
            use_original_names=not camel_case,
            include_null_values=include_nulls,
        )
        document = _read_document(input_file)
        text = mask_and_serialize(document, paths or [], directive.strategy, options, strict=strict)
        _emit(text, output)
    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@app.command()
def run(
    spec_file: Path = typer.Argument(..., help="Path to YAML masking spec"),
    input_file: Path = typer.Argument(..., help="JSON document to mask ('-' for stdin)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the result to a file"),
    strict: bool = typer.Option(False, "--strict", help="Enable strict validation and path resolution"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode (minimal output)"),
) -> None:
    """Mask a JSON document as described by a YAML spec."""
    _check_verbosity(verbose, quiet)
    try:
        spec = load_spec(spec_file)
        if strict:
            spec.strict = True

            from .validation import semantic_validate
            semantic_errors = semantic_validate(spec, strict=True)
            if semantic_errors:
                err_console.print("[red]Strict validation failed:[/red]")
                for error in semantic_errors:
                    err_console.print(f"  [red]• {error}[/red]")
                sys.exit(1)

        if verbose and not quiet:
            plan = "\n".join(spec.masked_paths) or "(no paths)"
            err_console.print(Panel(plan, title=f"Masking plan ({spec.strategy.kind})"))

        document = _read_document(input_file)
        _emit(apply_spec(spec, document), output)

    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@app.command()
def validate(
    spec_file: Path = typer.Argument(..., help="Path to YAML masking spec"),
    strict: bool = typer.Option(False, "--strict", help="Enable strict validation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Enable quiet mode (minimal output)"),
) -> None:
    """Validate a masking spec."""
    _check_verbosity(verbose, quiet)
    try:
        # Schema validation happens while loading
        spec = load_spec(spec_file)

        if verbose and not quiet:
            console.print(f"[blue]Loaded specification from {spec_file}[/blue]")
            console.print(f"Version: {spec.version}")
            console.print(f"Masked paths: {len(spec.masked_paths)}")
            console.print(f"Strategy: {spec.strategy.kind}")

        from .validation import semantic_validate
        semantic_errors = semantic_validate(spec, strict=strict)

        if semantic_errors:
            console.print("[red]Semantic validation failed:[/red]")
            for error in semantic_errors:
                console.print(f"  [red]• {error}[/red]")
            sys.exit(1)

        if not quiet:
            if strict:
                console.print("[green]✓ Specification is valid (strict mode)[/green]")
            else:
                console.print("[green]✓ Specification is valid[/green]")

    except Exception as e:
        console.print(f"[red]Validation error: {e}[/red]")
        sys.exit(1)


@app.command("hash")
def hash_command(
    text: str = typer.Argument(..., help="Text to hash"),
    hash_type: str = typer.Option("SHA256", "--type", "-t", help="Hash algorithm"),
    salt_length: int = typer.Option(0, "--salt-length", help="Random salt length"),
    save_salt: bool = typer.Option(True, "--save-salt/--no-save-salt", help="Prefix the digest with the hex-encoded salt"),
) -> None:
    """Print the hex digest of a value."""
    try:
        typer.echo(to_hash(text, hash_type, salt_length, save_salt))
    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@app.command("verify-hash")
def verify_hash_command(
    text: str = typer.Argument(..., help="Plain text"),
    hash_value: str = typer.Argument(..., help="Hash value, optionally prefixed with its salt"),
    hash_type: str = typer.Option("SHA256", "--type", "-t", help="Hash algorithm"),
) -> None:
    """Check a value against a hash produced by the hash command."""
    try:
        matches = verify_hash(hash_type, text, hash_value)
    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if matches:
        console.print("[green]✓ Hash matches[/green]")
    else:
        console.print("[red]✗ Hash does not match[/red]")
        sys.exit(1)


@app.command()
def password(
    length: int = typer.Option(12, "--length", "-l", help="Password length (minimum when --max-length is given)"),
    max_length: int | None = typer.Option(None, "--max-length", help="Maximum password length"),
) -> None:
    """Generate a random password."""
    try:
        typer.echo(generate_password(length, max_length))
    except ValueError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@app.command()
def inspect(
    target: str = typer.Argument(..., help="Model or dataclass to inspect, as module:QualifiedName"),
) -> None:
    """List the masked fields declared on a type."""
    try:
        owner = _import_target(target)
        directives = masked_fields(owner)
    except Exception as e:
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if not directives:
        console.print(f"[yellow]{target} declares no masked fields[/yellow]")
        return

    table = Table(title=f"Masked fields of {owner.__qualname__}")
    table.add_column("Field", style="cyan")
    table.add_column("Strategy", style="magenta")
    table.add_column("Settings", style="green")

    for directive in directives:
        settings = directive.strategy.model_dump(exclude={"kind"}, mode="json")
        table.add_row(
            directive.field_name,
            directive.strategy.kind,
            ", ".join(f"{k}={v!r}" for k, v in settings.items()),
        )

    console.print(table)


@app.command()
def print_schema() -> None:
    """Print the JSON schema for masking specs."""
    from .models import MaskSpec

    schema = MaskSpec.model_json_schema()
    typer.echo(json.dumps(schema, indent=2))


def _import_target(target: str) -> type:
    module_name, sep, qualname = target.partition(":")
    if not sep or not qualname:
        raise ValueError(f"Expected module:QualifiedName, got '{target}'")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        obj = getattr(obj, part)
    return obj


if __name__ == "__main__":
    app()
