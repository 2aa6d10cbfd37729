"""
Command-line interface for swagger-scaffold.

Loads a Swagger document, runs the gin generator and writes (or, with
``--dry-run``, lists) the generated files.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich import box

from .codegen.core.config import ConfigError, load_config
from .codegen.core.generator import GenerationResult, generate_code
from .codegen.languages.go import GinGenerator
from .logging_config import configure_logging, get_logger
from .spec import SpecError
from .utils import SpecLoaderError, load_spec, write_files

logger = get_logger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="swagger-scaffold",
        description="Generate gin handlers, routes, operation stubs and validated models from a Swagger 2.0 spec.",
    )
    parser.add_argument(
        "spec",
        nargs="?",
        default="./swagger.json",
        help="Spec file path or http(s) URL, JSON or YAML (default: ./swagger.json)",
    )
    parser.add_argument("--target", "-t", metavar="DIR", help="Directory for generated files (default: ./)")
    parser.add_argument("--config", "-c", metavar="FILE", help="JSON configuration file")
    parser.add_argument("--timeout", type=int, default=30, help="Timeout in seconds for remote specs")

    packages = parser.add_argument_group("packages")
    packages.add_argument("--go-module", metavar="PATH", help="Go module path the packages live under")
    packages.add_argument("--model-package", metavar="NAME", help="Package for generated models")
    packages.add_argument("--operations-package", metavar="NAME", help="Package for operation stubs")
    packages.add_argument("--server-package", metavar="NAME", help="Package for routes and handlers")

    selection = parser.add_argument_group("selection")
    selection.add_argument(
        "--operation", dest="include_operations", action="append", metavar="ID",
        help="Only generate this operationId (repeatable)",
    )
    selection.add_argument(
        "--tag", dest="include_tags", action="append", metavar="TAG",
        help="Only generate operations whose first tag is TAG (repeatable)",
    )
    selection.add_argument(
        "--model", dest="include_models", action="append", metavar="NAME",
        help="Only generate this definition (repeatable)",
    )
    selection.add_argument("--skip-models", action="store_true", help="Don't generate model files")
    selection.add_argument(
        "--skip-operations", action="store_true", help="Don't generate the operations and server files"
    )

    output = parser.add_argument_group("output")
    output.add_argument("--no-comments", action="store_true", help="Don't emit description comments")
    output.add_argument("--dry-run", action="store_true", help="List the files instead of writing them")
    output.add_argument("--verbose", "-v", action="store_true", help="Debug logging and result metadata")
    output.add_argument("--quiet", "-q", action="store_true", help="Only log errors")

    return parser


def _config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Settings given on the command line; unset options are left to the config file."""
    overrides: Dict[str, Any] = {}
    for option in ("target", "go_module", "model_package", "operations_package", "server_package"):
        value = getattr(args, option, None)
        if value:
            overrides[option] = value
    for option in ("include_operations", "include_tags", "include_models"):
        value = getattr(args, option, None)
        if value:
            overrides[option] = list(value)
    if args.skip_models:
        overrides["skip_models"] = True
    if args.skip_operations:
        overrides["skip_operations"] = True
    if args.no_comments:
        overrides["add_comments"] = False
    return overrides


def _print_files(result: GenerationResult) -> None:
    table = Table(title="Generated files", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("File", style="bold")
    table.add_column("Lines", justify="right", style="green")
    for path, content in result.files.items():
        table.add_row(path, str(content.count("\n")))
    console.print(table)


def _print_metadata(result: GenerationResult) -> None:
    table = Table(title="Generation details", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value", style="green")
    for key, value in result.metadata.items():
        table.add_row(key.replace("_", " ").title(), str(value))
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments without the program name (defaults to sys.argv)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    configure_logging(level)

    try:
        config = load_config(_config_overrides(args), args.config)
    except ConfigError as e:
        console.print(f"[red]✗ Configuration error:[/red] {e}")
        return 1

    try:
        source, spec = load_spec(args.spec, timeout=args.timeout)
    except (SpecLoaderError, SpecError, FileNotFoundError) as e:
        console.print(f"[red]✗ Failed to load spec:[/red] {e}")
        return 1

    if not args.quiet:
        console.print(f"Loaded: {source}")

    generator = GinGenerator(config)
    with Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console, transient=True) as progress:
        progress.add_task("Generating code...", total=None)
        result = generate_code(generator, spec)

    if not result.success:
        console.print(f"[red]✗ {result.error_message}[/red]")
        return 1

    if result.warnings and not args.quiet:
        console.print("[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")

    if args.verbose:
        _print_metadata(result)

    if args.dry_run:
        _print_files(result)
        return 0

    try:
        written = write_files(result.files, config.target)
    except OSError as e:
        console.print(f"[red]✗ Failed to write files:[/red] {e}")
        return 1

    if not args.quiet:
        console.print(f"[green]✓ Wrote {len(written)} files under {config.target}[/green]")
    return 0
