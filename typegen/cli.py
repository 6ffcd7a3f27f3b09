"""Command-line front-end for typegen.

Thin layer over the code generation package: it loads the input documents,
builds the run configuration and reports results with rich output.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .codegen import (
    ArtifactWriter,
    GeneratorConfig,
    PathCollisionError,
    RegistryError,
    SettingsResolver,
    SettingsStore,
    generate_from_metadata,
    get_target_info,
    is_target_supported,
    list_all_target_info,
    list_supported_targets,
    load_config,
)
from .codegen.core.config import ConfigError
from .codegen.core.extractor import ExtractionError
from .codegen.core.regions import CustomRegionEngine
from .logging_config import configure_logging, get_logger
from .utils import MetadataLoaderError, load_metadata, load_settings

logger = get_logger(__name__)

# Initialize rich console
console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="typegen",
        description="Generate C# transmission models and Angular artifacts from type metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  typegen generate metadata.json --output ./out
  typegen generate metadata.json -t ts --settings settings.json --workers 4
  typegen list-targets
  typegen save-custom ./out/webapi
  typegen clean ./out/angular
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, help="Also write log output to this file")

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Generate artifacts from a metadata document")
    generate.add_argument("metadata", help="Metadata JSON file or URL")
    generate.add_argument("--settings", "-s", help="Settings JSON file or URL")
    generate.add_argument("--config", "-c", help="Configuration file path (JSON)")
    generate.add_argument(
        "--target",
        "-t",
        action="append",
        dest="targets",
        metavar="TARGET",
        help="Target name or alias; may be repeated (default: all targets)",
    )
    generate.add_argument("--output", "-o", help="Output root (default: current directory)")
    generate.add_argument("--workers", "-w", type=int, help="Number of generation threads")
    generate.add_argument(
        "--no-header", action="store_true", help="Don't write the generated-code label line"
    )
    generate.add_argument(
        "--no-comments", action="store_true", help="Don't add comments to generated code"
    )
    generate.add_argument(
        "--dry-run", action="store_true", help="Generate without writing any file"
    )
    generate.set_defaults(func=_handle_generate)

    list_targets = subparsers.add_parser("list-targets", help="List supported targets")
    list_targets.add_argument("--info", metavar="TARGET", help="Show details of one target")
    list_targets.set_defaults(func=_handle_list_targets)

    save_custom = subparsers.add_parser(
        "save-custom", help="Move custom regions of generated files into sidecar files"
    )
    save_custom.add_argument("root", help="Directory to scan")
    save_custom.add_argument("--config", "-c", help="Configuration file path (JSON)")
    save_custom.set_defaults(func=_handle_save_custom)

    clean = subparsers.add_parser("clean", help="Delete generated files below a directory")
    clean.add_argument("root", help="Directory to clean")
    clean.add_argument("--config", "-c", help="Configuration file path (JSON)")
    clean.add_argument(
        "--keep-dirs", action="store_true", help="Don't remove directories left empty"
    )
    clean.set_defaults(func=_handle_clean)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the ``typegen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, log_file=args.log_file)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except (ConfigError, MetadataLoaderError, ExtractionError, RegistryError, FileNotFoundError) as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        logger.debug("Command failed", exc_info=True)
        return 1


# Generation


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Build configuration from the config file and CLI arguments."""
    overrides: dict[str, Any] = {}

    if getattr(args, "output", None):
        overrides["output_path"] = Path(args.output)
    if getattr(args, "workers", None) is not None:
        if args.workers < 1:
            raise CLIError("--workers must be at least 1")
        overrides["max_workers"] = args.workers
    if getattr(args, "no_header", False):
        overrides["write_info_header"] = False
    if getattr(args, "no_comments", False):
        overrides["add_comments"] = False

    return load_config(custom_config=overrides, config_file=getattr(args, "config", None))


def _resolve_targets(requested: Sequence[str] | None) -> list[str]:
    if not requested:
        return list_supported_targets()

    unsupported = [target for target in requested if not is_target_supported(target)]
    if unsupported:
        raise CLIError(
            f"Unsupported target(s): {', '.join(unsupported)}. "
            f"Supported targets: {', '.join(list_supported_targets())}"
        )
    return list(requested)


def _handle_generate(args: argparse.Namespace) -> int:
    config = _build_config(args)
    targets = _resolve_targets(args.targets)

    metadata = load_metadata(args.metadata)
    settings = SettingsResolver()
    if args.settings:
        try:
            store = SettingsStore.from_entries(load_settings(args.settings))
        except (KeyError, TypeError, AttributeError) as e:
            raise CLIError(f"Invalid settings entry in {args.settings}: {e}") from e
        settings = SettingsResolver(store)

    try:
        result = generate_from_metadata(metadata, targets, config, settings)
    except PathCollisionError as e:
        console.print(f"[red]✗ Path collision:[/red] {e}")
        return 1

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        if result.exception:
            console.print(f"[dim]Details: {result.exception!r}[/dim]")
        return 1

    if args.dry_run:
        console.print(f"[yellow]Dry run:[/yellow] {len(result.artifacts)} artifact(s) not written")
    else:
        try:
            ArtifactWriter(config).write(result.artifacts)
        except OSError as e:
            console.print(f"[red]✗ Failed to write artifacts:[/red] {e}")
            return 1

    _print_summary(result, config, args.verbose)
    return 0


def _print_summary(result, config: GeneratorConfig, verbose: bool) -> None:
    table = Table(title="📦 Generated Artifacts", box=box.SIMPLE, header_style="bold cyan")
    table.add_column("Item", style="bold green", no_wrap=True)
    table.add_column("Count", justify="right")
    if verbose:
        table.add_column("Files", style="dim")

    counts: dict[str, list[str]] = {}
    for artifact in result.artifacts:
        counts.setdefault(artifact.item_type.value, []).append(artifact.sub_file_path)

    for item_type, paths in counts.items():
        row = [item_type, str(len(paths))]
        if verbose:
            row.append("\n".join(paths))
        table.add_row(*row)

    console.print()
    console.print(table)

    if verbose and result.metadata:
        metadata_table = Table(
            title="📊 Generation Metadata", box=box.SIMPLE, header_style="bold cyan"
        )
        metadata_table.add_column("Property", style="bold")
        metadata_table.add_column("Value", style="green")
        for key, value in result.metadata.items():
            metadata_table.add_row(key.replace("_", " ").title(), str(value))
        console.print(metadata_table)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  • {warning}", markup=False, highlight=False)
        console.print()

    console.print(f"[green]✓[/green] Output root: [cyan]{config.output_path}[/cyan]")


# Information


def _handle_list_targets(args: argparse.Namespace) -> int:
    if args.info:
        return _show_target_info(args.info)

    target_info = list_all_target_info()
    if not target_info:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(title="📋 Supported Targets", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Target", style="bold green", no_wrap=True)
    table.add_column("Unit", style="cyan")
    table.add_column("Extension", style="cyan")
    table.add_column("Items")
    table.add_column("Aliases", style="blue")

    for name, info in sorted(target_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(
            f"🔧 {name}", info["unit"], info["file_extension"], ", ".join(info["item_types"]), aliases
        )

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] typegen generate [dim]metadata.json[/dim] --target [cyan]TARGET[/cyan]\n"
            "[bold]Info:[/bold] typegen list-targets --info [cyan]TARGET[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_target_info(target: str) -> int:
    if not is_target_supported(target):
        console.print(f"[red]✗ Target '{target}' is not supported[/red]")
        console.print("[dim]Use typegen list-targets to see available options[/dim]")
        return 1

    info = get_target_info(target)
    info_text = (
        f"[bold]Target:[/bold] {info['name']}\n"
        f"[bold]Unit:[/bold] {info['unit']}\n"
        f"[bold]File Extension:[/bold] {info['file_extension']}\n"
        f"[bold]Items:[/bold] {', '.join(info['item_types'])}\n"
        f"[bold]Generator Class:[/bold] {info['class']}\n"
        f"[bold]Module:[/bold] {info['module']}"
    )
    if info["aliases"]:
        info_text += f"\n[bold]Aliases:[/bold] {', '.join(info['aliases'])}"

    console.print()
    console.print(Panel(info_text, title=f"🔧 {info['name'].title()} Generator", border_style="green"))
    return 0


# Maintenance


def _handle_save_custom(args: argparse.Namespace) -> int:
    root = Path(args.root)
    if not root.is_dir():
        raise CLIError(f"Not a directory: {root}")

    engine = CustomRegionEngine(load_config(config_file=args.config))
    saved = engine.save_all_custom_parts(root)

    for sidecar in saved:
        console.print(f"  • {sidecar}", markup=False, highlight=False)
    console.print(f"[green]✓[/green] Saved custom parts of {len(saved)} file(s)")
    return 0


def _handle_clean(args: argparse.Namespace) -> int:
    root = Path(args.root)
    if not root.is_dir():
        raise CLIError(f"Not a directory: {root}")

    writer = ArtifactWriter(load_config(config_file=args.config))
    deleted = writer.delete_generated_files(root)
    removed = [] if args.keep_dirs else writer.clean_directories(root)

    console.print(
        f"[green]✓[/green] Deleted {len(deleted)} generated file(s), "
        f"removed {len(removed)} empty folder(s)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
