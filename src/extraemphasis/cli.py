"""Command-line entry point for extra-emphasis.

Subcommands:
    markers     List the active markers and their resolved styles.
    highlight   Print a file with emphasis styles applied.
    export      Render a file through an export backend and transcode it.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from extraemphasis import _setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

    from extraemphasis.config import EmphasisConfig
    from extraemphasis.engine import CompiledConfig

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for the extra-emphasis subcommands."""
    from extraemphasis.export import available_backends

    parser = argparse.ArgumentParser(
        prog="extra-emphasis",
        description="User-defined inline emphasis markers for light markup.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to console"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # markers
    sub.add_parser("markers", help="List active markers and their styles")

    # highlight
    highlight_p = sub.add_parser("highlight", help="Print a file with emphasis")
    highlight_p.add_argument("file", type=Path, help="Text file to highlight")
    highlight_p.add_argument(
        "--hide-markers",
        action="store_true",
        help="Hide delimiters and style only the content",
    )
    highlight_p.add_argument(
        "--base", action="store_true", help="Recognise native markers only"
    )
    highlight_p.add_argument(
        "--chunk",
        type=int,
        default=4096,
        help="Characters scanned per matcher call (default: 4096)",
    )

    # export
    export_p = sub.add_parser("export", help="Export a file through a backend")
    export_p.add_argument("file", type=Path, help="Text file to export")
    export_p.add_argument(
        "--backend",
        required=True,
        help=f"Export backend ({', '.join(available_backends())})",
    )
    export_p.add_argument("-o", "--output", type=Path, help="Write to file")
    export_p.add_argument(
        "--with-styles",
        action="store_true",
        help="Prepend the stylesheet, preamble or automatic styles",
    )

    return parser


def _read_source(path: Path) -> str:
    if not path.is_file():
        console.print(f"[red]Error:[/] File not found: {path}")
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _cmd_markers(config: CompiledConfig, con: Console | None = None) -> None:
    """Print the active marker table."""
    con = con or console

    if not config.enabled:
        con.print("[yellow]Extra emphasis is disabled.[/]")
        return
    if not config.markers:
        con.print("[yellow]No extra markers configured.[/]")
        return

    table = Table(title="Extra emphasis markers")
    table.add_column("Marker", style="cyan")
    table.add_column("Style")
    table.add_column("Foreground")
    table.add_column("Background")
    table.add_column("Verbatim")

    for marker in config.markers:
        style = config.style_for(marker)
        table.add_row(
            Text(marker),
            Text(style.name),
            style.foreground or "-",
            style.background or "-",
            "[green]Yes[/]" if config.table.is_verbatim(marker) else "No",
        )

    con.print(table)


def _cmd_highlight(
    config: CompiledConfig,
    path: Path,
    *,
    base: bool = False,
    chunk: int = 4096,
    con: Console | None = None,
) -> None:
    """Print *path* with its emphasis styled."""
    from extraemphasis.display import highlight_text
    from extraemphasis.matcher import make_matcher

    con = con or console
    text = _read_source(path)
    matcher = make_matcher(config, extended=not base)
    con.print(highlight_text(text, matcher, chunk=max(chunk, 1)))


def _cmd_export(
    config: CompiledConfig,
    path: Path,
    backend: str,
    *,
    output: Path | None = None,
    with_styles: bool = False,
) -> None:
    """Export *path* through *backend* to *output* or stdout."""
    from extraemphasis.export import UnknownBackendError, export_text

    text = _read_source(path)
    try:
        result = export_text(text, backend, config)
    except UnknownBackendError as exc:
        console.print(f"[red]Error:[/] {exc.args[0]}")
        sys.exit(1)

    if with_styles:
        styles = _backend_styles(config, backend)
        if styles:
            result = f"{styles}\n\n{result}"

    if output is None:
        sys.stdout.write(result + "\n")
        return
    output.write_text(result + "\n", encoding="utf-8")
    console.print(f"[green]Wrote[/] {backend} export to {output}")


def _backend_styles(config: CompiledConfig, backend: str) -> str:
    """Style definitions the backend collected while the config was built."""
    target = config.backends[backend]
    for attribute in ("stylesheet", "preamble", "automatic_styles"):
        emit = getattr(target, attribute, None)
        if emit is not None:
            return emit().strip()
    return ""


def _emphasis_settings(args: argparse.Namespace) -> EmphasisConfig:
    from extraemphasis.config import get_settings

    settings = get_settings().emphasis
    if getattr(args, "hide_markers", False):
        settings = settings.model_copy(update={"hide_delimiters": True})
    if args.command == "export" and args.backend not in settings.backends:
        # An explicitly requested backend is always built.
        settings = settings.model_copy(
            update={"backends": [*settings.backends, args.backend]}
        )
    return settings


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the ``extra-emphasis`` command."""
    from extraemphasis.config import get_settings
    from extraemphasis.engine import CompiledConfig
    from extraemphasis.export import UnknownBackendError

    args = _build_parser().parse_args(argv)
    _setup_logging(get_settings().app.log_dir, verbose=args.verbose)

    try:
        config = CompiledConfig.from_settings(_emphasis_settings(args))
    except UnknownBackendError as exc:
        console.print(f"[red]Error:[/] {exc.args[0]}")
        sys.exit(1)

    if args.command == "markers":
        _cmd_markers(config)
    elif args.command == "highlight":
        _cmd_highlight(config, args.file, base=args.base, chunk=args.chunk)
    elif args.command == "export":
        _cmd_export(
            config,
            args.file,
            args.backend,
            output=args.output,
            with_styles=args.with_styles,
        )
