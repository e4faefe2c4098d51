"""CLI entry points for the usdjs headless renderer."""

from __future__ import annotations

import logging
import sys
from typing import Callable, TypeVar

import click
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from usdjs_renderer.errors import UsdjsRendererError
from usdjs_renderer.models.config import CompareArgs, GalleryArgs, RenderArgs
from usdjs_renderer.orchestrator import Orchestrator
from usdjs_renderer.reporter.console_report import print_run_report

console = Console()
err_console = Console(stderr=True)

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )


def _fail(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/red]", soft_wrap=True)
    sys.exit(1)


def _build_args(model: type[ArgsT], **values) -> ArgsT:
    """Validate CLI values; invalid dimensions exit before any I/O."""
    try:
        return model(**values)
    except ValidationError as e:
        err = e.errors()[0]
        cause = err.get("ctx", {}).get("error")
        _fail(str(cause) if cause else err["msg"])


def _run(fn: Callable, *fn_args):
    try:
        return fn(*fn_args)
    except (UsdjsRendererError, OSError, ValueError) as e:
        logging.getLogger(__name__).debug("Command failed", exc_info=True)
        _fail(str(e))


_verbose_option = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
_width_option = click.option("--width", default="1024", show_default=True, help="Capture width in pixels")
_height_option = click.option("--height", default="1024", show_default=True, help="Capture height in pixels")
_compose_option = click.option("--no-compose", "no_compose", is_flag=True, help="Render without layer composition")
_viewer_dist_option = click.option(
    "--viewer-dist", default=None,
    help="Built usdjs-viewer dist directory (else $USDJS_VIEWER_DIST or common defaults)",
)
_usdjs_root_option = click.option(
    "--usdjs-root", default=None,
    help="usdjs repo root holding test/corpus (else $USDJS_ROOT or common defaults)",
)


@click.command("render")
@click.option("--root", default=None, help="Directory the entry and its references resolve under [default: cwd]")
@click.option("--entry", default="scene.usda", show_default=True, help="Entry layer, relative to --root")
@click.option("--out", default="out.png", show_default=True, help="Output PNG path")
@_width_option
@_height_option
@_compose_option
@_viewer_dist_option
@_verbose_option
def render(root, entry, out, width, height, no_compose, viewer_dist, verbose) -> None:
    """Render a single USD scene to a PNG."""
    args = _build_args(
        RenderArgs,
        **({"root": root} if root else {}),
        entry=entry, out=out, width=width, height=height,
        compose=not no_compose, viewer_dist=viewer_dist,
    )
    setup_logging(verbose)
    out_path = _run(Orchestrator(console=console).run_render, args)
    console.print(f"Wrote: {out_path}", markup=False, highlight=False, soft_wrap=True)


@click.command("compare")
@_usdjs_root_option
@click.option("--sample", default=None, help="Only this README sample, e.g. samples/light/spot_light.usda")
@_width_option
@_height_option
@_compose_option
@_viewer_dist_option
@_verbose_option
def compare(usdjs_root, sample, width, height, no_compose, viewer_dist, verbose) -> None:
    """Capture every ft-lab sample beside its reference image."""
    args = _build_args(
        CompareArgs,
        usdjs_root=usdjs_root, sample=sample, width=width, height=height,
        compose=not no_compose, viewer_dist=viewer_dist,
    )
    setup_logging(verbose)
    report = _run(Orchestrator(console=console).run_compare, args)
    print_run_report(report, console)


@click.command("gallery")
@_usdjs_root_option
@click.option("--out", default=None, help="Output HTML path [default: <sample root>/gallery.html]")
@click.option("--include-missing", is_flag=True, help="Accepted for compatibility; all entries are always listed")
@_verbose_option
def gallery(usdjs_root, out, include_missing, verbose) -> None:
    """Generate the reference vs capture HTML gallery."""
    args = _build_args(GalleryArgs, usdjs_root=usdjs_root, out=out, include_missing=include_missing)
    setup_logging(verbose)
    out_path, count = _run(Orchestrator(console=console).run_gallery, args)
    console.print(f"Wrote: {out_path}", markup=False, highlight=False, soft_wrap=True)
    console.print(f"Entries: {count}", markup=False, highlight=False)


@click.group()
def cli() -> None:
    """Headless PNG renderer and comparison tools for usdjs-viewer."""
    pass


cli.add_command(render)
cli.add_command(compare)
cli.add_command(gallery)


if __name__ == "__main__":
    cli()
