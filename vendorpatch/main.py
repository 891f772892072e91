"""
VendorPatch CLI Entry Point.

Usage:
    vendorpatch apply
    vendorpatch apply --patch "hotfix msvc"
    vendorpatch update check_stack_overflow
    vendorpatch reset
    vendorpatch --help
"""

import argparse
import sys
import time
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from vendorpatch import __version__
from vendorpatch.config import Settings
from vendorpatch.metrics import MetricsLogger, log_run
from vendorpatch.patching import (
    ApplySession,
    GitTree,
    GnuPatchApplier,
    VendorPatchError,
    read_patch_file_stats,
)
from vendorpatch.registry import DEFAULT_REGISTRY
from vendorpatch.selection import (
    active_categories,
    effective_patch_set,
    resolve_selection,
    unknown_tokens,
)

console = Console()
err_console = Console(stderr=True)


def warn_unknown_tokens(patch_set: str) -> None:
    """Mention requested tokens that match no category."""
    unknown = unknown_tokens(patch_set, DEFAULT_REGISTRY)
    if unknown:
        err_console.print(
            f"[yellow]⚠ Ignoring unknown categories: {escape(' '.join(unknown))}[/yellow]"
        )


def requested_patch_set(args: argparse.Namespace, settings: Settings) -> str:
    """The patch set in force; a blank --patch falls back to the configured one."""
    return effective_patch_set(args.patch, settings.patch_set)


def make_tree(settings: Settings, verbose: bool) -> GitTree:
    return GitTree(
        str(settings.tree_path),
        str(settings.patches_dir),
        extension=settings.diff_extension,
        verbose=verbose,
    )


# ============================================================================
# Commands
# ============================================================================

def cmd_apply(args: argparse.Namespace, settings: Settings) -> int:
    """Resolve the requested patch set and apply it, fail-fast."""
    patch_set = requested_patch_set(args, settings)
    verbose = not args.quiet

    console.print(f"patch = {escape(patch_set)}")
    warn_unknown_tokens(patch_set)

    selection = resolve_selection(patch_set, DEFAULT_REGISTRY)

    if verbose:
        console.print(Panel.fit(
            f"[bold]Tree:[/bold] {escape(str(settings.tree_path))}\n"
            f"[bold]Patches:[/bold] {escape(str(settings.patches_dir))}\n"
            f"[bold]Selected:[/bold] {len(selection)}",
            title="Configuration",
        ))

    applier = GnuPatchApplier(
        str(settings.tree_path),
        str(settings.patches_dir),
        extension=settings.diff_extension,
        strip_level=settings.strip_level,
        patch_command=settings.patch_tool,
        verbose=verbose,
    )

    session = ApplySession(applier)
    start_time = time.time()
    try:
        result = session.run(selection)
    finally:
        duration = time.time() - start_time
        if settings.metrics_path is not None and session.result is not None:
            log_run(
                MetricsLogger(str(settings.metrics_path)),
                session.result,
                tree_path=str(settings.tree_path),
                patch_set=patch_set,
                duration_seconds=duration,
            )

    if result.success:
        console.print(Panel.fit(
            f"[bold green]✅ {result.summary()}[/bold green]\n"
            f"[bold]Duration:[/bold] {duration:.1f}s",
            title="Success",
            border_style="green",
        ))
        return 0

    console.print(Panel.fit(
        f"[bold red]❌ Patch '{escape(result.failed)}' failed to apply[/bold red]\n\n"
        f"[bold]Progress:[/bold] {result.summary()}\n"
        f"[bold]Recovery:[/bold] vendorpatch reset",
        title="Stopped",
        border_style="red",
    ))
    if result.diagnostic:
        console.print(result.diagnostic.rstrip(), markup=False, highlight=False)
    return 1


def cmd_stage(args: argparse.Namespace, settings: Settings) -> int:
    make_tree(settings, verbose=not args.quiet).stage()
    return 0


def cmd_diff(args: argparse.Namespace, settings: Settings) -> int:
    diff = make_tree(settings, verbose=False).diff()

    if not diff:
        if not args.quiet:
            err_console.print("[dim]No unstaged changes[/dim]")
        return 0

    if console.is_terminal:
        console.print(Syntax(diff, "diff"))
    else:
        sys.stdout.write(diff + "\n")
    return 0


def cmd_update(args: argparse.Namespace, settings: Settings) -> int:
    """Capture the tree's unstaged diff into a stored patch."""
    name = args.identifier

    if name not in DEFAULT_REGISTRY.identifiers():
        err_console.print(
            f"[yellow]⚠ '{escape(name)}' is not declared in any category[/yellow]"
        )

    patch_file = make_tree(settings, verbose=not args.quiet).capture(name)
    stats = read_patch_file_stats(patch_file)

    if stats.error:
        err_console.print(
            f"[yellow]⚠ {escape(stats.error)} in {escape(str(patch_file))}[/yellow]"
        )
    elif stats.files_changed == 0:
        err_console.print(f"[yellow]⚠ Captured an empty diff for '{escape(name)}'[/yellow]")
    elif not args.quiet:
        console.print(
            f"[green]✓ {escape(name)}:[/green] {stats.files_changed} files, "
            f"[green]+{stats.additions}[/green] [red]-{stats.deletions}[/red]"
        )
    return 0


def cmd_reset(args: argparse.Namespace, settings: Settings) -> int:
    make_tree(settings, verbose=not args.quiet).reset(clean=args.clean)
    return 0


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """Show categories, their patches, and what a patch set selects."""
    patch_set = requested_patch_set(args, settings)
    warn_unknown_tokens(patch_set)

    active = set(active_categories(patch_set, DEFAULT_REGISTRY))

    table = Table(title=f"patch = {escape(patch_set)}")
    table.add_column("Category")
    table.add_column("Patches")
    table.add_column("Active", justify="center")

    for category in DEFAULT_REGISTRY.categories:
        table.add_row(
            category,
            "\n".join(DEFAULT_REGISTRY.patches(category)),
            "[green]✓[/green]" if category in active else "[dim]-[/dim]",
        )

    console.print(table)

    selection = resolve_selection(patch_set, DEFAULT_REGISTRY)
    for index, identifier in enumerate(selection, start=1):
        console.print(f"  {index}. {escape(identifier)}")
    if not selection:
        console.print("[dim]Nothing selected[/dim]")
    return 0


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    """Per-file statistics of a stored patch."""
    patch_file = settings.patches_dir / f"{args.identifier}.{settings.diff_extension}"

    if not patch_file.is_file():
        err_console.print(f"[red]Error: Patch file not found: {escape(str(patch_file))}[/red]")
        return 1

    stats = read_patch_file_stats(patch_file)
    if stats.error:
        err_console.print(f"[red]Error: {escape(stats.error)} in {escape(str(patch_file))}[/red]")
        return 1

    table = Table(title=escape(str(patch_file)))
    table.add_column("File")
    table.add_column("Hunks", justify="right")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")

    for entry in stats.files:
        table.add_row(
            escape(entry.path),
            str(entry.hunks),
            str(entry.additions),
            str(entry.deletions),
        )

    console.print(table)
    return 0


def cmd_history(args: argparse.Namespace, settings: Settings) -> int:
    if settings.metrics_path is None:
        err_console.print("[yellow]Metrics logging is disabled[/yellow]")
        return 0

    summary = MetricsLogger(str(settings.metrics_path)).summary()
    if not summary["total_runs"]:
        console.print("[dim]No apply runs recorded[/dim]")
        return 0

    console.print(Panel.fit(
        f"[bold]Runs:[/bold] {summary['total_runs']}\n"
        f"[bold]Successful:[/bold] {summary['successful']}\n"
        f"[bold]Success rate:[/bold] {summary['success_rate']:.0%}\n"
        f"[bold]Last failed patch:[/bold] {escape(str(summary['last_failed_patch'] or '-'))}",
        title="History",
    ))
    if summary["skipped_lines"]:
        err_console.print(
            f"[yellow]⚠ Skipped {summary['skipped_lines']} unreadable lines "
            f"in {escape(str(settings.metrics_path))}[/yellow]"
        )
    return 0


# ============================================================================
# Parser
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vendorpatch",
        description="VendorPatch - manage local patches on a vendored source tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vendorpatch apply                      # apply every category
  vendorpatch apply --patch "hotfix"     # only the hotfix patches
  vendorpatch diff                       # review manual edits
  vendorpatch update infinity_handling   # save them back into a patch
  vendorpatch reset                      # discard everything
        """,
    )

    parser.add_argument(
        "--tree",
        type=Path,
        help="Path to the vendored source tree (default: $VENDORPATCH_TREE or quickjs)",
    )
    parser.add_argument(
        "--patches-dir",
        type=Path,
        help="Directory holding the patch files (default: $VENDORPATCH_PATCHES_DIR or patches)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce output verbosity",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"VendorPatch {__version__}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    apply_parser = commands.add_parser("apply", help="Apply the selected patches")
    apply_parser.add_argument(
        "--patch",
        help="Categories to apply, e.g. \"hotfix msvc\" (default: $VENDORPATCH_PATCH or all)",
    )
    apply_parser.set_defaults(handler=cmd_apply)

    commands.add_parser(
        "stage", help="Stage all working-tree changes",
    ).set_defaults(handler=cmd_stage)

    commands.add_parser(
        "diff", help="Show unstaged changes, ignoring whitespace",
    ).set_defaults(handler=cmd_diff)

    update_parser = commands.add_parser(
        "update", help="Write unstaged changes into a patch file",
    )
    update_parser.add_argument("identifier", help="Patch identifier")
    update_parser.set_defaults(handler=cmd_update)

    reset_parser = commands.add_parser(
        "reset", help="Hard reset the tree to HEAD",
    )
    reset_parser.add_argument(
        "--clean",
        action="store_true",
        help="Also remove untracked files created by patches",
    )
    reset_parser.set_defaults(handler=cmd_reset)

    list_parser = commands.add_parser(
        "list", help="Show categories and the resolved selection",
    )
    list_parser.add_argument("--patch", help="Categories to resolve")
    list_parser.set_defaults(handler=cmd_list)

    show_parser = commands.add_parser(
        "show", help="Show statistics for a stored patch",
    )
    show_parser.add_argument("identifier", help="Patch identifier")
    show_parser.set_defaults(handler=cmd_show)

    commands.add_parser(
        "history", help="Summarize recorded apply runs",
    ).set_defaults(handler=cmd_history)

    return parser


def run(argv: Optional[list[str]] = None) -> int:
    """
    Parse arguments and run one command.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env().override(
            tree_path=args.tree,
            patches_dir=args.patches_dir,
        )
    except ValueError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        return 1

    try:
        return args.handler(args, settings)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130

    except VendorPatchError as e:
        err_console.print(Panel.fit(
            escape(str(e)),
            title=type(e).__name__,
            border_style="red",
        ))
        return 1


def main():
    """Main CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
