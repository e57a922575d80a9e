import argparse
import sys

from rich.console import Console
from rich.table import Table

from delta_text.app import DeltaTextApp
from delta_text.screens.compare_screen import VIEW_SPLIT, VIEW_UNIFIED
from delta_text.utils.config import PathsConfig
from delta_text.utils.diff_render import render_split, render_stats, render_unified
from delta_text.utils.edit_script import ComputationFailure
from delta_text.utils.io import FileLoadError, load_input_file
from delta_text.utils.logger import log
from delta_text.utils.validation import ACCEPTED_EXTENSIONS, ValidationError, validate_input_paths
from delta_text.utils.view_projector import build_views

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_TROUBLE = 2


def _create_argument_parser():
    """Create and configure the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="delta-text", description="Delta Text: character-level comparison of two texts"
    )
    parser.add_argument('first', nargs='?', help='Path to the first (old) file')
    parser.add_argument('second', nargs='?', help='Path to the second (new) file')
    parser.add_argument(
        '--view', choices=[VIEW_SPLIT, VIEW_UNIFIED], default=VIEW_SPLIT, help='Initial diff view (default: split)'
    )
    parser.add_argument(
        '--plain', action='store_true', help='Print the diff to the terminal and exit instead of opening the UI'
    )
    parser.add_argument('--no-watch', action='store_true', help='Do not reload inputs when their files change')
    parser.add_argument('--debounce-ms', type=int, default=None, help='Quiet period before recomputing the diff')
    parser.add_argument(
        '--any-extension', action='store_true', help='Accept input files of any type, not just text and source files'
    )
    return parser


def _fail(message: str) -> int:
    log.error(message)
    sys.stderr.write(f"Error: {message}\n")
    return EXIT_TROUBLE


def _load_inputs(paths: PathsConfig, any_extension: bool = False):
    """Validate and load both inputs; missing paths load as None."""
    allowed = None if any_extension else ACCEPTED_EXTENSIONS
    first_path, second_path = validate_input_paths(paths.first_path, paths.second_path, allowed)
    first = load_input_file(first_path) if first_path else None
    second = load_input_file(second_path) if second_path else None
    return first, second


def print_plain(first, second, view_mode: str, console: Console | None = None) -> int:
    """Print the diff of two loaded inputs with rich and return the exit status."""
    console = console or Console()
    views = build_views(first.content, second.content)

    if view_mode == VIEW_UNIFIED:
        console.print(render_unified(views.unified))
    else:
        table = Table(expand=True, show_lines=False)
        table.add_column(first.name, ratio=1)
        table.add_column(second.name, ratio=1)
        left, right = render_split(views.split)
        table.add_row(left, right)
        console.print(table)
    console.print(render_stats(views.stats))
    return EXIT_DIFFERENT if views.stats.has_changes else EXIT_SAME


def main(argv=None) -> int:
    """Parse arguments and run the UI, or print the diff with --plain."""
    parser = _create_argument_parser()
    args = parser.parse_args(argv)
    paths = PathsConfig.from_args(args).merge_with_env()

    if args.debounce_ms is not None and args.debounce_ms < 0:
        return _fail("--debounce-ms must not be negative")

    try:
        first, second = _load_inputs(paths, args.any_extension)
    except ValidationError as e:
        return _fail(f"Configuration error: {e}")
    except FileLoadError as e:
        return _fail(str(e))

    if args.plain:
        if first is None or second is None:
            return _fail("--plain needs both a first and a second file")
        try:
            return print_plain(first, second, args.view)
        except ComputationFailure as e:
            return _fail(f"Error calculating diff: {e}")

    app = DeltaTextApp(
        first,
        second,
        view_mode=args.view,
        watch=not args.no_watch,
        debounce_ms=args.debounce_ms,
    )
    app.run()
    return EXIT_SAME


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
