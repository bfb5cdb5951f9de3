"""Command-line interface for PicSorter."""
import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional, TextIO

from .config import ConfigError, load_settings, save_settings
from .paths import BindingError, parse_binding_arg
from .services import SortService, UserFacingError

logger = logging.getLogger(__name__)

CONSOLE_HELP = """\
Commands:
  <key>          move to the directory bound to <key>
  skip, <enter>  keep the image where it is
  delete         delete the image
  rename NAME    rename the image, then decide
  undo           undo the last decision
  preview        print the script
  write          write the script
  quit           write the script and exit
  help           show this help"""


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def run_console(service: SortService, stdin: TextIO, stdout: TextIO) -> int:
    """
    Review images with line-based commands.

    Args:
        service: Review session
        stdin: Command source, one command per line
        stdout: Where prompts and the preview are printed

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    def show(text: str) -> None:
        stdout.write(text + "\n")
        stdout.flush()

    for key, destination in sorted(service.key_mapping.items()):
        show(f"  {key} -> {destination}")

    while True:
        current = service.current_image()
        if current is None:
            show("Review complete")
        else:
            done, total = service.progress()
            rename = f" -> {service.pending_rename}" if service.pending_rename else ""
            show(f"[{done + 1}/{total}] {current}{rename}")

        line = stdin.readline()
        if not line:
            break
        command, _, argument = line.strip().partition(' ')

        try:
            if command in ('', 'skip'):
                service.skip_current()
            elif command == 'delete':
                service.delete_current()
            elif command == 'undo':
                if not service.undo():
                    show("Nothing to undo")
            elif command == 'rename':
                if service.begin_rename():
                    service.state.rename.start(argument)
                    service.commit_rename()
            elif command == 'preview':
                show(service.script_text())
            elif command == 'write':
                service.save()
                show(f"Wrote {service.output}")
            elif command == 'quit':
                break
            elif command == 'help':
                show(CONSOLE_HELP)
            elif len(command) == 1:
                service.move_current(command)
            else:
                show(f"Unknown command '{command}', type 'help'")
        except UserFacingError as e:
            show(f"Error: {e}")

    try:
        service.save()
    except UserFacingError as e:
        logger.error(f"Save failed: {e}")
        return 1
    show(f"Wrote {service.output}")
    return 0


def run_gui(service: SortService) -> int:
    """
    Review images in the Tkinter window.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        from .ui.app import PicSorterApp

        app = PicSorterApp(service)
        app.run()

        return 0
    except Exception as e:
        logger.error(f"Error in GUI mode: {e}", exc_info=True)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="PicSorter - review images and write a shell script that files them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Review ~/Downloads, pressing c or d to file cats and dogs
  pic-sorter ~/Downloads -b c=~/Pictures/cats -b d=~/Pictures/dogs

  # Review a whole tree in the terminal, writing to triage.sh
  pic-sorter --console -r -i ~/Camera -o triage.sh -b k=~/Keep

  # Remember the current bindings and output for later runs
  pic-sorter --save-defaults -b k=~/Keep -o ~/sort.sh
        """
    )

    parser.add_argument(
        'inputs',
        nargs='*',
        help='Directories to scan for images'
    )

    parser.add_argument(
        '--input', '-i',
        action='append',
        default=[],
        help='Directory to scan for images (repeatable)'
    )

    parser.add_argument(
        '--recurse', '-r',
        action='store_true',
        help='Also scan subdirectories'
    )

    parser.add_argument(
        '--bind', '-b',
        action='append',
        default=[],
        metavar='KEY=PATH',
        help='Bind a key to a destination directory (repeatable)'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=None,
        help='Script to write (default: sort.sh or the configured output)'
    )

    parser.add_argument(
        '--console',
        action='store_true',
        help='Review in the terminal instead of a window'
    )

    parser.add_argument(
        '--save-defaults',
        action='store_true',
        help='Store the given bindings, output and recursion as defaults'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    settings = load_settings()
    if args.recurse:
        settings.recurse = True

    try:
        bindings = [parse_binding_arg(value) for value in args.bind]
    except BindingError as e:
        logger.error(str(e))
        return 1

    output = Path(args.output).expanduser() if args.output else None

    if args.save_defaults:
        settings.bindings.update({key: str(path) for key, path in bindings})
        if output:
            settings.output = str(output)
        try:
            save_settings(settings)
        except ConfigError as e:
            logger.error(str(e))
            return 1

    inputs = [Path(p).expanduser() for p in args.inputs + args.input] or [Path('.')]

    try:
        service = SortService.from_settings(settings, inputs, bindings, output)
    except UserFacingError as e:
        logger.error(str(e))
        return 1

    if not service.images:
        logger.error("No images found to review")
        return 1

    if args.console:
        return run_console(service, sys.stdin, sys.stdout)
    return run_gui(service)


if __name__ == '__main__':
    sys.exit(main())
