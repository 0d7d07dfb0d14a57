"""
Word Replacer - Command Line
Non-interactive find/replace across the Word documents of a folder

Usage:
    python replace_cli.py C:\\Contracts --find "ACME Ltd" --replace "ACME Limited"
    python replace_cli.py C:\\Contracts --pairs renames.json --backup
    python replace_cli.py C:\\Contracts --find "2024" --replace "2025" --whole-word --dry-run
"""

import argparse
import os
import signal
import sys
import threading
from typing import List, Optional
import logging

from replacement_runner import ReplacementRunner, resolve_engine
from replacer_errors import WordAutomationError
from request_validator import ENGINES, RequestValidator
from run_logging import setup_logging
from settings_loader import SettingsLoader, find_config_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_DOCUMENTS_FAILED = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="word-replacer-cli",
        description="Find and replace text in every Word document of a folder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("folder", help="Folder containing the documents")
    parser.add_argument("--find", help="Text to find (literal)")
    parser.add_argument("--replace", help="Replacement text (may be empty to delete)")
    parser.add_argument("--pairs", metavar="FILE",
                        help='JSON file with [{"find": ..., "replace": ...}, ...]')
    parser.add_argument("--match-case", action="store_true", default=None,
                        help="Case-sensitive search (default: case-insensitive)")
    parser.add_argument("--whole-word", action="store_true", default=None,
                        help="Match whole words only")
    parser.add_argument("--no-recursive", dest="recursive", action="store_false", default=None,
                        help="Do not include subfolders")
    parser.add_argument("--ext", dest="extensions", action="append", metavar=".EXT",
                        help="Document extension to include (repeatable, default from config)")
    parser.add_argument("--engine", choices=ENGINES, help="Replacement engine (default from config)")
    parser.add_argument("--dry-run", action="store_true", help="Count matches without saving")
    parser.add_argument("--backup", action="store_true", help="Copy each document before changing it")
    parser.add_argument("--no-headers", dest="include_headers", action="store_false", default=None,
                        help="Skip headers, footers and text boxes")
    parser.add_argument("--visible", action="store_true", default=None, help="Show the Word window")
    parser.add_argument("--config", metavar="FILE", help="Python config file (default: replacer_config.py)")
    parser.add_argument("--report", metavar="FILE", help="Where to write the run report")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Console log level")
    return parser


def load_settings(config_path: Optional[str]) -> SettingsLoader:
    loader = SettingsLoader()
    if config_path:
        loader.load_from_config_file(config_path)
        return loader
    found = find_config_file()
    if found:
        loader.load_from_config_file(found)
    else:
        logger.info("No replacer_config.py found, using built-in defaults")
    return loader


def collect_pairs(args, validator: RequestValidator) -> List[dict]:
    pairs = []
    if args.pairs:
        pairs.extend(validator.load_pairs_file(args.pairs))
    if args.find is not None:
        if args.replace is None:
            raise ValueError("--find requires --replace (use --replace \"\" to delete the text)")
        pairs.append({'find': args.find, 'replace': args.replace})
    elif args.replace is not None:
        raise ValueError("--replace requires --find")
    if not pairs:
        raise ValueError("Give --find/--replace or --pairs")
    return pairs


def print_progress(current: int, total: int, message: str):
    # One line per finished document
    if not message.startswith("Processing "):
        print(f"[{current}/{total}] {message}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.getLogger().setLevel(getattr(logging, args.log_level))

    validator = RequestValidator()
    try:
        loader = load_settings(args.config)
        loader.override(engine=args.engine, visible=args.visible)
        settings = loader.get_all()
        pairs = collect_pairs(args, validator)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID

    request = {
        'folder': args.folder,
        'pairs': pairs,
        'match_case': args.match_case,
        'whole_word': args.whole_word,
        'recursive': args.recursive,
        'extensions': args.extensions,
        'include_headers': args.include_headers,
        'engine': args.engine,
        'visible': args.visible,
        'dry_run': args.dry_run,
        'backup': args.backup,
    }

    # No run logs for a request that cannot start
    normalized = validator.normalize_request(request, settings)
    validation = validator.validate_request(normalized, resolve_engine(normalized['engine']))
    if not validation['valid']:
        for error in validation['errors']:
            print(f"Error: {error}", file=sys.stderr)
        return EXIT_INVALID

    log_files = setup_logging(args.folder, settings.get('logs_dir', 'logs'))
    runner = ReplacementRunner(settings, log_writers=log_files)
    cancel_event = threading.Event()

    def request_cancel(signum, frame):
        print("Cancelling after the current document...", file=sys.stderr)
        cancel_event.set()

    # Signal handlers can only be installed from the main thread
    handler_installed = threading.current_thread() is threading.main_thread()
    if handler_installed:
        previous_handler = signal.signal(signal.SIGINT, request_cancel)

    try:
        results = runner.run(request, progress_callback=print_progress, cancel_event=cancel_event)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return EXIT_INTERRUPTED
    except (ValueError, FileNotFoundError, NotADirectoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except WordAutomationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DOCUMENTS_FAILED
    finally:
        if handler_installed:
            signal.signal(signal.SIGINT, previous_handler or signal.SIG_DFL)
        # Writers are closed by the runner; this only matters when it never started
        log_files['replacement_writer'].close()
        log_files['error_log_writer'].close()

    report_path = args.report or log_files['report']
    report = validator.generate_report(results, report_path)
    print()
    print(report)
    print(f"\nReport: {os.path.abspath(report_path)}")

    if results['cancelled']:
        return EXIT_INTERRUPTED
    if results['failed']:
        return EXIT_DOCUMENTS_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
