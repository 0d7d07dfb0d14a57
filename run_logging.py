"""
Run Logging Module
Per-run log files: a replacement log written as documents are processed
and a separate error log
"""

import os
import sys
import traceback
from datetime import datetime
from typing import Any, Dict, Optional
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


def sanitize_name(name: str) -> str:
    """Make a folder or file name safe to use inside a log file name"""
    if not name:
        return "default"
    safe = name
    for char in (' ', '/', '\\', ':', '(', ')', '*', '?', '"', '<', '>', '|'):
        safe = safe.replace(char, '_')
    return safe.strip('_') or "default"


def _timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


class ErrorLogWriter:
    """Write errors to a separate error log file"""

    def __init__(self, error_filename: str, folder: str = ""):
        self.error_filename = error_filename
        self.error_count = 0
        try:
            os.makedirs(os.path.dirname(error_filename), exist_ok=True)
            self.error_file = open(error_filename, 'w', encoding='utf-8')
            self.error_file.write("ERROR LOG\n")
            self.error_file.write("=" * 50 + "\n")
            self.error_file.write(f"Folder: {folder}\n")
            self.error_file.write(f"Started: {_timestamp()}\n")
            self.error_file.write("=" * 50 + "\n\n")
            self.error_file.flush()
            logger.info(f"Created error log: {error_filename}")
        except OSError as e:
            logger.error(f"Failed to create error log file {error_filename}: {e}", exc_info=True)
            self.error_file = None

    def write_error(self, error_message: str, exc_info=None, file_path: Optional[str] = None):
        """Write an error to the error log file"""
        self.error_count += 1
        if self.error_file is None:
            return

        try:
            self.error_file.write(f"[{_timestamp()}] ERROR\n")
            if file_path:
                self.error_file.write(f"Location: {file_path}\n")
            self.error_file.write(f"Message: {error_message}\n")

            if isinstance(exc_info, BaseException):
                self.error_file.write(f"Exception: {type(exc_info).__name__}: {str(exc_info)}\n")
                self.error_file.write("Traceback:\n")
                self.error_file.write(''.join(traceback.format_exception(type(exc_info), exc_info, exc_info.__traceback__)))
            elif exc_info is True:
                exc_type, exc_value, exc_traceback = sys.exc_info()
                if exc_type:
                    self.error_file.write(f"Exception: {exc_type.__name__}: {str(exc_value)}\n")
                    self.error_file.write("Traceback:\n")
                    self.error_file.write(''.join(traceback.format_exception(exc_type, exc_value, exc_traceback)))

            self.error_file.write("-" * 50 + "\n\n")
            self.error_file.flush()
        except OSError as e:
            # Not through logger, a failing log file would recurse
            print(f"Failed to write to error log: {e}")

    def write_warning(self, warning_message: str, file_path: Optional[str] = None):
        """Write a warning to the error log file"""
        if self.error_file is None:
            return

        try:
            self.error_file.write(f"[{_timestamp()}] WARNING\n")
            if file_path:
                self.error_file.write(f"Location: {file_path}\n")
            self.error_file.write(f"Message: {warning_message}\n")
            self.error_file.write("-" * 50 + "\n\n")
            self.error_file.flush()
        except OSError as e:
            print(f"Failed to write warning to error log: {e}")

    def close(self):
        """Close the error log file"""
        if self.error_file:
            try:
                self.error_file.write(f"\nError log closed: {_timestamp()}\n")
                self.error_file.close()
            except OSError as e:
                print(f"Failed to close error log: {e}")
            self.error_file = None


class ReplacementLogWriter:
    """
    Write one entry per document as soon as it is processed, so the log is
    useful even when the run is interrupted
    """

    def __init__(self, log_filename: str, folder: str = ""):
        self.log_filename = log_filename
        self.document_count = 0
        try:
            os.makedirs(os.path.dirname(log_filename), exist_ok=True)
            self.log_file = open(log_filename, 'w', encoding='utf-8')
            self.log_file.write("REPLACEMENT LOG\n")
            self.log_file.write("=" * 80 + "\n")
            self.log_file.write(f"Folder: {folder}\n")
            self.log_file.write(f"Started: {_timestamp()}\n")
            self.log_file.write("=" * 80 + "\n\n")
            self.log_file.flush()
        except OSError as e:
            logger.error(f"Failed to create replacement log file {log_filename}: {e}", exc_info=True)
            self.log_file = None

    def write_pairs(self, pairs, options: Dict[str, Any]):
        """Record what is being replaced and with which options"""
        if self.log_file is None:
            return
        self.log_file.write("PAIRS\n")
        self.log_file.write("-" * 80 + "\n")
        for pair in pairs:
            self.log_file.write(f"  '{pair['find']}' -> '{pair['replace']}'\n")
        self.log_file.write("\nOPTIONS\n")
        self.log_file.write("-" * 80 + "\n")
        for key in sorted(options):
            self.log_file.write(f"  {key}: {options[key]}\n")
        self.log_file.write("\n")
        self.log_file.flush()

    def write_document_result(self, detail: Dict[str, Any]):
        """Append the result of one document"""
        self.document_count += 1
        if self.log_file is None:
            return

        status = detail['status'].upper()
        self.log_file.write(f"[{_timestamp()}] {status}: {detail['file']}\n")
        if detail.get('replacements'):
            self.log_file.write(f"  Replacements: {detail['replacements']}\n")
            for find_text, count in (detail.get('matches') or {}).items():
                if count:
                    self.log_file.write(f"    - '{find_text}': {count}\n")
        if detail.get('attempts', 1) > 1:
            self.log_file.write(f"  Attempts: {detail['attempts']}\n")
        if detail.get('error'):
            self.log_file.write(f"  Error: {detail['error']}\n")
        self.log_file.flush()

    def finalize(self, run_results: Dict[str, Any]):
        """Write the totals and close the log"""
        if self.log_file is None:
            return

        self.log_file.write("\n" + "=" * 80 + "\n")
        self.log_file.write("TOTALS\n")
        self.log_file.write("=" * 80 + "\n")
        self.log_file.write(f"Documents: {run_results.get('total_files', 0)}\n")
        self.log_file.write(f"Changed: {run_results.get('changed', 0)}\n")
        self.log_file.write(f"Unchanged: {run_results.get('unchanged', 0)}\n")
        self.log_file.write(f"Failed: {run_results.get('failed', 0)}\n")
        self.log_file.write(f"Replacements: {run_results.get('total_replacements', 0)}\n")
        self.log_file.write(f"Word restarts: {run_results.get('restarts', 0)}\n")
        if run_results.get('cancelled'):
            self.log_file.write("Cancelled: yes\n")
        self.log_file.write(f"Finished: {_timestamp()}\n")
        self.log_file.close()
        self.log_file = None

    def close(self):
        """Close the log without totals (the run never started)"""
        if self.log_file is not None:
            self.log_file.close()
            self.log_file = None


def setup_logging(folder_name: str = "", logs_dir: str = "logs") -> Dict[str, Any]:
    """
    Create the log files for one run

    Returns:
        Dictionary with log file paths and the writer instances:
        'replacements', 'errors', 'report', 'logs_dir',
        'replacement_writer', 'error_log_writer'
    """
    logs_dir_abs = os.path.abspath(logs_dir)
    os.makedirs(logs_dir_abs, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    safe_name = sanitize_name(os.path.basename(os.path.normpath(folder_name)) if folder_name else "")

    log_filename_replacements = os.path.join(logs_dir_abs, f"{safe_name}_replacements_{timestamp}.log")
    log_filename_errors = os.path.join(logs_dir_abs, f"{safe_name}_errors_{timestamp}.log")
    log_filename_report = os.path.join(logs_dir_abs, f"{safe_name}_report_{timestamp}.log")

    logger.info(f"Log files will be saved to: {logs_dir_abs}")
    logger.info(f"  - Replacements: {log_filename_replacements}")
    logger.info(f"  - Errors: {log_filename_errors}")

    return {
        'logs_dir': logs_dir_abs,
        'replacements': log_filename_replacements,
        'errors': log_filename_errors,
        'report': log_filename_report,
        'replacement_writer': ReplacementLogWriter(log_filename_replacements, folder_name),
        'error_log_writer': ErrorLogWriter(log_filename_errors, folder_name)
    }
