"""
Replacement Runner Module
Runs a replacement request over every document in a folder: picks the
engine, keeps Word alive across crashes and collects per-document results
"""

import os
import shutil
import sys
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import logging

from document_scanner import DocumentScanner
from docx_engine import DocxEngine
from replacer_errors import DocumentError, WordAutomationError, WordCrashedError
from request_validator import ENGINES, RequestValidator
from settings_loader import DEFAULT_SETTINGS
from word_automation import WordSession, is_word_available

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


RESTART_LIMIT_MESSAGE = "Word restart limit reached"


def resolve_engine(name: str) -> str:
    """Turn 'auto' into the engine this machine can actually run"""
    if name == 'auto':
        if sys.platform == 'win32' and is_word_available():
            return 'word'
        return 'docx'
    return name


class ReplacementRunner:
    def __init__(self, settings: Optional[Dict[str, Any]] = None,
                 engine_factory: Optional[Callable[[str, Dict[str, Any]], Any]] = None,
                 log_writers: Optional[Dict[str, Any]] = None):
        self.settings = dict(DEFAULT_SETTINGS)
        if settings:
            self.settings.update(settings)
        self.engine_factory = engine_factory
        self.log_writers = log_writers or {}
        self.validator = RequestValidator()
        self.scanner = DocumentScanner(
            extensions=self.settings.get('extensions'),
            backup_dir_name=self.settings.get('backup_dir_name', '_word_replacer_backup')
        )
        self._restarts = 0
        self._restart_limit_reached = False

    def create_engine(self, engine_name: str, request: Dict[str, Any]):
        if self.engine_factory:
            return self.engine_factory(engine_name, request)
        if engine_name == 'word':
            return WordSession(
                visible=bool(request.get('visible')),
                busy_retry_count=int(self.settings.get('busy_retry_count', 5)),
                busy_retry_delay=float(self.settings.get('busy_retry_delay', 0.5))
            )
        return DocxEngine()

    def backup_document(self, file_path: str, folder: str) -> str:
        """
        Copy a document into the backup folder, keeping its relative path

        An existing backup is the oldest copy of the document and is never
        overwritten by later runs.
        """
        relative_path = os.path.relpath(file_path, folder)
        backup_path = os.path.join(folder, self.settings['backup_dir_name'], relative_path)
        if os.path.exists(backup_path):
            logger.info(f"Keeping existing backup {backup_path}")
            return backup_path
        os.makedirs(os.path.dirname(backup_path), exist_ok=True)
        shutil.copy2(file_path, backup_path)
        return backup_path

    def _new_results(self, request: Dict[str, Any], engine_name: str, warnings: List[str]) -> Dict[str, Any]:
        return {
            'folder': request['folder'],
            'engine': engine_name,
            'dry_run': request['dry_run'],
            'total_files': 0,
            'processed': 0,
            'changed': 0,
            'unchanged': 0,
            'failed': 0,
            'total_replacements': 0,
            'restarts': 0,
            'cancelled': False,
            'started': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'finished': None,
            'warnings': list(warnings),
            'details': []
        }

    def run(self, request: Dict[str, Any], progress_callback: Optional[Callable[[int, int, str], None]] = None,
            cancel_event=None) -> Dict[str, Any]:
        """
        Replace text in every document of request['folder']

        Args:
            request: Replacement request (see RequestValidator)
            progress_callback: Called as (current, total, message)
            cancel_event: threading.Event; stops before the next document when set

        Returns:
            Run results with per-document 'details'
        """
        request = self.validator.normalize_request(request, self.settings)
        engine_name = resolve_engine(request['engine']) if request['engine'] in ENGINES else request['engine']

        validation = self.validator.validate_request(request, engine_name)
        if not validation['valid']:
            raise ValueError("; ".join(validation['errors']))
        for warning in validation['warnings']:
            logger.warning(warning)

        results = self._new_results(request, engine_name, validation['warnings'])
        self._restarts = 0
        self._restart_limit_reached = False

        pairs = [pair for pair in request['pairs'] if pair['find'] != pair['replace']]
        if not pairs:
            results['warnings'].append("Nothing to replace, every pair is identical")
            results['finished'] = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
            return results

        files = self.scanner.scan(request['folder'], request['recursive'], request['extensions'])
        total = len(files)
        results['total_files'] = total
        if not files:
            results['warnings'].append("No documents found")
            results['finished'] = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
            logger.warning(f"No documents found in {request['folder']}")
            return results

        replacement_writer = self.log_writers.get('replacement_writer')
        error_log_writer = self.log_writers.get('error_log_writer')
        if replacement_writer:
            replacement_writer.write_pairs(pairs, {
                'engine': engine_name,
                'match_case': request['match_case'],
                'whole_word': request['whole_word'],
                'recursive': request['recursive'],
                'include_headers': request['include_headers'],
                'dry_run': request['dry_run'],
                'backup': request['backup'],
            })

        logger.info(f"Processing {total} documents with the {engine_name} engine")
        engine = self.create_engine(engine_name, request)
        try:
            engine.start()
            for index, file_path in enumerate(files, 1):
                if cancel_event is not None and cancel_event.is_set():
                    self._skip_remaining(results, files[index - 1:])
                    break

                self._report(progress_callback, index - 1, total, f"Processing {os.path.basename(file_path)}")

                if self._restart_limit_reached:
                    detail = self._empty_detail(file_path, 'failed')
                    detail['error'] = RESTART_LIMIT_MESSAGE
                else:
                    try:
                        detail = self._process_document(engine, file_path, request, pairs)
                    except KeyboardInterrupt:
                        # Ctrl+C while a document is in flight stops the run like a cancel
                        logger.warning(f"Interrupted while processing {os.path.basename(file_path)}")
                        self._skip_remaining(results, files[index - 1:], "Interrupted while processing")
                        break

                self._record(results, detail)
                if replacement_writer:
                    replacement_writer.write_document_result(detail)
                if error_log_writer and detail['status'] == 'failed':
                    error_log_writer.write_error(detail['error'], file_path=file_path)

                self._report(progress_callback, index, total, f"{detail['status']}: {os.path.basename(file_path)}")
        finally:
            engine.quit()
            results['restarts'] = self._restarts
            results['finished'] = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
            if replacement_writer:
                replacement_writer.finalize(results)
            if error_log_writer:
                error_log_writer.close()

        logger.info(f"Done: {results['changed']} changed, {results['unchanged']} unchanged, "
                    f"{results['failed']} failed, {results['total_replacements']} replacements")
        return results

    def _skip_remaining(self, results: Dict[str, Any], remaining: List[str], error: Optional[str] = None):
        results['cancelled'] = True
        logger.info(f"Run cancelled, {len(remaining)} documents not processed")
        for index, file_path in enumerate(remaining):
            detail = self._empty_detail(file_path, 'skipped')
            if index == 0:
                detail['error'] = error
            results['details'].append(detail)

    def _empty_detail(self, file_path: str, status: str) -> Dict[str, Any]:
        return {
            'file': file_path,
            'status': status,
            'replacements': 0,
            'matches': {},
            'attempts': 0,
            'error': None
        }

    def _process_document(self, engine, file_path: str, request: Dict[str, Any],
                          pairs: List[Dict[str, str]]) -> Dict[str, Any]:
        """Process one document, restarting Word when it crashes"""
        detail = self._empty_detail(file_path, 'failed')

        if request['backup'] and not request['dry_run']:
            try:
                self.backup_document(file_path, request['folder'])
            except OSError as e:
                detail['error'] = f"Backup failed, document left untouched: {e}"
                logger.error(f"{detail['error']} ({file_path})")
                return detail

        max_attempts = max(1, int(self.settings.get('max_attempts_per_document', 2)))
        max_restarts = int(self.settings.get('max_restarts', 3))

        while detail['attempts'] < max_attempts:
            detail['attempts'] += 1
            try:
                outcome = engine.replace_in_document(
                    file_path, pairs,
                    match_case=request['match_case'],
                    whole_word=request['whole_word'],
                    include_headers=request['include_headers'],
                    dry_run=request['dry_run']
                )
            except WordCrashedError as e:
                detail['error'] = str(e)
                logger.warning(f"Word crashed on {os.path.basename(file_path)} (attempt {detail['attempts']}): {e}")
                if self._restarts >= max_restarts:
                    self._restart_limit_reached = True
                    detail['error'] = f"{e}; {RESTART_LIMIT_MESSAGE}"
                    break
                try:
                    engine.restart()
                    self._restarts += 1
                except WordAutomationError as restart_error:
                    self._restart_limit_reached = True
                    detail['error'] = f"{e}; could not restart Word: {restart_error}"
                    logger.error(detail['error'])
                    break
                continue
            except DocumentError as e:
                detail['error'] = str(e)
                logger.error(f"Failed: {e}")
                break
            except Exception as e:
                detail['error'] = f"Unexpected error: {e}"
                logger.error(f"Unexpected error processing {file_path}: {str(e)}", exc_info=True)
                break

            detail['replacements'] = outcome['replacements']
            detail['matches'] = outcome['matches']
            detail['status'] = 'changed' if outcome['changed'] else 'unchanged'
            detail['error'] = None
            break

        return detail

    def _record(self, results: Dict[str, Any], detail: Dict[str, Any]):
        results['details'].append(detail)
        results['processed'] += 1
        if detail['status'] == 'failed':
            results['failed'] += 1
            return
        if detail['status'] == 'changed':
            results['changed'] += 1
        else:
            results['unchanged'] += 1
        results['total_replacements'] += detail['replacements'] or 0

    def _report(self, progress_callback, current: int, total: int, message: str):
        if progress_callback:
            progress_callback(current, total, message)
