"""
Request Validator Module
Validates replacement parameters and replacement-pair JSON files,
and writes the human-readable run report
"""

import json
import os
from typing import Any, Dict, List, Optional
import logging
from datetime import datetime

import jsonschema
from jsonschema import ValidationError

from word_automation import MAX_FIND_LENGTH

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


ENGINES = ["auto", "word", "docx"]

PAIRS_SCHEMA = {
    "type": "array",
    "minItems": 1,
    "items": {
        "type": "object",
        "required": ["find", "replace"],
        "properties": {
            "find": {"type": "string", "minLength": 1},
            "replace": {"type": "string"}
        }
    }
}

REQUEST_DEFAULT_KEYS = [
    "match_case", "whole_word", "recursive", "include_headers",
    "engine", "visible", "extensions"
]

REQUEST_DEFAULTS = {
    'match_case': False,
    'whole_word': False,
    'recursive': True,
    'include_headers': True,
    'engine': 'auto',
    'visible': False,
}


class RequestValidator:
    """
    Validation for a replacement run:
    - Folder and pair checks
    - Option checks
    - Replacement-pair files (JSON, checked with jsonschema)
    """

    def normalize_request(self, request: Dict[str, Any], settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Fill missing options from settings

        Find/replace text is kept exactly as given, whitespace included.
        """
        settings = settings or {}
        normalized = dict(request)
        for key in REQUEST_DEFAULT_KEYS:
            if normalized.get(key) is None and key in settings:
                normalized[key] = settings[key]

        for key, default in REQUEST_DEFAULTS.items():
            if normalized.get(key) is None:
                normalized[key] = default
        normalized['dry_run'] = bool(normalized.get('dry_run', False))
        normalized['backup'] = bool(normalized.get('backup', False))

        extensions = normalized.get('extensions') or [".docx", ".doc", ".docm"]
        if isinstance(extensions, str):
            extensions = [extensions]
        normalized['extensions'] = [ext.strip().lower() for ext in extensions]

        normalized['pairs'] = [
            {'find': pair.get('find', ''), 'replace': pair.get('replace', '')}
            for pair in (normalized.get('pairs') or [])
        ]
        normalized['folder'] = (normalized.get('folder') or '').strip()
        return normalized

    def validate_request(self, request: Dict[str, Any], resolved_engine: Optional[str] = None) -> Dict[str, Any]:
        """
        Validate a (normalized) replacement request

        Args:
            request: Request dictionary
            resolved_engine: Engine the run will actually use ('word' or 'docx')

        Returns:
            {
                'valid': bool,
                'errors': List[str],
                'warnings': List[str],
                'info': Dict
            }
        """
        result = {
            'valid': True,
            'errors': [],
            'warnings': [],
            'info': {}
        }

        folder = request.get('folder') or ''
        if not folder:
            result['errors'].append("No folder selected")
        elif not os.path.exists(folder):
            result['errors'].append(f"Folder not found: {folder}")
        elif not os.path.isdir(folder):
            result['errors'].append(f"Not a folder: {folder}")

        engine = request.get('engine', 'auto')
        if engine not in ENGINES:
            result['errors'].append(f"Unknown engine '{engine}' (expected one of: {', '.join(ENGINES)})")
        word_engine = (resolved_engine or engine) == 'word'

        for extension in request.get('extensions') or []:
            if not extension.startswith('.') or len(extension) < 2:
                result['errors'].append(f"Invalid extension '{extension}' (must look like '.docx')")

        pairs = request.get('pairs') or []
        if not pairs:
            result['errors'].append("No text to find was given")

        match_case = request.get('match_case', False)
        seen = set()
        for index, pair in enumerate(pairs, 1):
            find_text = pair.get('find', '')
            replace_text = pair.get('replace', '')
            if not find_text:
                result['errors'].append(f"Pair {index}: find text is empty")
                continue

            if word_engine and len(find_text) > MAX_FIND_LENGTH:
                result['errors'].append(
                    f"Pair {index}: find text is {len(find_text)} characters, Word allows {MAX_FIND_LENGTH}")
            if word_engine and len(replace_text) > MAX_FIND_LENGTH:
                result['errors'].append(
                    f"Pair {index}: replacement text is {len(replace_text)} characters, Word allows {MAX_FIND_LENGTH}")

            key = find_text if match_case else find_text.lower()
            if key in seen:
                result['warnings'].append(f"Pair {index}: '{find_text}' is listed more than once")
            seen.add(key)

            if find_text == replace_text:
                result['warnings'].append(f"Pair {index}: find and replace are identical, pair will be skipped")
            elif key in (replace_text if match_case else replace_text.lower()):
                result['warnings'].append(
                    f"Pair {index}: replacement contains the find text, running again will replace it again")

        result['info']['pair_count'] = len(pairs)
        result['info']['engine'] = resolved_engine or engine
        result['valid'] = not result['errors']
        return result

    def validate_pairs_file(self, file_path: str) -> Dict[str, Any]:
        """
        Validate a JSON file of replacement pairs

        Accepted layouts:
            [{"find": "...", "replace": "..."}, ...]
            {"pairs": [{"find": "...", "replace": "..."}, ...]}
        """
        result = {
            'valid': True,
            'file': file_path,
            'errors': [],
            'warnings': [],
            'pairs': []
        }

        if not os.path.exists(file_path):
            result['valid'] = False
            result['errors'].append(f"File not found: {file_path}")
            return result

        try:
            with open(file_path, 'r', encoding='utf-8-sig') as f:
                content = f.read()
        except UnicodeDecodeError as e:
            result['valid'] = False
            result['errors'].append(f"Encoding error: {str(e)}")
            return result

        if not content.strip():
            result['valid'] = False
            result['errors'].append("File is empty")
            return result

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            result['valid'] = False
            result['errors'].append(f"JSON syntax error at line {e.lineno}, column {e.colno}: {e.msg}")
            return result

        if isinstance(data, dict):
            if 'pairs' not in data:
                result['valid'] = False
                result['errors'].append("JSON object must contain a 'pairs' list")
                return result
            data = data['pairs']

        try:
            jsonschema.validate(instance=data, schema=PAIRS_SCHEMA)
        except ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path)
            if location:
                result['errors'].append(f"Schema error at '{location}': {e.message}")
            else:
                result['errors'].append(f"Schema error: {e.message}")
            result['valid'] = False
            return result

        for index, pair in enumerate(data, 1):
            extra = set(pair.keys()) - {'find', 'replace'}
            if extra:
                result['warnings'].append(f"Pair {index}: ignored keys {', '.join(sorted(extra))}")

        result['pairs'] = [{'find': p['find'], 'replace': p['replace']} for p in data]
        return result

    def load_pairs_file(self, file_path: str) -> List[Dict[str, str]]:
        """Load pairs from a JSON file, raising ValueError when the file is invalid"""
        result = self.validate_pairs_file(file_path)
        if not result['valid']:
            raise ValueError(f"Invalid pairs file {file_path}: " + "; ".join(result['errors']))
        for warning in result['warnings']:
            logger.warning(f"{os.path.basename(file_path)}: {warning}")
        logger.info(f"Loaded {len(result['pairs'])} replacement pairs from {file_path}")
        return result['pairs']

    def generate_report(self, run_results: Dict[str, Any], output_path: Optional[str] = None) -> str:
        """
        Generate a human-readable run report

        Args:
            run_results: Results from ReplacementRunner.run()
            output_path: Optional path to save report

        Returns:
            Report text
        """
        report_lines = []
        report_lines.append("=" * 80)
        report_lines.append("WORD REPLACEMENT REPORT")
        report_lines.append("=" * 80)
        report_lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        report_lines.append(f"Folder: {run_results.get('folder', '')}")
        report_lines.append(f"Engine: {run_results.get('engine', '')}")
        if run_results.get('dry_run'):
            report_lines.append("Mode: DRY RUN (no documents were saved)")
        report_lines.append("")

        report_lines.append("SUMMARY")
        report_lines.append("-" * 80)
        report_lines.append(f"Total Documents: {run_results.get('total_files', 0)}")
        report_lines.append(f"Processed: {run_results.get('processed', 0)}")
        report_lines.append(f"Changed: {run_results.get('changed', 0)}")
        report_lines.append(f"Unchanged: {run_results.get('unchanged', 0)}")
        report_lines.append(f"Failed: {run_results.get('failed', 0)}")
        report_lines.append(f"Total Replacements: {run_results.get('total_replacements', 0)}")
        report_lines.append(f"Word Restarts: {run_results.get('restarts', 0)}")
        if run_results.get('cancelled'):
            report_lines.append("Run was cancelled before all documents were processed")
        report_lines.append("")

        if run_results.get('warnings'):
            report_lines.append("WARNINGS")
            report_lines.append("-" * 80)
            for warning in run_results['warnings']:
                report_lines.append(f"  - {warning}")
            report_lines.append("")

        details = run_results.get('details', [])

        failed = [d for d in details if d['status'] == 'failed']
        if failed:
            report_lines.append("FAILED DOCUMENTS")
            report_lines.append("-" * 80)
            for detail in failed:
                report_lines.append(f"\nFile: {os.path.basename(detail['file'])}")
                report_lines.append(f"  Path: {detail['file']}")
                report_lines.append(f"  Attempts: {detail.get('attempts', 0)}")
                report_lines.append(f"  Error: {detail.get('error')}")
            report_lines.append("")

        changed = [d for d in details if d['status'] == 'changed' or (d['status'] == 'unchanged' and d.get('replacements'))]
        if changed:
            report_lines.append("DOCUMENTS WITH MATCHES" if run_results.get('dry_run') else "CHANGED DOCUMENTS")
            report_lines.append("-" * 80)
            for detail in changed:
                report_lines.append(f"\nFile: {os.path.basename(detail['file'])}")
                report_lines.append(f"  Path: {detail['file']}")
                for find_text, count in (detail.get('matches') or {}).items():
                    if count:
                        report_lines.append(f"    '{find_text}': {count}")
            report_lines.append("")

        unchanged = [d for d in details if d['status'] == 'unchanged' and not d.get('replacements')]
        if unchanged:
            report_lines.append("UNCHANGED DOCUMENTS")
            report_lines.append("-" * 80)
            for detail in unchanged:
                report_lines.append(f"  {os.path.basename(detail['file'])}")
            report_lines.append("")

        skipped = [d for d in details if d['status'] == 'skipped']
        if skipped:
            report_lines.append("NOT PROCESSED")
            report_lines.append("-" * 80)
            for detail in skipped:
                report_lines.append(f"  {os.path.basename(detail['file'])}")
            report_lines.append("")

        report_lines.append("=" * 80)
        report_text = "\n".join(report_lines)

        if output_path:
            try:
                with open(output_path, 'w', encoding='utf-8') as f:
                    f.write(report_text)
                logger.info(f"Run report saved to: {output_path}")
            except OSError as e:
                logger.error(f"Failed to save report: {str(e)}")

        return report_text
