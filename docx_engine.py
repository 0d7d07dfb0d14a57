"""
DOCX Engine Module
Find/replace in .docx files with python-docx, for machines without Microsoft Word.
Same interface as WordSession so the runner can use either engine.
"""

import os
import re
from bisect import bisect_right
from typing import Any, Dict, Iterator, List
import logging

from replacer_errors import DocumentError, WordAutomationError

try:
    from docx import Document
    DOCX_AVAILABLE = True
except ImportError:
    DOCX_AVAILABLE = False

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = [".docx", ".docm"]


def build_pattern(find_text: str, match_case: bool = False, whole_word: bool = False):
    """Compile a literal search pattern"""
    pattern = re.escape(find_text)
    if whole_word:
        pattern = r"(?<!\w)" + pattern + r"(?!\w)"
    flags = 0 if match_case else re.IGNORECASE
    return re.compile(pattern, flags)


def replace_in_paragraph(paragraph, pattern, replace_text: str, dry_run: bool = False) -> int:
    """
    Replace matches in a paragraph while keeping run formatting

    A match that spans several runs is written into the first run; the
    other runs lose the matched characters.

    Returns:
        Number of matches in the paragraph
    """
    runs = list(paragraph.runs)
    if not runs:
        return 0

    texts = [run.text for run in runs]
    matches = list(pattern.finditer("".join(texts)))
    if not matches or dry_run:
        return len(matches)

    starts = []
    position = 0
    for text in texts:
        starts.append(position)
        position += len(text)

    # Last to first so earlier offsets stay valid
    for match in reversed(matches):
        first = bisect_right(starts, match.start()) - 1
        last = bisect_right(starts, match.end() - 1) - 1
        local_start = match.start() - starts[first]
        local_end = match.end() - starts[last]

        if first == last:
            texts[first] = texts[first][:local_start] + replace_text + texts[first][local_end:]
        else:
            texts[first] = texts[first][:local_start] + replace_text
            for index in range(first + 1, last):
                texts[index] = ""
            texts[last] = texts[last][local_end:]

    for run, text in zip(runs, texts):
        if run.text != text:
            run.text = text

    return len(matches)


class DocxEngine:
    name = "docx"

    def __init__(self):
        self.restarts = 0
        self._running = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.quit()
        return False

    def start(self):
        if not DOCX_AVAILABLE:
            raise WordAutomationError("python-docx is not installed. Install it with: pip install python-docx")
        self._running = True
        return self

    def is_running(self) -> bool:
        return self._running

    def restart(self):
        self.quit()
        self.restarts += 1
        return self.start()

    def quit(self):
        self._running = False

    def _iter_table_paragraphs(self, tables, seen_cells) -> Iterator[Any]:
        for table in tables:
            for row in table.rows:
                for cell in row.cells:
                    # Merged cells show up once per grid column
                    if cell._tc in seen_cells:
                        continue
                    seen_cells.add(cell._tc)
                    yield from cell.paragraphs
                    yield from self._iter_table_paragraphs(cell.tables, seen_cells)

    def iter_paragraphs(self, doc, include_headers: bool = True) -> Iterator[Any]:
        """Body paragraphs, table cells and (optionally) headers/footers"""
        seen_cells = set()
        yield from doc.paragraphs
        yield from self._iter_table_paragraphs(doc.tables, seen_cells)

        if not include_headers:
            return

        seen_parts = set()
        for section in doc.sections:
            for header_footer in (section.header, section.footer,
                                  section.first_page_header, section.first_page_footer,
                                  section.even_page_header, section.even_page_footer):
                if header_footer.is_linked_to_previous:
                    continue
                part_id = id(header_footer.part)
                if part_id in seen_parts:
                    continue
                seen_parts.add(part_id)
                yield from header_footer.paragraphs
                yield from self._iter_table_paragraphs(header_footer.tables, seen_cells)

    def replace_in_document(self, file_path: str, pairs: List[Dict[str, str]],
                            match_case: bool = False, whole_word: bool = False,
                            include_headers: bool = True, dry_run: bool = False) -> Dict[str, Any]:
        """
        Replace every pair in one .docx/.docm document and save it

        Returns:
            {'replacements': int, 'matches': {find: count}, 'changed': bool}
        """
        if not self._running:
            raise WordAutomationError("DOCX engine is not started")

        abs_path = os.path.abspath(file_path)
        extension = os.path.splitext(abs_path)[1].lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise DocumentError(f"python-docx cannot open '{extension}' files, use the Word engine", abs_path)
        if not dry_run and not os.access(abs_path, os.W_OK):
            raise DocumentError("Document is read-only", abs_path)

        try:
            doc = Document(abs_path)
        except Exception as e:
            raise DocumentError(f"Could not open document: {e}", abs_path) from e

        matches: Dict[str, int] = {}
        total = 0
        for pair in pairs:
            pattern = build_pattern(pair['find'], match_case, whole_word)
            found = 0
            for paragraph in self.iter_paragraphs(doc, include_headers):
                found += replace_in_paragraph(paragraph, pattern, pair['replace'], dry_run)
            matches[pair['find']] = matches.get(pair['find'], 0) + found
            total += found

        if total and not dry_run:
            try:
                doc.save(abs_path)
            except OSError as e:
                raise DocumentError(f"Could not save document: {e}", abs_path) from e
            logger.info(f"Saved {os.path.basename(abs_path)} ({total} replacements)")

        return {
            'replacements': total,
            'matches': matches,
            'changed': bool(total) and not dry_run
        }
