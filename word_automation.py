"""
Word Automation Module
Drives Microsoft Word through COM: starts an isolated Word instance, runs
Word's own Find/Replace on each document and recovers when Word crashes
"""

import gc
import os
import time
from typing import Any, Callable, Dict, Iterator, List, Optional
import logging

from replacer_errors import DocumentError, WordAutomationError, WordCrashedError

# pywin32 is only available on Windows
try:
    import pythoncom
    import win32com.client
    WIN32COM_AVAILABLE = True
except ImportError:
    WIN32COM_AVAILABLE = False

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Word constants
WD_ALERTS_NONE = 0
WD_DO_NOT_SAVE_CHANGES = 0
WD_FIND_STOP = 0
WD_REPLACE_NONE = 0
WD_REPLACE_ALL = 2
WD_COLLAPSE_END = 0

# Word's Find.Text and Replacement.Text limit
MAX_FIND_LENGTH = 255

# Protected documents fail on this password instead of opening a prompt
PASSWORD_SENTINEL = "\u0000word-replacer\u0000"

MAX_MATCHES_PER_STORY = 100000

# HRESULTs meaning the Word process is gone
RPC_S_SERVER_UNAVAILABLE = -2147023174   # 0x800706BA
RPC_S_CALL_FAILED = -2147023170          # 0x800706BE
RPC_E_DISCONNECTED = -2147417848         # 0x80010108
RPC_E_SERVER_DIED = -2147418094          # 0x80010012
RPC_E_SERVER_DIED_DNE = -2147418093      # 0x80010013
CO_E_SERVER_EXEC_FAILURE = -2146959355   # 0x80080005

# HRESULTs meaning Word is busy (modal dialog, still loading)
RPC_E_CALL_REJECTED = -2147418111        # 0x80010001
RPC_E_SERVERCALL_RETRYLATER = -2147417846  # 0x8001010A

CRASH_HRESULTS = {
    RPC_S_SERVER_UNAVAILABLE,
    RPC_S_CALL_FAILED,
    RPC_E_DISCONNECTED,
    RPC_E_SERVER_DIED,
    RPC_E_SERVER_DIED_DNE,
    CO_E_SERVER_EXEC_FAILURE,
}
BUSY_HRESULTS = {RPC_E_CALL_REJECTED, RPC_E_SERVERCALL_RETRYLATER}

CRASH_MESSAGES = [
    "rpc server is unavailable",
    "disconnected from its clients",
    "remote procedure call failed",
    "server execution failed",
]


def _hresult(exc: BaseException) -> Optional[int]:
    hresult = getattr(exc, "hresult", None)
    if hresult is None and exc.args and isinstance(exc.args[0], int):
        hresult = exc.args[0]
    return hresult


def _excepinfo(exc: BaseException):
    excepinfo = getattr(exc, "excepinfo", None)
    if excepinfo is None and len(exc.args) >= 3:
        excepinfo = exc.args[2]
    if isinstance(excepinfo, tuple):
        return excepinfo
    return None


def _error_text(exc: BaseException) -> str:
    """Best human-readable message from a COM error"""
    excepinfo = _excepinfo(exc)
    if excepinfo and len(excepinfo) > 2 and excepinfo[2]:
        return str(excepinfo[2]).strip()
    if len(exc.args) >= 2 and isinstance(exc.args[1], str) and exc.args[1]:
        return exc.args[1]
    return str(exc)


def describe_com_error(exc: BaseException) -> str:
    """Format a COM error as 'message (hresult=0x...)'"""
    text = _error_text(exc)
    hresult = _hresult(exc)
    if hresult is None:
        return text
    excepinfo = _excepinfo(exc)
    scode = excepinfo[5] if excepinfo and len(excepinfo) > 5 else None
    code = scode if isinstance(scode, int) and scode else hresult
    return f"{text} (hresult=0x{code & 0xFFFFFFFF:08X})"


def is_crash_error(exc: BaseException) -> bool:
    """True when the error means the Word process died or disconnected"""
    if isinstance(exc, WordCrashedError):
        return True
    if _hresult(exc) in CRASH_HRESULTS:
        return True
    excepinfo = _excepinfo(exc)
    if excepinfo and len(excepinfo) > 5 and excepinfo[5] in CRASH_HRESULTS:
        return True
    text = _error_text(exc).lower()
    return any(message in text for message in CRASH_MESSAGES)


def is_busy_error(exc: BaseException) -> bool:
    """True when Word rejected the call because it is busy"""
    return _hresult(exc) in BUSY_HRESULTS


def escape_find_text(text: str) -> str:
    """Make text literal for Word's Find (^ starts a special character code)"""
    return text.replace("^", "^^")


def is_word_available() -> bool:
    return WIN32COM_AVAILABLE


class WordSession:
    """
    One Microsoft Word instance used for a batch of documents

    DispatchEx gives an isolated instance so the user's open documents are
    never touched. Use as a context manager to make sure Word is shut down:

        with WordSession() as session:
            session.replace_in_document(path, [{'find': 'a', 'replace': 'b'}])
    """

    name = "word"

    def __init__(self, visible: bool = False, busy_retry_count: int = 5,
                 busy_retry_delay: float = 0.5, dispatch: Optional[Callable[[str], Any]] = None):
        self.visible = visible
        self.busy_retry_count = busy_retry_count
        self.busy_retry_delay = busy_retry_delay
        self.dispatch = dispatch
        self.app = None
        self.restarts = 0
        self._com_initialized = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.quit()
        return False

    def start(self):
        """Start Word (no-op when already started)"""
        if self.app is not None:
            return self.app

        if self.dispatch is None and not WIN32COM_AVAILABLE:
            raise WordAutomationError("pywin32 is not installed. Install it with: pip install pywin32")

        if WIN32COM_AVAILABLE and not self._com_initialized:
            # Worker threads need their own COM apartment
            pythoncom.CoInitialize()
            self._com_initialized = True

        factory = self.dispatch or win32com.client.DispatchEx
        try:
            app = factory("Word.Application")
            app.Visible = self.visible
            app.DisplayAlerts = WD_ALERTS_NONE
            if not self.visible:
                app.ScreenUpdating = False
        except Exception as e:
            self._uninitialize()
            raise WordAutomationError(f"Could not start Microsoft Word: {describe_com_error(e)}") from e

        self.app = app
        logger.info(f"Started Microsoft Word (visible={self.visible})")
        return self.app

    def is_running(self) -> bool:
        if self.app is None:
            return False
        try:
            self.app.Version
            return True
        except Exception as e:
            if is_crash_error(e):
                return False
            # Busy or a dialog is open; the process is still there
            logger.warning(f"Word did not answer: {describe_com_error(e)}")
            return True

    def restart(self):
        """Throw away the current Word instance and start a fresh one"""
        logger.warning("Restarting Microsoft Word")
        self.quit()
        self.restarts += 1
        return self.start()

    def quit(self):
        """Close all documents without saving and quit Word"""
        app = self.app
        self.app = None
        if app is not None:
            try:
                while app.Documents.Count > 0:
                    app.Documents(1).Close(SaveChanges=WD_DO_NOT_SAVE_CHANGES)
            except Exception as e:
                logger.warning(f"Could not close open documents: {describe_com_error(e)}")
            try:
                app.Quit(SaveChanges=WD_DO_NOT_SAVE_CHANGES)
                logger.info("Microsoft Word closed")
            except Exception as e:
                logger.warning(f"Word did not quit cleanly: {describe_com_error(e)}")
            del app
            # Drop lingering COM references so WINWORD.EXE can exit
            gc.collect()
        self._uninitialize()

    def _uninitialize(self):
        if self._com_initialized:
            self._com_initialized = False
            try:
                pythoncom.CoUninitialize()
            except Exception as e:
                logger.warning(f"CoUninitialize failed: {e}")

    def _call(self, func: Callable, *args, **kwargs):
        """Call into Word, retrying while Word reports it is busy"""
        attempt = 0
        while True:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if is_busy_error(e) and attempt < self.busy_retry_count:
                    attempt += 1
                    logger.info(f"Word is busy, retrying in {self.busy_retry_delay}s "
                                f"({attempt}/{self.busy_retry_count})")
                    time.sleep(self.busy_retry_delay)
                    continue
                raise

    def _story_ranges(self, doc, include_headers: bool) -> Iterator[Any]:
        """Main text, or every story (headers, footers, text boxes, notes) when requested"""
        if not include_headers:
            yield doc.Content
            return

        # Touching the primary header makes Word list header stories in StoryRanges
        try:
            doc.Sections(1).Headers(1).Range.StoryType
        except Exception as e:
            if is_crash_error(e):
                raise
            logger.debug(f"No primary header: {describe_com_error(e)}")

        for story in doc.StoryRanges:
            story_range = story
            while story_range is not None:
                yield story_range
                story_range = story_range.NextStoryRange

    def count_matches(self, story_range, find_text: str, match_case: bool = False,
                      whole_word: bool = False) -> int:
        """Count occurrences in one story range using Word's Find"""
        search_range = story_range.Duplicate
        find = search_range.Find
        find.ClearFormatting()
        count = 0
        while self._call(find.Execute, FindText=escape_find_text(find_text),
                         MatchCase=match_case, MatchWholeWord=whole_word,
                         MatchWildcards=False, Forward=True, Wrap=WD_FIND_STOP,
                         Replace=WD_REPLACE_NONE):
            count += 1
            if count >= MAX_MATCHES_PER_STORY:
                logger.warning(f"Stopped counting after {count} matches of '{find_text}'")
                break
            # Continue searching after the found text
            search_range.Collapse(WD_COLLAPSE_END)
        return count

    def replace_all(self, story_range, find_text: str, replace_text: str,
                    match_case: bool = False, whole_word: bool = False) -> bool:
        """Run Word's Replace All on one story range"""
        target = story_range.Duplicate
        find = target.Find
        find.ClearFormatting()
        find.Replacement.ClearFormatting()
        return bool(self._call(find.Execute, FindText=escape_find_text(find_text),
                               MatchCase=match_case, MatchWholeWord=whole_word,
                               MatchWildcards=False, Forward=True, Wrap=WD_FIND_STOP,
                               ReplaceWith=escape_find_text(replace_text),
                               Replace=WD_REPLACE_ALL))

    def open_document(self, file_path: str, read_only: bool = False):
        abs_path = os.path.abspath(file_path)
        try:
            return self._call(self.app.Documents.Open, FileName=abs_path,
                              ConfirmConversions=False, ReadOnly=read_only,
                              AddToRecentFiles=False, PasswordDocument=PASSWORD_SENTINEL,
                              Revert=False, Visible=self.visible, NoEncodingDialog=True)
        except Exception as e:
            if is_crash_error(e):
                raise WordCrashedError(f"Word crashed while opening: {describe_com_error(e)}", abs_path) from e
            raise DocumentError(f"Could not open document: {describe_com_error(e)}", abs_path) from e

    def replace_in_document(self, file_path: str, pairs: List[Dict[str, str]],
                            match_case: bool = False, whole_word: bool = False,
                            include_headers: bool = True, dry_run: bool = False) -> Dict[str, Any]:
        """
        Replace every pair in one document and save it

        Args:
            file_path: Document to process
            pairs: List of {'find': str, 'replace': str}, applied in order
            match_case: Case-sensitive search (default is case-insensitive)
            whole_word: Match whole words only
            include_headers: Also search headers, footers and text boxes
            dry_run: Only count matches, never save

        Returns:
            {'replacements': int, 'matches': {find: count}, 'changed': bool}
        """
        if self.app is None:
            raise WordAutomationError("Word session is not started")

        abs_path = os.path.abspath(file_path)
        doc = self.open_document(abs_path, read_only=dry_run)
        matches: Dict[str, int] = {}
        total = 0

        try:
            if not dry_run and doc.ReadOnly:
                raise DocumentError("Document opened read-only (locked or read-only file)", abs_path)

            for pair in pairs:
                find_text = pair['find']
                replace_text = pair['replace']
                found = 0
                for story_range in self._story_ranges(doc, include_headers):
                    story_count = self.count_matches(story_range, find_text, match_case, whole_word)
                    if story_count and not dry_run:
                        self.replace_all(story_range, find_text, replace_text, match_case, whole_word)
                    found += story_count
                matches[find_text] = matches.get(find_text, 0) + found
                total += found

            if total and not dry_run:
                self._call(doc.Save)
                logger.info(f"Saved {os.path.basename(abs_path)} ({total} replacements)")
        except WordAutomationError:
            raise
        except Exception as e:
            if is_crash_error(e):
                raise WordCrashedError(f"Word crashed: {describe_com_error(e)}", abs_path) from e
            raise DocumentError(describe_com_error(e), abs_path) from e
        finally:
            self._close_document(doc)

        return {
            'replacements': total,
            'matches': matches,
            'changed': bool(total) and not dry_run
        }

    def _close_document(self, doc):
        try:
            doc.Close(SaveChanges=WD_DO_NOT_SAVE_CHANGES)
        except Exception as e:
            # The original error (if any) is already propagating
            logger.warning(f"Could not close document: {describe_com_error(e)}")
