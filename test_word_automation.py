"""
Tests for the Word automation layer
A small in-memory stand-in for Word's object model is passed to
WordSession through dispatch=, so these run without Microsoft Word
"""

import os
import re
from types import SimpleNamespace

from replacer_errors import DocumentError, WordAutomationError, WordCrashedError
from word_automation import (
    CO_E_SERVER_EXEC_FAILURE, RPC_E_CALL_REJECTED, RPC_S_CALL_FAILED, RPC_S_SERVER_UNAVAILABLE,
    WordSession, describe_com_error, escape_find_text, is_busy_error, is_crash_error
)

DISP_E_EXCEPTION = -2147352567
WORD_PASSWORD_ERROR = -2146822880


class FakeComError(Exception):
    """Shaped like pywintypes.com_error: (hresult, text, excepinfo, argerror)"""

    def __init__(self, hresult, text, excepinfo=None):
        super().__init__(hresult, text, excepinfo, None)
        self.hresult = hresult


def crash_error():
    return FakeComError(RPC_S_SERVER_UNAVAILABLE, "The RPC server is unavailable.")


def busy_error():
    return FakeComError(RPC_E_CALL_REJECTED, "Call was rejected by callee.")


def password_error():
    return FakeComError(DISP_E_EXCEPTION, "Exception occurred.",
                        (0, "Microsoft Word", "The password is incorrect.", None, 0, WORD_PASSWORD_ERROR))


class FakeStory:
    def __init__(self, text):
        self.text = text


class FakeFind:
    def __init__(self, search_range):
        self.range = search_range
        self.Replacement = SimpleNamespace(ClearFormatting=lambda: None)

    def ClearFormatting(self):
        pass

    def Execute(self, FindText, MatchCase, MatchWholeWord, MatchWildcards, Forward, Wrap,
                Replace, ReplaceWith=None):
        story = self.range.story
        pattern = re.escape(FindText.replace("^^", "^"))
        if MatchWholeWord:
            pattern = r"(?<!\w)" + pattern + r"(?!\w)"
        regex = re.compile(pattern, 0 if MatchCase else re.IGNORECASE)

        if Replace == 2:
            start, end = self.range.start, self.range.end
            replacement = ReplaceWith.replace("^^", "^")
            segment, count = regex.subn(lambda m: replacement, story.text[start:end])
            story.text = story.text[:start] + segment + story.text[end:]
            return count > 0

        # A collapsed range searches on to the end of the story
        end = len(story.text) if self.range.start == self.range.end else self.range.end
        match = regex.search(story.text, self.range.start, end)
        if not match:
            return False
        self.range.start, self.range.end = match.start(), match.end()
        return True


class FakeRange:
    NextStoryRange = None

    def __init__(self, story, start=0, end=None):
        self.story = story
        self.start = start
        self.end = len(story.text) if end is None else end

    @property
    def Duplicate(self):
        return FakeRange(self.story, self.start, self.end)

    @property
    def Find(self):
        return FakeFind(self)

    def Collapse(self, direction):
        self.start = self.end


class FakeDocument:
    def __init__(self, app, name, texts, read_only=False):
        self.app = app
        self.name = name
        self.stories = [FakeStory(text) for text in texts]
        self.ReadOnly = read_only
        self.saved = 0
        self.closed = False

    @property
    def Content(self):
        return FakeRange(self.stories[0])

    @property
    def StoryRanges(self):
        return [FakeRange(story) for story in self.stories]

    def Sections(self, index):
        header_range = SimpleNamespace(StoryType=7)
        return SimpleNamespace(Headers=lambda i: SimpleNamespace(Range=header_range))

    def Save(self):
        error = self.app.save_errors.get(self.name)
        if error:
            raise error
        self.saved += 1

    def Close(self, SaveChanges):
        self.closed = True
        self.app.open_documents.remove(self)


class FakeDocuments:
    def __init__(self, app):
        self.app = app

    @property
    def Count(self):
        return len(self.app.open_documents)

    def __call__(self, index):
        return self.app.open_documents[index - 1]

    def Open(self, FileName, **kwargs):
        name = os.path.basename(FileName)
        self.app.open_calls.append((FileName, kwargs))
        pending = self.app.open_errors.get(name)
        if pending:
            raise pending.pop(0)
        doc = FakeDocument(self.app, name, self.app.files[name],
                           read_only=kwargs.get('ReadOnly') or name in self.app.read_only)
        self.app.open_documents.append(doc)
        self.app.documents[name] = doc
        return doc


class FakeWordApp:
    def __init__(self, files=None):
        self.files = files or {}
        self.read_only = set()
        self.open_errors = {}
        self.save_errors = {}
        self.open_calls = []
        self.open_documents = []
        self.documents = {}
        self.Documents = FakeDocuments(self)
        self.Visible = True
        self.DisplayAlerts = -1
        self.ScreenUpdating = True
        self.quit_called = False
        self.version_error = None

    @property
    def Version(self):
        if self.version_error:
            raise self.version_error
        return "16.0"

    def Quit(self, SaveChanges):
        self.quit_called = True


def make_session(app, **kwargs):
    kwargs.setdefault('busy_retry_delay', 0)
    return WordSession(dispatch=lambda prog_id: app, **kwargs)


def test_start_configures_word():
    app = FakeWordApp()
    session = make_session(app)
    assert session.start() is app
    assert app.Visible is False
    assert app.DisplayAlerts == 0
    assert app.ScreenUpdating is False
    assert session.is_running()
    session.quit()
    assert app.quit_called
    assert not session.is_running()


def test_replace_in_main_text_and_headers():
    app = FakeWordApp({'a.docx': ["Hello World and world", "Header world"]})
    with make_session(app) as session:
        result = session.replace_in_document("a.docx", [{'find': 'world', 'replace': 'Earth'}])

    doc = app.documents['a.docx']
    assert result == {'replacements': 3, 'matches': {'world': 3}, 'changed': True}
    assert [story.text for story in doc.stories] == ["Hello Earth and Earth", "Header Earth"]
    assert doc.saved == 1
    assert doc.closed

    file_name, options = app.open_calls[0]
    assert file_name == os.path.abspath("a.docx")
    assert options['ReadOnly'] is False
    assert options['AddToRecentFiles'] is False


def test_headers_can_be_skipped():
    app = FakeWordApp({'a.docx': ["world", "Header world"]})
    with make_session(app) as session:
        result = session.replace_in_document("a.docx", [{'find': 'world', 'replace': 'Earth'}],
                                             include_headers=False)
    assert result['replacements'] == 1
    assert app.documents['a.docx'].stories[1].text == "Header world"


def test_dry_run_opens_read_only_and_never_saves():
    app = FakeWordApp({'a.docx': ["one two one"]})
    with make_session(app) as session:
        result = session.replace_in_document("a.docx", [{'find': 'one', 'replace': '1'}], dry_run=True)

    doc = app.documents['a.docx']
    assert result == {'replacements': 2, 'matches': {'one': 2}, 'changed': False}
    assert app.open_calls[0][1]['ReadOnly'] is True
    assert doc.stories[0].text == "one two one"
    assert doc.saved == 0
    assert doc.closed


def test_no_match_is_not_saved():
    app = FakeWordApp({'a.docx': ["nothing"]})
    with make_session(app) as session:
        result = session.replace_in_document("a.docx", [{'find': 'zzz', 'replace': 'y'}])
    assert result == {'replacements': 0, 'matches': {'zzz': 0}, 'changed': False}
    assert app.documents['a.docx'].saved == 0


def test_whole_word_and_match_case():
    app = FakeWordApp({'a.docx': ["Cat catalog cat"]})
    with make_session(app) as session:
        result = session.replace_in_document("a.docx", [{'find': 'cat', 'replace': 'dog'}],
                                             match_case=True, whole_word=True)
    assert result['replacements'] == 1
    assert app.documents['a.docx'].stories[0].text == "Cat catalog dog"


def test_caret_is_literal():
    app = FakeWordApp({'a.docx': ["x ^ 2"]})
    with make_session(app) as session:
        result = session.replace_in_document("a.docx", [{'find': '^', 'replace': '^^'}])
    assert result['replacements'] == 1
    assert app.documents['a.docx'].stories[0].text == "x ^^ 2"
    assert escape_find_text("a^p") == "a^^p"


def test_read_only_document_is_refused():
    app = FakeWordApp({'locked.docx': ["world"]})
    app.read_only.add('locked.docx')
    with make_session(app) as session:
        try:
            session.replace_in_document("locked.docx", [{'find': 'world', 'replace': 'x'}])
        except DocumentError as e:
            assert "read-only" in str(e)
        else:
            raise AssertionError("DocumentError not raised")
    assert app.documents['locked.docx'].closed
    assert app.documents['locked.docx'].stories[0].text == "world"


def test_open_errors_are_classified():
    app = FakeWordApp({'secret.docx': ["x"], 'gone.docx': ["x"]})
    app.open_errors = {'secret.docx': [password_error()], 'gone.docx': [crash_error()]}
    session = make_session(app)
    session.start()

    try:
        session.replace_in_document("secret.docx", [{'find': 'x', 'replace': 'y'}])
    except WordCrashedError:
        raise AssertionError("password error treated as a crash")
    except DocumentError as e:
        assert "The password is incorrect. (hresult=0x800A1520)" in str(e)
    else:
        raise AssertionError("DocumentError not raised")

    try:
        session.replace_in_document("gone.docx", [{'find': 'x', 'replace': 'y'}])
    except WordCrashedError as e:
        assert e.file_path == os.path.abspath("gone.docx")
    else:
        raise AssertionError("WordCrashedError not raised")


def test_busy_word_is_retried():
    app = FakeWordApp({'a.docx': ["world"]})
    app.open_errors = {'a.docx': [busy_error(), busy_error()]}
    with make_session(app, busy_retry_count=2) as session:
        result = session.replace_in_document("a.docx", [{'find': 'world', 'replace': 'Earth'}])
    assert result['replacements'] == 1
    assert len(app.open_calls) == 3


def test_busy_word_gives_up():
    app = FakeWordApp({'a.docx': ["world"]})
    app.open_errors = {'a.docx': [busy_error(), busy_error()]}
    with make_session(app, busy_retry_count=1) as session:
        try:
            session.replace_in_document("a.docx", [{'find': 'world', 'replace': 'Earth'}])
        except DocumentError:
            pass
        else:
            raise AssertionError("DocumentError not raised")
    assert len(app.open_calls) == 2


def test_crash_while_saving():
    app = FakeWordApp({'a.docx': ["world"]})
    app.save_errors = {'a.docx': crash_error()}
    with make_session(app) as session:
        try:
            session.replace_in_document("a.docx", [{'find': 'world', 'replace': 'Earth'}])
        except WordCrashedError as e:
            assert "Word crashed" in str(e)
        else:
            raise AssertionError("WordCrashedError not raised")


def test_quit_closes_open_documents():
    app = FakeWordApp({'a.docx': ["x"], 'b.docx': ["y"]})
    session = make_session(app)
    session.start()
    session.open_document("a.docx")
    session.open_document("b.docx")
    session.quit()
    assert app.Documents.Count == 0
    assert app.quit_called
    assert session.app is None


def test_restart_starts_a_new_instance():
    apps = []

    def dispatch(prog_id):
        assert prog_id == "Word.Application"
        apps.append(FakeWordApp())
        return apps[-1]

    session = WordSession(dispatch=dispatch)
    session.start()
    session.restart()
    assert session.restarts == 1
    assert len(apps) == 2
    assert apps[0].quit_called
    assert session.app is apps[1]
    session.quit()


def test_dead_word_is_not_running():
    app = FakeWordApp()
    session = make_session(app)
    session.start()
    app.version_error = crash_error()
    assert not session.is_running()
    app.version_error = busy_error()
    assert session.is_running()


def test_start_failure():
    def dispatch(prog_id):
        raise FakeComError(CO_E_SERVER_EXEC_FAILURE, "Server execution failed")

    try:
        WordSession(dispatch=dispatch).start()
    except WordAutomationError as e:
        assert "Could not start Microsoft Word" in str(e)
        assert "0x80080005" in str(e)
    else:
        raise AssertionError("WordAutomationError not raised")


def test_not_started():
    try:
        make_session(FakeWordApp()).replace_in_document("a.docx", [])
    except WordAutomationError as e:
        assert "not started" in str(e)
    else:
        raise AssertionError("WordAutomationError not raised")


def test_error_classification():
    assert is_crash_error(crash_error())
    assert is_crash_error(WordCrashedError("gone"))
    # Crash reported inside the excepinfo of a generic dispatch error
    wrapped = FakeComError(DISP_E_EXCEPTION, "Exception occurred.",
                           (0, "Microsoft Word", "Call failed", None, 0, RPC_S_CALL_FAILED))
    assert is_crash_error(wrapped)
    assert is_crash_error(Exception("The RPC server is unavailable."))
    assert not is_crash_error(password_error())
    assert not is_crash_error(ValueError("bad value"))

    assert is_busy_error(busy_error())
    assert not is_busy_error(crash_error())

    assert describe_com_error(crash_error()) == "The RPC server is unavailable. (hresult=0x800706BA)"
    assert describe_com_error(ValueError("plain")) == "plain"


def main():
    """Run all tests"""
    print("\n" + "=" * 80)
    print("WORD AUTOMATION TEST SUITE")
    print("=" * 80)

    tests = [value for name, value in sorted(globals().items()) if name.startswith("test_")]
    for test in tests:
        test()
        print(f"  ok  {test.__name__}")

    print("\n" + "=" * 80)
    print("ALL TESTS COMPLETED")
    print("=" * 80)


if __name__ == "__main__":
    main()
