"""
Tests for the command line entry point
Runs replace_cli.main() with the python-docx engine on real files
"""

import json
import os
import signal
import tempfile
from unittest import mock

from docx import Document

from docx_engine import DocxEngine
from replace_cli import EXIT_DOCUMENTS_FAILED, EXIT_INTERRUPTED, EXIT_INVALID, EXIT_OK, build_parser, main


def prepare(folder):
    """Create a docs folder with two documents and a config that keeps logs in the temp folder"""
    docs = os.path.join(folder, "docs")
    os.makedirs(docs)
    for name, text in (("a.docx", "Invoice 2024 for ACME"), ("b.docx", "Nothing to see")):
        doc = Document()
        doc.add_paragraph(text)
        doc.save(os.path.join(docs, name))

    config = os.path.join(folder, "test_config.py")
    with open(config, 'w', encoding='utf-8') as f:
        f.write(f"SETTINGS = {{'logs_dir': {os.path.join(folder, 'logs')!r}}}\n")
    return docs, config


def first_paragraph(path):
    return Document(path).paragraphs[0].text


def test_replace_and_report():
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)
        report = os.path.join(folder, "report.txt")

        code = main([docs, "--find", "2024", "--replace", "2025", "--engine", "docx",
                     "--config", config, "--report", report])

        assert code == EXIT_OK
        assert first_paragraph(os.path.join(docs, "a.docx")) == "Invoice 2025 for ACME"
        with open(report, 'r', encoding='utf-8') as f:
            content = f.read()
        assert "Changed: 1" in content
        assert "Unchanged: 1" in content
        assert os.listdir(os.path.join(folder, "logs"))


def test_pairs_file_and_dry_run():
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)
        pairs = os.path.join(folder, "pairs.json")
        with open(pairs, 'w', encoding='utf-8') as f:
            json.dump({"pairs": [{"find": "acme", "replace": "Globex"}, {"find": "Invoice", "replace": "Bill"}]}, f)

        code = main([docs, "--pairs", pairs, "--dry-run", "--engine", "docx", "--config", config])

        assert code == EXIT_OK
        assert first_paragraph(os.path.join(docs, "a.docx")) == "Invoice 2024 for ACME"

        code = main([docs, "--pairs", pairs, "--engine", "docx", "--config", config])
        assert code == EXIT_OK
        assert first_paragraph(os.path.join(docs, "a.docx")) == "Bill 2024 for Globex"


def test_failed_document_exit_code():
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)
        with open(os.path.join(docs, "broken.docx"), 'wb') as f:
            f.write(b"not a document")

        code = main([docs, "--find", "2024", "--replace", "2025", "--engine", "docx", "--config", config])

        assert code == EXIT_DOCUMENTS_FAILED
        # The good document is still processed
        assert first_paragraph(os.path.join(docs, "a.docx")) == "Invoice 2025 for ACME"


def test_invalid_arguments():
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)

        assert main([docs, "--find", "2024", "--config", config]) == EXIT_INVALID
        assert main([docs, "--replace", "2025", "--config", config]) == EXIT_INVALID
        assert main([docs, "--config", config]) == EXIT_INVALID
        assert main([docs, "--find", "x", "--replace", "y", "--config",
                     os.path.join(folder, "missing_config.py")]) == EXIT_INVALID
        assert main([os.path.join(folder, "missing"), "--find", "x", "--replace", "y",
                     "--engine", "docx", "--config", config]) == EXIT_INVALID


def read_report(path):
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def test_ctrl_c_stops_between_documents_and_reports():
    """SIGINT during a document lets it finish, skips the rest and still writes the report"""
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)
        report = os.path.join(folder, "report.txt")
        handler_before = signal.getsignal(signal.SIGINT)
        replace_original = DocxEngine.replace_in_document

        def replace_then_press_ctrl_c(self, file_path, pairs, **options):
            outcome = replace_original(self, file_path, pairs, **options)
            signal.raise_signal(signal.SIGINT)
            return outcome

        with mock.patch.object(DocxEngine, 'replace_in_document', replace_then_press_ctrl_c):
            code = main([docs, "--find", "2024", "--replace", "2025", "--engine", "docx",
                         "--config", config, "--report", report])

        assert code == EXIT_INTERRUPTED
        assert first_paragraph(os.path.join(docs, "a.docx")) == "Invoice 2025 for ACME"
        content = read_report(report)
        assert "Run was cancelled" in content
        assert "Changed: 1" in content
        assert "NOT PROCESSED\n" + "-" * 80 + "\n  b.docx" in content
        assert signal.getsignal(signal.SIGINT) == handler_before


def test_interrupt_inside_a_document_still_reports():
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)
        report = os.path.join(folder, "report.txt")
        replace_original = DocxEngine.replace_in_document

        def interrupt_on_second(self, file_path, pairs, **options):
            if os.path.basename(file_path) == "b.docx":
                raise KeyboardInterrupt
            return replace_original(self, file_path, pairs, **options)

        with mock.patch.object(DocxEngine, 'replace_in_document', interrupt_on_second):
            code = main([docs, "--find", "2024", "--replace", "2025", "--engine", "docx",
                         "--config", config, "--report", report])

        assert code == EXIT_INTERRUPTED
        assert os.path.exists(report)
        content = read_report(report)
        assert "Run was cancelled" in content
        assert "a.docx" in content
        assert first_paragraph(os.path.join(docs, "a.docx")) == "Invoice 2025 for ACME"


def test_invalid_request_leaves_no_run_logs():
    with tempfile.TemporaryDirectory() as folder:
        docs, config = prepare(folder)
        code = main([os.path.join(folder, "missing"), "--find", "x", "--replace", "y",
                     "--engine", "docx", "--config", config])
        assert code == EXIT_INVALID
        assert not os.path.exists(os.path.join(folder, "logs"))

        code = main([docs, "--find", "", "--replace", "y", "--engine", "docx", "--config", config])
        assert code == EXIT_INVALID
        assert not os.path.exists(os.path.join(folder, "logs"))


def test_parser_leaves_options_unset():
    """Options not given on the command line fall back to the config"""
    args = build_parser().parse_args(["docs", "--find", "a", "--replace", ""])
    assert args.match_case is None
    assert args.whole_word is None
    assert args.recursive is None
    assert args.include_headers is None
    assert args.engine is None
    assert args.replace == ""

    args = build_parser().parse_args(["docs", "--no-recursive", "--no-headers", "--ext", ".docx", "--ext", ".doc"])
    assert args.recursive is False
    assert args.include_headers is False
    assert args.extensions == [".docx", ".doc"]


def main_runner():
    """Run all tests"""
    print("\n" + "=" * 80)
    print("COMMAND LINE TEST SUITE")
    print("=" * 80)

    tests = [value for name, value in sorted(globals().items()) if name.startswith("test_")]
    for test in tests:
        test()
        print(f"  ok  {test.__name__}")

    print("\n" + "=" * 80)
    print("ALL TESTS COMPLETED")
    print("=" * 80)


if __name__ == "__main__":
    main_runner()
