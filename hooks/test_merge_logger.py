#!/usr/bin/env python3
"""
Merge Audit Log Test Suite

Run with: python3 hooks/test_merge_logger.py

Tests:
- Protected branch predicate
- Exact record block format
- Append-only behavior (prior content preserved, unprotected no-op)
- Best-effort error reporting
"""
import contextlib
import io
import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

# Add lib to path
lib_path = Path(__file__).parent / 'lib'
sys.path.insert(0, str(lib_path))


class TestRunner:
    """Simple test runner with assertions."""

    __test__ = False

    def __init__(self):
        self.passed = 0
        self.failed = 0
        self.errors = []

    def test(self, name: str, condition: bool, msg: str = ""):
        """Run a single test assertion."""
        if condition:
            print(f"  ✅ {name}")
            self.passed += 1
        else:
            print(f"  ❌ {name}: {msg}")
            self.failed += 1
            self.errors.append(f"{name}: {msg}")

    def summary(self) -> int:
        """Print summary and return exit code."""
        total = self.passed + self.failed
        print()
        print(f"{'='*50}")
        print(f"Results: {self.passed}/{total} tests passed")
        if self.errors:
            print("\nFailures:")
            for err in self.errors:
                print(f"  - {err}")
        return 0 if self.failed == 0 else 1


EXPECTED_BLOCK = (
    "=== MERGE INTO main ===\n"
    "Date: 2024-01-15 10:30:00\n"
    "Commit: abc123\n"
    "Author: Jane <jane@x.com>\n"
    "Message: Add feature\n"
    "----------------------------------------\n"
    "\n"
)


def make_event(branch: str = "main", **overrides):
    from merge_logger import MergeEvent

    fields = {
        "branch": branch,
        "commit": "abc123",
        "timestamp": datetime(2024, 1, 15, 10, 30, 0),
        "author_name": "Jane",
        "author_email": "jane@x.com",
        "message": "Add feature",
    }
    fields.update(overrides)
    return MergeEvent(**fields)


def quiet_logger():
    from logger import JsonLogger
    return JsonLogger(level="debug", handlers=[])


def test_protected_branches(runner: TestRunner):
    """Test the protected branch predicate."""
    print("\n📦 Testing protected branches...")
    from merge_logger import PROTECTED_BRANCHES, is_protected

    runner.test("main protected", is_protected("main"))
    runner.test("master protected", is_protected("master"))
    runner.test("feature branch not protected", not is_protected("feature/x"))
    runner.test("develop not protected", not is_protected("develop"))
    runner.test("Case-sensitive", not is_protected("Main"))
    runner.test("None not protected", not is_protected(None))
    runner.test("Exactly two protected branches", PROTECTED_BRANCHES == {"main", "master"})


def test_format_record(runner: TestRunner):
    """Test the exact block layout."""
    print("\n📦 Testing record format...")
    from merge_logger import MergeRecord, format_record

    record = MergeRecord.from_event(make_event())
    runner.test("Date formatted", record.date == "2024-01-15 10:30:00", f"Got: {record.date}")
    runner.test("Author combined", record.author == "Jane <jane@x.com>", f"Got: {record.author}")
    block = format_record(record)
    runner.test("Block matches exactly", block == EXPECTED_BLOCK, f"Got: {block!r}")
    runner.test("Separator is 40 dashes", "\n" + "-" * 40 + "\n" in block)

    record = MergeRecord.from_event(make_event("master", message="Release: v2 (final)"))
    block = format_record(record)
    runner.test("Branch in header", block.startswith("=== MERGE INTO master ===\n"))
    runner.test("Message kept verbatim", "Message: Release: v2 (final)\n" in block)

    record = MergeRecord.from_event(make_event(message="line1\nline2\n----", author_name="Jane\nX"))
    runner.test("Multi-line message cut to subject", record.message == "line1", f"Got: {record.message!r}")
    runner.test("Multi-line author cut", record.author_name == "Jane", f"Got: {record.author_name!r}")
    block = format_record(record)
    runner.test("Block keeps seven lines", block.count("\n") == 7, f"Got: {block!r}")
    runner.test("Empty message stays empty",
                MergeRecord.from_event(make_event(message="")).message == "")


def test_unprotected_is_noop(runner: TestRunner):
    """Test events on other branches never touch the log."""
    print("\n📦 Testing unprotected branches...")
    from merge_logger import record_if_protected

    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = Path(tmpdir) / "merge.log"

        result = record_if_protected(make_event("feature/x"), log_path)
        runner.test("Returns None", result is None)
        runner.test("Log not created", not log_path.exists())

        log_path.write_bytes(b"existing content\n")
        record_if_protected(make_event("develop"), log_path)
        runner.test("Existing log byte-for-byte unchanged", log_path.read_bytes() == b"existing content\n")


def test_protected_appends(runner: TestRunner):
    """Test protected events append one block after existing content."""
    print("\n📦 Testing protected branch append...")
    from merge_logger import count_records, record_if_protected

    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = Path(tmpdir) / "merge.log"

        record = record_if_protected(make_event(), log_path)
        runner.test("Returns record", record is not None and record.commit == "abc123")
        runner.test("Log created on first merge", log_path.exists())
        runner.test("First block exact", log_path.read_text() == EXPECTED_BLOCK)

        prior = log_path.read_text()
        record_if_protected(make_event(commit="def456", message="Second"), log_path)
        content = log_path.read_text()
        runner.test("Prior block preserved verbatim", content.startswith(prior))
        runner.test("Two blocks present", count_records(log_path) == 2,
                    f"Got: {count_records(log_path)}")
        new_block = content[len(prior):]
        runner.test("New block well-formed",
                    new_block == EXPECTED_BLOCK.replace("abc123", "def456").replace("Add feature", "Second"),
                    f"Got: {new_block!r}")


def test_prior_record_scenario(runner: TestRunner):
    """Test a log holding one prior record gets exactly one more."""
    print("\n📦 Testing prior record scenario...")
    from merge_logger import record_if_protected

    prior = (
        "=== MERGE INTO master ===\n"
        "Date: 2023-12-01 09:00:00\n"
        "Commit: 0000aaa\n"
        "Author: Sam <sam@x.com>\n"
        "Message: Initial release\n"
        "----------------------------------------\n"
        "\n"
    )
    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = Path(tmpdir) / "merge.log"
        log_path.write_text(prior)

        record_if_protected(make_event(), log_path)
        runner.test("Store holds both blocks", log_path.read_text() == prior + EXPECTED_BLOCK)


def test_append_errors(runner: TestRunner):
    """Test unwritable logs raise PolicyIOError."""
    print("\n📦 Testing append errors...")
    from errors import PolicyIOError
    from merge_logger import count_records, record_if_protected

    with tempfile.TemporaryDirectory() as tmpdir:
        missing_parent = Path(tmpdir) / "no" / "such" / "merge.log"
        try:
            record_if_protected(make_event(), missing_parent)
            runner.test("Missing parent raises", False, "No exception")
        except PolicyIOError as e:
            runner.test("Missing parent raises", True)
            runner.test("Error names the log", e.path == str(missing_parent), f"Got: {e.path}")

        a_dir = Path(tmpdir) / "merge.log"
        a_dir.mkdir()
        try:
            record_if_protected(make_event(), a_dir)
            runner.test("Directory as log raises", False, "No exception")
        except PolicyIOError:
            runner.test("Directory as log raises", True)

        runner.test("Missing log counts zero", count_records(Path(tmpdir) / "absent.log") == 0)


def test_run_merge_log_output(runner: TestRunner):
    """Test the hook action's confirmation and best-effort handling."""
    print("\n📦 Testing merge log action...")
    import colors
    from hook_actions import run_merge_log

    colors._color_enabled = False

    with tempfile.TemporaryDirectory() as tmpdir:
        log_path = Path(tmpdir) / "merge.log"

        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = run_merge_log(make_event("feature/x"), log_path, quiet_logger())
        runner.test("Unprotected exits 0", code == 0)
        runner.test("Unprotected prints nothing", out.getvalue() == "", f"Got: {out.getvalue()!r}")

        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = run_merge_log(make_event(), log_path, quiet_logger())
        runner.test("Protected exits 0", code == 0)
        runner.test("Confirmation printed",
                    out.getvalue() == "📝 Merge into main logged to merge.log\n",
                    f"Got: {out.getvalue()!r}")

        bad_path = Path(tmpdir) / "missing" / "merge.log"
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = run_merge_log(make_event(), bad_path, quiet_logger())
        runner.test("Write failure still exits 0", code == 0)
        runner.test("Write failure reported", "Could not write merge log" in err.getvalue(),
                    f"Got: {err.getvalue()!r}")
        runner.test("No confirmation on failure", out.getvalue() == "")


def main():
    runner = TestRunner()

    test_protected_branches(runner)
    test_format_record(runner)
    test_unprotected_is_noop(runner)
    test_protected_appends(runner)
    test_prior_record_scenario(runner)
    test_append_errors(runner)
    test_run_merge_log_output(runner)

    return runner.summary()


if __name__ == "__main__":
    os.environ.setdefault("NO_COLOR", "1")
    sys.exit(main())
