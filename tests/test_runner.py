"""Tests for runner and context modules."""

import sys

from doclib.context import BuildContext
from doclib.runner import CommandResult, CommandRunner


class TestCommandRunner:
    def test_success_captures_output(self):
        result = CommandRunner().run([sys.executable, "-c", "print('hello')"])

        assert result.ok
        assert result.stdout.strip() == "hello"

    def test_failure_returns_result_and_prints_stderr(self, capsys):
        cmd = [sys.executable, "-c", "import sys; sys.stderr.write('bad input\\n'); sys.exit(3)"]

        result = CommandRunner().run(cmd, label="Conversion")

        assert not result.ok
        assert result.returncode == 3
        out = capsys.readouterr().out
        assert "✗ Conversion failed (exit 3)" in out
        assert "bad input" in out

    def test_missing_executable(self, capsys):
        result = CommandRunner().run(["definitely-not-a-real-tool-xyz", "in", "out"])

        assert result.returncode == 127
        assert "not found" in capsys.readouterr().out

    def test_runs_in_cwd(self, tmp_path):
        result = CommandRunner().run([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=str(tmp_path))
        assert result.stdout.strip() == str(tmp_path.resolve())

    def test_available(self):
        runner = CommandRunner()
        assert not runner.available("definitely-not-a-real-tool-xyz")

    def test_result_stringifies_command(self, tmp_path):
        result = CommandResult(["tool", tmp_path / "a.md"], 0)
        assert result.cmd == ["tool", str(tmp_path / "a.md")]


class TestBuildContext:
    def test_wants_requested_formats_only(self, config):
        ctx = BuildContext(config)
        ctx.register_doc("manual", "manual")
        ctx.register_doc("articles", "articles")

        assert ctx.wants("manual", "ebook")
        assert ctx.wants("articles", "pdf")
        assert not ctx.wants("articles", "ebook")

    def test_unknown_documents_and_types(self, config):
        ctx = BuildContext(config)
        ctx.register_doc("draft", "drafts")

        assert not ctx.wants("draft", "html")
        assert not ctx.wants("nobody", "html")
        assert ctx.doc_type("nobody") is None

    def test_records_results(self, config):
        ctx = BuildContext(config)
        assert ctx.ok

        ctx.record_output("html", "/out/manual.html")
        ctx.record_failure(CommandResult(["pandoc"], 1))

        assert ctx.outputs == {"html": ["/out/manual.html"]}
        assert not ctx.ok
