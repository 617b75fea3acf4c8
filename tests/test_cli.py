"""Tests for the command line."""

import os

import pytest

from conftest import FakeRunner, write
from doclib import cli


@pytest.fixture
def fake_runner(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr("doclib.cli.CommandRunner", lambda verbose=False: runner)
    return runner


def run(args):
    with pytest.raises(SystemExit) as exc:
        cli.run(args)
        raise SystemExit(0)
    return exc.value.code


class TestBuild:
    def test_full_build(self, project, fake_runner, capsys):
        code = run(["build", "--config", str(project / "docs.yaml")])

        assert code == 0
        assert os.path.isfile(str(project / "build" / "distributions" / "documentation-2.1.0.zip"))
        assert "Done." in capsys.readouterr().out

    def test_bare_task_names(self, project, fake_runner):
        code = run(["html", "--config", str(project / "docs.yaml")])

        assert code == 0
        assert fake_runner.commands("wkhtmltopdf") == []
        assert os.path.isfile(str(project / "build" / "site" / "doc" / "manual.html"))

    def test_overrides(self, project, fake_runner):
        run([
            "package", "--config", str(project / "docs.yaml"),
            "--project-version", "9.9", "--date", "2020-01-31",
            "--build-dir", "out", "--archive-name", "docs-{version}",
        ])

        assert os.path.isfile(str(project / "out" / "distributions" / "docs-9.9.zip"))
        with open(str(project / "out" / "tmp" / "templates" / "manual.html"), encoding="utf-8") as f:
            assert "9.9 / 20200131 - 31 January 2020" in f.read()

    def test_failures_exit_nonzero(self, project, monkeypatch, capsys):
        runner = FakeRunner(fail=lambda cmd: cmd[0] == "wkhtmltopdf")
        monkeypatch.setattr("doclib.cli.CommandRunner", lambda verbose=False: runner)

        code = run(["--config", str(project / "docs.yaml")])

        assert code == 1
        out = capsys.readouterr().out
        assert "Done with errors: 2 conversion(s) failed" in out
        assert os.path.isfile(str(project / "build" / "distributions" / "documentation-2.1.0.zip"))

    def test_unknown_task(self, project, capsys):
        assert run(["build", "docx", "--config", str(project / "docs.yaml")]) == 1
        assert "Unknown task 'docx'" in capsys.readouterr().out

    def test_missing_config(self, tmp_path, capsys):
        assert run(["build", "--config", str(tmp_path / "docs.yaml")]) == 1
        assert "Error: No docs.yaml" in capsys.readouterr().out

    def test_staging_error(self, project, fake_runner, capsys):
        os.rename(str(project / "docs"), str(project / "docs.bak"))
        assert run(["build", "--config", str(project / "docs.yaml")]) == 1
        assert "Error: Docs directory not found" in capsys.readouterr().out


class TestOtherCommands:
    def test_types(self, project, capsys):
        write(str(project / "docs" / "drafts" / "draft.md"), "# Draft\n")

        run(["types", "--config", str(project / "docs.yaml")])

        out = capsys.readouterr().out
        assert "manual" in out and "ebook, html, pdf" in out
        assert "drafts" in out and "skipped" in out

    def test_clean(self, project, fake_runner):
        run(["stage", "--config", str(project / "docs.yaml")])
        assert os.path.isdir(str(project / "build"))

        run(["clean", "--config", str(project / "docs.yaml")])

        assert not os.path.exists(str(project / "build"))

    def test_stop_requires_port_and_key(self, tmp_path, capsys):
        assert run(["stop", "--config", str(tmp_path / "docs.yaml")]) == 1
        assert "--stop-port and --stop-key are required" in capsys.readouterr().out

    def test_stop_sends_command(self, monkeypatch, capsys):
        sent = []

        def fake_send_stop(port, key, host):
            sent.append((port, key, host))
            return "Stopped"

        monkeypatch.setattr("doclib.cli.send_stop", fake_send_stop)

        run(["stop", "--stop-port", "8079", "--stop-key", "secret", "--host", "127.0.0.1"])

        assert sent == [(8079, "secret", "127.0.0.1")]
        assert "Server stopped" in capsys.readouterr().out

    def test_main_writes_traceback_on_unexpected_error(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        def explode(argv=None):
            raise RuntimeError("kaboom")

        monkeypatch.setattr("doclib.cli.run", explode)

        with pytest.raises(SystemExit) as exc:
            cli.main([])

        assert exc.value.code == 1
        assert "Unexpected error: kaboom" in capsys.readouterr().out
        assert (tmp_path / "build_error.log").exists()


class TestArgumentOrder:
    def test_options_before_command(self, project, capsys):
        run(["-c", str(project / "docs.yaml"), "types"])

        assert "manual" in capsys.readouterr().out

    def test_options_before_bare_task(self, project, fake_runner):
        code = run(["--config", str(project / "docs.yaml"), "html"])

        assert code == 0
        assert fake_runner.commands("wkhtmltopdf") == []
        assert os.path.isfile(str(project / "build" / "site" / "doc" / "manual.html"))

    def test_normalize_argv(self):
        assert cli._normalize_argv([]) == ["build"]
        assert cli._normalize_argv(["html", "pdf"]) == ["build", "html", "pdf"]
        assert cli._normalize_argv(["-c", "x.yaml", "clean"]) == ["clean", "-c", "x.yaml"]
        assert cli._normalize_argv(["-v", "build", "pdf"]) == ["build", "-v", "pdf"]
        assert cli._normalize_argv(["--help"]) == ["--help"]
