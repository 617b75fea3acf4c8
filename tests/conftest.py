"""Shared fixtures: a sample docs project and a fake tool runner."""

import os
import sys

import pytest

# Make doclib importable from scripts/ without installing the package
SCRIPTS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, "scripts"))
if SCRIPTS_DIR not in sys.path:
    sys.path.insert(0, SCRIPTS_DIR)

from doclib.config import DocsConfig  # noqa: E402
from doclib.context import BuildContext  # noqa: E402
from doclib.runner import CommandResult  # noqa: E402


class FakeRunner:
    """
    Records commands instead of running them, and writes the file each
    tool would have produced so later stages have something to work on.
    """

    def __init__(self, fail=None, missing=()):
        self.calls = []
        self.fail = fail or (lambda cmd: False)
        self.missing = set(missing)

    def run(self, cmd, cwd=None, label="Command"):
        cmd = [str(c) for c in cmd]
        self.calls.append((cmd, cwd))
        if self.fail(cmd):
            return CommandResult(cmd, 1, stderr="boom", label=label)

        output = _output_of(cmd)
        if output:
            os.makedirs(os.path.dirname(output), exist_ok=True)
            with open(output, "w", encoding="utf-8") as f:
                f.write(_content_for(cmd))
        return CommandResult(cmd, 0, label=label)

    def available(self, name):
        return name not in self.missing

    def commands(self, tool):
        return [cmd for cmd, cwd in self.calls if os.path.basename(cmd[0]) == tool]


def _output_of(cmd):
    tool = os.path.basename(cmd[0])
    if tool == "pandoc":
        for arg in cmd:
            if arg.startswith("--output="):
                return arg[len("--output="):]
    if tool in ("ebook-convert", "lessc", "wkhtmltopdf"):
        return cmd[-1]
    return None


def _content_for(cmd):
    tool = os.path.basename(cmd[0])
    if tool == "pandoc" and "--write=html5" in cmd:
        return (
            "<html><head><title>doc</title>\n"
            "<!-- Google Analytics script -->\n"
            "<script>ga('send');</script>\n"
            "</head><body>body</body></html>\n"
        )
    if tool == "lessc":
        return "body { color: #333; }\n"
    return f"{tool} output\n"


def write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


@pytest.fixture
def project(tmp_path):
    """A docs project with one 'manual' and one 'articles' document."""
    root = tmp_path / "project"
    write(str(root / "docs" / "manual" / "manual.md"), "# Manual\n\n![logo](images/logo.png)\n")
    write(str(root / "docs" / "manual" / "images" / "logo.png"), "PNG")
    write(str(root / "docs" / "articles" / "articles.md"), "# Articles\n")
    write(str(root / "docs" / "articles" / "images" / "diagram.png"), "PNG2")
    write(str(root / "scripts" / "toc.js"), "console.log('toc');\n")
    write(str(root / "styles" / "base.css"), "p { margin: 0; }\n")
    write(str(root / "styles" / "theme.less"), "@c: #333; body { color: @c; }\n")
    for doc_type in ("manual", "articles"):
        write(
            str(root / "templates" / f"{doc_type}.html"),
            "<footer>@projectVersion@ / @documentVersion@ / @other@</footer>\n$body$\n",
        )
        write(str(root / "templates" / f"{doc_type}.epub"), "$body$ @projectVersion@\n")
    write(str(root / "redirections" / "index.html"), "<meta http-equiv='refresh' content='0; url=doc/manual.html'>\n")
    write(
        str(root / "docs.yaml"),
        "project_version: '2.1.0'\n"
        "document_date: 2014-07-02\n"
        "archive_name: 'documentation-{version}'\n"
        "conversions:\n"
        "  articles: [html, pdf]\n"
        "  manual: [html, ebook, pdf]\n",
    )
    return root


@pytest.fixture
def config(project):
    return DocsConfig.load(str(project / "docs.yaml"))


@pytest.fixture
def ctx(config):
    return BuildContext(config)


@pytest.fixture
def runner():
    return FakeRunner()
