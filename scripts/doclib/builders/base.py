"""
Base builder class for all output formats.

Subclasses implement `build()` and set `format_name` / `format_key`.
Shared logic (document selection, pandoc invocation, logging) lives here.
"""

import os
from abc import ABC, abstractmethod

from doclib.resolve import file_base_name, find_files


class BaseBuilder(ABC):
    """
    Abstract base for format builders.

    Subclasses must define:
        format_name:  str   — human-readable name ("HTML", "PDF", etc.)
        format_key:   str   — key in the conversions table ("html", "ebook", "pdf")
        build():      method — the actual build logic
    """

    format_name = None  # Override in subclass
    format_key = None   # Override in subclass

    def __init__(self, ctx, runner):
        self.ctx = ctx
        self.config = ctx.config
        self.runner = runner

    # ── Logging ────────────────────────────────────────────

    def log(self, msg):
        self.ctx.log(msg)

    def header(self):
        print(f"\n{'─' * 60}")
        print(f"  Building {self.format_name}")
        print(f"{'─' * 60}")

    # ── Document selection ─────────────────────────────────

    def documents(self, directory, pattern):
        """
        Yield (path, base, doc_type) for each file in directory whose
        document type requests this builder's format.

        Types missing from the conversions table are skipped.
        """
        for path in find_files(directory, pattern, recursive=False):
            base = file_base_name(path)
            doc_type = self.ctx.doc_type(base)
            if doc_type is None:
                self.log(f"  Skipping {os.path.basename(path)}: unknown document")
                continue
            if doc_type not in self.config.conversions:
                self.log(f"  Skipping {base}: type '{doc_type}' has no conversions")
                continue
            if not self.ctx.wants(base, self.format_key):
                continue
            yield path, base, doc_type

    def output_path(self, base, extension):
        return os.path.join(self.config.output_doc_dir, f"{base}{extension}")

    def template_path(self, doc_type, extension):
        return os.path.join(self.config.staging_templates_dir, f"{doc_type}{extension}")

    # ── Tool invocation ────────────────────────────────────

    def pandoc_cmd(self, write, template, output, source, extra_args=None):
        """Pandoc arguments shared by the HTML and e-book conversions."""
        cmd = [
            self.config.tool("pandoc"),
            f"--write={write}",
            f"--template={template}",
            "--toc",
            "--toc-depth=4",
            "--section-divs",
        ]
        if extra_args:
            cmd.extend(extra_args)
        cmd.extend([f"--output={output}", source])
        return cmd

    def exec_cmd(self, cmd, label="Command", cwd=None):
        """Run a command through the runner; record and report failures."""
        result = self.runner.run(cmd, cwd=cwd, label=label)
        if not result.ok:
            self.ctx.record_failure(result)
        return result.ok

    def produced(self, path):
        self.ctx.record_output(self.format_key, path)
        print(f"  ✓ {path}")

    # ── Abstract interface ─────────────────────────────────

    @abstractmethod
    def build(self):
        """
        Execute the build. Returns True if every conversion succeeded.
        """
        ...
