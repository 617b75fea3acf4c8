"""
E-book builder.

Pipeline: pandoc → epub (run from the staging dir so relative image paths
resolve) → ebook-convert → mobi.
"""

from doclib.builders.base import BaseBuilder
from doclib.runner import CommandResult


class EbookBuilder(BaseBuilder):
    format_name = "E-book"
    format_key = "ebook"

    def build(self):
        self.header()
        ok = True

        for doc_file, base, doc_type in self.documents(self.config.staging_dir, "*.md"):
            print(f"  Generating E-books for {base}...")
            epub = self.output_path(base, ".epub")
            mobi = self.output_path(base, ".mobi")

            cmd = self.pandoc_cmd(
                "epub",
                self.template_path(doc_type, ".epub"),
                epub,
                doc_file,
                extra_args=["--smart"],
            )
            if not self.exec_cmd(cmd, f"EPUB generation ({base})", cwd=self.config.staging_dir):
                print(f"  ✗ Skipping MOBI for {base}: no EPUB to convert")
                self.ctx.record_failure(CommandResult(
                    [self.config.tool("ebook_convert"), epub, mobi], -1,
                    stderr="skipped: EPUB generation failed",
                    label=f"MOBI conversion ({base})",
                ))
                ok = False
                continue
            self.produced(epub)

            cmd = [self.config.tool("ebook_convert"), epub, mobi]
            if self.exec_cmd(cmd, f"MOBI conversion ({base})"):
                self.produced(mobi)
            else:
                ok = False

        return ok
