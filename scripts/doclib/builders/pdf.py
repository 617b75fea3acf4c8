"""
PDF builder.

Pipeline:
    1. Copy the generated HTML into a directory the local server hosts
    2. Strip the analytics script from the copies (it blocks wkhtmltopdf)
    3. wkhtmltopdf reads each page over http:// and saves it as PDF
    4. The server is stopped whether or not the conversions succeeded
"""

import os

from doclib.builders.base import BaseBuilder
from doclib.postprocess import strip_analytics
from doclib.runner import CommandResult
from doclib.server import serve_directory
from doclib.staging import copy_tree


# Page layout passed to wkhtmltopdf ahead of the URL and output path
WKHTMLTOPDF_ARGS = [
    "--print-media-type",
    "--dpi", "150",
    "--margin-bottom", "15",
    "--footer-spacing", "5",
    "--footer-font-size", "8",
    "--footer-font-name", "Open Sans",
    "--footer-right", "Page [page] of [topage]",
    "--header-font-name", "Open Sans",
]


class PdfBuilder(BaseBuilder):
    format_name = "PDF"
    format_key = "pdf"

    @property
    def webapp_dir(self):
        return self.config.webapp_dir

    def build(self):
        self.header()

        tool = self.config.tool("wkhtmltopdf")
        if not self.runner.available(tool):
            print(f"  ✗ {tool} not found on PATH")
            print("  Install wkhtmltopdf: https://wkhtmltopdf.org/downloads.html")
            self.ctx.record_failure(CommandResult([tool], 127, stderr=f"{tool}: command not found", label="PDF generation"))
            return False

        # ── Host a copy of the HTML docs ──────────────────
        if not os.path.isdir(self.config.output_doc_dir):
            print(f"  ✗ No HTML output at {self.config.output_doc_dir}, build html first")
            self.ctx.record_failure(CommandResult(
                [tool, self.config.output_doc_dir], -1,
                stderr="no HTML output to render", label="PDF generation",
            ))
            return False
        copy_tree(self.config.output_doc_dir, self.webapp_dir)

        changed = strip_analytics(self.webapp_dir, self.config.analytics_marker, verbose=self.ctx.verbose)
        self.log(f"  Stripped analytics from {len(changed)} file(s)")

        server_cfg = self.config.server
        ok = True
        with serve_directory(
            self.webapp_dir,
            host=server_cfg["host"],
            port=server_cfg["port"],
            stop_port=server_cfg["stop_port"],
            stop_key=server_cfg["stop_key"],
            verbose=self.ctx.verbose,
        ) as server:
            for doc_file, base, doc_type in self.documents(self.webapp_dir, "*.html"):
                print(f"  Generating PDF doc for {base}...")
                output = self.output_path(base, ".pdf")
                cmd = [tool] + WKHTMLTOPDF_ARGS + [
                    server.url_for(os.path.basename(doc_file)),
                    output,
                ]
                if self.exec_cmd(cmd, f"PDF generation ({base})"):
                    self.produced(output)
                else:
                    ok = False

        return ok
