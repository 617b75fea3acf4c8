"""
HTML builder.

Pipeline: pandoc → html5 per document using the type's template, then
the shared images/scripts/styles are copied next to the output.
"""

import os

from doclib.builders.base import BaseBuilder
from doclib.staging import copy_tree


# Staged resource directories the HTML pages link to
RESOURCE_DIRS = ["images", "scripts", "styles"]


class HtmlBuilder(BaseBuilder):
    format_name = "HTML"
    format_key = "html"

    def build(self):
        self.header()
        ok = True

        for doc_file, base, doc_type in self.documents(self.config.staging_dir, "*.md"):
            print(f"  Generating HTML doc for {base}...")
            output = self.output_path(base, ".html")
            cmd = self.pandoc_cmd(
                "html5",
                self.template_path(doc_type, ".html"),
                output,
                doc_file,
                extra_args=["--no-highlight", "--smart"],
            )
            if self.exec_cmd(cmd, f"HTML generation ({base})"):
                self.produced(output)
            else:
                ok = False

        # Copy over resources needed for the HTML docs
        for name in RESOURCE_DIRS:
            src = os.path.join(self.config.staging_dir, name)
            if os.path.isdir(src):
                copy_tree(src, os.path.join(self.config.output_doc_dir, name))
                self.log(f"  Copied {name}/")

        return ok
