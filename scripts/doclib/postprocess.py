"""
Rewrite generated HTML before it is handed to the PDF renderer.

The analytics snippet blocks wkhtmltopdf, so everything from its marker
comment up to the closing script tag is cut out of the served copies.
"""

import os
import re

from doclib.resolve import find_files


def strip_marked_script(html, marker):
    """Remove every span from marker up to the next </script>, inclusive."""
    pattern = re.compile(re.escape(marker) + r".*?</script>", re.IGNORECASE | re.DOTALL)
    return pattern.sub("", html)


def strip_analytics(directory, marker, verbose=False):
    """
    Strip the marked script from each top-level *.html file, in place.

    Returns the list of files that changed.
    """
    changed = []
    for path in find_files(directory, "*.html", recursive=False):
        with open(path, "r", encoding="utf-8", newline="") as f:
            content = f.read()
        new_content = strip_marked_script(content, marker)
        if new_content != content:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(new_content)
            changed.append(path)
            if verbose:
                print(f"  Stripped analytics from {os.path.basename(path)}")
    return changed
