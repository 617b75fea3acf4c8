#!/usr/bin/env python3
"""
Build script for the documentation: converts the Markdown docs into HTML,
e-book and PDF formats, then zips the site.

Usage:
    python build.py                  Full build and package
    python build.py html ebook       Selected formats
    python build.py types            List document types
    python build.py --help           All commands and options

Requires: pandoc, ebook-convert, lessc, wkhtmltopdf, PyYAML
"""

import os
import sys

# Ensure doclib is importable from the scripts/ directory
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from doclib.cli import main


if __name__ == "__main__":
    main()
