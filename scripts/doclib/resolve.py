"""
File discovery helpers shared by the staging and generation stages.
"""

import fnmatch
import os
import re


def natural_sort_key(s):
    """Sort strings with embedded numbers naturally (2.md before 10.md)."""
    return [
        int(text) if text.isdigit() else text.lower()
        for text in re.split(r"(\d+)", s)
    ]


def file_base_name(path):
    """Just the name of the file minus the path and extension."""
    return re.sub(r"\.[^.]+$", "", os.path.basename(path))


def doc_type_for(path):
    """A document's type is the name of the directory it sits in."""
    return os.path.basename(os.path.dirname(os.path.abspath(path)))


def find_files(root, pattern, recursive=True, exclude=None):
    """
    Files under root whose name matches pattern, in a stable order.

    With recursive=False only the top level of root is searched.
    Returns [] if root does not exist.
    """
    if not os.path.isdir(root):
        return []

    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in filenames:
            if not fnmatch.fnmatch(name, pattern):
                continue
            if exclude and fnmatch.fnmatch(name, exclude):
                continue
            found.append(os.path.join(dirpath, name))
        if not recursive:
            break

    found.sort(key=lambda p: natural_sort_key(os.path.relpath(p, root)))
    return found
