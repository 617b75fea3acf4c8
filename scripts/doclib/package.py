"""
Bundle the finished site into a single zip archive.
"""

import os
import zipfile


def package_output(output_dir, dist_dir, base_name):
    """
    Zip everything under output_dir into <dist_dir>/<base_name>.zip.

    Entry names are relative to output_dir. Returns the archive path.
    """
    if not os.path.isdir(output_dir):
        raise FileNotFoundError(f"Output directory not found: {output_dir}")

    os.makedirs(dist_dir, exist_ok=True)
    archive = os.path.join(dist_dir, f"{base_name}.zip")
    if os.path.exists(archive):
        os.remove(archive)

    with zipfile.ZipFile(archive, "w", zipfile.ZIP_DEFLATED) as zout:
        for root, dirs, files in os.walk(output_dir):
            dirs.sort()
            for fname in sorted(files):
                full_path = os.path.join(root, fname)
                arc_name = os.path.relpath(full_path, output_dir)
                zout.write(full_path, arc_name)

    return archive


def list_archive(archive):
    """Member names of a zip archive, with '/' separators."""
    with zipfile.ZipFile(archive) as zin:
        return zin.namelist()
