"""
Resource staging.

Flatten the directory structure of the docs and resources, putting the
markdown files at the head of a directory and all resources in
subdirectories, needed for doc types where external resource paths are
always relative to the markdown file.
"""

import os
import re
import shutil

from doclib.resolve import doc_type_for, file_base_name, find_files


# Ant ReplaceTokens syntax: @name@
TOKEN_RE = re.compile(r"@(\w+)@")


class StagingError(Exception):
    """Raised when sources or resources cannot be staged."""
    pass


def replace_tokens(text, tokens):
    """Replace each @name@ whose name is in tokens; leave others alone."""
    def _sub(match):
        name = match.group(1)
        if name in tokens:
            return str(tokens[name])
        return match.group(0)

    return TOKEN_RE.sub(_sub, text)


def stage_resources(ctx, runner):
    """
    Build the flat staging directory and record each document's type.

    Raises StagingError if docs or templates are missing or a stylesheet
    fails to compile.
    """
    config = ctx.config
    staging = config.staging_dir

    print(f"\n{'─' * 60}")
    print("  Staging sources and resources")
    print(f"{'─' * 60}")

    if not os.path.isdir(config.docs_dir):
        raise StagingError(f"Docs directory not found: {config.docs_dir}")
    if not os.path.isdir(config.templates_dir):
        raise StagingError(f"Templates directory not found: {config.templates_dir}")

    if os.path.exists(staging):
        shutil.rmtree(staging)
    os.makedirs(staging)

    # ── Markdown, all into the same directory ─────────────
    doc_files = find_files(config.docs_dir, "*.md")
    for doc_file in doc_files:
        ctx.register_doc(file_base_name(doc_file), doc_type_for(doc_file))
        shutil.copyfile(doc_file, os.path.join(staging, os.path.basename(doc_file)))
    print(f"  ✓ {len(doc_files)} document(s), types: {', '.join(sorted(ctx.doc_type_names)) or 'none'}")

    # ── Images, merged across doc types ───────────────────
    for doc_type in sorted(ctx.doc_type_names):
        images_dir = os.path.join(config.docs_dir, doc_type, "images")
        if os.path.isdir(images_dir):
            copy_tree(images_dir, os.path.join(staging, "images"))
            ctx.log(f"  Images: {images_dir}")

    # ── Scripts, straight over ────────────────────────────
    if os.path.isdir(config.scripts_dir):
        copy_tree(config.scripts_dir, os.path.join(staging, "scripts"))
        ctx.log(f"  Scripts: {config.scripts_dir}")
    else:
        ctx.log(f"  No scripts directory at {config.scripts_dir}")

    stage_styles(ctx, runner)

    # ── Templates with date and version filled in ─────────
    tokens = {
        "documentVersion": config.document_version,
        "projectVersion": config.project_version,
    }
    for template in find_files(config.templates_dir, "*"):
        rel = os.path.relpath(template, config.templates_dir)
        filter_copy(template, os.path.join(config.staging_templates_dir, rel), tokens)
    print(f"  ✓ Templates: {config.document_version} / {config.project_version or '(no version)'}")

    # ── Output directory structure, rebuilt each run ──────
    for stale in (config.output_dir, config.output_doc_dir, config.webapp_dir):
        if os.path.exists(stale):
            shutil.rmtree(stale)
    os.makedirs(config.output_doc_dir, exist_ok=True)

    if os.path.isdir(config.redirections_dir):
        copy_tree(config.redirections_dir, config.output_dir)
        ctx.log(f"  Redirections: {config.redirections_dir}")

    return staging


def stage_styles(ctx, runner):
    """Copy stylesheets into staging, compiling LessCSS files into CSS."""
    config = ctx.config
    styles_dir = config.styles_dir
    target = os.path.join(config.staging_dir, "styles")

    if not os.path.isdir(styles_dir):
        ctx.log(f"  No styles directory at {styles_dir}")
        return

    copy_tree(styles_dir, target, ignore=shutil.ignore_patterns("*.less"))

    for less_file in find_files(styles_dir, "*.less"):
        css_file = os.path.join(target, f"{file_base_name(less_file)}.css")
        os.makedirs(target, exist_ok=True)
        result = runner.run(
            [config.tool("lessc"), less_file, css_file],
            label=f"LessCSS {os.path.basename(less_file)}",
        )
        if not result.ok:
            raise StagingError(f"Could not compile {less_file}")
        ctx.log(f"  Compiled {os.path.basename(less_file)} → {os.path.basename(css_file)}")


def copy_tree(src, dst, ignore=None):
    """Copy a directory's contents into dst, merging with what is there."""
    shutil.copytree(src, dst, ignore=ignore, dirs_exist_ok=True)


def filter_copy(src, dst, tokens):
    """Copy a file, substituting tokens if it is text."""
    os.makedirs(os.path.dirname(dst), exist_ok=True)
    try:
        with open(src, "r", encoding="utf-8", newline="") as f:
            text = f.read()
    except UnicodeDecodeError:
        shutil.copyfile(src, dst)
        return

    with open(dst, "w", encoding="utf-8", newline="") as f:
        f.write(replace_tokens(text, tokens))
