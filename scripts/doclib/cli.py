"""
Command line for the documentation build.

Usage:
    python build.py                          Stage, build html/ebook/pdf, zip the site
    python build.py html                     Stage and build HTML only
    python build.py pdf --verbose            HTML then PDF, with tool output
    python build.py package --project-version 2.1.0 --date 2014-07-02
    python build.py types                    List document types and their formats
    python build.py stop                     Stop a running PDF server via its monitor
    python build.py clean                    Remove the build directory

Requires: pandoc, ebook-convert (Calibre), lessc, wkhtmltopdf, PyYAML
"""

import argparse
import os
import shutil
import sys
import traceback
from collections import Counter

from doclib.config import CONFIG_FILE, ConfigError, DocsConfig
from doclib.context import BuildContext
from doclib.pipeline import DEFAULT_TASKS, TASK_DEPENDS, PipelineError, resolve_tasks, run_pipeline
from doclib.resolve import doc_type_for, file_base_name, find_files
from doclib.runner import CommandRunner
from doclib.server import send_stop
from doclib.staging import StagingError


# ── Load config ────────────────────────────────────────────────────────


def load_config(args):
    """Load docs.yaml with CLI overrides. Exits on failure."""
    overrides = {
        "project_version": getattr(args, "project_version", None),
        "document_date": getattr(args, "date", None),
        "build_dir": getattr(args, "build_dir", None),
        "archive_name": getattr(args, "archive_name", None),
    }
    try:
        return DocsConfig.load(args.config, overrides)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)


# ── Build command ──────────────────────────────────────────────────────


def cmd_build(args):
    """Run build tasks and their dependencies."""
    config = load_config(args)

    try:
        tasks = resolve_tasks(args.tasks or DEFAULT_TASKS)
    except PipelineError as e:
        print(f"Error: {e}")
        sys.exit(1)

    config.summary()
    print(f"  Tasks:   {' → '.join(tasks)}")

    ctx = BuildContext(config, verbose=args.verbose)
    runner = CommandRunner(verbose=args.verbose)

    try:
        report = run_pipeline(ctx, runner, tasks)
    except StagingError as e:
        print(f"Error: {e}")
        sys.exit(1)

    # Summary
    print(f"\n{'─' * 60}")
    for fmt, paths in sorted(ctx.outputs.items()):
        print(f"  {fmt}: {len(paths)} file(s)")
    if report.archive:
        print(f"  Archive: {report.archive}")

    if not report.ok:
        print(f"  Done with errors: {len(report.failures)} conversion(s) failed")
        for result in report.failures:
            print(f"    ✗ {result.label} (exit {result.returncode})")
        sys.exit(1)
    print(f"  Done. {len(report.tasks)} task(s) completed successfully.")


# ── Types command ──────────────────────────────────────────────────────


def cmd_types(args):
    """List the document types found under docs/ and what they build."""
    config = load_config(args)

    counts = Counter(doc_type_for(f) for f in find_files(config.docs_dir, "*.md"))
    if not counts:
        print(f"  No markdown files found in {config.docs_dir}")
        sys.exit(1)

    print()
    for doc_type, count in sorted(counts.items()):
        formats = config.formats_for(doc_type)
        if formats:
            print(f"  {doc_type:<16} {count:>3} doc(s)  → {', '.join(sorted(formats))}")
        else:
            print(f"  {doc_type:<16} {count:>3} doc(s)  → (skipped, not in conversions)")

    names = [file_base_name(f) for f in find_files(config.docs_dir, "*.md")]
    duplicates = sorted(n for n, c in Counter(names).items() if c > 1)
    if duplicates:
        print(f"\n  Warning: duplicate document names: {', '.join(duplicates)}")


# ── Stop command ───────────────────────────────────────────────────────


def cmd_stop(args):
    """Ask a running PDF server to stop through its monitor port."""
    port, key, host = args.stop_port, args.stop_key, args.host
    if port is None or key is None or host is None:
        if not os.path.exists(args.config):
            print("Error: --stop-port and --stop-key are required without a config file")
            sys.exit(1)
        server = load_config(args).server
        port = port if port is not None else server["stop_port"]
        key = key if key is not None else server["stop_key"]
        host = host if host is not None else server["host"]

    if not port or not key:
        print("Error: no stop port/key configured (server.stop_port, server.stop_key)")
        sys.exit(1)

    try:
        reply = send_stop(port, key, host)
    except OSError as e:
        print(f"  ✗ Could not reach monitor on {host}:{port}: {e}")
        sys.exit(1)

    if reply == "Stopped":
        print("  ✓ Server stopped")
    else:
        print(f"  ✗ Monitor did not stop the server (reply: {reply or 'none'})")
        sys.exit(1)


# ── Clean command ──────────────────────────────────────────────────────


def cmd_clean(args):
    """Remove the build directory."""
    config = load_config(args)
    if os.path.isdir(config.build_dir):
        shutil.rmtree(config.build_dir)
        print(f"  ✓ Removed {config.build_dir}")
    else:
        print(f"  Nothing to clean at {config.build_dir}")


# ── Argument Parser ────────────────────────────────────────────────────


def build_parser():
    parser = argparse.ArgumentParser(
        description="Markdown documentation build pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
tasks:
  stage     flatten docs and resources into the staging directory
  html      stage, then pandoc → html5
  ebook     stage, then pandoc → epub → mobi
  pdf       html, then wkhtmltopdf over a local server
  docs      html + ebook + pdf
  package   docs, then zip the site (default)

examples:
  %(prog)s                               Full build and package
  %(prog)s html ebook                    HTML and e-books only
  %(prog)s build pdf -v                  PDF with tool output
  %(prog)s types                         Show document types
  %(prog)s stop --stop-port 8079 --stop-key secret
        """,
    )
    sub = parser.add_subparsers(dest="command")

    # ── build (default when no subcommand) ─────────────────
    build_p = sub.add_parser("build", help="Run build tasks (default)")
    build_p.add_argument(
        "tasks", nargs="*", metavar="TASK",
        help=f"Tasks to run: {', '.join(TASK_DEPENDS)} (default: {' '.join(DEFAULT_TASKS)})",
    )
    _add_config_arg(build_p)
    opts = build_p.add_argument_group("options")
    opts.add_argument("--project-version", help="Override project_version")
    opts.add_argument("--date", help="Override document_date (YYYY-MM-DD)")
    opts.add_argument("--build-dir", help="Override build directory")
    opts.add_argument("--archive-name", help="Override archive name ({version} is substituted)")
    opts.add_argument("--verbose", "-v", action="store_true")

    # ── types ──────────────────────────────────────────────
    types_p = sub.add_parser("types", help="List document types and formats")
    _add_config_arg(types_p)

    # ── stop ───────────────────────────────────────────────
    stop_p = sub.add_parser("stop", help="Stop a running PDF server")
    _add_config_arg(stop_p)
    stop_p.add_argument("--stop-port", type=int, help="Monitor port")
    stop_p.add_argument("--stop-key", help="Monitor key")
    stop_p.add_argument("--host", help="Monitor host")

    # ── clean ──────────────────────────────────────────────
    clean_p = sub.add_parser("clean", help="Remove the build directory")
    _add_config_arg(clean_p)
    clean_p.add_argument("--build-dir", help="Override build directory")

    return parser


def _add_config_arg(parser):
    parser.add_argument("--config", "-c", default=CONFIG_FILE, help=f"Config file (default: {CONFIG_FILE})")


# ── Main ───────────────────────────────────────────────────────────────


KNOWN_COMMANDS = {"build", "types", "stop", "clean"}

# Options that consume the following argument
VALUE_OPTIONS = {
    "--config", "-c", "--project-version", "--date", "--build-dir",
    "--archive-name", "--stop-port", "--stop-key", "--host",
}


def _normalize_argv(argv):
    """
    Put the subcommand first, defaulting to build.

    "build.py html pdf" means "build.py build html pdf", and
    "build.py -c other.yaml types" means "build.py types -c other.yaml".
    """
    if argv and argv[0] in ("-h", "--help"):
        return argv

    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in VALUE_OPTIONS:
            i += 2
            continue
        if arg.startswith("-"):
            i += 1
            continue
        if arg in KNOWN_COMMANDS:
            return [arg] + argv[:i] + argv[i + 1:]
        break
    return ["build"] + argv


def run(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    args = parser.parse_args(_normalize_argv(argv))

    dispatch = {
        "build": cmd_build,
        "types": cmd_types,
        "stop": cmd_stop,
        "clean": cmd_clean,
    }

    handler = dispatch.get(args.command)
    if handler:
        handler(args)
    else:
        parser.print_help()


def main(argv=None):
    try:
        run(argv)
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)
    except Exception as e:
        log_path = "build_error.log"
        with open(log_path, "w") as f:
            traceback.print_exc(file=f)
        print(f"\nUnexpected error: {e}")
        print(f"Full traceback written to {log_path}")
        sys.exit(1)


if __name__ == "__main__":
    main()
