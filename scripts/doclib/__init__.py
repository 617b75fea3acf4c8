"""
doclib — markdown-to-documentation build toolchain.

Public API:
    from doclib.config import DocsConfig
    from doclib.context import BuildContext
    from doclib.runner import CommandRunner
    from doclib.staging import stage_resources
    from doclib.builders import BUILDERS
    from doclib.pipeline import run_pipeline
    from doclib.package import package_output
"""
