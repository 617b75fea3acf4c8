"""
Task sequencing.

Tasks and their dependencies mirror the documentation build targets:
staging feeds the HTML and e-book passes, the PDF pass renders the HTML
output, and packaging zips the site once every format is done.
"""

from doclib.builders import BUILDERS
from doclib.package import package_output
from doclib.staging import stage_resources


# task → tasks that must run before it
TASK_DEPENDS = {
    "stage": [],
    "html": ["stage"],
    "ebook": ["stage"],
    "pdf": ["html"],
    "docs": ["html", "ebook", "pdf"],
    "package": ["docs"],
}

DEFAULT_TASKS = ["package"]


class PipelineError(Exception):
    """Raised for an unknown task name."""
    pass


class BuildReport:
    def __init__(self):
        self.tasks = []
        self.results = {}
        self.failures = []
        self.archive = None

    @property
    def ok(self):
        return not self.failures and all(self.results.values())

    @property
    def failed_tasks(self):
        return [task for task, ok in self.results.items() if not ok]


def resolve_tasks(names):
    """Order tasks so dependencies run first, each task once."""
    ordered = []

    def visit(name):
        if name not in TASK_DEPENDS:
            raise PipelineError(
                f"Unknown task '{name}' (expected one of: {', '.join(TASK_DEPENDS)})"
            )
        if name in ordered:
            return
        for dep in TASK_DEPENDS[name]:
            visit(dep)
        ordered.append(name)

    for name in names:
        visit(name)
    return ordered


def run_pipeline(ctx, runner, tasks=None):
    """
    Run the requested tasks and their dependencies, one after another.

    Tool failures are collected in the report and do not stop the run;
    staging and filesystem errors propagate.
    """
    report = BuildReport()
    report.tasks = resolve_tasks(tasks or DEFAULT_TASKS)

    for task in report.tasks:
        if task == "stage":
            stage_resources(ctx, runner)
            report.results[task] = True
        elif task in BUILDERS:
            builder = BUILDERS[task](ctx, runner)
            report.results[task] = builder.build()
        elif task == "package":
            report.archive = package_output(
                ctx.config.output_dir,
                ctx.config.dist_dir,
                ctx.config.archive_base_name,
            )
            print(f"\n  ✓ Packaged {report.archive}")
            report.results[task] = True
        else:
            report.results[task] = True

    report.failures = list(ctx.failures)
    return report
