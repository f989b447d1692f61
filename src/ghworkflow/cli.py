# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from ghworkflow.generate import WorkflowError, check, default_output_path, generate, load_workflow
from ghworkflow.ui.console import Console, get_console, set_console

DEFAULT_WORKFLOW_FILE = "ghworkflow_workflow.py"


def find_workflow_files() -> list[Path]:
    """`ghworkflow_workflow.py` first, then any other `*_workflow.py` in cwd."""
    cwd = Path(".")
    default_workflow = cwd / DEFAULT_WORKFLOW_FILE

    found = [default_workflow] if default_workflow.exists() else []
    found.extend(p for p in cwd.glob("*_workflow.py") if p != default_workflow)
    return sorted(found)


def discover_workflow(workflow_arg: str | None) -> Path:
    """Resolve --workflow (".py" optional) or the single workflow file in cwd; exit 1 otherwise."""
    console = get_console()

    if workflow_arg:
        workflow_path = Path(workflow_arg)
        if not workflow_path.exists() and workflow_path.suffix != ".py":
            workflow_path = workflow_path.with_name(workflow_path.name + ".py")
        if not workflow_path.exists():
            console.print_error(
                "Workflow file not found",
                f"No such workflow file: {workflow_arg}",
            )
            sys.exit(1)
        return workflow_path

    candidates = find_workflow_files()

    if not candidates:
        console.print_error(
            "No workflow file found",
            f"Expected {DEFAULT_WORKFLOW_FILE} or a *_workflow.py file in the current directory.",
            suggestion="Pass one with --workflow PATH.",
        )
        sys.exit(1)

    if len(candidates) > 1:
        console.print_error(
            "Multiple workflow files found",
            "Pick one with --workflow PATH:",
            details=[str(p) for p in candidates],
        )
        sys.exit(1)

    return candidates[0]


def _fail(exc: BaseException) -> None:
    console = get_console()
    if isinstance(exc, KeyboardInterrupt):
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    if isinstance(exc, WorkflowError):
        console.print_error(
            exc.kind,
            exc.message,
            details=[f"{k}: {v}" for k, v in exc.details.items()] or None,
        )
    else:
        console.print_exception(exc)
    sys.exit(1)


workflow_option = click.option(
    "--workflow",
    default=None,
    help=f"Workflow file path (defaults to {DEFAULT_WORKFLOW_FILE} if present)",
)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Show stack traces and debug output",
)
def cli(debug):
    """ghworkflow: generate GitHub Actions workflows from Python."""
    set_console(Console(debug=debug))


@cli.command(name="generate")
@workflow_option
@click.option("--output", default=None, help="Output file (defaults to <repo>/.github/workflows/ci.yml)")
def generate_cmd(workflow, output):
    """Write the compiled workflow YAML."""
    console = get_console()
    workflow_path = discover_workflow(workflow)

    try:
        wf = load_workflow(workflow_path)
        out_path = Path(output) if output else default_output_path()
        console.print_debug(f"Loaded {len(wf.jobs)} job(s) from {workflow_path}")
        written = generate(wf, out_path)
        console.print_generated(wf.name, str(written), len(wf.jobs))
    except (KeyboardInterrupt, Exception) as e:
        _fail(e)


@cli.command(name="check")
@workflow_option
@click.option("--output", default=None, help="Committed workflow file (defaults to <repo>/.github/workflows/ci.yml)")
def check_cmd(workflow, output):
    """Fail if the committed workflow differs from a fresh generation."""
    console = get_console()
    workflow_path = discover_workflow(workflow)

    try:
        wf = load_workflow(workflow_path)
        out_path = Path(output) if output else default_output_path()
        check(wf, out_path)
        console.print_up_to_date(str(out_path))
    except (KeyboardInterrupt, Exception) as e:
        _fail(e)


@cli.command(name="show")
@workflow_option
def show_cmd(workflow):
    """Print the compiled workflow YAML to stdout."""
    workflow_path = discover_workflow(workflow)

    try:
        wf = load_workflow(workflow_path)
        click.echo(wf.compile())
    except (KeyboardInterrupt, Exception) as e:
        _fail(e)


if __name__ == "__main__":
    cli()
