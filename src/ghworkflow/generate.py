# generate.py
from __future__ import annotations

import difflib
import runpy
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .dsl import workflow as dsl_workflow
from .git_facts.git import repo_root
from .model import Workflow, WorkflowJob

DEFAULT_WORKFLOW_NAME = "Continuous Integration"
WORKFLOW_DIR = Path(".github") / "workflows"
WORKFLOW_FILE = "ci.yml"


@dataclass
class WorkflowError(Exception):
    """
    Structured error for loading, writing and checking workflows, with enough
    context for clean CLI output without a traceback.
    """
    kind: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Loading
# ----------------------------------------------------------------------

def _as_workflow(value: object, source: Path) -> Workflow:
    if isinstance(value, Workflow):
        return value
    if isinstance(value, list) and all(isinstance(j, WorkflowJob) for j in value):
        return Workflow(name=DEFAULT_WORKFLOW_NAME, jobs=value)
    raise WorkflowError(
        kind="invalid_workflow",
        message="Workflow must return/define a Workflow or a List[WorkflowJob]",
        details={
            "file": str(source),
            "got": type(value).__name__,
            "hint": "Define workflow() -> Workflow, WORKFLOW = workflow(...) or JOBS = wf(job(...), ...)",
        },
    )


def load_workflow(path: str | Path) -> Workflow:
    """
    Load a workflow from a python file path.

    The file must define one of (checked in this order):
      - WORKFLOW = Workflow(...)
      - workflow() -> Workflow | List[WorkflowJob]
      - JOBS = [WorkflowJob, ...]
    """
    wf_path = Path(path).expanduser().resolve()
    if not wf_path.exists():
        raise FileNotFoundError(f"Workflow file not found: {wf_path}")
    if wf_path.suffix != ".py":
        raise WorkflowError(
            kind="invalid_workflow",
            message=f"Workflow must be a .py file, got: {wf_path.name}",
        )

    module_name = f"ghworkflow_workflow_{wf_path.stem}"
    globals_dict = runpy.run_path(str(wf_path), run_name=module_name)

    # the imported `workflow` helper is not a user-defined workflow()
    fn = globals_dict.get("workflow")
    if fn is dsl_workflow:
        fn = None

    if "WORKFLOW" in globals_dict:
        value = globals_dict["WORKFLOW"]
    elif callable(fn):
        try:
            value = fn()
        except TypeError as e:
            if "required positional argument" in str(e):
                raise WorkflowError(
                    kind="invalid_workflow",
                    message="workflow() must be callable without arguments",
                    details={"file": str(wf_path), "error": str(e)},
                ) from e
            raise
    elif "JOBS" in globals_dict:
        value = globals_dict["JOBS"]
    else:
        raise WorkflowError(
            kind="invalid_workflow",
            message="Workflow file defines neither workflow(), WORKFLOW nor JOBS",
            details={"file": str(wf_path)},
        )

    return _as_workflow(value, wf_path)


# ----------------------------------------------------------------------
# Output location
# ----------------------------------------------------------------------

def default_output_path(root: Optional[str | Path] = None) -> Path:
    """`<repo root>/.github/workflows/ci.yml`, or relative to cwd outside git."""
    if root is None:
        try:
            root = repo_root()
        except (subprocess.CalledProcessError, FileNotFoundError):
            root = Path(".")
    return Path(root) / WORKFLOW_DIR / WORKFLOW_FILE


# ----------------------------------------------------------------------
# Generate / check
# ----------------------------------------------------------------------

def generate(workflow: Workflow, output: str | Path) -> Path:
    """Compile `workflow` and write it to `output`, creating parent dirs."""
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(workflow.compile().encode("utf-8"))
    return out_path


def diff(workflow: Workflow, output: str | Path) -> List[str]:
    """Unified diff lines from the file on disk to a fresh compilation."""
    out_path = Path(output)
    expected = workflow.compile()
    actual = out_path.read_bytes().decode("utf-8") if out_path.exists() else ""
    return list(
        difflib.unified_diff(
            actual.splitlines(),
            expected.splitlines(),
            fromfile=f"{out_path} (on disk)",
            tofile=f"{out_path} (generated)",
            lineterm="",
        )
    )


def check(workflow: Workflow, output: str | Path) -> None:
    """Raise WorkflowError if `output` is missing or differs from a fresh compilation."""
    out_path = Path(output)
    if not out_path.exists():
        raise WorkflowError(
            kind="missing",
            message=f"Workflow file does not exist: {out_path}",
            details={"hint": "Run `ghworkflow generate` and commit the result."},
        )

    # raw bytes: CRLF line endings and trailing whitespace count as differences
    if out_path.read_bytes() != workflow.compile().encode("utf-8"):
        changes = diff(workflow, out_path) or ["(line-ending or trailing whitespace difference)"]
        raise WorkflowError(
            kind="out_of_date",
            message=f"{out_path} differs from the generated workflow",
            details={"diff": "\n".join(changes)},
        )
