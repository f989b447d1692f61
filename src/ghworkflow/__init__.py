from .dsl import job, run, use, sbt, matrix, wf, workflow
from .model import (
    Branch,
    Checkout,
    Contains,
    EndsWith,
    Equals,
    PR_EVENT_DEFAULTS,
    PREventType,
    Run,
    Sbt,
    SetupScala,
    StartsWith,
    Tag,
    Use,
    Workflow,
    WorkflowJob,
    WorkflowStep,
)
from .compiler import (
    compile_branch_predicate,
    compile_job,
    compile_pr_event_type,
    compile_step,
    compile_workflow,
)

__all__ = [
    "job", "run", "use", "sbt", "matrix", "wf", "workflow",
    "Branch", "Tag", "Equals", "Contains", "StartsWith", "EndsWith",
    "PREventType", "PR_EVENT_DEFAULTS",
    "WorkflowStep", "Run", "Use", "Sbt", "Checkout", "SetupScala",
    "WorkflowJob", "Workflow",
    "compile_branch_predicate", "compile_pr_event_type", "compile_step", "compile_job", "compile_workflow",
]
