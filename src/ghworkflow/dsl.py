# dsl.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .model import (
    PR_EVENT_DEFAULTS,
    PREventType,
    Run,
    Sbt,
    Use,
    Workflow,
    WorkflowJob,
    WorkflowStep,
)


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def run(
    *commands: str,
    name: str | None = None,
    cond: str | None = None,
    env: Optional[Dict[str, str]] = None,
) -> Run:
    """Create a shell step. Several commands render as a `run: |` block."""
    return Run(list(commands), name=name, cond=cond, env=env or {})


def use(
    owner: str,
    repo: str,
    version: int,
    *,
    params: Optional[Dict[str, str]] = None,
    env: Optional[Dict[str, str]] = None,
    name: str | None = None,
    cond: str | None = None,
) -> Use:
    """Create an action step, e.g. use("actions", "cache", 1, params={...})."""
    return Use(owner, repo, version, params=params or {}, env=env or {}, name=name, cond=cond)


def sbt(
    *commands: str,
    name: str | None = None,
    cond: str | None = None,
    env: Optional[Dict[str, str]] = None,
) -> Sbt:
    return Sbt(list(commands), name=name, cond=cond, env=env or {})


# ---------------------------------------------------------------------
# Functional Job helper
# ---------------------------------------------------------------------

def job(
    id: str,
    name: str,
    *steps: WorkflowStep,  # allow: job("build", "Build", run(...), Checkout)
    steps_list: Optional[List[WorkflowStep]] = None,  # allow: job(..., steps_list=[...])
    oses: Optional[List[str]] = None,
    scalas: Optional[List[str]] = None,
    javas: Optional[List[str]] = None,
    matrix_adds: Optional[Dict[str, List[str]]] = None,
    env: Optional[Dict[str, str]] = None,
    cond: str | None = None,
    needs: Optional[List[str]] = None,
) -> WorkflowJob:
    steps_final: List[WorkflowStep] = []
    if steps_list:
        steps_final.extend(list(steps_list))
    steps_final.extend(list(steps))

    if not steps_final:
        raise ValueError(f"job({id!r}) must have at least one step")

    # only pass matrix axes that were given so the model defaults apply
    axes: Dict[str, List[str]] = {}
    if oses is not None:
        axes["oses"] = list(oses)
    if scalas is not None:
        axes["scalas"] = list(scalas)
    if javas is not None:
        axes["javas"] = list(javas)

    return WorkflowJob(
        id=id,
        name=name,
        steps=steps_final,
        matrix_adds=dict(matrix_adds or {}),
        env=env or {},
        cond=cond,
        needs=needs or [],
        **axes,
    )


# ---------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------

class Matrix:
    """
    One extra matrix axis.

    Example:
        job("test", "Test", run("echo ${{ matrix.shard }}"),
            matrix_adds=matrix("shard", ["1", "2"]).axis())
    """
    def __init__(self, key: str, values: Iterable[object]):
        self.key = key
        self.values = [str(v) for v in values]

    def axis(self) -> Dict[str, List[str]]:
        return {self.key: list(self.values)}

    def __or__(self, other: Matrix) -> Dict[str, List[str]]:
        # matrix("a", ...) | matrix("b", ...) keeps insertion order a, b
        merged = self.axis()
        merged.update(other.axis())
        return merged


def matrix(key: str, values: Iterable[object]) -> Matrix:
    return Matrix(key, values)


# ---------------------------------------------------------------------
# Workflow helpers (single-file story)
# ---------------------------------------------------------------------

def wf(*jobs: WorkflowJob) -> List[WorkflowJob]:
    """
    Job list helper. Use this name so you can define your own
    def workflow(): return wf(job(...), job(...)).

    A workflow file may return the bare list; it is then compiled with the
    default name, branches and trigger types.
    """
    return list(jobs)


def workflow(
    name: str,
    *jobs: WorkflowJob,
    branches: Optional[Sequence[str]] = None,
    pr_event_types: Optional[Sequence[PREventType]] = None,
    env: Optional[Dict[str, str]] = None,
    sbt: str = "sbt",
) -> Workflow:
    """Bundle jobs with the top-level settings into a `Workflow`."""
    return Workflow(
        name=name,
        jobs=list(jobs),
        branches=list(branches) if branches is not None else ["master"],
        pr_event_types=tuple(pr_event_types) if pr_event_types is not None else PR_EVENT_DEFAULTS,
        env=env or {},
        sbt=sbt,
    )
