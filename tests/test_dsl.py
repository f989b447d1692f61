import pytest

from ghworkflow.dsl import job, matrix, run, sbt, use, wf, workflow
from ghworkflow.model import PR_EVENT_DEFAULTS, Checkout, PREventType, Run, Sbt, Use, Workflow, WorkflowJob


def test_run_collects_commands():
    step = run("whoami", "echo yo", name="who")
    assert step == Run(["whoami", "echo yo"], name="who")


def test_use_defaults_to_empty_maps():
    step = use("actions", "cache", 1, name="Cache")
    assert step == Use("actions", "cache", 1, name="Cache")
    assert step.params == {} and step.env == {}


def test_sbt_helper():
    assert sbt("compile", "test") == Sbt(["compile", "test"])


def test_job_requires_steps():
    with pytest.raises(ValueError, match="at least one step"):
        job("empty", "Empty")


def test_job_keeps_model_defaults_for_unset_axes():
    j = job("build", "Build", run("echo hi"), javas=["adopt@1.11"])
    assert j.oses == ("ubuntu-latest",)
    assert j.scalas == ("2.13.1",)
    assert j.javas == ("adopt@1.11",)


def test_job_steps_list_then_varargs():
    first, second = run("one"), run("two")
    j = job("j", "J", second, steps_list=[first, Checkout])
    assert j.steps == (first, Checkout, second)


def test_matrix_axes_merge_in_order():
    adds = matrix("shard", [1, 2]) | matrix("db", ["pg"])
    assert list(adds) == ["shard", "db"]
    assert adds["shard"] == ["1", "2"]

    j = job("j", "J", run("x"), matrix_adds=adds)
    assert j.matrix_adds == {"shard": ("1", "2"), "db": ("pg",)}


def test_wf_returns_jobs_in_order():
    a = job("a", "A", run("a"))
    b = job("b", "B", run("b"))
    assert wf(a, b) == [a, b]


def test_workflow_defaults():
    w = workflow("CI", job("a", "A", run("a")))
    assert isinstance(w, Workflow)
    assert w.branches == ("master",)
    assert list(w.pr_event_types) == list(PR_EVENT_DEFAULTS)
    assert w.env == {}
    assert w.sbt == "sbt"
    assert all(isinstance(j, WorkflowJob) for j in w.jobs)


def test_workflow_compile_renders_types_and_jobs():
    w = workflow(
        "CI",
        job("a", "A", sbt("test")),
        branches=["main"],
        pr_event_types=[PREventType.OPENED],
        sbt="csbt",
    )
    out = w.compile()
    assert "    branches: [main]\n    types: [opened]\n" in out
    assert out.endswith("      - run: csbt ++${{ matrix.scala }} test")
