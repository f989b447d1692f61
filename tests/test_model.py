import dataclasses

import pytest

from ghworkflow.compiler import compile_step
from ghworkflow.model import Checkout, FrozenMap, Run, SetupScala, Use, Workflow, WorkflowJob


def test_setup_scala_params_cannot_be_mutated():
    with pytest.raises(TypeError):
        SetupScala.params["java-version"] = "changed"
    assert SetupScala.params["java-version"] == "${{ matrix.java }}"


def test_presets_cannot_be_reassigned():
    with pytest.raises(dataclasses.FrozenInstanceError):
        SetupScala.params = {}
    with pytest.raises(dataclasses.FrozenInstanceError):
        Checkout.name = "other"


def test_caller_dict_is_copied_not_shared():
    params = {"key": "v1"}
    step = Use("o", "r", 1, params=params)
    params["key"] = "v2"
    assert compile_step(step, "") == "- uses: o/r@v1\n  with:\n    key: v1"


def test_caller_list_is_copied_not_shared():
    commands = ["echo a"]
    step = Run(commands)
    commands.append("echo b")
    assert step.commands == ("echo a",)


def test_steps_and_jobs_are_hashable():
    assert hash(Run(["a"])) == hash(Run(("a",)))
    assert hash(SetupScala) == hash(SetupScala)

    job = WorkflowJob("j", "J", [Run(["a"], env={"k": "v"})], matrix_adds={"x": ["1"]})
    assert len({job, WorkflowJob("j", "J", [Run(["a"], env={"k": "v"})], matrix_adds={"x": ["1"]})}) == 1


def test_job_collections_are_frozen():
    job = WorkflowJob("j", "J", [Run(["a"])], needs=["b"], matrix_adds={"x": ["1", "2"]})
    assert job.needs == ("b",)
    assert job.matrix_adds["x"] == ("1", "2")
    with pytest.raises(AttributeError):
        job.needs.append("c")
    with pytest.raises(TypeError):
        job.matrix_adds["y"] = ("3",)


def test_workflow_fields_are_frozen():
    w = Workflow("CI", jobs=[WorkflowJob("j", "J", [Run(["a"])])], env={"A": "1"})
    assert isinstance(w.jobs, tuple)
    assert isinstance(w.env, FrozenMap)


def test_frozen_map_equals_plain_dict():
    assert FrozenMap({"a": "1"}) == {"a": "1"}
    assert FrozenMap() == {}
    assert FrozenMap({"a": "1"}) != {"a": "2"}
