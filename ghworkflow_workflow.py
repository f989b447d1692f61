# ghworkflow_workflow.py
# Workflow for a Scala library: build and test on every supported JVM/Scala
# pair, then publish from master.
from __future__ import annotations

from ghworkflow import Branch, Checkout, Equals, SetupScala, compile_branch_predicate, job, run, sbt
from ghworkflow import workflow as make_workflow

ON_MASTER = compile_branch_predicate("github.ref", Equals(Branch("master")))


def workflow():
    return make_workflow(
        "Continuous Integration",
        # Build job - compiles and tests across the matrix
        job(
            "build",
            "Build and Test",
            Checkout,
            SetupScala,
            sbt("githubWorkflowCheck", name="Check that workflows are up to date"),
            sbt("test", name="Build project"),
            scalas=["2.12.10", "2.13.1"],
            javas=["adopt@1.8", "adopt@1.11"],
        ),

        # Publish job - only on pushes to master
        job(
            "publish",
            "Publish Artifacts",
            Checkout,
            SetupScala,
            sbt("+publish", name="Publish project"),
            run("echo published", name="Report"),
            needs=["build"],
            cond=f"github.event_name != 'pull_request' && ({ON_MASTER})",
        ),
        branches=["master"],
        env={"GITHUB_TOKEN": "${{ secrets.GITHUB_TOKEN }}"},
    )
