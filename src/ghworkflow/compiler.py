# compiler.py
# Renders the workflow model into GitHub Actions YAML.
#
# Output is assembled bottom-up as text (workflow -> jobs -> steps) and must be
# byte-for-byte stable: map keys are always sorted, sequences keep caller order.
from __future__ import annotations

import re
from typing import Dict, List, Mapping, Sequence

from .model import (
    PR_EVENT_DEFAULTS,
    Contains,
    EndsWith,
    Equals,
    PREventType,
    RefPredicate,
    Run,
    Sbt,
    StartsWith,
    Use,
    WorkflowJob,
    WorkflowStep,
)


HEADER = """# This file was automatically generated by sbt-github-actions using the
# githubWorkflowGenerate task. You should add and commit this file to
# your git repository. It goes without saying that you shouldn't edit
# this file by hand! Instead, if you wish to make changes, you should
# change your sbt build configuration to revise the workflow description
# to meet your needs, then regenerate this file.
"""

MATRIX_OS = "${{ matrix.os }}"
MATRIX_SCALA = "${{ matrix.scala }}"

_BLANK_LINE = re.compile(r"\n[ ]+(?=\n)")


# ---------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------

def indent(output: str, level: int) -> str:
    """
    Indent every line of `output` by two spaces per level.

    Lines that end up whitespace-only are emptied again, so the blank line
    between two blocks stays blank at any nesting depth.
    """
    space = "  " * level
    indented = space + output.replace("\n", "\n" + space)
    return _BLANK_LINE.sub("\n", indented)


def wrap(value: str) -> str:
    """Render a scalar value: block form if multi-line, quoted if it starts with `@`."""
    if "\n" in value:
        return "|\n" + indent(value, 1)
    if value.startswith("@"):
        return "'" + value.replace("'", "''") + "'"
    return value


def _flow_list(values: Sequence[str]) -> str:
    return "[" + ", ".join(values) + "]"


def _compile_map(mapping: Mapping[str, str], prefix: str) -> str:
    if not mapping:
        return ""
    rendered = "\n".join(f"{key}: {wrap(mapping[key])}" for key in sorted(mapping))
    return f"{prefix}:\n" + indent(rendered, 1)


def compile_env(env: Mapping[str, str]) -> str:
    return _compile_map(env, "env")


# ---------------------------------------------------------------------
# Predicates and event types
# ---------------------------------------------------------------------

def compile_branch_predicate(target: str, pred: RefPredicate) -> str:
    ref = pred.ref
    if isinstance(pred, Equals):
        return f"{target} == '{ref.prefix}{ref.name}'"
    if isinstance(pred, StartsWith):
        return f"startsWith({target}, '{ref.prefix}{ref.name}')"
    if isinstance(pred, EndsWith):
        return f"(startsWith({target}, '{ref.prefix}') && endsWith({target}, '{ref.name}'))"
    if isinstance(pred, Contains):
        return f"(startsWith({target}, '{ref.prefix}') && contains({target}, '{ref.name}'))"
    raise TypeError(f"Unknown ref predicate: {pred!r}")


def compile_pr_event_type(tpe: PREventType) -> str:
    return tpe.value


# ---------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------

def _sbt_command_line(sbt_invocation: str, commands: Sequence[str]) -> str:
    # commands with spaces are single-quoted so the shell passes them as one arg
    args = " ".join(f"'{cmd}'" if " " in cmd else cmd for cmd in commands)
    return f"{sbt_invocation or 'sbt'} ++{MATRIX_SCALA} {args}"


def lower_sbt(step: Sbt, sbt_invocation: str) -> Run:
    """Turn an `Sbt` step into the `Run` step that actually gets rendered."""
    return Run(
        [_sbt_command_line(sbt_invocation, step.commands)],
        name=step.name,
        cond=step.cond,
        env=step.env,
    )


def compile_step(step: WorkflowStep, sbt_invocation: str, declare_shell: bool = False) -> str:
    """
    Render one step as a YAML sequence item (`- ...`).

    Sub-fields are emitted in a fixed order:
    env, if, name, shell, run/uses, with.
    """
    if isinstance(step, Sbt):
        step = lower_sbt(step, sbt_invocation)

    parts: List[str] = []

    env = compile_env(step.env)
    if env:
        parts.append(env)
    if step.cond is not None:
        parts.append(f"if: {step.cond}")
    if step.name is not None:
        parts.append(f"name: {step.name}")

    if isinstance(step, Run):
        if declare_shell:
            parts.append("shell: bash")
        if len(step.commands) > 1:
            parts.append("run: |\n" + indent("\n".join(step.commands), 1))
        else:
            parts.append("run: " + "".join(step.commands))
    elif isinstance(step, Use):
        parts.append(f"uses: {step.owner}/{step.repo}@v{step.version}")
        params = _compile_map(step.params, "with")
        if params:
            parts.append(params)
    else:
        raise TypeError(f"Unknown workflow step: {step!r}")

    return "- " + indent("\n".join(parts), 1)[2:]


# ---------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------

def _compile_matrix(job: WorkflowJob) -> str:
    axes: Dict[str, Sequence[str]] = {
        "os": job.oses,
        "scala": job.scalas,
        "java": job.javas,
    }
    lines = [f"{axis}: {_flow_list(values)}" for axis, values in axes.items()]
    lines.extend(f"{axis}: {_flow_list(values)}" for axis, values in job.matrix_adds.items())
    return "\n".join(lines)


def compile_job(job: WorkflowJob, sbt_invocation: str) -> str:
    # a multi-os matrix means the default shell differs per runner
    declare_shell = len(job.oses) > 1

    rendered_needs = f"\nneeds: {_flow_list(job.needs)}" if job.needs else ""
    rendered_cond = f"\nif: {job.cond}" if job.cond is not None else ""
    rendered_env = "\n" + compile_env(job.env) if job.env else ""

    rendered_steps = "\n\n".join(
        compile_step(step, sbt_invocation, declare_shell) for step in job.steps
    )

    body = (
        f"name: {job.name}{rendered_needs}{rendered_cond}\n"
        "strategy:\n"
        "  matrix:\n"
        f"{indent(_compile_matrix(job), 2)}\n"
        f"runs-on: {MATRIX_OS}{rendered_env}\n"
        "steps:\n"
        f"{indent(rendered_steps, 1)}"
    )

    return f"{job.id}:\n" + indent(body, 1)


# ---------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------

def compile_workflow(
    name: str,
    branches: Sequence[str],
    pr_event_types: Sequence[PREventType],
    env: Mapping[str, str],
    jobs: Sequence[WorkflowJob],
    sbt_invocation: str,
) -> str:
    rendered_branches = _flow_list(branches)

    if list(pr_event_types) == list(PR_EVENT_DEFAULTS):
        rendered_types = ""
    else:
        rendered_types = "\n    types: " + _flow_list(
            [compile_pr_event_type(tpe) for tpe in pr_event_types]
        )

    rendered_env = compile_env(env) + "\n\n" if env else ""

    rendered_jobs = "\n\n".join(compile_job(job, sbt_invocation) for job in jobs)

    return HEADER + (
        "\n"
        f"name: {name}\n"
        "\n"
        "on:\n"
        "  pull_request:\n"
        f"    branches: {rendered_branches}{rendered_types}\n"
        "  push:\n"
        f"    branches: {rendered_branches}\n"
        "\n"
        f"{rendered_env}jobs:\n"
        f"{indent(rendered_jobs, 1)}"
    )
