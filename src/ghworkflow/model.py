# model.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Iterator, List, Optional, Sequence


# ---------------------------------------------------------------------
# Immutable containers
# ---------------------------------------------------------------------

class FrozenMap(Mapping):
    """Read-only, hashable mapping for env vars, action params and matrix axes."""

    def __init__(self, items=()):
        self._data = dict(items)

    def __getitem__(self, key: str):
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(frozenset(self._data.items()))

    def __repr__(self) -> str:
        return f"FrozenMap({self._data!r})"


def _freeze(value):
    if isinstance(value, Mapping):
        return FrozenMap((k, _freeze(v)) for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


class _Frozen:
    """Turns list/dict fields into tuples/FrozenMaps after __init__."""

    def __post_init__(self) -> None:
        # Use object.__setattr__ to bypass frozen dataclass restriction
        for f in fields(self):
            object.__setattr__(self, f.name, _freeze(getattr(self, f.name)))


# ---------------------------------------------------------------------
# Refs and predicates
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Ref:
    """A git ref pattern. `name` is opaque and may contain globs (`v*`)."""
    name: str

    kind = ""

    @property
    def prefix(self) -> str:
        return f"refs/{self.kind}/"


@dataclass(frozen=True)
class Branch(Ref):
    kind = "heads"


@dataclass(frozen=True)
class Tag(Ref):
    kind = "tags"


@dataclass(frozen=True)
class RefPredicate:
    """A test over a ref string, rendered into a CI expression by the compiler."""
    ref: Ref


@dataclass(frozen=True)
class Equals(RefPredicate):
    pass


@dataclass(frozen=True)
class Contains(RefPredicate):
    pass


@dataclass(frozen=True)
class StartsWith(RefPredicate):
    pass


@dataclass(frozen=True)
class EndsWith(RefPredicate):
    pass


# ---------------------------------------------------------------------
# Pull request event types
# ---------------------------------------------------------------------

class PREventType(Enum):
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    LABELED = "labeled"
    UNLABELED = "unlabeled"
    OPENED = "opened"
    EDITED = "edited"
    CLOSED = "closed"
    REOPENED = "reopened"
    SYNCHRONIZE = "synchronize"
    READY_FOR_REVIEW = "ready_for_review"
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    REVIEW_REQUESTED = "review_requested"
    REVIEW_REQUEST_REMOVED = "review_request_removed"

    @classmethod
    def defaults(cls) -> List[PREventType]:
        return list(PR_EVENT_DEFAULTS)


# The types GitHub triggers on when `types:` is omitted.
PR_EVENT_DEFAULTS = (
    PREventType.SYNCHRONIZE,
    PREventType.OPENED,
    PREventType.REOPENED,
)


# ---------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class WorkflowStep(_Frozen):
    """One unit of work inside a job."""


@dataclass(frozen=True)
class Run(WorkflowStep):
    """One or more shell command lines."""
    commands: Sequence[str]
    name: Optional[str] = None
    cond: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=FrozenMap)


@dataclass(frozen=True)
class Use(WorkflowStep):
    """A third-party action pinned to a major version tag (`owner/repo@vN`)."""
    owner: str
    repo: str
    version: int
    params: Mapping[str, str] = field(default_factory=FrozenMap)
    env: Mapping[str, str] = field(default_factory=FrozenMap)
    name: Optional[str] = None
    cond: Optional[str] = None


@dataclass(frozen=True)
class Sbt(WorkflowStep):
    """Build tool invocation; lowered to a single-line `Run` at compile time."""
    commands: Sequence[str]
    name: Optional[str] = None
    cond: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=FrozenMap)


Checkout = Use(
    "actions",
    "checkout",
    2,
    name="Checkout current branch (fast)",
)

SetupScala = Use(
    "olafurpg",
    "setup-scala",
    5,
    params={"java-version": "${{ matrix.java }}"},
    name="Setup Java and Scala",
)


# ---------------------------------------------------------------------
# Jobs and workflows
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class WorkflowJob(_Frozen):
    """
    A job block: ordered steps run under a build matrix.

    `id` is used as the YAML key and `needs` holds other job ids; neither is
    validated here. Sequences are stored as tuples, mappings as FrozenMap.
    """
    id: str
    name: str
    steps: Sequence[WorkflowStep]

    # matrix axes
    oses: Sequence[str] = ("ubuntu-latest",)
    scalas: Sequence[str] = ("2.13.1",)
    javas: Sequence[str] = ("adopt@1.8",)
    matrix_adds: Mapping[str, Sequence[str]] = field(default_factory=FrozenMap)

    env: Mapping[str, str] = field(default_factory=FrozenMap)
    cond: Optional[str] = None
    needs: Sequence[str] = ()


@dataclass(frozen=True)
class Workflow(_Frozen):
    """Everything `compile_workflow` needs, bundled for workflow files and the CLI."""
    name: str
    jobs: Sequence[WorkflowJob] = ()
    branches: Sequence[str] = ("master",)
    pr_event_types: Sequence[PREventType] = PR_EVENT_DEFAULTS
    env: Mapping[str, str] = field(default_factory=FrozenMap)
    sbt: str = "sbt"

    def compile(self) -> str:
        # Import here to avoid circular import
        from .compiler import compile_workflow

        return compile_workflow(
            self.name,
            self.branches,
            self.pr_event_types,
            self.env,
            self.jobs,
            self.sbt,
        )
