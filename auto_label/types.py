"""Types specific to auto_label."""

from __future__ import annotations

import dataclasses
from typing import Dict, FrozenSet, Generic, List, Optional, Tuple, TypeVar, Union

# The name of a label, unique within a repository.
LabelName = str

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class PrId:
    """An id of a pull request, with a repo full_name and a number."""
    full_name: str
    number: int

    def __str__(self):
        return f"{self.full_name}#{self.number}"

    @property
    def owner(self):
        owner, _, _ = self.full_name.partition("/")
        return owner

    @property
    def name(self):
        _, _, name = self.full_name.partition("/")
        return name


@dataclasses.dataclass(frozen=True)
class SinglePattern:
    """A rule written as one glob pattern."""
    pattern: str

    @property
    def patterns(self) -> Tuple[str, ...]:
        return (self.pattern,)


@dataclasses.dataclass(frozen=True)
class MultiplePatterns:
    """A rule written as a list of glob patterns."""
    patterns: Tuple[str, ...]


PatternSpec = Union[SinglePattern, MultiplePatterns]

# Label name to patterns, in the order the rule file lists them.
RuleTable = Dict[LabelName, PatternSpec]


@dataclasses.dataclass(frozen=True)
class Label:
    """A GitHub label: its name, and the node id used by mutations."""
    name: LabelName
    id: str


@dataclasses.dataclass(frozen=True)
class PrSnapshot:
    """
    What we know about a pull request at the start of a run.
    """
    # The node id of the pull request, used as the labelable id.
    labelable_id: str
    head_ref: str
    base_ref: str
    # The labels on the pull request.
    labels: Tuple[Label, ...] = ()
    # All of the labels defined in the repository.
    catalog: Tuple[Label, ...] = ()

    @property
    def label_names(self) -> FrozenSet[LabelName]:
        return frozenset(lbl.name for lbl in self.labels)

    def catalog_ids(self) -> Dict[LabelName, str]:
        return {lbl.name: lbl.id for lbl in self.catalog}

    def pr_label_ids(self) -> Dict[LabelName, str]:
        return {lbl.name: lbl.id for lbl in self.labels}


@dataclasses.dataclass(frozen=True)
class LabelDelta:
    """The labels to add to and remove from a pull request."""
    to_add: FrozenSet[LabelName] = frozenset()
    to_remove: FrozenSet[LabelName] = frozenset()

    def __bool__(self):
        return bool(self.to_add or self.to_remove)


@dataclasses.dataclass(frozen=True)
class CallError:
    """
    Why a remote or subprocess call failed.
    """
    # The orchestration step that made the call: "fetch-snapshot", etc.
    step: str
    # The request that failed, like "POST https://api.github.com/graphql".
    context: str
    message: str

    def __str__(self):
        return f"{self.step} failed: {self.context}: {self.message}"


@dataclasses.dataclass(frozen=True)
class CallResult(Generic[T]):
    """Either the value a call produced, or the error it failed with."""
    value: Optional[T] = None
    error: Optional[CallError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclasses.dataclass(frozen=True)
class RunContext:
    """
    Everything a labeling run needs to know, built once at startup.
    """
    prid: PrId
    # Path of the rule file, relative to the repository root.
    config_path: str
    dry_run: bool = False


# Changed file paths, relative to the repository root.
ChangedFiles = List[str]
