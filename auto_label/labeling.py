"""
Running the labeling policy against one pull request.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Set

from auto_label.gh_labels import (
    add_labels_to_labelable,
    get_pull_request_and_labels,
    remove_labels_from_labelable,
)
from auto_label.policy import classify, compute_delta, label_ids
from auto_label.rules import RulesError
from auto_label.types import (
    CallError,
    CallResult,
    ChangedFiles,
    LabelDelta,
    LabelName,
    PrSnapshot,
    RuleTable,
    RunContext,
)
from auto_label.utils import capture_call

logger = logging.getLogger(__name__)


class Conclusion(enum.Enum):
    """How a run ended.  The values are the process exit statuses."""
    SUCCESS = 0
    FAILURE = 1
    NEUTRAL = 78


class Differ(Protocol):
    def changed_files(self, head: str, base: str) -> CallResult[ChangedFiles]:
        ...


# Reads the rule table from a config path, or returns None if there is none.
RulesReader = Callable[[str], Optional[RuleTable]]


@dataclass
class LabelingReport:
    """
    What happened during a run.
    """
    conclusion: Conclusion = Conclusion.SUCCESS
    message: str = ""
    changed_files: ChangedFiles = field(default_factory=list)
    desired: Set[LabelName] = field(default_factory=set)
    delta: LabelDelta = field(default_factory=LabelDelta)
    errors: List[CallError] = field(default_factory=list)

    def as_json(self) -> Dict:
        return {
            "conclusion": self.conclusion.name.lower(),
            "message": self.message,
            "changed_files": self.changed_files,
            "desired": sorted(self.desired),
            "to_add": sorted(self.delta.to_add),
            "to_remove": sorted(self.delta.to_remove),
            "errors": [str(err) for err in self.errors],
        }


class LabelingActions:
    """
    The actions that change a pull request on GitHub.
    """
    def add_labels(self, *, labelable_id: str, label_ids: List[str]) -> CallResult[None]:
        return add_labels_to_labelable(labelable_id, label_ids)

    def remove_labels(self, *, labelable_id: str, label_ids: List[str]) -> CallResult[None]:
        return remove_labels_from_labelable(labelable_id, label_ids)


class DryRunLabelingActions:
    """
    Record the actions that would be taken, without taking them.
    """
    def __init__(self):
        self.action_calls: List = []

    def add_labels(self, *, labelable_id: str, label_ids: List[str]) -> CallResult[None]:
        self.action_calls.append(("add_labels", {"labelable_id": labelable_id, "label_ids": label_ids}))
        return CallResult()

    def remove_labels(self, *, labelable_id: str, label_ids: List[str]) -> CallResult[None]:
        self.action_calls.append(("remove_labels", {"labelable_id": labelable_id, "label_ids": label_ids}))
        return CallResult()


class PrLabeler:
    """
    Compare the labels a pull request has with the labels its changes call
    for, and fix the difference.
    """

    def __init__(
        self,
        ctx: RunContext,
        read_rules: RulesReader,
        differ: Differ,
        actions: LabelingActions | DryRunLabelingActions | None = None,
    ) -> None:
        self.ctx = ctx
        self.read_rules = read_rules
        self.differ = differ
        if actions is None:
            actions = DryRunLabelingActions() if ctx.dry_run else LabelingActions()
        self.actions = actions
        self.report = LabelingReport()

    def _fail(self, message: str, error: Optional[CallError] = None) -> LabelingReport:
        self.report.conclusion = Conclusion.FAILURE
        self.report.message = message
        if error is not None:
            self.report.errors.append(error)
        logger.error(f"{self.ctx.prid}: {message}")
        return self.report

    def run(self) -> LabelingReport:
        """
        The main routine: rules, snapshot, diff, policy, then changes.
        """
        prid = self.ctx.prid

        try:
            rules_result = capture_call("read-rules", self.read_rules, self.ctx.config_path)
        except RulesError as exc:
            return self._fail(f"Invalid rule file: {exc}")
        if not rules_result.ok:
            return self._fail("Couldn't read the rule file", rules_result.error)
        rules = rules_result.value
        if rules is None:
            self.report.conclusion = Conclusion.NEUTRAL
            self.report.message = f"Rule file {self.ctx.config_path} does not exist."
            logger.info(f"{prid}: {self.report.message}")
            return self.report

        snapshot_result = get_pull_request_and_labels(prid)
        snapshot = snapshot_result.value
        if snapshot is None:
            return self._fail("Couldn't get the pull request and labels", snapshot_result.error)

        diff_result = self.differ.changed_files(snapshot.head_ref, snapshot.base_ref)
        if diff_result.value is None:
            return self._fail("Couldn't compute the changed files", diff_result.error)
        self.report.changed_files = list(diff_result.value)

        self._compute(rules, snapshot)
        self._reconcile(snapshot)

        if self.report.errors:
            return self._fail("Couldn't update the labels")
        self.report.message = "Labels are up to date."
        return self.report

    def _compute(self, rules: RuleTable, snapshot: PrSnapshot) -> None:
        current = snapshot.label_names
        ruled = set(rules)
        self.report.desired = classify(self.report.changed_files, rules)
        self.report.delta = compute_delta(self.report.desired, current, ruled)

        prid = self.ctx.prid
        logger.info(f"{prid}: current labels: {sorted(current)}")
        logger.info(f"{prid}: changed files: {self.report.changed_files}")
        logger.info(f"{prid}: desired labels: {sorted(self.report.desired)}")
        logger.info(f"{prid}: ruled labels: {sorted(ruled)}")
        logger.info(f"{prid}: labels to add: {sorted(self.report.delta.to_add)}")
        logger.info(f"{prid}: labels to remove: {sorted(self.report.delta.to_remove)}")

    def _reconcile(self, snapshot: PrSnapshot) -> None:
        """
        Make the changes.  Adding and removing are independent: both are
        attempted even if the first one fails.

        Labels to add are looked up in the repository's labels, labels to
        remove are already on the pull request.
        """
        delta = self.report.delta

        if delta.to_add:
            ids = label_ids(snapshot.catalog_ids(), delta.to_add)
            if ids:
                result = self.actions.add_labels(labelable_id=snapshot.labelable_id, label_ids=ids)
                if result.error is not None:
                    self.report.errors.append(result.error)
                else:
                    logger.info(f"{self.ctx.prid}: added labels")

        if delta.to_remove:
            ids = label_ids(snapshot.pr_label_ids(), delta.to_remove)
            if ids:
                result = self.actions.remove_labels(labelable_id=snapshot.labelable_id, label_ids=ids)
                if result.error is not None:
                    self.report.errors.append(result.error)
                else:
                    logger.info(f"{self.ctx.prid}: removed labels")


def label_pull_request(
    ctx: RunContext,
    read_rules: RulesReader,
    differ: Differ,
    actions: LabelingActions | DryRunLabelingActions | None = None,
) -> LabelingReport:
    """Run the labeling policy once for the pull request in `ctx`."""
    return PrLabeler(ctx, read_rules, differ, actions=actions).run()
