"""
The labeling policy: which labels a pull request should have, and what to
change to get there.
"""

import logging
from typing import AbstractSet, Dict, Iterable, List, Set

from auto_label.matching import matches
from auto_label.types import LabelDelta, LabelName, RuleTable

logger = logging.getLogger(__name__)


def classify(files: Iterable[str], rules: RuleTable) -> Set[LabelName]:
    """
    Compute the labels justified by the changed `files`.

    A label is included if any file matches any of its patterns.
    """
    desired: Set[LabelName] = set()
    for file_path in files:
        for label, pattern in rules.items():
            if label not in desired and matches(file_path, pattern):
                desired.add(label)
    return desired


def compute_delta(
    desired: AbstractSet[LabelName],
    current: AbstractSet[LabelName],
    ruled: AbstractSet[LabelName],
) -> LabelDelta:
    """
    Compare the desired and current labels on a pull request.

    Labels not governed by a rule are never removed, even if nothing in the
    diff justifies them.
    """
    to_add = frozenset(desired) - frozenset(current)
    to_remove = (frozenset(current) - frozenset(desired)) & frozenset(ruled)
    return LabelDelta(to_add=to_add, to_remove=to_remove)


def label_ids(catalog: Dict[LabelName, str], names: Iterable[LabelName]) -> List[str]:
    """
    Get the node ids of the labels named `names`.

    Labels that don't exist in the repository are skipped with a warning:
    we don't create labels.
    """
    ids = []
    for name in sorted(names):
        label_id = catalog.get(name)
        if label_id is None:
            logger.warning(f"Label {name!r} is not defined in the repository, skipping it")
            continue
        ids.append(label_id)
    return ids
