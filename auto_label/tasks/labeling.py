"""
Queuable background task to label a pull request from a webhook event.
"""

import functools
from typing import Dict

from auto_label import celery, settings
from auto_label.diffs import CompareDiffer
from auto_label.labeling import LabelingReport, label_pull_request
from auto_label.rules import read_repo_rules
from auto_label.tasks import logger
from auto_label.types import PrId, RunContext
from auto_label.utils import sentry_extra_context


@celery.task(bind=True)
def label_pull_request_task(_, repo: str, number: int) -> Dict:
    """A bound Celery task to call label_pull_request_from_github."""
    try:
        report = label_pull_request_from_github(repo, number)
    except Exception:
        logger.exception("Couldn't label_pull_request_task")
        raise
    return report.as_json()


def label_pull_request_from_github(repo: str, number: int, dry_run: bool = False) -> LabelingReport:
    """
    Label a pull request with no local checkout: the rule file is read from
    the repo's default branch, and the changed files come from GitHub.
    """
    prid = PrId(repo, number)
    logger.info(f"Labeling PR {prid}...")
    sentry_extra_context({"prid": str(prid)})
    ctx = RunContext(
        prid=prid,
        config_path=settings.AUTO_LABEL_CONFIG_FILE,
        dry_run=dry_run,
    )
    report = label_pull_request(
        ctx,
        read_rules=functools.partial(read_repo_rules, repo),
        differ=CompareDiffer(repo),
    )
    logger.info(f"Labeled PR {prid}: {report.conclusion.name.lower()}: {report.message}")
    return report
