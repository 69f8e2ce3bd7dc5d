"""
Reading and validating the rule file.

The rule file is JSON, mapping label names to a glob pattern or a list of glob
patterns::

    {
        "rules": {
            "docs": "docs/**",
            "ci": [".github/**", "*.yml"]
        }
    }

"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from auto_label.auth import get_github_session
from auto_label.types import MultiplePatterns, PatternSpec, RuleTable, SinglePattern

logger = logging.getLogger(__name__)


class RulesError(Exception):
    """The rule file can't be used."""


def _pattern_spec(label: str, value: Any) -> PatternSpec:
    if isinstance(value, str):
        if not value:
            raise RulesError(f"Rule for label {label!r} has an empty pattern")
        return SinglePattern(value)
    if isinstance(value, list):
        if not value:
            raise RulesError(f"Rule for label {label!r} has an empty list of patterns")
        for pattern in value:
            if not isinstance(pattern, str) or not pattern:
                raise RulesError(f"Rule for label {label!r} has a bad pattern: {pattern!r}")
        return MultiplePatterns(tuple(value))
    raise RulesError(
        f"Rule for label {label!r} must be a pattern or a list of patterns, not {value!r}"
    )


def parse_rules(data: Any) -> RuleTable:
    """
    Validate the parsed JSON of a rule file, and make a RuleTable from it.

    Raises RulesError if the data doesn't have the expected shape.
    """
    if not isinstance(data, dict):
        raise RulesError(f"Rule file must be a JSON object, not {type(data).__name__}")
    rules = data.get("rules")
    if not isinstance(rules, dict):
        raise RulesError("Rule file must have a \"rules\" object")

    table: RuleTable = {}
    for label, value in rules.items():
        if not label.strip():
            raise RulesError("Rule file has an empty label name")
        table[label] = _pattern_spec(label, value)
    return table


def parse_rules_text(text: str, source: str = "rule file") -> RuleTable:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise RulesError(f"Couldn't parse {source} as JSON: {exc}") from exc
    return parse_rules(data)


def read_rules_file(workspace: str, config_path: str) -> Optional[RuleTable]:
    """
    Read the rule file from a checked-out repository.

    Returns None if there is no rule file.
    """
    path = Path(workspace) / config_path
    if not path.exists():
        logger.info(f"No rule file at {path}")
        return None
    return parse_rules_text(path.read_text(), source=str(path))


def _github_file_url(repo_fullname: str, file_path: str) -> str:
    """Get the GitHub url to retrieve the text of a file."""
    # HEAD is used here to get the tip of the repo, regardless of whether it
    # uses master or main.
    return f"https://raw.githubusercontent.com/{repo_fullname}/HEAD/{file_path}"


def read_github_file(repo_fullname: str, file_path: str) -> Optional[str]:
    """
    Read a file from the default branch of a GitHub repo.

    Returns None if the file (or repo) doesn't exist.  All other errors trying
    to access the file are raised as exceptions.
    """
    url = _github_file_url(repo_fullname, file_path)
    logger.debug(f"Grabbing rule file from: {url}")
    resp = get_github_session().get(url)
    if resp.status_code == 404:
        return None
    resp.raise_for_status()
    return resp.text


def read_repo_rules(repo_fullname: str, config_path: str) -> Optional[RuleTable]:
    """
    Read the rule file from the default branch of a GitHub repo.

    The default branch is used rather than the pull request, so that a pull
    request can't change the rules that label it.

    Returns None if there is no rule file.
    """
    text = read_github_file(repo_fullname, config_path)
    if text is None:
        logger.info(f"No rule file {config_path} in {repo_fullname}")
        return None
    return parse_rules_text(text, source=f"{repo_fullname}/{config_path}")
