#!/usr/bin/env python
"""
Label a pull request from inside a GitHub Actions job.
"""

import functools
import json
import sys

import click

from auto_label import settings
from auto_label.diffs import GitDiffer
from auto_label.labeling import Conclusion, label_pull_request
from auto_label.rules import read_rules_file
from auto_label.types import PrId, RunContext


def number_from_event(event_path):
    """
    Get the pull request number from a GitHub event payload file.

    Returns None if the event isn't one we label for.
    """
    with open(event_path) as f:
        event = json.load(f)
    if "pull_request" not in event:
        return None
    if event.get("action") not in settings.PR_ACTIONS:
        return None
    return event["pull_request"]["number"]


@click.command()
@click.option(
    '--repo',
    envvar='GITHUB_REPOSITORY',
    required=True,
    help="The repository, as owner/name.",
)
@click.option(
    '--number',
    type=int,
    help="The pull request number.  Defaults to the one in the event payload.",
)
@click.option(
    '--event-path',
    envvar='GITHUB_EVENT_PATH',
    type=click.Path(exists=True, dir_okay=False),
    help="The GitHub event payload.",
)
@click.option(
    '--workspace',
    envvar='GITHUB_WORKSPACE',
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="The checked-out repository.",
)
@click.option(
    '--config-file',
    help="The rule file, relative to the workspace.",
)
@click.option(
    '--dry-run',
    is_flag=True,
    help="Compute the label changes, but don't make them.",
)
def cli(repo, number, event_path, workspace, config_file, dry_run):
    """
    Add and remove labels on a pull request based on the files it changes.

    Note that you must set the environment variable $GITHUB_TOKEN (or
    $GITHUB_PERSONAL_TOKEN) to a token that can label pull requests.

    Exits with 0 on success, 1 on failure, and 78 (neutral) if the repo has
    no rule file or the event isn't a pull request being opened or updated.
    """
    if number is None:
        if not event_path:
            raise click.UsageError("Provide --number, or an event payload with --event-path.")
        number = number_from_event(event_path)
        if number is None:
            click.echo("Event is not a pull request being opened or synchronized.")
            sys.exit(Conclusion.NEUTRAL.value)

    ctx = RunContext(
        prid=PrId(repo, number),
        config_path=config_file or settings.AUTO_LABEL_CONFIG_FILE,
        dry_run=dry_run,
    )
    report = label_pull_request(
        ctx,
        read_rules=functools.partial(read_rules_file, workspace),
        differ=GitDiffer(workspace),
    )
    click.echo(report.message)
    if dry_run:
        click.echo(json.dumps(report.as_json(), indent=4))
    sys.exit(report.conclusion.value)


if __name__ == '__main__':
    cli()
