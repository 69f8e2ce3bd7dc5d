"""
These are the views that process webhook events coming from Github.
"""

import logging

from flask import current_app as app
from flask import Blueprint, request

from auto_label import settings
from auto_label.debug import is_debug, log_long_json
from auto_label.tasks.labeling import label_pull_request_task
from auto_label.utils import is_valid_payload, queue_task, sentry_extra_context

github_bp = Blueprint('github_views', __name__)
logger = logging.getLogger(__name__)


@github_bp.route('/hook-receiver', methods=('POST',))
def hook_receiver():
    """
    Process incoming GitHub webhook events.

    1.  Make sure the payload hashes to the proper signature. If not,
        reject the request with http status of 403.
    2.  Send a job to the queue with details of the event.
    3.  Respond with http status 202.

    Returns:
        A response, or Tuple[str, int]: Message payload and HTTP status code
    """
    signature = request.headers.get("X-Hub-Signature")
    secret = app.config.get('GITHUB_WEBHOOKS_SECRET')
    if not is_valid_payload(secret, signature, request.data):   # type: ignore[arg-type]
        msg = "Rejecting because signature doesn't match!"
        logger.info(msg)
        return msg, 403

    event = request.get_json()

    action = event.get("action")
    repo = event.get("repository", {}).get("full_name")
    who = event.get("sender", {}).get("login", "someone")
    logger.info(f"Incoming GitHub event: {repo=!r}, {action=!r}, {who=!r}")
    if is_debug(__name__):
        log_long_json(logger, "Incoming GitHub event", event)

    sentry_extra_context({"event": event})

    match event:
        case {"pull_request": _}:
            return handle_pull_request_event(event)

        case {"zen": _, "hook": _}:
            # this is a ping
            logger.info(f"ping from {repo}")
            return "PONG"

        case _:
            # Ignore all other events.
            return "Thank you", 202


def handle_pull_request_event(event):
    """Handle a webhook event about a pull request."""

    pr_number = event["pull_request"]["number"]
    repo = event["repository"]["full_name"]
    action = event["action"]

    pr_activity = f"{repo} #{pr_number} {action!r}"
    if action in settings.PR_ACTIONS:
        logger.info(f"{pr_activity}, labeling...")
        return queue_task(label_pull_request_task, repo, pr_number)
    else:
        logger.info(f"{pr_activity}, ignoring...")
        return "Nothing for me to do", 200
