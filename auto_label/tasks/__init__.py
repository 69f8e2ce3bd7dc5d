"""
Celery tasks, and a view to see how they are doing.
"""

from celery.utils.log import get_task_logger
from flask import Blueprint, jsonify

from auto_label import celery, log_level
from auto_label.utils import requires_auth


# Set up Celery logging.
logger = get_task_logger(__name__)
logger.setLevel(log_level)

# /tasks/status/<task_id> reports the state and result of a queued task.
tasks = Blueprint('tasks', __name__)

@tasks.route('/status/<task_id>')
@requires_auth
def status(task_id):
    """The state of a task, and its report once it has finished."""
    result = celery.AsyncResult(task_id)
    return jsonify({
        "status": result.state,
        "info": result.info,
    })
