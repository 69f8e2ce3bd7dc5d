"""
Generic utilities.
"""

import hmac
import os
from functools import wraps
from hashlib import sha1
from typing import Callable, Dict, TypeVar

import requests
import sentry_sdk
from flask import jsonify, request, Response, url_for
from glom import GlomError

from auto_label import logger
from auto_label.auth import get_github_session
from auto_label.types import CallError, CallResult

T = TypeVar("T")


def _check_auth(username, password):
    """
    Checks if a username / password combination is valid.
    """
    return (
        username == os.environ.get('HTTP_BASIC_AUTH_USERNAME') and
        password == os.environ.get('HTTP_BASIC_AUTH_PASSWORD')
    )

def _authenticate():
    """
    Sends a 401 response that enables basic auth
    """
    return Response(
        'Could not verify your access level for that URL.\n'
        'You have to login with proper credentials', 401,
        {'WWW-Authenticate': 'Basic realm="Login Required"'}
    )

def requires_auth(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not _check_auth(auth.username, auth.password):
            return _authenticate()
        return f(*args, **kwargs)
    return decorated


class CallFailed(Exception):
    """
    A call to something outside of our process failed.

    `context` describes the call, like "POST https://api.github.com/graphql".
    """
    def __init__(self, message, context=""):
        super().__init__(message)
        self.context = context


class RequestFailed(CallFailed):
    pass


class GraphQLError(RequestFailed):
    pass


def request_context(req) -> str:
    """A short description of a requests.PreparedRequest."""
    if req is None:
        return ""
    return f"{req.method} {req.url}"


def log_check_response(response, raise_for_status=True):
    """
    Logs HTTP request and response at debug level and checks if it succeeded.

    Arguments:
        response (requests.Response)
        raise_for_status (bool): if True, call raise_for_status on the response
            also.
    """
    msg = "Request: {0.method} {0.url}: {0.body!r}".format(response.request)
    logger.debug(msg)
    msg = "Response: {0.status_code} {0.reason!r} for {0.url}: {0.content!r}".format(response)
    logger.debug(msg)
    if raise_for_status:
        try:
            response.raise_for_status()
        except Exception as exc:
            req = response.request
            raise RequestFailed(
                f"HTTP request failed: {req.method} {req.url}. Response body: {response.content}",
                context=request_context(req),
            ) from exc


def is_valid_payload(secret: str, signature: str, payload: bytes) -> bool:
    """
    Ensure payload is valid according to signature.

    Make sure the payload hashes to the signature as calculated using
    the shared secret.

    Arguments:
        secret (str): The shared secret
        signature (str): Signature as calculated by the server, sent in
            the request
        payload (bytes): The request payload

    Returns:
        bool: Is the payload legit?
    """
    if not secret or not signature:
        return False
    mac = hmac.new(secret.encode(), msg=payload, digestmod=sha1)
    digest = 'sha1=' + mac.hexdigest()
    return hmac.compare_digest(digest.encode(), signature.encode())


def graphql_query(query: str, variables: Dict = {}) -> Dict:    # pylint: disable=dangerous-default-value
    """
    Make a GraphQL query against GitHub.
    """
    url = "https://api.github.com/graphql"
    body = {
        "query": query,
        "variables": variables,
    }
    response = get_github_session().post(url, json=body)
    log_check_response(response)
    returned = response.json()
    if "errors" in returned and returned["errors"]:
        raise GraphQLError(f"GraphQL error: {returned!r}", context=request_context(response.request))
    return returned["data"]


def capture_call(step: str, func: Callable[..., T], *args, **kwargs) -> CallResult[T]:
    """
    Call `func`, and return its value or its failure as a CallResult.

    Only failures of the outside world are captured: bugs in our own code
    still raise.
    """
    try:
        return CallResult(value=func(*args, **kwargs))
    except CallFailed as exc:
        error = CallError(step=step, context=exc.context, message=str(exc))
    except requests.RequestException as exc:
        error = CallError(step=step, context=request_context(exc.request), message=str(exc))
    except GlomError as exc:
        error = CallError(step=step, context="unexpected response", message=str(exc))
    logger.error(f"Request failed: {error.context}: {error.message}")
    return CallResult(error=error)


def minimal_wsgi_environ():
    values = {
        "HTTP_HOST", "SERVER_NAME", "SERVER_PORT", "REQUEST_METHOD",
        "SCRIPT_NAME", "PATH_INFO", "QUERY_STRING", "wsgi.url_scheme",
    }
    return {key: value for key, value in request.environ.items()
            if key in values}


def queue_task(task, *args, **kwargs):
    """
    Queue a task to run in the background via Celery.

    Returns the HTTP response to return from a view.
    """
    result = task.delay(*args, wsgi_environ=minimal_wsgi_environ(), **kwargs)
    status_url = url_for("tasks.status", task_id=result.id, _external=True)
    logger.info(f"Job status URL: {status_url}")
    resp = jsonify({"message": "queued", "status_url": status_url})
    resp.status_code = 202
    resp.headers["Location"] = status_url
    return resp


def sentry_extra_context(data_dict):
    """Apply the keys and values from data_dict to the Sentry extra context."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
