"""
Functions for reading and changing pull request labels with the GraphQL API.
"""

import logging
from typing import Dict, Iterator, List

from glom import glom

from auto_label.types import CallResult, Label, PrId, PrSnapshot
from auto_label.utils import capture_call, graphql_query

logger = logging.getLogger(__name__)

# The name of the query is used by FakeGitHub while testing.

PULL_REQUEST_AND_LABELS = """\
query PullRequestAndLabels (
  $owner: String!
  $name: String!
  $number: Int!
) {
  repository (owner: $owner, name: $name) {
    pullRequest (number: $number) {
      id
      baseRefOid
      headRefOid
      labels (first: 100) {
        edges {
          node {
            id
            name
          }
        }
      }
    }
    labels (first: 100) {
      pageInfo {
        hasNextPage
        endCursor
      }
      edges {
        node {
          id
          name
        }
      }
    }
  }
}
"""

REPOSITORY_LABELS = """\
query RepositoryLabels (
  $owner: String!
  $name: String!
  $cursor: String!
) {
  repository (owner: $owner, name: $name) {
    labels (first: 100, after: $cursor) {
      pageInfo {
        hasNextPage
        endCursor
      }
      edges {
        node {
          id
          name
        }
      }
    }
  }
}
"""

LABEL_EDGES = ("edges", [{"name": "node.name", "id": "node.id"}])


def _labels(edges: List) -> tuple:
    return tuple(Label(**lbl) for lbl in edges)


def _repository_labels(prid: PrId, page: Dict) -> Iterator[Label]:
    """
    Yield the labels in `page` of a repository's labels, and in the pages
    after it.
    """
    while True:
        yield from _labels(glom(page, LABEL_EDGES))
        if not glom(page, "pageInfo.hasNextPage"):
            break
        variables = {"owner": prid.owner, "name": prid.name, "cursor": glom(page, "pageInfo.endCursor")}
        logger.debug(f"Getting more repository labels: {variables}")
        data = graphql_query(query=REPOSITORY_LABELS, variables=variables)
        page = glom(data, "repository.labels")


def _fetch_snapshot(prid: PrId) -> PrSnapshot:
    variables = {"owner": prid.owner, "name": prid.name, "number": prid.number}
    logger.debug(f"Getting pull request and labels: {variables}")
    data = graphql_query(query=PULL_REQUEST_AND_LABELS, variables=variables)
    snapshot = glom(data, {
        "labelable_id": "repository.pullRequest.id",
        "head_ref": "repository.pullRequest.headRefOid",
        "base_ref": "repository.pullRequest.baseRefOid",
        "labels": ("repository.pullRequest.labels", LABEL_EDGES, _labels),
    })
    snapshot["catalog"] = tuple(_repository_labels(prid, glom(data, "repository.labels")))
    return PrSnapshot(**snapshot)


def get_pull_request_and_labels(prid: PrId) -> CallResult[PrSnapshot]:
    """
    Get a pull request's node id, head and base commits, and labels, along
    with all the labels defined in its repository.
    """
    return capture_call("fetch-snapshot", _fetch_snapshot, prid)


ADD_LABELS = """\
mutation AddLabels (
  $labelableId: ID!
  $labelIds: [ID!]!
) {
  addLabelsToLabelable (input: {labelableId: $labelableId, labelIds: $labelIds}) {
    clientMutationId
  }
}
"""

REMOVE_LABELS = """\
mutation RemoveLabels (
  $labelableId: ID!
  $labelIds: [ID!]!
) {
  removeLabelsFromLabelable (input: {labelableId: $labelableId, labelIds: $labelIds}) {
    clientMutationId
  }
}
"""


def add_labels_to_labelable(labelable_id: str, label_ids: List[str]) -> CallResult[None]:
    """Add labels (by node id) to a pull request (by node id)."""
    logger.info(f"Adding labels {label_ids} to {labelable_id}")
    variables = {"labelableId": labelable_id, "labelIds": label_ids}
    result = capture_call("add-labels", graphql_query, query=ADD_LABELS, variables=variables)
    return CallResult(error=result.error)


def remove_labels_from_labelable(labelable_id: str, label_ids: List[str]) -> CallResult[None]:
    """Remove labels (by node id) from a pull request (by node id)."""
    logger.info(f"Removing labels {label_ids} from {labelable_id}")
    variables = {"labelableId": labelable_id, "labelIds": label_ids}
    result = capture_call("remove-labels", graphql_query, query=REMOVE_LABELS, variables=variables)
    return CallResult(error=result.error)
