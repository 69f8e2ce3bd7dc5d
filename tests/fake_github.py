"""
A fake implementation of the parts of the GitHub REST and GraphQL APIs that
the labeler uses.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from . import faker
from .helpers import check_good_graphql


class FakeGitHubException(faker.FakerException):
    def as_json(self) -> Dict:
        j = {"message": str(self)}
        return j

class DoesNotExist(FakeGitHubException):
    """A requested object does not exist."""
    status_code = 404

def fake_sha():
    """A realistic stand-in for a commit sha."""
    return "".join(random.choice("0123456789abcdef") for c in range(40))

def fake_node_id(prefix="NODE"):
    """A plausible stand-in for a node id."""
    return f"{prefix}_" + "".join(random.choice("0123456789abcdef") for c in range(16))


@dataclass
class Label:
    name: str
    node_id: str = field(default_factory=lambda: fake_node_id("LA"))

    def as_node(self) -> Dict:
        return {"node": {"id": self.node_id, "name": self.name}}


DEFAULT_LABELS = [
    "bug",
    "documentation",
    "duplicate",
    "enhancement",
    "good first issue",
    "help wanted",
    "invalid",
    "question",
    "wontfix",
]


@dataclass
class PullRequest:
    repo: Repo
    number: int
    node_id: str = field(default_factory=lambda: fake_node_id("PR"))
    head_sha: str = field(default_factory=fake_sha)
    base_sha: str = field(default_factory=fake_sha)
    labels: Set[str] = field(default_factory=set)

    def as_json(self) -> Dict:
        return {
            "number": self.number,
            "node_id": self.node_id,
            "labels": [{"name": lbl} for lbl in sorted(self.labels)],
            "base": {
                "repo": self.repo.as_json(),
                "sha": self.base_sha,
            },
            "head": {
                "sha": self.head_sha,
            },
        }

    def set_labels(self, labels: Iterable[str]) -> None:
        """
        Set the labels on this pull request, defining them in the repo if needed.
        """
        labels = set(labels)
        for label in labels:
            if not self.repo.has_label(label):
                self.repo.add_label(label)
        self.labels = labels

    def set_changed_files(self, files: List[str]) -> None:
        """Set the files GitHub reports as changed by this pull request."""
        self.repo.comparisons[(self.base_sha, self.head_sha)] = list(files)


@dataclass
class Repo:
    github: FakeGitHub
    owner: str
    repo: str
    labels: Dict[str, Label] = field(default_factory=dict)
    pull_requests: Dict[int, PullRequest] = field(default_factory=dict)
    # Files on the default branch, path to text.
    files: Dict[str, str] = field(default_factory=dict)
    # Changed files, keyed by (base, head).
    comparisons: Dict[Tuple[str, str], List[str]] = field(default_factory=dict)

    @property
    def full_name(self):
        return f"{self.owner}/{self.repo}"

    def as_json(self) -> Dict:
        return {
            "full_name": self.full_name,
            "name": self.repo,
            "owner": {
                "login": self.owner,
            },
        }

    def make_pull_request(self, number=None, **kwargs) -> PullRequest:
        if number is None:
            highest = max(self.pull_requests.keys(), default=10)
            number = highest + random.randint(10, 20)
        pr = PullRequest(self, number, **kwargs)
        self.pull_requests[number] = pr
        self.github.pr_nodes[pr.node_id] = pr
        return pr

    def get_pull_request(self, number: int) -> PullRequest:
        try:
            return self.pull_requests[number]
        except KeyError:
            raise DoesNotExist(f"Could not resolve to a PullRequest with the number of {number}.")

    def has_label(self, name: str) -> bool:
        return name in self.labels

    def add_label(self, name: str) -> Label:
        label = Label(name)
        self.labels[name] = label
        self.github.label_nodes[label.node_id] = label
        return label

    def label_id(self, name: str) -> str:
        return self.labels[name].node_id


class FakeGitHub(faker.Faker):

    def __init__(self, login) -> None:
        super().__init__(host="https://api.github.com")
        self.login = login
        self.repos: Dict[str, Repo] = {}

        # Map from PR node id to pull request.
        self.pr_nodes: Dict[str, PullRequest] = {}
        # Map from label node id to label.
        self.label_nodes: Dict[str, Label] = {}

        # Names of GraphQL operations that should fail.
        self.failing_graphql: Set[str] = set()

    def make_repo(self, owner: str, repo: str) -> Repo:
        r = Repo(self, owner, repo)
        for name in DEFAULT_LABELS:
            r.add_label(name)
        self.repos[f"{owner}/{repo}"] = r
        return r

    def get_repo(self, owner: str, repo: str) -> Repo:
        try:
            return self.repos[f"{owner}/{repo}"]
        except KeyError:
            raise DoesNotExist(f"Could not resolve to a Repository with the name '{owner}/{repo}'.")

    def make_pull_request(self, owner: str = "an-org", repo: str = "a-repo", **kwargs) -> PullRequest:
        """Convenience: make a repo and a pull request."""
        rep = self.make_repo(owner, repo)
        pr = rep.make_pull_request(**kwargs)
        return pr

    def install_mocks(self, requests_mocker) -> None:
        super().install_mocks(requests_mocker)
        requests_mocker.get(RAW_REGEX, text=self._raw_file)

    # Raw files

    def _raw_file(self, request, context) -> Optional[str]:
        m = RAW_REGEX.fullmatch(request.url)
        assert m, f"{request.url = }"
        repo = self.repos.get(f"{m['owner']}/{m['repo']}")
        if repo is None or m["path"] not in repo.files:
            context.status_code = 404
            return "404: Not Found"
        return repo.files[m["path"]]

    # Users

    @faker.route(r"/user")
    def _get_user(self, _match, _request, _context) -> Dict:
        return {"login": self.login}

    # Comparisons

    @faker.route(r"/repos/(?P<owner>[^/]+)/(?P<repo>[^/]+)/compare/(?P<base>[^.]+)\.\.\.(?P<head>[^/?]+)")
    def _get_compare(self, match, _request, _context) -> Dict:
        # https://docs.github.com/en/rest/commits/commits#compare-two-commits
        r = self.get_repo(match["owner"], match["repo"])
        files = r.comparisons.get((match["base"], match["head"]))
        if files is None:
            raise DoesNotExist("Not Found")
        return {
            "status": "ahead",
            "files": [{"filename": f, "status": "modified"} for f in files],
        }

    # GraphQL

    @faker.route(r"/graphql", "POST")
    def _graphql(self, _match, request, _context) -> Dict:
        """Dispatch a GraphQL request."""
        data = request.json()
        query = data["query"]
        check_good_graphql(query)
        slug = query.split()[1]
        kwargs = data["variables"]
        if slug in self.failing_graphql:
            return {"data": None, "errors": [{"type": "FORBIDDEN", "message": f"{slug} is not allowed"}]}
        method = getattr(self, f"_graphql_{slug}", None)
        if method is None:
            raise Exception(f"Unknown GraphQL slug in FakeGitHub: {slug = }")
        try:
            return method(**kwargs)
        except DoesNotExist as exc:
            return {"data": None, "errors": [{"type": "NOT_FOUND", "message": str(exc)}]}

    def _graphql_PullRequestAndLabels(self, owner: str, name: str, number: int) -> Dict:
        r = self.get_repo(owner, name)
        pr = r.get_pull_request(number)
        return {
            "data": {
                "repository": {
                    "pullRequest": {
                        "id": pr.node_id,
                        "baseRefOid": pr.base_sha,
                        "headRefOid": pr.head_sha,
                        "labels": {
                            "edges": [r.labels[lbl].as_node() for lbl in sorted(pr.labels)][:PAGE_SIZE],
                        },
                    },
                    "labels": self._label_page(r),
                }
            }
        }

    def _graphql_RepositoryLabels(self, owner: str, name: str, cursor: str) -> Dict:
        r = self.get_repo(owner, name)
        return {"data": {"repository": {"labels": self._label_page(r, after=cursor)}}}

    def _label_page(self, repo: Repo, after: Optional[str] = None) -> Dict:
        """
        A page of a repo's labels, in the order they were added.  Cursors are
        "cursor:N", with N the index of the last label returned.
        """
        start = 0 if after is None else int(after.split(":")[1]) + 1
        labels = list(repo.labels.values())
        page = labels[start:start + PAGE_SIZE]
        end = start + len(page)
        return {
            "pageInfo": {
                "hasNextPage": end < len(labels),
                "endCursor": f"cursor:{end - 1}" if page else None,
            },
            "edges": [lbl.as_node() for lbl in page],
        }

    def _pr_and_label_names(self, labelableId: str, labelIds: List[str]) -> Tuple[PullRequest, Set[str]]:
        pr = self.pr_nodes.get(labelableId)
        if pr is None:
            raise DoesNotExist(f"Could not resolve to a node with the global id of '{labelableId}'")
        names = set()
        for label_id in labelIds:
            label = self.label_nodes.get(label_id)
            if label is None:
                raise DoesNotExist(f"Could not resolve to a node with the global id of '{label_id}'")
            names.add(label.name)
        return pr, names

    def _graphql_AddLabels(self, labelableId: str, labelIds: List[str]) -> Dict:
        pr, names = self._pr_and_label_names(labelableId, labelIds)
        pr.labels |= names
        return {"data": {"addLabelsToLabelable": {"clientMutationId": None}}}

    def _graphql_RemoveLabels(self, labelableId: str, labelIds: List[str]) -> Dict:
        pr, names = self._pr_and_label_names(labelableId, labelIds)
        pr.labels -= names
        return {"data": {"removeLabelsFromLabelable": {"clientMutationId": None}}}


# GraphQL connections are fetched with "first: 100".
PAGE_SIZE = 100

RAW_REGEX = re.compile(r"https://raw\.githubusercontent\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+)/HEAD/(?P<path>.*)")
