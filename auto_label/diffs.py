"""
Finding the files a pull request changed.

Both differs compare head against the merge base of head and base, so changes
made on the base branch after the pull request started don't count.
"""

import logging
import subprocess
from typing import List

from auto_label.auth import get_github_session
from auto_label.types import CallResult
from auto_label.utils import CallFailed, capture_call, log_check_response

logger = logging.getLogger(__name__)


class DiffFailed(CallFailed):
    pass


class GitDiffer:
    """
    Use git in a local checkout of the repository.
    """
    def __init__(self, workspace: str, git: str = "git") -> None:
        self.workspace = workspace
        self.git = git

    def _git(self, *args: str) -> str:
        command = [self.git, *args]
        context = " ".join(command)
        try:
            proc = subprocess.run(
                command,
                cwd=self.workspace,
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except OSError as exc:
            raise DiffFailed(f"Couldn't run git: {exc}", context=context) from exc
        if proc.returncode != 0:
            raise DiffFailed(
                f"exited with status {proc.returncode}: {proc.stderr.strip()}",
                context=context,
            )
        if proc.stderr.strip():
            logger.warning(f"{context} wrote to stderr: {proc.stderr.strip()}")
        return proc.stdout

    def _changed_files(self, head: str, base: str) -> List[str]:
        merge_base = self._git("merge-base", head, base).strip()
        # -z: paths come out verbatim, NUL-terminated, instead of C-quoted.
        stdout = self._git("-c", "core.quotePath=false", "diff", "--name-only", "-z", merge_base, head)
        return [path for path in stdout.split("\0") if path]

    def changed_files(self, head: str, base: str) -> CallResult[List[str]]:
        return capture_call("compute-diff", self._changed_files, head, base)


class CompareDiffer:
    """
    Use GitHub's three-dot compare, for when there's no checkout.

    GitHub lists at most 300 files in a comparison.
    """
    def __init__(self, repo_fullname: str) -> None:
        self.repo_fullname = repo_fullname

    def _changed_files(self, head: str, base: str) -> List[str]:
        url = f"/repos/{self.repo_fullname}/compare/{base}...{head}"
        resp = get_github_session().get(url)
        log_check_response(resp)
        return [f["filename"] for f in resp.json().get("files", [])]

    def changed_files(self, head: str, base: str) -> CallResult[List[str]]:
        return capture_call("compute-diff", self._changed_files, head, base)
