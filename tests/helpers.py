"""Helpers for tests."""

import json
import re

from auto_label.types import CallResult


def check_good_graphql(text: str) -> None:
    """
    Do some simple checks of a GraphQL query.

    Returns:
        Nothing.  Will raise an exception with a failure message if something
        is wrong.
    """
    # Remove all comments.
    code = re.sub(r"(?m)#.*$", "", text)

    # The first word should be "query" or "mutation".
    first = code.split(None, 1)[0]
    if first not in {"query", "mutation"}:
        raise ValueError(f"GraphQL query starts with wrong word: {text!r}")

    # Parens should be balanced.
    stack = []
    pairs = {")": "(", "}": "{", "]": "["}
    for ch in code:
        if ch in pairs.values():
            stack.append(ch)
        elif ch in pairs.keys():            # pylint: disable=consider-iterating-dictionary
            if not stack or stack[-1] != pairs[ch]:
                raise ValueError(f"GraphQL query has unbalanced parens: {text!r}")
            stack.pop()
    if stack:
        raise ValueError(f"GraphQL query has unbalanced parens: {text!r}")


def rules_json(rules) -> str:
    """The text of a rule file with these rules."""
    return json.dumps({"rules": rules}, indent=4)


class StubDiffer:
    """A differ that reports canned changed files, or a canned error."""
    def __init__(self, files=(), error=None):
        self.files = list(files)
        self.error = error
        self.calls = []

    def changed_files(self, head, base):
        self.calls.append((head, base))
        if self.error is not None:
            return CallResult(error=self.error)
        return CallResult(value=list(self.files))
