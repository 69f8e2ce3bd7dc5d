"""Settings for how the labeler should behave."""

import os

# The token used for the GitHub REST and GraphQL APIs.  In a GitHub Actions
# job the runner provides GITHUB_TOKEN.
GITHUB_PERSONAL_TOKEN = os.environ.get(
    "GITHUB_PERSONAL_TOKEN", os.environ.get("GITHUB_TOKEN", None)
)

# Where the rule file lives, relative to the repository root.
AUTO_LABEL_CONFIG_FILE = os.environ.get("AUTO_LABEL_CONFIG_FILE", ".github/auto-label.json")

# Pull request actions that should trigger labeling.
PR_ACTIONS = {
    "opened",
    "synchronize",
}
