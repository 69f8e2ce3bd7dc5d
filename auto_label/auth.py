"""
Create authenticated sessions for access to GitHub.
"""

import requests
from urlobject import URLObject

from auto_label import __version__, settings


class BaseUrlSession(requests.Session):
    """
    A requests Session class that applies a base URL to the requested URL.

    Absolute URLs (like raw.githubusercontent.com) are left alone.
    """
    def __init__(self, base_url):
        super().__init__()
        self.base_url = URLObject(base_url)

    def request(self, method, url, data=None, headers=None, **kwargs):
        return super().request(
            method=method,
            url=self.base_url.relative(url),
            data=data,
            headers=headers,
            **kwargs
        )


def get_github_session():
    """
    Get the GitHub session to use, in an easily test-patchable way.

    A fresh session every time: nothing is shared between runs.
    """
    session = BaseUrlSession(base_url="https://api.github.com")
    session.headers["Authorization"] = f"token {settings.GITHUB_PERSONAL_TOKEN}"
    session.headers["Accept"] = "application/vnd.github+json"
    session.headers["User-Agent"] = f"auto_label/{__version__}"
    session.trust_env = False   # prevent reading the local .netrc
    return session
