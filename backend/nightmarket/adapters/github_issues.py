from typing import Dict, List, Optional

import requests
from requests.exceptions import RequestException

from nightmarket.config import GitHubConfig
from nightmarket.utils.log import get_logger

DEFAULT_LABELS = ["codex-request", "theme"]

log = get_logger("github")


class IssueCreationError(Exception):
    """The issue tracker refused or failed the request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubIssueClient:
    """
    Minimal GitHub REST client: creates issues in one repository.
    create_issue returns the issue JSON ({number, html_url, title, ...}).
    """

    def __init__(self, config: GitHubConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    @property
    def issues_url(self) -> str:
        return f"{self.config.api_url}/repos/{self.config.owner}/{self.config.repo}/issues"

    def create_issue(self, title: str, body: str = "", labels: Optional[List[str]] = None) -> Dict:
        payload = {
            "title": title,
            "body": body or "",
            "labels": list(labels) if labels else list(DEFAULT_LABELS),
        }
        try:
            resp = self.session.post(self.issues_url, json=payload)
        except RequestException as e:
            raise IssueCreationError(f"Issue request failed: {e}")
        if resp.status_code >= 400:
            raise IssueCreationError(
                f"GitHub responded {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        issue = resp.json()
        log.info("Created issue #%s in %s/%s", issue.get("number"), self.config.owner, self.config.repo)
        return issue
