from __future__ import annotations

import os
from dataclasses import dataclass

from github import Auth, Github

from reviewgate_core.gh.context import PullRequestRef

_DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class PullRequestSnapshot:
    """Labels and requested reviewers as they were when the PR was fetched."""

    ref: PullRequestRef
    labels: frozenset[str]
    requested_reviewers: frozenset[str]


def get_repo(repo_name: str, token: str, base_url: str | None = None):
    base_url = base_url or os.environ.get("GITHUB_API_URL") or _DEFAULT_API_URL
    return Github(auth=Auth.Token(token), base_url=base_url).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def fetch_snapshot(pull, ref: PullRequestRef) -> PullRequestSnapshot:
    # requested_reviewers only lists users; team review requests are not logins.
    return PullRequestSnapshot(
        ref=ref,
        labels=frozenset(label.name for label in pull.labels),
        requested_reviewers=frozenset(user.login for user in pull.requested_reviewers),
    )


def find_advisory_comments(pull, prefix: str) -> list:
    """Return the PR's conversation comments whose body starts with prefix, oldest first."""
    return [c for c in pull.get_issue_comments() if (c.body or "").startswith(prefix)]
