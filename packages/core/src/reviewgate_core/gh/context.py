"""Identify the pull request a check runs against.

In GitHub Actions the runner describes the triggering event through
environment variables: ``GITHUB_REPOSITORY`` holds ``owner/name`` and
``GITHUB_EVENT_PATH`` points at the webhook payload as JSON. Explicit values
from the command line always take precedence.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from reviewgate_core.errors import ConfigurationError


@dataclass(frozen=True)
class PullRequestRef:
    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"


def _split_repo(full_name: str) -> tuple[str, str]:
    owner, _, name = full_name.partition("/")
    if not owner or not name or "/" in name:
        raise ConfigurationError(f"{full_name!r} is not a valid OWNER/REPO format.")
    return owner, name


def _number_from_event(event_path: str) -> int | None:
    path = Path(event_path)
    if not path.exists():
        raise ConfigurationError(f"GitHub event payload not found: {event_path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"GitHub event payload is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ConfigurationError("GitHub event payload must be a JSON object")
    pull_request = payload.get("pull_request") or {}
    if not isinstance(pull_request, dict):
        raise ConfigurationError("GitHub event payload has a malformed pull_request field")
    number = pull_request.get("number", payload.get("number"))
    if number is None:
        return None
    # bool is an int subclass but never a PR number.
    if isinstance(number, bool):
        raise ConfigurationError(f"Invalid pull request number in event payload: {number!r}")
    try:
        return int(number)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid pull request number in event payload: {number!r}") from e


def resolve_ref(
    repo: str | None = None,
    number: int | None = None,
    environ: Mapping[str, str] | None = None,
) -> PullRequestRef:
    """Build a PullRequestRef from explicit values, falling back to the Actions environment."""
    env = os.environ if environ is None else environ

    full_name = repo or env.get("GITHUB_REPOSITORY")
    if not full_name:
        raise ConfigurationError("Repository not provided. Pass --repo or set GITHUB_REPOSITORY.")
    owner, name = _split_repo(full_name)

    if number is None:
        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path:
            number = _number_from_event(event_path)
    if number is None:
        raise ConfigurationError("Pull request number not provided. Pass --pr or run on a pull_request event.")

    return PullRequestRef(owner=owner, repo=name, number=number)
