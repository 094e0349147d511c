"""GitHub token resolution.

Resolution order (stops at first success):
  1. The action's ``github-token`` input (INPUT_GITHUB-TOKEN)
  2. GITHUB_TOKEN environment variable
  3. `gh auth token` (GitHub CLI session, for local runs)
"""

from __future__ import annotations

import logging
import os
import subprocess

from reviewgate_core.config import action_input

logger = logging.getLogger(__name__)

_GH_TOKEN_CMD = ["gh", "auth", "token"]


def _token_from_gh_cli() -> str | None:
    try:
        completed = subprocess.run(_GH_TOKEN_CMD, capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI unavailable; no session token.")
        return None
    if completed.returncode != 0:
        logger.debug("gh CLI has no authenticated session.")
        return None
    return completed.stdout.strip() or None


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Never raises. A None result is reported by the check as a missing token.
    """
    for candidate in (action_input("github-token"), os.environ.get("GITHUB_TOKEN")):
        if candidate and candidate.strip():
            return candidate.strip()

    token = _token_from_gh_cli()
    if token:
        logger.debug("Using the token from the gh CLI session.")
    return token
