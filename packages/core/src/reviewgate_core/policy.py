"""Required-reviewer policy check."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Union

from reviewgate_core.config import PolicyConfig, build_policy_config
from reviewgate_core.errors import ConfigurationError
from reviewgate_core.gh.context import PullRequestRef, resolve_ref
from reviewgate_core.gh.pull_request import (
    PullRequestSnapshot,
    fetch_snapshot,
    find_advisory_comments,
    get_pull,
    get_repo,
)

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Reviewers check failed."


class ErrorKind(enum.Enum):
    CONFIGURATION = "configuration"
    PLATFORM = "platform"


@dataclass(frozen=True)
class PolicyOutcome:
    """What the check concluded and what it did to the advisory comment.

    comment_action is one of "created", "updated", "deleted" or "none".
    In dry-run mode it names the action that would have been taken.
    """

    passed: bool
    comment_action: str = "none"
    comment_body: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class Ok:
    outcome: PolicyOutcome


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str


Result = Union[Ok, Err]


def has_required_label(config: PolicyConfig, snapshot: PullRequestSnapshot) -> bool:
    return any(label in snapshot.labels for label in config.required_labels)


def has_required_reviewer(config: PolicyConfig, snapshot: PullRequestSnapshot) -> bool:
    return any(reviewer in snapshot.requested_reviewers for reviewer in config.required_reviewers)


def is_triggered(config: PolicyConfig, snapshot: PullRequestSnapshot) -> bool:
    """True when a required label is present but no required reviewer is requested."""
    return has_required_label(config, snapshot) and not has_required_reviewer(config, snapshot)


def build_comment_body(config: PolicyConfig) -> str:
    return f"{config.comment_message}: {', '.join(config.required_reviewers)}"


def reconcile_comment(pull, config: PolicyConfig, triggered: bool, dry_run: bool = False) -> tuple[str, str | None]:
    """Make the advisory comment match the policy result.

    When triggered, exactly one comment carrying the current body is left on the
    PR: the oldest match is updated (or a new one created) and any further
    matches are removed. Otherwise every match is removed.

    Returns (action, body) where action is "created", "updated", "deleted" or "none".
    """
    existing = find_advisory_comments(pull, config.comment_message)
    logger.info("Existing Comment: %s", "Yes" if existing else "No")

    if triggered:
        body = build_comment_body(config)
        logger.info("Comment: %s", body)
        if existing:
            action = "updated"
            if dry_run:
                logger.info("Dry run: would update comment %s", existing[0].id)
            else:
                logger.info("Updating the existing comment...")
                existing[0].edit(body)
            stale = existing[1:]
        else:
            action = "created"
            if dry_run:
                logger.info("Dry run: would create a new comment")
            else:
                logger.info("Creating a new comment...")
                pull.create_issue_comment(body)
            stale = []
    else:
        body = None
        action = "deleted" if existing else "none"
        stale = existing

    for comment in stale:
        if dry_run:
            logger.info("Dry run: would delete comment %s", comment.id)
            continue
        logger.info("Deleting the existing comment %s...", comment.id)
        comment.delete()

    return action, body


def run_check(
    config: PolicyConfig,
    ref: PullRequestRef,
    repo_obj=None,
    dry_run: bool = False,
) -> Result:
    """Run the required-reviewer check against one pull request.

    A policy violation is a normal outcome (Ok with passed=False). Any exception
    raised while talking to GitHub comes back as Err(ErrorKind.PLATFORM, message); nothing is
    retried.
    """
    logger.info("Required Reviewers: %s", ", ".join(config.required_reviewers))
    logger.info("Required Labels: %s", ", ".join(config.required_labels))
    logger.info("Comment Message: %s", config.comment_message)
    logger.info("Owner: %s, Repo: %s, Pull Request Number %d", ref.owner, ref.repo, ref.number)

    try:
        this_repo = repo_obj if repo_obj is not None else get_repo(ref.full_name, token=config.token)
        this_pr = get_pull(this_repo, ref.number)
        snapshot = fetch_snapshot(this_pr, ref)
        logger.info("Pull Request Labels: %s", ", ".join(sorted(snapshot.labels)))

        labelled = has_required_label(config, snapshot)
        logger.info("Has Required Labels: %s", labelled)
        if labelled:
            logger.info("Requested Reviewers: %s", ", ".join(sorted(snapshot.requested_reviewers)))
            logger.info("Found Reviewer: %s", has_required_reviewer(config, snapshot))

        triggered = is_triggered(config, snapshot)
        action, body = reconcile_comment(this_pr, config, triggered, dry_run=dry_run)
    except Exception as e:
        # PyGithub raises more than GithubException (BadAttributeException, requests errors).
        logger.error("GitHub API call failed for %s: %s", ref, e)
        return Err(ErrorKind.PLATFORM, str(e) or type(e).__name__)

    if triggered:
        return Ok(PolicyOutcome(passed=False, comment_action=action, comment_body=body, message=FAILURE_MESSAGE))
    return Ok(PolicyOutcome(passed=True, comment_action=action))


def run_policy_check(
    config: dict,
    repo: str | None = None,
    pr_number: int | None = None,
    environ=None,
    repo_obj=None,
    dry_run: bool = False,
) -> Result:
    """Validate a merged config dict, locate the pull request and run the check.

    Configuration problems are reported as Err(ErrorKind.CONFIGURATION, message)
    before any GitHub API call is made.
    """
    try:
        policy = build_policy_config(config)
        ref = resolve_ref(repo, pr_number, environ)
    except ConfigurationError as e:
        logger.error("%s", e)
        return Err(ErrorKind.CONFIGURATION, str(e))

    return run_check(policy, ref, repo_obj=repo_obj, dry_run=dry_run)
