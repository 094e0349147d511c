"""check command: enforce required reviewers on labelled pull requests."""

from __future__ import annotations

import click
from rich.console import Console

from reviewgate_core.errors import ConfigurationError
from reviewgate_core.policy import Err, ErrorKind, Result, run_policy_check

console = Console(stderr=True)

_COMMENT_VERBS = {
    "created": "Posted advisory comment.",
    "updated": "Updated advisory comment.",
    "deleted": "Removed stale advisory comment.",
}


def _escape_workflow_data(message: str) -> str:
    # Workflow command data must not contain raw newlines.
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _report(result: Result, dry_run: bool) -> int:
    """Print the result for humans and for the Actions runner; return the exit code."""
    if isinstance(result, Err):
        message = result.message
    else:
        outcome = result.outcome
        verb = _COMMENT_VERBS.get(outcome.comment_action)
        if verb:
            console.print(f"[dim]{'Dry run: ' if dry_run else ''}{verb}[/dim]")
        if outcome.passed:
            console.print("[green]Reviewers check passed.[/green]")
            return 0
        message = outcome.message

    click.echo(f"::error::{_escape_workflow_data(message)}")
    console.print(f"[red]Error:[/red] {message}")
    return 1


@click.command("check")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Defaults to GITHUB_REPOSITORY.")
@click.option(
    "--pr",
    "pr_number",
    type=int,
    default=None,
    help="Pull request number. Defaults to the number in the GitHub event payload.",
)
@click.option(
    "--required-reviewers",
    default=None,
    envvar="INPUT_REQUIRED-REVIEWERS",
    help="Comma-separated logins; at least one must be requested.",
)
@click.option(
    "--required-labels",
    default=None,
    envvar="INPUT_REQUIRED-LABELS",
    help="Comma-separated labels that activate the reviewer requirement.",
)
@click.option(
    "--comment-message",
    default=None,
    envvar="INPUT_COMMENT-MESSAGE",
    help="Prefix of the advisory comment posted on failure.",
)
@click.option("--dry-run", is_flag=True, help="Evaluate the policy without touching PR comments.")
@click.pass_context
def check_cmd(
    ctx,
    repo: str | None,
    pr_number: int | None,
    required_reviewers: str | None,
    required_labels: str | None,
    comment_message: str | None,
    dry_run: bool,
):
    """Fail when a required label is present but no required reviewer is requested.

    Posts an advisory comment listing the required reviewers while the check
    fails, and removes it once the pull request passes.

    \b
    Inputs may come from options, the GitHub Actions inputs
    (INPUT_REQUIRED-REVIEWERS, INPUT_REQUIRED-LABELS, INPUT_COMMENT-MESSAGE)
    or the config file. The token is read from INPUT_GITHUB-TOKEN,
    GITHUB_TOKEN or the gh CLI session.
    """
    from reviewgate_cli.auth import resolve_github_token
    from reviewgate_core.config import load_config

    config_path = ctx.obj.get("config_path", ".reviewgate.yml") if ctx.obj else ".reviewgate.yml"
    try:
        config = load_config(
            config_path,
            overrides={
                # Blank action inputs fall through to the config file.
                "required_reviewers": required_reviewers or None,
                "required_labels": required_labels or None,
                "comment_message": comment_message or None,
            },
        )
    except ConfigurationError as e:
        ctx.exit(_report(Err(ErrorKind.CONFIGURATION, str(e)), dry_run))
    config["github_token"] = resolve_github_token()

    result = run_policy_check(config, repo=repo, pr_number=pr_number, dry_run=dry_run)
    ctx.exit(_report(result, dry_run))
