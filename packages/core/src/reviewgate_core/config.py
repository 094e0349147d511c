import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from reviewgate_core.errors import ConfigurationError

DEFAULT_COMMENT_MESSAGE = "Error: Pull request requires at least one of the following reviewers"

DEFAULT_CONFIG: dict = {
    "required_reviewers": [],
    "required_labels": [],
    "comment_message": None,  # None = use DEFAULT_COMMENT_MESSAGE
}


@dataclass(frozen=True)
class PolicyConfig:
    token: str
    required_reviewers: tuple[str, ...]
    required_labels: tuple[str, ...]
    comment_message: str = DEFAULT_COMMENT_MESSAGE

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks.
        return (
            f"PolicyConfig(token='***', required_reviewers={self.required_reviewers!r}, "
            f"required_labels={self.required_labels!r}, comment_message={self.comment_message!r})"
        )


def parse_list(value) -> tuple[str, ...]:
    """Split a comma-separated input into trimmed items, keeping order and duplicates.

    Sequences (as loaded from YAML) are accepted too. Empty items are dropped,
    so "a,,b" gives ("a", "b") rather than keeping a blank login or label that
    could never match.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, Sequence):
        items = [str(item) for item in value]
    else:
        items = [str(value)]
    return tuple(item.strip() for item in items if item.strip())


def action_input(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return a GitHub Actions input, or None when the runner did not set it.

    The runner exports ``with:`` inputs as ``INPUT_<NAME>``, upper-cased with
    spaces replaced by underscores. Hyphens are kept as-is.
    """
    env = os.environ if environ is None else environ
    return env.get(f"INPUT_{name.replace(' ', '_').upper()}")


def load_config(config_path: str = ".reviewgate.yml", overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewgate.yml in the current directory
      3. CLI options / action inputs
    """
    config = {key: list(value) if isinstance(value, list) else value for key, value in DEFAULT_CONFIG.items()}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            try:
                file_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Could not parse {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        config.update(file_config)

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                config[key] = value

    return config


def build_policy_config(config: dict) -> PolicyConfig:
    """Validate a merged config dict and freeze it.

    Checks run in a fixed order (token, reviewers, labels) so the first
    missing input is the one reported.
    """
    token = (config.get("github_token") or "").strip()
    if not token:
        raise ConfigurationError("GitHub token not provided")

    required_reviewers = parse_list(config.get("required_reviewers"))
    if not required_reviewers:
        raise ConfigurationError("Required reviewers not provided")

    required_labels = parse_list(config.get("required_labels"))
    if not required_labels:
        raise ConfigurationError("Required labels not provided")

    # A blank prefix would match every comment on the PR.
    raw_message = config.get("comment_message")
    comment_message = str(raw_message).strip() if raw_message is not None else ""
    if not comment_message:
        comment_message = DEFAULT_COMMENT_MESSAGE

    return PolicyConfig(
        token=token,
        required_reviewers=required_reviewers,
        required_labels=required_labels,
        comment_message=comment_message,
    )
