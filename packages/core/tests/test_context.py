"""Tests for locating the pull request from options or the Actions environment."""

import json

import pytest

from reviewgate_core.errors import ConfigurationError
from reviewgate_core.gh.context import PullRequestRef, resolve_ref


def _event(tmp_path, payload):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload))
    return str(path)


class TestResolveRef:
    def test_explicit_values(self):
        ref = resolve_ref("owner/repo", 7, environ={})
        assert ref == PullRequestRef(owner="owner", repo="repo", number=7)

    def test_repository_from_environment(self):
        ref = resolve_ref(None, 3, environ={"GITHUB_REPOSITORY": "acme/widgets"})
        assert ref.full_name == "acme/widgets"
        assert ref.number == 3

    def test_number_from_pull_request_event(self, tmp_path):
        env = {
            "GITHUB_REPOSITORY": "acme/widgets",
            "GITHUB_EVENT_PATH": _event(tmp_path, {"pull_request": {"number": 42}}),
        }
        assert resolve_ref(environ=env).number == 42

    def test_number_from_top_level_event_field(self, tmp_path):
        env = {
            "GITHUB_REPOSITORY": "acme/widgets",
            "GITHUB_EVENT_PATH": _event(tmp_path, {"number": 5}),
        }
        assert resolve_ref(environ=env).number == 5

    def test_explicit_values_win_over_environment(self, tmp_path):
        env = {
            "GITHUB_REPOSITORY": "acme/widgets",
            "GITHUB_EVENT_PATH": _event(tmp_path, {"pull_request": {"number": 42}}),
        }
        ref = resolve_ref("owner/repo", 1, environ=env)
        assert str(ref) == "owner/repo#1"

    def test_missing_repository_raises(self):
        with pytest.raises(ConfigurationError, match="Repository not provided"):
            resolve_ref(None, 1, environ={})

    @pytest.mark.parametrize("repo", ["noslash", "/repo", "owner/", "a/b/c"])
    def test_invalid_repository_format_raises(self, repo):
        with pytest.raises(ConfigurationError, match="OWNER/REPO"):
            resolve_ref(repo, 1, environ={})

    def test_event_without_pull_request_raises(self, tmp_path):
        env = {
            "GITHUB_REPOSITORY": "acme/widgets",
            "GITHUB_EVENT_PATH": _event(tmp_path, {"ref": "refs/heads/main"}),
        }
        with pytest.raises(ConfigurationError, match="Pull request number not provided"):
            resolve_ref(environ=env)

    def test_missing_event_file_raises(self, tmp_path):
        env = {"GITHUB_REPOSITORY": "acme/widgets", "GITHUB_EVENT_PATH": str(tmp_path / "missing.json")}
        with pytest.raises(ConfigurationError, match="event payload not found"):
            resolve_ref(environ=env)

    def test_malformed_event_file_raises(self, tmp_path):
        path = tmp_path / "event.json"
        path.write_text("{not json")
        env = {"GITHUB_REPOSITORY": "acme/widgets", "GITHUB_EVENT_PATH": str(path)}
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            resolve_ref(environ=env)

    @pytest.mark.parametrize(
        "payload",
        [
            {"pull_request": {"number": "abc"}},
            {"pull_request": {"number": True}},
            {"number": ["1"]},
        ],
    )
    def test_non_integer_number_raises(self, tmp_path, payload):
        env = {"GITHUB_REPOSITORY": "acme/widgets", "GITHUB_EVENT_PATH": _event(tmp_path, payload)}
        with pytest.raises(ConfigurationError, match="Invalid pull request number"):
            resolve_ref(environ=env)

    def test_numeric_string_number_accepted(self, tmp_path):
        env = {
            "GITHUB_REPOSITORY": "acme/widgets",
            "GITHUB_EVENT_PATH": _event(tmp_path, {"pull_request": {"number": "12"}}),
        }
        assert resolve_ref(environ=env).number == 12

    def test_non_object_payload_raises(self, tmp_path):
        env = {"GITHUB_REPOSITORY": "acme/widgets", "GITHUB_EVENT_PATH": _event(tmp_path, [1, 2])}
        with pytest.raises(ConfigurationError, match="must be a JSON object"):
            resolve_ref(environ=env)

    def test_non_object_pull_request_raises(self, tmp_path):
        env = {"GITHUB_REPOSITORY": "acme/widgets", "GITHUB_EVENT_PATH": _event(tmp_path, {"pull_request": "42"})}
        with pytest.raises(ConfigurationError, match="malformed pull_request"):
            resolve_ref(environ=env)
