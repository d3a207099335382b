"""Unit tests for payload normalization."""

import pytest

from src.tracker.errors import MalformedResponseError
from src.tracker.models import IssueAuthor, IssueLabel
from src.tracker.normalize import (
    build_fallback_user,
    build_issue_url_prefix,
    encode_login,
    encode_project_path,
    normalize_issue,
    normalize_user,
)
from tests.helpers.gitlab import make_issue_payload, make_user_payload


URL = "https://gitlab.com/api/v4/test"
HOST = "https://gitlab.com"


class TestEncoding:
    """Tests for URL component encoding."""

    def test_project_path_slashes_encoded(self) -> None:
        """Test that every slash becomes %2F."""
        assert encode_project_path("org/repo") == "org%2Frepo"
        assert encode_project_path("org/sub/repo") == "org%2Fsub%2Frepo"

    def test_project_path_without_slash(self) -> None:
        """Test that a plain path is unchanged."""
        assert encode_project_path("12345") == "12345"

    def test_login_encoded(self) -> None:
        """Test login quoting."""
        assert encode_login("alice") == "alice"
        assert encode_login("a&b") == "a%26b"


class TestIssueUrlPrefix:
    """Tests for the issue URL prefix."""

    def test_prefix(self) -> None:
        """Test the URL template."""
        assert (
            build_issue_url_prefix(HOST, "org/repo")
            == "https://gitlab.com/org/repo/-/issues/"
        )


class TestNormalizeIssue:
    """Tests for issue normalization."""

    def test_remaps_fields(self) -> None:
        """Test the iid, labels and author remapping."""
        payload = {
            "iid": 42,
            "title": "Bug",
            "labels": ["bug", "urgent"],
            "author": {"username": "alice", "web_url": "https://x/alice"},
        }

        issue = normalize_issue(payload, URL)

        assert issue.numeric_id == 42
        assert issue.title == "Bug"
        assert issue.labels == [IssueLabel(name="bug"), IssueLabel(name="urgent")]
        assert issue.author == IssueAuthor(
            login_handle="alice", profile_url="https://x/alice"
        )
        assert issue.pull_request_url is None

    def test_label_order_and_duplicates_preserved(self) -> None:
        """Test that labels keep order and are not deduplicated."""
        payload = make_issue_payload(labels=["b", "a", "b"])

        issue = normalize_issue(payload, URL)

        assert [label.name for label in issue.labels] == ["b", "a", "b"]

    def test_empty_labels(self) -> None:
        """Test an issue without labels."""
        issue = normalize_issue(make_issue_payload(labels=[]), URL)

        assert issue.labels == []

    def test_other_fields_pass_through(self) -> None:
        """Test that fields not remapped are carried through."""
        issue = normalize_issue(make_issue_payload(), URL)

        extra = issue.model_extra or {}
        assert extra["state"] == "opened"
        assert extra["project_id"] == 7
        assert extra["web_url"] == "https://gitlab.com/org/repo/-/issues/42"
        assert extra["iid"] == 42
        assert "author" not in extra
        assert "labels" not in extra

    def test_raw_pull_request_kept(self) -> None:
        """Test that the raw pull_request object stays next to its URL."""
        pull_request = {"html_url": "https://gitlab.com/org/repo/-/merge_requests/3"}

        issue = normalize_issue(make_issue_payload(pull_request=pull_request), URL)

        assert (issue.model_extra or {})["pull_request"] == pull_request

    def test_user_field_names_pass_through_on_issue(self) -> None:
        """Test that raw keys named like user fields are kept on an issue."""
        payload = make_issue_payload(display_name="Bug 42", profile_url="https://p")

        issue = normalize_issue(payload, URL)

        extra = issue.model_extra or {}
        assert extra["display_name"] == "Bug 42"
        assert extra["profile_url"] == "https://p"

    def test_pull_request_url(self) -> None:
        """Test that an attached pull request URL is exposed."""
        payload = make_issue_payload(
            pull_request={"html_url": "https://gitlab.com/org/repo/-/merge_requests/3"}
        )

        issue = normalize_issue(payload, URL)

        assert issue.pull_request_url == "https://gitlab.com/org/repo/-/merge_requests/3"

    def test_missing_author_raises(self) -> None:
        """Test that a missing author is reported as malformed."""
        payload = make_issue_payload()
        del payload["author"]

        with pytest.raises(MalformedResponseError) as exc_info:
            normalize_issue(payload, URL)

        assert exc_info.value.field == "author"
        assert exc_info.value.url == URL

    def test_missing_nested_author_field_raises(self) -> None:
        """Test that a missing author username is reported with its path."""
        payload = make_issue_payload(author={"web_url": "https://x/alice"})

        with pytest.raises(MalformedResponseError) as exc_info:
            normalize_issue(payload, URL)

        assert exc_info.value.field == "author.username"

    def test_labels_must_be_strings(self) -> None:
        """Test that label objects instead of names are rejected."""
        payload = make_issue_payload(labels=[{"name": "bug"}])

        with pytest.raises(MalformedResponseError):
            normalize_issue(payload, URL)

    def test_non_object_payload_raises(self) -> None:
        """Test that a list body is rejected."""
        with pytest.raises(MalformedResponseError, match="JSON object"):
            normalize_issue([], URL)


class TestNormalizeUser:
    """Tests for user normalization."""

    def test_remaps_first_match(self) -> None:
        """Test username, web_url and name remapping."""
        payload = [
            {"username": "alice", "web_url": "https://x/alice", "name": "Alice A."}
        ]

        user = normalize_user(payload, "alice", HOST, URL)

        assert user.login_handle == "alice"
        assert user.profile_url == "https://x/alice"
        assert user.display_name == "Alice A."

    def test_only_first_entry_used(self) -> None:
        """Test that later fuzzy matches are ignored."""
        payload = [
            make_user_payload(username="alice"),
            make_user_payload(username="alice2", web_url="https://x/alice2"),
        ]

        user = normalize_user(payload, "alice", HOST, URL)

        assert user.login_handle == "alice"

    def test_empty_result_falls_back(self) -> None:
        """Test the synthesized record for an unknown login."""
        user = normalize_user([], "bob", HOST, URL)

        assert user.model_dump() == {
            "login_handle": "bob",
            "display_name": "bob",
            "profile_url": "https://gitlab.com/bob",
        }

    def test_missing_name_uses_username(self) -> None:
        """Test that display_name falls back to the username."""
        payload = [{"username": "carol", "web_url": "https://x/carol"}]

        user = normalize_user(payload, "carol", HOST, URL)

        assert user.display_name == "carol"

    def test_same_fields_in_both_branches(self) -> None:
        """Test that real and fallback records share one shape."""
        real = normalize_user([make_user_payload()], "alice", HOST, URL)
        fallback = normalize_user([], "bob", HOST, URL)

        assert set(type(real).model_fields) == set(type(fallback).model_fields)
        extra = real.model_extra or {}
        assert "name" not in extra
        assert "username" not in extra
        assert extra["state"] == "active"

    def test_issue_field_names_pass_through_on_user(self) -> None:
        """Test that raw keys named like issue fields are kept on a user."""
        user = normalize_user(
            [make_user_payload(title="Staff", labels=["core"])], "alice", HOST, URL
        )

        extra = user.model_extra or {}
        assert extra["title"] == "Staff"
        assert extra["labels"] == ["core"]

    def test_non_list_payload_raises(self) -> None:
        """Test that an object body is rejected."""
        with pytest.raises(MalformedResponseError, match="list of users"):
            normalize_user({"username": "alice"}, "alice", HOST, URL)

    def test_entry_missing_web_url_raises(self) -> None:
        """Test that an incomplete user entry is rejected."""
        with pytest.raises(MalformedResponseError) as exc_info:
            normalize_user([{"username": "alice"}], "alice", HOST, URL)

        assert exc_info.value.field == "web_url"


class TestFallbackUser:
    """Tests for the fallback record."""

    def test_deterministic(self) -> None:
        """Test that the same login always yields the same record."""
        assert build_fallback_user("bob", HOST) == build_fallback_user("bob", HOST)

    def test_uses_host(self) -> None:
        """Test that the profile URL follows the host."""
        user = build_fallback_user("bob", "https://gitlab.example.com")

        assert user.profile_url == "https://gitlab.example.com/bob"
