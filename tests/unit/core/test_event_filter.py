from unittest.mock import patch

import pytest

from src.core.config import WelcomeConfig
from src.core.models import EventType, WebhookEvent
from src.core.utils.event_filter import label_names, qualifying_labels, should_process_event


def _pr_event(action="labeled", labels=("sig/storage",), number=7, archived=False):
    return WebhookEvent(
        EventType.PULL_REQUEST,
        {
            "action": action,
            "repository": {"full_name": "org/storage-engine", "name": "storage-engine", "archived": archived},
            "pull_request": {"number": number, "labels": [{"name": n} for n in labels]},
        },
    )


def _comment_event(body="/sig", labels=("sig/storage",), action="created", user=None, on_pr=False):
    issue = {"number": 3, "labels": [{"name": n} for n in labels]}
    if on_pr:
        issue["pull_request"] = {"url": "https://api.github.com/repos/org/repo/pulls/3"}
    return WebhookEvent(
        EventType.ISSUE_COMMENT,
        {
            "action": action,
            "repository": {"full_name": "org/storage-engine", "name": "storage-engine"},
            "issue": issue,
            "comment": {"id": 11, "body": body, "user": user or {"login": "bob", "type": "User"}},
        },
    )


@pytest.fixture
def welcome():
    return WelcomeConfig()


def test_label_names_accepts_objects_and_strings():
    assert label_names([{"name": "a"}, "b", {"color": "red"}, None]) == ["a", "b"]


def test_qualifying_labels_sorted_and_unique(welcome):
    labels = [{"name": "sig/storage"}, {"name": "kind/bug"}, {"name": "sig/network"}, {"name": "sig/storage"}]

    assert qualifying_labels(labels, welcome) == ["sig/network", "sig/storage"]


class TestPullRequestFilter:
    def test_labeled_with_sig_label(self, welcome):
        result = should_process_event(_pr_event(), welcome)

        assert result.should_process
        assert result.labels == ["sig/storage"]

    def test_unlabeled_qualifies(self, welcome):
        assert should_process_event(_pr_event(action="unlabeled"), welcome).should_process

    def test_other_action_skipped(self, welcome):
        result = should_process_event(_pr_event(action="opened"), welcome)

        assert not result.should_process
        assert "opened" in result.reason

    def test_no_sig_label_skipped(self, welcome):
        assert not should_process_event(_pr_event(labels=("kind/bug",)), welcome).should_process

    def test_missing_number_skipped(self, welcome):
        assert not should_process_event(_pr_event(number=None), welcome).should_process

    def test_archived_repository_skipped(self, welcome):
        result = should_process_event(_pr_event(archived=True), welcome)

        assert not result.should_process
        assert result.reason == "Repository is archived"


class TestIssueCommentFilter:
    def test_directive_qualifies(self, welcome):
        result = should_process_event(_comment_event(), welcome)

        assert result.should_process
        assert result.labels == ["sig/storage"]

    def test_directive_without_labels_still_qualifies(self, welcome):
        result = should_process_event(_comment_event(labels=()), welcome)

        assert result.should_process
        assert result.labels == []

    def test_plain_comment_skipped(self, welcome):
        assert not should_process_event(_comment_event(body="looks good"), welcome).should_process

    def test_edited_comment_skipped(self, welcome):
        assert not should_process_event(_comment_event(action="edited"), welcome).should_process

    def test_comment_on_pull_request_skipped(self, welcome):
        assert not should_process_event(_comment_event(on_pr=True), welcome).should_process

    def test_bot_comment_skipped(self, welcome):
        event = _comment_event(user={"login": "some-bot[bot]", "type": "Bot"})

        assert not should_process_event(event, welcome).should_process

    def test_own_app_comment_skipped(self, welcome):
        event = _comment_event(user={"login": "sig-welcome[bot]", "type": "User"})

        with patch("src.core.utils.event_filter.config") as mock_config:
            mock_config.github.app_name = "sig-welcome"
            result = should_process_event(event, welcome)

        assert not result.should_process
        assert result.reason == "Bot comment"


def test_filtered_events_are_logged(welcome):
    with patch("src.core.utils.event_filter.logger") as mock_logger:
        should_process_event(_pr_event(action="closed"), welcome)

    mock_logger.info.assert_called_once()
    assert mock_logger.info.call_args[0][0] == "event_filtered"
