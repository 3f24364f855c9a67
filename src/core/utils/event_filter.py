"""
Event filtering for GitHub webhooks.

Centralized logic deciding which events qualify for a welcome reply:
label changes on pull requests, and `/sig` directive comments on issues.
Everything else is skipped before any registry read happens.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import structlog

from src.core.config import WelcomeConfig, config
from src.core.models import EventType, WebhookEvent

logger = structlog.get_logger()


@dataclass
class FilterResult:
    """Result of event filter check."""

    should_process: bool
    reason: str = ""
    labels: list[str] = field(default_factory=list)


def label_names(labels: Iterable[Any] | None) -> list[str]:
    """Extract label names from webhook label objects (or plain strings)."""
    names = []
    for label in labels or []:
        name = label.get("name") if isinstance(label, dict) else label
        if isinstance(name, str) and name:
            names.append(name)
    return names


def qualifying_labels(labels: Iterable[Any] | None, welcome: WelcomeConfig | None = None) -> list[str]:
    """
    Return the group labels in the order they are tried.

    Labels are sorted by name so the winner does not depend on the order
    GitHub lists them in; the first label that resolves wins.
    """
    welcome = welcome or config.welcome
    return sorted({name for name in label_names(labels) if welcome.is_group_label(name)})


def should_process_event(event: WebhookEvent, welcome: WelcomeConfig | None = None) -> FilterResult:
    """
    Determine if an event should trigger a welcome reply.

    Returns FilterResult with should_process=True to process, False to skip.
    Logs filtered events for observability.
    """
    welcome = welcome or config.welcome
    payload = event.payload
    event_type = event.event_type

    result = _apply_filters(event_type, payload, welcome)
    if not result.should_process:
        logger.info(
            "event_filtered",
            event_type=event_type.value if hasattr(event_type, "value") else str(event_type),
            repo=event.repo_full_name,
            reason=result.reason,
        )
    return result


def _apply_filters(event_type: EventType, payload: dict, welcome: WelcomeConfig) -> FilterResult:
    if _is_repo_archived(payload):
        return FilterResult(should_process=False, reason="Repository is archived")

    if event_type == EventType.PULL_REQUEST:
        return _filter_pull_request(payload, welcome)
    if event_type == EventType.ISSUE_COMMENT:
        return _filter_issue_comment(payload, welcome)
    return FilterResult(should_process=False, reason=f"Event type '{event_type}' not processed")


def _filter_pull_request(payload: dict, welcome: WelcomeConfig) -> FilterResult:
    action = payload.get("action")
    if action not in welcome.pull_request_actions:
        return FilterResult(should_process=False, reason=f"PR action '{action}' not processed")

    pr = payload.get("pull_request", {})
    if not pr.get("number"):
        return FilterResult(should_process=False, reason="PR number missing")

    labels = qualifying_labels(pr.get("labels"), welcome)
    if not labels:
        return FilterResult(should_process=False, reason=f"No '{welcome.label_prefix}' label on PR")

    return FilterResult(should_process=True, labels=labels)


def _filter_issue_comment(payload: dict, welcome: WelcomeConfig) -> FilterResult:
    action = payload.get("action")
    if action not in welcome.issue_comment_actions:
        return FilterResult(should_process=False, reason=f"Comment action '{action}' not processed")

    issue = payload.get("issue", {})
    if issue.get("pull_request"):
        return FilterResult(should_process=False, reason="Comment is on a pull request")

    comment = payload.get("comment", {})
    if _is_bot_comment(comment):
        return FilterResult(should_process=False, reason="Bot comment")

    if not welcome.matches_directive(comment.get("body", "")):
        return FilterResult(should_process=False, reason="Comment has no directive")

    return FilterResult(should_process=True, labels=qualifying_labels(issue.get("labels"), welcome))


def _is_bot_comment(comment: dict) -> bool:
    user = comment.get("user", {}) or {}
    if user.get("type") == "Bot":
        return True
    login = (user.get("login") or "").lower()
    app_name = config.github.app_name.lower()
    return bool(app_name) and login in {app_name, f"{app_name}[bot]"}


def _is_repo_archived(payload: dict) -> bool:
    repo = payload.get("repository", {})
    return isinstance(repo, dict) and bool(repo.get("archived"))
