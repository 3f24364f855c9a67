import time

import structlog

from src.core.models import EventType, WebhookEvent
from src.core.utils.event_filter import should_process_event
from src.core.utils.logging import log_operation
from src.event_processors.base import BaseEventProcessor, ProcessingResult, ProcessingState
from src.presentation.welcome_formatter import compose_welcome_message
from src.sigs.matchers import owners_for_repo, sorted_handles
from src.sigs.models import Group, GroupLink, ReplyKind
from src.sigs.resolver import resolve_label
from src.tasks.task_queue import Task

logger = structlog.get_logger()


class IssueCommentWelcomeProcessor(BaseEventProcessor):
    """
    Answers a `/sig` directive on an issue with the owners of the repository.

    The owning SIG comes from the labels already on the issue: they are tried
    in sorted order and the first one that resolves to a SIG wins. An issue
    without SIG labels is answered with the fallback contacts and the
    registry is not read.
    """

    def get_event_type(self) -> str:
        return "issue_comment"

    async def process(self, task: Task) -> ProcessingResult:
        start_time = time.time()
        payload = task.payload
        issue = payload.get("issue", {})
        issue_number = issue.get("number")
        author = (issue.get("user") or {}).get("login") or payload.get("sender", {}).get("login", "")
        repo_full_name = task.repo_full_name
        repo_name = payload.get("repository", {}).get("name") or repo_full_name.split("/")[-1]
        installation_id = task.installation_id

        log = logger.bind(repo=repo_full_name, issue_number=issue_number)

        qualification = should_process_event(WebhookEvent(EventType.ISSUE_COMMENT, payload), self.welcome)
        if not qualification.should_process:
            return ProcessingResult(
                state=ProcessingState.SKIPPED,
                reason=qualification.reason,
                processing_time_ms=int((time.time() - start_time) * 1000),
            )

        async with log_operation("issue_welcome", repo=repo_full_name, issue=str(issue_number)):
            label: str | None = None
            groups: list[Group] = []
            if qualification.labels:
                registry = await self._load_registry(installation_id)
                for candidate in qualification.labels:
                    group = resolve_label(registry, candidate)
                    if group is not None:
                        label, groups = candidate, [group]
                        break
            else:
                log.info("issue_without_sig_label")

            owners = owners_for_repo(groups, repo_name)
            log.info("issue_repo_owners_resolved", groups=[g.name for g in groups], owners=len(owners))

            escalation = await self._escalation_tiers(groups, owners, installation_id)
            message = compose_welcome_message(
                ReplyKind.ISSUE,
                author,
                owners,
                [GroupLink.from_group(g) for g in groups],
                escalation,
                self.welcome,
            )

            await self.github_client.create_issue_comment(repo_full_name, issue_number, message, installation_id)

        return ProcessingResult(
            state=ProcessingState.POSTED,
            label=label,
            group=groups[0].name if groups else None,
            contacts=sorted_handles(owners),
            message=message,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )
