import time

import aiohttp
import structlog

from src.core.errors import FetchError
from src.core.models import EventType, WebhookEvent
from src.core.utils.event_filter import should_process_event
from src.core.utils.logging import log_operation
from src.event_processors.base import BaseEventProcessor, ProcessingResult, ProcessingState
from src.presentation.welcome_formatter import compose_welcome_message
from src.sigs.matchers import owners_for_files, sorted_handles
from src.sigs.models import GroupLink, ReplyKind
from src.sigs.resolver import resolve_label
from src.tasks.task_queue import Task

logger = structlog.get_logger()


class PullRequestWelcomeProcessor(BaseEventProcessor):
    """
    Greets a pull request author with the owners of the files they changed.

    Runs when the labels of a pull request change. Of the SIG labels on the
    pull request, only the first in sorted order is resolved, so one event
    always produces exactly one reply.
    """

    def get_event_type(self) -> str:
        return "pull_request"

    async def process(self, task: Task) -> ProcessingResult:
        start_time = time.time()
        payload = task.payload
        pr = payload.get("pull_request", {})
        pr_number = pr.get("number")
        author = (pr.get("user") or {}).get("login") or payload.get("sender", {}).get("login", "")
        repo_full_name = task.repo_full_name
        installation_id = task.installation_id

        log = logger.bind(repo=repo_full_name, pr_number=pr_number, action=payload.get("action"))

        qualification = should_process_event(WebhookEvent(EventType.PULL_REQUEST, payload), self.welcome)
        if not qualification.should_process:
            return ProcessingResult(
                state=ProcessingState.SKIPPED,
                reason=qualification.reason,
                processing_time_ms=int((time.time() - start_time) * 1000),
            )

        label = qualification.labels[0]
        if len(qualification.labels) > 1:
            log.info("pr_multiple_sig_labels", labels=qualification.labels, selected=label)

        async with log_operation("pr_welcome", repo=repo_full_name, pr=str(pr_number), label=label):
            registry = await self._load_registry(installation_id)
            group = resolve_label(registry, label)

            owners = set()
            if group is not None:
                files = await self._changed_files(repo_full_name, pr_number, installation_id)
                filenames = [f.get("filename") for f in files if f.get("filename")]
                owners = owners_for_files(group, filenames)
                log.info("pr_file_owners_resolved", group=group.name, files=len(filenames), owners=len(owners))

            groups = [group] if group is not None else []
            escalation = await self._escalation_tiers(groups, owners, installation_id)
            message = compose_welcome_message(
                ReplyKind.PULL_REQUEST,
                author,
                owners,
                [GroupLink.from_group(g) for g in groups],
                escalation,
                self.welcome,
            )

            await self.github_client.create_pull_request_comment(repo_full_name, pr_number, message, installation_id)

        return ProcessingResult(
            state=ProcessingState.POSTED,
            label=label,
            group=group.name if group is not None else None,
            contacts=sorted_handles(owners),
            message=message,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

    async def _changed_files(self, repo_full_name: str, pr_number: int, installation_id: int | None) -> list[dict]:
        """Fetch the changed files. Any failure aborts the run before a reply is composed."""
        path = f"pulls/{pr_number}/files"
        try:
            return await self.github_client.get_pull_request_files(repo_full_name, pr_number, installation_id)
        except aiohttp.ClientError as e:
            raise FetchError(f"Failed to list changed files of {repo_full_name}#{pr_number}: {e}", path=path) from e
