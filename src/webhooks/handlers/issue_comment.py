from functools import lru_cache

import structlog

from src.core.models import EventType, WebhookEvent, WebhookResponse
from src.core.utils.event_filter import should_process_event
from src.event_processors.issue_comment import IssueCommentWelcomeProcessor
from src.tasks.task_queue import TaskQueue, task_queue
from src.webhooks.handlers.base import EventHandler

logger = structlog.get_logger()


@lru_cache(maxsize=1)
def get_issue_comment_processor() -> IssueCommentWelcomeProcessor:
    return IssueCommentWelcomeProcessor()


class IssueCommentEventHandler(EventHandler):
    """Handler for GitHub issue comment events carrying a `/sig` directive."""

    def __init__(self, queue: TaskQueue | None = None, processor: IssueCommentWelcomeProcessor | None = None):
        self.queue = queue or task_queue
        self.processor = processor

    async def handle(self, event: WebhookEvent) -> WebhookResponse:
        """Handle issue comment events."""
        comment = event.payload.get("comment", {})
        log = logger.bind(
            event_type="issue_comment",
            repo=event.repo_full_name,
            issue_number=event.payload.get("issue", {}).get("number"),
            commenter=(comment.get("user") or {}).get("login"),
        )

        processor = self.processor or get_issue_comment_processor()
        qualification = should_process_event(event, processor.welcome)
        if not qualification.should_process:
            log.info("issue_comment_ignored", reason=qualification.reason)
            return WebhookResponse(status="ignored", detail=qualification.reason, event_type=EventType.ISSUE_COMMENT)

        log.info("issue_comment_directive_received", labels=qualification.labels)

        try:
            enqueued = await self.queue.enqueue(
                processor.process,
                EventType.ISSUE_COMMENT.value,
                event.payload,
                delivery_id=event.delivery_id,
            )
        except Exception as e:
            log.error("issue_comment_enqueue_failed", error=str(e), exc_info=True)
            return WebhookResponse(status="error", detail=str(e), event_type=EventType.ISSUE_COMMENT)

        if not enqueued:
            log.info("issue_comment_duplicate_skipped")
            return WebhookResponse(status="ignored", detail="Duplicate event skipped", event_type=EventType.ISSUE_COMMENT)

        log.info("issue_comment_enqueued")
        return WebhookResponse(
            status="ok", detail="Issue comment enqueued for processing", event_type=EventType.ISSUE_COMMENT
        )
