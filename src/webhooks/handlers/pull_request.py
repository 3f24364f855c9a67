from functools import lru_cache

import structlog

from src.core.models import EventType, WebhookEvent, WebhookResponse
from src.core.utils.event_filter import should_process_event
from src.event_processors.pull_request import PullRequestWelcomeProcessor
from src.tasks.task_queue import TaskQueue, task_queue
from src.webhooks.handlers.base import EventHandler

logger = structlog.get_logger()


# Instantiate processor once (singleton-like) but lazily
@lru_cache(maxsize=1)
def get_pr_processor() -> PullRequestWelcomeProcessor:
    return PullRequestWelcomeProcessor()


class PullRequestEventHandler(EventHandler):
    """Thin handler for pull request webhook events, delegating to the welcome processor."""

    def __init__(self, queue: TaskQueue | None = None, processor: PullRequestWelcomeProcessor | None = None):
        self.queue = queue or task_queue
        self.processor = processor

    async def handle(self, event: WebhookEvent) -> WebhookResponse:
        """
        Filters out pull request events that do not change SIG labels and
        enqueues the rest for the welcome processor.
        """
        log = logger.bind(
            event_type="pull_request",
            repo=event.repo_full_name,
            pr_number=event.payload.get("pull_request", {}).get("number"),
            action=event.payload.get("action"),
        )

        processor = self.processor or get_pr_processor()
        qualification = should_process_event(event, processor.welcome)
        if not qualification.should_process:
            log.info("pr_event_ignored", reason=qualification.reason)
            return WebhookResponse(status="ignored", detail=qualification.reason, event_type=EventType.PULL_REQUEST)

        log.info("pr_handler_invoked", labels=qualification.labels)

        try:
            enqueued = await self.queue.enqueue(
                processor.process,
                EventType.PULL_REQUEST.value,
                event.payload,
                delivery_id=event.delivery_id,
            )

            if enqueued:
                log.info("pr_event_enqueued")
                return WebhookResponse(
                    status="ok", detail="Pull request event enqueued for processing", event_type=EventType.PULL_REQUEST
                )
            else:
                log.info("pr_event_duplicate_skipped")
                return WebhookResponse(
                    status="ignored", detail="Duplicate event skipped", event_type=EventType.PULL_REQUEST
                )

        except Exception as e:
            log.error("pr_enqueue_failed", error=str(e), exc_info=True)
            return WebhookResponse(
                status="error", detail=f"PR processing failed: {str(e)}", event_type=EventType.PULL_REQUEST
            )
