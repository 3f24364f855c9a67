from abc import ABC, abstractmethod

from src.core.models import WebhookEvent, WebhookResponse


class EventHandler(ABC):
    """
    Base class for the pull request and issue comment handlers.

    A handler decides whether an event can lead to a welcome reply and, if
    so, enqueues it for its welcome processor. It never reads the SIG
    registry or posts comments itself.
    """

    @abstractmethod
    async def handle(self, event: WebhookEvent) -> WebhookResponse:
        """
        Filter and enqueue a webhook event.

        Args:
            event: The validated event, carrying its delivery id.

        Returns:
            "ok" when enqueued, "ignored" when filtered or a duplicate,
            "error" when enqueueing failed.
        """
        pass
