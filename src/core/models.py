from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(Enum):
    """Supported GitHub event types."""

    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST = "pull_request"


class WebhookEvent:
    """
    A representation of an incoming webhook event, before it has been
    handed to a processor.
    """

    def __init__(self, event_type: EventType, payload: dict[str, Any], delivery_id: str | None = None):
        self.event_type = event_type
        self.payload = payload
        self.delivery_id = delivery_id
        self.repository = payload.get("repository", {})
        self.sender = payload.get("sender", {})
        self.installation_id = payload.get("installation", {}).get("id")

    @property
    def repo_full_name(self) -> str:
        """The full name of the repository (e.g., 'owner/repo')."""
        return self.repository.get("full_name", "")

    @property
    def repo_name(self) -> str:
        """The repository name without its owner."""
        return self.repository.get("name", "") or self.repo_full_name.split("/")[-1]

    @property
    def sender_login(self) -> str:
        """The GitHub username of the user who triggered the event."""
        return self.sender.get("login", "")


class WebhookResponse(BaseModel):
    """Standardized response model for all webhook handlers."""

    status: str = Field(..., description="Processing status: ok, ignored, error")
    detail: str | None = Field(None, description="Additional context or error message")
    event_type: EventType | None = Field(None, description="Normalized GitHub event type")
