import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from src.core.models import EventType, WebhookEvent, WebhookResponse
from src.webhooks.auth import verify_github_signature
from src.webhooks.dispatcher import WebhookDispatcher, dispatcher
from src.webhooks.models import GitHubEventModel

logger = structlog.get_logger()
router = APIRouter()


# Dependency provider for the dispatcher instance.
# This makes it easy to manage its lifecycle and use it in tests.
def get_dispatcher() -> WebhookDispatcher:
    """Returns the shared WebhookDispatcher instance."""
    return dispatcher


def _normalize_event_name(event_name: str | None) -> str:
    if not event_name:
        raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")
    # Normalize event names like deployment_review.requested
    return event_name.split(".")[0]


@router.post("/github", summary="Endpoint for all GitHub webhooks", response_model=WebhookResponse)
async def github_webhook_endpoint(
    request: Request,
    is_verified: bool = Depends(verify_github_signature),
    dispatcher_instance: WebhookDispatcher = Depends(get_dispatcher),
) -> WebhookResponse:
    """
    This endpoint receives all events from a configured GitHub App.

    - It first verifies the request signature to ensure it's from GitHub.
    - It then validates the payload envelope and maps the event header to
      a supported EventType.
    - Finally, it passes the event to the dispatcher, which hands it to the
      registered handler.
    """
    # The 'is_verified' dependency handles raising an error on failure,
    # so we don't need to check its return value here.

    event_name = _normalize_event_name(request.headers.get("X-GitHub-Event"))
    delivery_id = request.headers.get("X-GitHub-Delivery")
    payload = await request.json()

    try:
        event_type = EventType(event_name)
    except ValueError:
        logger.info("webhook_event_unsupported", event_name=event_name, delivery_id=delivery_id)
        return WebhookResponse(status="ignored", detail=f"Event type '{event_name}' is received but not supported.")

    try:
        envelope = GitHubEventModel.model_validate(payload)
    except ValidationError as e:
        logger.warning("webhook_payload_invalid", event_name=event_name, errors=e.error_count())
        raise HTTPException(status_code=400, detail="Invalid webhook payload structure") from e

    logger.info(
        "webhook_validated",
        event_type=event_type.value,
        action=envelope.action,
        repo=envelope.repository.full_name,
        sender=envelope.sender.login,
        delivery_id=delivery_id,
    )

    event = WebhookEvent(event_type=event_type, payload=payload, delivery_id=delivery_id)
    return await dispatcher_instance.dispatch(event)
