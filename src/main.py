import logging

from fastapi import FastAPI

from src.core.config import config
from src.core.models import EventType
from src.core.utils.logging import configure_logging
from src.integrations.github import github_client
from src.tasks.task_queue import task_queue
from src.webhooks.dispatcher import dispatcher
from src.webhooks.handlers.issue_comment import IssueCommentEventHandler
from src.webhooks.handlers.pull_request import PullRequestEventHandler
from src.webhooks.router import router as webhook_router

# --- Application Setup ---

configure_logging(config.logging)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SIG Welcome Bot",
    description="Points issue and pull request authors at the SIG owners of what they touched.",
    version="0.1.0",
)

# --- Include Routers ---

app.include_router(webhook_router, prefix="/webhooks", tags=["GitHub Webhooks"])

# --- Root Endpoint ---


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "SIG welcome bot is running."}


# --- Application Lifecycle ---


@app.on_event("startup")
async def startup_event():
    """Application startup logic."""
    logger.info("SIG welcome bot starting up...")

    # Start background task workers
    await task_queue.start_workers(num_workers=config.task_queue_workers)

    # Register event handlers
    dispatcher.register_handler(EventType.PULL_REQUEST, PullRequestEventHandler())
    dispatcher.register_handler(EventType.ISSUE_COMMENT, IssueCommentEventHandler())

    logger.info("Event handlers registered and background workers started.")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown logic."""
    logger.info("SIG welcome bot shutting down...")

    # Stop background workers
    await task_queue.stop_workers()
    await github_client.close()

    logger.info("Background workers stopped.")


# --- Health Check Endpoints ---


@app.get("/health/tasks", tags=["Health Check"])
async def health_tasks():
    """Check the status of background tasks."""
    counts = task_queue.status_counts()
    return {
        "task_queue_status": "running" if task_queue.running else "stopped",
        "workers": len(task_queue.workers),
        "queued": task_queue.queue.qsize(),
        "tasks": {**counts, "total": sum(counts.values())},
    }
