import asyncio
import hashlib
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from enum import Enum
from typing import Any

from cachetools import TTLCache
from pydantic import BaseModel

logger = logging.getLogger(__name__)

TaskFunc = Callable[["Task"], Awaitable[Any]]


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Task(BaseModel):
    """Represents a task in the processing queue."""

    id: str
    event_type: str
    repo_full_name: str
    installation_id: int | None = None
    payload: dict[str, Any]
    status: TaskStatus = TaskStatus.PENDING
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error: str | None = None
    result: dict[str, Any] | None = None
    event_hash: str | None = None  # For deduplication


class TaskQueue:
    """Simple in-memory task queue for background processing with deduplication."""

    def __init__(self, dedup_ttl: int = 3600, max_tracked: int = 10000):
        self.queue: asyncio.Queue[tuple[TaskFunc, Task]] = asyncio.Queue()
        self.tasks: TTLCache = TTLCache(maxsize=max_tracked, ttl=dedup_ttl)
        self.processed_hashes: TTLCache = TTLCache(maxsize=max_tracked, ttl=dedup_ttl)
        self.running = False
        self.workers: list[asyncio.Task] = []

    def _create_event_hash(self, event_type: str, payload: dict[str, Any], delivery_id: str | None = None) -> str:
        """Create a unique hash for the event to enable deduplication."""
        if delivery_id:
            return hashlib.md5(f"{event_type}:{delivery_id}".encode()).hexdigest()

        # Create a stable identifier based on event type, repo, and key payload fields
        event_data: dict[str, Any] = {
            "event_type": event_type,
            "repo_full_name": payload.get("repository", {}).get("full_name"),
            "action": payload.get("action"),
            "sender": payload.get("sender", {}).get("login"),
        }

        # Add event-specific identifiers
        if event_type == "pull_request":
            pr_data = payload.get("pull_request", {})
            event_data.update(
                {
                    "pr_number": pr_data.get("number"),
                    "label": (payload.get("label") or {}).get("name"),
                    "pr_updated_at": pr_data.get("updated_at"),
                }
            )
        elif event_type == "issue_comment":
            comment = payload.get("comment", {})
            event_data.update(
                {
                    "issue_number": payload.get("issue", {}).get("number"),
                    "comment_id": comment.get("id"),
                    "comment_body": comment.get("body"),
                }
            )

        event_json = json.dumps(event_data, sort_keys=True, default=str)
        return hashlib.md5(event_json.encode()).hexdigest()

    def build_task(self, event_type: str, payload: dict[str, Any], delivery_id: str | None = None) -> Task:
        """Build a pending Task from a webhook payload."""
        repo_full_name = payload.get("repository", {}).get("full_name", "")
        created_at = datetime.now()
        return Task(
            id=f"{event_type}_{repo_full_name}_{delivery_id or created_at.timestamp()}",
            event_type=event_type,
            repo_full_name=repo_full_name,
            installation_id=payload.get("installation", {}).get("id"),
            payload=payload,
            created_at=created_at,
            event_hash=self._create_event_hash(event_type, payload, delivery_id),
        )

    async def enqueue(
        self,
        func: TaskFunc,
        event_type: str,
        payload: dict[str, Any],
        task: Task | None = None,
        delivery_id: str | None = None,
    ) -> bool:
        """
        Enqueue `func(task)` for background processing.

        Returns False when the same event was already enqueued recently.
        """
        task = task or self.build_task(event_type, payload, delivery_id)
        event_hash = task.event_hash or self._create_event_hash(event_type, payload, delivery_id)

        if event_hash in self.processed_hashes:
            logger.info(f"Skipping duplicate {event_type} event for {task.repo_full_name} (hash {event_hash[:8]})")
            return False

        self.processed_hashes[event_hash] = task.id
        self.tasks[task.id] = task
        await self.queue.put((func, task))

        logger.info(f"Enqueued task {task.id} for {task.repo_full_name}")
        return True

    async def start_workers(self, num_workers: int = 3):
        """Start background workers."""
        self.running = True
        for i in range(num_workers):
            worker = asyncio.create_task(self._worker(f"worker-{i}"))
            self.workers.append(worker)
        logger.info(f"Started {num_workers} background workers")

    async def stop_workers(self):
        """Stop background workers."""
        self.running = False
        for worker in self.workers:
            worker.cancel()
        await asyncio.gather(*self.workers, return_exceptions=True)
        self.workers = []
        logger.info("Stopped all background workers")

    async def _worker(self, worker_name: str):
        """Background worker that processes tasks."""
        logger.info(f"Worker {worker_name} started")

        while self.running:
            func, task = await self.queue.get()
            try:
                await self._process_task(func, task, worker_name)
            finally:
                self.queue.task_done()

        logger.info(f"Worker {worker_name} stopped")

    async def _process_task(self, func: TaskFunc, task: Task, worker_name: str):
        """Process a single task."""
        try:
            task.status = TaskStatus.RUNNING
            task.started_at = datetime.now()

            logger.info(f"Worker {worker_name} processing task {task.id}")

            result = await func(task)

            task.status = TaskStatus.COMPLETED
            task.completed_at = datetime.now()
            if isinstance(result, BaseModel):
                task.result = result.model_dump(mode="json")
            elif isinstance(result, dict):
                task.result = result

            logger.info(f"Task {task.id} completed successfully")

        except Exception as e:
            task.status = TaskStatus.FAILED
            task.completed_at = datetime.now()
            task.error = str(e)
            # A redelivery of a failed event must be accepted again.
            if task.event_hash:
                self.processed_hashes.pop(task.event_hash, None)
            logger.error(f"Task {task.id} failed: {e}", exc_info=True)

    def status_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in TaskStatus}
        for task in list(self.tasks.values()):
            counts[task.status.value] += 1
        return counts


# Global task queue instance
task_queue = TaskQueue()
