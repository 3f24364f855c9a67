import asyncio
from unittest.mock import AsyncMock

import pytest

from src.event_processors.base import ProcessingResult, ProcessingState
from src.tasks.task_queue import TaskQueue, TaskStatus


class TestTaskQueue:
    """Test TaskQueue deduplication and execution."""

    @pytest.fixture
    def queue(self) -> TaskQueue:
        return TaskQueue()

    @pytest.fixture
    def sample_payload(self) -> dict[str, object]:
        return {
            "action": "labeled",
            "sender": {"login": "octocat", "id": 1},
            "repository": {"id": 123, "full_name": "octocat/test"},
            "installation": {"id": 99},
            "label": {"name": "sig/storage"},
            "pull_request": {"number": 42, "updated_at": "2024-01-01T00:00:00Z"},
        }

    @pytest.mark.asyncio
    async def test_enqueue_success(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock()

        result = await queue.enqueue(handler, "pull_request", sample_payload)

        assert result is True
        assert queue.queue.qsize() == 1
        assert len(queue.processed_hashes) == 1

    @pytest.mark.asyncio
    async def test_enqueue_deduplication(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock()

        assert await queue.enqueue(handler, "pull_request", sample_payload) is True
        assert await queue.enqueue(handler, "pull_request", sample_payload) is False
        assert queue.queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_redelivery_with_same_delivery_id_is_duplicate(
        self, queue: TaskQueue, sample_payload: dict[str, object]
    ) -> None:
        handler = AsyncMock()
        changed = {**sample_payload, "action": "unlabeled"}

        assert await queue.enqueue(handler, "pull_request", sample_payload, delivery_id="abc") is True
        assert await queue.enqueue(handler, "pull_request", changed, delivery_id="abc") is False

    @pytest.mark.asyncio
    async def test_different_labels_not_deduplicated(
        self, queue: TaskQueue, sample_payload: dict[str, object]
    ) -> None:
        handler = AsyncMock()
        other = {**sample_payload, "label": {"name": "sig/network"}}

        assert await queue.enqueue(handler, "pull_request", sample_payload) is True
        assert await queue.enqueue(handler, "pull_request", other) is True
        assert queue.queue.qsize() == 2

    def test_build_task(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        task = queue.build_task("pull_request", sample_payload, delivery_id="abc")

        assert task.repo_full_name == "octocat/test"
        assert task.installation_id == 99
        assert task.status == TaskStatus.PENDING
        assert task.id == "pull_request_octocat/test_abc"

    @pytest.mark.asyncio
    async def test_worker_runs_task_and_records_result(
        self, queue: TaskQueue, sample_payload: dict[str, object]
    ) -> None:
        handler = AsyncMock(return_value=ProcessingResult(state=ProcessingState.POSTED, contacts=["alice"]))

        await queue.start_workers(num_workers=1)
        try:
            await queue.enqueue(handler, "pull_request", sample_payload)
            await asyncio.wait_for(queue.queue.join(), timeout=1)
        finally:
            await queue.stop_workers()

        handler.assert_awaited_once()
        task = handler.call_args[0][0]
        assert task.status == TaskStatus.COMPLETED
        assert task.result["contacts"] == ["alice"]
        assert task.result["state"] == "posted"

    @pytest.mark.asyncio
    async def test_failed_task_is_marked_failed(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock(side_effect=RuntimeError("registry unavailable"))

        await queue.start_workers(num_workers=1)
        try:
            await queue.enqueue(handler, "pull_request", sample_payload)
            await asyncio.wait_for(queue.queue.join(), timeout=1)
        finally:
            await queue.stop_workers()

        task = handler.call_args[0][0]
        assert task.status == TaskStatus.FAILED
        assert task.error == "registry unavailable"
        assert queue.status_counts()["failed"] == 1

    @pytest.mark.asyncio
    async def test_stop_workers(self, queue: TaskQueue) -> None:
        await queue.start_workers(num_workers=2)
        assert len(queue.workers) == 2

        await queue.stop_workers()

        assert queue.workers == []
        assert queue.running is False

    @pytest.mark.asyncio
    async def test_failed_task_can_be_redelivered(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock(side_effect=[RuntimeError("registry unavailable"), None])

        await queue.start_workers(num_workers=1)
        try:
            assert await queue.enqueue(handler, "pull_request", sample_payload, delivery_id="d-1") is True
            await asyncio.wait_for(queue.queue.join(), timeout=1)

            assert await queue.enqueue(handler, "pull_request", sample_payload, delivery_id="d-1") is True
            await asyncio.wait_for(queue.queue.join(), timeout=1)
        finally:
            await queue.stop_workers()

        assert handler.await_count == 2

    @pytest.mark.asyncio
    async def test_completed_task_redelivery_is_duplicate(
        self, queue: TaskQueue, sample_payload: dict[str, object]
    ) -> None:
        handler = AsyncMock(return_value=None)

        await queue.start_workers(num_workers=1)
        try:
            await queue.enqueue(handler, "pull_request", sample_payload, delivery_id="d-1")
            await asyncio.wait_for(queue.queue.join(), timeout=1)

            assert await queue.enqueue(handler, "pull_request", sample_payload, delivery_id="d-1") is False
        finally:
            await queue.stop_workers()

        handler.assert_awaited_once()
