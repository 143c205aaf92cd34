"""Fire-and-forget dispatch for work that must not block a response."""

import asyncio
from collections.abc import Coroutine
from typing import Any

from app.core.logging import get_logger

logger = get_logger(__name__)

# Strong references: the event loop only keeps weak ones to running tasks
_background_tasks: set[asyncio.Task] = set()


def _on_task_done(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        logger.warning(f"Background task {task.get_name()} was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}", exc_info=exc)


def fire_and_forget(coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
    """Schedule ``coro`` on the running loop without awaiting it.

    Must be called from inside a running event loop.
    """
    task = asyncio.create_task(coro, name=name)
    _background_tasks.add(task)
    task.add_done_callback(_on_task_done)
    return task


def pending_background_tasks() -> int:
    return len(_background_tasks)


async def drain_background_tasks(timeout: float | None = 10.0) -> None:
    """Wait for outstanding background tasks (shutdown and tests)."""
    if not _background_tasks:
        return
    tasks = list(_background_tasks)
    logger.info(f"Draining {len(tasks)} background tasks")
    done, pending = await asyncio.wait(tasks, timeout=timeout)
    for task in pending:
        task.cancel()
    if pending:
        logger.warning(f"{len(pending)} background tasks did not finish before shutdown")
