"""
Demonstration of a lazily shared resource accessed from several threads.

``run_demo`` starts a group of worker threads that are released together,
each asks :func:`get_demo_resource` for the shared resource and calls a
method on it. The resource's constructor logs once and bumps a counter, so
the output shows a single construction no matter how many workers raced.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from lazyshared.concurrency.lazy_shared import LazySharedInstance
from lazyshared.config.environment import Environment
from lazyshared.config.logging_config import get_logger

log = get_logger(__name__)


class DemoResource:
    """A resource with a side-effecting constructor."""

    created: int = 0
    _created_lock = threading.Lock()

    def __init__(self) -> None:
        with DemoResource._created_lock:
            DemoResource.created += 1
        log.info("Shared resource instance created!")
        self.resource_id = uuid.uuid4().hex
        self.created_at = datetime.now(UTC)
        self.ready = True

    def do_something(self, i: int) -> str:
        return f"Log {i}"


_shared_demo: LazySharedInstance[DemoResource] = LazySharedInstance(DemoResource, name="DemoResource")


def get_demo_resource() -> DemoResource:
    """Get the process-wide demo resource."""
    return _shared_demo.get_instance()


@dataclass
class DemoResult:
    """What one worker observed."""

    worker: int
    message: str
    resource_id: str
    object_id: int


def run_demo(workers: int | None = None) -> list[DemoResult]:
    """
    Race ``workers`` threads on first access to the shared demo resource.

    Args:
        workers: Number of threads to start. Defaults to the DEMO_WORKERS setting.

    Returns:
        One result per worker, ordered by worker number (starting at 1).

    Raises:
        ValueError: If workers is less than 1.
        Exception: The first error raised inside a worker.
    """
    if workers is None:
        workers = Environment.get_demo_workers()
    if workers < 1:
        raise ValueError("workers must be a positive integer")

    results: list[DemoResult | None] = [None] * workers
    errors: list[BaseException] = []
    start = threading.Barrier(workers)

    def work(index: int) -> None:
        try:
            start.wait()
            resource = get_demo_resource()
            results[index] = DemoResult(
                worker=index + 1,
                message=resource.do_something(index + 1),
                resource_id=resource.resource_id,
                object_id=id(resource),
            )
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=work, args=(i,), name=f"demo-worker-{i + 1}") for i in range(workers)]
    log.debug(f"Starting {workers} demo workers")
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    if errors:
        raise errors[0]
    return [result for result in results if result is not None]
