from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from budget_worker.pipeline.exceptions import StageTimeoutError

T = TypeVar("T")


def call_with_timeout(func: Callable[..., T], timeout_seconds: float | None, *args: object) -> T:
    """Run func(*args) and wait at most timeout_seconds for its result.

    The call runs on a dedicated thread. On expiry the thread is abandoned,
    not interrupted, so a hung call keeps its thread until it returns.

    Raises:
        StageTimeoutError: if the call does not finish in time.
    """
    if timeout_seconds is None:
        return func(*args)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pipeline-call")
    try:
        future = executor.submit(func, *args)
        try:
            return future.result(timeout=timeout_seconds)
        except FutureTimeoutError as exc:
            future.cancel()
            raise StageTimeoutError(f"timed out after {timeout_seconds:g}s") from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
