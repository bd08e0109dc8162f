# s3_deployer/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Coroutine, Iterable, List, Sequence, Tuple, Type, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, run on a fresh loop in another thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            try:
                result = asyncio.run(coro)
            except BaseException as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


async def retry_with_schedule(coro_func: Callable[[], Awaitable[T]],
                              delays: Sequence[float],
                              description: str = "operation",
                              no_retry: Tuple[Type[BaseException], ...] = ()) -> T:
    """
    Retry async operation over a fixed delay schedule

    The operation is attempted once, then once more after each delay in
    ``delays``. Exceptions listed in ``no_retry`` propagate immediately.

    Args:
        coro_func: Zero-argument coroutine function
        delays: Seconds to sleep before each retry
        description: Label used in log lines
        no_retry: Exception types that are raised without retrying

    Returns:
        Function result

    Raises:
        The last exception once the schedule is exhausted
    """
    attempt = 0
    while True:
        try:
            return await coro_func()
        except no_retry:
            raise
        except Exception as e:
            if attempt >= len(delays):
                raise
            delay = delays[attempt]
            attempt += 1
            logger.warning(
                f"{description} failed ({e}), retry {attempt}/{len(delays)} in {delay}s"
            )
            await asyncio.sleep(delay)


async def bounded_gather(coros: Iterable[Awaitable[T]], limit: int) -> List[T]:
    """
    Run awaitables concurrently with at most ``limit`` in flight

    The first failure cancels every task still pending and is re-raised.

    Args:
        coros: Awaitables to run
        limit: Maximum number of concurrently running awaitables

    Returns:
        Results in submission order
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def wrapped(coro):
        try:
            async with semaphore:
                return await coro
        finally:
            # Tasks cancelled while queued never start their coroutine
            if inspect.iscoroutine(coro):
                coro.close()

    tasks = [asyncio.ensure_future(wrapped(coro)) for coro in coros]
    if not tasks:
        return []

    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
