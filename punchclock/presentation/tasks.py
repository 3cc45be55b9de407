"""
Background coroutines started from UI callbacks.

Tasks are held until they finish; a failure is logged and, when a notice
service is given, shown to the user.
"""
import asyncio
import logging

logger = logging.getLogger(__name__)

_running = set()


def run_async(coro, notices=None, title="Error", message="Something went wrong. Please try again."):
    """Schedule coro on the running loop and keep it alive until done"""
    task = asyncio.ensure_future(coro)
    _running.add(task)

    def _done(finished):
        _running.discard(finished)
        if finished.cancelled():
            return
        error = finished.exception()
        if error is None:
            return
        logger.error(f"Background task failed: {error!r}",
                     exc_info=(type(error), error, error.__traceback__))
        if notices is not None:
            notices.show_error(title, message)

    task.add_done_callback(_done)
    return task


def pending_tasks():
    return set(_running)
