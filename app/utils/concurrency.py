"""Thread pool helpers that carry the logging context into worker threads."""

import contextvars
from concurrent.futures import Executor, Future
from typing import Any, Callable


def submit_with_context(executor: Executor, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
    """Submit fn to executor inside a copy of the caller's contextvars.

    Without this, log records emitted in worker threads would lose the
    request-scoped fields pushed with log_context().
    """
    ctx = contextvars.copy_context()
    return executor.submit(ctx.run, fn, *args, **kwargs)
