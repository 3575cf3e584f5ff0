"""
Basecamp Backend — Route Handler Wrapper
==========================================

What:  Decorator that forwards any failure of a route handler to the
       centralized error responder as a normalized APIError.
How:   Awaits coroutine handlers (plain functions run in the threadpool).
       APIError and HTTPException pass through untouched; any other
       exception is re-raised as a non-operational APIError(500) chained
       to the original, so the responder still has the full traceback.

Usage:
    @router.get("/things")
    @async_handler
    async def list_things(db=Depends(get_database)):
        ...

functools.wraps keeps __wrapped__, so FastAPI still sees the original
signature and dependency injection is unaffected.
"""

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable

from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from basecamp.exceptions import APIError

logger = logging.getLogger(__name__)


def async_handler(func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    is_coroutine = inspect.iscoroutinefunction(func)

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            if is_coroutine:
                return await func(*args, **kwargs)
            return await run_in_threadpool(func, *args, **kwargs)
        except (APIError, StarletteHTTPException):
            raise
        except Exception as exc:
            logger.debug("Handler %s raised %s", func.__qualname__, type(exc).__name__)
            raise APIError(
                status_code=500,
                message=str(exc) or type(exc).__name__,
                context={"handler": func.__qualname__, "exception_type": type(exc).__name__},
                is_operational=False,
            ) from exc

    return wrapper
