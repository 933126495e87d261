"""Repository decorator for standardizing DB operations.

Wraps async repository methods with:
- Structured trace logging with timing information
- Error classification by SQLAlchemy exception type before re-raising
"""

from collections.abc import Callable, Coroutine
import functools
import inspect
import time
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import (
    IntegrityError,
    MultipleResultsFound,
    OperationalError,
    SQLAlchemyError,
)

from curator.config import get_logger

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)


def db_operation(operation_name: str | None = None):
    """Decorate repository methods with consistent logging and error handling.

    Errors are logged at a level matching their kind and always re-raised.

    Example:
        @db_operation("get_management")
        async def get_management(self, owner, definition):
            ...
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        func_name = operation_name or func.__name__

        if not inspect.iscoroutinefunction(func):
            raise TypeError(
                f"db_operation can only be used with async functions, but {func_name} is not async",
            )

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            start_time = time.perf_counter()
            repo_name = args[0].__class__.__name__ if args else "Repository"
            context = _build_log_context(kwargs)

            def elapsed_ms() -> float:
                return (time.perf_counter() - start_time) * 1000

            try:
                result = await func(*args, **kwargs)
            except (IntegrityError, MultipleResultsFound) as e:
                logger.warning(
                    f"DB constraint error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise
            except OperationalError as e:
                logger.error(
                    f"DB operational error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise
            except SQLAlchemyError as e:
                logger.error(
                    f"SQLAlchemy error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=elapsed_ms(),
                    **context,
                )
                raise

            logger.trace(
                f"DB operation completed: {repo_name}.{func_name}",
                operation=func_name,
                exec_time_ms=elapsed_ms(),
                **context,
            )
            return result

        return wrapper

    return decorator


def _build_log_context(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Keep simple keyword arguments as log context, ids first."""
    id_params = {
        k: v
        for k, v in kwargs.items()
        if k.endswith("_id") and isinstance(v, int | str)
    }
    simple_params = {
        k: v
        for k, v in kwargs.items()
        if isinstance(v, int | str | bool) and not k.startswith("_") and k not in id_params
    }
    return {**simple_params, **id_params}
