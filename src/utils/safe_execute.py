"""Error handling helpers shared by the pipeline stages.

The pipeline never lets an external-dependency failure reach the caller; these
helpers keep the try/except/log pattern consistent wherever an operation may
fail and a default result is acceptable.
"""

from src.utils.logger import logger


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    """Log error with appropriate level. Helper to reduce duplication.

    Args:
        operation_name: Description for logging
        exception: Exception that occurred
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
    """
    msg = f"{operation_name}: {type(exception).__name__}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg, exc_info=True)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Safely execute async operation with consistent error logging.

    Cancellation (asyncio.CancelledError) is not an Exception subclass and is
    never swallowed here, so an aborted request stops at the first await.

    Args:
        coro: Awaitable coroutine to execute.
        operation_name: Description for logging (e.g., "Meal recommendations").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None (graceful degradation).

    Returns:
        Result of coroutine if successful.
        default_return on exception.

    Example:
        result = await safe_execute_async(run_stage(), "Stage", default_return=fallback)
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return


def safe_execute_sync(
    func,
    operation_name: str,
    log_level: str = "warning",
    default_return=None,
):
    """Safely execute sync operation with consistent error logging.

    Synchronous version of safe_execute_async. Same behavior and patterns.

    Args:
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None (graceful degradation).

    Returns:
        Result of func if successful.
        default_return on exception.
    """
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return
