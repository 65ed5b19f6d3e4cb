"""
Rush Bot - Async Utilities
==========================

Best-effort wrappers for Discord calls whose failure must not abort a game.

Usage:
    from src.utils.async_utils import safe_async_operation

    # Cosmetic re-render: a failed edit is logged, never raised
    await safe_async_operation("Lobby Edit", message.edit(embed=embed))
"""

import asyncio
from typing import Any, Coroutine, List, Optional, Tuple

from src.core.logger import logger


async def safe_async_operation(
    name: str,
    coro: Coroutine[Any, Any, Any],
    default: Any = None,
    log_level: str = "debug",
) -> Any:
    """
    Run a single async operation with error handling.

    Args:
        name: Name of the operation for logging.
        coro: The coroutine to run.
        default: Value to return if operation fails.
        log_level: Log level for errors ("debug", "warning", "error").

    Returns:
        Result of the coroutine, or default if it fails.
    """
    try:
        return await coro
    except asyncio.CancelledError:
        raise
    except Exception as e:
        error_details = [
            ("Operation", name),
            ("Error Type", type(e).__name__),
            ("Error", str(e)[:100]),
        ]

        if log_level == "error":
            logger.error("Async Operation Failed", error_details)
        elif log_level == "warning":
            logger.warning("Async Operation Failed", error_details)
        else:
            logger.debug("Async Operation Failed", error_details)

        return default


async def gather_with_logging(
    *operations: Tuple[str, Coroutine[Any, Any, Any]],
    context: Optional[str] = None,
) -> List[Any]:
    """
    Run multiple async operations concurrently with error logging.

    Args:
        *operations: Tuples of (operation_name, coroutine).
        context: Optional context string for error logs.

    Returns:
        List of results (including exceptions as values, not raised).
    """
    names = [name for name, _ in operations]
    coros = [coro for _, coro in operations]

    results = await asyncio.gather(*coros, return_exceptions=True)

    for i, result in enumerate(results):
        if isinstance(result, Exception):
            error_details = [
                ("Operation", names[i]),
                ("Error Type", type(result).__name__),
                ("Error", str(result)[:100]),
            ]
            if context:
                error_details.insert(0, ("Context", context))

            logger.warning("Async Operation Failed", error_details)

    return results


__all__ = ["safe_async_operation", "gather_with_logging"]
