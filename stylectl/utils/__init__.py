"""Utility functions for stylectl."""

import asyncio
from typing import Any, Coroutine


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Execute an async coroutine synchronously.

    Usage:
        status = run_async(_check_async(invocation))
    """
    return asyncio.run(coro)


__all__ = ["run_async"]
