"""Invoke helpers — call sync or async callbacks uniformly.

Route functions and controller actions can be ``def`` or ``async def``.
Any code that calls a user-provided callback goes through this helper so
the sync/async check lives in exactly one place.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
