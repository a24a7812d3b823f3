"""Optimistic update helper: snapshot, apply locally, write remotely, roll back."""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from core.exceptions import RemoteStoreError

S = TypeVar("S")


@asynccontextmanager
async def optimistic_update(
    snapshot: Callable[[], S],
    apply: Callable[[], None],
    restore: Callable[[S], None],
) -> AsyncIterator[S]:
    """Apply a local change before the remote write inside the block.

    If the block raises RemoteStoreError the snapshot taken before ``apply``
    is handed to ``restore`` and the error propagates.

    Example:
        async with optimistic_update(take, remove_locally, put_back):
            await remote_delete()
    """
    saved = snapshot()
    apply()
    try:
        yield saved
    except RemoteStoreError:
        restore(saved)
        raise
