# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Route dependencies and helpers

Provides access to the store opened at startup.
"""
from fastapi import HTTPException, Request

from store.interfaces import CollectionStore


def get_store(request: Request) -> CollectionStore:
    """Get the CollectionStore from request

    Usage:
        @router.get("/example")
        async def example(store: CollectionStore = Depends(get_store)):
            ...
    """
    store = getattr(request.app.state, 'store', None)
    if store is None:
        raise HTTPException(status_code=503, detail="Document store is not connected")
    return store
