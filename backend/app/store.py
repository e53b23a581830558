"""
Customer Registry Backend — In-Memory Customer Store
======================================================

What:  The single shared, ordered collection of customers plus its guard.
How:   A plain list protected by an asyncio.Lock. The only way in is
       `acquire()`, an async context manager that yields the list while the
       lock is held and releases it on every exit path.
Who:   Created once by the app factory, kept on `app.state`, injected into
       route handlers via FastAPI's Depends() system.
When:  Lives for the whole process; never persisted back to disk.

Concurrency Model:
    All request handlers run on one event loop. The lock is the only
    suspension point inside the core: a task that tries to acquire while
    another task holds the store waits until it is released. Holders must
    not await anything else while inside `acquire()` and must never call
    another customer operation from inside it.

Ownership:
    There is exactly one CustomerStore per application instance. Nothing
    outside CustomerService reads or writes the collection.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional

from fastapi import Request

from app.schemas.customer import Customer


class CustomerStore:
    """
    Ownership-guarded, ordered, mutable collection of Customer records.

    Insertion order is the only ordering; there is no secondary index.

    Example usage:
        async with store.acquire() as customers:
            customers.append(new_customer)
    """

    def __init__(self, customers: Optional[Iterable[Customer]] = None):
        self._customers: List[Customer] = list(customers or [])
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[List[Customer]]:
        """
        Exclusive access to the underlying list.

        Blocks the calling task until no other holder is active. Release
        happens when the `async with` block exits, including on early
        return or exception.
        """
        async with self._lock:
            yield self._customers

    def __repr__(self) -> str:
        return f"<CustomerStore(locked={self._lock.locked()})>"


# ── Store Dependency ──────────────────────────────────────────────────────
def get_customer_store(request: Request) -> CustomerStore:
    """
    FastAPI dependency returning the application's single CustomerStore.

    Example usage in a route:
        @router.get("/customers")
        async def list_customers(store: CustomerStore = Depends(get_customer_store)):
            ...
    """
    return request.app.state.customer_store
