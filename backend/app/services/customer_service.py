"""
Customer Registry Backend — Customer Service (Store Operations)
=================================================================

What:  The five operations allowed to touch the customer store:
       list, create, fetch, update, delete.
How:   Each operation acquires the store's guard exactly once, does all of
       its reading or mutation inside that one critical section, and
       returns an Outcome describing what happened.
Who:   Called by the customer router; calls nothing but the store.
When:  Once per routed request.

Linearizability:
    Every create/update/delete takes effect atomically while the guard is
    held. list/fetch copy what they need before releasing, so they always
    see a collection that actually existed at some instant, never one that
    is half-mutated.

Design Decision:
    CustomerService is stateless. The store is passed in on every call
    (like a database session) rather than looked up globally.
"""

import logging

from app.schemas.customer import Customer
from app.schemas.outcome import Outcome
from app.store import CustomerStore

logger = logging.getLogger(__name__)


class CustomerService:
    """
    Business logic layer for customer operations.

    Responsibilities:
        - list_customers():  Snapshot of the whole collection
        - create_customer(): Append if the guid is not already present
        - get_customer():    Linear lookup by guid
        - update_customer(): Full in-place replacement by guid
        - delete_customer(): Single-pass removal by guid

    No operation calls another while holding the guard, and none awaits
    anything but the guard itself.
    """

    async def list_customers(self, store: CustomerStore) -> Outcome:
        """
        Return a point-in-time snapshot of every customer, in insertion order.

        Always succeeds. The snapshot is a new list; records are immutable,
        so later mutations of the store never show through it.
        """
        async with store.acquire() as customers:
            snapshot = list(customers)

        logger.debug("Listed %d customers", len(snapshot))
        return Outcome.listed(snapshot)

    async def create_customer(self, store: CustomerStore, candidate: Customer) -> Outcome:
        """
        Append a new customer unless its guid is already taken.

        Args:
            store: The shared customer store
            candidate: Fully-populated record including a caller-supplied guid

        Returns:
            CREATED on append, CONFLICT (store untouched) on a duplicate guid.
            An empty guid is an ordinary value and goes through the same scan.
        """
        async with store.acquire() as customers:
            if any(customer.guid == candidate.guid for customer in customers):
                logger.info("Create rejected: guid '%s' already exists", candidate.guid)
                return Outcome.conflict()
            customers.append(candidate)

        logger.info("Customer created: %s", candidate.guid)
        return Outcome.created()

    async def get_customer(self, store: CustomerStore, guid: str) -> Outcome:
        """
        Look up one customer by guid.

        Returns:
            FOUND with a copy of the record, or NOT_FOUND.
        """
        async with store.acquire() as customers:
            match = next((c for c in customers if c.guid == guid), None)

        if match is None:
            logger.debug("Customer not found: %s", guid)
            return Outcome.not_found()
        return Outcome.found(match.model_copy())

    async def update_customer(self, store: CustomerStore, updated: Customer) -> Outcome:
        """
        Overwrite the customer whose guid matches `updated.guid`.

        The element keeps its position; every field is replaced (no merge).
        The collection length never changes.

        Returns:
            UPDATED, or NOT_FOUND with the store untouched.
        """
        async with store.acquire() as customers:
            for index, customer in enumerate(customers):
                if customer.guid == updated.guid:
                    customers[index] = updated
                    break
            else:
                logger.info("Update rejected: guid '%s' not found", updated.guid)
                return Outcome.not_found()

        logger.info("Customer updated: %s", updated.guid)
        return Outcome.updated()

    async def delete_customer(self, store: CustomerStore, guid: str) -> Outcome:
        """
        Remove every customer with the given guid in a single filtering pass.

        Lookup and removal happen under one guard acquisition, so two
        concurrent deletes of the same guid yield exactly one DELETED.
        Relative order of the remaining customers is preserved.

        Returns:
            DELETED if the collection shrank, else NOT_FOUND.
        """
        async with store.acquire() as customers:
            before = len(customers)
            customers[:] = [c for c in customers if c.guid != guid]
            removed = before - len(customers)

        if not removed:
            logger.info("Delete rejected: guid '%s' not found", guid)
            return Outcome.not_found()

        logger.info("Customer deleted: %s", guid)
        return Outcome.deleted()


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless: the store is injected per call.
customer_service = CustomerService()
