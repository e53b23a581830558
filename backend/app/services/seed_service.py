"""
Customer Registry Backend — Seed Data Loader
==============================================

What:  Loads the initial customer data set into the store at startup.
How:   Reads a JSON array from disk with aiofiles, validates it with the
       Customer schema, drops duplicate guids (first occurrence wins) and
       appends the result to the store.
Who:   Called once by the application lifespan handler.
When:  Startup, before the first request is served.

Failure Policy:
    Any problem (missing file, I/O error, invalid JSON, invalid record)
    leaves the store empty. Loading is a fallback, never fatal.
    Mutations made at runtime are never written back to this file.
"""

import logging
from pathlib import Path
from typing import List

import aiofiles
from pydantic import TypeAdapter, ValidationError

from app.exceptions import SeedDataError
from app.schemas.customer import Customer
from app.store import CustomerStore

logger = logging.getLogger(__name__)

_customer_list = TypeAdapter(List[Customer])


class SeedService:
    """Reads and applies the initial customer data set."""

    async def read_customers(self, path: str) -> List[Customer]:
        """
        Read and validate the seed file.

        Returns:
            Customers in file order, with duplicate guids removed.

        Raises:
            SeedDataError if the file cannot be read or is not a valid
            JSON array of customer records.
        """
        file_path = Path(path)
        try:
            async with aiofiles.open(file_path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            raise SeedDataError(path=str(file_path), reason="file does not exist")
        except OSError as e:
            raise SeedDataError(
                path=str(file_path),
                reason="file could not be read",
                context={"os_error": str(e)},
            )

        try:
            customers = _customer_list.validate_json(raw)
        except ValidationError as e:
            raise SeedDataError(
                path=str(file_path),
                reason=f"invalid customer data ({e.error_count()} errors)",
                context={"errors": e.errors(include_url=False)},
            )

        return self._drop_duplicate_guids(customers)

    def _drop_duplicate_guids(self, customers: List[Customer]) -> List[Customer]:
        seen = set()
        unique: List[Customer] = []
        for customer in customers:
            if customer.guid in seen:
                logger.warning("Seed data: dropping duplicate guid '%s'", customer.guid)
                continue
            seen.add(customer.guid)
            unique.append(customer)
        return unique

    async def seed_store(self, store: CustomerStore, path: str) -> int:
        """
        Populate the store from the seed file.

        Returns:
            Number of customers loaded (0 when the file is unusable).
        """
        try:
            customers = await self.read_customers(path)
        except SeedDataError as e:
            logger.warning("%s. Starting with an empty customer store.", e.message)
            logger.debug("Seed data error context: %s", e.context)
            return 0

        async with store.acquire() as stored:
            stored.extend(customers)

        logger.info("Loaded %d customers from %s", len(customers), path)
        return len(customers)


# ── Singleton Instance ────────────────────────────────────────────────────
seed_service = SeedService()
