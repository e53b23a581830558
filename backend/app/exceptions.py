"""
Customer Registry Backend — Custom Exception Hierarchy
========================================================

What:  Application-specific exceptions for failures that happen around the
       customer store rather than inside it.
How:   Each exception class carries a message and optional context dict.
       Per-request domain results (Conflict, NotFound, ...) are NOT
       exceptions; they are Outcome variants (see app/schemas/outcome.py).
Who:   Raised by the customer router (body reading and decoding) and the seed loader.
When:  Decoding a request body, reading the initial data set.

Exception Hierarchy:
    CustomerRegistryError (base)
    ├── MalformedBodyError   → converted to a BadRequest outcome (400)
    ├── BodyTooLargeError    → converted to a PayloadTooLarge outcome (413)
    └── SeedDataError        → logged; the store starts empty
"""

from typing import Any, Dict, Optional


class CustomerRegistryError(Exception):
    """
    Base exception for all Customer Registry application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, never returned to clients)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class MalformedBodyError(CustomerRegistryError):
    """
    Raised when a request body cannot be decoded into a well-formed Customer.

    What:    Invalid JSON, a missing or non-string field, an unknown field,
             or a body guid that contradicts the path guid.
    When:    POST /customers and PUT /customers/{guid}, before the store is touched.
    HTTP:    400 Bad Request (no body)
    """

    def __init__(
        self,
        message: str = "Request body is not a valid customer record",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class BodyTooLargeError(CustomerRegistryError):
    """
    Raised when a request body is larger than the configured limit.

    When:    Before any of the body is decoded. A declared Content-Length
             over the limit is rejected without reading; otherwise reading
             stops as soon as the running total passes the limit.
    HTTP:    413 Payload Too Large (no body)
    """

    def __init__(self, limit: int, received: int):
        super().__init__(
            message=f"Request body exceeds {limit} bytes",
            context={"limit": limit, "received": received},
        )
        self.limit = limit
        self.received = received


class SeedDataError(CustomerRegistryError):
    """
    Raised when the initial customer data set cannot be read or parsed.

    What:    File missing, unreadable, not JSON, or not a list of customers.
    When:    Application startup (lifespan).
    Recovery:
        The lifespan handler logs the error and starts with an empty store.
        This is a fallback, never a fatal error.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["path"] = path
        super().__init__(
            message=f"Could not load customer seed data from '{path}': {reason}",
            context=ctx,
        )
        self.path = path
        self.reason = reason
