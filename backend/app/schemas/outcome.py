"""
Customer Registry Backend — Operation Outcomes
================================================

What:  Tagged result of routing a request and running a customer operation.
How:   An OutcomeKind tag plus an optional payload. A single rendering step
       (app/routes/customers.py::render_outcome) maps every kind to an HTTP
       status and, for the two kinds that carry data, a JSON body.

Outcome kinds:
    LISTED            → 200, list of customers
    FOUND             → 200, one customer
    CREATED           → 201, no body
    UPDATED           → 200, no body
    DELETED           → 204, no body
    CONFLICT          → 409, no body
    NOT_FOUND         → 404, no body
    BAD_REQUEST       → 400, no body
    PAYLOAD_TOO_LARGE → 413, no body
    ROUTE_NOT_FOUND   → 404, no body
"""

import enum
from dataclasses import dataclass
from typing import List, Optional, Union

from app.schemas.customer import Customer


class OutcomeKind(str, enum.Enum):
    LISTED = "listed"
    FOUND = "found"
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    ROUTE_NOT_FOUND = "route_not_found"


Payload = Union[Customer, List[Customer], None]


@dataclass(frozen=True)
class Outcome:
    """
    Result of a single request against the customer store.

    Only LISTED and FOUND carry a payload; every other kind is a bare tag.
    Use the classmethod constructors rather than building instances directly.
    """

    kind: OutcomeKind
    payload: Payload = None

    @classmethod
    def listed(cls, customers: List[Customer]) -> "Outcome":
        return cls(OutcomeKind.LISTED, customers)

    @classmethod
    def found(cls, customer: Customer) -> "Outcome":
        return cls(OutcomeKind.FOUND, customer)

    @classmethod
    def created(cls) -> "Outcome":
        return cls(OutcomeKind.CREATED)

    @classmethod
    def updated(cls) -> "Outcome":
        return cls(OutcomeKind.UPDATED)

    @classmethod
    def deleted(cls) -> "Outcome":
        return cls(OutcomeKind.DELETED)

    @classmethod
    def conflict(cls) -> "Outcome":
        return cls(OutcomeKind.CONFLICT)

    @classmethod
    def not_found(cls) -> "Outcome":
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def bad_request(cls) -> "Outcome":
        return cls(OutcomeKind.BAD_REQUEST)

    @classmethod
    def payload_too_large(cls) -> "Outcome":
        return cls(OutcomeKind.PAYLOAD_TOO_LARGE)

    @classmethod
    def route_not_found(cls) -> "Outcome":
        return cls(OutcomeKind.ROUTE_NOT_FOUND)

    @property
    def customer(self) -> Optional[Customer]:
        """The single customer carried by a FOUND outcome, else None."""
        return self.payload if isinstance(self.payload, Customer) else None

    @property
    def customers(self) -> Optional[List[Customer]]:
        """The snapshot carried by a LISTED outcome, else None."""
        return self.payload if isinstance(self.payload, list) else None
