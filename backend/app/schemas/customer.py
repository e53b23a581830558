"""
Customer Registry Backend — Pydantic Schemas
==============================================

What:  The Customer record and the auxiliary response models of the API.
How:   The same Customer model validates request bodies, is stored in the
       in-memory collection, and is serialized back in responses.
Who:   Used by the customer router (decoding), the customer service
       (storage) and the response rendering step.

Record Schema:
    {
        "guid": "0b1c...",          opaque unique identifier, immutable
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "address": "12 St James's Square"
    }

    All five fields are required and must be JSON strings. Unknown fields
    are rejected. No format validation is applied to any field (an empty
    guid or a malformed email is accepted as-is).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Domain Record
# ══════════════════════════════════════════════════════════════════════════


class Customer(BaseModel):
    """
    A customer record held in the in-memory store.

    Frozen: a stored record is never mutated in place. An update replaces
    the whole element in the collection, so snapshots handed out by
    list/fetch can never observe a later change.
    """

    guid: StrictStr = Field(description="Unique customer identifier")
    first_name: StrictStr = Field(description="Given name")
    last_name: StrictStr = Field(description="Family name")
    email: StrictStr = Field(description="Contact email address (not validated)")
    address: StrictStr = Field(description="Postal address")

    model_config = ConfigDict(frozen=True, extra="forbid")


# ══════════════════════════════════════════════════════════════════════════
# Auxiliary Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body returned for unexpected server errors (500).

    Domain outcomes (400/404/409/413) are rendered with no body at all.
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
