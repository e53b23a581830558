"""
Customer Registry Backend — Customers HTTP Endpoint
=====================================================

What:  Binds every request under /customers to the CustomerRouter and
       renders the resulting Outcome as an HTTP response.
How:   One catch-all FastAPI route hands (method, raw path, body, store) to
       `customer_router.dispatch()`; `render_outcome()` is the single place
       where outcomes become status codes and payloads.
Who:   Any HTTP client of the customer API.

Wire Surface:
    GET    /customers           200 [Customer, ...]
    POST   /customers           201 | 400 | 409 | 413
    GET    /customers/{guid}    200 Customer | 404
    PUT    /customers/{guid}    200 | 400 | 404 | 413
    DELETE /customers/{guid}    204 | 404
    anything else               404

    Only 200 responses from GET carry a body. HEAD is not routed: the
    table lists GET only, so HEAD on a /customers path is 404.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from app.routes.customer_router import customer_router
from app.schemas.outcome import Outcome, OutcomeKind
from app.store import CustomerStore, get_customer_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Customers"])

# Every method reaches the customer router so that a known path with an
# unsupported method is reported as 404, not 405.
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

OUTCOME_STATUS: Dict[OutcomeKind, int] = {
    OutcomeKind.LISTED: 200,
    OutcomeKind.FOUND: 200,
    OutcomeKind.CREATED: 201,
    OutcomeKind.UPDATED: 200,
    OutcomeKind.DELETED: 204,
    OutcomeKind.CONFLICT: 409,
    OutcomeKind.NOT_FOUND: 404,
    OutcomeKind.BAD_REQUEST: 400,
    OutcomeKind.PAYLOAD_TOO_LARGE: 413,
    OutcomeKind.ROUTE_NOT_FOUND: 404,
}


def render_outcome(outcome: Outcome) -> Response:
    """
    Map an Outcome to its HTTP response.

    LISTED and FOUND are serialized as JSON; every other kind is a bare
    status code with an empty body.
    """
    status_code = OUTCOME_STATUS[outcome.kind]

    if outcome.kind is OutcomeKind.LISTED:
        return JSONResponse(
            status_code=status_code,
            content=[customer.model_dump() for customer in outcome.customers],
        )
    if outcome.kind is OutcomeKind.FOUND:
        return JSONResponse(status_code=status_code, content=outcome.customer.model_dump())

    return Response(status_code=status_code)


def _raw_path(request: Request) -> str:
    """Percent-encoded request path without the query string."""
    raw = request.scope.get("raw_path")
    if raw:
        return raw.decode("latin-1").split("?", 1)[0]
    return request.url.path


def _declared_length(request: Request) -> Optional[int]:
    """Content-Length header as an int, or None when absent or unparseable."""
    header = request.headers.get("content-length")
    if header is None:
        return None
    try:
        return int(header)
    except ValueError:
        return None


@router.api_route(
    "/customers{remainder:path}",
    methods=ROUTED_METHODS,
    include_in_schema=False,
)
async def customers_endpoint(
    request: Request,
    store: CustomerStore = Depends(get_customer_store),
) -> Response:
    """
    Dispatch a /customers request through the ordered route table.

    The body stream is handed over unread. Only body-bearing routes pull
    from it, and they stop once the size limit is passed.
    """
    outcome = await customer_router.dispatch(
        method=request.method,
        path=_raw_path(request),
        body=request.stream(),
        store=store,
        content_length=_declared_length(request),
    )
    return render_outcome(outcome)
