"""
Customer Registry Backend — Customer Request Router
=====================================================

What:  Maps an incoming (method, path, body) to one customer operation.
How:   An ordered table of (method, path template, handler) routes,
       evaluated top to bottom. The first route whose method AND template
       both match wins; later routes are never consulted.
Who:   Called by the FastAPI endpoint in app/routes/customers.py.
When:  Once per request under /customers.

Route Table (precedence order, most specific first):
    1. GET    /customers/{guid}   → fetch
    2. PUT    /customers/{guid}   → update   (body: Customer)
    3. DELETE /customers/{guid}   → delete
    4. POST   /customers          → create   (body: Customer)
    5. GET    /customers          → list

    Anything else, including a known path with the wrong method, is
    ROUTE_NOT_FOUND.

Body Handling (body-bearing routes only; other routes never read the body):
    1. Size check against settings.max_body_bytes → PAYLOAD_TOO_LARGE.
       A declared Content-Length over the limit is rejected unread; a
       streamed body is read chunk by chunk and abandoned once the running
       total passes the limit.
    2. Decode into a Customer (strict, all five fields) → BAD_REQUEST
    3. For PUT, the body guid must equal the path guid → BAD_REQUEST
    The store is never touched for a rejected body.

Path Parameters:
    {name} matches exactly one non-empty path segment. Captured values are
    percent-decoded after matching, so "/customers/a%2Fb" targets guid "a/b".
"""

import logging
import re
from dataclasses import dataclass, field
from typing import AsyncIterable, Awaitable, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import unquote

from pydantic import ValidationError

from app.config import settings
from app.exceptions import BodyTooLargeError, MalformedBodyError
from app.schemas.customer import Customer
from app.schemas.outcome import Outcome
from app.services.customer_service import customer_service
from app.store import CustomerStore

logger = logging.getLogger(__name__)

Handler = Callable[[CustomerStore, Dict[str, str], Optional[Customer]], Awaitable[Outcome]]
BodySource = Union[bytes, AsyncIterable[bytes]]

_PARAM = re.compile(r"\{([a-zA-Z_][a-zA-Z0-9_]*)\}")


def compile_template(template: str) -> "re.Pattern[str]":
    """
    Turn a path template into an anchored regex.

    "/customers/{guid}" → ^/customers/(?P<guid>[^/]+)$
    Literal parts are escaped; the whole path must match.
    """
    parts = []
    position = 0
    for param in _PARAM.finditer(template):
        parts.append(re.escape(template[position:param.start()]))
        parts.append(f"(?P<{param.group(1)}>[^/]+)")
        position = param.end()
    parts.append(re.escape(template[position:]))
    return re.compile("^" + "".join(parts) + "$")


@dataclass(frozen=True)
class Route:
    """One entry of the route table."""

    method: str
    template: str
    operation: str
    handler: Handler
    has_body: bool = False
    pattern: "re.Pattern[str]" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "pattern", compile_template(self.template))

    def match(self, method: str, path: str) -> Optional[Dict[str, str]]:
        """Path parameters if both method and path match, else None."""
        if method != self.method:
            return None
        found = self.pattern.match(path)
        if found is None:
            return None
        return {name: unquote(value) for name, value in found.groupdict().items()}


# ══════════════════════════════════════════════════════════════════════════
# Route Handlers
# ══════════════════════════════════════════════════════════════════════════
# Thin adapters from extracted parameters to CustomerService calls.


async def _fetch(store: CustomerStore, params: Dict[str, str], body: Optional[Customer]) -> Outcome:
    return await customer_service.get_customer(store, params["guid"])


async def _update(store: CustomerStore, params: Dict[str, str], body: Optional[Customer]) -> Outcome:
    return await customer_service.update_customer(store, body)


async def _delete(store: CustomerStore, params: Dict[str, str], body: Optional[Customer]) -> Outcome:
    return await customer_service.delete_customer(store, params["guid"])


async def _create(store: CustomerStore, params: Dict[str, str], body: Optional[Customer]) -> Outcome:
    return await customer_service.create_customer(store, body)


async def _list(store: CustomerStore, params: Dict[str, str], body: Optional[Customer]) -> Outcome:
    return await customer_service.list_customers(store)


# Order is significant: evaluated top to bottom, first match wins.
CUSTOMER_ROUTES: List[Route] = [
    Route("GET", "/customers/{guid}", "fetch", _fetch),
    Route("PUT", "/customers/{guid}", "update", _update, has_body=True),
    Route("DELETE", "/customers/{guid}", "delete", _delete),
    Route("POST", "/customers", "create", _create, has_body=True),
    Route("GET", "/customers", "list", _list),
]


class CustomerRouter:
    """
    First-match-wins dispatcher over an ordered route table.

    Args:
        routes: Route table in precedence order (defaults to CUSTOMER_ROUTES)
        max_body_bytes: Size limit for body-bearing routes
    """

    def __init__(
        self,
        routes: Optional[List[Route]] = None,
        max_body_bytes: Optional[int] = None,
    ):
        self.routes = list(CUSTOMER_ROUTES if routes is None else routes)
        self.max_body_bytes = settings.max_body_bytes if max_body_bytes is None else max_body_bytes

    def match(self, method: str, path: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        """
        Find the first route matching (method, path).

        Returns:
            (route, path_params), or None when nothing matches.
        """
        method = method.upper()
        for route in self.routes:
            params = route.match(method, path)
            if params is not None:
                return route, params
        return None

    def decode_body(self, raw: bytes, path_guid: Optional[str] = None) -> Customer:
        """
        Decode a request body into a Customer.

        Raises:
            MalformedBodyError: not JSON, not an object with exactly the five
            string fields, or a guid that contradicts `path_guid`.
        """
        try:
            customer = Customer.model_validate_json(raw)
        except ValidationError as e:
            first = e.errors(include_url=False)[0] if e.error_count() else {}
            loc = first.get("loc") or ()
            raise MalformedBodyError(
                message=first.get("msg", "Invalid customer record"),
                field=".".join(str(part) for part in loc) or None,
                context={"error_count": e.error_count()},
            )

        if path_guid is not None and customer.guid != path_guid:
            raise MalformedBodyError(
                message="Body guid does not match the guid in the path",
                field="guid",
                context={"path_guid": path_guid, "body_guid": customer.guid},
            )
        return customer

    async def read_body(
        self,
        body: BodySource,
        content_length: Optional[int] = None,
    ) -> bytes:
        """
        Collect a request body without ever holding more than the limit.

        Args:
            body: Raw bytes, or an async iterable of chunks read lazily
            content_length: Declared Content-Length, if the client sent one

        Raises:
            BodyTooLargeError: declared or actual size exceeds max_body_bytes
        """
        limit = self.max_body_bytes
        if content_length is not None and content_length > limit:
            raise BodyTooLargeError(limit=limit, received=content_length)

        if isinstance(body, (bytes, bytearray)):
            if len(body) > limit:
                raise BodyTooLargeError(limit=limit, received=len(body))
            return bytes(body)

        received = bytearray()
        async for chunk in body:
            received.extend(chunk)
            if len(received) > limit:
                raise BodyTooLargeError(limit=limit, received=len(received))
        return bytes(received)

    async def dispatch(
        self,
        method: str,
        path: str,
        body: BodySource,
        store: CustomerStore,
        content_length: Optional[int] = None,
    ) -> Outcome:
        """
        Route one request and run the matching operation.

        Args:
            method: HTTP method
            path: Request path, still percent-encoded, without query string
            body: Raw request body or a lazy chunk stream; only consumed by
                  routes that take a body
            store: The application's shared customer store
            content_length: Declared body size, checked before reading
        """
        matched = self.match(method, path)
        if matched is None:
            logger.debug("No route for %s %s", method, path)
            return Outcome.route_not_found()

        route, params = matched
        customer: Optional[Customer] = None

        if route.has_body:
            try:
                raw = await self.read_body(body, content_length)
            except BodyTooLargeError as e:
                logger.info(
                    "%s rejected: body of at least %d bytes exceeds %d",
                    route.operation, e.received, e.limit,
                )
                return Outcome.payload_too_large()
            try:
                customer = self.decode_body(raw, path_guid=params.get("guid"))
            except MalformedBodyError as e:
                logger.info("%s rejected: %s (field=%s)", route.operation, e.message, e.field)
                return Outcome.bad_request()

        return await route.handler(store, params, customer)


# ── Singleton Instance ────────────────────────────────────────────────────
customer_router = CustomerRouter()
