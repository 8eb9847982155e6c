"""Request functions and the GraphQL executor they send documents through.

A RequestFunction behaves like the request<Name> functions written into
resources.ts: it checks the selection and required arguments, builds the
document, calls the transport once and returns the operation's field.
"""

import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

import httpx

from .ir import IROperation, IRSchema
from .query_builder import QueryBuilder
from .request_emitter import REQUIRED_CHECKS
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)


class GraphQLError(Exception):
    """Exception raised for GraphQL errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]]):
        self.message = message
        self.errors = errors
        super().__init__(message)


class NoFieldsSelectedError(ValueError):
    """Raised when a selection includes no fields."""

    def __init__(self, operation_type: str):
        super().__init__(f"No fields selected for {operation_type}.")


class MissingArgumentError(ValueError):
    """Raised when a required argument is missing."""

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"{argument} is required.")


@runtime_checkable
class Transport(Protocol):
    """Anything that can send a document and return the response data."""

    async def graphql_request(self, document: str) -> dict[str, Any]:
        ...


class GraphQLExecutor:
    """Sends GraphQL documents to an endpoint over HTTP.

    Examples:
        executor = GraphQLExecutor(url)
        executor = GraphQLExecutor(url, headers={"x-api-key": key})

        async with GraphQLExecutor(url) as executor:
            data = await executor.graphql_request("query Me { me { id } }")
    """

    def __init__(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the executor.

        Args:
            url: GraphQL endpoint URL
            headers: Extra headers sent with every request
            timeout: Request timeout in seconds
            client: Preconfigured httpx client (e.g. with a mock transport)
        """
        self.url = url
        self.headers = headers or {}
        self.timeout = timeout
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self.headers)
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=headers)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def graphql_request(self, document: str) -> dict[str, Any]:
        """Execute a document and return the 'data' portion of the response.

        Raises:
            GraphQLError: If the response contains errors
            httpx.HTTPError: On transport failures, unchanged
        """
        client = await self._get_client()
        response = await client.post(self.url, json={"query": document})
        response.raise_for_status()

        result = response.json()

        if result.get("errors"):
            error_messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
            raise GraphQLError(f"GraphQL errors: {error_messages}", result["errors"])

        return result.get("data") or {}


TransportLike = Transport | Callable[[str], Awaitable[dict[str, Any]]]


class RequestFunction:
    """Callable counterpart of a generated request<Name> function."""

    def __init__(
        self,
        operation: IROperation,
        builder: QueryBuilder,
        transport: TransportLike,
        required_check: str = "truthy",
    ):
        if required_check not in REQUIRED_CHECKS:
            raise ValueError(f"required_check must be one of {REQUIRED_CHECKS}, got {required_check!r}")
        self.operation = operation
        self.builder = builder
        self.transport = transport
        self.required_check = required_check

    @property
    def selectable(self) -> bool:
        return not self.builder.is_leaf(self.operation)

    def prepare(
        self,
        selection: Mapping[str, bool] | None = None,
        args: Mapping[str, Any] | None = None,
    ) -> str:
        """Validate the call and return the document that would be sent."""
        args = args or {}
        fields = None
        if self.selectable:
            fields = [name for name, include in (selection or {}).items() if include]
            if not fields:
                raise NoFieldsSelectedError(self.operation.operation_type)

        for argument in self.operation.required_arguments:
            if self._is_missing(args, argument.name):
                raise MissingArgumentError(argument.name)

        return self.builder.build(self.operation, fields, args)

    def _is_missing(self, args: Mapping[str, Any], name: str) -> bool:
        if self.required_check == "presence":
            return args.get(name) is None
        # Falsy values ('' / 0 / False) count as missing under this policy
        return not args.get(name)

    async def __call__(
        self,
        selection: Mapping[str, bool] | None = None,
        args: Mapping[str, Any] | None = None,
    ) -> Any:
        document = self.prepare(selection, args)
        logger.debug("Sending %s %s", self.operation.operation_type, self.operation.name)

        if isinstance(self.transport, Transport):
            response = await self.transport.graphql_request(document)
        else:
            response = await self.transport(document)

        if self.operation.name not in response:
            raise GraphQLError(
                f"Response has no '{self.operation.name}' field",
                [{"message": f"missing field {self.operation.name}"}],
            )
        return response[self.operation.name]


def build_request_functions(
    schema: IRSchema,
    transport: TransportLike,
    *,
    required_check: str = "truthy",
    scalars: ScalarRegistry | None = None,
) -> dict[str, RequestFunction]:
    """Create a request function for every root operation, keyed by field name."""
    builder = QueryBuilder(schema, scalars=scalars)
    return {
        op.name: RequestFunction(op, builder, transport, required_check=required_check)
        for op in schema.all_operations
    }
