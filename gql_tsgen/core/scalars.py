"""Scalar handlers.

A handler decides two things for a GraphQL scalar: the TypeScript type that
stands for it in ``gpl.d.ts``, and how a Python value is turned into
something ``json.dumps`` can write into an argument literal.

Example usage:
    from decimal import Decimal
    from gql_tsgen.core.scalars import ScalarRegistry

    class MoneyHandler:
        ts_type = "string"

        def serialize(self, value: Decimal) -> str:
            return f"{value:.2f}"

    registry = ScalarRegistry()
    registry.register("Money", MoneyHandler())
"""

from datetime import date
from typing import Any, Protocol, runtime_checkable

# Used for custom scalars without a registered handler
DEFAULT_TS_TYPE = "any"

# Scalars every GraphQL schema has, whether or not it declares them
GRAPHQL_BUILTINS = {
    "String": "string",
    "ID": "string",
    "Int": "number",
    "Float": "number",
    "Boolean": "boolean",
}


@runtime_checkable
class ScalarHandler(Protocol):
    """Maps one scalar to TypeScript and to a JSON-compatible value."""

    ts_type: str

    def serialize(self, value: Any) -> Any:
        ...


class PassThroughHandler:
    """Writes values as given. Used for the built-ins and for JSON scalars."""

    def __init__(self, ts_type: str):
        self.ts_type = ts_type

    def serialize(self, value: Any) -> Any:
        return value


class IsoFormatHandler:
    """``date``/``datetime`` values become ISO 8601 strings; strings pass through."""

    ts_type = "string"

    def serialize(self, value: date | str) -> str:
        return value if isinstance(value, str) else value.isoformat()


class StringifyHandler:
    """Anything with a canonical ``str()`` form, such as ``uuid.UUID``."""

    ts_type = "string"

    def serialize(self, value: Any) -> str:
        return str(value)


class ScalarRegistry:
    """Scalar name -> handler lookup with per-scalar override.

    Example:
        registry = ScalarRegistry()
        registry.ts_type("DateTime")  # "string"
        registry.ts_type("Upload")    # "any"
    """

    def __init__(self):
        self._handlers: dict[str, ScalarHandler] = {
            name: PassThroughHandler(ts_type) for name, ts_type in GRAPHQL_BUILTINS.items()
        }
        self._handlers.update(
            DateTime=IsoFormatHandler(),
            Date=IsoFormatHandler(),
            UUID=StringifyHandler(),
            JSON=PassThroughHandler("any"),
            JSONObject=PassThroughHandler("Record<string, any>"),
        )

    def register(self, scalar_name: str, handler: ScalarHandler):
        """Add a handler, replacing any existing one for the same scalar."""
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> ScalarHandler | None:
        return self._handlers.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        return scalar_name in self._handlers

    @property
    def builtin_names(self) -> list[str]:
        return list(GRAPHQL_BUILTINS)

    def ts_type(self, scalar_name: str) -> str:
        handler = self.get(scalar_name)
        return handler.ts_type if handler else DEFAULT_TS_TYPE

    def serialize(self, scalar_name: str, value: Any) -> Any:
        handler = self.get(scalar_name)
        return handler.serialize(value) if handler else value
