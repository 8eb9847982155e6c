"""Query builder for GraphQL operations.

Every document, whether it is a template with placeholders written into
queries.ts or a concrete document sent by the Python runtime, goes through
render_document(). Argument values are written as GraphQL literals: enum
values bare, input objects as {key: value, ...}, everything else as JSON.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .ir import IROperation, IRSchema
from .scalars import ScalarRegistry
from .type_emitter import ENUM, INPUT, TypeEmitter, TypeRegistry

FIELDS_PLACEHOLDER = "{{fields}}"


def argument_placeholder(name: str) -> str:
    """Placeholder token for an argument, e.g. '{{args.id}}'."""
    return "{{args.%s}}" % name


@dataclass
class OperationDefinition:
    """A fully described operation, ready to be rendered as a document."""
    operation_type: str  # 'query' or 'mutation'
    name: str
    field_name: str
    arguments: list[tuple[str, str]] = field(default_factory=list)
    # None for operations returning a scalar or enum
    selection: str | None = None


def render_document(definition: OperationDefinition) -> str:
    """Format an operation definition as a GraphQL document."""
    args = ""
    if definition.arguments:
        args = "(" + ", ".join(f"{name}: {value}" for name, value in definition.arguments) + ")"

    lines = [f"{definition.operation_type} {definition.name} {{"]
    if definition.selection is None:
        lines.append(f"  {definition.field_name}{args}")
    else:
        lines.append(f"  {definition.field_name}{args} {{")
        lines.append(f"    {definition.selection}")
        lines.append("  }")
    lines.append("}")
    return "\n".join(lines)


class QueryBuilder:
    """Builds GraphQL documents from operation metadata."""

    def __init__(
        self,
        schema: IRSchema,
        registry: TypeRegistry | None = None,
        scalars: ScalarRegistry | None = None,
    ):
        """Initialize with schema and the registry used for literal dispatch."""
        self.schema = schema
        if registry is None:
            registry = TypeEmitter(schema, scalars).build_registry()
        self.registry = registry
        self._template_cache: dict[str, str] = {}

    def is_leaf(self, operation: IROperation) -> bool:
        """Leaf operations return a scalar or enum and take no selection."""
        return self.registry.is_leaf(operation.return_type_name)

    def definition(
        self,
        operation: IROperation,
        selection: str | None,
        arguments: list[tuple[str, str]],
    ) -> OperationDefinition:
        return OperationDefinition(
            operation_type=operation.operation_type,
            name=operation.pascal_name,
            field_name=operation.name,
            arguments=arguments,
            selection=None if self.is_leaf(operation) else selection,
        )

    def template(self, operation: IROperation) -> str:
        """Document template with {{fields}} and {{args.<name>}} placeholders."""
        if operation.name not in self._template_cache:
            definition = self.definition(
                operation,
                FIELDS_PLACEHOLDER,
                [(arg.name, argument_placeholder(arg.name)) for arg in operation.arguments],
            )
            self._template_cache[operation.name] = render_document(definition)
        return self._template_cache[operation.name]

    def build(
        self,
        operation: IROperation,
        fields: list[str] | None,
        args: Mapping[str, Any] | None = None,
    ) -> str:
        """Build a concrete document for the given fields and argument values.

        Arguments missing from args are left out so the server applies its
        default; an explicit None is written as null.
        """
        args = args or {}
        literals = [
            (arg.name, self.to_literal(args[arg.name], self.registry.literal_kind(arg.type_name), arg.type_name))
            for arg in operation.arguments
            if arg.name in args
        ]
        selection = "\n".join(fields) if fields is not None else None
        return render_document(self.definition(operation, selection, literals))

    def to_literal(self, value: Any, kind: str, type_name: str | None = None) -> str:
        """Write a value as a GraphQL literal.

        Args:
            value: The Python value
            kind: 'enum', 'input' or 'scalar', from the declared type
            type_name: The declared named type (needed for inputs and custom scalars)
        """
        if isinstance(value, BaseModel):
            value = value.model_dump(by_alias=True, exclude_none=True)
        if value is None:
            return "null"
        if isinstance(value, (list, tuple)):
            return "[" + ", ".join(self.to_literal(item, kind, type_name) for item in value) + "]"
        if isinstance(value, Enum):
            value = value.value
        if kind == ENUM:
            return str(value)
        if kind == INPUT:
            return "{" + self.serialize_input(type_name, value) + "}"
        if type_name is not None:
            value = self.registry.scalars.serialize(type_name, value)
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

    def serialize_input(self, type_name: str, value: Mapping[str, Any]) -> str:
        """Write the entries of an input object as 'key: value' pairs joined by ', '."""
        input_type = self.schema.inputs.get(type_name)
        declared = {f.name: f for f in input_type.fields} if input_type else {}
        entries = []
        for key, item in value.items():
            ir_field = declared.get(key)
            if ir_field is None:
                # Unknown keys are passed through as JSON and left to the server
                entries.append(f"{key}: {self.to_literal(item, 'scalar')}")
                continue
            kind = self.registry.literal_kind(ir_field.type_name)
            entries.append(f"{key}: {self.to_literal(item, kind, ir_field.type_name)}")
        return ", ".join(entries)
