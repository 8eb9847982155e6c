"""Intermediate Representation (IR) for GraphQL schemas.

This module defines dataclasses that represent GraphQL schema constructs
in a language-agnostic way, suitable for code generation.
"""

from dataclasses import dataclass, field
from typing import Any


class SchemaError(Exception):
    """Raised when a schema cannot be turned into generated code."""


NAMED = "named"
LIST = "list"
NON_NULL = "non_null"


@dataclass(frozen=True)
class IRTypeRef:
    """A reference to a type, possibly wrapped in list and non-null markers.

    Mirrors GraphQL's own wrapping: a reference is nullable unless it is
    wrapped in ``non_null``.
    """
    kind: str  # 'named', 'list' or 'non_null'
    name: str | None = None
    of_type: "IRTypeRef | None" = None

    @classmethod
    def named(cls, name: str) -> "IRTypeRef":
        return cls(kind=NAMED, name=name)

    @classmethod
    def list_of(cls, of_type: "IRTypeRef") -> "IRTypeRef":
        return cls(kind=LIST, of_type=of_type)

    @classmethod
    def non_null(cls, of_type: "IRTypeRef") -> "IRTypeRef":
        return cls(kind=NON_NULL, of_type=of_type)

    @property
    def named_type(self) -> str:
        """Return the innermost type name, e.g. 'User' for [User!]!."""
        ref = self
        while ref.kind != NAMED:
            ref = ref.of_type
        return ref.name

    @property
    def is_optional(self) -> bool:
        return self.kind != NON_NULL

    @property
    def is_list(self) -> bool:
        ref = self
        while ref.kind == NON_NULL:
            ref = ref.of_type
        return ref.kind == LIST

    def __str__(self) -> str:
        if self.kind == NON_NULL:
            return f"{self.of_type}!"
        if self.kind == LIST:
            return f"[{self.of_type}]"
        return self.name


@dataclass
class IRArgument:
    """Represents an argument to a field or operation."""
    name: str
    type: IRTypeRef
    default_value: Any = None
    description: str | None = None

    @property
    def type_name(self) -> str:
        return self.type.named_type

    @property
    def is_required(self) -> bool:
        """Non-null arguments without a default must be supplied by the caller."""
        return not self.type.is_optional and self.default_value is None


@dataclass
class IRField:
    """Represents a field in a GraphQL type, input or interface."""
    name: str
    type: IRTypeRef
    description: str | None = None
    arguments: list[IRArgument] = field(default_factory=list)

    @property
    def type_name(self) -> str:
        return self.type.named_type

    @property
    def is_list(self) -> bool:
        return self.type.is_list

    @property
    def is_optional(self) -> bool:
        return self.type.is_optional


@dataclass
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None


@dataclass
class IREnum:
    """Represents a GraphQL enum type."""
    name: str
    values: list[IREnumValue]
    description: str | None = None


@dataclass
class IRType:
    """Represents a GraphQL object type or input type."""
    name: str
    fields: list[IRField]
    interfaces: list[str] = field(default_factory=list)
    description: str | None = None
    is_input: bool = False


@dataclass
class IRInterface:
    """Represents a GraphQL interface type."""
    name: str
    fields: list[IRField]
    description: str | None = None


@dataclass
class IRUnion:
    """Represents a GraphQL union type."""
    name: str
    members: list[str]
    description: str | None = None


@dataclass
class IRScalar:
    """Represents a GraphQL scalar type."""
    name: str
    description: str | None = None


@dataclass
class IROperation:
    """Represents a root query or mutation field."""
    name: str
    operation_type: str  # 'query' or 'mutation'
    arguments: list[IRArgument]
    return_type: IRTypeRef
    description: str | None = None

    @property
    def pascal_name(self) -> str:
        """Operation name used in documents and generated identifiers, e.g. 'NewsById'."""
        return self.name[:1].upper() + self.name[1:]

    @property
    def return_type_name(self) -> str:
        return self.return_type.named_type

    @property
    def required_arguments(self) -> list[IRArgument]:
        return [arg for arg in self.arguments if arg.is_required]


@dataclass
class IRSchema:
    """Complete intermediate representation of a GraphQL schema."""
    scalars: dict[str, IRScalar] = field(default_factory=dict)
    enums: dict[str, IREnum] = field(default_factory=dict)
    types: dict[str, IRType] = field(default_factory=dict)
    inputs: dict[str, IRType] = field(default_factory=dict)
    interfaces: dict[str, IRInterface] = field(default_factory=dict)
    unions: dict[str, IRUnion] = field(default_factory=dict)
    queries: list[IROperation] = field(default_factory=list)
    mutations: list[IROperation] = field(default_factory=list)

    query_type_name: str = "Query"
    mutation_type_name: str = "Mutation"

    @property
    def all_operations(self) -> list[IROperation]:
        """Return all queries and mutations."""
        return self.queries + self.mutations

    def get_operation(self, name: str) -> IROperation:
        for op in self.all_operations:
            if op.name == name:
                return op
        raise KeyError(f"Unknown operation: {name}")
