"""Type declarations for the generated TypeScript client.

The TypeRegistry built here is the single source of truth for what kind of
type a name refers to. The request emitter and the runtime query builder
consult it to decide how an argument value is written into a document.
"""

import logging
from typing import Any

from jinja2 import Environment

from .ir import LIST, NON_NULL, IRField, IRSchema, IRTypeRef, SchemaError
from .scalars import ScalarRegistry
from .templating import create_environment

logger = logging.getLogger(__name__)

SCALAR = "scalar"
ENUM = "enum"
OBJECT = "object"
INTERFACE = "interface"
UNION = "union"
INPUT = "input"


class TypeRegistry:
    """Names known to the generator, keyed to their kind."""

    def __init__(self, scalars: ScalarRegistry | None = None):
        self.scalars = scalars or ScalarRegistry()
        self._kinds: dict[str, str] = {name: SCALAR for name in self.scalars.builtin_names}

    def register(self, name: str, kind: str):
        self._kinds[name] = kind

    def __contains__(self, name: str) -> bool:
        return name in self._kinds

    def kind_of(self, name: str, context: str | None = None) -> str:
        """Return the kind of a type, failing generation for unknown names."""
        try:
            return self._kinds[name]
        except KeyError:
            where = f" (referenced by {context})" if context else ""
            raise SchemaError(f"Undefined type {name}{where}") from None

    @property
    def enum_names(self) -> set[str]:
        return {name for name, kind in self._kinds.items() if kind == ENUM}

    def is_leaf(self, name: str) -> bool:
        """Scalars and enums are returned without a selection set."""
        return self.kind_of(name) in (SCALAR, ENUM)

    def ts_type(self, ref: IRTypeRef) -> str:
        """Map a type reference to a TypeScript type expression."""
        if ref.kind == NON_NULL:
            return self._ts_inner(ref.of_type)
        return f"{self._ts_inner(ref)} | null"

    def _ts_inner(self, ref: IRTypeRef) -> str:
        if ref.kind == LIST:
            item = self.ts_type(ref.of_type)
            if " | " in item:
                item = f"({item})"
            return f"{item}[]"
        if self.kind_of(ref.name) == SCALAR:
            return self.scalars.ts_type(ref.name)
        return ref.name

    def referenced_names(self, ref: IRTypeRef) -> list[str]:
        """Generated declarations a type expression needs imported."""
        name = ref.named_type
        if self.kind_of(name) == SCALAR:
            return []
        return [name]

    def literal_kind(self, name: str) -> str:
        """How values of this named type are written as argument literals."""
        kind = self.kind_of(name)
        if kind in (ENUM, INPUT):
            return kind
        return SCALAR


class TypeEmitter:
    """Emits interfaces, enums and unions for every schema type."""

    template_name = "types.ts.j2"

    def __init__(
        self,
        schema: IRSchema,
        scalars: ScalarRegistry | None = None,
        env: Environment | None = None,
    ):
        self.schema = schema
        self.registry = TypeRegistry(scalars)
        self.env = env or create_environment()

    def build_registry(self) -> TypeRegistry:
        """Register every declared name, then verify all references resolve."""
        for name in self.schema.scalars:
            self.registry.register(name, SCALAR)
        for name in self.schema.enums:
            self.registry.register(name, ENUM)
        for name in self.schema.interfaces:
            self.registry.register(name, INTERFACE)
        for name in self.schema.unions:
            self.registry.register(name, UNION)
        for name in self.schema.types:
            self.registry.register(name, OBJECT)
        for name in self.schema.inputs:
            self.registry.register(name, INPUT)
        self._check_references()
        return self.registry

    def _check_references(self):
        owners = [*self.schema.interfaces.values(), *self.schema.types.values(), *self.schema.inputs.values()]
        for owner in owners:
            for ir_field in owner.fields:
                self.registry.kind_of(ir_field.type_name, f"{owner.name}.{ir_field.name}")
                for arg in ir_field.arguments:
                    self.registry.kind_of(arg.type_name, f"{owner.name}.{ir_field.name}({arg.name})")
        for ir_type in self.schema.types.values():
            for iface in ir_type.interfaces:
                if self.registry.kind_of(iface, ir_type.name) != INTERFACE:
                    raise SchemaError(f"{ir_type.name} implements {iface}, which is not an interface")
        for union in self.schema.unions.values():
            for member in union.members:
                self.registry.kind_of(member, union.name)
        for op in self.schema.all_operations:
            self.registry.kind_of(op.return_type_name, op.name)
            for arg in op.arguments:
                self.registry.kind_of(arg.type_name, f"{op.name}({arg.name})")

    def emit(self) -> str:
        self.build_registry()
        declarations = self.declarations()
        logger.debug("Emitting %d type declarations", len(declarations))
        return self.env.get_template(self.template_name).render(declarations=declarations)

    def declarations(self) -> list[dict[str, Any]]:
        """Template context for every declaration, in a stable order."""
        result = []
        for enum in self.schema.enums.values():
            result.append(self._declaration(
                "enum", enum.name, enum.description,
                values=[v.name for v in enum.values],
            ))
        for iface in self.schema.interfaces.values():
            result.append(self._declaration(
                "interface", iface.name, iface.description,
                fields=[self._field(f) for f in iface.fields],
            ))
        for ir_type in self.schema.types.values():
            result.append(self._declaration(
                "interface", ir_type.name, ir_type.description,
                fields=[self._field(f) for f in ir_type.fields],
                extends=list(ir_type.interfaces),
            ))
        for union in self.schema.unions.values():
            result.append(self._declaration(
                "union", union.name, union.description, members=list(union.members),
            ))
        for ir_input in self.schema.inputs.values():
            result.append(self._declaration(
                "interface", ir_input.name, ir_input.description,
                fields=[self._field(f, is_input=True) for f in ir_input.fields],
            ))
        for root_name, operations in (
            (self.schema.query_type_name, self.schema.queries),
            (self.schema.mutation_type_name, self.schema.mutations),
        ):
            if operations:
                result.append(self._declaration(
                    "interface", root_name, None,
                    fields=[
                        {
                            "name": op.name,
                            "ts_type": self.registry.ts_type(op.return_type),
                            "optional": False,
                            "description": op.description,
                        }
                        for op in operations
                    ],
                ))
        return result

    def _field(self, ir_field: IRField, is_input: bool = False) -> dict[str, Any]:
        return {
            "name": ir_field.name,
            "ts_type": self.registry.ts_type(ir_field.type),
            # Nullable input fields may be left out entirely
            "optional": is_input and ir_field.is_optional,
            "description": ir_field.description,
        }

    @staticmethod
    def _declaration(kind, name, description, fields=None, values=None, members=None, extends=None):
        return {
            "kind": kind,
            "name": name,
            "description": description,
            "fields": fields or [],
            "values": values or [],
            "members": members or [],
            "extends": extends or [],
        }
