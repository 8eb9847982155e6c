"""Emits the typed request functions (resources.ts).

Each generated function checks the selection and required arguments,
fills the document template, sends it through graphqlRequest and returns
the operation's field from the response.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from jinja2 import Environment

from .ir import IROperation, IRSchema
from .query_emitter import template_constant
from .templating import create_environment
from .type_emitter import ENUM, INPUT, UNION, TypeRegistry

logger = logging.getLogger(__name__)

REQUIRED_CHECKS = ("truthy", "presence")


@dataclass
class OperationSignature:
    """TypeScript-facing description of one operation's parameters and result."""
    operation: IROperation
    selectable: bool
    selection_type: str | None
    args_type: str | None
    args_optional: bool
    return_ts: str
    type_names: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.operation.pascal_name

    @property
    def request_name(self) -> str:
        return f"request{self.name}"

    @property
    def hook_name(self) -> str:
        return f"use{self.name}"

    @property
    def const_name(self) -> str:
        return template_constant(self.operation)

    @property
    def has_args(self) -> bool:
        return self.args_type is not None

    def parameters(self) -> list[str]:
        params = []
        if self.selectable:
            params.append(f"selection: {self.selection_type}")
        if self.has_args:
            default = " = {}" if self.args_optional else ""
            params.append(f"args: {self.args_type}{default}")
        return params


def describe_operation(operation: IROperation, registry: TypeRegistry) -> OperationSignature:
    return_name = operation.return_type_name
    selectable = not registry.is_leaf(return_name)
    selection_type = None
    if selectable:
        if registry.kind_of(return_name) == UNION:
            selection_type = "Partial<Record<'__typename', boolean>>"
        else:
            selection_type = f"Partial<Record<keyof {return_name}, boolean>>"

    type_names = list(registry.referenced_names(operation.return_type))
    args_type = None
    if operation.arguments:
        members = []
        for arg in operation.arguments:
            marker = "" if arg.is_required else "?"
            members.append(f"{arg.name}{marker}: {registry.ts_type(arg.type)}")
            for name in registry.referenced_names(arg.type):
                if name not in type_names:
                    type_names.append(name)
        args_type = "{ " + "; ".join(members) + " }"

    return OperationSignature(
        operation=operation,
        selectable=selectable,
        selection_type=selection_type,
        args_type=args_type,
        args_optional=not operation.required_arguments,
        return_ts=registry.ts_type(operation.return_type),
        type_names=type_names,
    )


def ts_literal_kind(registry: TypeRegistry, type_name: str) -> str:
    """TypeScript InputFieldKind value for a declared type."""
    kind = registry.literal_kind(type_name)
    if kind == ENUM:
        return "{ kind: 'enum' }"
    if kind == INPUT:
        return f"{{ kind: 'input', type: '{type_name}' }}"
    return "{ kind: 'scalar' }"


class RequestEmitter:
    """Renders one async request function per root operation."""

    template_name = "resources.ts.j2"

    def __init__(
        self,
        schema: IRSchema,
        registry: TypeRegistry,
        env: Environment | None = None,
        required_check: str = "truthy",
        transport_module: str = "./client",
        types_module: str = "./gpl.d",
        queries_module: str = "./queries",
    ):
        if required_check not in REQUIRED_CHECKS:
            raise ValueError(f"required_check must be one of {REQUIRED_CHECKS}, got {required_check!r}")
        self.schema = schema
        self.registry = registry
        self.env = env or create_environment()
        self.required_check = required_check
        self.transport_module = transport_module
        self.types_module = types_module
        self.queries_module = queries_module

    def required_check_line(self, arg_name: str) -> str:
        if self.required_check == "presence":
            condition = f"args.{arg_name} === undefined || args.{arg_name} === null"
        else:
            condition = f"!args.{arg_name}"
        return f"if ({condition}) throw new Error('{arg_name} is required.');"

    def operation_context(self, operation: IROperation) -> dict[str, Any]:
        signature = describe_operation(operation, self.registry)
        return {
            "function_name": signature.request_name,
            "const_name": signature.const_name,
            "parameters": ", ".join(signature.parameters()),
            "return_ts": signature.return_ts,
            "selectable": signature.selectable,
            "fields_arg": "fields" if signature.selectable else "''",
            "operation_type": operation.operation_type,
            "field_name": operation.name,
            "description": operation.description,
            "checks": [self.required_check_line(arg.name) for arg in operation.required_arguments],
            "literals": [
                {
                    "name": arg.name,
                    "value": f"argumentLiteral(args.{arg.name}, {ts_literal_kind(self.registry, arg.type_name)})",
                }
                for arg in operation.arguments
            ],
            "type_names": signature.type_names,
        }

    def input_kinds(self) -> list[dict[str, Any]]:
        return [
            {
                "name": ir_input.name,
                "fields": [
                    {"name": f.name, "kind": ts_literal_kind(self.registry, f.type_name)}
                    for f in ir_input.fields
                ],
            }
            for ir_input in self.schema.inputs.values()
        ]

    def emit(self) -> str:
        operations = [self.operation_context(op) for op in self.schema.all_operations]
        type_imports: list[str] = []
        for op in operations:
            type_imports.extend(n for n in op["type_names"] if n not in type_imports)
        logger.debug("Emitting %d request functions", len(operations))
        return self.env.get_template(self.template_name).render(
            operations=operations,
            inputs=self.input_kinds(),
            type_imports=type_imports,
            types_module=self.types_module,
            queries_module=self.queries_module,
            transport_module=self.transport_module,
        )
