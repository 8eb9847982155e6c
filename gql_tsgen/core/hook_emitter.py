"""Emits React Query hooks (gpl.ts) wrapping the generated request functions.

Query hooks take (selection, args) and key on [Name, selection, args].
Mutation hooks take (selection), key on [Name, selection] and receive
their arguments when the mutation is triggered.
"""

import logging
from typing import Any

from jinja2 import Environment

from .ir import IROperation, IRSchema
from .request_emitter import describe_operation
from .templating import create_environment
from .type_emitter import TypeRegistry

logger = logging.getLogger(__name__)


class HookEmitter:
    """Renders one useQuery/useMutation wrapper per root operation."""

    template_name = "hooks.ts.j2"

    def __init__(
        self,
        schema: IRSchema,
        registry: TypeRegistry,
        env: Environment | None = None,
        hook_library: str = "@tanstack/react-query",
        types_module: str = "./gpl.d",
        resources_module: str = "./resources",
    ):
        self.schema = schema
        self.registry = registry
        self.env = env or create_environment()
        self.hook_library = hook_library
        self.types_module = types_module
        self.resources_module = resources_module

    def hook_context(self, operation: IROperation) -> dict[str, Any]:
        signature = describe_operation(operation, self.registry)
        key = [f"'{signature.name}'"]
        call_args = []
        if signature.selectable:
            key.append("selection")
            call_args.append("selection")

        if operation.operation_type == "mutation":
            # Arguments arrive with mutate(), not when the hook is built
            params = [p for p in signature.parameters() if not p.startswith("args")]
            variables = signature.args_type if signature.has_args else "void"
            if signature.has_args:
                call_args.append("args")
        else:
            params = signature.parameters()
            variables = None
            if signature.has_args:
                key.append("args")
                call_args.append("args")

        return {
            "hook_name": signature.hook_name,
            "request_name": signature.request_name,
            "operation_type": operation.operation_type,
            "parameters": ", ".join(params),
            "return_ts": signature.return_ts,
            "variables": variables,
            "key": ", ".join(key),
            "call_args": ", ".join(call_args),
            "has_args": signature.has_args,
            "type_names": signature.type_names,
        }

    def emit(self) -> str:
        hooks = [self.hook_context(op) for op in self.schema.all_operations]
        primitives = []
        if self.schema.queries:
            primitives.append("useQuery")
        if self.schema.mutations:
            primitives.append("useMutation")
        type_imports: list[str] = []
        for hook in hooks:
            type_imports.extend(n for n in hook["type_names"] if n not in type_imports)
        logger.debug("Emitting %d hooks", len(hooks))
        return self.env.get_template(self.template_name).render(
            hooks=hooks,
            primitives=primitives,
            type_imports=type_imports,
            hook_library=self.hook_library,
            types_module=self.types_module,
            resources_module=self.resources_module,
        )
