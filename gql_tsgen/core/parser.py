"""GraphQL schema parser using graphql-core.

Parses SDL files (.graphql/.graphqls), introspection results (.json) or a
live endpoint's introspection and produces an IRSchema.
"""

import json
import logging
import os
from typing import Any

import httpx
from graphql import (
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    GraphQLError as GraphQLCoreError,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    TypeNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    build_client_schema,
    get_introspection_query,
    parse,
    print_ast,
    print_schema,
)

from .ir import (
    IRArgument,
    IREnum,
    IREnumValue,
    IRField,
    IRInterface,
    IROperation,
    IRScalar,
    IRSchema,
    IRType,
    IRTypeRef,
    IRUnion,
    SchemaError,
)

logger = logging.getLogger(__name__)

SDL_EXTENSIONS = (".graphql", ".graphqls", ".gql")
INTROSPECTION_EXTENSIONS = (".json",)


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_introspection(
    url: str,
    headers: dict[str, str] | None = None,
    client: httpx.Client | None = None,
    timeout: float = 30.0,
) -> dict[str, Any]:
    """Run the standard introspection query against a GraphQL endpoint."""
    payload = {"query": get_introspection_query(descriptions=True)}
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout)
    try:
        response = client.post(url, json=payload, headers=headers or {})
        response.raise_for_status()
        result = response.json()
    except httpx.HTTPError as e:
        raise SchemaError(f"Introspection request to {url} failed: {e}") from e
    finally:
        if owns_client:
            client.close()

    if result.get("errors"):
        messages = "; ".join(e.get("message", str(e)) for e in result["errors"])
        raise SchemaError(f"Introspection of {url} returned errors: {messages}")
    return result.get("data", result)


def introspection_to_sdl(result: dict[str, Any]) -> str:
    """Convert an introspection result into SDL text."""
    if not isinstance(result, dict):
        raise SchemaError("Introspection result must be a JSON object")
    payload = result.get("data", result)
    if not isinstance(payload, dict) or "__schema" not in payload:
        raise SchemaError("Introspection result has no '__schema' key")
    try:
        schema = build_client_schema(payload)
    except (TypeError, ValueError, GraphQLCoreError) as e:
        raise SchemaError(f"Invalid introspection result: {e}") from e
    return print_schema(schema)


def parse_sdl(sdl: str) -> IRSchema:
    """Parse SDL text directly (handy for tests and embedding)."""
    parser = SchemaParser("<string>")
    return parser.parse_documents([("<string>", parser._parse_source("<string>", sdl))])


class SchemaParser:
    """Parses GraphQL schema sources into IR."""

    def __init__(self, schema_path: str, headers: dict[str, str] | None = None):
        """Initialize a parser with a schema file, directory or endpoint URL."""
        self.schema_path = schema_path
        self.headers = headers or {}
        self.ir = IRSchema()
        self.current_file = ""
        self._root_types = {"query": "Query", "mutation": "Mutation", "subscription": "Subscription"}
        self._defined_types: set[str] = set()
        # extend input/enum/interface/union, applied once every base type is known
        self._extensions: list[tuple[str, Any]] = []

    def parse_all(self) -> IRSchema:
        """Parse every schema source and return the complete IR."""
        return self.parse_documents(self._load_documents())

    def parse_documents(self, documents: list[tuple[str, DocumentNode]]) -> IRSchema:
        # Root names can be declared in any file, so find them first
        for _, document in documents:
            self._collect_root_types(document)
        self.ir.query_type_name = self._root_types["query"]
        self.ir.mutation_type_name = self._root_types["mutation"]

        for file_name, document in documents:
            self.current_file = file_name
            self._process_ast(document)
        self._apply_extensions()

        logger.debug(
            "Parsed %d types, %d inputs, %d enums, %d queries, %d mutations",
            len(self.ir.types), len(self.ir.inputs), len(self.ir.enums),
            len(self.ir.queries), len(self.ir.mutations),
        )
        return self.ir

    def _load_documents(self) -> list[tuple[str, DocumentNode]]:
        if is_url(self.schema_path):
            logger.info("Introspecting %s", self.schema_path)
            sdl = introspection_to_sdl(fetch_introspection(self.schema_path, self.headers))
            return [(self.schema_path, self._parse_source(self.schema_path, sdl))]

        schema_files = self._collect_schema_files()
        if not schema_files:
            raise SchemaError(f"No schema files found at {self.schema_path}")

        documents = []
        for file_path in schema_files:
            name = os.path.basename(file_path)
            with open(file_path, encoding="utf-8") as f:
                content = f.read()
            if file_path.endswith(INTROSPECTION_EXTENSIONS):
                try:
                    content = introspection_to_sdl(json.loads(content))
                except json.JSONDecodeError as e:
                    raise SchemaError(f"Error reading {name}: {e}") from e
            documents.append((name, self._parse_source(name, content)))
        return documents

    @staticmethod
    def _parse_source(name: str, content: str) -> DocumentNode:
        try:
            return parse(content)
        except GraphQLCoreError as e:
            logger.error("Error parsing %s: %s", name, e)
            raise SchemaError(f"Error parsing {name}: {e}") from e

    def _collect_schema_files(self) -> list[str]:
        """Collect all schema files from path."""
        extensions = SDL_EXTENSIONS + INTROSPECTION_EXTENSIONS
        files = []
        if os.path.isfile(self.schema_path):
            if self.schema_path.endswith(extensions):
                files.append(self.schema_path)
        else:
            introspection_files = []
            for root, _, filenames in os.walk(self.schema_path):
                for filename in filenames:
                    if filename.endswith(SDL_EXTENSIONS):
                        files.append(os.path.join(root, filename))
                    elif filename.endswith(INTROSPECTION_EXTENSIONS):
                        introspection_files.append(os.path.join(root, filename))
            # Introspection JSON is only read when it is the sole schema source
            if not files and len(introspection_files) == 1:
                files = introspection_files
        return sorted(files)

    def _collect_root_types(self, document: DocumentNode):
        for definition in document.definitions:
            if isinstance(definition, (SchemaDefinitionNode, SchemaExtensionNode)):
                for op_type in definition.operation_types or ():
                    self._root_types[op_type.operation.value] = op_type.type.name.value

    def _process_ast(self, ast: DocumentNode):
        """Process GraphQL AST and populate IR."""
        for definition in ast.definitions:
            if isinstance(definition, ScalarTypeDefinitionNode):
                self._process_scalar(definition)
            elif isinstance(definition, EnumTypeDefinitionNode):
                self._process_enum(definition)
            elif isinstance(definition, InterfaceTypeDefinitionNode):
                self._process_interface(definition)
            elif isinstance(definition, UnionTypeDefinitionNode):
                self._process_union(definition)
            elif isinstance(definition, ObjectTypeDefinitionNode):
                self._process_object_type(definition)
            elif isinstance(definition, ObjectTypeExtensionNode):
                self._process_object_extension(definition)
            elif isinstance(definition, InputObjectTypeDefinitionNode):
                self._process_input_type(definition)
            elif isinstance(
                definition,
                (InputObjectTypeExtensionNode, EnumTypeExtensionNode, InterfaceTypeExtensionNode, UnionTypeExtensionNode),
            ):
                self._extensions.append((self.current_file, definition))

    def _define(self, name: str):
        if name in self._defined_types:
            raise SchemaError(f"Type {name} is defined more than once ({self.current_file})")
        self._defined_types.add(name)

    def _process_scalar(self, node: ScalarTypeDefinitionNode):
        name = node.name.value
        self._define(name)
        self.ir.scalars[name] = IRScalar(name=name, description=_description(node))

    def _process_enum(self, node: EnumTypeDefinitionNode):
        name = node.name.value
        self._define(name)
        values = []
        seen: set[str] = set()
        for v in node.values or ():
            if v.name.value in seen:
                raise SchemaError(f"Duplicate enum value {name}.{v.name.value}")
            seen.add(v.name.value)
            values.append(IREnumValue(name=v.name.value, description=_description(v)))
        self.ir.enums[name] = IREnum(name=name, values=values, description=_description(node))

    def _process_interface(self, node: InterfaceTypeDefinitionNode):
        name = node.name.value
        self._define(name)
        self.ir.interfaces[name] = IRInterface(
            name=name,
            fields=self._process_fields(name, node.fields),
            description=_description(node),
        )

    def _process_union(self, node: UnionTypeDefinitionNode):
        name = node.name.value
        self._define(name)
        self.ir.unions[name] = IRUnion(
            name=name,
            members=[t.name.value for t in node.types or ()],
            description=_description(node),
        )

    def _process_object_type(self, node: ObjectTypeDefinitionNode):
        name = node.name.value
        self._define(name)
        if name == self._root_types["query"]:
            self._process_operations(node, "query")
        elif name == self._root_types["mutation"]:
            self._process_operations(node, "mutation")
        elif name == self._root_types["subscription"]:
            logger.debug("Skipping subscription root %s", name)
        else:
            fields = self._process_fields(name, node.fields)
            interfaces = [i.name.value for i in node.interfaces or ()]

            # An extension may have been processed before the base definition
            if name in self.ir.types:
                existing = self.ir.types[name]
                self._merge_fields(existing, fields)
                existing.interfaces = interfaces
                existing.description = _description(node)
            else:
                self.ir.types[name] = IRType(
                    name=name,
                    fields=fields,
                    interfaces=interfaces,
                    description=_description(node),
                )

    def _process_input_type(self, node: InputObjectTypeDefinitionNode):
        name = node.name.value
        self._define(name)
        self.ir.inputs[name] = IRType(
            name=name,
            fields=self._process_fields(name, node.fields),
            description=_description(node),
            is_input=True,
        )

    def _process_object_extension(self, node: ObjectTypeExtensionNode):
        """Process 'extend type' definitions.

        For root types: treats fields as operations.
        For other types: merges fields into the existing type definition.
        """
        name = node.name.value
        if name == self._root_types["query"]:
            self._process_operations(node, "query")
        elif name == self._root_types["mutation"]:
            self._process_operations(node, "mutation")
        elif name == self._root_types["subscription"]:
            return
        else:
            extension_fields = self._process_fields(name, node.fields)
            if name in self.ir.types:
                self._merge_fields(self.ir.types[name], extension_fields)
            else:
                self.ir.types[name] = IRType(name=name, fields=extension_fields)

    def _apply_extensions(self):
        for file_name, node in self._extensions:
            self.current_file = file_name
            name = node.name.value
            if isinstance(node, InputObjectTypeExtensionNode):
                self._merge_fields(self._extension_target(self.ir.inputs, name), self._process_fields(name, node.fields))
            elif isinstance(node, InterfaceTypeExtensionNode):
                self._merge_fields(
                    self._extension_target(self.ir.interfaces, name), self._process_fields(name, node.fields)
                )
            elif isinstance(node, EnumTypeExtensionNode):
                enum = self._extension_target(self.ir.enums, name)
                seen = {v.name for v in enum.values}
                for v in node.values or ():
                    if v.name.value in seen:
                        raise SchemaError(f"Duplicate enum value {name}.{v.name.value}")
                    seen.add(v.name.value)
                    enum.values.append(IREnumValue(name=v.name.value, description=_description(v)))
            else:
                union = self._extension_target(self.ir.unions, name)
                for member in node.types or ():
                    if member.name.value not in union.members:
                        union.members.append(member.name.value)

    def _extension_target(self, declarations: dict[str, Any], name: str) -> Any:
        if name not in declarations:
            raise SchemaError(f"Cannot extend undefined type {name} ({self.current_file})")
        return declarations[name]

    @staticmethod
    def _merge_fields(existing: IRType | IRInterface, fields: list[IRField]):
        existing_names = {f.name for f in existing.fields}
        for ir_field in fields:
            if ir_field.name in existing_names:
                raise SchemaError(f"Duplicate field {existing.name}.{ir_field.name}")
            existing.fields.append(ir_field)
            existing_names.add(ir_field.name)

    def _process_fields(self, owner: str, field_nodes) -> list[IRField]:
        """Process field definitions into the IRField list."""
        fields = []
        seen: set[str] = set()
        for node in field_nodes or ():
            if node.name.value in seen:
                raise SchemaError(f"Duplicate field {owner}.{node.name.value}")
            seen.add(node.name.value)
            fields.append(
                IRField(
                    name=node.name.value,
                    type=self._type_ref(node.type),
                    description=_description(node),
                    arguments=self._process_arguments(
                        f"{owner}.{node.name.value}", getattr(node, "arguments", None)
                    ),
                )
            )
        return fields

    def _process_arguments(self, owner: str, arg_nodes) -> list[IRArgument]:
        args = []
        seen: set[str] = set()
        for arg_node in arg_nodes or ():
            if arg_node.name.value in seen:
                raise SchemaError(f"Duplicate argument {owner}({arg_node.name.value})")
            seen.add(arg_node.name.value)
            args.append(
                IRArgument(
                    name=arg_node.name.value,
                    type=self._type_ref(arg_node.type),
                    default_value=print_ast(arg_node.default_value)
                    if arg_node.default_value
                    else None,
                    description=_description(arg_node),
                )
            )
        return args

    def _process_operations(
        self, node: ObjectTypeDefinitionNode | ObjectTypeExtensionNode, op_type: str
    ):
        """Process a root Query or Mutation type into operations."""
        known = {op.name for op in self.ir.all_operations}
        for field_node in node.fields or ():
            name = field_node.name.value
            if name in known:
                raise SchemaError(f"Duplicate operation {name}")
            known.add(name)
            op = IROperation(
                name=name,
                operation_type=op_type,
                arguments=self._process_arguments(name, field_node.arguments),
                return_type=self._type_ref(field_node.type),
                description=_description(field_node),
            )
            if op_type == "query":
                self.ir.queries.append(op)
            else:
                self.ir.mutations.append(op)

    def _type_ref(self, type_node: TypeNode) -> IRTypeRef:
        """Convert a type node into a (possibly wrapped) type reference."""
        if isinstance(type_node, NonNullTypeNode):
            return IRTypeRef.non_null(self._type_ref(type_node.type))
        if isinstance(type_node, ListTypeNode):
            return IRTypeRef.list_of(self._type_ref(type_node.type))
        return IRTypeRef.named(type_node.name.value)


def _description(node) -> str | None:
    return node.description.value if node.description else None
