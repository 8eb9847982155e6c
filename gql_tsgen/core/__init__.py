"""Core modules for GraphQL to TypeScript code generation."""

from .config import ConfigError, GeneratorConfig, load_config, write_default_config
from .executor import (
    GraphQLError,
    GraphQLExecutor,
    MissingArgumentError,
    NoFieldsSelectedError,
    RequestFunction,
    Transport,
    build_request_functions,
)
from .generator import CodeGenerator
from .hook_emitter import HookEmitter
from .hooks import (
    AddHeaderHook,
    FilterOperationsHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
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
from .parser import SchemaParser, parse_sdl
from .query_builder import OperationDefinition, QueryBuilder, render_document
from .query_emitter import QueryEmitter
from .request_emitter import RequestEmitter
from .scalars import (
    IsoFormatHandler,
    PassThroughHandler,
    ScalarHandler,
    ScalarRegistry,
    StringifyHandler,
)
from .type_emitter import TypeEmitter, TypeRegistry

__all__ = [
    # Config
    "ConfigError",
    "GeneratorConfig",
    "load_config",
    "write_default_config",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "PassThroughHandler",
    "IsoFormatHandler",
    "StringifyHandler",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "FilterOperationsHook",
    "HookRunner",
    # IR types
    "IRArgument",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInterface",
    "IROperation",
    "IRScalar",
    "IRSchema",
    "IRType",
    "IRTypeRef",
    "IRUnion",
    "SchemaError",
    # Parser
    "SchemaParser",
    "parse_sdl",
    # Emitters
    "TypeEmitter",
    "TypeRegistry",
    "QueryEmitter",
    "RequestEmitter",
    "HookEmitter",
    "CodeGenerator",
    # Query Builder
    "OperationDefinition",
    "QueryBuilder",
    "render_document",
    # Executor
    "GraphQLError",
    "GraphQLExecutor",
    "MissingArgumentError",
    "NoFieldsSelectedError",
    "RequestFunction",
    "Transport",
    "build_request_functions",
]
