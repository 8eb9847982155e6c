"""Emits the per-operation document templates (queries.ts)."""

import logging
import re

from graphql import GraphQLError as GraphQLCoreError, parse
from jinja2 import Environment

from .ir import IROperation, IRSchema
from .query_builder import FIELDS_PLACEHOLDER, QueryBuilder
from .templating import create_environment

logger = logging.getLogger(__name__)

_ARGUMENT_TOKEN = re.compile(r"\{\{args\.[A-Za-z_][A-Za-z0-9_]*\}\}")


def template_constant(operation: IROperation) -> str:
    """Name of the exported template constant, e.g. 'newsByIdQuery'."""
    return f"{operation.name}Query"


class QueryEmitter:
    """Renders one template constant per root operation."""

    template_name = "queries.ts.j2"

    def __init__(self, schema: IRSchema, builder: QueryBuilder, env: Environment | None = None):
        self.schema = schema
        self.builder = builder
        self.env = env or create_environment()

    def templates(self) -> list[dict[str, str]]:
        result = []
        for op in self.schema.all_operations:
            document = self.builder.template(op)
            self._validate(op, document)
            result.append({"const_name": template_constant(op), "template": document})
        return result

    def emit(self) -> str:
        templates = self.templates()
        logger.debug("Emitting %d document templates", len(templates))
        return self.env.get_template(self.template_name).render(queries=templates)

    @staticmethod
    def _validate(operation: IROperation, document: str):
        """Check that the template becomes valid GraphQL once filled in."""
        sample = _ARGUMENT_TOKEN.sub("null", document).replace(FIELDS_PLACEHOLDER, "__typename")
        try:
            parse(sample)
        except GraphQLCoreError as e:
            raise ValueError(
                f"Generated invalid GraphQL for {operation.name}: {e}\n"
                f"Document: {document}"
            ) from e
