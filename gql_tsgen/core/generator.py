"""Code generator for GraphQL schemas.

Runs the emitters over the IR and writes the TypeScript client files.

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(ir, output_dir, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import copy
import logging
import os
from typing import Dict, Optional

from .config import GeneratorConfig
from .hook_emitter import HookEmitter
from .hooks import AddHeaderHook, FilterOperationsHook, FilterTypesHook, HookRunner
from .ir import IRSchema
from .query_builder import QueryBuilder
from .query_emitter import QueryEmitter
from .request_emitter import RequestEmitter
from .scalars import ScalarRegistry
from .templating import create_environment, module_path
from .type_emitter import TypeEmitter

logger = logging.getLogger(__name__)


def hooks_from_config(config: GeneratorConfig) -> HookRunner:
    """Build the hook runner implied by the config's header and filters."""
    runner = HookRunner()
    if config.exclude_prefix or config.include_prefix:
        runner.add_pre_hook(FilterTypesHook(
            exclude_prefix=config.exclude_prefix,
            include_prefix=config.include_prefix,
        ))
    if config.skip_operations:
        runner.add_pre_hook(FilterOperationsHook(config.skip_operations))
    if config.header:
        runner.add_post_hook(AddHeaderHook(config.header))
    return runner


class CodeGenerator:
    """Generates TypeScript client code from GraphQL IR.

    Supports custom templates via the template_dir parameter.
    Templates in template_dir take precedence over built-in templates.

    Available templates to override:
        - types.ts.j2: Interfaces, enums and unions
        - queries.ts.j2: Document templates
        - resources.ts.j2: Request functions
        - hooks.ts.j2: React Query hooks
        - index.ts.j2: Barrel file

    Example:
        generator = CodeGenerator(
            ir=schema,
            output_dir="./generated",
            template_dir="./my_templates"
        )
    """

    def __init__(
        self,
        ir: IRSchema,
        output_dir: str,
        config: Optional[GeneratorConfig] = None,
        template_dir: Optional[str] = None,
        hooks: Optional[HookRunner] = None,
        scalars: Optional[ScalarRegistry] = None,
    ):
        """Initialize the code generator.

        Args:
            ir: The intermediate representation of the GraphQL schema
            output_dir: Directory where generated code will be written
            config: Generator settings; defaults when omitted
            template_dir: Optional directory with custom Jinja2 templates.
                          Overrides config.template_dir.
            hooks: Pre/post generation hooks; built from config when omitted
            scalars: Scalar handlers used for TypeScript scalar types
        """
        self.ir = ir
        self.output_dir = output_dir
        self.config = config or GeneratorConfig()
        self.template_dir = template_dir or self.config.template_dir
        self.hooks = hooks if hooks is not None else hooks_from_config(self.config)
        self.scalars = scalars or ScalarRegistry()
        self.env = create_environment(self.template_dir)

    def render(self) -> Dict[str, str]:
        """Render every output file without touching the filesystem."""
        # Hooks may mutate the IR, keep the caller's copy intact
        ir = self.hooks.run_pre_hooks(copy.deepcopy(self.ir))
        filenames = self.config.output.filenames

        type_emitter = TypeEmitter(ir, self.scalars, self.env)
        types_content = type_emitter.emit()
        registry = type_emitter.registry

        builder = QueryBuilder(ir, registry)
        query_emitter = QueryEmitter(ir, builder, self.env)
        request_emitter = RequestEmitter(
            ir,
            registry,
            self.env,
            required_check=self.config.required_check,
            transport_module=self.config.transport_module,
            types_module=module_path(filenames.types),
            queries_module=module_path(filenames.queries),
        )
        hook_emitter = HookEmitter(
            ir,
            registry,
            self.env,
            hook_library=self.config.hook_library,
            types_module=module_path(filenames.types),
            resources_module=module_path(filenames.resources),
        )

        files = {
            filenames.types: types_content,
            filenames.queries: query_emitter.emit(),
            filenames.resources: request_emitter.emit(),
            filenames.main: hook_emitter.emit(),
            filenames.index: self.env.get_template("index.ts.j2").render(
                modules=[
                    module_path(filenames.main),
                    module_path(filenames.queries),
                    module_path(filenames.resources),
                ]
            ),
        }
        return {name: self.hooks.run_post_hooks(name, content) for name, content in files.items()}

    def generate(self) -> Dict[str, str]:
        """Generate all code files and return {filename: path} of what was written."""
        os.makedirs(self.output_dir, exist_ok=True)
        written = {}
        for filename, content in self.render().items():
            full_path = os.path.join(self.output_dir, filename)
            with open(full_path, "w", encoding="utf-8") as f:
                f.write(content)
            logger.info("Wrote %s", full_path)
            written[filename] = full_path
        return written
