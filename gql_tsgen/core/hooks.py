"""Generation hooks.

Pre-generation hooks receive the IR and return the IR the emitters should
see. Post-generation hooks receive each rendered file and return the text to
write.

Example usage:
    from gql_tsgen.core.hooks import HookRunner

    class DropInternalOperations:
        def pre_generate(self, ir):
            ir.queries = [op for op in ir.queries if not op.name.startswith("_")]
            return ir

    class EslintDisable:
        def post_generate(self, filename, content):
            return "/* eslint-disable */\\n" + content

    runner = HookRunner()
    runner.add_pre_hook(DropInternalOperations())
    runner.add_post_hook(EslintDisable())
"""

from typing import Iterable, Protocol, runtime_checkable

from .ir import IRSchema

# IRSchema attributes holding named declarations
TYPE_COLLECTIONS = ("types", "inputs", "enums", "interfaces", "unions")


@runtime_checkable
class PreGenerateHook(Protocol):
    """Rewrites the IR before anything is emitted."""

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Rewrites one rendered file before it is written.

    Example:
        class StripTrailingSpaces:
            def post_generate(self, filename: str, content: str) -> str:
                return "\\n".join(line.rstrip() for line in content.splitlines()) + "\\n"
    """

    def post_generate(self, filename: str, content: str) -> str:
        ...


class AddHeaderHook:
    """Prepends a comment banner, separated from the code by a blank line.

    Files that already start with the banner (e.g. from a custom template)
    are left alone.

    Example:
        hook = AddHeaderHook("// Code generated by gql-tsgen. DO NOT EDIT.")
    """

    def __init__(self, header: str):
        self.header = header.rstrip("\n")

    def post_generate(self, _filename: str, content: str) -> str:
        if content.startswith(self.header):
            return content
        return f"{self.header}\n\n{content}"


class FilterTypesHook:
    """Drops named declarations by prefix/suffix.

    Applies to object types, inputs, enums, interfaces and unions. Removing a
    declaration that something else still references makes generation fail
    with an undefined type error.

    Example:
        # Leave out Hasura-style aggregate helpers
        hook = FilterTypesHook(exclude_suffix="_aggregate")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix

    def keeps(self, name: str) -> bool:
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        if self.include_suffix and not name.endswith(self.include_suffix):
            return False
        return True

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        for collection in TYPE_COLLECTIONS:
            declarations = getattr(ir, collection)
            setattr(ir, collection, {name: decl for name, decl in declarations.items() if self.keeps(name)})
        return ir


class FilterOperationsHook:
    """Leaves root operations out of the generated client by field name."""

    def __init__(self, skip: Iterable[str]):
        self.skip = set(skip)

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        ir.queries = [op for op in ir.queries if op.name not in self.skip]
        ir.mutations = [op for op in ir.mutations if op.name not in self.skip]
        return ir


class HookRunner:
    """Holds pre- and post-generation hooks and applies them in insertion order."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, ir: IRSchema) -> IRSchema:
        for hook in self.pre_hooks:
            ir = hook.pre_generate(ir)
        return ir

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
