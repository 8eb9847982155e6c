"""Tests for generation hooks."""

import pytest

from gql_tsgen.core.hooks import (
    AddHeaderHook,
    FilterOperationsHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from gql_tsgen.core.ir import IREnum, IRSchema, IRType, IRUnion


@pytest.fixture
def sample_ir():
    """Create a sample IR schema for testing."""
    return IRSchema(
        enums={
            "Status": IREnum(name="Status", values=[]),
            "_Internal": IREnum(name="_Internal", values=[]),
        },
        types={
            "User": IRType(name="User", fields=[]),
            "_Meta": IRType(name="_Meta", fields=[]),
            "Product": IRType(name="Product", fields=[]),
        },
        inputs={
            "CreateUserInput": IRType(name="CreateUserInput", fields=[], is_input=True),
            "_DebugInput": IRType(name="_DebugInput", fields=[], is_input=True),
        },
        unions={
            "Entity": IRUnion(name="Entity", members=["User", "Product"]),
            "_Any": IRUnion(name="_Any", members=["_Meta"]),
        },
    )


class TestAddHeaderHook:
    """Tests for AddHeaderHook."""

    def test_adds_header_and_blank_line(self):
        hook = AddHeaderHook("// Code generated")
        assert hook.post_generate("gpl.ts", "export {};\n") == "// Code generated\n\nexport {};\n"

    def test_trailing_newline_in_header(self):
        hook = AddHeaderHook("// Header\n")
        assert hook.post_generate("index.ts", "code") == "// Header\n\ncode"

    def test_existing_header_is_not_repeated(self):
        hook = AddHeaderHook("// Header")
        content = hook.post_generate("gpl.d.ts", "export interface User {}\n")
        assert hook.post_generate("gpl.d.ts", content) == content


class TestFilterTypesHook:
    """Tests for FilterTypesHook."""

    def test_exclude_prefix_applies_to_every_collection(self, sample_ir):
        result = FilterTypesHook(exclude_prefix="_").pre_generate(sample_ir)

        assert list(result.types) == ["User", "Product"]
        assert list(result.inputs) == ["CreateUserInput"]
        assert list(result.enums) == ["Status"]
        assert list(result.unions) == ["Entity"]

    def test_exclude_suffix(self, sample_ir):
        result = FilterTypesHook(exclude_suffix="Input").pre_generate(sample_ir)
        assert result.inputs == {}

    def test_include_prefix(self, sample_ir):
        result = FilterTypesHook(include_prefix="Create").pre_generate(sample_ir)
        assert list(result.inputs) == ["CreateUserInput"]
        assert result.types == {}

    def test_keeps(self):
        hook = FilterTypesHook(include_suffix="Input", exclude_prefix="_")
        assert hook.keeps("CreateUserInput")
        assert not hook.keeps("_DebugInput")
        assert not hook.keeps("User")


class TestFilterOperationsHook:
    """Tests for FilterOperationsHook."""

    def test_skips_named_operations(self, product_schema):
        result = FilterOperationsHook(["me", "logout"]).pre_generate(product_schema)

        assert "me" not in [op.name for op in result.queries]
        assert "logout" not in [op.name for op in result.mutations]
        assert "login" in [op.name for op in result.mutations]


class TestHookRunner:
    """Tests for HookRunner."""

    def test_pre_hooks_run_in_order(self, sample_ir):
        runner = HookRunner()
        runner.add_pre_hook(FilterTypesHook(exclude_prefix="_"))

        class CountTypesHook:
            def pre_generate(self, ir):
                ir.type_count = len(ir.types)
                return ir

        runner.add_pre_hook(CountTypesHook())

        result = runner.run_pre_hooks(sample_ir)
        assert result.type_count == 2  # User and Product (after filtering)

    def test_post_hooks_wrap_in_order(self):
        runner = HookRunner()
        runner.add_post_hook(AddHeaderHook("// Line 1"))
        runner.add_post_hook(AddHeaderHook("// Line 0"))

        assert runner.run_post_hooks("gpl.ts", "code") == "// Line 0\n\n// Line 1\n\ncode"

    def test_empty_runner_is_identity(self, sample_ir):
        runner = HookRunner()
        assert runner.run_pre_hooks(sample_ir) is sample_ir
        assert runner.run_post_hooks("gpl.ts", "code") == "code"


class TestProtocolCompliance:
    """Tests for protocol compliance."""

    def test_builtin_hooks(self):
        assert isinstance(AddHeaderHook("header"), PostGenerateHook)
        assert isinstance(FilterTypesHook(), PreGenerateHook)
        assert isinstance(FilterOperationsHook([]), PreGenerateHook)

    def test_custom_hooks(self):
        class CustomPreHook:
            def pre_generate(self, ir):
                return ir

        class CustomPostHook:
            def post_generate(self, filename, content):
                return content

        assert isinstance(CustomPreHook(), PreGenerateHook)
        assert isinstance(CustomPostHook(), PostGenerateHook)
        assert not isinstance(CustomPostHook(), PreGenerateHook)
