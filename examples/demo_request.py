#!/usr/bin/env python3
"""Demonstration of request functions and code generation.

This script shows how to:
1. Parse a GraphQL schema
2. Generate the TypeScript client files
3. Call the same operations from Python through a fake transport

Note: This demo doesn't make real API calls - the transport just prints
the documents it receives.
"""

import asyncio
import tempfile
from pathlib import Path

from gql_tsgen.core import (
    CodeGenerator,
    MissingArgumentError,
    NoFieldsSelectedError,
    SchemaParser,
    build_request_functions,
)


async def print_transport(document):
    print("   --- document ---")
    for line in document.splitlines():
        print(f"   {line}")
    return {"user": {"id": "42"}, "createProduct": {"id": "1", "name": "Widget"}}


async def call_operations(ir):
    requests = build_request_functions(ir, print_transport)

    print("\n3. Querying a user with a partial selection")
    result = await requests["user"]({"id": True, "email": False}, {"id": "42"})
    print(f"   Result: {result}")

    print("\n4. Creating a product (enum values are written bare)")
    result = await requests["createProduct"](
        {"id": True, "name": True},
        {"data": {"name": "Widget", "status": "stable"}},
    )
    print(f"   Result: {result}")

    print("\n5. Validation happens before anything is sent")
    try:
        await requests["user"]({"id": False}, {"id": "42"})
    except NoFieldsSelectedError as e:
        print(f"   {e}")
    try:
        await requests["login"]({"token": True}, {"email": "", "password": "x"})
    except MissingArgumentError as e:
        print(f"   {e}")


def main():
    schema_path = Path(__file__).parent / "schema.graphql"

    print("=== gql-tsgen Demo ===\n")

    print("1. Parsing GraphQL schema...")
    ir = SchemaParser(str(schema_path)).parse_all()
    print(f"   Found {len(ir.queries)} queries and {len(ir.mutations)} mutations")
    print(f"   {len(ir.types)} types, {len(ir.enums)} enums")

    print("\n2. Generating TypeScript files...")
    with tempfile.TemporaryDirectory() as tmpdir:
        written = CodeGenerator(ir, tmpdir).generate()
        for filename, path in written.items():
            print(f"   {filename}: {len(Path(path).read_text().splitlines())} lines")

    asyncio.run(call_operations(ir))

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
