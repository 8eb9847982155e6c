"""Tests for request functions and the HTTP executor."""

import asyncio
import json

import httpx
import pytest

from gql_tsgen.core.executor import (
    GraphQLError,
    GraphQLExecutor,
    MissingArgumentError,
    NoFieldsSelectedError,
    RequestFunction,
    Transport,
    build_request_functions,
)


class RecordingTransport:
    """Transport that records documents and answers with canned data."""

    def __init__(self, data=None):
        self.data = data or {}
        self.documents = []

    async def graphql_request(self, document):
        self.documents.append(document)
        return self.data


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def requests(product_schema, transport):
    return build_request_functions(product_schema, transport)


def mock_executor(handler, **kwargs):
    """Executor whose HTTP client is backed by an httpx mock transport."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLExecutor("https://api.example.com/graphql", client=client, **kwargs)


class TestSelectionValidation:
    """An empty selection never reaches the transport."""

    @pytest.mark.parametrize("selection", [None, {}, {"id": False, "email": False}])
    def test_query_without_fields(self, requests, transport, selection):
        with pytest.raises(NoFieldsSelectedError, match="No fields selected for query."):
            asyncio.run(requests["user"](selection, {"id": "42"}))
        assert transport.documents == []

    def test_mutation_without_fields(self, requests, transport):
        with pytest.raises(NoFieldsSelectedError, match="No fields selected for mutation."):
            asyncio.run(requests["login"]({"token": False}, {"email": "a@b.c", "password": "x"}))
        assert transport.documents == []

    def test_leaf_operation_needs_no_selection(self, product_schema):
        transport = RecordingTransport({"logout": True})
        requests = build_request_functions(product_schema, transport)
        assert asyncio.run(requests["logout"]()) is True
        assert transport.documents == ["mutation Logout {\n  logout\n}"]


class TestRequiredArguments:
    """Required arguments are checked before anything is sent."""

    def test_missing_argument(self, requests, transport):
        with pytest.raises(MissingArgumentError, match="id is required."):
            asyncio.run(requests["user"]({"id": True}))
        assert transport.documents == []

    def test_first_missing_argument_wins(self, requests, transport):
        with pytest.raises(MissingArgumentError) as exc_info:
            asyncio.run(requests["login"]({"token": True}, {}))
        assert exc_info.value.argument == "email"
        assert transport.documents == []

    def test_other_arguments_do_not_help(self, requests, transport):
        with pytest.raises(MissingArgumentError, match="password is required."):
            asyncio.run(requests["login"]({"token": True}, {"email": "a@b.c"}))
        assert transport.documents == []

    def test_selection_is_checked_first(self, requests):
        with pytest.raises(NoFieldsSelectedError):
            asyncio.run(requests["login"]({}, {}))

    def test_truthy_check_rejects_empty_string(self, requests, transport):
        with pytest.raises(MissingArgumentError, match="email is required."):
            asyncio.run(requests["login"]({"token": True}, {"email": "", "password": "x"}))
        assert transport.documents == []

    def test_presence_check_accepts_empty_string(self, product_schema):
        transport = RecordingTransport({"login": {"token": "t"}})
        requests = build_request_functions(product_schema, transport, required_check="presence")
        result = asyncio.run(requests["login"]({"token": True}, {"email": "", "password": "x"}))
        assert result == {"token": "t"}
        assert 'login(email: "", password: "x")' in transport.documents[0]

    def test_presence_check_rejects_none(self, product_schema, transport):
        requests = build_request_functions(product_schema, transport, required_check="presence")
        with pytest.raises(MissingArgumentError, match="email is required."):
            asyncio.run(requests["login"]({"token": True}, {"email": None, "password": "x"}))

    def test_invalid_check(self, product_schema, transport, requests):
        with pytest.raises(ValueError, match="required_check"):
            RequestFunction(
                product_schema.get_operation("me"),
                requests["me"].builder,
                transport,
                required_check="strict",
            )


class TestRequestFunction:
    """Tests for document building and response unwrapping."""

    def test_user_query(self, product_schema):
        transport = RecordingTransport({"user": {"id": "42"}})
        requests = build_request_functions(product_schema, transport)
        result = asyncio.run(requests["user"]({"id": True, "email": False}, {"id": "42"}))

        assert result == {"id": "42"}
        assert transport.documents == ['query User {\n  user(id: "42") {\n    id\n  }\n}']

    def test_create_product(self, product_schema):
        transport = RecordingTransport({"createProduct": {"id": "1"}})
        requests = build_request_functions(product_schema, transport)
        selection = {"id": True, "name": True, "price": True, "status": True, "categories": True, "owner": True}
        asyncio.run(requests["createProduct"](selection, {"data": {"name": "Widget", "status": "stable"}}))

        document = transport.documents[0]
        assert 'createProduct(data: {name: "Widget", status: stable})' in document
        assert "    id\nname\nprice\nstatus\ncategories\nowner\n" in document

    def test_one_call_per_invocation(self, product_schema):
        transport = RecordingTransport({"me": None})
        requests = build_request_functions(product_schema, transport)
        asyncio.run(requests["me"]({"id": True}))
        asyncio.run(requests["me"]({"email": True}))
        assert len(transport.documents) == 2

    def test_null_result(self, product_schema):
        transport = RecordingTransport({"me": None})
        requests = build_request_functions(product_schema, transport)
        assert asyncio.run(requests["me"]({"id": True})) is None

    def test_missing_field_in_response(self, requests):
        with pytest.raises(GraphQLError, match="no 'me' field"):
            asyncio.run(requests["me"]({"id": True}))

    def test_plain_coroutine_transport(self, product_schema):
        sent = []

        async def graphql_request(document):
            sent.append(document)
            return {"newsStatistics": {"total": 3}}

        requests = build_request_functions(product_schema, graphql_request)
        assert asyncio.run(requests["newsStatistics"]({"total": True})) == {"total": 3}
        assert "newsStatistics {\n    total\n  }" in sent[0]

    def test_transport_errors_propagate(self, product_schema):
        async def failing(document):
            raise ConnectionError("boom")

        requests = build_request_functions(product_schema, failing)
        with pytest.raises(ConnectionError, match="boom"):
            asyncio.run(requests["me"]({"id": True}))

    def test_prepare(self, requests):
        document = requests["products"].prepare({"id": True}, {"status": "beta"})
        assert "products(status: beta) {" in document

    def test_recording_transport_is_transport(self, transport):
        assert isinstance(transport, Transport)


class TestGraphQLExecutor:
    """Tests for the httpx-based executor."""

    def test_posts_document(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"me": {"id": "1"}}})

        executor = mock_executor(handler)
        data = asyncio.run(executor.graphql_request("query Me {\n  me {\n    id\n  }\n}"))

        assert data == {"me": {"id": "1"}}
        assert seen["url"] == "https://api.example.com/graphql"
        assert seen["body"] == {"query": "query Me {\n  me {\n    id\n  }\n}"}

    def test_graphql_errors(self):
        def handler(request):
            return httpx.Response(200, json={"errors": [{"message": "Not authorised"}], "data": None})

        executor = mock_executor(handler)
        with pytest.raises(GraphQLError, match="Not authorised") as exc_info:
            asyncio.run(executor.graphql_request("query Me { me { id } }"))
        assert exc_info.value.errors == [{"message": "Not authorised"}]

    def test_http_errors_propagate(self):
        executor = mock_executor(lambda request: httpx.Response(503))
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(executor.graphql_request("query Me { me { id } }"))

    def test_default_client_sends_headers(self):
        executor = GraphQLExecutor("https://api.example.com/graphql", headers={"x-api-key": "secret"})

        async def run():
            client = await executor._get_client()
            headers = dict(client.headers)
            await executor.close()
            return headers

        headers = asyncio.run(run())
        assert headers["x-api-key"] == "secret"
        assert headers["content-type"] == "application/json"
        assert executor._client is None

    def test_end_to_end(self, product_schema):
        def handler(request):
            body = json.loads(request.content)
            assert 'user(id: "42")' in body["query"]
            return httpx.Response(200, json={"data": {"user": {"id": "42"}}})

        async def run():
            async with mock_executor(handler) as executor:
                requests = build_request_functions(product_schema, executor)
                return await requests["user"]({"id": True}, {"id": "42"})

        assert asyncio.run(run()) == {"id": "42"}
