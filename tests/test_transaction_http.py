"""Tests for payload submission."""

from unittest.mock import MagicMock

import pytest

from symbol_contracts.shared.network import NetworkError, NetworkErrorType
from symbol_contracts.transaction_http import JSON_HEADERS, TransactionHttp

PAYLOAD = '{"payload": "AABB"}'


@pytest.fixture
def client():
    client = MagicMock()
    client.put.return_value = {"message": "packet 9 was pushed to the network"}
    return client


@pytest.fixture
def http(client):
    return TransactionHttp("http://localhost:3000/", network_client=client)


class TestTransactionHttp:
    @pytest.mark.parametrize(
        "method,endpoint",
        [
            ("announce", "/transactions"),
            ("announce_partial", "/transactions/partial"),
            ("announce_cosignature", "/transactions/cosignature"),
        ],
    )
    def test_endpoints(self, http, client, method, endpoint):
        result = getattr(http, method)(PAYLOAD)

        assert result["message"].startswith("packet 9")
        args, kwargs = client.put.call_args
        assert args == (endpoint,)
        assert kwargs["data"] == PAYLOAD
        assert kwargs["headers"] == JSON_HEADERS

    def test_rejection_propagates(self, http, client):
        client.put.side_effect = NetworkError(
            NetworkErrorType.HTTP_ERROR, "HTTP error 409", status_code=409
        )

        with pytest.raises(NetworkError) as exc_info:
            http.announce(PAYLOAD)

        assert exc_info.value.status_code == 409
        assert client.put.call_count == 1

    def test_strips_trailing_slash(self, http):
        assert http.node_url == "http://localhost:3000"
