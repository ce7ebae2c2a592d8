r"""Unit tests for SupercastClient."""

from __future__ import annotations

import io
import json
from unittest.mock import Mock, call, patch

import pytest

from supercast import SupercastClient, configure
from supercast.core.config import ClientConfig
from supercast.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    InvalidRequestError,
    PermissionDeniedError,
    RateLimitError,
)
from supercast.resource import APIResource
from supercast.transport import FailureKind, HttpxTransport
from tests.helpers import Episode, StubTransport, create_transport_response, timeout_error

API_URL = "https://api.supercast.com/v1"


@pytest.fixture
def client(transport: StubTransport, config: ClientConfig) -> SupercastClient:
    return SupercastClient(transport, config=config)


####################################
#     Tests for execute_request    #
####################################


def test_execute_request_get(client: SupercastClient, transport: StubTransport) -> None:
    response, api_key = client.execute_request("GET", "/episodes/1")
    assert response.data == {"id": 1}
    assert response.http_status == 200
    assert api_key == "sk_test_123"
    assert len(transport.calls) == 1
    assert transport.calls[0].method == "get"
    assert transport.calls[0].url == f"{API_URL}/episodes/1"
    assert transport.calls[0].content is None


def test_execute_request_retries_timeouts(config: ClientConfig, mock_sleep: Mock) -> None:
    """Test that two timeouts then a success sleep exactly twice."""
    transport = StubTransport([timeout_error(), timeout_error(), create_transport_response()])
    response, _ = SupercastClient(transport, config=config).execute_request("get", "/episodes/1")
    assert response.data == {"id": 1}
    assert len(transport.calls) == 3
    assert mock_sleep.call_count == 2
    assert mock_sleep.call_args_list[0] == call(0.5)


def test_execute_request_retries_exhausted(config: ClientConfig, mock_sleep: Mock) -> None:
    transport = StubTransport([timeout_error()] * 3)
    with pytest.raises(APIConnectionError, match=r"Request was retried 2 times"):
        SupercastClient(transport, config=config).execute_request("get", "/episodes/1")
    assert len(transport.calls) == 3


def test_execute_request_invalid_request(config: ClientConfig, mock_sleep: Mock) -> None:
    transport = StubTransport([create_transport_response(422, {"message": "bad"})])
    with pytest.raises(InvalidRequestError) as exc_info:
        SupercastClient(transport, config=config).execute_request("post", "/episodes")
    assert exc_info.value.message == "bad"
    assert exc_info.value.http_status == 422
    assert len(transport.calls) == 1
    mock_sleep.assert_not_called()


@pytest.mark.parametrize(
    ("status", "error_class"),
    [
        (400, InvalidRequestError),
        (401, AuthenticationError),
        (403, PermissionDeniedError),
        (404, InvalidRequestError),
        (422, InvalidRequestError),
        (429, RateLimitError),
        (500, APIError),
    ],
)
def test_execute_request_error_status(
    status: int, error_class: type[APIError], config: ClientConfig, mock_sleep: Mock
) -> None:
    transport = StubTransport([create_transport_response(status, {"message": "failure"})])
    with pytest.raises(error_class) as exc_info:
        SupercastClient(transport, config=config).execute_request("get", "/episodes/1")
    assert type(exc_info.value) is error_class
    assert exc_info.value.response.http_status == status
    assert len(transport.calls) == 1


def test_execute_request_error_headers_case_insensitive(config: ClientConfig) -> None:
    transport = StubTransport(
        [create_transport_response(429, {"message": "slow"}, headers={"Request-Id": "req_1"})]
    )
    with pytest.raises(RateLimitError) as exc_info:
        SupercastClient(transport, config=config).execute_request("get", "/episodes/1")
    assert exc_info.value.http_headers["Request-Id"] == "req_1"
    assert exc_info.value.http_headers["request-id"] == "req_1"


def test_execute_request_decodes_redirect_status(
    client: SupercastClient, transport: StubTransport
) -> None:
    transport.outcomes.append(create_transport_response(302, {"id": 2}))
    response, _ = client.execute_request("get", "/episodes/2")
    assert response.http_status == 302
    assert response.data == {"id": 2}


@pytest.mark.parametrize("body", ["not json", ""])
def test_execute_request_undecodable_body(body: str, client: SupercastClient) -> None:
    client.transport.outcomes.append(create_transport_response(body=body))
    with pytest.raises(APIError, match=r"HTTP response code was 200") as exc_info:
        client.execute_request("get", "/episodes/1")
    assert type(exc_info.value) is APIError
    assert exc_info.value.http_body == body
    assert exc_info.value.__cause__.kind is FailureKind.DECODE_FAILURE


@pytest.mark.parametrize("api_key", [None, "sk test"])
def test_execute_request_invalid_api_key(api_key: str | None, transport: StubTransport) -> None:
    client = SupercastClient(transport, config=ClientConfig(api_key=api_key))
    with pytest.raises(AuthenticationError):
        client.execute_request("get", "/episodes/1")
    assert transport.calls == []


def test_execute_request_overrides(client: SupercastClient, transport: StubTransport) -> None:
    _, api_key = client.execute_request(
        "get",
        "/episodes/1",
        api_key="sk_other",
        api_base="https://sandbox.supercast.com",
        api_version="v2",
    )
    assert api_key == "sk_other"
    assert transport.calls[0].url == "https://sandbox.supercast.com/v2/episodes/1"
    assert transport.calls[0].headers["Authorization"] == "Bearer sk_other"
    assert transport.calls[0].headers["Supercast-Version"] == "v2"


def test_execute_request_global_config(transport: StubTransport) -> None:
    configure(api_key="sk_global")
    _, api_key = SupercastClient(transport).execute_request("get", "/episodes/1")
    assert api_key == "sk_global"
    assert transport.calls[0].headers["Authorization"] == "Bearer sk_global"


def test_execute_request_sets_up_logging(transport: StubTransport) -> None:
    client = SupercastClient(transport, config=ClientConfig(api_key="sk_test", log_level="debug"))
    with patch("supercast.client.setup_logging") as setup_logging:
        client.execute_request("get", "/episodes/1")
    setup_logging.assert_called_once_with("debug")


#####################################
#     Tests for request encoding    #
#####################################


def test_execute_request_query_params(client: SupercastClient, transport: StubTransport) -> None:
    client.execute_request(
        "get", "/episodes", params={"limit": 3, "filter": {"published": True}, "cursor": None}
    )
    assert transport.calls[0].url == f"{API_URL}/episodes?limit=3&filter[published]=true"
    assert transport.calls[0].content is None


def test_execute_request_merges_path_query(
    client: SupercastClient, transport: StubTransport
) -> None:
    client.execute_request("get", "/episodes?page=2&limit=5", params={"limit": 3})
    assert transport.calls[0].url == f"{API_URL}/episodes?page=2&limit=3"


def test_execute_request_delete_params_in_query(
    client: SupercastClient, transport: StubTransport
) -> None:
    client.execute_request("delete", "/episodes/1", params={"force": True})
    assert transport.calls[0].url == f"{API_URL}/episodes/1?force=true"
    assert transport.calls[0].content is None


def test_execute_request_body(client: SupercastClient, transport: StubTransport) -> None:
    client.execute_request(
        "post",
        "/episodes",
        params={"title": "Pilot", "tags": ["a", "b"], "show": APIResource(id=4)},
    )
    assert transport.calls[0].url == f"{API_URL}/episodes"
    assert transport.calls[0].content == "title=Pilot&tags[0]=a&tags[1]=b&show=4"
    assert transport.calls[0].headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_execute_request_empty_body(client: SupercastClient, transport: StubTransport) -> None:
    client.execute_request("post", "/episodes/1/publish")
    assert transport.calls[0].content == ""


def test_execute_request_multipart(client: SupercastClient, transport: StubTransport) -> None:
    audio = io.BytesIO(b"ID3")
    client.execute_request(
        "post", "/episodes", params={"title": "Pilot", "published": False, "audio": audio}
    )
    request = transport.calls[0]
    assert request.content is None
    assert request.data == {"title": "Pilot", "published": "false"}
    assert request.files == {"audio": audio}
    assert "Content-Type" not in request.headers


#####################################
#     Tests for request headers     #
#####################################


def test_execute_request_headers(client: SupercastClient, transport: StubTransport) -> None:
    client.execute_request("get", "/episodes/1")
    headers = transport.calls[0].headers
    assert headers["Authorization"] == "Bearer sk_test_123"
    assert headers["Supercast-Version"] == "v1"
    assert headers["User-Agent"].startswith("Supercast PythonBindings/")
    user_agent = json.loads(headers["X-Supercast-Client-User-Agent"])
    assert user_agent["lang"] == "python"
    assert user_agent["publisher"] == "supercast"
    assert "bindings_version" in user_agent


def test_execute_request_custom_headers(
    client: SupercastClient, transport: StubTransport
) -> None:
    client.execute_request(
        "post", "/episodes", headers={"supercast_account": "acct_1", "idempotency-key": "custom"}
    )
    headers = transport.calls[0].headers
    assert headers["Supercast-Account"] == "acct_1"
    assert headers["Idempotency-Key"] == "custom"


def test_execute_request_idempotency_key_stable_across_retries(
    config: ClientConfig, mock_sleep: Mock
) -> None:
    transport = StubTransport(
        [timeout_error(), create_transport_response(), create_transport_response()]
    )
    client = SupercastClient(transport, config=config)
    client.execute_request("post", "/episodes", params={"title": "Pilot"})
    client.execute_request("post", "/episodes", params={"title": "Pilot"})
    keys = [request.headers["Idempotency-Key"] for request in transport.calls]
    assert len(keys) == 3
    assert keys[0] == keys[1]
    assert keys[1] != keys[2]


@pytest.mark.parametrize("method", ["post", "delete"])
def test_execute_request_idempotency_key_methods(
    method: str, client: SupercastClient, transport: StubTransport
) -> None:
    client.execute_request(method, "/episodes/1")
    assert transport.calls[0].headers["Idempotency-Key"]


@pytest.mark.parametrize("method", ["get", "patch"])
def test_execute_request_no_idempotency_key_for_method(
    method: str, client: SupercastClient, transport: StubTransport
) -> None:
    client.execute_request(method, "/episodes/1")
    assert "Idempotency-Key" not in transport.calls[0].headers


def test_execute_request_no_idempotency_key_without_retries(transport: StubTransport) -> None:
    client = SupercastClient(transport, config=ClientConfig(api_key="sk_test"))
    client.execute_request("post", "/episodes")
    assert "Idempotency-Key" not in transport.calls[0].headers


###################################################
#     Tests for last_response and request()       #
###################################################


def test_last_response(client: SupercastClient) -> None:
    assert client.last_response is None
    response, _ = client.execute_request("get", "/episodes/1")
    assert client.last_response is response
    client.reset_last_response()
    assert client.last_response is None


def test_request_returns_last_response(client: SupercastClient, transport: StubTransport) -> None:
    transport.outcomes.append(
        create_transport_response(
            data={"id": 1, "title": "Pilot"}, headers={"Request-Id": "req_1"}
        )
    )
    episode, response = client.request(Episode.retrieve, 1)
    assert isinstance(episode, Episode)
    assert episode.title == "Pilot"
    assert response.request_id == "req_1"
    assert response.data == {"id": 1, "title": "Pilot"}


def test_request_without_call(client: SupercastClient) -> None:
    client.execute_request("get", "/episodes/1")
    result, response = client.request(lambda: "no request")
    assert result == "no request"
    assert response is None


def test_request_restores_active_client(client: SupercastClient) -> None:
    previous = SupercastClient.active_client()
    client.request(SupercastClient.active_client)
    assert SupercastClient.active_client() is previous


#################################
#     Tests for transports      #
#################################


def test_client_close_owned_transport() -> None:
    client = SupercastClient(config=ClientConfig(api_key="sk_test"))
    assert isinstance(client.transport, HttpxTransport)
    http_client = client.transport._client
    with client:
        pass
    assert http_client.is_closed


def test_client_does_not_close_given_transport(transport: StubTransport) -> None:
    with SupercastClient(transport):
        pass
    assert not transport.closed


def test_client_shares_default_transport() -> None:
    assert SupercastClient().transport is SupercastClient().transport
    assert SupercastClient().transport is SupercastClient.default_transport()


def test_client_config(config: ClientConfig, transport: StubTransport) -> None:
    assert SupercastClient(transport, config=config).config is config
    global_config = configure(api_key="sk_global")
    assert SupercastClient(transport).config is global_config
