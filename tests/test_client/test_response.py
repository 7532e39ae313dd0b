"""Tests for the response formatting bridge."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from crudwizard.client.response import extract_response_data, format_api_response, format_dispatch_result
from crudwizard.exceptions import ServerError, TransportError
from crudwizard.exit_codes import EXIT_SERVER_ERROR, EXIT_TRANSPORT_ERROR
from crudwizard.models import DispatchResult
from crudwizard.output import OutputManager, set_output


def _response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        request=httpx.Request("GET", "https://petstore.swagger.io/v2/pet/1"),
        **kwargs,
    )


@pytest.fixture
def mock_output() -> MagicMock:
    output = MagicMock(spec=OutputManager)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# format_api_response
# ---------------------------------------------------------------------------


class TestFormatApiResponse:
    def test_json_body_and_status_line(self, mock_output: MagicMock) -> None:
        format_api_response(_response(200, json={"id": 1, "name": "Rex"}))

        assert "HTTP 200 OK" in mock_output.info.call_args_list[0].args[0]
        mock_output.print_body.assert_called_once_with({"id": 1, "name": "Rex"}, "application/json")

    def test_text_body_keeps_content_type(self, mock_output: MagicMock) -> None:
        format_api_response(_response(200, text="pong"))

        data, content_type = mock_output.print_body.call_args.args
        assert data == "pong"
        assert content_type.startswith("text/plain")

    def test_empty_body_not_rendered(self, mock_output: MagicMock) -> None:
        format_api_response(_response(204))

        mock_output.info.assert_called_once()
        mock_output.print_body.assert_not_called()

    def test_default_content_type_is_json(self, mock_output: MagicMock) -> None:
        format_api_response(_response(200, content=b'{"key": "value"}'))
        assert mock_output.print_body.call_args.args[1] == "application/json"


# ---------------------------------------------------------------------------
# format_dispatch_result
# ---------------------------------------------------------------------------


class TestFormatDispatchResult:
    def test_success_prints_and_returns(self, mock_output: MagicMock) -> None:
        result = DispatchResult(operation_id="getPetById", ok=True, response=_response(200, json=[1]))
        format_dispatch_result(result)
        mock_output.print_body.assert_called_once_with([1], "application/json")

    def test_failed_response_prints_body_then_raises(self, mock_output: MagicMock) -> None:
        response = _response(404, json={"message": "Pet not found"})
        error = httpx.HTTPStatusError("HTTP 404", request=response.request, response=response)
        result = DispatchResult(operation_id="getPetById", ok=False, response=response, error=error)

        with pytest.raises(ServerError, match="getPetById failed") as exc_info:
            format_dispatch_result(result)

        assert exc_info.value.exit_code == EXIT_SERVER_ERROR
        mock_output.print_body.assert_called_once_with({"message": "Pet not found"}, "application/json")

    def test_transport_failure_raises(self, mock_output: MagicMock) -> None:
        result = DispatchResult(
            operation_id="getInventory",
            ok=False,
            error=httpx.ConnectError("connection refused"),
        )

        with pytest.raises(TransportError, match="connection refused") as exc_info:
            format_dispatch_result(result)

        assert exc_info.value.exit_code == EXIT_TRANSPORT_ERROR
        mock_output.info.assert_not_called()
        mock_output.print_body.assert_not_called()


# ---------------------------------------------------------------------------
# extract_response_data
# ---------------------------------------------------------------------------


class TestExtractResponseData:
    def test_json_object(self) -> None:
        assert extract_response_data(_response(json={"nested": {"a": 1}})) == {"nested": {"a": 1}}

    def test_json_list(self) -> None:
        assert extract_response_data(_response(json=[1, 2, 3])) == [1, 2, 3]

    def test_fallback_to_text(self) -> None:
        assert extract_response_data(_response(text="This is not JSON")) == "This is not JSON"

    def test_empty_body_returns_none(self) -> None:
        assert extract_response_data(_response(204)) is None

    def test_malformed_json_falls_back_to_text(self) -> None:
        response = _response(
            content=b'{"broken": json',
            headers={"content-type": "application/json"},
        )
        assert extract_response_data(response) == '{"broken": json'
