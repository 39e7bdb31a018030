"""Tests for the Planyo API client using a mocked HTTP transport."""

import asyncio
from datetime import datetime
from decimal import Decimal
from unittest.mock import Mock

import httpx
import pytest

from planyo_connector.clients import signer as signer_module
from planyo_connector.clients.errors import (
    PlanyoDecodeError,
    PlanyoEndpointError,
    PlanyoInvalidStatusError,
    PlanyoRemoteError,
    PlanyoResponseTooLargeError,
    PlanyoTimeoutError,
    PlanyoTransportError,
)
from planyo_connector.clients.planyo_client import PlanyoAPIClient
from planyo_connector.config.settings import PlanyoSettings, Settings


def query_items(request: httpx.Request) -> list[tuple[str, str]]:
    return list(request.url.params.multi_items())


class TestGetReservation:
    """Tests for PlanyoAPIClient.get_reservation."""

    @pytest.mark.asyncio
    async def test_get_reservation_sets_requested_id(
        self, make_client, json_handler, reservation_response
    ):
        """Test the requested id is assigned to the decoded reservation."""
        client = make_client(json_handler(reservation_response))

        reservation = await client.get_reservation(42)

        assert reservation.reservation_id == 42
        assert reservation.first_name == "Jane"
        assert reservation.status == 2
        assert reservation.total_price == Decimal("123.45")

    @pytest.mark.asyncio
    async def test_get_reservation_overrides_payload_id(
        self, make_client, json_handler, reservation_response
    ):
        """Test the requested id wins over any id in the payload body."""
        reservation_response["data"]["reservation_id"] = "999"
        client = make_client(json_handler(reservation_response))

        reservation = await client.get_reservation(42)

        assert reservation.reservation_id == 42

    @pytest.mark.asyncio
    async def test_get_reservation_request_parameters(
        self, make_client, json_handler, reservation_response, requests_sent, monkeypatch
    ):
        """Test the signed query string sent for a single reservation fetch."""
        monkeypatch.setattr(signer_module, "time", Mock(time=Mock(return_value=1700000000.0)))
        client = make_client(json_handler(reservation_response))

        await client.get_reservation(42)

        assert len(requests_sent) == 1
        request = requests_sent[0]
        assert request.method == "GET"
        assert request.url.scheme == "https"
        assert request.url.host == "www.planyo.com"
        assert request.url.path == "/rest/"
        assert query_items(request) == [
            ("method", "get_reservation_data"),
            ("reservation_id", "42"),
            ("site_id", "4321"),
            ("api_key", "test-api-key"),
            ("hash_timestamp", "1700000000"),
            ("hash_key", "42d557769afcfbb55d76a4ae5c57595c"),
        ]

    @pytest.mark.asyncio
    async def test_each_call_is_signed_afresh(
        self, make_client, json_handler, reservation_response, requests_sent, monkeypatch
    ):
        """Test a new timestamp and hash are computed for every request."""
        clock = Mock(time=Mock(side_effect=[1700000000.0, 1700000060.0]))
        monkeypatch.setattr(signer_module, "time", clock)
        client = make_client(json_handler(reservation_response))

        await client.get_reservation(1)
        await client.get_reservation(1)

        first, second = (dict(query_items(request)) for request in requests_sent)
        assert first["hash_timestamp"] == "1700000000"
        assert second["hash_timestamp"] == "1700000060"
        assert first["hash_key"] != second["hash_key"]


class TestListReservations:
    """Tests for PlanyoAPIClient.list_reservations."""

    @pytest.mark.asyncio
    async def test_list_reservations_keeps_payload_ids(
        self, make_client, json_handler, reservation_list_response
    ):
        """Test ids come from each payload element and are not overwritten."""
        client = make_client(json_handler(reservation_list_response))

        reservations = await client.list_reservations("2025-07-01 00:00:00", "2025-07-31 23:59:59")

        assert [r.reservation_id for r in reservations] == [1001, 1002]
        assert [r.room for r in reservations] == ["Room 12", "Room 3"]
        assert reservations[1].user_notes == "Vegetarian"

    @pytest.mark.asyncio
    async def test_list_reservations_request_parameters(
        self, make_client, json_handler, reservation_list_response, requests_sent
    ):
        """Test the list call sends the range and the fixed detail level."""
        client = make_client(json_handler(reservation_list_response))

        await client.list_reservations(datetime(2025, 7, 1), datetime(2025, 7, 31, 23, 59, 59))

        items = query_items(requests_sent[0])
        assert [name for name, _ in items] == [
            "method",
            "start_time",
            "end_time",
            "detail_level",
            "site_id",
            "api_key",
            "hash_timestamp",
            "hash_key",
        ]
        params = dict(items)
        assert params["method"] == "get_reservation_data"
        assert params["start_time"] == "2025-07-01 00:00:00"
        assert params["end_time"] == "2025-07-31 23:59:59"
        assert params["detail_level"] == "71"

    @pytest.mark.asyncio
    async def test_list_reservations_empty_results(self, make_client, json_handler):
        client = make_client(
            json_handler({"data": {"results": []}, "response_code": 0, "response_message": ""})
        )

        assert await client.list_reservations("2025-07-01 00:00:00", "2025-07-02 00:00:00") == []


class TestErrorHandling:
    """Tests for transport, decode and remote error reporting."""

    @pytest.mark.asyncio
    async def test_not_found_raises_invalid_status(self, make_client, json_handler, reservation_response):
        """Test a 404 is reported as a transport error carrying the status code."""
        client = make_client(json_handler(reservation_response, status_code=404))

        with pytest.raises(PlanyoInvalidStatusError) as exc_info:
            await client.get_reservation(42)

        assert exc_info.value.status_code == 404
        assert isinstance(exc_info.value, PlanyoTransportError)
        assert not isinstance(exc_info.value, (PlanyoDecodeError, PlanyoRemoteError))

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(
        self, make_client, json_handler, reservation_response, requests_sent
    ):
        client = make_client(json_handler(reservation_response, status_code=503))

        with pytest.raises(PlanyoInvalidStatusError):
            await client.get_reservation(42)

        assert len(requests_sent) == 1

    @pytest.mark.asyncio
    async def test_remote_error(self, make_client, json_handler, error_response):
        """Test a non-zero response code raises a remote error with the message."""
        client = make_client(json_handler(error_response))

        with pytest.raises(PlanyoRemoteError) as exc_info:
            await client.get_reservation(42)

        assert exc_info.value.message == "Invalid reservation ID"

    @pytest.mark.asyncio
    async def test_decode_error(self, make_client, json_handler, reservation_response):
        """Test a schema mismatch raises a decode error instead of crashing."""
        del reservation_response["data"]["properties"]
        client = make_client(json_handler(reservation_response))

        with pytest.raises(PlanyoDecodeError):
            await client.get_reservation(42)

    @pytest.mark.asyncio
    async def test_lenient_fields_do_not_fail_the_call(
        self, make_client, json_handler, reservation_response
    ):
        reservation_response["data"]["status"] = "not-a-number"
        reservation_response["data"]["properties"]["persons"] = "??"
        client = make_client(json_handler(reservation_response))

        reservation = await client.get_reservation(42)

        assert reservation.status == 0
        assert reservation.properties.persons == 0

    @pytest.mark.asyncio
    async def test_declared_oversized_body_is_rejected(
        self, make_client, json_handler, reservation_response
    ):
        client = make_client(json_handler(reservation_response), max_response_bytes=64)

        with pytest.raises(PlanyoResponseTooLargeError):
            await client.get_reservation(42)

    @pytest.mark.asyncio
    async def test_streamed_oversized_body_is_rejected(self, make_client):
        """Test bodies without a Content-Length are capped while streaming."""

        async def chunks():
            for _ in range(10):
                yield b"x" * 32

        client = make_client(lambda request: httpx.Response(200, content=chunks()), max_response_bytes=100)

        with pytest.raises(PlanyoResponseTooLargeError):
            await client.get_reservation(42)

    @pytest.mark.asyncio
    async def test_httpx_timeout_raises_timeout_error(self, make_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(PlanyoTimeoutError) as exc_info:
            await client.get_reservation(42)

        assert isinstance(exc_info.value, PlanyoTransportError)

    @pytest.mark.asyncio
    async def test_overall_timeout_raises_timeout_error(self, make_client, json_handler, reservation_response):
        """Test a slow response is abandoned once the request timeout elapses."""
        respond = json_handler(reservation_response)

        async def slow_handler(request):
            await asyncio.sleep(5)
            return respond(request)

        client = make_client(slow_handler, timeout=0.05)

        with pytest.raises(PlanyoTimeoutError):
            await client.get_reservation(42)

    @pytest.mark.asyncio
    async def test_connection_error_raises_transport_error(self, make_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(PlanyoTransportError) as exc_info:
            await client.get_reservation(42)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, make_client, json_handler, reservation_response):
        respond = json_handler(reservation_response)

        async def slow_handler(request):
            await asyncio.sleep(5)
            return respond(request)

        client = make_client(slow_handler)
        task = asyncio.create_task(client.get_reservation(42))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_unencodable_parameter_raises_endpoint_error(
        self, make_client, json_handler, reservation_list_response, requests_sent
    ):
        client = make_client(json_handler(reservation_list_response), logger=Mock())

        with pytest.raises(PlanyoEndpointError):
            await client.list_reservations("\ud800", "2025-07-31 23:59:59")

        assert requests_sent == []


class TestClientLifecycle:
    """Tests for construction, concurrency and cleanup."""

    @pytest.mark.asyncio
    async def test_concurrent_calls_are_independent(
        self, make_client, reservation_response, json_handler
    ):
        client = make_client(json_handler(reservation_response))

        first, second = await asyncio.gather(client.get_reservation(1), client.get_reservation(2))

        assert first.reservation_id == 1
        assert second.reservation_id == 2

    @pytest.mark.asyncio
    async def test_owned_http_client_is_closed(self):
        async with PlanyoAPIClient("4321", "key", "secret") as client:
            http_client = client._http_client
            assert not http_client.is_closed

        assert http_client.is_closed

    @pytest.mark.asyncio
    async def test_injected_http_client_is_left_open(self):
        http_client = httpx.AsyncClient()
        client = PlanyoAPIClient("4321", "key", "secret", http_client=http_client)

        await client.aclose()

        assert not http_client.is_closed
        await http_client.aclose()

    def test_from_settings(self):
        settings = Settings(
            planyo=PlanyoSettings(
                site_id="4321",
                api_key="key",
                hash_key="secret",
                base_url="https://planyo.test/rest/",
                request_timeout=12.5,
                max_response_bytes=2048,
            )
        )

        client = PlanyoAPIClient.from_settings(settings, http_client=httpx.AsyncClient())

        assert client.site_id == "4321"
        assert client.api_key == "key"
        assert client.base_url == "https://planyo.test/rest/"
        assert client.timeout == 12.5
        assert client.max_response_bytes == 2048

    @pytest.mark.asyncio
    async def test_logger_is_bound_to_site(self, make_client, json_handler, reservation_response):
        logger = Mock()
        client = make_client(json_handler(reservation_response), logger=logger)

        await client.get_reservation(42)

        logger.bind.assert_called_once_with(site_id="4321")
        assert logger.bind.return_value.info.called
