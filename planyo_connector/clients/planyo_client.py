"""Planyo REST API client for reservation data."""

import asyncio
from datetime import datetime
from typing import Any, Optional, TypeVar, Union

import httpx
from structlog import get_logger

from planyo_connector.clients.decoder import ResponseDecoder
from planyo_connector.clients.endpoint import PLANYO_BASE_URL, Endpoint
from planyo_connector.clients.errors import (
    PlanyoInvalidStatusError,
    PlanyoResponseTooLargeError,
    PlanyoTimeoutError,
    PlanyoTransportError,
)
from planyo_connector.clients.signer import RequestSigner
from planyo_connector.config.settings import Settings
from planyo_connector.models.coercion import format_planyo_datetime
from planyo_connector.models.reservation import Reservation
from planyo_connector.models.response import PlanyoResponse, ReservationList

T = TypeVar("T")

GET_RESERVATION_DATA = "get_reservation_data"
RESERVATION_DETAIL_LEVEL = "71"  # Includes the form fields and products this client decodes
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RESPONSE_BYTES = 1024 * 1024


class PlanyoAPIClient:
    """Client for the Planyo REST API.

    Every call is signed and sent as a single GET request. Nothing is retried
    or cached. The client is safe to share between concurrent tasks.
    """

    def __init__(
        self,
        site_id: str,
        api_key: str,
        hash_key: str,
        logger: Optional[Any] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        base_url: str = PLANYO_BASE_URL,
    ):
        """Initialize the Planyo API client.

        Args:
            site_id: Planyo site id
            api_key: Planyo API key
            hash_key: Shared secret used to sign requests
            logger: structlog logger, defaults to this module's logger
            http_client: Transport to use; when omitted the client creates and
                owns one
            timeout: Upper bound in seconds for each request
            max_response_bytes: Largest response body accepted
            base_url: Planyo REST endpoint
        """
        self.site_id = site_id
        self.api_key = api_key
        self.timeout = timeout
        self.max_response_bytes = max_response_bytes
        self.base_url = base_url
        self.signer = RequestSigner(hash_key)
        self.logger = (logger or get_logger(__name__)).bind(site_id=site_id)
        self.decoder = ResponseDecoder(self.logger)
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_settings(
        cls, settings: Settings, **kwargs: Any
    ) -> "PlanyoAPIClient":
        """Build a client from application settings."""
        planyo = settings.planyo
        return cls(
            site_id=planyo.site_id,
            api_key=planyo.api_key,
            hash_key=planyo.hash_key,
            timeout=planyo.request_timeout,
            max_response_bytes=planyo.max_response_bytes,
            base_url=planyo.base_url,
            **kwargs,
        )

    async def __aenter__(self) -> "PlanyoAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def get_reservation(self, reservation_id: int) -> Reservation:
        """Fetch a single reservation.

        Planyo omits the id from this payload, so the returned reservation
        always carries the requested ``reservation_id``.

        Raises:
            PlanyoTransportError: If the request fails or returns a non-200 status
            PlanyoDecodeError: If the response cannot be decoded
            PlanyoRemoteError: If Planyo rejects the request
        """
        self.logger.info("Fetching reservation from Planyo", reservation_id=reservation_id)
        endpoint = Endpoint.for_method(
            GET_RESERVATION_DATA,
            {"reservation_id": str(reservation_id)},
            base_url=self.base_url,
        )
        response = await self._call(endpoint, Reservation)
        reservation = response.data.with_reservation_id(reservation_id)
        self.logger.info("Successfully fetched reservation", reservation_id=reservation_id)
        return reservation

    async def list_reservations(
        self,
        start: Union[datetime, str],
        end: Union[datetime, str],
    ) -> list[Reservation]:
        """Fetch reservations within a time range.

        Args:
            start: Range start, a datetime or a 'YYYY-MM-DD HH:MM:SS' string
            end: Range end, a datetime or a 'YYYY-MM-DD HH:MM:SS' string

        Returns:
            Reservations in the order Planyo returned them, with their own ids

        Raises:
            PlanyoTransportError: If the request fails or returns a non-200 status
            PlanyoDecodeError: If the response cannot be decoded
            PlanyoRemoteError: If Planyo rejects the request
        """
        start_time = format_planyo_datetime(start)
        end_time = format_planyo_datetime(end)
        self.logger.info(
            "Fetching reservations from Planyo",
            start_time=start_time,
            end_time=end_time,
        )
        endpoint = Endpoint.for_method(
            GET_RESERVATION_DATA,
            {
                "start_time": start_time,
                "end_time": end_time,
                "detail_level": RESERVATION_DETAIL_LEVEL,
            },
            base_url=self.base_url,
        )
        response = await self._call(endpoint, ReservationList)
        reservations = list(response.data.results)
        self.logger.info(
            "Successfully fetched reservations",
            start_time=start_time,
            end_time=end_time,
            reservation_count=len(reservations),
        )
        return reservations

    async def _call(self, endpoint: Endpoint, model: type[T]) -> PlanyoResponse[T]:
        """Sign, send and decode a single API call."""
        endpoint.sign(self.site_id, self.api_key, self.signer)
        url = endpoint.url
        try:
            payload = await asyncio.wait_for(self._fetch(url, endpoint.method), self.timeout)
        except asyncio.TimeoutError as e:
            self.logger.error(
                "Planyo request timed out", method=endpoint.method, timeout=self.timeout
            )
            raise PlanyoTimeoutError(f"Request timed out after {self.timeout}s") from e
        return self.decoder.decode(payload, model)

    async def _fetch(self, url: str, method: Optional[str]) -> bytes:
        """Perform the GET request and return the response body.

        Raises:
            PlanyoInvalidStatusError: If the status is not 200
            PlanyoResponseTooLargeError: If the body exceeds max_response_bytes
            PlanyoTimeoutError: If httpx reports a timeout
            PlanyoTransportError: For other network failures
        """
        response = None
        try:
            request = self._http_client.build_request("GET", url)
            response = await self._http_client.send(request, stream=True)

            if response.status_code != 200:
                self.logger.error(
                    "Planyo returned unexpected HTTP status",
                    method=method,
                    status_code=response.status_code,
                )
                raise PlanyoInvalidStatusError(response.status_code)

            return await self._read_body(response)

        except httpx.TimeoutException as e:
            self.logger.error("Planyo request timeout", method=method, error=str(e))
            raise PlanyoTimeoutError(f"Request timeout for {method}") from e

        except httpx.RequestError as e:
            self.logger.error("Planyo request error", method=method, error=str(e))
            raise PlanyoTransportError(f"Request failed for {method}: {e}") from e

        finally:
            if response is not None:
                await response.aclose()

    async def _read_body(self, response: httpx.Response) -> bytes:
        declared_length = response.headers.get("Content-Length", "")
        if declared_length.isdigit() and int(declared_length) > self.max_response_bytes:
            raise PlanyoResponseTooLargeError(
                f"Response body of {declared_length} bytes exceeds {self.max_response_bytes} bytes",
                status_code=response.status_code,
            )

        body = bytearray()
        async for chunk in response.aiter_bytes():
            body.extend(chunk)
            if len(body) > self.max_response_bytes:
                raise PlanyoResponseTooLargeError(
                    f"Response body exceeds {self.max_response_bytes} bytes",
                    status_code=response.status_code,
                )
        return bytes(body)
