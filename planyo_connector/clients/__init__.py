"""API clients package."""

from planyo_connector.clients.decoder import ResponseDecoder
from planyo_connector.clients.endpoint import PLANYO_BASE_URL, Endpoint
from planyo_connector.clients.errors import (
    PlanyoClientError,
    PlanyoDecodeError,
    PlanyoEndpointError,
    PlanyoInvalidStatusError,
    PlanyoRemoteError,
    PlanyoResponseTooLargeError,
    PlanyoTimeoutError,
    PlanyoTransportError,
)
from planyo_connector.clients.planyo_client import PlanyoAPIClient
from planyo_connector.clients.signer import RequestSignature, RequestSigner, compute_hash

__all__ = [
    "PlanyoAPIClient",
    "Endpoint",
    "PLANYO_BASE_URL",
    "RequestSigner",
    "RequestSignature",
    "compute_hash",
    "ResponseDecoder",
    "PlanyoClientError",
    "PlanyoEndpointError",
    "PlanyoTransportError",
    "PlanyoInvalidStatusError",
    "PlanyoTimeoutError",
    "PlanyoResponseTooLargeError",
    "PlanyoDecodeError",
    "PlanyoRemoteError",
]
