"""Decoding of Planyo JSON responses into typed envelopes."""

import json
from typing import Any, Optional, TypeVar

from pydantic import ValidationError
from structlog import get_logger

from planyo_connector.clients.errors import PlanyoDecodeError, PlanyoRemoteError
from planyo_connector.models.response import PlanyoResponse, PlanyoStatus

T = TypeVar("T")

PAYLOAD_EXCERPT_LENGTH = 2000


def _excerpt(payload: bytes) -> str:
    return payload[:PAYLOAD_EXCERPT_LENGTH].decode("utf-8", errors="replace")


class ResponseDecoder:
    """Validates Planyo response envelopes and decodes their payload."""

    def __init__(self, logger: Optional[Any] = None):
        self.logger = logger or get_logger(__name__)

    def decode(self, payload: bytes, model: type[T]) -> PlanyoResponse[T]:
        """Decode a raw response body into a ``PlanyoResponse[model]``.

        The status fields are checked before ``data`` is decoded, so an error
        response is reported as such even when it carries no usable data.

        Args:
            payload: Raw response body
            model: Expected type of the ``data`` field

        Returns:
            The decoded envelope, always with ``response_code == 0``

        Raises:
            PlanyoDecodeError: If the payload is not JSON or does not match the
                expected shape
            PlanyoRemoteError: If Planyo returned a non-zero response code
        """
        self.logger.debug("Decoding Planyo response", payload=_excerpt(payload))

        try:
            document = json.loads(payload)
        except (ValueError, RecursionError) as e:
            self._log_failure("Planyo response is not valid JSON", payload, e)
            raise PlanyoDecodeError(f"Invalid JSON in response: {e}", payload=_excerpt(payload)) from e

        try:
            status = PlanyoStatus.model_validate(document)
        except ValidationError as e:
            self._log_failure("Planyo response has no valid status fields", payload, e)
            raise PlanyoDecodeError(
                f"Malformed response envelope: {e}", payload=_excerpt(payload)
            ) from e

        if not status.is_success:
            self.logger.warning(
                "Planyo returned an error response",
                response_code=status.response_code,
                response_message=status.response_message,
            )
            raise PlanyoRemoteError(status.response_message, status.response_code)

        try:
            return PlanyoResponse[model].model_validate(document)
        except ValidationError as e:
            self._log_failure("Failed to decode Planyo response data", payload, e)
            raise PlanyoDecodeError(
                f"Failed to decode {getattr(model, '__name__', model)} response: {e}",
                payload=_excerpt(payload),
            ) from e

    def _log_failure(self, message: str, payload: bytes, error: Exception) -> None:
        self.logger.error(message, error=str(error), payload=_excerpt(payload))
