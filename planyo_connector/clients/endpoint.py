"""Request URL construction for the Planyo REST API."""

from typing import Iterable, Mapping, Optional
from urllib.parse import quote, urlencode

import httpx

from planyo_connector.clients.errors import PlanyoEndpointError
from planyo_connector.clients.signer import RequestSigner

PLANYO_BASE_URL = "https://www.planyo.com/rest/"


class Endpoint:
    """Ordered query parameters for a single Planyo API call.

    Parameters are sent in the order they were added: ``method`` first, then
    the call's own parameters, then the site identity and signature fields.
    """

    def __init__(
        self,
        query_items: Optional[Iterable[tuple[str, str]]] = None,
        base_url: str = PLANYO_BASE_URL,
    ):
        self.query_items: list[tuple[str, str]] = list(query_items or [])
        self.base_url = base_url

    @classmethod
    def for_method(
        cls,
        method: str,
        params: Optional[Mapping[str, str]] = None,
        base_url: str = PLANYO_BASE_URL,
    ) -> "Endpoint":
        """Start an endpoint for ``method`` with its call-specific parameters."""
        endpoint = cls([("method", method)], base_url=base_url)
        for name, value in (params or {}).items():
            endpoint.add(name, value)
        return endpoint

    def add(self, name: str, value: str) -> None:
        self.query_items.append((name, value))

    @property
    def method(self) -> Optional[str]:
        """Value of the first ``method`` parameter, if any."""
        return next((value for name, value in self.query_items if name == "method"), None)

    def sign(
        self,
        site_id: str,
        api_key: str,
        signer: RequestSigner,
        now: Optional[float] = None,
    ) -> "Endpoint":
        """Append site identity and the request signature.

        Returns:
            This endpoint, for chaining
        """
        self.add("site_id", site_id)
        self.add("api_key", api_key)
        signature = signer.sign(self.method, now=now)
        self.add("hash_timestamp", str(signature.timestamp))
        self.add("hash_key", signature.hash_value)
        return self

    @property
    def url(self) -> str:
        """Fully encoded request URL.

        Raises:
            PlanyoEndpointError: If a parameter cannot be encoded or the
                resulting URL is invalid
        """
        for name, value in self.query_items:
            if not isinstance(name, str) or not isinstance(value, str):
                raise PlanyoEndpointError(
                    f"Query parameter {name!r} must be a string, got {type(value).__name__}"
                )
        try:
            query = urlencode(self.query_items, quote_via=quote)
        except UnicodeEncodeError as e:
            raise PlanyoEndpointError(f"Query parameters cannot be percent-encoded: {e}") from e

        url = f"{self.base_url}?{query}" if query else self.base_url
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise PlanyoEndpointError(f"Invalid request URL: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise PlanyoEndpointError(f"Invalid request URL: {self.base_url!r}")
        return url
