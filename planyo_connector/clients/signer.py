"""Request signing for the Planyo REST API."""

import hashlib
import time
from typing import NamedTuple, Optional


class RequestSignature(NamedTuple):
    """Timestamp and hash sent as ``hash_timestamp`` and ``hash_key``."""

    timestamp: int
    hash_value: str


def compute_hash(hash_key: str, timestamp: int, method: Optional[str]) -> str:
    """Compute Planyo's request hash: md5(hash_key + timestamp + method).

    MD5 is what Planyo requires for request signatures; it only provides
    wire compatibility, not integrity.
    """
    payload = f"{hash_key}{timestamp}{method or ''}"
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


class RequestSigner:
    """Signs Planyo API calls with a time-bound hash of the method name."""

    def __init__(self, hash_key: str):
        self._hash_key = hash_key

    def sign(self, method: Optional[str], now: Optional[float] = None) -> RequestSignature:
        """Sign a call to ``method``.

        Args:
            method: Planyo API method name; ``None`` is hashed as an empty string
            now: Unix time to sign with, defaults to the current time

        Returns:
            The timestamp used and the matching hex digest
        """
        timestamp = int(time.time() if now is None else now)
        return RequestSignature(timestamp, compute_hash(self._hash_key, timestamp, method))
