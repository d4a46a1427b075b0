"""SHA-256 and HMAC-SHA256 helpers shared by every signing stage.

Strings are encoded as UTF-8 before hashing, so callers can pass either
the canonical text or raw bytes.
"""

import hashlib
import hmac
from typing import Union

BytesLike = Union[bytes, str]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def sha256_hex(data: BytesLike) -> str:
    """Return the lowercase hex SHA-256 digest of data."""
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def hmac_sha256(key: BytesLike, data: BytesLike) -> bytes:
    """Return the raw 32-byte HMAC-SHA256 of data under key."""
    return hmac.new(_to_bytes(key), _to_bytes(data), hashlib.sha256).digest()


def hmac_sha256_hex(key: BytesLike, data: BytesLike) -> str:
    """Return the lowercase hex HMAC-SHA256 of data under key."""
    return hmac.new(_to_bytes(key), _to_bytes(data), hashlib.sha256).hexdigest()
