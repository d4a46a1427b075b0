"""Input validation for signing requests.

A request is checked in full before any hashing happens, so a rejected
request never produces a partial URL.
"""

import re
from datetime import datetime, timezone
from typing import Optional

from s3presign.models import DeriveSigningKey, PrecomputedSigningKey, SigningRequest

# Longest validity S3 accepts for a SigV4 presigned URL (7 days)
MAX_EXPIRES_IN = 604800

SIGNING_KEY_LENGTH = 32

_METHOD_RE = re.compile(r"[A-Z]+")
_REGION_RE = re.compile(r"[a-z0-9-]+")
_BUCKET_RE = re.compile(r"[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]")
_HOST_RE = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?(?::[0-9]{1,5})?")
_ACCESS_KEY_RE = re.compile(r"[\x21-\x2e\x30-\x7e]+")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_URL_PATH_RE = re.compile(r"[\x21-\x7e]+")
_AMZ_DATE_RE = re.compile(r"[0-9]{8}T[0-9]{6}Z")


class InvalidRequestError(ValueError):
    """Raised when a signing request cannot be canonicalized."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def validate_expires_in(expires_in: int) -> None:
    """Check expiry is an integer number of seconds in (0, MAX_EXPIRES_IN]."""
    if isinstance(expires_in, bool) or not isinstance(expires_in, int):
        raise InvalidRequestError(
            f"expires_in must be an integer, got {type(expires_in).__name__}",
            field="expires_in",
        )
    if expires_in <= 0:
        raise InvalidRequestError(
            f"expires_in must be positive, got {expires_in}", field="expires_in"
        )
    if expires_in > MAX_EXPIRES_IN:
        raise InvalidRequestError(
            f"expires_in must be at most {MAX_EXPIRES_IN} seconds, got {expires_in}",
            field="expires_in",
        )


def validate_timestamp(timestamp: datetime) -> None:
    """Check the timestamp is an aware datetime (naive ones are ambiguous)."""
    if not isinstance(timestamp, datetime):
        raise InvalidRequestError(
            "timestamp must be a datetime", field="timestamp"
        )
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise InvalidRequestError(
            "timestamp must be timezone-aware", field="timestamp"
        )


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp with an explicit offset or 'Z'.

    Accepts the extended form (2023-01-01T00:00:00Z) and the basic form
    used in X-Amz-Date (20230101T000000Z).

    Raises:
        InvalidRequestError: If the value cannot be parsed or has no offset.
    """
    if not isinstance(value, str):
        raise InvalidRequestError("timestamp must be a string", field="timestamp")

    text = value.strip()
    try:
        if _AMZ_DATE_RE.fullmatch(text):
            parsed = datetime.strptime(text, "%Y%m%dT%H%M%SZ").replace(tzinfo=timezone.utc)
        else:
            # fromisoformat() only learned to read "Z" in Python 3.11
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidRequestError(f"Invalid timestamp {value!r}: {e}", field="timestamp") from e

    validate_timestamp(parsed)
    return parsed


def _check(pattern: re.Pattern, value: str, field: str, description: str) -> None:
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise InvalidRequestError(f"Invalid {field} {value!r}: {description}", field=field)


def validate_object_key(object_key: str) -> None:
    """Check the key can be placed unescaped in the URL path."""
    if not isinstance(object_key, str) or not object_key:
        raise InvalidRequestError("object_key must be a non-empty string", field="object_key")
    if _CONTROL_CHARS_RE.search(object_key):
        raise InvalidRequestError(
            "object_key must not contain control characters", field="object_key"
        )
    if not _URL_PATH_RE.fullmatch(object_key):
        raise InvalidRequestError(
            "object_key must be printable ASCII without spaces; percent-encode other characters",
            field="object_key",
        )
    for reserved in ("?", "#"):
        if reserved in object_key:
            raise InvalidRequestError(
                f"object_key must not contain {reserved!r}", field="object_key"
            )


def validate_signing_key(source) -> None:
    if isinstance(source, DeriveSigningKey):
        return
    if not isinstance(source, PrecomputedSigningKey):
        raise InvalidRequestError(
            "signing_key must be DeriveSigningKey or PrecomputedSigningKey",
            field="signing_key",
        )
    if not isinstance(source.key, bytes) or len(source.key) != SIGNING_KEY_LENGTH:
        raise InvalidRequestError(
            f"precomputed signing key must be {SIGNING_KEY_LENGTH} bytes",
            field="signing_key",
        )


def validate_request(request: SigningRequest) -> None:
    """Validate every field of a signing request.

    Raises:
        InvalidRequestError: On the first field that cannot be canonicalized.
    """
    _check(_METHOD_RE, request.http_method, "http_method", "expected an uppercase HTTP method")
    _check(_REGION_RE, request.region, "region", "expected lowercase letters, digits and '-'")
    validate_expires_in(request.expires_in)
    validate_timestamp(request.timestamp)
    _check(_BUCKET_RE, request.bucket, "bucket", "not a valid S3 bucket name")
    _check(_ACCESS_KEY_RE, request.access_key_id, "access_key_id",
           "expected printable ASCII without '/' or whitespace")
    if not isinstance(request.secret_access_key, str) or not request.secret_access_key:
        raise InvalidRequestError(
            "secret_access_key must be a non-empty string", field="secret_access_key"
        )
    _check(_HOST_RE, request.endpoint_host, "endpoint_host",
           "expected a bare hostname with optional port")
    validate_object_key(request.object_key)
    validate_signing_key(request.signing_key)
