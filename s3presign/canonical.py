"""Canonical forms hashed and signed by SigV4 query authentication.

Every string built here must match, byte for byte, what the storage
provider rebuilds from the incoming request:

    canonical query  ->  canonical request  ->  string to sign

Reference: https://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-query-string-auth.html
"""

from datetime import datetime, timezone
from urllib.parse import quote

from s3presign.models import SigningRequest
from s3presign.primitives import sha256_hex

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "s3"
TERMINATOR = "aws4_request"
SIGNED_HEADERS = "host"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"

AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
DATESTAMP_FORMAT = "%Y%m%d"


def format_amz_date(timestamp: datetime) -> str:
    """Format a timestamp as ISO 8601 basic, e.g. 20230101T000000Z."""
    return timestamp.astimezone(timezone.utc).strftime(AMZ_DATE_FORMAT)


def format_datestamp(timestamp: datetime) -> str:
    """Format the UTC date of a timestamp as YYYYMMDD."""
    return timestamp.astimezone(timezone.utc).strftime(DATESTAMP_FORMAT)


def credential_scope(request: SigningRequest) -> str:
    """<date>/<region>/s3/aws4_request"""
    return "/".join(
        [format_datestamp(request.timestamp), request.region, SERVICE, TERMINATOR]
    )


def uri_encode(value: str) -> str:
    """Percent-encode everything except RFC 3986 unreserved characters."""
    # quote() always leaves A-Z a-z 0-9 _ . - ~ alone
    return quote(value, safe="")


def query_parameters(request: SigningRequest) -> dict[str, str]:
    """The fixed X-Amz-* parameters, unencoded."""
    return {
        "X-Amz-Algorithm": ALGORITHM,
        "X-Amz-Credential": f"{request.access_key_id}/{credential_scope(request)}",
        "X-Amz-Date": format_amz_date(request.timestamp),
        "X-Amz-Expires": str(request.expires_in),
        "X-Amz-SignedHeaders": SIGNED_HEADERS,
    }


def build_canonical_query(request: SigningRequest) -> str:
    """Encode, sort by name and join the query parameters."""
    encoded = sorted(
        (uri_encode(name), uri_encode(value))
        for name, value in query_parameters(request).items()
    )
    return "&".join(f"{name}={value}" for name, value in encoded)


def build_canonical_request(request: SigningRequest, canonical_query: str) -> str:
    """Build the seven-line canonical request.

    The object key goes into the path exactly as given; callers pass keys
    that are already in the form the HTTP request line will carry.
    """
    return "\n".join(
        [
            request.http_method,
            f"/{request.object_key}",
            canonical_query,
            f"host:{request.host}",
            "",
            SIGNED_HEADERS,
            UNSIGNED_PAYLOAD,
        ]
    )


def build_string_to_sign(request: SigningRequest, canonical_request: str) -> str:
    """Wrap the canonical request digest with algorithm, date and scope."""
    return "\n".join(
        [
            ALGORITHM,
            format_amz_date(request.timestamp),
            credential_scope(request),
            sha256_hex(canonical_request),
        ]
    )
