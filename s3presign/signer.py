"""SigV4 query-string signer.

sign_url() is the entry point most callers need. It validates the request,
then runs the signing stages strictly in order:

1. Resolve the signing key (precomputed or derived)
2. Build the canonical query string
3. Build the canonical request
4. Build the string to sign
5. HMAC the string to sign with the signing key
6. Assemble the final URL

Every stage is a pure function of the request, so the signer holds no state
and can be called from any number of threads.
"""

import logging

from s3presign.canonical import (
    build_canonical_query,
    build_canonical_request,
    build_string_to_sign,
    format_datestamp,
)
from s3presign.models import PrecomputedSigningKey, SigningRequest
from s3presign.primitives import hmac_sha256_hex
from s3presign.signing_key import derive_signing_key
from s3presign.validation import validate_request

logger = logging.getLogger(__name__)


def resolve_signing_key(request: SigningRequest) -> bytes:
    """Return the precomputed key if the request carries one, else derive it."""
    if isinstance(request.signing_key, PrecomputedSigningKey):
        return request.signing_key.key
    return derive_signing_key(
        request.secret_access_key,
        format_datestamp(request.timestamp),
        request.region,
    )


def assemble_url(request: SigningRequest, canonical_query: str, signature: str) -> str:
    """Join host, key, query and signature into the presigned URL."""
    return (
        f"https://{request.host}/{request.object_key}"
        f"?{canonical_query}&X-Amz-Signature={signature}"
    )


def sign_url(request: SigningRequest) -> str:
    """Produce a presigned URL for the request.

    Args:
        request: The request to sign.

    Returns:
        The full https URL, ending in &X-Amz-Signature=<64 hex chars>.

    Raises:
        InvalidRequestError: If any field cannot be canonicalized. Nothing
            is hashed before validation passes.
    """
    validate_request(request)

    signing_key = resolve_signing_key(request)
    canonical_query = build_canonical_query(request)
    canonical_request = build_canonical_request(request, canonical_query)
    logger.debug("Canonical request:\n%s", canonical_request)

    string_to_sign = build_string_to_sign(request, canonical_request)
    logger.debug("String to sign:\n%s", string_to_sign)

    signature = hmac_sha256_hex(signing_key, string_to_sign)
    return assemble_url(request, canonical_query, signature)
