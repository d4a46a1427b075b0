"""SigV4 presigned URLs for S3-compatible object storage.

Produces time-limited, credential-free URLs for AWS S3, Cloudflare R2 and
other S3-compatible providers using AWS Signature Version 4 query
authentication.
"""

__version__ = "1.0.0"

from s3presign.models import (
    DeriveSigningKey,
    PrecomputedSigningKey,
    REQUEST_DEFAULTS,
    SigningRequest,
    new_request,
)
from s3presign.signer import sign_url
from s3presign.signing_key import derive_signing_key
from s3presign.validation import InvalidRequestError

__all__ = [
    "DeriveSigningKey",
    "InvalidRequestError",
    "PrecomputedSigningKey",
    "REQUEST_DEFAULTS",
    "SigningRequest",
    "__version__",
    "derive_signing_key",
    "new_request",
    "sign_url",
]
