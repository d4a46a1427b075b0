"""SigV4 signing key derivation.

The key is scoped to a date, region and service. One key is valid for every
request sharing that scope, so callers that sign many URLs can derive it once
and pass it back in as a PrecomputedSigningKey.
"""

from s3presign.canonical import SERVICE, TERMINATOR
from s3presign.primitives import hmac_sha256


def derive_signing_key(secret_access_key: str, date: str, region: str) -> bytes:
    """Derive the 32-byte signing key.

    Args:
        secret_access_key: The account secret.
        date: UTC date as YYYYMMDD.
        region: Region name, e.g. "auto" or "us-east-1".

    Returns:
        The signing key, kSigning in the AWS documentation.
    """
    k_date = hmac_sha256(f"AWS4{secret_access_key}", date)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, SERVICE)
    return hmac_sha256(k_service, TERMINATOR)
