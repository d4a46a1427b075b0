"""Cross-check presigned URLs against botocore.

Creates boto3 S3 clients configured for each provider, lets botocore presign
the same object, then signs it with sign_url() at botocore's timestamp and
compares the two X-Amz-Signature values.

Addressing is forced to virtual-hosted style, because sign_url() always
addresses <bucket>.<endpoint>.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import parse_qs, urlsplit

import boto3
from botocore.client import Config

from s3presign.canonical import AMZ_DATE_FORMAT
from s3presign.config import request_for
from s3presign.models import CheckStatus, ProviderConfig
from s3presign.signer import sign_url

# HTTP method -> boto3 client method used for presigning
CLIENT_METHODS = {
    "GET": "get_object",
    "HEAD": "head_object",
    "PUT": "put_object",
    "DELETE": "delete_object",
}


def build_s3_client(config: ProviderConfig):
    """Build a boto3 S3 client for the given provider configuration.

    Checksum calculation is limited to operations that require it, so
    botocore does not add checksum headers to the signed header list.
    """
    boto_config = Config(
        signature_version="s3v4",
        s3={"addressing_style": "virtual"},
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
    )

    endpoint_url = config.endpoint_url
    if "://" not in endpoint_url:
        endpoint_url = f"https://{endpoint_url}"

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=config.aws_access_key_id,
        aws_secret_access_key=config.aws_secret_access_key,
        region_name=config.region_name,
        config=boto_config,
    )


def query_value(url: str, name: str) -> Optional[str]:
    """Return the first value of a query parameter, or None."""
    values = parse_qs(urlsplit(url).query).get(name)
    return values[0] if values else None


def reference_url(
    s3_client: Any,
    config: ProviderConfig,
    object_key: str,
    http_method: str,
    expires_in: int,
) -> str:
    """Presign an object URL with botocore.

    Raises:
        ValueError: If the HTTP method has no presignable client method.
    """
    client_method = CLIENT_METHODS.get(http_method)
    if client_method is None:
        raise ValueError(f"Cannot cross-check HTTP method {http_method}")

    return s3_client.generate_presigned_url(
        client_method,
        Params={"Bucket": config.bucket_name, "Key": object_key},
        ExpiresIn=expires_in,
        HttpMethod=http_method,
    )


def cross_check(
    config: ProviderConfig,
    object_key: str,
    http_method: str,
    expires_in: int,
    s3_client: Any = None,
) -> CheckStatus:
    """Compare sign_url() with botocore for one object.

    Returns:
        CheckStatus.MATCH if both signatures agree, CheckStatus.MISMATCH
        otherwise.
    """
    if s3_client is None:
        s3_client = build_s3_client(config)

    expected = reference_url(s3_client, config, object_key, http_method, expires_in)
    amz_date = query_value(expected, "X-Amz-Date")
    if amz_date is None:
        raise ValueError("botocore URL has no X-Amz-Date parameter")

    timestamp = datetime.strptime(amz_date, AMZ_DATE_FORMAT).replace(tzinfo=timezone.utc)
    actual = sign_url(
        request_for(config, object_key, timestamp, http_method, expires_in)
    )

    if query_value(actual, "X-Amz-Signature") == query_value(expected, "X-Amz-Signature"):
        return CheckStatus.MATCH
    return CheckStatus.MISMATCH
