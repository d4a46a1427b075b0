"""Data models for the S3 presigner."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import urlparse


@dataclass(frozen=True)
class DeriveSigningKey:
    """Key source: derive the signing key from the secret access key."""


@dataclass(frozen=True)
class PrecomputedSigningKey:
    """Key source: use a signing key the caller derived earlier.

    The key MUST come from derive_signing_key() called with the same secret,
    the request's date (YYYYMMDD) and the request's region. This is not
    checked: a mismatched key still yields a well-formed URL, but the
    provider will reject its signature.
    """

    key: bytes = field(repr=False)


KeySource = Union[DeriveSigningKey, PrecomputedSigningKey]


@dataclass(frozen=True)
class SigningRequest:
    """Everything needed to presign one object URL.

    Every field is required. Use new_request() to fill in REQUEST_DEFAULTS.
    """

    object_key: str
    http_method: str
    region: str
    expires_in: int
    timestamp: datetime
    bucket: str
    access_key_id: str
    secret_access_key: str = field(repr=False)
    endpoint_host: str
    signing_key: KeySource

    @property
    def host(self) -> str:
        """Virtual-hosted host the URL is addressed to."""
        return f"{self.bucket}.{self.endpoint_host}"


# Defaults for the fields that have a sensible one. Credentials, bucket,
# endpoint, key and timestamp never default.
REQUEST_DEFAULTS: dict[str, Any] = {
    "http_method": "GET",
    "region": "auto",
    "expires_in": 84600,
    "signing_key": DeriveSigningKey(),
}


def new_request(**fields: Any) -> SigningRequest:
    """Build a SigningRequest, applying REQUEST_DEFAULTS for omitted fields.

    Raises:
        TypeError: If a field without a default is missing.
    """
    values = {**REQUEST_DEFAULTS, **fields}
    return SigningRequest(**values)


DEFAULT_PORTS = {"https": "443", "http": "80"}


@dataclass
class ProviderConfig:
    """Configuration for an S3-compatible provider."""

    key: str
    provider_name: str
    endpoint_url: str
    aws_access_key_id: str
    aws_secret_access_key: str = field(repr=False)
    bucket_name: str
    region_name: str = "auto"
    enabled: bool = True

    @property
    def endpoint_host(self) -> str:
        """Host part of endpoint_url (scheme, path and default port stripped)."""
        url = self.endpoint_url
        if "://" not in url:
            url = f"https://{url}"
        parsed = urlparse(url)
        netloc = parsed.netloc.lower()
        # botocore lowercases the signed Host and leaves out the default port
        default_port = DEFAULT_PORTS.get(parsed.scheme)
        if default_port and netloc.endswith(f":{default_port}"):
            netloc = netloc[: -len(default_port) - 1]
        return netloc


class CheckStatus(Enum):
    """Outcome of comparing a URL against botocore's presigner."""

    MATCH = "match"
    MISMATCH = "mismatch"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class SignedUrlResult:
    """A single presigned URL produced for one object key."""

    object_key: str
    http_method: str
    expires_at: str
    url: Optional[str] = None
    check: CheckStatus = CheckStatus.SKIPPED
    error_message: Optional[str] = None


@dataclass
class ProviderResult:
    """All URLs signed for a single provider."""

    provider_key: str
    provider_name: str
    urls: list[SignedUrlResult] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def has_mismatch(self) -> bool:
        """True if any cross-checked URL disagreed with botocore."""
        return any(u.check == CheckStatus.MISMATCH for u in self.urls)

    @property
    def has_error(self) -> bool:
        """True if the provider or any of its URLs failed to sign."""
        if self.error_message:
            return True
        return any(u.error_message for u in self.urls)
