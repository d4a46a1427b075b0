"""Presign runner.

Signs a set of object keys for every configured provider, managing:
- Provider iteration
- One derived signing key per provider, reused for all of its keys
- Optional cross-checking against botocore
- Reporter callbacks
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from botocore.exceptions import BotoCoreError

from s3presign import reference
from s3presign.canonical import format_datestamp
from s3presign.config import request_for
from s3presign.models import (
    CheckStatus,
    PrecomputedSigningKey,
    ProviderConfig,
    ProviderResult,
    REQUEST_DEFAULTS,
    SignedUrlResult,
)
from s3presign.signer import sign_url
from s3presign.signing_key import derive_signing_key
from s3presign.validation import InvalidRequestError

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """URLs signed across all providers."""

    providers: dict[str, ProviderResult]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def all_matched(self) -> bool:
        """True if no cross-checked URL disagreed with botocore."""
        return not any(p.has_mismatch for p in self.providers.values())

    @property
    def has_errors(self) -> bool:
        return any(p.has_error for p in self.providers.values())


class PresignRunner:
    """Signs object keys for each configured provider.

    Args:
        providers: Dictionary of provider configurations
        object_keys: Keys to sign for every provider
        http_method: HTTP method the URLs are valid for
        expires_in: URL validity in seconds
        timestamp: Signing time (defaults to now, UTC)
        cross_check: Compare each URL against botocore's presigner
        reporter: Optional reporter for progress callbacks
    """

    def __init__(
        self,
        providers: dict[str, ProviderConfig],
        object_keys: list[str],
        http_method: str = REQUEST_DEFAULTS["http_method"],
        expires_in: int = REQUEST_DEFAULTS["expires_in"],
        timestamp: Optional[datetime] = None,
        cross_check: bool = False,
        reporter: Optional[Any] = None,
    ):
        self.providers = providers
        self.object_keys = object_keys
        self.http_method = http_method
        self.expires_in = expires_in
        self.timestamp = timestamp or datetime.now(timezone.utc)
        self.cross_check = cross_check
        self.reporter = reporter

    def run(self) -> RunResult:
        """Sign every key for every provider.

        Returns:
            RunResult containing results for all providers
        """
        results: dict[str, ProviderResult] = {}

        for provider_key, config in self.providers.items():
            if self.reporter:
                self.reporter.on_provider_start(config.provider_name)

            try:
                result = self._sign_for_provider(config)
            except Exception as e:
                logger.exception("Signing failed for provider %s", provider_key)
                result = ProviderResult(
                    provider_key=provider_key,
                    provider_name=config.provider_name,
                    error_message=str(e),
                )

            results[provider_key] = result

            if self.reporter:
                self.reporter.on_provider_complete(result)

        run_result = RunResult(providers=results, timestamp=self.timestamp)

        if self.reporter:
            self.reporter.on_run_complete(results)

        return run_result

    def _sign_for_provider(self, config: ProviderConfig) -> ProviderResult:
        result = ProviderResult(
            provider_key=config.key,
            provider_name=config.provider_name,
        )

        # Same date and region for every key, so derive once
        signing_key = PrecomputedSigningKey(
            derive_signing_key(
                config.aws_secret_access_key,
                format_datestamp(self.timestamp),
                config.region_name,
            )
        )
        s3_client = reference.build_s3_client(config) if self.cross_check else None

        for object_key in self.object_keys:
            url_result = self._sign_one(config, object_key, signing_key, s3_client)
            result.urls.append(url_result)

            if self.reporter:
                self.reporter.on_url_signed(config.provider_name, url_result)

        return result

    def _sign_one(
        self,
        config: ProviderConfig,
        object_key: str,
        signing_key: PrecomputedSigningKey,
        s3_client: Any,
    ) -> SignedUrlResult:
        expires_at = self.timestamp + timedelta(seconds=self.expires_in)
        url_result = SignedUrlResult(
            object_key=object_key,
            http_method=self.http_method,
            expires_at=expires_at.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        )

        try:
            url_result.url = sign_url(
                request_for(
                    config,
                    object_key,
                    self.timestamp,
                    http_method=self.http_method,
                    expires_in=self.expires_in,
                    signing_key=signing_key,
                )
            )
        except InvalidRequestError as e:
            url_result.error_message = str(e)
            return url_result

        if s3_client is not None:
            try:
                url_result.check = reference.cross_check(
                    config,
                    object_key,
                    self.http_method,
                    self.expires_in,
                    s3_client=s3_client,
                )
            except (BotoCoreError, ValueError) as e:
                url_result.check = CheckStatus.ERROR
                url_result.error_message = f"Cross-check failed: {e}"

        return url_result
