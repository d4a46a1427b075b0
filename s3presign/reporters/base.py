"""Base reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from s3presign.models import ProviderResult, SignedUrlResult


class Reporter(ABC):
    """Abstract base class for presign reporters."""

    @abstractmethod
    def on_provider_start(self, provider_name: str) -> None:
        """Called when signing begins for a provider."""
        pass

    @abstractmethod
    def on_url_signed(self, provider_name: str, result: "SignedUrlResult") -> None:
        """Called after each object key has been signed (or rejected)."""
        pass

    @abstractmethod
    def on_provider_complete(self, result: "ProviderResult") -> None:
        """Called when signing completes for a provider."""
        pass

    @abstractmethod
    def on_run_complete(self, results: dict[str, "ProviderResult"]) -> None:
        """Called when all providers are done."""
        pass
