"""JSON reporter for structured output.

Writes every signed URL, with its expiry and cross-check verdict, to a JSON
file that other tooling can consume. Secrets are never written.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from s3presign.models import CheckStatus, ProviderResult, SignedUrlResult
from s3presign.reporters.base import Reporter


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
    """

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path

    def on_provider_start(self, provider_name: str) -> None:
        """No-op for JSON reporter."""
        pass

    def on_url_signed(self, provider_name: str, result: SignedUrlResult) -> None:
        """No-op - data comes from the provider result."""
        pass

    def on_provider_complete(self, result: ProviderResult) -> None:
        """No-op - the document is built from the final results."""
        pass

    def on_run_complete(self, results: dict[str, ProviderResult]) -> dict:
        """Generates the JSON data and writes it if a path was given.

        Returns:
            The generated JSON data as a dictionary
        """
        output = self._generate_output(results)

        if self.output_path:
            self._write_to_file(output)

        return output

    def _generate_output(self, results: dict[str, ProviderResult]) -> dict:
        timestamp = datetime.now(timezone.utc).isoformat()

        providers = {}
        signed_count = 0
        rejected_count = 0
        mismatch_count = 0

        for provider_key, provider_result in results.items():
            urls = []
            for url_result in provider_result.urls:
                if url_result.url is None:
                    rejected_count += 1
                else:
                    signed_count += 1
                if url_result.check == CheckStatus.MISMATCH:
                    mismatch_count += 1

                url_data = {
                    "object_key": url_result.object_key,
                    "method": url_result.http_method,
                    "url": url_result.url,
                    "expires_at": url_result.expires_at,
                    "check": url_result.check.value,
                }
                if url_result.error_message:
                    url_data["error"] = url_result.error_message
                urls.append(url_data)

            providers[provider_key] = {
                "name": provider_result.provider_name,
                "urls": urls,
            }

            if provider_result.error_message:
                providers[provider_key]["error"] = provider_result.error_message

        return {
            "timestamp": timestamp,
            "providers": providers,
            "summary": {
                "total_providers": len(results),
                "signed": signed_count,
                "rejected": rejected_count,
                "mismatched": mismatch_count,
            },
        }

    def _write_to_file(self, output: dict) -> None:
        path = Path(self.output_path)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.output_path, "w") as f:
            json.dump(output, f, indent=2)
