"""Tests for ConsoleReporter.

Tests the Rich-based console output reporter.
"""

from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from s3presign.models import CheckStatus, ProviderResult, SignedUrlResult
from s3presign.reporters.base import Reporter
from s3presign.reporters.console import ConsoleReporter

URL = (
    "https://bucket.123.r2.cloudflarestorage.com/file.mp4"
    "?X-Amz-Algorithm=AWS4-HMAC-SHA256&X-Amz-Signature=abc123"
)


def capture(reporter: ConsoleReporter) -> StringIO:
    """Redirect the reporter's console into a buffer."""
    buffer = StringIO()
    reporter.console = Console(file=buffer, width=200, color_system=None, legacy_windows=True)
    return buffer


@pytest.fixture
def signed() -> SignedUrlResult:
    return SignedUrlResult(
        object_key="file.mp4",
        http_method="GET",
        expires_at="2023-01-01T23:30:00Z",
        url=URL,
    )


@pytest.fixture
def rejected() -> SignedUrlResult:
    return SignedUrlResult(
        object_key="a?b",
        http_method="GET",
        expires_at="2023-01-01T23:30:00Z",
        error_message="object_key must not contain '?'",
    )


class TestConsoleReporterInterface:
    """Tests that ConsoleReporter implements Reporter interface."""

    def test_inherits_from_reporter(self):
        assert isinstance(ConsoleReporter(), Reporter)


class TestConsoleReporterProviderStart:
    """Tests for on_provider_start method."""

    def test_includes_provider_name(self):
        reporter = ConsoleReporter()
        buffer = capture(reporter)

        reporter.on_provider_start("Cloudflare R2")

        assert "Signing: Cloudflare R2" in buffer.getvalue()

    def test_quiet_mode_prints_nothing(self):
        reporter = ConsoleReporter(quiet=True)

        with patch.object(reporter.console, "print") as mock_print:
            reporter.on_provider_start("Cloudflare R2")

        mock_print.assert_not_called()


class TestConsoleReporterUrlSigned:
    """Tests for on_url_signed method."""

    def test_signed_url_on_one_line(self, signed: SignedUrlResult):
        reporter = ConsoleReporter()
        buffer = capture(reporter)

        reporter.on_url_signed("Cloudflare R2", signed)

        output = buffer.getvalue()
        assert "[SIGNED]: file.mp4" in output
        assert URL in output.splitlines()
        assert "botocore" not in output

    def test_rejected(self, rejected: SignedUrlResult):
        reporter = ConsoleReporter()
        buffer = capture(reporter)

        reporter.on_url_signed("Cloudflare R2", rejected)

        output = buffer.getvalue()
        assert "[REJECTED]: a?b" in output
        assert "must not contain" in output

    @pytest.mark.parametrize(
        "check,label",
        [(CheckStatus.MATCH, "MATCH"), (CheckStatus.MISMATCH, "MISMATCH"), (CheckStatus.ERROR, "ERROR")],
    )
    def test_cross_check_verdict(self, signed: SignedUrlResult, check: CheckStatus, label: str):
        reporter = ConsoleReporter()
        buffer = capture(reporter)
        signed.check = check

        reporter.on_url_signed("Cloudflare R2", signed)

        assert f"botocore: {label}" in buffer.getvalue()

    def test_quiet_mode_prints_nothing(self, signed: SignedUrlResult):
        reporter = ConsoleReporter(quiet=True)

        with patch.object(reporter.console, "print") as mock_print:
            reporter.on_url_signed("Cloudflare R2", signed)

        mock_print.assert_not_called()


class TestConsoleReporterProviderComplete:
    """Tests for on_provider_complete method."""

    def test_shows_provider_error(self):
        reporter = ConsoleReporter(quiet=True)
        buffer = capture(reporter)

        reporter.on_provider_complete(
            ProviderResult("r2", "Cloudflare R2", error_message="Connection refused")
        )

        assert "Cloudflare R2: ERROR" in buffer.getvalue()
        assert "Connection refused" in buffer.getvalue()

    def test_silent_without_error(self, signed: SignedUrlResult):
        reporter = ConsoleReporter()
        buffer = capture(reporter)

        reporter.on_provider_complete(ProviderResult("r2", "Cloudflare R2", urls=[signed]))

        assert buffer.getvalue() == ""


class TestConsoleReporterRunComplete:
    """Tests for on_run_complete method."""

    def test_summary_table(self, signed: SignedUrlResult, rejected: SignedUrlResult):
        reporter = ConsoleReporter(quiet=True)
        buffer = capture(reporter)

        reporter.on_run_complete({
            "r2": ProviderResult("r2", "Cloudflare R2", urls=[signed, rejected]),
            "b2": ProviderResult("b2", "Backblaze B2", error_message="boom"),
        })

        output = buffer.getvalue()
        assert "Presigned URL Summary" in output
        assert "SIGNED" in output
        assert "REJECTED" in output
        assert "Backblaze B2" in output
        assert "ERROR" in output
        assert "2023-01-01T23:30:00Z" in output

    def test_empty_results(self):
        reporter = ConsoleReporter()
        buffer = capture(reporter)

        reporter.on_run_complete({})

        assert "No results to display" in buffer.getvalue()
