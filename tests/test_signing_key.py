"""Tests for signing key derivation."""

import pytest

from s3presign.signing_key import derive_signing_key


class TestDeriveSigningKey:
    """Tests for derive_signing_key."""

    def test_regression_vector(self):
        """secret / 20230101 / auto derives a fixed key."""
        key = derive_signing_key("secret", "20230101", "auto")
        assert key.hex() == (
            "d09d8ec344cd9b9e0acac081e8d81b17b8cc7e0f92d02cced9323cd30e35eb20"
        )

    def test_aws_documentation_vector(self):
        """Matches the kSigning of the S3 query-string auth example."""
        key = derive_signing_key(
            "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY", "20130524", "us-east-1"
        )
        assert key.hex() == (
            "dbb893acc010964918f1fd433add87c70e8b0db6be30c1fbeafefa5ec6ba8378"
        )

    @pytest.mark.parametrize(
        "secret,date,region",
        [
            ("secret", "20230101", "auto"),
            ("", "20230101", "auto"),
            ("x" * 500, "19991231", "us-east-1"),
            ("ünïcode", "20240229", "eu-central-1"),
        ],
    )
    def test_always_32_bytes(self, secret: str, date: str, region: str):
        assert len(derive_signing_key(secret, date, region)) == 32

    def test_deterministic(self):
        assert derive_signing_key("s", "20230101", "auto") == derive_signing_key(
            "s", "20230101", "auto"
        )

    @pytest.mark.parametrize(
        "changed",
        [
            ("secreT", "20230101", "auto"),
            ("secret", "20230102", "auto"),
            ("secret", "20230101", "us-east-1"),
        ],
    )
    def test_scope_changes_key(self, changed):
        assert derive_signing_key(*changed) != derive_signing_key("secret", "20230101", "auto")
