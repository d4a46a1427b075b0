"""Tests for hashing primitives."""

import pytest

from s3presign.primitives import hmac_sha256, hmac_sha256_hex, sha256_hex


class TestSha256Hex:
    """Tests for sha256_hex."""

    def test_empty_input(self):
        """Empty input hashes to the well-known empty digest."""
        assert sha256_hex(b"") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )

    def test_known_vector(self):
        """'abc' matches the FIPS 180-2 test vector."""
        assert sha256_hex(b"abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_str_is_utf8_encoded(self):
        """A str hashes the same as its UTF-8 bytes."""
        assert sha256_hex("naïve") == sha256_hex("naïve".encode("utf-8"))

    def test_lowercase_hex_of_fixed_length(self):
        """Digest is 64 lowercase hex characters."""
        digest = sha256_hex(b"x" * 10_000)
        assert len(digest) == 64
        assert digest == digest.lower()
        int(digest, 16)


class TestHmacSha256:
    """Tests for hmac_sha256 and hmac_sha256_hex."""

    def test_known_vector(self):
        """Matches the widely published HMAC-SHA256 example."""
        digest = hmac_sha256_hex(b"key", b"The quick brown fox jumps over the lazy dog")
        assert digest == "f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8"

    def test_raw_digest_is_32_bytes(self):
        """Raw digest is always 32 bytes."""
        assert len(hmac_sha256(b"key", b"data")) == 32

    def test_hex_wraps_raw(self):
        """Hex variant is the hex form of the raw digest."""
        assert hmac_sha256_hex(b"k", b"d") == hmac_sha256(b"k", b"d").hex()

    @pytest.mark.parametrize("key", [b"", b"k", b"k" * 64, b"k" * 200])
    def test_any_key_length(self, key: bytes):
        """Keys of any length are accepted."""
        assert len(hmac_sha256(key, b"data")) == 32

    def test_str_arguments(self):
        """str key and data are UTF-8 encoded."""
        assert hmac_sha256("key", "data") == hmac_sha256(b"key", b"data")
