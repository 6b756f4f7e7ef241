"""Unit tests for AESMessageCodec."""

import pytest

from core.config import Settings
from core.exceptions import CipherConfigurationError, CryptoError
from infrastructure.crypto.aes_codec import AESMessageCodec

KEY = b"0123456789abcdef"
IV = b"fedcba9876543210"


@pytest.fixture
def codec() -> AESMessageCodec:
    return AESMessageCodec(key=KEY, iv=IV)


class TestRoundTrip:
    @pytest.mark.parametrize(
        "plaintext",
        [
            "hi",
            "",
            "exactly16bytes!!",
            "üñíçødé ✓ 你好 🙂",
            "line one\nline two\ttabbed",
            "x" * 4000,
        ],
    )
    def test_decrypt_inverts_encrypt(self, codec: AESMessageCodec, plaintext: str):
        assert codec.decrypt(codec.encrypt(plaintext)) == plaintext

    def test_ciphertext_is_hex_blocks(self, codec: AESMessageCodec):
        ciphertext = codec.encrypt("hello")

        assert ciphertext != "hello"
        assert len(ciphertext) % 32 == 0
        bytes.fromhex(ciphertext)

    def test_full_block_gets_padding_block(self, codec: AESMessageCodec):
        assert len(codec.encrypt("exactly16bytes!!")) == 64

    def test_fixed_iv_is_deterministic(self, codec: AESMessageCodec):
        assert codec.encrypt("same") == codec.encrypt("same")
        assert AESMessageCodec(KEY, IV).encrypt("same") == codec.encrypt("same")


class TestEncryptFailures:
    def test_unencodable_text(self, codec: AESMessageCodec):
        with pytest.raises(CryptoError) as exc_info:
            codec.encrypt("bad \ud800 text")

        assert exc_info.value.message == "Message payload could not be encrypted"
        assert "bad" not in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


class TestDecryptFailures:
    def test_not_hex(self, codec: AESMessageCodec):
        with pytest.raises(CryptoError):
            codec.decrypt("not-hex-at-all")

    def test_truncated(self, codec: AESMessageCodec):
        ciphertext = codec.encrypt("a longer message spanning blocks")

        with pytest.raises(CryptoError):
            codec.decrypt(ciphertext[:-2])

    def test_partial_block(self, codec: AESMessageCodec):
        with pytest.raises(CryptoError):
            codec.decrypt("deadbeef")

    def test_error_message_hides_cipher_details(self, codec: AESMessageCodec):
        with pytest.raises(CryptoError) as exc_info:
            codec.decrypt("deadbeef")

        assert exc_info.value.message == "Message payload could not be decrypted"
        assert exc_info.value.details is None


class TestConfiguration:
    @pytest.mark.parametrize(
        "key, iv",
        [
            (b"short", IV),
            (KEY, b"short"),
            (b"", IV),
            (KEY + b"x", IV),
        ],
    )
    def test_rejects_wrong_lengths(self, key: bytes, iv: bytes):
        with pytest.raises(CipherConfigurationError):
            AESMessageCodec(key=key, iv=iv)

    def test_from_settings_trims_whitespace(self):
        settings = Settings(aes_key=" 0123456789abcdef\n", aes_iv="fedcba9876543210 ")

        codec = AESMessageCodec.from_settings(settings)

        assert codec.decrypt(codec.encrypt("ok")) == "ok"

    def test_from_settings_rejects_missing_secrets(self):
        with pytest.raises(CipherConfigurationError):
            AESMessageCodec.from_settings(Settings(aes_key="", aes_iv=""))
