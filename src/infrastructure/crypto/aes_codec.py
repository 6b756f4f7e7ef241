"""AES-128-CBC message codec.

Ciphertext is hex-encoded, PKCS7-padded AES-128-CBC. Every message is
encrypted with the same process-wide key and initialization vector, so equal
plaintexts produce equal ciphertexts.
"""

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from core.config import Settings
from core.exceptions import CipherConfigurationError, CryptoError

SECRET_LENGTH = 16
_BLOCK_BITS = algorithms.AES.block_size


class AESMessageCodec:
    """Symmetric codec holding an immutable key/IV pair."""

    def __init__(self, key: bytes, iv: bytes) -> None:
        if len(key) != SECRET_LENGTH:
            raise CipherConfigurationError("AES key must be 16 bytes long")
        if len(iv) != SECRET_LENGTH:
            raise CipherConfigurationError("AES IV must be 16 bytes long")
        self._key = key
        self._iv = iv

    @classmethod
    def from_settings(cls, settings: Settings) -> "AESMessageCodec":
        """Build the codec from the configured text secrets."""
        return cls(
            key=settings.aes_key.strip().encode("utf-8"),
            iv=settings.aes_iv.strip().encode("utf-8"),
        )

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CBC(self._iv))

    def encrypt(self, plaintext: str) -> str:
        try:
            padder = padding.PKCS7(_BLOCK_BITS).padder()
            padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

            encryptor = self._cipher().encryptor()
            ciphertext = encryptor.update(padded) + encryptor.finalize()
        except ValueError as exc:
            # Lone surrogates cannot be encoded as UTF-8
            raise CryptoError("Message payload could not be encrypted") from exc
        return ciphertext.hex()

    def decrypt(self, ciphertext: str) -> str:
        try:
            raw = bytes.fromhex(ciphertext)
            decryptor = self._cipher().decryptor()
            padded = decryptor.update(raw) + decryptor.finalize()

            unpadder = padding.PKCS7(_BLOCK_BITS).unpadder()
            data = unpadder.update(padded) + unpadder.finalize()
            return data.decode("utf-8")
        except ValueError as exc:
            # UnicodeDecodeError is a ValueError too
            raise CryptoError() from exc
