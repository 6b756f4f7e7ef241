"""Message codec protocol."""

from typing import Protocol


class IMessageCodec(Protocol):
    """Protocol for turning message text into at-rest ciphertext and back."""

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt message text.

        Args:
            plaintext: UTF-8 message body

        Returns:
            Opaque ciphertext safe to store as text
        """
        ...

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt a stored message body.

        Raises:
            CryptoError: If the ciphertext is malformed or truncated
        """
        ...
