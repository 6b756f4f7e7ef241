"""Message domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Message:
    """Domain entity for a stored group message.

    Only ciphertext is persisted; plaintext exists only in DecryptedMessage.
    """

    group_id: UUID
    sender_id: str
    encrypted_text: str
    id: UUID = field(default_factory=uuid4)
    timestamp: datetime = field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class DecryptedMessage:
    """A message as delivered to a reader."""

    id: UUID
    sender_id: str
    text: str
    timestamp: datetime
