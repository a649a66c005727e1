"""Transaction encryption backends.

Encryption flow (BITE):
1. Build the unsigned transaction (to, data, value, gas)
2. Hand ``to`` and ``data`` to the encryption backend
3. Backend returns the replacement ``to`` and encrypted ``data``
4. Sign and broadcast with the original value and gas fields

The backend is chosen by ``ENCRYPTOR_BACKEND`` ("package.module:ClassName")
and is constructed with no arguments.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fairkit.errors import EncryptionFailed

logger = logging.getLogger(__name__)


@dataclass
class PlainTransaction:
    """The part of a transaction an encryption backend sees."""

    to: str
    data: str


@dataclass
class EncryptedTransaction:
    """Backend output that replaces ``to`` and ``data`` before signing."""

    to: str
    data: str


class TransactionEncryptor(ABC):
    """Abstract base class for encryption backends."""

    @abstractmethod
    async def encrypt(self, rpc_url: str, transaction: PlainTransaction) -> EncryptedTransaction:
        """Encrypt a transaction for the chain served at ``rpc_url``."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


def load_encryptor(path: Optional[str]) -> Optional[TransactionEncryptor]:
    """Instantiate the backend named by a ``module:ClassName`` path.

    Returns None when no backend is configured.
    """
    if not path:
        return None

    module_name, _, class_name = path.partition(":")
    if not class_name:
        raise ValueError(f"Encryptor backend must look like 'module:ClassName', got '{path}'")

    module = importlib.import_module(module_name)
    backend_cls = getattr(module, class_name)
    encryptor = backend_cls()

    if not isinstance(encryptor, TransactionEncryptor):
        raise TypeError(f"{path} is not a TransactionEncryptor")

    logger.info(f"Loaded encryption backend {encryptor!r}")
    return encryptor


async def encrypt_transaction(
    encryptor: Optional[TransactionEncryptor],
    rpc_url: str,
    transaction: PlainTransaction,
) -> EncryptedTransaction:
    """Run the backend, wrapping any failure in ``EncryptionFailed``."""
    if encryptor is None:
        raise EncryptionFailed("no encryption backend configured")

    try:
        encrypted = await encryptor.encrypt(rpc_url, transaction)
    except Exception as e:
        logger.error(f"Encryption backend {encryptor!r} failed: {e}")
        raise EncryptionFailed(str(e) or e.__class__.__name__) from e

    if encrypted is None or not encrypted.data:
        raise EncryptionFailed("backend returned no encrypted data")

    return encrypted
