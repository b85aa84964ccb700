"""
Cipher Handlers
===============

Backends selected by the encryption manager, and the factory that builds
them from a validated ``DriverId``.

Every handler receives the same parameter record:
    {driver, key, digest, secret?}

``secret`` is the hex-encoded derived key. A handler built without it is
valid but refuses to encrypt or decrypt (``MissingKeyError``).

Output layout (both backends):
    nonce || ciphertext || tag
unless the caller supplies the nonce, in which case it is not prepended.
"""

from __future__ import annotations

import logging
import secrets
from abc import ABC, abstractmethod
from typing import Any, Callable, Final, Mapping, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from cipherhub.core.crypto.drivers import DriverId
from cipherhub.core.crypto.exceptions import (
    DecryptionError,
    MissingKeyError,
    UnknownDriver,
)

logger = logging.getLogger(__name__)

CIPHER_KEY_SIZE: Final[int] = 32  # 256 bits for both backends

AES_NONCE_SIZE: Final[int] = 12  # 96 bits (NIST recommended for GCM)
AES_TAG_SIZE: Final[int] = 16

SODIUM_NONCE_SIZE: Final[int] = 24  # XSalsa20
SODIUM_TAG_SIZE: Final[int] = 16  # Poly1305


class CipherHandler(ABC):
    """
    Shared capability interface of all backends.

    Subclasses implement ``_seal``/``_open`` for one primitive; nonce
    handling and key checks live here.
    """

    driver: DriverId
    nonce_size: int
    tag_size: int

    def __init__(self, params: Mapping[str, Any]) -> None:
        secret = params.get("secret")
        self._key: Optional[bytes] = (
            bytes.fromhex(secret)[:CIPHER_KEY_SIZE] if secret else None
        )
        self.digest: str = params.get("digest", "SHA512")

    @property
    def has_key(self) -> bool:
        return self._key is not None

    def _require_key(self) -> bytes:
        if self._key is None:
            raise MissingKeyError(self.driver.value)
        return self._key

    def generate_nonce(self) -> bytes:
        return secrets.token_bytes(self.nonce_size)

    def encrypt(self, plaintext: bytes, nonce: Optional[bytes] = None) -> bytes:
        """
        Encrypt and authenticate plaintext.

        Args:
            plaintext: Data to encrypt (can be empty)
            nonce: Optional caller-managed nonce; never reuse one under a key

        Returns:
            ``nonce || ciphertext`` when the nonce was generated here,
            otherwise just the ciphertext (tag appended)
        """
        key = self._require_key()
        if nonce is None:
            generated = self.generate_nonce()
            return generated + self._seal(key, generated, plaintext)
        self._check_nonce(nonce)
        return self._seal(key, nonce, plaintext)

    def decrypt(self, ciphertext: bytes, nonce: Optional[bytes] = None) -> bytes:
        """
        Verify and decrypt.

        Raises:
            DecryptionError: On any authentication or format failure
            MissingKeyError: If the handler has no secret
        """
        key = self._require_key()
        if nonce is None:
            if len(ciphertext) < self.nonce_size + self.tag_size:
                raise DecryptionError("Ciphertext too short", self.driver.value)
            nonce, ciphertext = ciphertext[:self.nonce_size], ciphertext[self.nonce_size:]
        else:
            self._check_nonce(nonce)
            if len(ciphertext) < self.tag_size:
                raise DecryptionError("Ciphertext too short", self.driver.value)
        return self._open(key, nonce, ciphertext)

    def _check_nonce(self, nonce: bytes) -> None:
        if len(nonce) != self.nonce_size:
            raise ValueError(f"Nonce must be exactly {self.nonce_size} bytes")

    @abstractmethod
    def _seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes: ...

    @abstractmethod
    def _open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes: ...

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"{type(self).__name__}(keyed={self.has_key})"


class OpenSSLHandler(CipherHandler):
    """AES-256-GCM through the OpenSSL-backed ``cryptography`` package."""

    driver = DriverId.OPENSSL
    nonce_size = AES_NONCE_SIZE
    tag_size = AES_TAG_SIZE

    def _seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        return AESGCM(key).encrypt(nonce, plaintext, None)

    def _open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        try:
            return AESGCM(key).decrypt(nonce, ciphertext, None)
        except InvalidTag as e:
            raise DecryptionError("Authentication failed", self.driver.value) from e


class SodiumHandler(CipherHandler):
    """XSalsa20-Poly1305 ``SecretBox`` through PyNaCl (libsodium)."""

    driver = DriverId.SODIUM
    nonce_size = SODIUM_NONCE_SIZE
    tag_size = SODIUM_TAG_SIZE

    def __init__(self, params: Mapping[str, Any]) -> None:
        super().__init__(params)
        # Imported here so the module loads on hosts without libsodium
        import nacl.exceptions
        import nacl.secret

        self._box_type = nacl.secret.SecretBox
        self._crypto_error = nacl.exceptions.CryptoError

    def _seal(self, key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
        return self._box_type(key).encrypt(plaintext, nonce).ciphertext

    def _open(self, key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
        try:
            return self._box_type(key).decrypt(ciphertext, nonce)
        except self._crypto_error as e:
            raise DecryptionError("Authentication failed", self.driver.value) from e


HandlerConstructor = Callable[[Mapping[str, Any]], CipherHandler]


class HandlerFactory:
    """
    Polymorphic factory indexed by ``DriverId``.

    Constructors are registered up front; there is no lookup by
    dynamically built names.
    """

    __slots__ = ("_constructors",)

    def __init__(self) -> None:
        self._constructors: dict[DriverId, HandlerConstructor] = {}

    def register(self, driver: DriverId, constructor: HandlerConstructor) -> None:
        self._constructors[DriverId(driver)] = constructor

    def registered(self) -> tuple[DriverId, ...]:
        return tuple(self._constructors)

    def create(self, driver: DriverId, params: Mapping[str, Any]) -> CipherHandler:
        """
        Build a handler for a validated driver.

        Raises:
            UnknownDriver: If no constructor is registered for the driver
        """
        try:
            constructor = self._constructors[driver]
        except KeyError:
            raise UnknownDriver(driver) from None
        handler = constructor(dict(params))
        logger.debug("Created %r for driver %s", handler, driver)
        return handler


def default_factory() -> HandlerFactory:
    """Factory with every built-in backend registered."""
    factory = HandlerFactory()
    factory.register(DriverId.OPENSSL, OpenSSLHandler)
    factory.register(DriverId.SODIUM, SodiumHandler)
    return factory
