"""
Encryption Exceptions
=====================

Error taxonomy for driver selection and cipher handlers.

All configuration errors are terminal to the call that raised them.
Nothing here is retried internally.
"""

from __future__ import annotations

from typing import Optional


class EncryptionError(Exception):
    """Base class for all encryption errors."""

    def __init__(self, message: str, driver: Optional[str] = None) -> None:
        super().__init__(message)
        self.driver = driver


class NoHandlerAvailable(EncryptionError):
    """Raised when no cipher backend is usable in this environment."""

    def __init__(self) -> None:
        super().__init__("No encryption handler is available in this environment")


class NoDriverRequested(EncryptionError):
    """Raised when the resolved configuration names no driver."""

    def __init__(self) -> None:
        super().__init__("No encryption driver was requested")


class UnknownDriver(EncryptionError):
    """Raised when the requested driver is not a registered backend."""

    def __init__(self, driver: object) -> None:
        super().__init__(f"Unknown encryption driver: {driver!r}", driver=str(driver))


class DriverNotAvailable(EncryptionError):
    """Raised when a known driver was probed as unavailable."""

    def __init__(self, driver: str) -> None:
        super().__init__(f"Encryption driver not available: {driver}", driver=driver)


class MissingKeyError(EncryptionError):
    """Raised when a handler built without a secret is asked to work."""

    def __init__(self, driver: Optional[str] = None) -> None:
        super().__init__("Handler needs key material before it can be used", driver=driver)


class DecryptionError(EncryptionError):
    """
    Raised when decryption fails.

    Deliberately generic: wrong key, tampered data and truncated
    input all look the same to the caller.
    """
