"""
CipherHub Cryptographic Core
============================

Pluggable symmetric encryption: driver selection, configuration
resolution and HKDF secret derivation in front of interchangeable
cipher backends.

Backends:
    1. OpenSSL: AES-256-GCM via the ``cryptography`` package
    2. Sodium: XSalsa20-Poly1305 via PyNaCl (optional)

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from cipherhub.core.crypto.drivers import DriverId, DriverRegistry
from cipherhub.core.crypto.exceptions import (
    DecryptionError,
    DriverNotAvailable,
    EncryptionError,
    MissingKeyError,
    NoDriverRequested,
    NoHandlerAvailable,
    UnknownDriver,
)
from cipherhub.core.crypto.handlers import (
    CipherHandler,
    HandlerFactory,
    OpenSSLHandler,
    SodiumHandler,
    default_factory,
)
from cipherhub.core.crypto.kdf import create_key, hkdf
from cipherhub.core.crypto.manager import EncryptionManager, ManagerField
from cipherhub.core.crypto.resolver import ConfigResolver, EffectiveConfig, resolve

__all__ = [
    "DriverId",
    "DriverRegistry",
    "EncryptionError",
    "NoHandlerAvailable",
    "NoDriverRequested",
    "UnknownDriver",
    "DriverNotAvailable",
    "MissingKeyError",
    "DecryptionError",
    "CipherHandler",
    "HandlerFactory",
    "OpenSSLHandler",
    "SodiumHandler",
    "default_factory",
    "create_key",
    "hkdf",
    "EncryptionManager",
    "ManagerField",
    "ConfigResolver",
    "EffectiveConfig",
    "resolve",
]
