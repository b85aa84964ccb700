"""
CipherHub - Pluggable Symmetric Encryption
==========================================

Selects among interchangeable cipher backends, resolves layered
configuration and derives per-use secrets with HKDF.

Security Notice:
- No key material is logged
- Fail-closed driver selection (no silent fallback)
"""

from cipherhub.core.config import CipherConfig, EncryptionConfig
from cipherhub.core.crypto import EncryptionManager, DriverId, create_key, hkdf
from cipherhub.core.logging import get_secure_logger

__version__ = "0.1.0"

__all__ = [
    "CipherConfig",
    "EncryptionConfig",
    "EncryptionManager",
    "DriverId",
    "create_key",
    "hkdf",
    "get_secure_logger",
    "__version__",
]
