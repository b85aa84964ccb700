"""
Core module - Contains configuration, logging, and the cryptographic core.
"""

from cipherhub.core.config import CipherConfig, EncryptionConfig
from cipherhub.core.logging import get_secure_logger, SecureLogFilter

__all__ = ["CipherConfig", "EncryptionConfig", "get_secure_logger", "SecureLogFilter"]
