"""
Configuration Module
====================

Immutable, environment-aware configuration for the encryption front-end.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- No secrets in default values
- Key material never appears in repr()
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from typing import Any, Final, Optional, Union

from cipherhub.core.crypto.kdf import decode_key_material
from cipherhub.core.logging import configure_root_logger


# Names the generic override parser refuses to read from the environment
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "credential", "salt",
})

# The one sensitive value that is read, through decode_key_material()
_KEY_ENV_NAME: Final[str] = "encryption.key"


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


@dataclass(frozen=True, slots=True)
class EncryptionConfig:
    """
    Persisted encryption configuration.

    This is the record the encryption manager merges over its built-in
    defaults at construction time.
    """

    driver: Optional[str] = "OpenSSL"
    key: Union[bytes, str] = b""

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"EncryptionConfig(driver={self.driver!r}, key_len={len(self.key)})"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    enable_console: bool = True

    def __post_init__(self) -> None:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


class CipherConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = CipherConfig.load()
        config.configure_logging()
        manager = EncryptionManager(config.encryption)

    Environment variables use the CIPHERHUB_ prefix and double underscores
    for nested values:
        CIPHERHUB_ENCRYPTION__DRIVER=Sodium
        CIPHERHUB_ENCRYPTION__KEY=hex2bin:00112233...
        CIPHERHUB_LOGGING__LEVEL=DEBUG
    """

    __slots__ = ("_encryption", "_logging", "_frozen", "_config_hash")

    _instance: Optional[CipherConfig] = None

    def __init__(
        self,
        encryption: Optional[EncryptionConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use CipherConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_encryption", encryption or EncryptionConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        """Hash of the non-secret configuration, for change detection."""
        config_str = f"{self._encryption.driver}|{self._logging}"
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def encryption(self) -> EncryptionConfig:
        return self._encryption

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def config_hash(self) -> str:
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "CIPHERHUB") -> CipherConfig:
        """
        Load configuration with environment variable overrides.

        Args:
            env_prefix: Prefix for environment variables

        Raises:
            ValueError: If the key variable holds malformed hex/base64
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        encryption_kwargs: dict[str, Any] = {}
        if "encryption.driver" in env_overrides:
            encryption_kwargs["driver"] = env_overrides["encryption.driver"] or None

        key_text = os.environ.get(f"{env_prefix.upper()}_ENCRYPTION__KEY")
        if key_text:
            encryption_kwargs["key"] = decode_key_material(key_text)

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() == "true"

        return cls(
            encryption=EncryptionConfig(**encryption_kwargs) if encryption_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse non-sensitive environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                config_key = key[len(prefix_upper):].lower().replace("__", ".")
                if _is_sensitive_key(config_key):
                    continue
                overrides[config_key] = value

        return overrides

    def configure_logging(self) -> None:
        """Apply the logging section to the root logger."""
        configure_root_logger(
            level=self._logging.level,
            enable_console=self._logging.enable_console,
        )

    @classmethod
    def get_instance(cls) -> CipherConfig:
        """Get or create the process-wide configuration."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def __repr__(self) -> str:
        return f"CipherConfig(hash={self._config_hash}, driver={self._encryption.driver!r})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("CipherConfig is immutable after initialization")
        super().__setattr__(name, value)
