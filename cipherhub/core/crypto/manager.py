"""
Encryption Manager
==================

Selects a cipher backend, resolves configuration and derives the
per-use secret handed to the backend.

State machine:
    Uninitialized -> Configured (construction) -> Active (initialize)
    ``initialize`` may be called again from Active.

Flow of one initialize() call:
    params -> ConfigResolver -> validated DriverId -> hkdf (if key) -> HandlerFactory

A manager instance owns its baseline and handler exclusively; build one
per logical owner instead of sharing it between concurrent requests.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Final, Mapping, Optional, Union

from cipherhub.core.crypto.drivers import DriverId, DriverRegistry
from cipherhub.core.crypto.exceptions import (
    DriverNotAvailable,
    NoDriverRequested,
    NoHandlerAvailable,
    UnknownDriver,
)
from cipherhub.core.crypto.handlers import CipherHandler, HandlerFactory, default_factory
from cipherhub.core.crypto.kdf import create_key, hkdf
from cipherhub.core.crypto.resolver import ConfigResolver, EffectiveConfig, Override

logger = logging.getLogger(__name__)

# HMAC digest used for secret derivation
DIGEST: Final[str] = "SHA512"
SECRET_LENGTH: Final[int] = 64

DEFAULTS: Final[Mapping[str, Any]] = MappingProxyType({
    "driver": DriverId.OPENSSL.value,
    "key": b"",
})


class ManagerField(str, Enum):
    """Fields readable through EncryptionManager.get()."""

    CONFIG = "config"
    KEY = "key"
    DRIVER = "driver"
    DRIVERS = "drivers"
    DEFAULT = "default"


class EncryptionManager:
    """
    Front-end over the interchangeable cipher backends.

    Usage:
        manager = EncryptionManager(EncryptionConfig(key=EncryptionManager.create_key()))
        handler = manager.initialize({"driver": "Sodium"})
        token = handler.encrypt(b"payload")

    Raises on construction:
        UnknownDriver: The persisted/constructor driver is not registered
        NoHandlerAvailable: No backend is usable on this host
    """

    __slots__ = (
        "_resolver",
        "_registry",
        "_factory",
        "_availability",
        "_driver",
        "_key",
        "_active_driver",
        "_handler",
    )

    def __init__(
        self,
        config: Override = None,
        params: Override = None,
        registry: Optional[DriverRegistry] = None,
        factory: Optional[HandlerFactory] = None,
    ) -> None:
        """
        Args:
            config: Persisted configuration (defaults to the process config)
            params: Optional construction-time override or driver name
            registry: Driver registry (defaults to the built-in probes)
            factory: Handler factory (defaults to the built-in backends)
        """
        if config is None:
            # Deferred: the config module itself depends on this package
            from cipherhub.core.config import CipherConfig

            config = CipherConfig.get_instance().encryption

        self._registry = registry or DriverRegistry()
        self._factory = factory or default_factory()
        self._resolver = ConfigResolver(DEFAULTS, config)

        resolved = self._resolver.preview(params)
        driver = resolved.get("driver")
        # Malformed or unregistered identifiers are rejected up front
        if driver not in (None, "") and self._registry.lookup(driver) is None:
            raise UnknownDriver(driver)

        availability = self._registry.probe()
        if not any(availability.values()):
            logger.error("No encryption handler available")
            raise NoHandlerAvailable()

        self._availability = availability
        self._active_driver: Optional[DriverId] = None
        self._handler: Optional[CipherHandler] = None
        self._project(self._resolver.commit(resolved))

        logger.debug("Encryption manager configured: driver=%s", self._driver)

    def _project(self, effective: EffectiveConfig) -> None:
        self._driver = effective.driver
        self._key = effective.key

    def initialize(self, params: Override = None) -> CipherHandler:
        """
        Initialize or re-initialize a cipher handler.

        Args:
            params: Overrides merged over the stored baseline; a string is
                shorthand for ``{"driver": params}``

        Returns:
            The new handler, also kept as the active handler

        Raises:
            NoDriverRequested: Resolved configuration has no driver
            UnknownDriver: Driver is not registered
            DriverNotAvailable: Driver is registered but was probed unavailable
        """
        resolved = self._resolver.preview(params)

        requested = resolved.get("driver")
        if requested is None or requested == "":
            raise NoDriverRequested()

        driver = self._registry.lookup(requested)
        if driver is None:
            logger.warning("Rejected unknown encryption driver %r", requested)
            raise UnknownDriver(requested)

        if not self._availability.get(driver, False):
            logger.warning("Encryption driver %s is not available", driver)
            raise DriverNotAvailable(driver.value)

        handler_params: dict[str, Any] = {
            "driver": driver.value,
            "key": resolved.get("key") or b"",
            "digest": DIGEST,
        }
        if handler_params["key"]:
            handler_params["secret"] = hkdf(
                handler_params["key"],
                digest=DIGEST,
                length=SECRET_LENGTH,
            ).hex()

        handler = self._factory.create(driver, handler_params)

        # Commit only once every step has succeeded
        self._project(self._resolver.commit(resolved))
        self._active_driver = driver
        self._handler = handler

        logger.info(
            "Encryption handler initialized: driver=%s keyed=%s",
            driver,
            "secret" in handler_params,
        )
        return handler

    @staticmethod
    def create_key(length: int = 32) -> bytes:
        """Create random key material of ``length`` bytes."""
        return create_key(length)

    def get(self, field: Union[ManagerField, str]) -> Optional[Any]:
        """
        Read-only access to selected manager fields.

        Args:
            field: One of config, key, driver, drivers, default

        Returns:
            The field value, or None for any other name
        """
        try:
            field = ManagerField(field)
        except ValueError:
            return None

        if field is ManagerField.CONFIG:
            return self._resolver.baseline
        if field is ManagerField.KEY:
            return self._key
        if field is ManagerField.DRIVER:
            return self._driver
        if field is ManagerField.DRIVERS:
            return tuple(d.value for d in self._registry.drivers)
        return dict(DEFAULTS)

    @property
    def factory(self) -> HandlerFactory:
        return self._factory

    @property
    def availability(self) -> Mapping[DriverId, bool]:
        return self._availability

    @property
    def active_driver(self) -> Optional[DriverId]:
        return self._active_driver

    @property
    def handler(self) -> Optional[CipherHandler]:
        return self._handler

    def __repr__(self) -> str:
        return (
            f"EncryptionManager(driver={self._driver!r}, "
            f"active={self._active_driver.value if self._active_driver else None})"
        )
