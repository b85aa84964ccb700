"""
Driver Registry
===============

Fixed, ordered list of cipher backends and the environment probe that
decides which of them can run here.

Order encodes preference only. Selection is always explicit; the
registry never falls back to the first available driver.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Callable, Final, Mapping, Optional

from cryptography.exceptions import UnsupportedAlgorithm

logger = logging.getLogger(__name__)


class DriverId(str, Enum):
    """Registered cipher backends, in preference order."""

    OPENSSL = "OpenSSL"
    SODIUM = "Sodium"

    def __str__(self) -> str:
        return self.value


Probe = Callable[[], bool]


def openssl_supported() -> bool:
    """True when the OpenSSL-backed AES-GCM primitive can be instantiated."""
    try:
        from cryptography.hazmat.primitives.ciphers.aead import AESGCM

        AESGCM(bytes(32))
    except (ImportError, UnsupportedAlgorithm):
        return False
    return True


def sodium_supported() -> bool:
    """True when PyNaCl (libsodium bindings) is importable."""
    try:
        import nacl.secret  # noqa: F401
    except ImportError:
        return False
    return True


DEFAULT_PROBES: Final[Mapping[DriverId, Probe]] = MappingProxyType({
    DriverId.OPENSSL: openssl_supported,
    DriverId.SODIUM: sodium_supported,
})


class DriverRegistry:
    """
    Ordered set of driver identifiers with one availability probe each.

    The identifier set is fixed by ``DriverId``; only the probes can be
    replaced, which is how tests simulate a host without a backend.

    Usage:
        registry = DriverRegistry()
        availability = registry.probe()
        if availability[DriverId.SODIUM]:
            ...
    """

    __slots__ = ("_probes",)

    def __init__(self, probes: Optional[Mapping[DriverId, Probe]] = None) -> None:
        merged = dict(DEFAULT_PROBES)
        if probes:
            for driver_id, probe in probes.items():
                merged[DriverId(driver_id)] = probe
        self._probes = merged

    @property
    def drivers(self) -> tuple[DriverId, ...]:
        """All registered drivers, in preference order."""
        return tuple(DriverId)

    def lookup(self, name: object) -> Optional[DriverId]:
        """
        Registry-membership check.

        Returns:
            The matching DriverId, or None for anything that is not the
            exact name of a registered driver (including non-strings)
        """
        if isinstance(name, DriverId):
            return name
        if not isinstance(name, str):
            return None
        try:
            return DriverId(name)
        except ValueError:
            return None

    def probe(self) -> Mapping[DriverId, bool]:
        """
        Probe every registered driver once.

        A probe that raises is reported as unavailable.

        Returns:
            Read-only mapping covering exactly the registered drivers
        """
        availability: dict[DriverId, bool] = {}
        for driver_id in self.drivers:
            try:
                availability[driver_id] = bool(self._probes[driver_id]())
            except Exception as e:
                logger.warning("Availability probe for %s failed: %s", driver_id, e)
                availability[driver_id] = False

        logger.debug(
            "Driver availability: %s",
            ", ".join(f"{d}={'yes' if ok else 'no'}" for d, ok in availability.items()),
        )
        return MappingProxyType(availability)
