"""
Configuration Resolution
========================

Merges built-in defaults, the persisted configuration and call-time
overrides into one effective parameter set.

Precedence (lowest to highest):
    defaults < stored baseline < override

Only keys present in the defaults survive a merge. The resolver never
judges whether a driver is legal; that is the manager's job.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

Override = Union[None, str, Mapping[str, Any], object]


@dataclass(frozen=True, slots=True)
class EffectiveConfig:
    """
    Resolved parameter set.

    ``driver`` and ``key`` are projections of the resolved mapping, which
    stays the source of truth (see ``ConfigResolver.baseline``).
    """

    driver: Optional[str] = None
    key: Union[bytes, str] = b""

    def to_dict(self) -> dict[str, Any]:
        return {"driver": self.driver, "key": self.key}

    def __repr__(self) -> str:
        """Safe representation without key material."""
        return f"EffectiveConfig(driver={self.driver!r}, key_len={len(self.key)})"


def as_mapping(source: Override) -> dict[str, Any]:
    """
    Flatten a configuration source to a key/value mapping.

    Accepts None or "" (no override), a driver-name string, a mapping, a dataclass instance or
    any object with instance attributes.
    """
    if source is None or source == "":
        return {}
    if isinstance(source, str):
        return {"driver": source}
    if isinstance(source, Mapping):
        return dict(source)
    if dataclasses.is_dataclass(source) and not isinstance(source, type):
        return {f.name: getattr(source, f.name) for f in dataclasses.fields(source)}
    if hasattr(source, "__dict__"):
        return {k: v for k, v in vars(source).items() if not k.startswith("_")}
    raise TypeError(f"Cannot read configuration from {type(source).__name__}")


class ConfigResolver:
    """
    Stateful resolver holding the stored baseline.

    Successive calls are cumulative: each resolution starts from the
    baseline left by the previous one, not from the defaults.

    Usage:
        resolver = ConfigResolver({"driver": "OpenSSL", "key": b""}, persisted)
        config = resolver.resolve({"key": b"..."})
        config = resolver.resolve("Sodium")
    """

    __slots__ = ("_defaults", "_baseline")

    def __init__(self, defaults: Mapping[str, Any], persisted: Override = None) -> None:
        self._defaults = dict(defaults)
        self._baseline = self._merge(self._defaults, as_mapping(persisted))

    @property
    def defaults(self) -> dict[str, Any]:
        return dict(self._defaults)

    @property
    def baseline(self) -> dict[str, Any]:
        """Copy of the stored baseline mapping."""
        return dict(self._baseline)

    def _merge(self, base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
        merged = {**self._defaults, **base, **override}
        # Whitelist: only keys the defaults know about
        return {k: v for k, v in merged.items() if k in self._defaults}

    def preview(self, override: Override = None) -> dict[str, Any]:
        """Resolve without committing the result to the baseline."""
        return self._merge(self._baseline, as_mapping(override))

    def commit(self, resolved: Mapping[str, Any]) -> EffectiveConfig:
        """Store a resolved mapping as the new baseline."""
        self._baseline = self._merge(self._baseline, resolved)
        return self.effective

    def resolve(self, override: Override = None) -> EffectiveConfig:
        """
        Resolve and remember.

        Args:
            override: None/empty (reuse baseline), a driver name, or a
                structured object of overrides

        Returns:
            EffectiveConfig projected from the new baseline
        """
        return self.commit(self.preview(override))

    @property
    def effective(self) -> EffectiveConfig:
        return EffectiveConfig(
            driver=self._baseline.get("driver"),
            key=self._baseline.get("key") or b"",
        )


def resolve(
    defaults: Mapping[str, Any],
    persisted: Override = None,
    override: Override = None,
) -> EffectiveConfig:
    """Stateless form: one resolution over a fresh baseline."""
    return ConfigResolver(defaults, persisted).resolve(override)
