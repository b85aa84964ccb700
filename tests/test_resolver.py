"""
Tests for layered configuration resolution.
"""

from dataclasses import dataclass

import pytest

from cipherhub.core.config import EncryptionConfig
from cipherhub.core.crypto.resolver import ConfigResolver, EffectiveConfig, as_mapping, resolve

DEFAULTS = {"driver": "OpenSSL", "key": ""}


class TestMergePrecedence:
    def test_defaults_persisted_override(self):
        config = resolve(DEFAULTS, {"driver": "Sodium"}, {"key": "abc"})
        assert config.to_dict() == {"driver": "Sodium", "key": "abc"}

    def test_override_beats_persisted(self):
        config = resolve(DEFAULTS, {"driver": "Sodium"}, {"driver": "OpenSSL"})
        assert config.driver == "OpenSSL"

    def test_defaults_only(self):
        assert resolve(DEFAULTS).to_dict() == {"driver": "OpenSSL", "key": b""}


class TestUnknownKeys:
    def test_override_extra_key_dropped(self):
        resolver = ConfigResolver(DEFAULTS)
        resolver.resolve({"driver": "OpenSSL", "extra": "x"})
        assert "extra" not in resolver.baseline

    def test_persisted_extra_key_dropped(self):
        resolver = ConfigResolver(DEFAULTS, {"driver": "Sodium", "cipher": "AES-256-CTR"})
        assert set(resolver.baseline) == {"driver", "key"}


class TestOverrideShapes:
    def test_string_is_driver_shorthand(self):
        assert resolve(DEFAULTS, None, "Sodium").driver == "Sodium"

    def test_dataclass_is_flattened(self):
        config = resolve(DEFAULTS, EncryptionConfig(driver="Sodium", key=b"k"))
        assert config.to_dict() == {"driver": "Sodium", "key": b"k"}

    def test_plain_object_is_flattened(self):
        class Legacy:
            def __init__(self):
                self.driver = "Sodium"
                self._private = "ignored"

        assert as_mapping(Legacy()) == {"driver": "Sodium"}

    def test_custom_dataclass(self):
        @dataclass
        class Override:
            key: str

        assert resolve(DEFAULTS, None, Override(key="abc")).key == "abc"

    def test_unreadable_source(self):
        with pytest.raises(TypeError):
            as_mapping(42)


class TestCumulativeBaseline:
    def test_empty_override_reuses_baseline(self):
        resolver = ConfigResolver(DEFAULTS)
        resolver.resolve({"driver": "Sodium", "key": "abc"})
        assert resolver.resolve().to_dict() == {"driver": "Sodium", "key": "abc"}
        assert resolver.resolve({}).to_dict() == {"driver": "Sodium", "key": "abc"}

    def test_empty_string_reuses_baseline(self):
        resolver = ConfigResolver(DEFAULTS)
        resolver.resolve("Sodium")
        assert resolver.resolve("").driver == "Sodium"

    def test_successive_overrides_accumulate(self):
        resolver = ConfigResolver(DEFAULTS)
        resolver.resolve({"key": "abc"})
        assert resolver.resolve("Sodium").to_dict() == {"driver": "Sodium", "key": "abc"}

    def test_preview_does_not_commit(self):
        resolver = ConfigResolver(DEFAULTS)
        resolver.preview({"driver": "Sodium"})
        assert resolver.baseline["driver"] == "OpenSSL"

    def test_unknown_driver_is_not_validated(self):
        assert resolve(DEFAULTS, None, "Foo").driver == "Foo"


class TestEffectiveConfig:
    def test_missing_key_projects_to_empty_bytes(self):
        assert ConfigResolver({"driver": None, "key": None}).effective.key == b""

    def test_repr_hides_key(self):
        assert "topsecret" not in repr(EffectiveConfig(driver="OpenSSL", key="topsecret"))
