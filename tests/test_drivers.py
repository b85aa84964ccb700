"""
Tests for the driver registry and availability probes.
"""

import pytest

from cipherhub.core.crypto.drivers import (
    DriverId,
    DriverRegistry,
    openssl_supported,
    sodium_supported,
)


class TestDriverId:
    def test_preference_order(self):
        assert [d.value for d in DriverId] == ["OpenSSL", "Sodium"]

    def test_str(self):
        assert str(DriverId.SODIUM) == "Sodium"


class TestLookup:
    @pytest.mark.parametrize("name, expected", [
        ("OpenSSL", DriverId.OPENSSL),
        ("Sodium", DriverId.SODIUM),
        (DriverId.SODIUM, DriverId.SODIUM),
    ])
    def test_known(self, name, expected):
        assert DriverRegistry().lookup(name) is expected

    @pytest.mark.parametrize("name", ["Foo", "openssl", "", 0, 1, None, b"OpenSSL"])
    def test_unknown_or_malformed(self, name):
        assert DriverRegistry().lookup(name) is None


class TestProbe:
    def test_covers_exactly_registered_drivers(self):
        availability = DriverRegistry().probe()
        assert set(availability) == set(DriverId)

    def test_default_probes(self):
        availability = DriverRegistry().probe()
        assert availability[DriverId.OPENSSL] is openssl_supported()
        assert availability[DriverId.SODIUM] is sodium_supported()

    def test_openssl_present_with_cryptography(self):
        assert openssl_supported() is True

    def test_custom_probe(self):
        registry = DriverRegistry({DriverId.SODIUM: lambda: False})
        assert registry.probe()[DriverId.SODIUM] is False

    def test_raising_probe_counts_as_unavailable(self):
        def broken():
            raise RuntimeError("probe exploded")

        registry = DriverRegistry({DriverId.OPENSSL: broken})
        assert registry.probe()[DriverId.OPENSSL] is False

    def test_result_is_read_only(self):
        availability = DriverRegistry().probe()
        with pytest.raises(TypeError):
            availability[DriverId.OPENSSL] = False

    def test_each_probe_runs_once(self):
        calls = []
        registry = DriverRegistry({DriverId.OPENSSL: lambda: calls.append(1) or True})
        registry.probe()
        assert calls == [1]
