"""
Shared fixtures for the CipherHub test suite.
"""

import pytest

from cipherhub.core.config import CipherConfig, EncryptionConfig
from cipherhub.core.crypto.drivers import DriverId, DriverRegistry
from cipherhub.core.crypto.handlers import HandlerFactory


class RecordingHandler:
    """Stand-in backend that remembers the parameters it was built with."""

    def __init__(self, params):
        self.params = params

    def encrypt(self, plaintext, nonce=None):
        return plaintext

    def decrypt(self, ciphertext, nonce=None):
        return ciphertext


def make_registry(openssl=True, sodium=True):
    return DriverRegistry({
        DriverId.OPENSSL: lambda: openssl,
        DriverId.SODIUM: lambda: sodium,
    })


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host CIPHERHUB_* variables and the config singleton out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("CIPHERHUB_"):
            monkeypatch.delenv(name)
    CipherConfig.reset_instance()
    yield
    CipherConfig.reset_instance()


@pytest.fixture
def registry():
    return make_registry()


@pytest.fixture
def openssl_only_registry():
    return make_registry(sodium=False)


@pytest.fixture
def recording_factory():
    factory = HandlerFactory()
    factory.register(DriverId.OPENSSL, RecordingHandler)
    factory.register(DriverId.SODIUM, RecordingHandler)
    return factory


@pytest.fixture
def persisted():
    return EncryptionConfig()
