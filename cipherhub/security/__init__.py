"""
Security module - Startup self-tests for the cryptographic core.
"""

from cipherhub.security.self_test import (
    CheckResult,
    CryptoSelfTest,
    SecurityCheckResult,
)

__all__ = ["CheckResult", "CryptoSelfTest", "SecurityCheckResult"]
