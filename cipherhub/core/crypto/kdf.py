"""
Key Derivation Functions
========================

HKDF (RFC 5869) extract-and-expand over a keyed hash, plus helpers for
minting and decoding key material.

Compatibility Note:
    When no salt is given, the extract step keys HMAC with a zero block
    of ``length`` bytes rather than the digest size. For lengths up to
    the digest's block size this is indistinguishable from RFC 5869
    (HMAC zero-pads short keys); beyond it the output differs. Existing
    secrets depend on this, so it must not be "fixed".
"""

from __future__ import annotations

import base64
import binascii
import secrets
from typing import Final, Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

DEFAULT_DIGEST: Final[str] = "SHA512"
DEFAULT_KEY_LENGTH: Final[int] = 32
DEFAULT_OUTPUT_LENGTH: Final[int] = 64

# HKDF can expand to at most 255 blocks
MAX_BLOCKS: Final[int] = 255

_DIGESTS: Final[dict[str, type[hashes.HashAlgorithm]]] = {
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3224": hashes.SHA3_224,
    "sha3256": hashes.SHA3_256,
    "sha3384": hashes.SHA3_384,
    "sha3512": hashes.SHA3_512,
}

BytesLike = Union[bytes, bytearray, memoryview, str]
DigestLike = Union[str, hashes.HashAlgorithm]


def _to_bytes(value: Optional[BytesLike]) -> bytes:
    """Byte view of the input; text is UTF-8 encoded so lengths count bytes."""
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Expected bytes or str, got {type(value).__name__}")


def resolve_digest(digest: DigestLike) -> hashes.HashAlgorithm:
    """
    Resolve a digest name or algorithm instance.

    Names are matched case-insensitively with dashes and underscores
    ignored, so ``"SHA512"``, ``"sha-512"`` and ``"sha_512"`` agree.

    Raises:
        ValueError: If the name is not a supported SHA-2/SHA-3 digest
    """
    if isinstance(digest, hashes.HashAlgorithm):
        return digest

    normalized = str(digest).lower().replace("-", "").replace("_", "")
    try:
        return _DIGESTS[normalized]()
    except KeyError:
        raise ValueError(f"Unsupported digest: {digest}") from None


def hkdf(
    ikm: BytesLike,
    digest: DigestLike = DEFAULT_DIGEST,
    salt: Optional[BytesLike] = None,
    length: int = DEFAULT_OUTPUT_LENGTH,
    info: Optional[BytesLike] = b"",
) -> bytes:
    """
    Derive ``length`` bytes from input key material.

    Args:
        ikm: Input key material
        digest: Hash algorithm name or instance
        salt: Optional salt; absent or empty means ``length`` zero bytes
        length: Output length in bytes
        info: Optional context/application-specific info

    Returns:
        Exactly ``length`` pseudo-random bytes. Deterministic.

    Raises:
        ValueError: If length is not positive, exceeds 255 digest blocks,
            or the digest is unsupported
        TypeError: If ikm, salt or info is neither bytes nor str
    """
    algorithm = resolve_digest(digest)

    if length <= 0:
        raise ValueError("Output length must be positive")
    if length > MAX_BLOCKS * algorithm.digest_size:
        raise ValueError(
            f"Output length must be at most {MAX_BLOCKS * algorithm.digest_size} bytes "
            f"for {algorithm.name}"
        )

    salt_bytes = _to_bytes(salt) or b"\x00" * length

    kdf = HKDF(
        algorithm=algorithm,
        length=length,
        salt=salt_bytes,
        info=_to_bytes(info),
    )
    return kdf.derive(_to_bytes(ikm))


def create_key(length: int = DEFAULT_KEY_LENGTH) -> bytes:
    """
    Create fresh random key material.

    Args:
        length: Number of bytes

    Returns:
        ``length`` bytes from the OS CSPRNG
    """
    if length <= 0:
        raise ValueError("Key length must be positive")
    return secrets.token_bytes(length)


def decode_key_material(text: str) -> bytes:
    """
    Decode persisted key material.

    Supports ``hex2bin:<hex>`` and ``base64:<data>`` prefixes; any other
    string is taken literally and UTF-8 encoded.

    Raises:
        ValueError: If a prefixed value is not valid hex/base64
    """
    if text.startswith("hex2bin:"):
        try:
            return bytes.fromhex(text[len("hex2bin:"):])
        except ValueError as e:
            raise ValueError("Invalid hex key material") from e

    if text.startswith("base64:"):
        try:
            return base64.b64decode(text[len("base64:"):], validate=True)
        except binascii.Error as e:
            raise ValueError("Invalid base64 key material") from e

    return text.encode("utf-8")
