# MIT License © 2025 Motohiro Suzuki
"""
crypto/sig_backends.py

Signature strategies for key signing:
- noop    : empty signature, always verifies
- hmac    : keyed hash over the random part, optional prefix truncation
- ed25519 : pure ed25519 via cryptography (message is not pre-hashed)

Signer and Verifier are separate objects so a service can hold only
the verifying half (ed25519 public key).
"""

from __future__ import annotations

from dataclasses import dataclass
import hmac
import os
from typing import Any, Callable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from signedkeys.protocol.errors import ConfigurationError, SigningError

ED25519_SEED_SIZE = 32
ED25519_PK_SIZE = 32
ED25519_SIG_SIZE = 64


@dataclass(frozen=True)
class SigKeyPair:
    public_key: bytes
    secret_key: bytes


class Signer:
    name: str

    def sign(self, data: bytes) -> bytes:
        raise NotImplementedError


class Verifier:
    name: str

    def verify(self, data: bytes, signature: bytes) -> bool:
        raise NotImplementedError


# =========================
# Noop
# =========================

class NoopSigner(Signer):
    name = "noop"

    def sign(self, data: bytes) -> bytes:
        return b""


class NoopVerifier(Verifier):
    """
    Accepts every key, whatever its content.
    Only meaningful for unsigned keys.
    """

    name = "noop"

    def verify(self, data: bytes, signature: bytes) -> bool:
        return True


# =========================
# HMAC
# =========================

def _resolve_digest(h: Any) -> tuple[Any, str, int]:
    """
    Accepts a hashlib name ("sha256") or constructor (hashlib.sha1).
    Returns (digestmod, name, digest_size).
    """
    digestmod = h.strip().lower() if isinstance(h, str) else h
    try:
        probe = hmac.new(b"", b"", digestmod)
    except (ValueError, TypeError, AttributeError) as e:
        raise ConfigurationError(f"unsupported hash function: {h!r}") from e
    return digestmod, probe.name.removeprefix("hmac-"), probe.digest_size


def _check_prefix_length(prefix_length: Any) -> int:
    if prefix_length is None:
        return -1
    if isinstance(prefix_length, bool) or not isinstance(prefix_length, int):
        raise ConfigurationError(f"prefix length must be an int, got {type(prefix_length).__name__}")
    return prefix_length


def _secret_bytes(secret: bytes | bytearray | str) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    if isinstance(secret, (bytes, bytearray, memoryview)):
        return bytes(secret)
    raise ConfigurationError("hmac secret must be bytes or str")


class _HmacBackend:
    def __init__(
        self,
        hash: Any,
        secret: bytes | bytearray | str,
        prefix_length: int | None = -1,
    ) -> None:
        self._digestmod, alg, self.digest_size = _resolve_digest(hash)
        self._secret = _secret_bytes(secret)
        self.prefix_length = _check_prefix_length(prefix_length)
        self.name = f"hmac-{alg}"

    @property
    def signature_size(self) -> int:
        if 0 < self.prefix_length < self.digest_size:
            return self.prefix_length
        return self.digest_size

    def _mac(self, data: bytes) -> bytes:
        res = hmac.new(self._secret, data, self._digestmod).digest()
        return res[: self.signature_size]


class HmacSigner(_HmacBackend, Signer):
    """
    prefix_length > 0 caps the signature at its first prefix_length bytes.
    Shorter keys, weaker signature. The same prefix_length must be given
    to HmacVerifier.
    """

    def sign(self, data: bytes) -> bytes:
        return self._mac(data)


class HmacVerifier(_HmacBackend, Verifier):
    def verify(self, data: bytes, signature: bytes) -> bool:
        return hmac.compare_digest(self._mac(data), bytes(signature))


# =========================
# Ed25519
# =========================

def _load_private_key(key: Any) -> Ed25519PrivateKey:
    """
    Accepts Ed25519PrivateKey, a 32-byte seed, or a 64-byte seed||public
    expanded key. The public half of an expanded key must match the seed.
    """
    if isinstance(key, Ed25519PrivateKey):
        return key
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise ConfigurationError("ed25519 private key must be bytes")

    raw = bytes(key)
    if len(raw) == ED25519_SEED_SIZE + ED25519_PK_SIZE:
        seed, pub = raw[:ED25519_SEED_SIZE], raw[ED25519_SEED_SIZE:]
        sk = Ed25519PrivateKey.from_private_bytes(seed)
        if not hmac.compare_digest(sk.public_key().public_bytes_raw(), pub):
            raise ConfigurationError("ed25519 expanded key: public half does not match seed")
        return sk
    if len(raw) == ED25519_SEED_SIZE:
        return Ed25519PrivateKey.from_private_bytes(raw)

    raise ConfigurationError(
        f"ed25519 private key must be {ED25519_SEED_SIZE} or "
        f"{ED25519_SEED_SIZE + ED25519_PK_SIZE} bytes, got {len(raw)}"
    )


def _load_public_key(key: Any) -> Ed25519PublicKey:
    if isinstance(key, Ed25519PublicKey):
        return key
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise ConfigurationError("ed25519 public key must be bytes")

    raw = bytes(key)
    if len(raw) != ED25519_PK_SIZE:
        raise ConfigurationError(f"ed25519 public key must be {ED25519_PK_SIZE} bytes, got {len(raw)}")
    try:
        return Ed25519PublicKey.from_public_bytes(raw)
    except ValueError as e:
        raise ConfigurationError("invalid ed25519 public key") from e


class Ed25519Signer(Signer):
    name = "ed25519"

    def __init__(self, private_key: Any) -> None:
        self._sk = _load_private_key(private_key)

    def public_key_bytes(self) -> bytes:
        return self._sk.public_key().public_bytes_raw()

    def sign(self, data: bytes) -> bytes:
        return self._sk.sign(data)


class Ed25519Verifier(Verifier):
    name = "ed25519"

    def __init__(self, public_key: Any) -> None:
        self._pk = _load_public_key(public_key)

    def verify(self, data: bytes, signature: bytes) -> bool:
        if len(signature) != ED25519_SIG_SIZE:
            return False
        try:
            self._pk.verify(bytes(signature), bytes(data))
            return True
        except InvalidSignature:
            return False


class _VerifyOnlySigner(Signer):
    """Placeholder for configurations that hold only a public key."""

    def __init__(self, name: str) -> None:
        self.name = name

    def sign(self, data: bytes) -> bytes:
        raise SigningError(f"{self.name}: no private key configured (verify-only)")


def ed25519_keypair(seed: bytes | None = None) -> SigKeyPair:
    """
    Fresh ed25519 key pair as raw bytes (32-byte seed, 32-byte public key).
    A given seed yields a deterministic pair.
    """
    if seed is None:
        seed = os.urandom(ED25519_SEED_SIZE)
    sk = _load_private_key(seed)
    return SigKeyPair(
        public_key=sk.public_key().public_bytes_raw(),
        secret_key=sk.private_bytes_raw(),
    )


# =========================
# Callable adapters
# =========================

class CallableSigner(Signer):
    def __init__(self, fn: Callable[[bytes], bytes], name: str = "callable") -> None:
        self.name = name
        self._fn = fn

    def sign(self, data: bytes) -> bytes:
        return self._fn(data)


class CallableVerifier(Verifier):
    def __init__(self, fn: Callable[[bytes, bytes], bool], name: str = "callable") -> None:
        self.name = name
        self._fn = fn

    def verify(self, data: bytes, signature: bytes) -> bool:
        return bool(self._fn(data, signature))


def as_signer(signer: Any) -> Signer:
    if isinstance(signer, Signer):
        return signer
    if callable(signer):
        return CallableSigner(signer)
    raise ConfigurationError(f"not a signer: {type(signer).__name__}")


def as_verifier(verifier: Any) -> Verifier:
    if isinstance(verifier, Verifier):
        return verifier
    if callable(verifier):
        return CallableVerifier(verifier)
    raise ConfigurationError(f"not a verifier: {type(verifier).__name__}")


# =========================
# Resolver
# =========================

def get_signature_strategy(name: str, **params: Any) -> tuple[Signer, Verifier]:
    """
    Factory returning a matching (signer, verifier) pair.

    hmac    : hash="sha256", secret=..., prefix_length=-1
    ed25519 : private_key=... and/or public_key=...
              (public key is derived from the private key when omitted;
              a public key alone gives a verify-only pair)
    """
    n = name.strip().lower()

    if n in ("noop", "none"):
        return NoopSigner(), NoopVerifier()

    if n == "hmac":
        if params.get("secret") is None:
            raise ConfigurationError("hmac strategy requires a secret")
        hash_ = params.get("hash", "sha256")
        secret = params["secret"]
        prefix_length = params.get("prefix_length", -1)
        return (
            HmacSigner(hash_, secret, prefix_length),
            HmacVerifier(hash_, secret, prefix_length),
        )

    if n == "ed25519":
        private_key = params.get("private_key")
        public_key = params.get("public_key")
        if private_key is None and public_key is None:
            raise ConfigurationError("ed25519 strategy requires private_key or public_key")

        if private_key is None:
            return _VerifyOnlySigner("ed25519"), Ed25519Verifier(public_key)

        signer = Ed25519Signer(private_key)
        if public_key is None:
            public_key = signer.public_key_bytes()
        return signer, Ed25519Verifier(public_key)

    raise ConfigurationError(f"unknown signature strategy: {name}")
