# MIT License © 2025 Motohiro Suzuki
"""
crypto/codecs.py

Text codecs for finished keys.
- encode() is total; decode() raises DecodeError on malformed input.
- All codecs satisfy decode(encode(b)) == b.
"""

from __future__ import annotations

import base64
import binascii
from typing import Callable

from signedkeys.protocol.errors import ConfigurationError, DecodeError

_HEX_DIGITS = b"0123456789abcdef"


# =========================
# Base
# =========================

class Codec:
    name: str

    def encode(self, src: bytes) -> bytes:
        raise NotImplementedError

    def decode(self, src: bytes) -> bytes:
        raise NotImplementedError


# =========================
# Identity
# =========================

class IdentityCodec(Codec):
    """Returns the raw key bytes unchanged."""

    name = "identity"

    def encode(self, src: bytes) -> bytes:
        return bytes(src)

    def decode(self, src: bytes) -> bytes:
        return bytes(src)


# =========================
# Hex
# =========================

class HexCodec(Codec):
    """
    Lowercase hex, both ways. Uppercase digits, odd length and any other
    character (whitespace included) are rejected, so every byte string
    has exactly one accepted encoding.
    """

    name = "hex"

    def encode(self, src: bytes) -> bytes:
        return binascii.hexlify(src)

    def decode(self, src: bytes) -> bytes:
        try:
            src = bytes(src)
        except TypeError as e:
            raise DecodeError("hex input must be bytes") from e
        if src.translate(None, _HEX_DIGITS):
            raise DecodeError("invalid hex input: non-lowercase-hex character")
        try:
            return binascii.unhexlify(src)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"invalid hex input: {e}") from e


# =========================
# Base64
# =========================

class Base64Codec(Codec):
    """
    Standard alphabet, with padding. Only the canonical encoding is
    accepted: unused trailing bits before the padding must be zero.
    """

    name = "base64"

    def encode(self, src: bytes) -> bytes:
        return base64.b64encode(src)

    def decode(self, src: bytes) -> bytes:
        try:
            src = bytes(src)
            out = base64.b64decode(src, validate=True)
        except (binascii.Error, TypeError, ValueError) as e:
            raise DecodeError(f"invalid base64 input: {e}") from e
        if base64.b64encode(out) != src:
            raise DecodeError("invalid base64 input: non-canonical encoding")
        return out


# =========================
# Callable pair
# =========================

class CallableCodec(Codec):
    """
    Adapts an (encoder, decoder) function pair.
    Any exception from the decoder surfaces as DecodeError.
    """

    def __init__(
        self,
        encoder: Callable[[bytes], bytes],
        decoder: Callable[[bytes], bytes],
        name: str = "callable",
    ) -> None:
        if not callable(encoder) or not callable(decoder):
            raise ConfigurationError("encoder and decoder must be callable")
        self.name = name
        self._encoder = encoder
        self._decoder = decoder

    def encode(self, src: bytes) -> bytes:
        return self._encoder(src)

    def decode(self, src: bytes) -> bytes:
        try:
            return self._decoder(src)
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(f"{self.name} decoder failed") from e


# =========================
# Resolver
# =========================

def get_codec(name: str) -> Codec:
    n = name.strip().lower()

    if n in ("identity", "noop", "raw", "none"):
        return IdentityCodec()

    if n in ("hex", "base16"):
        return HexCodec()

    if n in ("base64", "b64"):
        return Base64Codec()

    raise ConfigurationError(f"unknown encoding: {name}")
