# MIT License © 2025 Motohiro Suzuki
"""
keysources/secure.py

Platform CSPRNG key source.
- os.urandom is the process-wide secure random capability; nothing is cached.
- Fail-closed: an unavailable entropy source raises EntropyError, never
  a short or predictable buffer.
"""

from __future__ import annotations

import os

from signedkeys.keysources.base import RandomSource
from signedkeys.protocol.errors import ConfigurationError, EntropyError


class SecureRandomSource(RandomSource):
    name = "secure"

    def generate(self, length: int) -> bytes:
        if length <= 0:
            raise EntropyError("length must be > 0")
        try:
            out = os.urandom(length)
        except (OSError, NotImplementedError) as e:
            raise EntropyError("system entropy source unavailable") from e
        if len(out) != length:
            raise EntropyError(f"short read from entropy source: {len(out)} < {length}")
        return out


def get_random_source(name: str) -> RandomSource:
    n = name.strip().lower()

    if n in ("secure", "os", "system", "urandom"):
        return SecureRandomSource()

    raise ConfigurationError(f"unknown random source: {name}")
