# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

from typing import Callable

from signedkeys.protocol.errors import EntropyError


class RandomSource:
    name: str

    def generate(self, length: int) -> bytes:
        raise NotImplementedError


class CallableRandomSource(RandomSource):
    """
    Adapts a plain function ``fn(length) -> bytes``.
    The function's own exceptions are wrapped as EntropyError.
    """

    def __init__(self, fn: Callable[[int], bytes], name: str = "callable") -> None:
        if not callable(fn):
            raise TypeError("random source must be callable")
        self.name = name
        self._fn = fn

    def generate(self, length: int) -> bytes:
        try:
            out = self._fn(length)
        except EntropyError:
            raise
        except Exception as e:
            raise EntropyError(f"random source {self.name!r} failed") from e
        return out


def as_random_source(source: RandomSource | Callable[[int], bytes]) -> RandomSource:
    if isinstance(source, RandomSource):
        return source
    if callable(source):
        return CallableRandomSource(source)
    raise TypeError(f"not a random source: {type(source).__name__}")
