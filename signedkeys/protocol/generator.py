# MIT License © 2025 Motohiro Suzuki
"""
protocol/generator.py

Key assembly / disassembly.

Generate:
    random = rand(key_length)
    sig    = signer(random)
    key    = encode(random || sig)

Verify:
    raw           = decode(key)
    random, sig   = raw[:key_length], raw[key_length:]
    valid         = verifier(random, sig)

Rules:
- Generation failures propagate (EntropyError / SigningError).
- Verification never raises: every failure mode is "not valid".
- No verifier configured -> not valid (fail-closed).
- Generator holds no mutable state; one instance may be shared across threads.
"""

from __future__ import annotations

import logging
from typing import Any

from signedkeys.protocol.config import GeneratorConfig, Option
from signedkeys.protocol.errors import DecodeError, EntropyError, SigningError
from signedkeys.protocol.result import Verification, VerifyCode

logger = logging.getLogger(__name__)


class Generator:
    """
    Generates random keys, optionally signed and text-encoded, and verifies
    the signature embedded in such keys.

    With no options: 16 random bytes from the OS CSPRNG, no signature,
    no encoding, and no verifier.
    """

    __slots__ = ("_config",)

    def __init__(self, *options: Option, config: GeneratorConfig | None = None) -> None:
        if options or config is None:
            config = GeneratorConfig.build(*options, base=config)
        self._config = config

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def key_length(self) -> int:
        return self._config.key_length

    def split(self, raw: bytes) -> tuple[bytes, bytes]:
        """Split a decoded key into (random part, signature part)."""
        n = self.key_length
        if len(raw) < n:
            raise DecodeError(f"decoded key shorter than key length ({len(raw)} < {n})")
        return raw[:n], raw[n:]

    def generate_key(self) -> bytes:
        cfg = self._config

        try:
            random_part = cfg.rand.generate(cfg.key_length)
        except EntropyError:
            raise
        except Exception as e:
            raise EntropyError(f"random source {getattr(cfg.rand, 'name', '?')!r} failed") from e
        if not isinstance(random_part, (bytes, bytearray)):
            raise EntropyError(f"random source returned {type(random_part).__name__}, expected bytes")
        if len(random_part) != cfg.key_length:
            raise EntropyError(
                f"random source returned {len(random_part)} bytes, expected {cfg.key_length}"
            )
        random_part = bytes(random_part)

        try:
            signature = cfg.signer.sign(random_part)
        except SigningError:
            raise
        except Exception as e:
            raise SigningError(f"signer {getattr(cfg.signer, 'name', '?')!r} failed") from e
        if not isinstance(signature, (bytes, bytearray)):
            raise SigningError(f"signer returned {type(signature).__name__}, expected bytes")

        key = cfg.codec.encode(random_part + bytes(signature))
        logger.debug(
            "generated key: random=%d sig=%d encoded=%d codec=%s",
            len(random_part), len(signature), len(key), cfg.codec.name,
        )
        return key

    def inspect(self, key: Any) -> Verification:
        """Verify *key* and report why it was rejected, if it was."""
        cfg = self._config

        if isinstance(key, str):
            try:
                key = key.encode("ascii")
            except UnicodeEncodeError:
                return self._reject(VerifyCode.BAD_INPUT, "non-ascii text key")
        if not isinstance(key, (bytes, bytearray, memoryview)):
            return self._reject(VerifyCode.BAD_INPUT, f"unsupported key type {type(key).__name__}")

        try:
            raw = cfg.codec.decode(bytes(key))
        except DecodeError as e:
            return self._reject(VerifyCode.DECODE_FAILED, str(e))
        except Exception as e:
            return self._reject(VerifyCode.DECODE_FAILED, f"{type(e).__name__} in codec")
        if not isinstance(raw, (bytes, bytearray)):
            return self._reject(VerifyCode.DECODE_FAILED, f"codec returned {type(raw).__name__}")

        try:
            random_part, signature = self.split(raw)
        except DecodeError as e:
            return self._reject(VerifyCode.TOO_SHORT, str(e))

        if cfg.verifier is None:
            logger.warning("verify_signature called without a configured verifier; rejecting key")
            return self._reject(VerifyCode.NO_VERIFIER, "no verifier configured")

        try:
            ok = cfg.verifier.verify(random_part, signature)
        except Exception as e:
            return self._reject(VerifyCode.VERIFIER_ERROR, f"{type(e).__name__} in verifier")

        if not ok:
            return self._reject(VerifyCode.BAD_SIGNATURE, None)
        return Verification.ok()

    def verify_signature(self, key: Any) -> bool:
        """True if the signature embedded in *key* is valid. Never raises."""
        return self.inspect(key).valid

    @staticmethod
    def _reject(code: VerifyCode, detail: str | None) -> Verification:
        logger.debug("key rejected: %s", code.value)
        return Verification.fail(code, detail)
