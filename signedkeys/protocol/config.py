# MIT License © 2025 Motohiro Suzuki
"""
protocol/config.py

Immutable generator configuration.

Two ways to build one:
  (A) option functions, applied in order (later options win):
        GeneratorConfig.build(with_key_length(24), with_encoding("hex"))
  (B) plain mapping / YAML file / environment:
        load_config("signedkeys.yml")

Invalid parameters raise ConfigurationError at build time, never at first use.

Environment overrides:
  SIGNEDKEYS_KEY_LENGTH       = int
  SIGNEDKEYS_ENCODING         = identity | hex | base64
  SIGNEDKEYS_HMAC_SECRET_B64  = base64(secret)      -> hmac strategy
  SIGNEDKEYS_ED25519_SK_B64   = base64(32-byte seed) -> ed25519 strategy
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field, fields
import os
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

from signedkeys.crypto.codecs import CallableCodec, Codec, IdentityCodec, get_codec
from signedkeys.crypto.sig_backends import (
    NoopSigner,
    Signer,
    Verifier,
    as_signer,
    as_verifier,
    get_signature_strategy,
)
from signedkeys.keysources.base import RandomSource, as_random_source
from signedkeys.keysources.secure import SecureRandomSource, get_random_source
from signedkeys.protocol.errors import ConfigurationError

DEFAULT_KEY_LENGTH = 16

ENV_KEY_LENGTH = "SIGNEDKEYS_KEY_LENGTH"
ENV_ENCODING = "SIGNEDKEYS_ENCODING"
ENV_HMAC_SECRET_B64 = "SIGNEDKEYS_HMAC_SECRET_B64"
ENV_ED25519_SK_B64 = "SIGNEDKEYS_ED25519_SK_B64"

Option = Callable[[Dict[str, Any]], None]


def _check_key_length(key_length: Any) -> int:
    if isinstance(key_length, bool) or not isinstance(key_length, int):
        raise ConfigurationError(f"key length must be an int, got {type(key_length).__name__}")
    if key_length <= 0:
        raise ConfigurationError("key length must be greater than zero")
    return key_length


@dataclass(frozen=True)
class GeneratorConfig:
    key_length: int = DEFAULT_KEY_LENGTH
    rand: RandomSource = field(default_factory=SecureRandomSource)
    signer: Signer = field(default_factory=NoopSigner)
    # None means "no verifier configured": verification fails closed.
    verifier: Optional[Verifier] = None
    codec: Codec = field(default_factory=IdentityCodec)

    def __post_init__(self) -> None:
        _check_key_length(self.key_length)
        try:
            object.__setattr__(self, "rand", as_random_source(self.rand))
        except TypeError as e:
            raise ConfigurationError(str(e)) from e
        object.__setattr__(self, "signer", as_signer(self.signer))
        if self.verifier is not None:
            object.__setattr__(self, "verifier", as_verifier(self.verifier))
        if not isinstance(self.codec, Codec):
            raise ConfigurationError(f"not a codec: {type(self.codec).__name__}")

    @classmethod
    def build(cls, *options: Option, base: "GeneratorConfig | None" = None) -> "GeneratorConfig":
        draft: Dict[str, Any] = {}
        if base is not None:
            draft = {f.name: getattr(base, f.name) for f in fields(cls)}
        for o in options:
            o(draft)
        return cls(**draft)


# -------------------------
# Options
# -------------------------

def with_key_length(key_length: int) -> Option:
    """Byte length of the random part. Rejected here if <= 0."""
    n = _check_key_length(key_length)

    def apply(draft: Dict[str, Any]) -> None:
        draft["key_length"] = n

    return apply


def with_rand(rand: RandomSource | Callable[[int], bytes]) -> Option:
    def apply(draft: Dict[str, Any]) -> None:
        draft["rand"] = rand

    return apply


def with_encoding(
    codec: Codec | str | Callable[[bytes], bytes],
    decoder: Callable[[bytes], bytes] | None = None,
) -> Option:
    """
    Accepts a Codec, a codec name ("hex"), or an (encoder, decoder) pair
    of plain functions.
    """
    if decoder is not None:
        resolved: Codec = CallableCodec(codec, decoder)  # type: ignore[arg-type]
    elif isinstance(codec, str):
        resolved = get_codec(codec)
    elif isinstance(codec, Codec):
        resolved = codec
    else:
        raise ConfigurationError(f"not a codec: {type(codec).__name__}")

    def apply(draft: Dict[str, Any]) -> None:
        draft["codec"] = resolved

    return apply


def with_signer(signer: Signer | Callable[[bytes], bytes]) -> Option:
    s = as_signer(signer)

    def apply(draft: Dict[str, Any]) -> None:
        draft["signer"] = s

    return apply


def with_verifier(verifier: Verifier | Callable[[bytes, bytes], bool]) -> Option:
    v = as_verifier(verifier)

    def apply(draft: Dict[str, Any]) -> None:
        draft["verifier"] = v

    return apply


def with_signature(signer: Signer, verifier: Verifier) -> Option:
    s = as_signer(signer)
    v = as_verifier(verifier)

    def apply(draft: Dict[str, Any]) -> None:
        draft["signer"] = s
        draft["verifier"] = v

    return apply


# -------------------------
# Mapping / YAML / env
# -------------------------

_TOP_LEVEL_KEYS = {"key_length", "encoding", "random_source", "signature"}


def _b64(value: Any, what: str) -> bytes:
    if not isinstance(value, str) or not value.strip():
        raise ConfigurationError(f"{what} must be a non-empty base64 string")
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(f"{what} is not valid base64") from e


def _strategy_from_mapping(sig: Mapping[str, Any]) -> tuple[Signer, Verifier]:
    if not isinstance(sig, Mapping):
        raise ConfigurationError("signature must be a mapping")

    alg = sig.get("alg")
    if not isinstance(alg, str):
        raise ConfigurationError("signature.alg is required")
    n = alg.strip().lower()

    if n == "hmac":
        if "secret_b64" in sig:
            secret: bytes | None = _b64(sig["secret_b64"], "signature.secret_b64")
        elif isinstance(sig.get("secret"), str):
            secret = sig["secret"].encode("utf-8")
        else:
            secret = None
        prefix_length = sig.get("prefix_length", -1)
        if isinstance(prefix_length, bool) or not isinstance(prefix_length, int):
            raise ConfigurationError("signature.prefix_length must be an int")
        return get_signature_strategy(
            "hmac",
            hash=sig.get("hash", "sha256"),
            secret=secret,
            prefix_length=prefix_length,
        )

    if n == "ed25519":
        private_key = None
        public_key = None
        if sig.get("private_key_b64") is not None:
            private_key = _b64(sig["private_key_b64"], "signature.private_key_b64")
        if sig.get("public_key_b64") is not None:
            public_key = _b64(sig["public_key_b64"], "signature.public_key_b64")
        return get_signature_strategy("ed25519", private_key=private_key, public_key=public_key)

    return get_signature_strategy(n)


def config_from_dict(data: Mapping[str, Any] | None) -> GeneratorConfig:
    data = dict(data or {})
    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise ConfigurationError(f"unknown config keys: {', '.join(sorted(unknown))}")

    options: list[Option] = []
    if "key_length" in data:
        options.append(with_key_length(data["key_length"]))
    if "encoding" in data:
        if not isinstance(data["encoding"], str):
            raise ConfigurationError("encoding must be a string")
        options.append(with_encoding(data["encoding"]))
    if "random_source" in data:
        if not isinstance(data["random_source"], str):
            raise ConfigurationError("random_source must be a string")
        options.append(with_rand(get_random_source(data["random_source"])))
    if data.get("signature") is not None:
        signer, verifier = _strategy_from_mapping(data["signature"])
        options.append(with_signature(signer, verifier))

    return GeneratorConfig.build(*options)


def _apply_env(data: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    out = dict(data)

    v = environ.get(ENV_KEY_LENGTH, "").strip()
    if v:
        try:
            out["key_length"] = int(v)
        except ValueError as e:
            raise ConfigurationError(f"{ENV_KEY_LENGTH} is not an integer") from e

    v = environ.get(ENV_ENCODING, "").strip()
    if v:
        out["encoding"] = v

    hmac_secret = environ.get(ENV_HMAC_SECRET_B64, "").strip()
    ed_seed = environ.get(ENV_ED25519_SK_B64, "").strip()
    if hmac_secret and ed_seed:
        raise ConfigurationError(f"{ENV_HMAC_SECRET_B64} and {ENV_ED25519_SK_B64} are mutually exclusive")

    sig = dict(out.get("signature") or {})
    if hmac_secret:
        if str(sig.get("alg", "hmac")).lower() != "hmac":
            sig = {}
        sig.pop("secret", None)
        sig.update(alg="hmac", secret_b64=hmac_secret)
        out["signature"] = sig
    elif ed_seed:
        if len(_b64(ed_seed, ENV_ED25519_SK_B64)) != 32:
            raise ConfigurationError(f"{ENV_ED25519_SK_B64} must decode to 32 bytes")
        out["signature"] = {"alg": "ed25519", "private_key_b64": ed_seed}

    return out


def config_from_env(environ: Mapping[str, str] | None = None) -> GeneratorConfig:
    env = os.environ if environ is None else environ
    return config_from_dict(_apply_env({}, env))


def load_config(path: str | Path, environ: Mapping[str, str] | None = None) -> GeneratorConfig:
    """
    YAML config file, then environment overrides on top.
    Pass environ={} to ignore the process environment.
    """
    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"config file not found: {p}")
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"cannot read config file {p}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {p}") from e
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"{p}: top level must be a mapping")

    env = os.environ if environ is None else environ
    return config_from_dict(_apply_env(data or {}, env))
