# MIT License © 2025 Motohiro Suzuki
"""signedkeys: random keys, optionally signed and text-encoded, verifiable offline.

    from signedkeys import Generator, HmacSigner, HmacVerifier, with_signature, with_encoding

    gen = Generator(
        with_signature(HmacSigner("sha256", secret, 12), HmacVerifier("sha256", secret, 12)),
        with_encoding("hex"),
    )
    key = gen.generate_key()
    assert gen.verify_signature(key)

Key layout before encoding: random (key_length bytes) || signature.
"""

from signedkeys.crypto.codecs import (
    Base64Codec, CallableCodec, Codec, HexCodec, IdentityCodec, get_codec,
)
from signedkeys.crypto.sig_backends import (
    Ed25519Signer, Ed25519Verifier, HmacSigner, HmacVerifier,
    NoopSigner, NoopVerifier, SigKeyPair, Signer, Verifier,
    ed25519_keypair, get_signature_strategy,
)
from signedkeys.keysources.base import CallableRandomSource, RandomSource
from signedkeys.keysources.secure import SecureRandomSource, get_random_source
from signedkeys.protocol.config import (
    DEFAULT_KEY_LENGTH, GeneratorConfig,
    config_from_dict, config_from_env, load_config,
    with_encoding, with_key_length, with_rand, with_signature, with_signer, with_verifier,
)
from signedkeys.protocol.errors import (
    ConfigurationError, DecodeError, EntropyError, SignedKeysError, SigningError,
)
from signedkeys.protocol.generator import Generator
from signedkeys.protocol.result import Verification, VerifyCode

__version__ = "0.1.0"

__all__ = [
    # Core
    "Generator", "GeneratorConfig", "DEFAULT_KEY_LENGTH",
    "Verification", "VerifyCode",
    # Options / config
    "with_key_length", "with_rand", "with_encoding",
    "with_signer", "with_verifier", "with_signature",
    "config_from_dict", "config_from_env", "load_config",
    # Signature strategies
    "Signer", "Verifier", "NoopSigner", "NoopVerifier",
    "HmacSigner", "HmacVerifier", "Ed25519Signer", "Ed25519Verifier",
    "SigKeyPair", "ed25519_keypair", "get_signature_strategy",
    # Codecs
    "Codec", "IdentityCodec", "HexCodec", "Base64Codec", "CallableCodec", "get_codec",
    # Random sources
    "RandomSource", "SecureRandomSource", "CallableRandomSource", "get_random_source",
    # Errors
    "SignedKeysError", "ConfigurationError", "EntropyError", "SigningError", "DecodeError",
]
