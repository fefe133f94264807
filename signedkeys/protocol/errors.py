# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations


class SignedKeysError(Exception):
    pass


class ConfigurationError(SignedKeysError, ValueError):
    """
    Invalid construction parameters.
    Raised immediately when the option/config is built, never at first use.
    """
    pass


class EntropyError(SignedKeysError):
    pass


class SigningError(SignedKeysError):
    pass


class DecodeError(SignedKeysError, ValueError):
    """
    Malformed encoded input.
    Generator.verify_signature absorbs this into False.
    """
    pass
