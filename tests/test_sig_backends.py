# MIT License © 2025 Motohiro Suzuki
import hashlib

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from signedkeys.crypto.sig_backends import (
    Ed25519Signer,
    Ed25519Verifier,
    HmacSigner,
    HmacVerifier,
    NoopSigner,
    NoopVerifier,
    ed25519_keypair,
    get_signature_strategy,
)
from signedkeys.protocol.errors import ConfigurationError, SigningError

DATA = b"testkeylength_16"
SECRET = b"test_signing_key"
HMAC_SHA256_HEX = "42876f7915ca22838f7718a18c072652a15d42f783afd2a46553c6d7e58a73fa"

ED_PK = bytes.fromhex("74b31ae07c26fd23d7008cbb38264c9e43e6325573c260f2331adca4eccba55f")
ED_SEED = bytes.fromhex("c1ec13413449e3a715694433da83247e895d5cdecab8d787be4c9d3a2fa50c1d")
ED_SIG_HEX = (
    "59d676a27dfa5496097f0476f7646946f6dde9a03fcb5c94c19b66913587b02a"
    "0f898eb92ffe1707dad5597ded66e6d1877b8d11b1fb34f15dfb656ffdc7c808"
)


def test_noop():
    assert NoopSigner().sign(DATA) == b""
    assert NoopVerifier().verify(DATA, b"anything") is True
    assert NoopVerifier().verify(b"", b"") is True


def test_hmac_sha256_vector():
    assert HmacSigner("sha256", SECRET, -1).sign(DATA).hex() == HMAC_SHA256_HEX


def test_hmac_truncation():
    sig = HmacSigner("sha256", SECRET, 12).sign(DATA)
    assert sig.hex() == HMAC_SHA256_HEX[:24]
    assert HmacVerifier("sha256", SECRET, 12).verify(DATA, sig)


def test_hmac_prefix_not_below_digest_size_keeps_full_digest():
    for prefix in (0, -1, None, 32, 64):
        assert len(HmacSigner("sha256", SECRET, prefix).sign(DATA)) == 32


def test_hmac_truncation_must_match():
    sig = HmacSigner("sha256", SECRET, 12).sign(DATA)
    assert not HmacVerifier("sha256", SECRET, 10).verify(DATA, sig)
    assert not HmacVerifier("sha256", SECRET, -1).verify(DATA, sig)
    assert not HmacVerifier("sha256", SECRET, 16).verify(DATA, sig)


def test_hmac_wrong_secret_or_data():
    sig = HmacSigner("sha256", SECRET).sign(DATA)
    assert not HmacVerifier("sha256", b"other", -1).verify(DATA, sig)
    assert not HmacVerifier("sha256", SECRET, -1).verify(b"testkeylength_17", sig)


def test_hmac_hash_name_and_constructor_agree():
    by_name = HmacSigner("sha1", SECRET).sign(DATA)
    by_ctor = HmacSigner(hashlib.sha1, SECRET).sign(DATA)
    assert by_name == by_ctor
    assert len(by_name) == 20
    assert HmacVerifier(hashlib.sha1, SECRET).verify(DATA, by_name)


def test_hmac_str_secret_is_utf8():
    assert HmacSigner("sha256", "test_signing_key").sign(DATA).hex() == HMAC_SHA256_HEX


def test_hmac_rejects_unknown_hash():
    with pytest.raises(ConfigurationError):
        HmacSigner("nope", SECRET)
    with pytest.raises(ConfigurationError):
        HmacVerifier(None, SECRET)


def test_ed25519_vector_from_expanded_key():
    signer = Ed25519Signer(ED_SEED + ED_PK)
    sig = signer.sign(DATA)
    assert sig.hex() == ED_SIG_HEX
    assert Ed25519Verifier(ED_PK).verify(DATA, sig)


def test_ed25519_seed_and_object_forms_agree():
    from_seed = Ed25519Signer(ED_SEED).sign(DATA)
    from_obj = Ed25519Signer(Ed25519PrivateKey.from_private_bytes(ED_SEED)).sign(DATA)
    assert from_seed == from_obj
    assert Ed25519Signer(ED_SEED).public_key_bytes() == ED_PK


def test_ed25519_rejects_tampering():
    sig = Ed25519Signer(ED_SEED).sign(DATA)
    v = Ed25519Verifier(ED_PK)
    assert not v.verify(b"testkeylength_17", sig)
    assert not v.verify(DATA, sig[:-1] + bytes([sig[-1] ^ 1]))
    assert not v.verify(DATA, sig[:32])
    assert not v.verify(DATA, b"")


def test_ed25519_rejects_bad_key_material():
    with pytest.raises(ConfigurationError):
        Ed25519Signer(b"\x01" * 10)
    with pytest.raises(ConfigurationError):
        Ed25519Signer(ED_SEED + b"\x00" * 32)
    with pytest.raises(ConfigurationError):
        Ed25519Verifier(ED_PK[:31])
    with pytest.raises(ConfigurationError):
        Ed25519Signer("not bytes")


def test_ed25519_keypair():
    kp = ed25519_keypair(ED_SEED)
    assert kp.public_key == ED_PK
    assert kp.secret_key == ED_SEED

    fresh = ed25519_keypair()
    assert len(fresh.public_key) == 32
    assert len(fresh.secret_key) == 32
    assert fresh.secret_key != ED_SEED
    sig = Ed25519Signer(fresh.secret_key).sign(DATA)
    assert Ed25519Verifier(fresh.public_key).verify(DATA, sig)


def test_get_signature_strategy():
    s, v = get_signature_strategy("NOOP")
    assert isinstance(s, NoopSigner) and isinstance(v, NoopVerifier)

    s, v = get_signature_strategy("hmac", hash="sha256", secret=SECRET, prefix_length=12)
    assert v.verify(DATA, s.sign(DATA))
    assert len(s.sign(DATA)) == 12

    s, v = get_signature_strategy("ed25519", private_key=ED_SEED)
    assert v.verify(DATA, s.sign(DATA))


def test_get_signature_strategy_verify_only():
    s, v = get_signature_strategy("ed25519", public_key=ED_PK)
    assert v.verify(DATA, bytes.fromhex(ED_SIG_HEX))
    with pytest.raises(SigningError):
        s.sign(DATA)


def test_get_signature_strategy_rejects_bad_params():
    with pytest.raises(ConfigurationError):
        get_signature_strategy("rsa")
    with pytest.raises(ConfigurationError):
        get_signature_strategy("hmac")
    with pytest.raises(ConfigurationError):
        get_signature_strategy("ed25519")


@pytest.mark.parametrize("bad", ["12", 1.5, True, b"\x0c"])
def test_hmac_rejects_non_int_prefix_length(bad):
    with pytest.raises(ConfigurationError):
        HmacSigner("sha256", SECRET, bad)
    with pytest.raises(ConfigurationError):
        HmacVerifier("sha256", SECRET, bad)
