# MIT License © 2025 Motohiro Suzuki
import pytest

from signedkeys.keysources.base import CallableRandomSource, as_random_source
from signedkeys.keysources.secure import SecureRandomSource, get_random_source
from signedkeys.protocol.errors import ConfigurationError, EntropyError


def test_secure_source_returns_requested_length():
    src = SecureRandomSource()
    for n in (1, 16, 33, 1024):
        assert len(src.generate(n)) == n
    assert src.generate(32) != src.generate(32)


def test_secure_source_rejects_non_positive_length():
    with pytest.raises(EntropyError):
        SecureRandomSource().generate(0)


def test_secure_source_wraps_os_failure(monkeypatch):
    def boom(n):
        raise OSError("no entropy")

    monkeypatch.setattr("signedkeys.keysources.secure.os.urandom", boom)
    with pytest.raises(EntropyError) as ei:
        SecureRandomSource().generate(16)
    assert isinstance(ei.value.__cause__, OSError)


def test_callable_source_wraps_errors():
    def flaky(n):
        raise RuntimeError("device gone")

    src = CallableRandomSource(flaky)
    with pytest.raises(EntropyError) as ei:
        src.generate(16)
    assert isinstance(ei.value.__cause__, RuntimeError)


def test_as_random_source():
    src = SecureRandomSource()
    assert as_random_source(src) is src
    wrapped = as_random_source(lambda n: b"\x00" * n)
    assert wrapped.generate(3) == b"\x00\x00\x00"
    with pytest.raises(TypeError):
        as_random_source(42)


def test_get_random_source():
    assert isinstance(get_random_source("Secure"), SecureRandomSource)
    assert isinstance(get_random_source("os"), SecureRandomSource)
    with pytest.raises(ConfigurationError):
        get_random_source("mersenne")
