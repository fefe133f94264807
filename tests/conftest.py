# MIT License © 2025 Motohiro Suzuki
import os

import pytest


@pytest.fixture(autouse=True)
def _clean_signedkeys_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("SIGNEDKEYS_"):
            monkeypatch.delenv(name, raising=False)
