# MIT License © 2025 Motohiro Suzuki
import base64

import yaml

from signedkeys.tools.keygen import main

SECRET_B64 = base64.b64encode(b"test_signing_key").decode("ascii")


def _hmac_config(tmp_path, encoding="hex"):
    p = tmp_path / "keys.yml"
    p.write_text(
        f"encoding: {encoding}\n"
        "signature:\n"
        "  alg: hmac\n"
        "  hash: sha256\n"
        f"  secret_b64: {SECRET_B64}\n"
    )
    return str(p)


def test_generate_and_verify(tmp_path, capsys):
    cfg = _hmac_config(tmp_path)
    assert main(["generate", "--config", cfg, "-n", "3"]) == 0
    keys = capsys.readouterr().out.split()
    assert len(keys) == 3
    assert len(set(keys)) == 3
    for key in keys:
        assert len(key) == (16 + 32) * 2
        assert main(["verify", "--config", cfg, key]) == 0
        assert capsys.readouterr().out.strip() == "valid"


def test_verify_rejects_tampered_key(tmp_path, capsys):
    cfg = _hmac_config(tmp_path)
    main(["generate", "--config", cfg])
    key = capsys.readouterr().out.strip()
    tampered = ("0" if key[0] != "0" else "1") + key[1:]
    assert main(["verify", "--config", cfg, tampered]) == 1
    assert capsys.readouterr().out.strip() == "invalid: ERR_BAD_SIGNATURE"


def test_encoding_override(tmp_path, capsys):
    cfg = _hmac_config(tmp_path)
    assert main(["generate", "--config", cfg, "--encoding", "base64"]) == 0
    key = capsys.readouterr().out.strip()
    assert len(base64.b64decode(key, validate=True)) == 48
    assert main(["verify", "--config", cfg, "--encoding", "base64", key]) == 0


def test_generate_from_environment(monkeypatch, capsys):
    monkeypatch.setenv("SIGNEDKEYS_ENCODING", "hex")
    monkeypatch.setenv("SIGNEDKEYS_KEY_LENGTH", "8")
    assert main(["generate"]) == 0
    assert len(capsys.readouterr().out.strip()) == 16


def test_identity_encoding_refused(capsys):
    assert main(["generate"]) == 2
    assert "[FAIL]" in capsys.readouterr().err


def test_bad_config_exit_code(tmp_path, capsys):
    p = tmp_path / "bad.yml"
    p.write_text("key_length: 0\nencoding: hex\n")
    assert main(["generate", "--config", str(p)]) == 2
    assert "key length" in capsys.readouterr().err


def test_bad_count(tmp_path, capsys):
    assert main(["generate", "--config", _hmac_config(tmp_path), "-n", "0"]) == 2


def test_keypair_snippet_is_loadable(tmp_path, capsys):
    assert main(["keypair"]) == 0
    doc = yaml.safe_load(capsys.readouterr().out)
    sig = doc["signature"]
    assert sig["alg"] == "ed25519"
    assert len(base64.b64decode(sig["private_key_b64"])) == 32
    assert len(base64.b64decode(sig["public_key_b64"])) == 32

    doc["encoding"] = "base64"
    p = tmp_path / "ed.yml"
    p.write_text(yaml.safe_dump(doc))
    main(["generate", "--config", str(p)])
    key = capsys.readouterr().out.strip()
    assert main(["verify", "--config", str(p), key]) == 0


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "signedkeys" in capsys.readouterr().out


def test_unreadable_config_exit_code(tmp_path, capsys):
    p = tmp_path / "binary.yml"
    p.write_bytes(b"\xff\xfe")
    assert main(["generate", "--config", str(p)]) == 2
    assert "[FAIL]" in capsys.readouterr().err

    assert main(["generate", "--config", str(tmp_path)]) == 2
    assert "[FAIL]" in capsys.readouterr().err
